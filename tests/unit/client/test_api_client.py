"""Tests for the typed API client."""

import httpx
import pytest

from api.schemas.candidates import CandidateCreate
from api.schemas.jobs import JobCreate, JobUpdate
from client.api import ApiClient
from core.exceptions import NotFoundError, TransientWriteFailure, ValidationFailedError
from database.models.candidates import CandidateStage
from database.models.jobs import JobStatus
from tests.factories import make_sections


class TestApiClient:
    @pytest.mark.asyncio
    async def test_job_lifecycle(self, api):
        job = await api.create_job(JobCreate(title="Data Scientist", tags=["Remote"]))
        job = await api.update_job(job.id, JobUpdate(openings=2))
        assert job.openings == 2
        assert (await api.toggle_archive(job.id)).status == JobStatus.ARCHIVED

        page = await api.list_jobs(status=JobStatus.ARCHIVED, tags=["Remote"])
        assert [j.id for j in page.data] == [job.id]
        assert await api.list_jobs(status=JobStatus.ACTIVE) is not None

    @pytest.mark.asyncio
    async def test_errors_map_to_exceptions(self, api):
        with pytest.raises(NotFoundError):
            await api.get_job("job_missing")
        with pytest.raises(ValidationFailedError) as exc_info:
            await api.create_job(JobCreate(title=" "))
        assert exc_info.value.message == "Title is required"

    @pytest.mark.asyncio
    async def test_injected_failure(self, api, policy):
        policy.failure_rate = 1.0
        with pytest.raises(TransientWriteFailure) as exc_info:
            await api.create_job(JobCreate(title="Never"))
        assert exc_info.value.message == "Temporary failure"
        policy.failure_rate = 0.0
        assert (await api.list_jobs()).pagination.total == 0

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        client = ApiClient(httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://x"))
        with pytest.raises(TransientWriteFailure):
            await client.list_jobs()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_candidate_and_assessment_flow(self, api):
        job = await api.create_job(JobCreate(title="Data Scientist"))
        candidate = await api.create_candidate(
            CandidateCreate(name="Ava Nguyen", email="ava@example.com", job_id=job.id)
        )
        assert (await api.list_candidates(stage=CandidateStage.APPLIED, job_id=job.id)).pagination.total == 1
        assert (await api.get_candidate(candidate.id)).email == "ava@example.com"
        assert len(await api.get_timeline(candidate.id)) == 1

        note = await api.add_note(candidate.id, "Priya", "Strong portfolio")
        assert [n.id for n in await api.list_notes(candidate.id)] == [note.id]

        assert (await api.get_assessment(job.id)).sections == []
        sections = make_sections({"id": "q1", "type": "numeric", "required": True, "max": 5})
        saved = await api.save_assessment(job.id, sections)
        assert saved.sections == sections

        with pytest.raises(ValidationFailedError) as exc_info:
            await api.submit_assessment(job.id, candidate.id, {"q1": 9})
        assert exc_info.value.errors == {"q1": "Maximum 5"}

        response = await api.submit_assessment(job.id, candidate.id, {"q1": 3})
        assert [r.id for r in await api.list_responses(job.id, candidate.id)] == [response.id]
