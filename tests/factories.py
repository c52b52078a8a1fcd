"""Builders for records used across tests."""

from api.schemas.assessments import Section
from api.schemas.candidates import CandidateCreate
from api.schemas.jobs import JobCreate
from api.services import candidates as candidate_service
from api.services import jobs as job_service


async def make_jobs(store, count: int) -> list:
    """Create ``count`` jobs titled "Job 0".."Job n-1"."""
    return [
        await job_service.create_job(store, JobCreate(title=f"Job {i}"))
        for i in range(count)
    ]


async def make_candidate(store, job_id: str, name: str = "Ava Nguyen", **fields):
    payload = CandidateCreate(
        name=name,
        email=fields.pop("email", f"{name.lower().replace(' ', '.')}@example.com"),
        job_id=job_id,
        **fields,
    )
    return await candidate_service.create_candidate(store, payload)


def make_sections(*questions: dict) -> list[Section]:
    """One section holding the given question dicts (wire field names)."""
    return [Section.model_validate({"id": "s1", "title": "Core", "questions": list(questions)})]
