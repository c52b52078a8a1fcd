"""
HTTP client for the simulated backend.

Talks to the FastAPI app through ``httpx``. ``ApiClient.in_process(app)``
mounts the app with ``httpx.ASGITransport`` so no socket is ever opened.
Error envelopes come back as the matching ``TalentflowError`` subclass.
"""

import logging
from enum import Enum
from typing import Any, Iterable, Optional

import httpx

from api.schemas.assessments import (
    Assessment,
    AssessmentResponse,
    AnswerValue,
    Section,
)
from api.schemas.candidates import (
    Candidate,
    CandidateCreate,
    CandidateUpdate,
    Note,
    TimelineEvent,
)
from api.schemas.common import CamelModel, Page
from api.schemas.jobs import Job, JobCreate, JobUpdate
from core.exceptions import TransientWriteFailure, error_for_status

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://talentflow.local"


def _clean_params(params: dict[str, Any]) -> dict[str, Any]:
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (list, tuple)):
            value = ",".join(str(item) for item in value)
        cleaned[key] = value
    return cleaned


def _body(payload: CamelModel) -> dict:
    return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ApiClient:
    """Typed wrapper around every backend endpoint."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def in_process(cls, app, base_url: str = DEFAULT_BASE_URL) -> "ApiClient":
        """Client bound to an ASGI app running in this process."""
        transport = httpx.ASGITransport(app=app)
        return cls(httpx.AsyncClient(transport=transport, base_url=base_url))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Raises:
            NotFoundError: 404 envelope
            ValidationFailedError: 400/422 envelope
            TransientWriteFailure: 5xx envelope or a transport error
        """
        try:
            response = await self._http.request(
                method, path, params=_clean_params(params or {}), json=json
            )
        except httpx.TransportError as e:
            logger.warning(f"Transport error on {method} {path}: {e}")
            raise TransientWriteFailure(f"Transport error: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise error_for_status(response.status_code, body.get("message"), body.get("errors"))

        return response.json()

    # ==================== Jobs ===================== #
    async def list_jobs(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        sort: str = "order",
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page[Job]:
        data = await self._request(
            "GET",
            "/jobs",
            params={
                "search": search,
                "status": status,
                "tags": list(tags or []),
                "sort": sort,
                "page": page,
                "pageSize": page_size,
            },
        )
        return Page[Job].model_validate(data)

    async def get_job(self, job_id: str) -> Job:
        return Job.model_validate(await self._request("GET", f"/jobs/{job_id}"))

    async def create_job(self, payload: JobCreate) -> Job:
        return Job.model_validate(await self._request("POST", "/jobs", json=_body(payload)))

    async def update_job(self, job_id: str, payload: JobUpdate) -> Job:
        return Job.model_validate(
            await self._request("PATCH", f"/jobs/{job_id}", json=_body(payload))
        )

    async def toggle_archive(self, job_id: str) -> Job:
        return Job.model_validate(await self._request("POST", f"/jobs/{job_id}/archive"))

    async def reorder_job(self, job_id: str, from_order: int, to_order: int) -> bool:
        data = await self._request(
            "PATCH",
            f"/jobs/{job_id}/reorder",
            json={"fromOrder": from_order, "toOrder": to_order},
        )
        return bool(data.get("success"))

    # ==================== Candidates ===================== #
    async def list_candidates(
        self,
        search: Optional[str] = None,
        stage: Optional[str] = None,
        job_id: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page[Candidate]:
        data = await self._request(
            "GET",
            "/candidates",
            params={
                "search": search,
                "stage": stage,
                "jobId": job_id,
                "page": page,
                "pageSize": page_size,
            },
        )
        return Page[Candidate].model_validate(data)

    async def get_candidate(self, candidate_id: str) -> Candidate:
        return Candidate.model_validate(await self._request("GET", f"/candidates/{candidate_id}"))

    async def create_candidate(self, payload: CandidateCreate) -> Candidate:
        return Candidate.model_validate(
            await self._request("POST", "/candidates", json=_body(payload))
        )

    async def update_candidate(self, candidate_id: str, payload: CandidateUpdate) -> Candidate:
        return Candidate.model_validate(
            await self._request("PATCH", f"/candidates/{candidate_id}", json=_body(payload))
        )

    async def get_timeline(self, candidate_id: str) -> list[TimelineEvent]:
        data = await self._request("GET", f"/candidates/{candidate_id}/timeline")
        return [TimelineEvent.model_validate(item) for item in data]

    async def list_notes(self, candidate_id: str) -> list[Note]:
        data = await self._request("GET", f"/candidates/{candidate_id}/notes")
        return [Note.model_validate(item) for item in data]

    async def add_note(self, candidate_id: str, author: str, content: str) -> Note:
        data = await self._request(
            "POST",
            f"/candidates/{candidate_id}/notes",
            json={"author": author, "content": content},
        )
        return Note.model_validate(data)

    # ==================== Assessments ===================== #
    async def get_assessment(self, job_id: str) -> Assessment:
        return Assessment.model_validate(await self._request("GET", f"/assessments/{job_id}"))

    async def save_assessment(self, job_id: str, sections: list[Section]) -> Assessment:
        data = await self._request(
            "PUT",
            f"/assessments/{job_id}",
            json={"sections": [section.to_wire() for section in sections]},
        )
        return Assessment.model_validate(data)

    async def submit_assessment(
        self, job_id: str, candidate_id: str, answers: dict[str, AnswerValue]
    ) -> AssessmentResponse:
        data = await self._request(
            "POST",
            f"/assessments/{job_id}/submit",
            json={"candidateId": candidate_id, "answers": answers},
        )
        return AssessmentResponse.model_validate(data)

    async def list_responses(
        self, job_id: str, candidate_id: Optional[str] = None
    ) -> list[AssessmentResponse]:
        data = await self._request(
            "GET",
            f"/assessments/{job_id}/responses",
            params={"candidateId": candidate_id},
        )
        return [AssessmentResponse.model_validate(item) for item in data]
