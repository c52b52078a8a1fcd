"""Candidate service functions."""

import logging

from api.schemas.candidates import (
    Candidate,
    CandidateCreate,
    CandidateQuery,
    CandidateUpdate,
    Note,
    NoteCreate,
    TimelineEvent,
)
from api.schemas.common import Page
from api.services.query import query_candidates
from core.exceptions import NotFoundError, ValidationFailedError
from core.utils.validators import is_blank, validate_email
from database.models.candidates import CandidateStage
from database.store import EntityStore, StoreTransaction, Table

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_COLOR = "#8884d8"


def _normalized_email(email: str) -> str:
    valid, result = validate_email(email)
    if not valid:
        raise ValidationFailedError("Invalid email address", errors={"email": result})
    return result


async def _require_job(tx: StoreTransaction, job_id: str) -> None:
    if await tx.get(Table.JOBS, job_id) is None:
        raise ValidationFailedError(
            f"Job {job_id} does not exist", errors={"jobId": "Unknown job"}
        )


async def _require_candidate(store: EntityStore, candidate_id: str) -> None:
    if await store.get(Table.CANDIDATES, candidate_id) is None:
        raise NotFoundError("Candidate not found")


async def list_candidates(store: EntityStore, query: CandidateQuery) -> Page[Candidate]:
    """Filtered, stage-sorted, paginated candidates."""
    candidates = await store.query(Table.CANDIDATES)
    return query_candidates(candidates, query)


async def get_candidate(store: EntityStore, candidate_id: str) -> Candidate:
    """Get candidate details."""
    candidate = await store.get(Table.CANDIDATES, candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate not found")
    return candidate


async def create_candidate(store: EntityStore, payload: CandidateCreate) -> Candidate:
    """
    Create a candidate and its first timeline event in one transaction.

    Raises:
        ValidationFailedError: missing name/email/jobId, bad email, unknown job
    """
    if is_blank(payload.name) or is_blank(payload.email) or is_blank(payload.job_id):
        raise ValidationFailedError("Missing required fields")
    email = _normalized_email(payload.email)
    stage = payload.stage or CandidateStage.APPLIED

    async with store.transaction(Table.JOBS, Table.CANDIDATES, Table.TIMELINES) as tx:
        await _require_job(tx, payload.job_id)
        applied_at = store.clock()
        candidate = Candidate(
            id=store.ids.next("cand"),
            job_id=payload.job_id,
            name=payload.name.strip(),
            email=email,
            stage=stage,
            applied_at=applied_at,
            avatar_color=payload.avatar_color or DEFAULT_AVATAR_COLOR,
            phone=payload.phone or "",
        )
        await tx.put(Table.CANDIDATES, candidate)
        await tx.put(
            Table.TIMELINES,
            TimelineEvent(
                id=store.ids.next("tl"),
                candidate_id=candidate.id,
                stage=stage,
                changed_at=applied_at,
                note="Application submitted",
            ),
        )

    logger.info(f"Created candidate {candidate.id} for job {candidate.job_id}")
    return candidate


async def update_candidate(
    store: EntityStore, candidate_id: str, payload: CandidateUpdate
) -> Candidate:
    """
    Patch a candidate.

    A stage change appends exactly one timeline event in the same
    transaction; setting the current stage again appends nothing.
    """
    updates = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if "name" in updates:
        if is_blank(updates["name"]):
            raise ValidationFailedError("Name cannot be empty", errors={"name": "This field is required"})
        updates["name"] = updates["name"].strip()
    if "email" in updates:
        updates["email"] = _normalized_email(updates["email"])

    async with store.transaction(Table.JOBS, Table.CANDIDATES, Table.TIMELINES) as tx:
        existing = await tx.get(Table.CANDIDATES, candidate_id)
        if existing is None:
            raise NotFoundError("Candidate not found")
        if "job_id" in updates and updates["job_id"] != existing.job_id:
            await _require_job(tx, updates["job_id"])

        updated = existing.model_copy(update=updates)
        await tx.put(Table.CANDIDATES, updated)

        if updated.stage != existing.stage:
            await tx.put(
                Table.TIMELINES,
                TimelineEvent(
                    id=store.ids.next("tl"),
                    candidate_id=candidate_id,
                    stage=updated.stage,
                    changed_at=store.clock(),
                    note=f"Stage moved to {updated.stage.value}",
                ),
            )
            logger.info(
                f"Candidate {candidate_id} moved {existing.stage.value} -> {updated.stage.value}"
            )

    return updated


async def get_timeline(store: EntityStore, candidate_id: str) -> list[TimelineEvent]:
    """Stage history, newest first."""
    await _require_candidate(store, candidate_id)
    events = await store.query(Table.TIMELINES, lambda event: event.candidate_id == candidate_id)
    return sorted(events, key=lambda event: event.changed_at, reverse=True)


async def list_notes(store: EntityStore, candidate_id: str) -> list[Note]:
    """Recruiter notes, newest first."""
    await _require_candidate(store, candidate_id)
    notes = await store.query(Table.NOTES, lambda note: note.candidate_id == candidate_id)
    return sorted(notes, key=lambda note: note.created_at, reverse=True)


async def add_note(store: EntityStore, candidate_id: str, payload: NoteCreate) -> Note:
    """Attach a note to a candidate."""
    if is_blank(payload.author) or is_blank(payload.content):
        raise ValidationFailedError("Author and content are required")

    async with store.transaction(Table.CANDIDATES, Table.NOTES) as tx:
        if await tx.get(Table.CANDIDATES, candidate_id) is None:
            raise NotFoundError("Candidate not found")
        note = Note(
            id=store.ids.next("note"),
            candidate_id=candidate_id,
            author=payload.author.strip(),
            content=payload.content.strip(),
            created_at=store.clock(),
        )
        await tx.put(Table.NOTES, note)

    return note
