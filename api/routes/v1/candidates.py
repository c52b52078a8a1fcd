"""
Candidate endpoints.

Listing, profile, patch (stage changes append to the timeline), timeline
and recruiter notes.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from api.dependencies import get_store
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
from api.services import candidates as candidate_service
from core.config import settings
from database.models.candidates import CandidateStage
from database.store import EntityStore

router = APIRouter()


@router.get(
    "",
    response_model=Page[Candidate],
    summary="List Candidates",
    description="Filter by name/email, stage and job; sorted by pipeline stage.",
)
async def list_candidates(
    search: Optional[str] = Query(None, description="Substring of name or email"),
    stage: Optional[CandidateStage] = Query(None, description="Pipeline stage"),
    job_id: Optional[str] = Query(None, alias="jobId", description="Job ID"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_candidates_page_size, ge=1, alias="pageSize"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve one page of candidates."""
    query = CandidateQuery(
        search=search,
        stage=stage,
        job_id=job_id,
        page=page,
        page_size=page_size,
    )
    return await candidate_service.list_candidates(store, query)


@router.get("/{candidate_id}", response_model=Candidate, summary="Get Candidate")
async def get_candidate(
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve one candidate."""
    return await candidate_service.get_candidate(store, candidate_id)


@router.post("", response_model=Candidate, status_code=201, summary="Create Candidate")
async def create_candidate(
    payload: CandidateCreate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Create a candidate; the timeline starts with "Application submitted"."""
    return await candidate_service.create_candidate(store, payload)


@router.patch("/{candidate_id}", response_model=Candidate, summary="Update Candidate")
async def update_candidate(
    candidate_id: str = Path(..., description="Candidate ID"),
    payload: CandidateUpdate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Patch a candidate. Changing ``stage`` records a timeline event."""
    return await candidate_service.update_candidate(store, candidate_id, payload)


@router.get(
    "/{candidate_id}/timeline",
    response_model=list[TimelineEvent],
    summary="Candidate Timeline",
)
async def get_timeline(
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    """Stage history, newest first."""
    return await candidate_service.get_timeline(store, candidate_id)


@router.get("/{candidate_id}/notes", response_model=list[Note], summary="List Notes")
async def list_notes(
    candidate_id: str = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    """Recruiter notes, newest first."""
    return await candidate_service.list_notes(store, candidate_id)


@router.post(
    "/{candidate_id}/notes",
    response_model=Note,
    status_code=201,
    summary="Add Note",
)
async def add_note(
    candidate_id: str = Path(..., description="Candidate ID"),
    payload: NoteCreate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Attach a note to a candidate."""
    return await candidate_service.add_note(store, candidate_id, payload)
