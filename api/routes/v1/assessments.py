"""
Assessment endpoints.

One question tree per job, candidate submissions and their listing.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from api.dependencies import get_store
from api.schemas.assessments import (
    Assessment,
    AssessmentResponse,
    AssessmentUpdate,
    SubmissionCreate,
)
from api.services import assessments as assessment_service
from database.store import EntityStore

router = APIRouter()


@router.get("/{job_id}", response_model=Assessment, summary="Get Assessment")
async def get_assessment(
    job_id: str = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    """The job's assessment; an empty one is created on first access."""
    return await assessment_service.get_assessment(store, job_id)


@router.put("/{job_id}", response_model=Assessment, summary="Save Assessment")
async def save_assessment(
    job_id: str = Path(..., description="Job ID"),
    payload: AssessmentUpdate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Replace the question tree."""
    return await assessment_service.save_assessment(store, job_id, payload)


@router.post(
    "/{job_id}/submit",
    response_model=AssessmentResponse,
    status_code=201,
    summary="Submit Assessment",
)
async def submit_assessment(
    job_id: str = Path(..., description="Job ID"),
    payload: SubmissionCreate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Validate and record a candidate's answers."""
    return await assessment_service.submit_assessment(store, job_id, payload)


@router.get(
    "/{job_id}/responses",
    response_model=list[AssessmentResponse],
    summary="List Responses",
)
async def list_responses(
    job_id: str = Path(..., description="Job ID"),
    candidate_id: Optional[str] = Query(None, alias="candidateId", description="Only this candidate"),
    store: EntityStore = Depends(get_store),
):
    """Submitted responses, newest first."""
    return await assessment_service.list_responses(store, job_id, candidate_id)
