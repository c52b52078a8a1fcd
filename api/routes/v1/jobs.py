"""
Job posting endpoints.

Listing with search / status / tag filters, create, patch, archive toggle
and the manual-order reorder.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from api.dependencies import get_store
from api.schemas.common import Page, SuccessResponse
from api.schemas.jobs import Job, JobCreate, JobQuery, JobReorder, JobUpdate
from api.services import jobs as job_service
from api.services.reorder import reorder_job
from core.config import settings
from database.models.jobs import JobStatus
from database.store import EntityStore

router = APIRouter()


def _split_tags(tags: Optional[str]) -> list[str]:
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


@router.get(
    "",
    response_model=Page[Job],
    summary="List Jobs",
    description="Filter, sort and paginate job postings.",
)
async def list_jobs(
    search: Optional[str] = Query(None, description="Substring of title or slug"),
    status: Optional[JobStatus] = Query(None, description="active or archived"),
    tags: Optional[str] = Query(None, description="Comma-separated; a job must carry all of them"),
    sort: Literal["order", "createdAt"] = Query("order", description="order or createdAt"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_jobs_page_size, ge=1, alias="pageSize"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve one page of jobs."""
    query = JobQuery(
        search=search,
        status=status,
        tags=_split_tags(tags),
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return await job_service.list_jobs(store, query)


@router.get("/{job_id}", response_model=Job, summary="Get Job")
async def get_job(
    job_id: str = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve one job."""
    return await job_service.get_job(store, job_id)


@router.post("", response_model=Job, status_code=201, summary="Create Job")
async def create_job(
    payload: JobCreate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Create a job at the end of the manual order."""
    return await job_service.create_job(store, payload)


@router.patch("/{job_id}", response_model=Job, summary="Update Job")
async def update_job(
    job_id: str = Path(..., description="Job ID"),
    payload: JobUpdate = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Patch title, description, tags, openings or status."""
    return await job_service.update_job(store, job_id, payload)


@router.post("/{job_id}/archive", response_model=Job, summary="Toggle Archive")
async def toggle_archive(
    job_id: str = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    """Flip active/archived."""
    return await job_service.toggle_archive(store, job_id)


@router.patch("/{job_id}/reorder", response_model=SuccessResponse, summary="Reorder Job")
async def reorder(
    job_id: str = Path(..., description="Job ID"),
    payload: JobReorder = Body(...),
    store: EntityStore = Depends(get_store),
):
    """Move a job within the manual order; every order is rewritten densely."""
    await reorder_job(store, job_id, payload.from_order, payload.to_order)
    return SuccessResponse()
