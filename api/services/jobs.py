"""Job service functions."""

from typing import Optional
import logging

from api.schemas.common import Page
from api.schemas.jobs import Job, JobCreate, JobQuery, JobUpdate
from api.services.query import query_jobs
from core.exceptions import NotFoundError, ValidationFailedError
from core.utils.slug import slugify
from database.models.jobs import JobStatus
from database.store import EntityStore, StoreTransaction, Table

logger = logging.getLogger(__name__)


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationFailedError("Title is required")
    return title


def _slug_for(title: str) -> str:
    slug = slugify(title)
    if not slug:
        raise ValidationFailedError("Title must contain letters or digits")
    return slug


async def _ensure_slug_free(tx: StoreTransaction, slug: str, exclude_id: Optional[str] = None) -> None:
    conflicts = await tx.query(
        Table.JOBS, lambda job: job.slug == slug and job.id != exclude_id
    )
    if conflicts:
        raise ValidationFailedError("Slug already exists", errors={"title": "Slug already exists"})


async def list_jobs(store: EntityStore, query: JobQuery) -> Page[Job]:
    """Filtered, sorted, paginated jobs."""
    jobs = await store.query(Table.JOBS)
    return query_jobs(jobs, query)


async def get_job(store: EntityStore, job_id: str) -> Job:
    """Get job details."""
    job = await store.get(Table.JOBS, job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return job


async def create_job(store: EntityStore, payload: JobCreate) -> Job:
    """
    Create a job at the end of the manual order.

    Args:
        store: Entity store
        payload: Title, description, tags, openings

    Returns:
        The created job

    Raises:
        ValidationFailedError: empty title or slug collision
    """
    title = _clean_title(payload.title)
    slug = _slug_for(title)

    async with store.transaction(Table.JOBS) as tx:
        await _ensure_slug_free(tx, slug)
        timestamp = store.clock()
        job = Job(
            id=store.ids.next("job"),
            title=title,
            slug=slug,
            status=JobStatus.ACTIVE,
            tags=payload.tags,
            order=await tx.count(Table.JOBS),
            description=payload.description,
            openings=payload.openings,
            created_at=timestamp,
            updated_at=timestamp,
        )
        await tx.put(Table.JOBS, job)

    logger.info(f"Created job {job.id} ({job.slug}) at order {job.order}")
    return job


async def update_job(store: EntityStore, job_id: str, payload: JobUpdate) -> Job:
    """
    Patch a job. A changed title re-derives the slug.

    Raises:
        NotFoundError: unknown job
        ValidationFailedError: empty title or slug collision
    """
    updates = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if "title" in updates:
        updates["title"] = _clean_title(updates["title"])

    async with store.transaction(Table.JOBS) as tx:
        existing = await tx.get(Table.JOBS, job_id)
        if existing is None:
            raise NotFoundError("Job not found")

        if "title" in updates and updates["title"] != existing.title:
            slug = _slug_for(updates["title"])
            await _ensure_slug_free(tx, slug, exclude_id=job_id)
            updates["slug"] = slug

        updated = existing.model_copy(update={**updates, "updated_at": store.clock()})
        await tx.put(Table.JOBS, updated)

    return updated


async def toggle_archive(store: EntityStore, job_id: str) -> Job:
    """Flip a job between active and archived."""
    async with store.transaction(Table.JOBS) as tx:
        job = await tx.get(Table.JOBS, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        status = JobStatus.ACTIVE if job.status == JobStatus.ARCHIVED else JobStatus.ARCHIVED
        updated = job.model_copy(update={"status": status, "updated_at": store.clock()})
        await tx.put(Table.JOBS, updated)

    logger.info(f"Job {job_id} is now {status.value}")
    return updated
