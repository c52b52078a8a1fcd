"""Job-related Pydantic schemas."""

from datetime import datetime
from typing import Annotated, Literal, Optional
from pydantic import AfterValidator, Field

from api.schemas.common import CamelModel, PaginationParams
from database.models.jobs import JobStatus


def _unique_tags(tags: list[str]) -> list[str]:
    cleaned = [tag.strip() for tag in tags if tag and tag.strip()]
    return list(dict.fromkeys(cleaned))


Tags = Annotated[list[str], AfterValidator(_unique_tags)]


class Job(CamelModel):
    """A job posting as stored and returned."""

    id: str
    title: str
    slug: str
    status: JobStatus = JobStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    order: int = Field(ge=0)
    description: str = ""
    openings: int = Field(default=1, ge=1)
    created_at: datetime
    updated_at: datetime


class JobCreate(CamelModel):
    """Schema for creating a job. Title emptiness is checked by the service."""

    title: Optional[str] = None
    description: str = ""
    tags: Tags = Field(default_factory=list)
    openings: int = Field(default=1, ge=1)


class JobUpdate(CamelModel):
    """Schema for patching a job. Order, slug and id are not client-writable."""

    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[Tags] = None
    openings: Optional[int] = Field(default=None, ge=1)
    status: Optional[JobStatus] = None


class JobReorder(CamelModel):
    """Body of ``PATCH jobs/{id}/reorder``."""

    from_order: int = Field(ge=0)
    to_order: int = Field(ge=0)


class JobQuery(PaginationParams):
    """Filter, sort and page parameters for the jobs list."""

    search: Optional[str] = None
    status: Optional[JobStatus] = None
    tags: list[str] = Field(default_factory=list)
    sort: Literal["order", "createdAt"] = "order"
