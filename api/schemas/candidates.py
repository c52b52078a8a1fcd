"""Candidate-related Pydantic schemas."""

from datetime import datetime
from typing import Optional
from pydantic import Field

from api.schemas.common import CamelModel, PaginationParams
from database.models.candidates import CandidateStage


class Candidate(CamelModel):
    """A candidate as stored and returned."""

    id: str
    job_id: str
    name: str
    email: str
    stage: CandidateStage = CandidateStage.APPLIED
    applied_at: datetime
    avatar_color: str = "#8884d8"
    phone: str = ""


class CandidateCreate(CamelModel):
    """Schema for creating a candidate. Required fields are checked by the service."""

    name: Optional[str] = None
    email: Optional[str] = None
    job_id: Optional[str] = None
    stage: Optional[CandidateStage] = None
    phone: Optional[str] = None
    avatar_color: Optional[str] = None


class CandidateUpdate(CamelModel):
    """Schema for patching a candidate."""

    name: Optional[str] = None
    email: Optional[str] = None
    job_id: Optional[str] = None
    stage: Optional[CandidateStage] = None
    phone: Optional[str] = None
    avatar_color: Optional[str] = None


class TimelineEvent(CamelModel):
    """A stage transition in a candidate's history."""

    id: str
    candidate_id: str
    stage: CandidateStage
    changed_at: datetime
    note: Optional[str] = None


class Note(CamelModel):
    """A recruiter note."""

    id: str
    candidate_id: str
    author: str
    content: str
    created_at: datetime


class NoteCreate(CamelModel):
    """Schema for adding a note."""

    author: Optional[str] = None
    content: Optional[str] = None


class CandidateQuery(PaginationParams):
    """Filter and page parameters for the candidates list."""

    page_size: int = Field(default=50, ge=1)
    search: Optional[str] = None
    stage: Optional[CandidateStage] = None
    job_id: Optional[str] = None
