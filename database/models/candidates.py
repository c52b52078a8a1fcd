"""
Candidates Module

Candidates, their append-only stage timeline and recruiter notes.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Enum as SQLEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from database.engine import Base, UTCDateTime


# ==================== Candidate Enums ===================== #
class CandidateStage(str, PyEnum):
    """Pipeline stage. Declaration order is the pipeline order."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


STAGE_ORDER: list[CandidateStage] = list(CandidateStage)


def stage_rank(stage: CandidateStage | str) -> int:
    """Position of a stage in the pipeline (applied == 0)."""
    return STAGE_ORDER.index(CandidateStage(stage))


def _stage_column(**kwargs):
    return mapped_column(
        SQLEnum(CandidateStage, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        **kwargs,
    )


# ==================== Candidate ===================== #
class CandidateRow(Base):
    """A candidate applying to exactly one job."""

    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Not a ForeignKey: services check that the job resolves before writing.
    job_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    stage: Mapped[CandidateStage] = _stage_column(index=True)
    applied_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    avatar_color: Mapped[str] = mapped_column(String(64), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), default="", nullable=False)


# ==================== Timeline ===================== #
class TimelineEventRow(Base):
    """One stage transition. Never updated or deleted."""

    __tablename__ = "candidate_timelines"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    stage: Mapped[CandidateStage] = _stage_column()
    changed_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)


# ==================== Notes ===================== #
class NoteRow(Base):
    """Recruiter note on a candidate. Append-only."""

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
