"""
Jobs Module

Job postings kept in a user-defined manual sequence (dense ``order``).
"""

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import JSON, Enum as SQLEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from database.engine import Base, UTCDateTime


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """Job posting status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


# ==================== Job ===================== #
class JobRow(Base):
    """
    A job posting.

    ``order`` is the job's slot in the manual sequence: across all jobs the
    values always form a contiguous 0-based permutation.
    """

    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=JobStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    openings: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
