"""
Assessments Module

One assessment per job (sections and questions stored as a JSON tree) and
the immutable responses candidates submit against it.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from database.engine import Base, UTCDateTime


class AssessmentRow(Base):
    """Question tree for a job, keyed by the job id."""

    __tablename__ = "assessments"

    job_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sections: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)


class AssessmentResponseRow(Base):
    """A candidate's submitted answers. Immutable once created."""

    __tablename__ = "assessment_responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    job_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    candidate_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
