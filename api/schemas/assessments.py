"""
Assessment-related Pydantic schemas.

Questions are a tagged union on ``type``. Each variant carries exactly its
own payload and rejects fields belonging to other variants, so a text
question can never grow ``options`` and a choice question never ``min``.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import ConfigDict, Field, model_validator

from api.schemas.common import CamelModel


QuestionType = Literal["singleChoice", "multiChoice", "shortText", "longText", "numeric", "file"]

# A single answer: choice/text/file -> str, multiChoice -> list[str], numeric -> number.
AnswerValue = Union[int, float, str, list[str], None]


class QuestionConditional(CamelModel):
    """Show the owning question only when another question has a given answer."""

    source_question_id: str
    expected_value: str


class _QuestionBase(CamelModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    prompt: str = ""
    required: bool = False
    helper_text: Optional[str] = None
    conditional: Optional[QuestionConditional] = None


class SingleChoiceQuestion(_QuestionBase):
    type: Literal["singleChoice"] = "singleChoice"
    options: list[str] = Field(default_factory=list)


class MultiChoiceQuestion(_QuestionBase):
    type: Literal["multiChoice"] = "multiChoice"
    options: list[str] = Field(default_factory=list)
    max_selections: Optional[int] = Field(default=None, ge=1)


class ShortTextQuestion(_QuestionBase):
    type: Literal["shortText"] = "shortText"
    max_length: Optional[int] = Field(default=None, ge=1)


class LongTextQuestion(_QuestionBase):
    type: Literal["longText"] = "longText"
    max_length: Optional[int] = Field(default=None, ge=1)


class NumericQuestion(_QuestionBase):
    type: Literal["numeric"] = "numeric"
    min: Optional[float] = None
    max: Optional[float] = None

    @model_validator(mode="after")
    def check_bounds(self) -> "NumericQuestion":
        """Bounds must not be inverted."""
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class FileQuestion(_QuestionBase):
    type: Literal["file"] = "file"


Question = Annotated[
    Union[
        SingleChoiceQuestion,
        MultiChoiceQuestion,
        ShortTextQuestion,
        LongTextQuestion,
        NumericQuestion,
        FileQuestion,
    ],
    Field(discriminator="type"),
]

ChoiceQuestion = (SingleChoiceQuestion, MultiChoiceQuestion)
TextQuestion = (ShortTextQuestion, LongTextQuestion)


class Section(CamelModel):
    """An ordered group of questions."""

    id: str
    title: str = ""
    description: Optional[str] = None
    questions: list[Question] = Field(default_factory=list)


class Assessment(CamelModel):
    """The question tree attached to a job."""

    job_id: str
    sections: list[Section] = Field(default_factory=list)
    updated_at: datetime


class AssessmentUpdate(CamelModel):
    """Body of ``PUT assessments/{jobId}``."""

    sections: list[Section] = Field(default_factory=list)


class AssessmentResponse(CamelModel):
    """A submitted answer set. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    job_id: str
    candidate_id: str
    answers: dict[str, AnswerValue] = Field(default_factory=dict)
    submitted_at: datetime


class SubmissionCreate(CamelModel):
    """Body of ``POST assessments/{jobId}/submit``."""

    candidate_id: Optional[str] = None
    answers: dict[str, AnswerValue] = Field(default_factory=dict)
