"""Assessment service functions."""

from typing import Optional
import logging

from api.schemas.assessments import (
    Assessment,
    AssessmentResponse,
    AssessmentUpdate,
    SubmissionCreate,
)
from core.assessment_rules import check_assessment_tree, validate_answers
from core.exceptions import NotFoundError, ValidationFailedError
from core.utils.validators import is_blank
from database.store import EntityStore, StoreTransaction, Table

logger = logging.getLogger(__name__)


async def _require_job(tx: StoreTransaction, job_id: str) -> None:
    if await tx.get(Table.JOBS, job_id) is None:
        raise NotFoundError("Job not found")


async def get_assessment(store: EntityStore, job_id: str) -> Assessment:
    """
    Get the assessment of a job.

    A job without one gets an empty assessment created and returned, so
    this never answers 404 for an existing job.
    """
    async with store.transaction(Table.JOBS, Table.ASSESSMENTS) as tx:
        await _require_job(tx, job_id)
        assessment = await tx.get(Table.ASSESSMENTS, job_id)
        if assessment is None:
            assessment = Assessment(job_id=job_id, sections=[], updated_at=store.clock())
            await tx.put(Table.ASSESSMENTS, assessment)
            logger.info(f"Created empty assessment for job {job_id}")
    return assessment


async def save_assessment(store: EntityStore, job_id: str, payload: AssessmentUpdate) -> Assessment:
    """
    Replace the question tree of a job.

    Raises:
        NotFoundError: unknown job
        ValidationFailedError: malformed tree (duplicate ids, bad conditionals)
    """
    problems = check_assessment_tree(payload.sections)
    if problems:
        raise ValidationFailedError(
            "Invalid assessment structure",
            errors={str(index): problem for index, problem in enumerate(problems)},
        )

    async with store.transaction(Table.JOBS, Table.ASSESSMENTS) as tx:
        await _require_job(tx, job_id)
        assessment = Assessment(job_id=job_id, sections=payload.sections, updated_at=store.clock())
        await tx.put(Table.ASSESSMENTS, assessment)

    return assessment


async def submit_assessment(
    store: EntityStore, job_id: str, payload: SubmissionCreate
) -> AssessmentResponse:
    """
    Record a candidate's answers.

    Answers are validated against the questions visible for that answer
    set; any failure rejects the whole submission.
    """
    if is_blank(payload.candidate_id):
        raise ValidationFailedError(
            "Candidate is required", errors={"candidateId": "This field is required"}
        )

    async with store.transaction(
        Table.JOBS, Table.CANDIDATES, Table.ASSESSMENTS, Table.RESPONSES
    ) as tx:
        await _require_job(tx, job_id)
        if await tx.get(Table.CANDIDATES, payload.candidate_id) is None:
            raise ValidationFailedError(
                f"Candidate {payload.candidate_id} does not exist",
                errors={"candidateId": "Unknown candidate"},
            )

        assessment = await tx.get(Table.ASSESSMENTS, job_id)
        sections = assessment.sections if assessment is not None else []
        errors = validate_answers(sections, payload.answers)
        if errors:
            raise ValidationFailedError("Some answers are invalid", errors=errors)

        response = AssessmentResponse(
            id=store.ids.next("resp"),
            job_id=job_id,
            candidate_id=payload.candidate_id,
            answers=payload.answers,
            submitted_at=store.clock(),
        )
        await tx.put(Table.RESPONSES, response)

    logger.info(f"Candidate {payload.candidate_id} submitted assessment for job {job_id}")
    return response


async def list_responses(
    store: EntityStore, job_id: str, candidate_id: Optional[str] = None
) -> list[AssessmentResponse]:
    """Submitted responses for a job, newest first."""
    responses = await store.query(
        Table.RESPONSES,
        lambda response: response.job_id == job_id
        and (candidate_id is None or response.candidate_id == candidate_id),
    )
    return sorted(responses, key=lambda response: response.submitted_at, reverse=True)
