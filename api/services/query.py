"""
Query engine: filter, sort and paginate table snapshots.

Operates on plain lists handed over by the entity store, so it is pure and
synchronous.
"""

from typing import Sequence, TypeVar

from api.schemas.candidates import Candidate, CandidateQuery
from api.schemas.common import Page, Pagination
from api.schemas.jobs import Job, JobQuery
from database.models.candidates import stage_rank

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Slice ``items`` to one 1-based page.

    ``total`` is the size of ``items`` before slicing. A page past the end
    yields empty data, never an error.
    """
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be at least 1")
    start = (page - 1) * page_size
    return Page(
        data=list(items[start:start + page_size]),
        pagination=Pagination(page=page, page_size=page_size, total=len(items)),
    )


def _job_matches(job: Job, query: JobQuery) -> bool:
    if query.search:
        needle = query.search.lower()
        if needle not in job.title.lower() and needle not in job.slug.lower():
            return False
    if query.status and job.status != query.status:
        return False
    # AND semantics: every requested tag must be on the job.
    if query.tags and not set(query.tags).issubset(job.tags):
        return False
    return True


def filter_jobs(jobs: Sequence[Job], query: JobQuery) -> list[Job]:
    """Apply search / status / tags filters and the requested sort."""
    filtered = [job for job in jobs if _job_matches(job, query)]
    if query.sort == "createdAt":
        return sorted(filtered, key=lambda job: job.created_at, reverse=True)
    return sorted(filtered, key=lambda job: job.order)


def query_jobs(jobs: Sequence[Job], query: JobQuery) -> Page[Job]:
    """Filter, sort and paginate a snapshot of the jobs table."""
    return paginate(filter_jobs(jobs, query), query.page, query.page_size)


def _candidate_matches(candidate: Candidate, query: CandidateQuery) -> bool:
    if query.search:
        needle = query.search.lower()
        if needle not in candidate.name.lower() and needle not in candidate.email.lower():
            return False
    if query.stage and candidate.stage != query.stage:
        return False
    if query.job_id and candidate.job_id != query.job_id:
        return False
    return True


def filter_candidates(candidates: Sequence[Candidate], query: CandidateQuery) -> list[Candidate]:
    """Apply filters, then sort by stage rank and most recent application first."""
    filtered = [c for c in candidates if _candidate_matches(c, query)]
    # Two stable passes: newest first, then by stage.
    filtered.sort(key=lambda c: c.applied_at, reverse=True)
    filtered.sort(key=lambda c: stage_rank(c.stage))
    return filtered


def query_candidates(candidates: Sequence[Candidate], query: CandidateQuery) -> Page[Candidate]:
    """Filter, sort and paginate a snapshot of the candidates table."""
    return paginate(filter_candidates(candidates, query), query.page, query.page_size)
