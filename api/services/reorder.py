"""
Reorder transaction for the jobs' manual order.

The whole collection is re-read inside the transaction immediately before it
is rewritten, and every job gets its new positional index, so on success the
``order`` values are always exactly ``0..n-1``.
"""

import logging

from api.schemas.jobs import Job
from core.exceptions import NotFoundError
from core.utils.ordering import array_move
from database.store import EntityStore, Table

logger = logging.getLogger(__name__)


async def reorder_job(store: EntityStore, job_id: str, from_order: int, to_order: int) -> list[Job]:
    """
    Move one job to ``to_order`` and re-index the collection.

    Args:
        store: Entity store
        job_id: The job being moved
        from_order: Where the caller saw the job (informational; the
            authoritative position is re-read)
        to_order: Destination index, clamped to the collection

    Returns:
        All jobs in their new order

    Raises:
        NotFoundError: unknown job; nothing is written
    """
    async with store.transaction(Table.JOBS) as tx:
        jobs = sorted(await tx.query(Table.JOBS), key=lambda job: job.order)
        index = next((i for i, job in enumerate(jobs) if job.id == job_id), None)
        if index is None:
            raise NotFoundError("Job not found")
        if index != from_order:
            logger.debug(f"Job {job_id} expected at {from_order}, found at {index}")

        timestamp = store.clock()
        reordered = [
            job.model_copy(update={"order": position, "updated_at": timestamp})
            for position, job in enumerate(array_move(jobs, index, to_order))
        ]
        for job in reordered:
            await tx.put(Table.JOBS, job)

    logger.info(f"Moved job {job_id} from {index} to {min(to_order, len(reordered) - 1)}")
    return reordered
