"""Tests for the reorder transaction."""

import pytest

from api.services.reorder import reorder_job
from core.exceptions import NotFoundError
from core.utils.ordering import is_dense
from database.store import Table
from tests.factories import make_jobs


async def _ids_by_order(store) -> list[str]:
    jobs = await store.query(Table.JOBS)
    return [job.id for job in sorted(jobs, key=lambda job: job.order)]


class TestReorderJob:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("i,j", [(0, 4), (4, 0), (2, 2), (1, 3), (3, 1)])
    async def test_matches_remove_and_insert(self, store, i, j):
        await make_jobs(store, 5)
        before = await _ids_by_order(store)

        await reorder_job(store, before[i], i, j)

        expected = before[:i] + before[i + 1:]
        expected.insert(j, before[i])
        assert await _ids_by_order(store) == expected
        assert is_dense(job.order for job in await store.query(Table.JOBS))

    @pytest.mark.asyncio
    async def test_destination_clamped(self, store):
        await make_jobs(store, 3)
        before = await _ids_by_order(store)
        await reorder_job(store, before[0], 0, 99)
        assert await _ids_by_order(store) == [before[1], before[2], before[0]]

    @pytest.mark.asyncio
    async def test_authoritative_position_wins_over_from_order(self, store):
        await make_jobs(store, 3)
        before = await _ids_by_order(store)
        await reorder_job(store, before[2], 0, 0)
        assert await _ids_by_order(store) == [before[2], before[0], before[1]]

    @pytest.mark.asyncio
    async def test_unknown_job_is_a_no_op(self, store):
        await make_jobs(store, 3)
        snapshot = await store.query(Table.JOBS)

        with pytest.raises(NotFoundError):
            await reorder_job(store, "job_missing", 0, 1)

        assert await store.query(Table.JOBS) == snapshot

    @pytest.mark.asyncio
    async def test_updated_at_stamped(self, store):
        jobs = await make_jobs(store, 2)
        reordered = await reorder_job(store, jobs[0].id, 0, 1)
        assert all(job.updated_at > jobs[1].updated_at for job in reordered)
