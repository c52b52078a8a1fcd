"""Tests for the embedded entity store."""

import asyncio

import pytest

from api.schemas.jobs import Job
from database.store import Table
from tests.factories import make_jobs


class TestEntityStore:
    @pytest.mark.asyncio
    async def test_put_get_round_trip_keeps_timezone(self, store):
        job = (await make_jobs(store, 1))[0]
        fetched = await store.get(Table.JOBS, job.id)
        assert fetched == job
        assert fetched.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_unknown(self, store):
        assert await store.get(Table.JOBS, "job_missing") is None

    @pytest.mark.asyncio
    async def test_put_is_upsert(self, store):
        job = (await make_jobs(store, 1))[0]
        await store.put(Table.JOBS, job.model_copy(update={"title": "Renamed"}))
        assert (await store.get(Table.JOBS, job.id)).title == "Renamed"
        assert await store.count(Table.JOBS) == 1

    @pytest.mark.asyncio
    async def test_query_with_predicate(self, store):
        await make_jobs(store, 3)
        result = await store.query(Table.JOBS, lambda job: job.order > 0)
        assert sorted(job.order for job in result) == [1, 2]

    @pytest.mark.asyncio
    async def test_wrong_record_type(self, store):
        with pytest.raises(TypeError):
            await store.put(Table.CANDIDATES, (await make_jobs(store, 1))[0])


class TestTransactions:
    @pytest.mark.asyncio
    async def test_failed_transaction_writes_nothing(self, store):
        jobs = await make_jobs(store, 2)

        with pytest.raises(RuntimeError):
            async with store.transaction(Table.JOBS) as tx:
                await tx.put(Table.JOBS, jobs[0].model_copy(update={"order": 5}))
                raise RuntimeError("abort")

        assert (await store.get(Table.JOBS, jobs[0].id)).order == 0

    @pytest.mark.asyncio
    async def test_writes_visible_inside_transaction(self, store):
        job = (await make_jobs(store, 1))[0]
        async with store.transaction(Table.JOBS) as tx:
            await tx.put(Table.JOBS, job.model_copy(update={"order": 3}))
            assert (await tx.get(Table.JOBS, job.id)).order == 3

    @pytest.mark.asyncio
    async def test_undeclared_table(self, store):
        with pytest.raises(ValueError):
            async with store.transaction(Table.JOBS) as tx:
                await tx.count(Table.CANDIDATES)

    @pytest.mark.asyncio
    async def test_transaction_needs_tables(self, store):
        with pytest.raises(ValueError):
            async with store.transaction():
                pass

    @pytest.mark.asyncio
    async def test_reentry_rejected(self, store):
        with pytest.raises(RuntimeError):
            async with store.transaction(Table.JOBS):
                await store.count(Table.JOBS)

    @pytest.mark.asyncio
    async def test_readers_never_see_half_a_transaction(self, store):
        jobs = await make_jobs(store, 2)
        started = asyncio.Event()

        async def writer():
            async with store.transaction(Table.JOBS) as tx:
                await tx.put(Table.JOBS, jobs[0].model_copy(update={"order": 1}))
                started.set()
                await asyncio.sleep(0.01)
                await tx.put(Table.JOBS, jobs[1].model_copy(update={"order": 0}))

        async def reader():
            await started.wait()
            return sorted(job.order for job in await store.query(Table.JOBS))

        _, orders = await asyncio.gather(writer(), reader())
        assert orders == [0, 1]
        swapped = {job.id: job.order for job in await store.query(Table.JOBS)}
        assert swapped == {jobs[0].id: 1, jobs[1].id: 0}

    @pytest.mark.asyncio
    async def test_insert_many(self, store):
        jobs = await make_jobs(store, 1)
        extra = Job(**{**jobs[0].model_dump(), "id": "job_extra", "slug": "extra", "order": 1})
        async with store.transaction(Table.JOBS) as tx:
            assert await tx.insert_many(Table.JOBS, [extra]) == 1
        assert await store.count(Table.JOBS) == 2
