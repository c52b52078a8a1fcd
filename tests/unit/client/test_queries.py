"""Tests for the stale-response guard."""

import asyncio

import pytest

from client.queries import QueryTracker
from core.exceptions import StaleResponseError


class TestQueryTracker:
    def test_generations(self):
        tracker = QueryTracker()
        first = tracker.begin("jobs")
        second = tracker.begin("jobs")
        assert not tracker.is_current("jobs", first)
        assert tracker.is_current("jobs", second)
        with pytest.raises(StaleResponseError):
            tracker.check("jobs", first)

    def test_keys_are_independent(self):
        tracker = QueryTracker()
        jobs = tracker.begin("jobs")
        tracker.begin("candidates")
        assert tracker.is_current("jobs", jobs)

    @pytest.mark.asyncio
    async def test_superseded_fetch_is_dropped(self):
        tracker = QueryTracker()
        slow_started = asyncio.Event()
        release = asyncio.Event()

        async def slow():
            slow_started.set()
            await release.wait()
            return "old"

        async def fast():
            return "new"

        slow_task = asyncio.create_task(tracker.fetch("jobs", slow))
        await slow_started.wait()
        assert await tracker.fetch("jobs", fast) == "new"

        release.set()
        with pytest.raises(StaleResponseError):
            await slow_task

    @pytest.mark.asyncio
    async def test_invalidate(self):
        tracker = QueryTracker()
        generation = tracker.begin("jobs")
        tracker.invalidate("jobs")
        assert not tracker.is_current("jobs", generation)
