"""Shared fixtures and utilities for tests."""

import itertools
import random
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from api.main import create_app
from client.api import ApiClient
from core.config import Settings
from core.middleware.simulation import SimulationPolicy
from core.utils.ids import IdGenerator
from database.store import EntityStore

BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = BASE_TIME):
        self._ticks = itertools.count()
        self._start = start

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


@pytest.fixture
def test_settings():
    """Settings with no latency, no failures and no seeding."""
    return Settings(
        latency_min_ms=0,
        latency_max_ms=0,
        write_failure_rate=0.0,
        seed_on_startup=False,
        json_logs=False,
    )


@pytest_asyncio.fixture
async def store():
    """Fresh in-memory store with deterministic ids and timestamps."""
    entity_store = EntityStore(
        "sqlite+aiosqlite://",
        id_generator=IdGenerator(rng=random.Random(42)),
        clock=FakeClock(),
    )
    await entity_store.init()
    yield entity_store
    await entity_store.close()


@pytest.fixture
def policy():
    """Simulation policy without latency or failures; patch its samplers to force failures."""
    return SimulationPolicy.instant()


@pytest.fixture
def app(store, policy, test_settings):
    return create_app(store=store, policy=policy, app_settings=test_settings)


@pytest_asyncio.fixture
async def client(app):
    """Raw HTTP client bound to the app in-process."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as http:
        yield http


@pytest_asyncio.fixture
async def api(app):
    """Typed API client bound to the app in-process."""
    async with ApiClient.in_process(app) as api_client:
        yield api_client
