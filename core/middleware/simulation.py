"""
Simulated transport.

Every request through the backend waits a random latency; write requests
additionally fail at random with a 500 envelope *before* the route runs, so
an injected failure never leaves a partial write behind. Reads only get the
latency.
"""

import asyncio
import logging
import random
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from core.config import Settings, settings
from core.exceptions import TransientWriteFailure

logger = logging.getLogger(__name__)

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

# Paths that are not part of the simulated backend.
UNSIMULATED_PATHS = ("/health", "/ready")


class SimulationPolicy:
    """
    Latency and write-failure sampling.

    ``latency_sampler`` and ``failure_sampler`` are separate methods so tests
    can patch either one, e.g. force every write to fail with
    ``patch.object(policy, "failure_sampler", return_value=0.0)``.
    """

    def __init__(
        self,
        latency_min_ms: int = 200,
        latency_max_ms: int = 1200,
        failure_rate: float = 0.08,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], object] = asyncio.sleep,
    ):
        if latency_min_ms > latency_max_ms:
            raise ValueError("latency_min_ms must not exceed latency_max_ms")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be within [0, 1]")
        self.latency_min_ms = latency_min_ms
        self.latency_max_ms = latency_max_ms
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self._sleep = sleep

    @classmethod
    def from_settings(cls, app_settings: Settings = settings) -> "SimulationPolicy":
        return cls(
            latency_min_ms=app_settings.latency_min_ms,
            latency_max_ms=app_settings.latency_max_ms,
            failure_rate=app_settings.write_failure_rate,
        )

    @classmethod
    def instant(cls, failure_rate: float = 0.0, rng: Optional[random.Random] = None) -> "SimulationPolicy":
        """No latency; failures only if ``failure_rate`` says so."""
        return cls(latency_min_ms=0, latency_max_ms=0, failure_rate=failure_rate, rng=rng)

    def latency_sampler(self) -> float:
        """Latency in seconds, uniform over [min, max)."""
        span = self.latency_max_ms - self.latency_min_ms
        return (self.latency_min_ms + self._rng.random() * span) / 1000.0

    def failure_sampler(self) -> float:
        """Uniform sample in [0, 1)."""
        return self._rng.random()

    def should_fail(self, method: str) -> bool:
        """Only writes are sampled; reads never fail here."""
        if method.upper() not in WRITE_METHODS:
            return False
        return self.failure_sampler() < self.failure_rate

    async def delay(self) -> float:
        seconds = self.latency_sampler()
        if seconds > 0:
            await self._sleep(seconds)
        return seconds


class SimulatedTransportMiddleware(BaseHTTPMiddleware):
    """Injects latency into every request and random failures into writes."""

    def __init__(self, app: ASGIApp, policy: SimulationPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path.startswith(UNSIMULATED_PATHS):
            return await call_next(request)

        await self.policy.delay()

        if self.policy.should_fail(request.method):
            logger.warning(
                f"Injected write failure: {request.method} {request.url.path}"
            )
            failure = TransientWriteFailure()
            return JSONResponse(status_code=failure.status_code, content=failure.to_envelope())

        return await call_next(request)
