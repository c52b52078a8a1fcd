"""
Stale-response guard.

Every read is tagged with a generation number for its query key. Only the
newest generation of a key may be applied; older results raise
``StaleResponseError`` and are dropped by the caller.
"""

from typing import Awaitable, Callable, Hashable, TypeVar

from core.exceptions import StaleResponseError

T = TypeVar("T")


class QueryTracker:
    """Generation counters per query key."""

    def __init__(self):
        self._generations: dict[Hashable, int] = {}

    def begin(self, key: Hashable) -> int:
        """Start a read for ``key``; every earlier read of it becomes stale."""
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        return generation

    def is_current(self, key: Hashable, generation: int) -> bool:
        return self._generations.get(key) == generation

    def check(self, key: Hashable, generation: int) -> None:
        if not self.is_current(key, generation):
            raise StaleResponseError(f"Result for {key!r} superseded by a newer request")

    def invalidate(self, key: Hashable) -> None:
        """Mark in-flight reads of ``key`` stale without starting a new one."""
        self._generations[key] = self._generations.get(key, 0) + 1

    async def fetch(self, key: Hashable, loader: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``loader`` as the newest read of ``key``.

        Raises:
            StaleResponseError: a newer read of ``key`` started meanwhile
        """
        generation = self.begin(key)
        result = await loader()
        self.check(key, generation)
        return result
