"""
Optimistic mutation controller.

A mutation applies its change to local view state right away, then awaits
the durable write. Success reconciles the view with the server's copy;
failure restores an authoritative snapshot and reports through a callback.
Domain and transport errors never reach the caller of ``run``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from core.exceptions import TalentflowError

logger = logging.getLogger(__name__)


class MutationState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


_TRANSITIONS = {
    MutationState.IDLE: {MutationState.PENDING},
    MutationState.PENDING: {MutationState.COMMITTED, MutationState.ROLLED_BACK},
    MutationState.COMMITTED: set(),
    MutationState.ROLLED_BACK: set(),
}


class MutationInProgressError(RuntimeError):
    """A mutation on the same collection is still pending."""


@dataclass
class Mutation:
    """One optimistic mutation and its outcome."""

    collection: str
    description: str = ""
    state: MutationState = MutationState.IDLE
    result: Any = None
    error: Optional[TalentflowError] = None
    history: list[MutationState] = field(default_factory=lambda: [MutationState.IDLE])

    def transition(self, state: MutationState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid mutation transition {self.state.value} -> {state.value}")
        logger.debug(f"{self.collection} mutation {self.description!r}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def settled(self) -> bool:
        return self.state in (MutationState.COMMITTED, MutationState.ROLLED_BACK)


class OptimisticMutationController:
    """
    Drives mutations through Idle -> Pending -> Committed | RolledBack.

    At most one mutation per collection is pending at a time; starting
    another raises ``MutationInProgressError`` before anything is applied.
    Mutations on different collections may overlap.
    """

    def __init__(self):
        self._pending: dict[str, Mutation] = {}

    def is_pending(self, collection: str) -> bool:
        return collection in self._pending

    async def run(
        self,
        collection: str,
        apply: Callable[[], None],
        commit: Callable[[], Awaitable[Any]],
        rollback: Callable[[TalentflowError], Awaitable[None]],
        reconcile: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[TalentflowError], None]] = None,
        description: str = "",
    ) -> Mutation:
        """
        Run one mutation to a terminal state.

        Args:
            collection: Key of the view state being mutated
            apply: Applies the tentative change to local state
            commit: Issues the durable write
            rollback: Restores an authoritative snapshot after a failure
            reconcile: Merges the write's result into local state
            on_error: Notified with the error after rollback
            description: Free text for logs

        Returns:
            The settled mutation
        """
        if collection in self._pending:
            raise MutationInProgressError(f"A {collection} mutation is already pending")

        mutation = Mutation(collection=collection, description=description)
        self._pending[collection] = mutation
        try:
            apply()
            mutation.transition(MutationState.PENDING)

            try:
                result = await commit()
            except TalentflowError as e:
                mutation.error = e
                logger.warning(f"Rolling back {collection} mutation {description!r}: {e.message}")
                await rollback(e)
                mutation.transition(MutationState.ROLLED_BACK)
                if on_error is not None:
                    on_error(e)
                return mutation

            mutation.result = result
            if reconcile is not None:
                reconcile(result)
            mutation.transition(MutationState.COMMITTED)
            return mutation
        finally:
            self._pending.pop(collection, None)
