"""Client side of the simulated backend: API client, optimistic views."""

from client.api import ApiClient
from client.optimistic import (
    Mutation,
    MutationInProgressError,
    MutationState,
    OptimisticMutationController,
)
from client.queries import QueryTracker
from client.views import CandidateBoardView, JobListView

__all__ = [
    "ApiClient",
    "Mutation",
    "MutationInProgressError",
    "MutationState",
    "OptimisticMutationController",
    "QueryTracker",
    "CandidateBoardView",
    "JobListView",
]
