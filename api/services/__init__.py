"""Backend service functions over the entity store."""

from api.services import assessments, candidates, jobs, query, reorder

__all__ = ["assessments", "candidates", "jobs", "query", "reorder"]
