"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from database.store import EntityStore


async def get_store(request: Request) -> EntityStore:
    """The entity store owned by the running application."""
    return request.app.state.store
