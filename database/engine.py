import logging
from datetime import datetime

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from core.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _is_memory_url(database_url: str) -> bool:
    return database_url.rstrip("/").endswith("sqlite+aiosqlite:") or ":memory:" in database_url


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine backing an entity store.

    In-memory SQLite lives and dies with its connection, so those URLs are
    pinned to a single shared connection.
    """
    logger.debug(f"Creating database engine for {database_url}")
    if _is_memory_url(database_url):
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(database_url, echo=echo)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Records are converted to pydantic models before the session closes,
    # so nothing needs to be refreshed after commit.
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class UTCDateTime(TypeDecorator):
    """DateTime column that always hands back timezone-aware UTC values."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        return ensure_utc(value)

    def process_result_value(self, value: datetime | None, dialect):
        return ensure_utc(value)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


# Function to initialize the database (create tables)
async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db(engine: AsyncEngine) -> None:
    """Close database engine and connections."""
    await engine.dispose()
