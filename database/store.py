"""
Embedded entity store.

Key-value tables for jobs, candidates, timelines, notes, assessments and
assessment responses on top of an embedded SQLite database. Records go in
and come out as pydantic models; ORM rows never leave this module.

Usage:
    store = EntityStore()
    job = await store.get(Table.JOBS, "job_abc1")

    async with store.transaction(Table.JOBS) as tx:
        for job in await tx.query(Table.JOBS):
            await tx.put(Table.JOBS, job.model_copy(update={"order": ...}))
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum as PyEnum
from typing import AsyncIterator, Callable, Optional

from pydantic import BaseModel
from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.assessments import Assessment, AssessmentResponse
from api.schemas.candidates import Candidate, Note, TimelineEvent
from api.schemas.jobs import Job
from core.config import settings
from core.utils.datetime import now
from core.utils.ids import IdGenerator
from database.engine import Base, close_db, create_engine, create_sessionmaker, init_db
from database.models.assessments import AssessmentResponseRow, AssessmentRow
from database.models.candidates import CandidateRow, NoteRow, TimelineEventRow
from database.models.jobs import JobRow

logger = logging.getLogger(__name__)

Predicate = Callable[[BaseModel], bool]


class Table(str, PyEnum):
    """Tables held by the store."""

    JOBS = "jobs"
    CANDIDATES = "candidates"
    TIMELINES = "candidate_timelines"
    NOTES = "notes"
    ASSESSMENTS = "assessments"
    RESPONSES = "assessment_responses"


_TABLES: dict[Table, tuple[type[Base], type[BaseModel]]] = {
    Table.JOBS: (JobRow, Job),
    Table.CANDIDATES: (CandidateRow, Candidate),
    Table.TIMELINES: (TimelineEventRow, TimelineEvent),
    Table.NOTES: (NoteRow, Note),
    Table.ASSESSMENTS: (AssessmentRow, Assessment),
    Table.RESPONSES: (AssessmentResponseRow, AssessmentResponse),
}


def _to_record(table: Table, row: Base) -> BaseModel:
    row_cls, record_cls = _TABLES[table]
    values = {attr.key: getattr(row, attr.key) for attr in sa_inspect(row_cls).column_attrs}
    return record_cls.model_validate(values)


def _to_row(table: Table, record: BaseModel) -> Base:
    row_cls, record_cls = _TABLES[table]
    if not isinstance(record, record_cls):
        raise TypeError(f"{table.value} expects {record_cls.__name__}, got {type(record).__name__}")
    return row_cls(**record.model_dump())


class StoreTransaction:
    """
    Handle for the operations of one transaction.

    Writes are staged in the session and become visible to later reads in
    the same transaction; other readers only see them after commit.
    """

    def __init__(self, session: AsyncSession, tables: frozenset[Table]):
        self._session = session
        self._tables = tables

    def _check(self, table: Table) -> type[Base]:
        if table not in self._tables:
            raise ValueError(f"Table {table.value} is not part of this transaction")
        return _TABLES[table][0]

    async def get(self, table: Table, record_id: str) -> Optional[BaseModel]:
        row_cls = self._check(table)
        row = await self._session.get(row_cls, record_id)
        return _to_record(table, row) if row is not None else None

    async def put(self, table: Table, record: BaseModel) -> BaseModel:
        self._check(table)
        await self._session.merge(_to_row(table, record))
        return record

    async def insert_many(self, table: Table, records: list[BaseModel]) -> int:
        """Bulk insert of new records; an existing id fails the transaction."""
        self._check(table)
        self._session.add_all([_to_row(table, record) for record in records])
        await self._session.flush()
        return len(records)

    async def query(self, table: Table, predicate: Optional[Predicate] = None) -> list[BaseModel]:
        row_cls = self._check(table)
        result = await self._session.execute(select(row_cls))
        records = [_to_record(table, row) for row in result.scalars().all()]
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    async def count(self, table: Table) -> int:
        row_cls = self._check(table)
        result = await self._session.execute(select(func.count()).select_from(row_cls))
        return result.scalar_one()


class EntityStore:
    """
    Transactional store with one writer at a time.

    Every operation (single reads included) runs under one ``asyncio.Lock``,
    so a reader never observes a transaction halfway through. Identifiers
    and timestamps come from the injected ``IdGenerator`` and clock.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        echo: bool = False,
    ):
        self.engine = create_engine(database_url or settings.database_url, echo=echo)
        self._sessionmaker = create_sessionmaker(self.engine)
        self.ids = id_generator or IdGenerator()
        self.clock = clock or now
        self._lock = asyncio.Lock()
        self._schema_ready = False
        self._tx_owner: Optional[asyncio.Task] = None

    async def _ensure_schema(self) -> None:
        if not self._schema_ready:
            await init_db(self.engine)
            self._schema_ready = True
            logger.info("Entity store schema created")

    async def init(self) -> None:
        """Create tables. Idempotent; also done lazily on first use."""
        self._guard_reentry()
        async with self._lock:
            await self._ensure_schema()

    async def close(self) -> None:
        """Dispose the engine. In-memory data is gone afterwards."""
        await close_db(self.engine)
        self._schema_ready = False

    def _guard_reentry(self) -> None:
        if self._tx_owner is not None and self._tx_owner is asyncio.current_task():
            raise RuntimeError(
                "EntityStore called from inside its own transaction; use the transaction handle"
            )

    @asynccontextmanager
    async def transaction(self, *tables: Table) -> AsyncIterator[StoreTransaction]:
        """
        Open a transaction over ``tables``.

        Either every write made through the handle is committed, or (if the
        block raises) none of them is.
        """
        if not tables:
            raise ValueError("transaction() needs at least one table")
        self._guard_reentry()
        async with self._lock:
            await self._ensure_schema()
            self._tx_owner = asyncio.current_task()
            try:
                async with self._sessionmaker() as session:
                    async with session.begin():
                        yield StoreTransaction(session, frozenset(tables))
            finally:
                self._tx_owner = None

    async def get(self, table: Table, record_id: str) -> Optional[BaseModel]:
        """Fetch one record by id, or None."""
        async with self.transaction(table) as tx:
            return await tx.get(table, record_id)

    async def put(self, table: Table, record: BaseModel) -> BaseModel:
        """Insert or replace one record."""
        async with self.transaction(table) as tx:
            return await tx.put(table, record)

    async def query(self, table: Table, predicate: Optional[Predicate] = None) -> list[BaseModel]:
        """Snapshot of every record matching ``predicate`` (all records if None)."""
        async with self.transaction(table) as tx:
            return await tx.query(table, predicate)

    async def count(self, table: Table) -> int:
        """Number of records in a table."""
        async with self.transaction(table) as tx:
            return await tx.count(table)
