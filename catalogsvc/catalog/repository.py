"""SQLAlchemy record store.

Compiles predicate trees into SQL and runs each store operation in its
own session and transaction.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import ColumnElement, and_, delete, func, or_, select, true
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalogsvc.catalog.models import CatalogItemRecord
from catalogsvc.catalog.paging import PageSpec
from catalogsvc.catalog.predicates import (
    And,
    ContainsElement,
    Equals,
    MatchAll,
    Or,
    Predicate,
    Range,
    TextMatch,
    TextMode,
    canonical,
)
from catalogsvc.catalog.store import RecordStore
from catalogsvc.domain.entities import CatalogItem
from catalogsvc.domain.exceptions import CatalogItemNotFoundError, RecordConflictError, StoreError

logger = structlog.get_logger()

LIKE_ESCAPE = "\\"


def _column(field: str) -> Any:
    """Get SQLAlchemy column for a record field.

    Raises:
        ValueError: If the field is not a catalog column.
    """
    column = getattr(CatalogItemRecord, field, None)
    if column is None or field.startswith("_"):
        raise ValueError(f"Unknown catalog field: {field}")
    return column


def _escape_like(text: str) -> str:
    """Escape LIKE metacharacters so user text matches literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """Translate a predicate tree into a SQL boolean expression.

    Args:
        predicate: Predicate to compile.

    Returns:
        SQLAlchemy boolean clause.

    Raises:
        TypeError: For an unsupported predicate node.
    """
    if isinstance(predicate, MatchAll):
        return true()

    if isinstance(predicate, Equals):
        return _column(predicate.field) == canonical(predicate.value)

    if isinstance(predicate, Range):
        column = _column(predicate.field)
        bounds = []
        if predicate.lower is not None:
            bounds.append(column >= predicate.lower)
        if predicate.upper is not None:
            bounds.append(column <= predicate.upper)
        return and_(*bounds) if bounds else true()

    if isinstance(predicate, TextMatch):
        pattern = _escape_like(predicate.text) + "%"
        if predicate.mode is TextMode.CONTAINS:
            pattern = "%" + pattern
        return _column(predicate.field).ilike(pattern, escape=LIKE_ESCAPE)

    if isinstance(predicate, ContainsElement):
        return _column(predicate.field).contains([predicate.value])

    if isinstance(predicate, And):
        return and_(*(compile_predicate(c) for c in predicate.clauses))

    if isinstance(predicate, Or):
        return or_(*(compile_predicate(c) for c in predicate.clauses))

    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


def order_clauses(page: PageSpec | None) -> list[Any]:
    """Build ORDER BY clauses, internal key ascending last."""
    clauses = []
    if page is not None:
        for key in page.sort:
            column = _column(key.field)
            clauses.append(column.desc() if key.descending else column.asc())
    clauses.append(CatalogItemRecord.id.asc())
    return clauses


class SqlAlchemyRecordStore(RecordStore):
    """Record store backed by an async SQLAlchemy engine.

    Example usage:
        store = SqlAlchemyRecordStore(async_session_factory)
        items = await store.scan(predicate, PageSpec(page=0, size=20))
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store with a session factory.

        Args:
            session_factory: Factory producing async sessions; each operation
                uses its own session so concurrent calls never share one.
        """
        self.session_factory = session_factory

    async def get(self, key: int) -> CatalogItem | None:
        async with self._session("get") as session:
            record = await session.get(CatalogItemRecord, key)
            return record.to_entity() if record else None

    async def get_by_public_id(self, public_id: UUID) -> CatalogItem | None:
        query = select(CatalogItemRecord).where(CatalogItemRecord.public_id == public_id)
        async with self._session("get_by_public_id") as session:
            result = await session.execute(query)
            record = result.scalar_one_or_none()
            return record.to_entity() if record else None

    async def scan(self, predicate: Predicate, page: PageSpec | None = None) -> Sequence[CatalogItem]:
        query = (
            select(CatalogItemRecord)
            .where(compile_predicate(predicate))
            .order_by(*order_clauses(page))
        )
        if page is not None:
            query = query.offset(page.offset).limit(page.limit)

        async with self._session("scan") as session:
            result = await session.execute(query)
            return [record.to_entity() for record in result.scalars().all()]

    async def count(self, predicate: Predicate) -> int:
        query = select(func.count(CatalogItemRecord.id)).where(compile_predicate(predicate))
        async with self._session("count") as session:
            result = await session.execute(query)
            return result.scalar_one()

    async def save(self, record: CatalogItem) -> CatalogItem:
        async with self._session("save") as session:
            if record.id is None:
                row = CatalogItemRecord.from_entity(record)
                session.add(row)
            else:
                row = await session.get(CatalogItemRecord, record.id)
                if row is None:
                    raise CatalogItemNotFoundError(record.public_id)
                row.apply_entity(record)
            await session.flush()
            saved = row.to_entity()
            await session.commit()
            return saved

    async def delete_by_public_id(self, public_id: UUID) -> bool:
        statement = delete(CatalogItemRecord).where(CatalogItemRecord.public_id == public_id)
        async with self._session("delete_by_public_id") as session:
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount > 0

    def _session(self, operation: str) -> "_StoreSession":
        return _StoreSession(self.session_factory, operation)


class _StoreSession:
    """Session context translating SQLAlchemy failures into store errors."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], operation: str) -> None:
        self.session_factory = session_factory
        self.operation = operation
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> AsyncSession:
        self.session = self.session_factory()
        return self.session

    async def __aexit__(self, exc_type: Any, exc: BaseException | None, tb: Any) -> bool:
        assert self.session is not None
        try:
            if exc is not None:
                await self.session.rollback()
        finally:
            await self.session.close()

        if isinstance(exc, IntegrityError):
            logger.warning("Catalog store integrity violation", operation=self.operation, error=str(exc))
            raise RecordConflictError(f"Integrity violation during {self.operation}") from exc
        if isinstance(exc, SQLAlchemyError):
            logger.error("Catalog store failure", operation=self.operation, error=str(exc))
            raise StoreError(f"Store failure during {self.operation}: {exc}") from exc
        return False
