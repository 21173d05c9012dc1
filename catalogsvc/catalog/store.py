"""Record store boundary.

Defines the operations the catalog core needs from persistence and an
in-memory implementation used for local runs and tests. The SQLAlchemy
implementation lives in ``catalogsvc.catalog.repository``.
"""

import asyncio
import itertools
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence
from uuid import UUID

import structlog

from catalogsvc.catalog.paging import PageSpec, sort_records, window
from catalogsvc.catalog.predicates import Predicate
from catalogsvc.domain.entities import CatalogItem
from catalogsvc.domain.exceptions import CatalogItemNotFoundError, RecordConflictError

logger = structlog.get_logger()


class RecordStore(ABC):
    """Abstract persistence boundary for catalog items.

    Every operation may suspend. ``save`` replaces whole records; readers
    never observe a partially written record.
    """

    @abstractmethod
    async def get(self, key: int) -> CatalogItem | None:
        """Get a record by internal key."""

    @abstractmethod
    async def get_by_public_id(self, public_id: UUID) -> CatalogItem | None:
        """Get a record by public identifier."""

    @abstractmethod
    async def scan(self, predicate: Predicate, page: PageSpec | None = None) -> Sequence[CatalogItem]:
        """Return records matching a predicate.

        Args:
            predicate: Filter predicate.
            page: Optional window and ordering; without it every match is
                returned in internal key order.

        Returns:
            Matching records.
        """

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Count records matching a predicate."""

    @abstractmethod
    async def save(self, record: CatalogItem) -> CatalogItem:
        """Insert a record without a key, or fully replace one with a key.

        Returns:
            The stored record, carrying its internal key.

        Raises:
            RecordConflictError: If the public identifier is already taken.
            CatalogItemNotFoundError: If the record to replace no longer exists.
        """

    @abstractmethod
    async def delete_by_public_id(self, public_id: UUID) -> bool:
        """Delete a record by public identifier.

        Returns:
            True if a record was deleted, False if none matched.
        """


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed record store.

    Records are immutable, so replacing the dictionary entry is an atomic
    whole-record write. A unique index maps public ids to internal keys.

    Attributes:
        calls: Number of invocations per operation name.
    """

    def __init__(self, latency: float = 0.0) -> None:
        """Initialize store.

        Args:
            latency: Seconds each operation sleeps before touching data,
                to simulate store I/O suspension.
        """
        self._records: dict[int, CatalogItem] = {}
        self._public_index: dict[UUID, int] = {}
        self._keys = itertools.count(1)
        self.latency = latency
        self.calls: Counter[str] = Counter()

    async def _io(self, operation: str) -> None:
        self.calls[operation] += 1
        await asyncio.sleep(self.latency)

    async def get(self, key: int) -> CatalogItem | None:
        await self._io("get")
        return self._records.get(key)

    async def get_by_public_id(self, public_id: UUID) -> CatalogItem | None:
        await self._io("get_by_public_id")
        key = self._public_index.get(public_id)
        return self._records.get(key) if key is not None else None

    async def scan(self, predicate: Predicate, page: PageSpec | None = None) -> Sequence[CatalogItem]:
        await self._io("scan")
        matched = [r for r in self._records.values() if predicate.matches(r)]
        ordered = sort_records(matched, page.sort if page else ())
        return window(ordered, page)

    async def count(self, predicate: Predicate) -> int:
        await self._io("count")
        return sum(1 for r in self._records.values() if predicate.matches(r))

    async def save(self, record: CatalogItem) -> CatalogItem:
        await self._io("save")
        if record.id is None:
            if record.public_id in self._public_index:
                raise RecordConflictError(
                    f"Catalog item with public id {record.public_id} already exists",
                    public_id=record.public_id,
                )
            stored = record.with_key(next(self._keys))
        else:
            current = self._records.get(record.id)
            if current is None:
                raise CatalogItemNotFoundError(record.public_id)
            if current.public_id != record.public_id:
                raise RecordConflictError(
                    f"Public id of record {record.id} cannot change",
                    public_id=record.public_id,
                )
            stored = record

        self._records[stored.id] = stored
        self._public_index[stored.public_id] = stored.id
        logger.debug("Saved catalog record", key=stored.id, public_id=str(stored.public_id))
        return stored

    async def delete_by_public_id(self, public_id: UUID) -> bool:
        await self._io("delete_by_public_id")
        key = self._public_index.pop(public_id, None)
        if key is None:
            return False
        del self._records[key]
        logger.debug("Deleted catalog record", key=key, public_id=str(public_id))
        return True

    def __len__(self) -> int:
        return len(self._records)
