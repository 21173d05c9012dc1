"""Pagination, sorting and the paged query executor."""

import asyncio
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import structlog

from catalogsvc.catalog.predicates import Predicate, canonical
from catalogsvc.domain.exceptions import CatalogValidationError

if TYPE_CHECKING:
    from catalogsvc.catalog.store import RecordStore
    from catalogsvc.domain.entities import CatalogItem

logger = structlog.get_logger()

T = TypeVar("T")

SORTABLE_FIELDS = frozenset(
    {
        "title",
        "industry_name",
        "price",
        "rating",
        "created_on",
        "updated_on",
        "compliance_status",
        "availability_status",
    }
)

DEFAULT_PAGE_SIZE = 20

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# ============================================================================
# Page Specification
# ============================================================================


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortDirection":
        """Parse a direction; anything other than ``desc`` is ascending."""
        if value is not None and value.strip().lower() == "desc":
            return cls.DESC
        return cls.ASC


@dataclass(frozen=True)
class SortKey:
    """One sort key.

    Attributes:
        field: Record attribute to order by.
        direction: Ascending or descending.
    """

    field: str
    direction: SortDirection = SortDirection.ASC

    @property
    def descending(self) -> bool:
        """Whether this key sorts descending."""
        return self.direction is SortDirection.DESC


@dataclass(frozen=True)
class PageSpec:
    """Zero-based page request.

    Sort keys apply in order; remaining ties are broken by the internal
    key so that a fixed predicate always pages the same way.

    Attributes:
        page: Zero-based page index.
        size: Page size, greater than zero.
        sort: Ordered sort keys.
    """

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: tuple[SortKey, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        errors = []
        if self.page < 0:
            errors.append({"field": "page", "reason": "must be zero or greater"})
        if self.size <= 0:
            errors.append({"field": "size", "reason": "must be greater than zero"})
        for key in self.sort:
            if key.field not in SORTABLE_FIELDS:
                errors.append({"field": "sort", "reason": f"cannot sort by '{key.field}'"})
        if errors:
            raise CatalogValidationError(errors)
        object.__setattr__(self, "sort", tuple(self.sort))

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return self.page * self.size

    @property
    def limit(self) -> int:
        """Get limit (alias for size)."""
        return self.size

    @classmethod
    def from_params(
        cls,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        sort: str | None = None,
        direction: str | None = None,
    ) -> "PageSpec":
        """Build a page spec from boundary parameters.

        Args:
            page: Zero-based page index.
            size: Page size.
            sort: Comma-separated field names (snake_case or camelCase).
            direction: Direction shared by every sort field.

        Returns:
            PageSpec instance.

        Raises:
            CatalogValidationError: On invalid page, size or sort field.
        """
        shared = SortDirection.parse(direction)
        keys: list[SortKey] = []
        if sort:
            for name in sort.split(","):
                name = name.strip()
                if name:
                    keys.append(SortKey(_CAMEL_BOUNDARY.sub("_", name).lower(), shared))
        return cls(page=page, size=size, sort=tuple(keys))


# ============================================================================
# Page Result
# ============================================================================


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """One page of results plus the total for the same predicate.

    Attributes:
        content: Items on this page (at most ``size``).
        page: Zero-based page index.
        size: Requested page size.
        total_elements: Total matching items, independent of the page window.
    """

    content: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages (ceil(total / size), 0 for non-positive size)."""
        if self.size <= 0:
            return 0
        return -(-self.total_elements // self.size)

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 0


# ============================================================================
# In-Memory Ordering
# ============================================================================


def _sort_value(record: Any, name: str) -> Any:
    return canonical(getattr(record, name))


def sort_records(records: Sequence["CatalogItem"], sort: Sequence[SortKey] = ()) -> list["CatalogItem"]:
    """Order records by the given keys, internal key ascending on ties.

    Args:
        records: Records to order.
        sort: Sort keys, most significant first.

    Returns:
        New ordered list.
    """
    ordered = sorted(records, key=lambda r: r.id if r.id is not None else -1)
    # Stable sorts applied least-significant first.
    for key in reversed(sort):
        ordered.sort(key=lambda r, name=key.field: _sort_value(r, name), reverse=key.descending)
    return ordered


def window(records: Sequence[T], page: PageSpec | None) -> list[T]:
    """Slice an ordered sequence to one page (everything when page is None)."""
    if page is None:
        return list(records)
    return list(records[page.offset : page.offset + page.size])


# ============================================================================
# Paged Query Executor
# ============================================================================


class PagedQueryExecutor:
    """Runs predicates against a record store with paging and counting.

    The page and the total are always derived from the same predicate.
    """

    def __init__(self, store: "RecordStore") -> None:
        """Initialize executor.

        Args:
            store: Record store to query.
        """
        self.store = store

    async def fetch(self, predicate: Predicate, page: PageSpec | None = None) -> list["CatalogItem"]:
        """Fetch matching records, one page when ``page`` is given.

        Args:
            predicate: Filter predicate.
            page: Optional page window and ordering.

        Returns:
            Ordered list of matching records.
        """
        return list(await self.store.scan(predicate, page))

    async def fetch_counted(self, predicate: Predicate, page: PageSpec) -> PageResult["CatalogItem"]:
        """Fetch one page and the total count for the same predicate.

        Args:
            predicate: Filter predicate.
            page: Page window and ordering.

        Returns:
            PageResult with content and total.
        """
        content, total = await asyncio.gather(
            self.store.scan(predicate, page),
            self.store.count(predicate),
        )
        logger.debug(
            "Fetched counted page",
            page=page.page,
            size=page.size,
            returned=len(content),
            total=total,
        )
        return PageResult(
            content=list(content),
            page=page.page,
            size=page.size,
            total_elements=total,
        )
