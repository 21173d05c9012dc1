"""Tests for page specifications, page results and the paged executor."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from catalogsvc.catalog.paging import (
    PagedQueryExecutor,
    PageResult,
    PageSpec,
    SortDirection,
    SortKey,
    sort_records,
    window,
)
from catalogsvc.catalog.predicates import MatchAll, Range
from catalogsvc.catalog.store import InMemoryRecordStore
from catalogsvc.domain.entities import CatalogItem
from catalogsvc.domain.exceptions import CatalogValidationError

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestPageSpec:
    """Tests for PageSpec."""

    def test_defaults(self) -> None:
        page = PageSpec()
        assert (page.page, page.size, page.sort) == (0, 20, ())
        assert page.offset == 0

    def test_offset(self) -> None:
        assert PageSpec(page=3, size=25).offset == 75

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"page": -1}, "page"),
            ({"size": 0}, "size"),
            ({"sort": (SortKey("public_id"),)}, "sort"),
        ],
    )
    def test_invalid_values_rejected(self, kwargs: dict, field: str) -> None:
        with pytest.raises(CatalogValidationError) as exc_info:
            PageSpec(**kwargs)
        assert exc_info.value.errors[0]["field"] == field

    def test_from_params_accepts_camel_case(self) -> None:
        """Sort names may be camelCase; the direction applies to every key."""
        page = PageSpec.from_params(page=1, size=5, sort="createdOn, price", direction="DESC")
        assert page.sort == (
            SortKey("created_on", SortDirection.DESC),
            SortKey("price", SortDirection.DESC),
        )

    def test_unknown_direction_is_ascending(self) -> None:
        assert SortDirection.parse("sideways") is SortDirection.ASC
        assert SortDirection.parse(None) is SortDirection.ASC


class TestPageResult:
    """Tests for PageResult totals."""

    @pytest.mark.parametrize(
        "total,size,pages",
        [(0, 10, 0), (10, 3, 4), (9, 3, 3), (1, 20, 1)],
    )
    def test_total_pages_rounds_up(self, total: int, size: int, pages: int) -> None:
        assert PageResult(content=[], page=0, size=size, total_elements=total).total_pages == pages

    def test_navigation_flags(self) -> None:
        middle = PageResult(content=[], page=1, size=3, total_elements=10)
        last = PageResult(content=[], page=3, size=3, total_elements=10)

        assert middle.has_next and middle.has_previous
        assert not last.has_next


class TestOrdering:
    """Tests for in-memory ordering and windowing."""

    @pytest.fixture
    def records(self, make_draft) -> list[CatalogItem]:
        prices = [Decimal("30"), Decimal("10"), Decimal("30"), Decimal("20")]
        return [
            CatalogItem.create(make_draft(title=f"Item {i}", price=p), now=NOW).with_key(i + 1)
            for i, p in enumerate(prices)
        ]

    def test_ties_broken_by_internal_key(self, records: list[CatalogItem]) -> None:
        ordered = sort_records(list(reversed(records)), (SortKey("price", SortDirection.DESC),))
        assert [r.id for r in ordered] == [1, 3, 4, 2]

    def test_no_sort_keys_orders_by_key(self, records: list[CatalogItem]) -> None:
        assert [r.id for r in sort_records(list(reversed(records)))] == [1, 2, 3, 4]

    def test_window_slices_one_page(self, records: list[CatalogItem]) -> None:
        assert [r.id for r in window(records, PageSpec(page=1, size=3))] == [4]
        assert window(records, PageSpec(page=5, size=3)) == []
        assert len(window(records, None)) == 4


class TestPagedQueryExecutor:
    """Tests for PagedQueryExecutor."""

    @pytest.mark.asyncio
    async def test_total_uses_same_predicate(self, make_draft) -> None:
        """The page and the total agree on the predicate."""
        store = InMemoryRecordStore()
        for price in (5, 15, 25, 35, 45):
            await store.save(CatalogItem.create(make_draft(price=price), now=NOW))

        executor = PagedQueryExecutor(store)
        result = await executor.fetch_counted(
            Range("price", lower=Decimal("10")), PageSpec(page=0, size=3)
        )

        assert result.total_elements == 4
        assert [r.price for r in result.content] == [Decimal("15"), Decimal("25"), Decimal("35")]
        assert result.total_pages == 2

    @pytest.mark.asyncio
    async def test_fetch_without_page_returns_everything(self, make_draft) -> None:
        store = InMemoryRecordStore()
        for _ in range(3):
            await store.save(CatalogItem.create(make_draft(), now=NOW))

        assert len(await PagedQueryExecutor(store).fetch(MatchAll())) == 3
