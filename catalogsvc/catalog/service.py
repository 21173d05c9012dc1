"""Catalog service for catalog item operations.

High-level service that combines the record store, predicate builder,
paged query executor and caches, and owns cache invalidation.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar
from uuid import UUID

import structlog

from catalogsvc.catalog.builder import PredicateBuilder
from catalogsvc.catalog.cache import ALL_ITEMS_KEY, CacheSettings, CatalogCaches
from catalogsvc.catalog.filters import FilterCriteria
from catalogsvc.catalog.generator import GeneratorConfig, SampleItemGenerator
from catalogsvc.catalog.paging import PagedQueryExecutor, PageResult, PageSpec, sort_records, window
from catalogsvc.catalog.predicates import Equals, MatchAll, TextMatch, TextMode
from catalogsvc.catalog.store import InMemoryRecordStore, RecordStore
from catalogsvc.domain.entities import CatalogItem, ItemDraft, ItemPatch
from catalogsvc.domain.exceptions import CatalogItemNotFoundError, CatalogValidationError

logger = structlog.get_logger()

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BatchItemResult(Generic[T]):
    """Outcome of one element of a batch operation.

    Attributes:
        index: Position of the element in the request.
        value: Result value when the element succeeded.
        error: Exception when the element failed.
    """

    index: int
    value: T | None = None
    error: Exception | None = None

    @property
    def success(self) -> bool:
        """Whether this element succeeded."""
        return self.error is None


class CatalogService:
    """Service for catalog operations.

    Lookups by public id, by industry and the unfiltered listing are
    read-through cached. Filtered queries always go to the store.
    Writes to the same public id are not serialised: the last write to
    reach the store wins.

    Example usage:
        service = CatalogService(InMemoryRecordStore())
        item = await service.create(draft)
        page = await service.filter_paged(
            FilterCriteria(categories=["Outdoor"], max_price=Decimal("100")),
            PageSpec(page=0, size=20, sort=(SortKey("price"),)),
        )
    """

    def __init__(
        self,
        store: RecordStore,
        caches: CatalogCaches | None = None,
        builder: PredicateBuilder | None = None,
        clock: Callable[[], datetime] = _utc_now,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Record store.
            caches: Catalog caches (fresh defaults when omitted).
            builder: Predicate builder.
            clock: Source of UTC timestamps.
            request_id: Request ID for correlation.
        """
        self.store = store
        self.caches = caches or CatalogCaches.create()
        self.builder = builder or PredicateBuilder()
        self.executor = PagedQueryExecutor(store)
        self.clock = clock
        self.request_id = request_id

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def list_all(self, page: PageSpec | None = None) -> list[CatalogItem]:
        """List items without filtering, through the all-items cache.

        Args:
            page: Optional ordering and window applied to the cached listing.

        Returns:
            Items in the requested order.
        """
        items = await self.caches.all_items.get_or_load(
            ALL_ITEMS_KEY, lambda: self.store.scan(MatchAll())
        )
        ordered = sort_records(items, page.sort) if page is not None else list(items)
        return window(ordered, page)

    async def find_by_public_id(self, public_id: UUID) -> CatalogItem:
        """Get an item by public identifier.

        Args:
            public_id: Public identifier.

        Returns:
            The item.

        Raises:
            CatalogItemNotFoundError: If no item has this identifier.
        """

        async def load() -> CatalogItem:
            logger.debug("Loading catalog item", public_id=str(public_id))
            item = await self.store.get_by_public_id(public_id)
            if item is None:
                raise CatalogItemNotFoundError(public_id)
            return item

        return await self.caches.by_public_id.get_or_load(public_id, load)

    async def find_by_industry(self, industry_id: UUID) -> list[CatalogItem]:
        """Get every item of an industry, through the by-industry cache.

        Args:
            industry_id: Industry identifier.

        Returns:
            Items in internal key order; empty results are not cached.
        """

        async def load() -> list[CatalogItem]:
            logger.debug("Loading catalog items by industry", industry_id=str(industry_id))
            return list(await self.store.scan(Equals("industry_id", industry_id)))

        return list(await self.caches.by_industry.get_or_load(industry_id, load))

    async def find_by_title(self, title: str) -> list[CatalogItem]:
        """Find items whose title contains the text, ignoring case.

        Args:
            title: Text to search for.

        Returns:
            Matching items (uncached).
        """
        return list(await self.store.scan(TextMatch("title", title, TextMode.CONTAINS)))

    async def filter(
        self,
        criteria: FilterCriteria | None,
        page: PageSpec | None = None,
    ) -> list[CatalogItem]:
        """Find items matching filter criteria.

        Args:
            criteria: Filter criteria; None or empty matches everything.
            page: Optional ordering and window.

        Returns:
            Matching items.
        """
        predicate = self.builder.build(criteria)
        items = await self.executor.fetch(predicate, page)
        logger.debug("Filtered catalog items", returned=len(items), request_id=self.request_id)
        return items

    async def filter_paged(self, criteria: FilterCriteria | None, page: PageSpec) -> PageResult[CatalogItem]:
        """Find one page of matching items along with the total count.

        Args:
            criteria: Filter criteria.
            page: Page window and ordering.

        Returns:
            PageResult whose total is computed from the same predicate.
        """
        predicate = self.builder.build(criteria)
        return await self.executor.fetch_counted(predicate, page)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, draft: ItemDraft) -> CatalogItem:
        """Create an item with a generated public id and timestamps.

        Args:
            draft: Create payload.

        Returns:
            The stored item.

        Raises:
            CatalogValidationError: If the payload is invalid.
        """
        item = CatalogItem.create(draft, now=self.clock())
        saved = await self.store.save(item)

        self.caches.evict_all_items()
        self.caches.evict_industry(saved.industry_id)

        logger.info(
            "Catalog item created",
            public_id=str(saved.public_id),
            industry_id=str(saved.industry_id),
            request_id=self.request_id,
        )
        return saved

    async def update(self, public_id: UUID, patch: ItemPatch) -> CatalogItem:
        """Merge a partial update into an existing item.

        Internal key, public id and creation timestamp are preserved.

        Args:
            public_id: Item to update.
            patch: Fields to override; omitted fields keep stored values.

        Returns:
            The stored item.

        Raises:
            CatalogItemNotFoundError: If the item does not exist.
            CatalogValidationError: If a supplied value is invalid.
        """
        existing = await self.store.get_by_public_id(public_id)
        if existing is None:
            raise CatalogItemNotFoundError(public_id)

        merged = existing.apply(patch, now=self.clock())
        saved = await self.store.save(merged)

        self.caches.evict_item(public_id)
        self.caches.evict_all_items()
        self.caches.evict_industry(existing.industry_id)
        if saved.industry_id != existing.industry_id:
            logger.debug(
                "Industry changed",
                public_id=str(public_id),
                from_industry=str(existing.industry_id),
                to_industry=str(saved.industry_id),
            )
            self.caches.evict_industry(saved.industry_id)

        logger.info("Catalog item updated", public_id=str(public_id), request_id=self.request_id)
        return saved

    async def delete(self, public_id: UUID) -> None:
        """Delete an item by public id.

        Args:
            public_id: Item to delete.

        Raises:
            CatalogItemNotFoundError: If the item does not exist.
        """
        existing = await self.store.get_by_public_id(public_id)
        if existing is None or not await self.store.delete_by_public_id(public_id):
            raise CatalogItemNotFoundError(public_id)

        self.caches.evict_item(public_id)
        self.caches.evict_all_items()
        self.caches.evict_industry(existing.industry_id)

        logger.info("Catalog item deleted", public_id=str(public_id), request_id=self.request_id)

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    async def create_batch(self, drafts: Sequence[ItemDraft]) -> list[BatchItemResult[CatalogItem]]:
        """Create items concurrently, each isolated from the others."""
        return await self._run_batch("create", [self.create(d) for d in drafts])

    async def update_batch(self, patches: Sequence[ItemPatch]) -> list[BatchItemResult[CatalogItem]]:
        """Update items concurrently, each identified by ``patch.public_id``.

        An element without a public id fails alone with a validation error.
        """
        return await self._run_batch("update", [self._update_identified(p) for p in patches])

    async def delete_batch(self, public_ids: Sequence[UUID]) -> list[BatchItemResult[None]]:
        """Delete items concurrently, each isolated from the others."""
        return await self._run_batch("delete", [self.delete(pid) for pid in public_ids])

    async def _update_identified(self, patch: ItemPatch) -> CatalogItem:
        if patch.public_id is None:
            raise CatalogValidationError.single("public_id", "must be provided for batch update")
        return await self.update(patch.public_id, patch)

    async def _run_batch(self, operation: str, calls: list[Awaitable[T]]) -> list[BatchItemResult[T]]:
        results = await asyncio.gather(
            *(self._isolated(operation, index, call) for index, call in enumerate(calls))
        )
        failed = sum(1 for r in results if not r.success)
        logger.info(
            "Batch completed",
            operation=operation,
            total=len(results),
            failed=failed,
            request_id=self.request_id,
        )
        return list(results)

    async def _isolated(self, operation: str, index: int, call: Awaitable[T]) -> BatchItemResult[T]:
        try:
            return BatchItemResult(index=index, value=await call)
        except Exception as e:
            logger.warning(
                "Batch element failed",
                operation=operation,
                index=index,
                error=str(e),
                request_id=self.request_id,
            )
            return BatchItemResult(index=index, error=e)

    # ------------------------------------------------------------------
    # Sample data
    # ------------------------------------------------------------------

    async def initialize_sample_data(self, config: GeneratorConfig | None = None) -> dict[str, Any]:
        """Seed generated items when the store is empty.

        Args:
            config: Generator configuration.

        Returns:
            Seeding summary.
        """
        existing = await self.store.count(MatchAll())
        if existing > 0:
            logger.info("Catalog already populated, skipping sample data", existing=existing)
            return {"skipped": True, "existing": existing, "created": 0, "failed": 0}

        config = config or GeneratorConfig()
        drafts = SampleItemGenerator(config).generate_list()
        results = await self.create_batch(drafts)
        created = sum(1 for r in results if r.success)

        logger.info("Sample data initialized", created=created, requested=len(drafts))
        return {
            "skipped": False,
            "existing": 0,
            "created": created,
            "failed": len(results) - created,
        }


# ============================================================================
# Service Factory
# ============================================================================


_catalog_service: CatalogService | None = None


def build_catalog_service() -> CatalogService:
    """Build a catalog service from application settings."""
    from catalogsvc.infrastructure.config import settings

    if settings.store_backend == "sql":
        from catalogsvc.catalog.repository import SqlAlchemyRecordStore
        from catalogsvc.infrastructure.database import async_session_factory

        store: RecordStore = SqlAlchemyRecordStore(async_session_factory)
    else:
        store = InMemoryRecordStore()

    caches = CatalogCaches.create(
        CacheSettings(
            item_ttl_seconds=settings.cache_item_ttl_seconds,
            item_max_entries=settings.cache_item_max_entries,
            industry_ttl_seconds=settings.cache_industry_ttl_seconds,
            industry_max_entries=settings.cache_industry_max_entries,
            all_items_ttl_seconds=settings.cache_all_items_ttl_seconds,
        )
    )
    builder = PredicateBuilder(short_text_threshold=settings.description_prefix_threshold)

    logger.info("Catalog service configured", store_backend=settings.store_backend)
    return CatalogService(store, caches=caches, builder=builder)


def get_catalog_service() -> CatalogService:
    """Get catalog service singleton."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = build_catalog_service()
    return _catalog_service


def reset_catalog_service() -> None:
    """Reset catalog service (for testing)."""
    global _catalog_service
    _catalog_service = None
