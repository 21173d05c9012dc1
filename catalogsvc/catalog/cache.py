"""Read-through caches for catalog lookups.

Each key moves through EMPTY -> LOADING -> POPULATED. Concurrent misses on
the same key join a single in-flight load task; a failed load returns the
key to EMPTY and is never cached. Entries expire after a fixed time to
live, and the least recently used entry is dropped when a cache is full.

Invalidating a key also detaches any load already in flight for it, so a
load that started before a mutation can still answer the callers that
joined it but never populates the cache afterwards.
"""

import asyncio
import time
from collections import OrderedDict, deque
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar
from uuid import UUID

import structlog

from catalogsvc.domain.exceptions import CacheEvictionError

logger = structlog.get_logger()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheState(str, Enum):
    """Per-key cache state."""

    EMPTY = "empty"
    LOADING = "loading"
    POPULATED = "populated"


@dataclass
class CacheStats:
    """Counters for one cache.

    Attributes:
        hits: Lookups answered from a populated entry.
        misses: Lookups that found no populated entry.
        joins: Misses that joined an in-flight load.
        loads: Loads started.
        load_failures: Loads that raised.
        evictions: Entries dropped for capacity or expiry.
        invalidations: Explicit invalidations.
    """

    hits: int = 0
    misses: int = 0
    joins: int = 0
    loads: int = 0
    load_failures: int = 0
    evictions: int = 0
    invalidations: int = 0


@dataclass
class _Entry(Generic[V]):
    value: V
    expires_at: float


class LoadingCache(Generic[K, V]):
    """Async read-through cache with at-most-one load per key.

    Example usage:
        cache = LoadingCache("catalogByPublicId", ttl_seconds=600, max_entries=500)
        item = await cache.get_or_load(public_id, lambda: store.get_by_public_id(public_id))
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: int,
        cache_if: Callable[[V], bool] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            name: Cache name used in logs.
            ttl_seconds: Time to live of a populated entry.
            max_entries: Maximum number of populated entries.
            cache_if: Optional predicate; values failing it are returned
                to callers but not stored.
            clock: Monotonic clock in seconds.
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.cache_if = cache_if
        self.clock = clock
        self.stats = CacheStats()
        self._entries: OrderedDict[K, _Entry[V]] = OrderedDict()
        self._loads: dict[K, asyncio.Task[V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def state(self, key: K) -> CacheState:
        """Get the current state of a key."""
        if self._live_entry(key) is not None:
            return CacheState.POPULATED
        if key in self._loads:
            return CacheState.LOADING
        return CacheState.EMPTY

    def peek(self, key: K) -> V | None:
        """Return a populated value without loading or touching recency."""
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    async def get_or_load(self, key: K, loader: Callable[[], Awaitable[V]]) -> V:
        """Return the cached value, joining or starting a load on a miss.

        Args:
            key: Cache key.
            loader: Zero-argument coroutine function producing the value.
                Invoked at most once per miss cycle for the key.

        Returns:
            The cached or freshly loaded value.

        Raises:
            Exception: Whatever the loader raised; the key stays EMPTY.
        """
        entry = self._live_entry(key)
        if entry is not None:
            self._entries.move_to_end(key)
            self.stats.hits += 1
            return entry.value

        self.stats.misses += 1
        task = self._loads.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader))
            task.add_done_callback(_consume_exception)
            self._loads[key] = task
            self.stats.loads += 1
            logger.debug("Cache miss, loading", cache=self.name, key=str(key))
        else:
            self.stats.joins += 1
            logger.debug("Cache miss, joining in-flight load", cache=self.name, key=str(key))

        # Shielded so one abandoning caller does not cancel the shared load.
        return await asyncio.shield(task)

    def invalidate(self, key: K) -> None:
        """Drop a key and detach any in-flight load for it."""
        self._entries.pop(key, None)
        self._loads.pop(key, None)
        self.stats.invalidations += 1

    def invalidate_all(self) -> None:
        """Drop every entry and detach every in-flight load."""
        self._entries.clear()
        self._loads.clear()
        self.stats.invalidations += 1

    async def _load(self, key: K, loader: Callable[[], Awaitable[V]]) -> V:
        current = asyncio.current_task()
        try:
            value = await loader()
        except BaseException:
            self.stats.load_failures += 1
            if self._loads.get(key) is current:
                del self._loads[key]
            logger.debug("Cache load failed", cache=self.name, key=str(key))
            raise

        if self._loads.get(key) is not current:
            # Invalidated while loading; answer joined callers only.
            return value
        del self._loads[key]
        if self.cache_if is None or self.cache_if(value):
            self._store(key, value)
        return value

    def _store(self, key: K, value: V) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self.clock() + self.ttl_seconds)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self.stats.evictions += 1
            logger.debug("Cache entry evicted", cache=self.name, key=str(evicted))

    def _live_entry(self, key: K) -> _Entry[V] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            del self._entries[key]
            self.stats.evictions += 1
            return None
        return entry


def _consume_exception(task: asyncio.Task[Any]) -> None:
    """Mark a failed load's exception as retrieved when nobody awaited it."""
    if not task.cancelled():
        task.exception()


# ============================================================================
# Catalog Caches
# ============================================================================


CACHE_CATALOG_BY_PUBLIC_ID = "catalogByPublicId"
CACHE_CATALOGS_BY_INDUSTRY = "catalogsByIndustry"
CACHE_ALL_CATALOGS = "allCatalogs"

ALL_ITEMS_KEY = "all"
SOFT_FAULT_LIMIT = 100


@dataclass
class CacheSettings:
    """Time to live and capacity of the catalog caches.

    Attributes:
        item_ttl_seconds: TTL of the by-public-id cache.
        item_max_entries: Capacity of the by-public-id cache.
        industry_ttl_seconds: TTL of the by-industry cache.
        industry_max_entries: Capacity of the by-industry cache.
        all_items_ttl_seconds: TTL of the all-items slot.
    """

    item_ttl_seconds: float = 600.0
    item_max_entries: int = 500
    industry_ttl_seconds: float = 300.0
    industry_max_entries: int = 500
    all_items_ttl_seconds: float = 120.0


@dataclass
class CatalogCaches:
    """The named caches used by the catalog service.

    Eviction through ``evict_*`` is best-effort: a failure is logged and
    recorded in ``soft_faults`` instead of failing the mutation.

    Attributes:
        by_public_id: Single item per public id.
        by_industry: Item lists per industry id; empty lists are not stored.
        all_items: Single-slot cache of the full listing.
        soft_faults: Most recent eviction failures, oldest dropped first.
    """

    by_public_id: LoadingCache[UUID, Any]
    by_industry: LoadingCache[UUID, Any]
    all_items: LoadingCache[str, Any]
    soft_faults: deque[CacheEvictionError] = field(
        default_factory=lambda: deque(maxlen=SOFT_FAULT_LIMIT)
    )

    @classmethod
    def create(
        cls,
        settings: CacheSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "CatalogCaches":
        """Build the catalog caches.

        Args:
            settings: TTL and capacity settings.
            clock: Monotonic clock shared by every cache.

        Returns:
            CatalogCaches instance.
        """
        settings = settings or CacheSettings()
        return cls(
            by_public_id=LoadingCache(
                CACHE_CATALOG_BY_PUBLIC_ID,
                ttl_seconds=settings.item_ttl_seconds,
                max_entries=settings.item_max_entries,
                clock=clock,
            ),
            by_industry=LoadingCache(
                CACHE_CATALOGS_BY_INDUSTRY,
                ttl_seconds=settings.industry_ttl_seconds,
                max_entries=settings.industry_max_entries,
                cache_if=lambda items: len(items) > 0,
                clock=clock,
            ),
            all_items=LoadingCache(
                CACHE_ALL_CATALOGS,
                ttl_seconds=settings.all_items_ttl_seconds,
                max_entries=1,
                clock=clock,
            ),
        )

    def evict_item(self, public_id: UUID) -> None:
        """Evict one item from the by-public-id cache."""
        self._evict(self.by_public_id, public_id)

    def evict_industry(self, industry_id: UUID | None) -> None:
        """Evict one industry list; None is ignored."""
        if industry_id is not None:
            self._evict(self.by_industry, industry_id)

    def evict_all_items(self) -> None:
        """Evict the full listing."""
        self._evict(self.all_items, ALL_ITEMS_KEY)

    def _evict(self, cache: LoadingCache[Any, Any], key: Any) -> None:
        try:
            cache.invalidate(key)
        except Exception as e:
            fault = CacheEvictionError(cache.name, key, e)
            self.soft_faults.append(fault)
            logger.warning(
                "Failed to evict cache entry",
                cache=cache.name,
                key=str(key),
                error=str(e),
            )
