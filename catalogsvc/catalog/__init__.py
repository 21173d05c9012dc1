"""Catalog core.

Provides the predicate builder, paged query executor, record stores,
read-through caches and the catalog service that orchestrates them.
"""

from catalogsvc.catalog.builder import PredicateBuilder
from catalogsvc.catalog.cache import CacheSettings, CacheState, CatalogCaches, LoadingCache
from catalogsvc.catalog.filters import FilterCriteria
from catalogsvc.catalog.generator import GeneratorConfig, SampleItemGenerator
from catalogsvc.catalog.paging import (
    PagedQueryExecutor,
    PageResult,
    PageSpec,
    SortDirection,
    SortKey,
)
from catalogsvc.catalog.service import (
    BatchItemResult,
    CatalogService,
    get_catalog_service,
    reset_catalog_service,
)
from catalogsvc.catalog.store import InMemoryRecordStore, RecordStore

__all__ = [
    # Filtering
    "FilterCriteria",
    "PredicateBuilder",
    # Paging
    "PagedQueryExecutor",
    "PageResult",
    "PageSpec",
    "SortDirection",
    "SortKey",
    # Stores
    "InMemoryRecordStore",
    "RecordStore",
    # Caches
    "CacheSettings",
    "CacheState",
    "CatalogCaches",
    "LoadingCache",
    # Generator
    "GeneratorConfig",
    "SampleItemGenerator",
    # Service
    "BatchItemResult",
    "CatalogService",
    "get_catalog_service",
    "reset_catalog_service",
]
