"""Domain layer - catalog entity, payloads, status enums and exceptions.

Example usage:
    from catalogsvc.domain import CatalogItem, ItemDraft, ItemPatch

    item = CatalogItem.create(draft, now=datetime.now(timezone.utc))
    updated = item.apply(ItemPatch(price=Decimal("19.99")), now=later)
"""

from catalogsvc.domain.entities import CatalogItem, ItemDraft, ItemPatch
from catalogsvc.domain.exceptions import (
    CacheEvictionError,
    CatalogItemNotFoundError,
    CatalogValidationError,
    DomainError,
    RecordConflictError,
    StoreError,
)
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus

__all__ = [
    # Entities
    "CatalogItem",
    "ItemDraft",
    "ItemPatch",
    # Value objects
    "AvailabilityStatus",
    "ComplianceStatus",
    # Exceptions
    "CacheEvictionError",
    "CatalogItemNotFoundError",
    "CatalogValidationError",
    "DomainError",
    "RecordConflictError",
    "StoreError",
]
