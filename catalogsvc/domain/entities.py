"""Domain entities for the catalog service.

CatalogItem is the single aggregate. It is immutable: every mutation
produces a new instance, and collection fields are copied into tuples
on construction so callers cannot alter stored state through a list
they still hold.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID, uuid4

from catalogsvc.domain.exceptions import CatalogValidationError
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 255
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 4000
RATING_MIN = 0.0
RATING_MAX = 5.0
PRICE_SCALE = 2


# ============================================================================
# Field Coercion
# ============================================================================


class _FieldChecker:
    """Collects every field violation so they are reported together."""

    def __init__(self) -> None:
        self.errors: list[dict[str, str]] = []

    def fail(self, name: str, reason: str) -> None:
        self.errors.append({"field": name, "reason": reason})

    def text(self, name: str, value: Any, min_length: int = 1, max_length: int | None = None) -> Any:
        if not isinstance(value, str) or not value.strip():
            self.fail(name, "must not be blank")
            return value
        if len(value) < min_length or (max_length is not None and len(value) > max_length):
            upper = max_length if max_length is not None else "unbounded"
            self.fail(name, f"length must be between {min_length} and {upper}")
        return value

    def uuid(self, name: str, value: Any) -> Any:
        if isinstance(value, UUID):
            return value
        if isinstance(value, str):
            try:
                return UUID(value)
            except ValueError:
                pass
        self.fail(name, "must be a UUID")
        return value

    def strings(self, name: str, value: Any) -> Any:
        if value is None or isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            self.fail(name, "must be a list of strings")
            return value
        copied = tuple(value)
        if not all(isinstance(v, str) for v in copied):
            self.fail(name, "must contain only strings")
        return copied

    def price(self, name: str, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            self.fail(name, "is required")
            return value
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except (InvalidOperation, ValueError):
            self.fail(name, "must be a decimal number")
            return value
        if not amount.is_finite() or amount < 0:
            self.fail(name, "must be a non-negative number")
        elif amount.as_tuple().exponent < -PRICE_SCALE:
            self.fail(name, f"must have at most {PRICE_SCALE} decimal places")
        return amount

    def rating(self, name: str, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            self.fail(name, "is required")
            return value
        try:
            score = float(value)
        except (TypeError, ValueError):
            self.fail(name, "must be a number")
            return value
        if not RATING_MIN <= score <= RATING_MAX:
            self.fail(name, f"must be between {RATING_MIN} and {RATING_MAX}")
        return score

    def status(self, name: str, value: Any, enum_type: type) -> Any:
        if value is None:
            self.fail(name, "is required")
            return value
        try:
            return enum_type.parse(value, name)
        except CatalogValidationError as e:
            self.errors.extend(e.errors)
            return value


# ============================================================================
# Payloads
# ============================================================================


@dataclass
class ItemDraft:
    """Create payload: every mandatory attribute, no system-managed fields."""

    title: str
    description: str
    industry_id: UUID
    industry_name: str
    categories: list[str]
    tags: list[str]
    price: Decimal
    merchant_id: UUID
    rating: float
    compliance_status: ComplianceStatus
    availability_status: AvailabilityStatus


@dataclass
class ItemPatch:
    """Partial update payload.

    A field left as None keeps the stored value. ``public_id`` only
    identifies the target in batch updates; it never changes identity.
    """

    public_id: UUID | None = None
    title: str | None = None
    description: str | None = None
    industry_id: UUID | None = None
    industry_name: str | None = None
    categories: list[str] | None = None
    tags: list[str] | None = None
    price: Decimal | None = None
    merchant_id: UUID | None = None
    rating: float | None = None
    compliance_status: ComplianceStatus | None = None
    availability_status: AvailabilityStatus | None = None

    def supplied(self) -> dict[str, Any]:
        """Return the content fields explicitly supplied in this patch."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "public_id" and getattr(self, f.name) is not None
        }


# ============================================================================
# Catalog Item
# ============================================================================


@dataclass(frozen=True)
class CatalogItem:
    """A catalog record.

    Attributes:
        id: Internal sequential key assigned by the store; never exposed.
        public_id: Externally stable identifier, fixed at creation.
        title: Item title (3-255 chars).
        description: Item description (10-4000 chars).
        industry_id: Owning industry identifier.
        industry_name: Owning industry name.
        categories: Category names, copied into a tuple.
        tags: Tag names, copied into a tuple.
        price: Non-negative decimal price.
        merchant_id: Merchant selling the item.
        rating: Rating between 0.0 and 5.0 inclusive.
        compliance_status: Compliance status.
        availability_status: Availability status.
        created_on: Creation instant, never changed after creation.
        updated_on: Instant of the last successful mutation.
    """

    public_id: UUID
    title: str
    description: str
    industry_id: UUID
    industry_name: str
    categories: tuple[str, ...]
    tags: tuple[str, ...]
    price: Decimal
    merchant_id: UUID
    rating: float
    compliance_status: ComplianceStatus
    availability_status: AvailabilityStatus
    id: int | None = None
    created_on: datetime | None = field(default=None)
    updated_on: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        check = _FieldChecker()
        coerced = {
            "public_id": check.uuid("public_id", self.public_id),
            "title": check.text("title", self.title, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH),
            "description": check.text(
                "description", self.description, DESCRIPTION_MIN_LENGTH, DESCRIPTION_MAX_LENGTH
            ),
            "industry_id": check.uuid("industry_id", self.industry_id),
            "industry_name": check.text("industry_name", self.industry_name),
            "categories": check.strings("categories", self.categories),
            "tags": check.strings("tags", self.tags),
            "price": check.price("price", self.price),
            "merchant_id": check.uuid("merchant_id", self.merchant_id),
            "rating": check.rating("rating", self.rating),
            "compliance_status": check.status(
                "compliance_status", self.compliance_status, ComplianceStatus
            ),
            "availability_status": check.status(
                "availability_status", self.availability_status, AvailabilityStatus
            ),
        }
        if check.errors:
            raise CatalogValidationError(check.errors)
        for name, value in coerced.items():
            object.__setattr__(self, name, value)

    @classmethod
    def create(cls, draft: ItemDraft, now: datetime) -> "CatalogItem":
        """Build a new, unsaved item from a create payload.

        Args:
            draft: Create payload.
            now: Creation instant, used for both timestamps.

        Returns:
            CatalogItem with a fresh public id and no internal key.

        Raises:
            CatalogValidationError: If any field is invalid.
        """
        return cls(
            public_id=uuid4(),
            title=draft.title,
            description=draft.description,
            industry_id=draft.industry_id,
            industry_name=draft.industry_name,
            categories=draft.categories,
            tags=draft.tags,
            price=draft.price,
            merchant_id=draft.merchant_id,
            rating=draft.rating,
            compliance_status=draft.compliance_status,
            availability_status=draft.availability_status,
            created_on=now,
            updated_on=now,
        )

    def apply(self, patch: ItemPatch, now: datetime) -> "CatalogItem":
        """Merge a partial update field by field.

        Internal key, public id and creation timestamp are preserved
        whatever the patch contains.

        Args:
            patch: Fields to override.
            now: Update instant.

        Returns:
            New CatalogItem with merged values.

        Raises:
            CatalogValidationError: If a supplied value is invalid.
        """
        return replace(self, **patch.supplied(), updated_on=now)

    def with_key(self, key: int) -> "CatalogItem":
        """Return a copy carrying the store-assigned internal key."""
        return replace(self, id=key)
