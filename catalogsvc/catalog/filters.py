"""Filter criteria for catalog searches."""

from dataclasses import dataclass, fields
from decimal import Decimal
from uuid import UUID

from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus


@dataclass
class FilterCriteria:
    """Independently optional filter fields.

    Every field defaults to absent. Populated fields are AND-joined;
    ``categories`` and ``tags`` match when the item holds any of the
    listed values.

    Attributes:
        title: Case-insensitive partial match; a trailing ``*`` means prefix.
        description: Case-insensitive partial match.
        industry_id: Exact industry identifier.
        industry_name: Case-insensitive partial match.
        categories: Match if the item has ANY of these categories.
        tags: Match if the item has ANY of these tags.
        min_price: Inclusive lower price bound.
        max_price: Inclusive upper price bound.
        merchant_id: Exact merchant identifier.
        min_rating: Inclusive lower rating bound.
        max_rating: Inclusive upper rating bound.
        compliance_status: Exact compliance status.
        availability_status: Exact availability status.
    """

    title: str | None = None
    description: str | None = None
    industry_id: UUID | None = None
    industry_name: str | None = None
    categories: list[str] | None = None
    tags: list[str] | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    merchant_id: UUID | None = None
    min_rating: float | None = None
    max_rating: float | None = None
    compliance_status: ComplianceStatus | None = None
    availability_status: AvailabilityStatus | None = None

    def is_empty(self) -> bool:
        """Check whether no field would contribute a clause.

        Blank strings and empty lists count as absent.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, str) and not value.replace("*", "").strip():
                continue
            if isinstance(value, list) and not value:
                continue
            return False
        return True
