"""Value objects for the catalog domain.

Status enums are persisted and compared by their canonical name.
"""

from enum import Enum
from typing import Self

from catalogsvc.domain.exceptions import CatalogValidationError


class _CanonicalEnum(str, Enum):
    """String enum whose value equals its canonical name."""

    @classmethod
    def parse(cls, value: "str | Self", field: str) -> Self:
        """Coerce a canonical name or member into a member.

        Args:
            value: Member or canonical name (case-insensitive).
            field: Field name used in the validation error.

        Returns:
            Enum member.

        Raises:
            CatalogValidationError: If the value is not a known name.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        allowed = ", ".join(m.name for m in cls)
        raise CatalogValidationError.single(field, f"must be one of {allowed}")


class ComplianceStatus(_CanonicalEnum):
    """Regulatory compliance of a catalog item."""

    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"


class AvailabilityStatus(_CanonicalEnum):
    """Whether a catalog item can currently be offered."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
