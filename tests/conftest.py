"""Shared fixtures for catalog tests."""

from collections.abc import Callable
from decimal import Decimal
from typing import Any
from uuid import UUID

import pytest

from catalogsvc.domain.entities import ItemDraft
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus

FURNITURE_INDUSTRY = UUID("11111111-1111-4111-8111-111111111111")
GARDEN_INDUSTRY = UUID("22222222-2222-4222-8222-222222222222")
MERCHANT = UUID("33333333-3333-4333-8333-333333333333")


def build_draft(**overrides: Any) -> ItemDraft:
    """Build a valid draft, overriding selected fields."""
    values: dict[str, Any] = {
        "title": "Standing Desk",
        "description": "Height adjustable standing desk with memory presets",
        "industry_id": FURNITURE_INDUSTRY,
        "industry_name": "Furniture",
        "categories": ["Office"],
        "tags": ["new"],
        "price": Decimal("199.00"),
        "merchant_id": MERCHANT,
        "rating": 4.5,
        "compliance_status": ComplianceStatus.COMPLIANT,
        "availability_status": AvailabilityStatus.AVAILABLE,
    }
    values.update(overrides)
    return ItemDraft(**values)


@pytest.fixture
def make_draft() -> Callable[..., ItemDraft]:
    """Factory for valid drafts."""
    return build_draft
