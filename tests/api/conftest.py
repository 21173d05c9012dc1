"""Shared fixtures for API tests."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from catalogsvc.catalog.service import reset_catalog_service
from catalogsvc.main import app


@pytest.fixture(autouse=True)
def fresh_service() -> Iterator[None]:
    """Give every test its own catalog service and clear overrides."""
    reset_catalog_service()
    yield
    app.dependency_overrides.clear()
    reset_catalog_service()


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def item_payload() -> dict[str, Any]:
    """Valid create request body."""
    return {
        "title": "Standing Desk",
        "description": "Height adjustable standing desk with memory presets",
        "industry_id": "11111111-1111-4111-8111-111111111111",
        "industry_name": "Furniture",
        "categories": ["Office"],
        "tags": ["new"],
        "price": 199.0,
        "merchant_id": "33333333-3333-4333-8333-333333333333",
        "rating": 4.5,
        "compliance_status": "COMPLIANT",
        "availability_status": "AVAILABLE",
    }
