"""Tests for catalog API endpoints."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from catalogsvc.api.catalogs import get_service
from catalogsvc.catalog.service import CatalogService
from catalogsvc.catalog.store import InMemoryRecordStore
from catalogsvc.domain.exceptions import RecordConflictError, StoreError
from catalogsvc.main import app

BASE = "/api/v1/catalogs"


def create(client: TestClient, payload: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    response = client.post(BASE, json={**payload, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def override_store(store: InMemoryRecordStore) -> None:
    app.dependency_overrides[get_service] = lambda: CatalogService(store)


class TestCreateAndGet:
    """Tests for creating and reading single items."""

    def test_create_returns_item(self, client: TestClient, item_payload: dict) -> None:
        """Created items get a public id and equal timestamps."""
        data = create(client, item_payload)

        assert data["title"] == "Standing Desk"
        assert Decimal(data["price"]) == Decimal("199")
        assert data["created_on"] == data["updated_on"]
        assert data["compliance_status"] == "COMPLIANT"
        assert "id" not in data

    def test_get_by_public_id(self, client: TestClient, item_payload: dict) -> None:
        created = create(client, item_payload)

        response = client.get(f"{BASE}/{created['public_id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_returns_404(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/{uuid4()}")

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "CATALOG_ITEM_NOT_FOUND"
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_malformed_public_id_returns_400(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_invalid_values_listed(self, client: TestClient, item_payload: dict) -> None:
        """Every out-of-range field is reported."""
        response = client.post(BASE, json={**item_payload, "title": "ab", "rating": 9})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert {d["field"] for d in data["details"]} == {"title", "rating"}

    def test_missing_field_returns_400(self, client: TestClient, item_payload: dict) -> None:
        payload = dict(item_payload)
        del payload["merchant_id"]

        response = client.post(BASE, json=payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_price_beyond_cents_returns_400(self, client: TestClient, item_payload: dict) -> None:
        """Prices that the store would round are refused up front."""
        response = client.post(BASE, json={**item_payload, "price": "10.005"})

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "price"

    def test_unknown_status_returns_400(self, client: TestClient, item_payload: dict) -> None:
        response = client.post(BASE, json={**item_payload, "availability_status": "SOON"})
        assert response.status_code == 400


class TestUpdateAndDelete:
    """Tests for update and delete endpoints."""

    def test_partial_update(self, client: TestClient, item_payload: dict) -> None:
        """Omitted fields keep their values."""
        created = create(client, item_payload)

        response = client.put(f"{BASE}/{created['public_id']}", json={"title": "Corner Desk"})

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Corner Desk"
        assert data["rating"] == created["rating"]
        assert data["created_on"] == created["created_on"]

    def test_update_visible_after_cached_read(self, client: TestClient, item_payload: dict) -> None:
        created = create(client, item_payload)
        client.get(f"{BASE}/{created['public_id']}")

        client.put(f"{BASE}/{created['public_id']}", json={"price": 150})

        data = client.get(f"{BASE}/{created['public_id']}").json()
        assert Decimal(data["price"]) == Decimal("150")

    def test_update_unknown_returns_404(self, client: TestClient) -> None:
        response = client.put(f"{BASE}/{uuid4()}", json={"title": "Corner Desk"})
        assert response.status_code == 404

    def test_delete(self, client: TestClient, item_payload: dict) -> None:
        created = create(client, item_payload)

        response = client.delete(f"{BASE}/{created['public_id']}")

        assert response.status_code == 204
        assert client.get(f"{BASE}/{created['public_id']}").status_code == 404

    def test_delete_unknown_returns_404(self, client: TestClient) -> None:
        assert client.delete(f"{BASE}/{uuid4()}").status_code == 404


class TestBatchEndpoints:
    """Tests for batch endpoints."""

    def test_batch_create_isolates_failures(self, client: TestClient, item_payload: dict) -> None:
        response = client.post(
            f"{BASE}/batch",
            json=[item_payload, {**item_payload, "rating": 7}, item_payload],
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["succeeded"], data["failed"]) == (2, 1)
        assert data["results"][1]["success"] is False
        assert data["results"][1]["error"]["error_code"] == "VALIDATION_ERROR"
        assert data["results"][0]["item"]["title"] == "Standing Desk"

    def test_batch_update_requires_public_id(self, client: TestClient, item_payload: dict) -> None:
        first = create(client, item_payload)
        second = create(client, item_payload)

        response = client.put(
            f"{BASE}/batch",
            json=[
                {"public_id": first["public_id"], "title": "First Desk"},
                {"title": "Nobody"},
                {"public_id": second["public_id"], "title": "Second Desk"},
            ],
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["success"] for r in results] == [True, False, True]
        assert results[1]["error"]["details"][0]["field"] == "public_id"

    def test_batch_delete(self, client: TestClient, item_payload: dict) -> None:
        created = create(client, item_payload)

        response = client.delete(
            f"{BASE}/batch", params=[("ids", created["public_id"]), ("ids", str(uuid4()))]
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["succeeded"], data["failed"]) == (1, 1)
        assert data["results"][1]["error"]["error_code"] == "CATALOG_ITEM_NOT_FOUND"


class TestListingAndSearch:
    """Tests for listing, search and filter endpoints."""

    @pytest.fixture
    def seeded(self, client: TestClient, item_payload: dict) -> list[dict]:
        return [
            create(client, item_payload, title="Oak Desk", price=10, categories=["Office"]),
            create(client, item_payload, title="Pine Desk", price=50, categories=["Office", "Home"]),
            create(
                client,
                item_payload,
                title="Garden Hose",
                price=100,
                categories=["Garden"],
                industry_id="22222222-2222-4222-8222-222222222222",
                industry_name="Garden",
            ),
        ]

    def test_list_with_sort_and_page(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(BASE, params={"size": 2, "sort": "price", "direction": "desc"})

        assert response.status_code == 200
        assert [i["title"] for i in response.json()] == ["Garden Hose", "Pine Desk"]

    def test_invalid_sort_field_returns_400(self, client: TestClient) -> None:
        response = client.get(BASE, params={"sort": "publicId"})
        assert response.status_code == 400

    def test_search_by_title(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(f"{BASE}/search/title/desk")
        assert {i["title"] for i in response.json()} == {"Oak Desk", "Pine Desk"}

    def test_search_by_industry(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(f"{BASE}/search/industry/22222222-2222-4222-8222-222222222222")
        assert [i["title"] for i in response.json()] == ["Garden Hose"]

    def test_filter_price_range(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(f"{BASE}/filter", params={"min_price": 20, "max_price": 100})
        assert {i["title"] for i in response.json()} == {"Pine Desk", "Garden Hose"}

    def test_filter_categories_any_of(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(
            f"{BASE}/filter", params=[("categories", "Home"), ("categories", "Garden")]
        )
        assert {i["title"] for i in response.json()} == {"Pine Desk", "Garden Hose"}

    def test_filter_paged_reports_totals(self, client: TestClient, seeded: list[dict]) -> None:
        response = client.get(
            f"{BASE}/filter/paged",
            params={"title": "desk", "size": 1, "page": 0, "sort": "title"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_elements"] == 2
        assert data["total_pages"] == 2
        assert data["has_next"] is True
        assert [i["title"] for i in data["content"]] == ["Oak Desk"]

    def test_filter_unknown_status_returns_400(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/filter", params={"compliance_status": "MAYBE"})
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "compliance_status"


class TestErrorMapping:
    """Tests for mapping store failures onto HTTP statuses."""

    def test_store_failure_returns_503(self, client: TestClient) -> None:
        store = InMemoryRecordStore()
        store.scan = AsyncMock(side_effect=StoreError("connection refused"))
        override_store(store)

        response = client.get(BASE)

        assert response.status_code == 503
        assert response.json()["error_code"] == "STORE_UNAVAILABLE"

    def test_conflict_returns_409(self, client: TestClient, item_payload: dict) -> None:
        store = InMemoryRecordStore()
        store.save = AsyncMock(side_effect=RecordConflictError("duplicate public id"))
        override_store(store)

        response = client.post(BASE, json=item_payload)

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"
