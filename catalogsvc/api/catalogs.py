"""Catalog API endpoints.

Provides CRUD, batch, search and filter endpoints for catalog items.
Fixed paths are declared before ``/{public_id}`` so they are never
captured by the identifier route.
"""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from catalogsvc.api.errors import error_response
from catalogsvc.api.schemas import (
    BatchItemResponse,
    BatchResponse,
    CatalogItemCreateRequest,
    CatalogItemResponse,
    CatalogItemUpdateRequest,
    CatalogPageResponse,
    ErrorResponse,
)
from catalogsvc.catalog.filters import FilterCriteria
from catalogsvc.catalog.paging import DEFAULT_PAGE_SIZE, PageResult, PageSpec
from catalogsvc.catalog.service import BatchItemResult, CatalogService, get_catalog_service
from catalogsvc.domain.entities import CatalogItem, ItemDraft, ItemPatch
from catalogsvc.domain.value_objects import AvailabilityStatus, ComplianceStatus

router = APIRouter(prefix="/api/v1/catalogs", tags=["Catalogs"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}
LOOKUP_RESPONSES = {
    **ERROR_RESPONSES,
    404: {"model": ErrorResponse},
}


# ============================================================================
# Dependencies
# ============================================================================


def get_service() -> CatalogService:
    """Get the catalog service."""
    return get_catalog_service()


def page_params(
    page: Annotated[int, Query(description="Zero-based page index")] = 0,
    size: Annotated[int, Query(description="Page size")] = DEFAULT_PAGE_SIZE,
    sort: Annotated[str | None, Query(description="Comma-separated sort fields")] = None,
    direction: Annotated[str | None, Query(description="asc or desc")] = None,
) -> PageSpec:
    """Build a page spec from query parameters."""
    return PageSpec.from_params(page=page, size=size, sort=sort, direction=direction)


def filter_params(
    title: str | None = None,
    description: str | None = None,
    industry_id: UUID | None = None,
    industry_name: str | None = None,
    categories: Annotated[list[str] | None, Query()] = None,
    tags: Annotated[list[str] | None, Query()] = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    merchant_id: UUID | None = None,
    min_rating: float | None = None,
    max_rating: float | None = None,
    compliance_status: str | None = None,
    availability_status: str | None = None,
) -> FilterCriteria:
    """Build filter criteria from query parameters."""
    return FilterCriteria(
        title=title,
        description=description,
        industry_id=industry_id,
        industry_name=industry_name,
        categories=categories,
        tags=tags,
        min_price=min_price,
        max_price=max_price,
        merchant_id=merchant_id,
        min_rating=min_rating,
        max_rating=max_rating,
        compliance_status=(
            ComplianceStatus.parse(compliance_status, "compliance_status")
            if compliance_status
            else None
        ),
        availability_status=(
            AvailabilityStatus.parse(availability_status, "availability_status")
            if availability_status
            else None
        ),
    )


Service = Annotated[CatalogService, Depends(get_service)]
Page = Annotated[PageSpec, Depends(page_params)]
Criteria = Annotated[FilterCriteria, Depends(filter_params)]


# ============================================================================
# Converters
# ============================================================================


def item_to_response(item: CatalogItem) -> CatalogItemResponse:
    """Convert CatalogItem entity to response schema."""
    return CatalogItemResponse(
        public_id=item.public_id,
        title=item.title,
        description=item.description,
        industry_id=item.industry_id,
        industry_name=item.industry_name,
        categories=list(item.categories),
        tags=list(item.tags),
        price=item.price,
        merchant_id=item.merchant_id,
        rating=item.rating,
        compliance_status=item.compliance_status.name,
        availability_status=item.availability_status.name,
        created_on=item.created_on,
        updated_on=item.updated_on,
    )


def page_to_response(result: PageResult[CatalogItem]) -> CatalogPageResponse:
    """Convert PageResult to response schema."""
    return CatalogPageResponse(
        content=[item_to_response(item) for item in result.content],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
        has_next=result.has_next,
        has_previous=result.has_previous,
    )


def request_to_draft(body: CatalogItemCreateRequest) -> ItemDraft:
    """Convert create request to a domain draft."""
    return ItemDraft(
        title=body.title,
        description=body.description,
        industry_id=body.industry_id,
        industry_name=body.industry_name,
        categories=body.categories,
        tags=body.tags,
        price=body.price,
        merchant_id=body.merchant_id,
        rating=body.rating,
        compliance_status=body.compliance_status,  # type: ignore[arg-type]
        availability_status=body.availability_status,  # type: ignore[arg-type]
    )


def request_to_patch(body: CatalogItemUpdateRequest) -> ItemPatch:
    """Convert update request to a domain patch."""
    return ItemPatch(**body.model_dump())


def batch_to_response(
    results: list[BatchItemResult], request: Request
) -> BatchResponse:
    """Convert batch results to response schema."""
    request_id = getattr(request.state, "request_id", None)
    items = [
        BatchItemResponse(
            index=r.index,
            success=r.success,
            item=item_to_response(r.value) if r.success and r.value is not None else None,
            error=error_response(r.error, request_id) if r.error is not None else None,
        )
        for r in results
    ]
    succeeded = sum(1 for r in results if r.success)
    return BatchResponse(results=items, succeeded=succeeded, failed=len(results) - succeeded)


# ============================================================================
# Listing, Search and Filter Endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[CatalogItemResponse],
    responses=ERROR_RESPONSES,
    summary="List catalog items",
)
async def list_catalog_items(service: Service, page: Page) -> list[CatalogItemResponse]:
    """List catalog items without filtering.

    Served from the all-items cache; ordering and paging apply to the
    cached listing.
    """
    items = await service.list_all(page)
    return [item_to_response(item) for item in items]


@router.get(
    "/search/title/{title}",
    response_model=list[CatalogItemResponse],
    responses=ERROR_RESPONSES,
    summary="Search catalog items by title",
)
async def search_by_title(title: str, service: Service) -> list[CatalogItemResponse]:
    """Find items whose title contains the text, ignoring case."""
    items = await service.find_by_title(title)
    return [item_to_response(item) for item in items]


@router.get(
    "/search/industry/{industry_id}",
    response_model=list[CatalogItemResponse],
    responses=ERROR_RESPONSES,
    summary="List catalog items of an industry",
)
async def search_by_industry(industry_id: UUID, service: Service) -> list[CatalogItemResponse]:
    """Get every item of an industry."""
    items = await service.find_by_industry(industry_id)
    return [item_to_response(item) for item in items]


@router.get(
    "/filter",
    response_model=list[CatalogItemResponse],
    responses=ERROR_RESPONSES,
    summary="Filter catalog items",
    description="Every supplied criterion must match; categories and tags match any listed value.",
)
async def filter_catalog_items(
    service: Service, criteria: Criteria, page: Page
) -> list[CatalogItemResponse]:
    """Filter catalog items, one page at a time."""
    items = await service.filter(criteria, page)
    return [item_to_response(item) for item in items]


@router.get(
    "/filter/paged",
    response_model=CatalogPageResponse,
    responses=ERROR_RESPONSES,
    summary="Filter catalog items with totals",
)
async def filter_catalog_items_paged(
    service: Service, criteria: Criteria, page: Page
) -> CatalogPageResponse:
    """Filter catalog items and report the total for the same criteria."""
    result = await service.filter_paged(criteria, page)
    return page_to_response(result)


# ============================================================================
# Batch Endpoints
# ============================================================================


@router.post(
    "/batch",
    response_model=BatchResponse,
    responses=ERROR_RESPONSES,
    summary="Create catalog items in batch",
)
async def create_catalog_items(
    body: list[CatalogItemCreateRequest], request: Request, service: Service
) -> BatchResponse:
    """Create several items; each element succeeds or fails on its own."""
    results = await service.create_batch([request_to_draft(b) for b in body])
    return batch_to_response(results, request)


@router.put(
    "/batch",
    response_model=BatchResponse,
    responses=ERROR_RESPONSES,
    summary="Update catalog items in batch",
)
async def update_catalog_items(
    body: list[CatalogItemUpdateRequest], request: Request, service: Service
) -> BatchResponse:
    """Update several items, each identified by its ``public_id``."""
    results = await service.update_batch([request_to_patch(b) for b in body])
    return batch_to_response(results, request)


@router.delete(
    "/batch",
    response_model=BatchResponse,
    responses=ERROR_RESPONSES,
    summary="Delete catalog items in batch",
)
async def delete_catalog_items(
    ids: Annotated[list[UUID], Query(description="Public ids to delete")],
    request: Request,
    service: Service,
) -> BatchResponse:
    """Delete several items; unknown ids fail individually."""
    results = await service.delete_batch(ids)
    return batch_to_response(results, request)


# ============================================================================
# Single Item Endpoints
# ============================================================================


@router.post(
    "",
    response_model=CatalogItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
    summary="Create a catalog item",
)
async def create_catalog_item(
    body: CatalogItemCreateRequest, service: Service
) -> CatalogItemResponse:
    """Create a catalog item.

    The public id and both timestamps are assigned by the service.

    Args:
        body: Item attributes.
        service: Catalog service.

    Returns:
        The created item.
    """
    item = await service.create(request_to_draft(body))
    return item_to_response(item)


@router.get(
    "/{public_id}",
    response_model=CatalogItemResponse,
    responses=LOOKUP_RESPONSES,
    summary="Get a catalog item",
)
async def get_catalog_item(public_id: UUID, service: Service) -> CatalogItemResponse:
    """Get a catalog item by public id.

    Raises:
        CatalogItemNotFoundError: Mapped to 404.
    """
    item = await service.find_by_public_id(public_id)
    return item_to_response(item)


@router.put(
    "/{public_id}",
    response_model=CatalogItemResponse,
    responses=LOOKUP_RESPONSES,
    summary="Update a catalog item",
    description="Partial update: omitted fields keep their stored values.",
)
async def update_catalog_item(
    public_id: UUID, body: CatalogItemUpdateRequest, service: Service
) -> CatalogItemResponse:
    """Update a catalog item; the path id wins over any id in the body."""
    item = await service.update(public_id, request_to_patch(body))
    return item_to_response(item)


@router.delete(
    "/{public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=LOOKUP_RESPONSES,
    summary="Delete a catalog item",
)
async def delete_catalog_item(public_id: UUID, service: Service) -> Response:
    """Delete a catalog item."""
    await service.delete(public_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
