"""API schemas for the catalog record service.

Pydantic models for request/response validation and serialization.
Field ranges are enforced by the domain entity, so request schemas only
describe shapes; the internal record key is never serialized.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Catalog Item Schemas
# ============================================================================


class CatalogItemCreateRequest(BaseModel):
    """Request to create a catalog item."""

    title: str = Field(..., description="Item title (3-255 characters)")
    description: str = Field(..., description="Item description (10-4000 characters)")
    industry_id: UUID = Field(..., description="Industry identifier")
    industry_name: str = Field(..., description="Industry name")
    categories: list[str] = Field(default_factory=list, description="Category names")
    tags: list[str] = Field(default_factory=list, description="Tag names")
    price: Decimal = Field(..., description="Non-negative price")
    merchant_id: UUID = Field(..., description="Merchant identifier")
    rating: float = Field(..., description="Rating between 0.0 and 5.0")
    compliance_status: str = Field(..., description="COMPLIANT or NON_COMPLIANT")
    availability_status: str = Field(..., description="AVAILABLE or UNAVAILABLE")


class CatalogItemUpdateRequest(BaseModel):
    """Partial update of a catalog item.

    Omitted fields keep their stored values. ``public_id`` is only read by
    the batch update endpoint, to identify each target.
    """

    public_id: UUID | None = Field(default=None, description="Target item (batch only)")
    title: str | None = None
    description: str | None = None
    industry_id: UUID | None = None
    industry_name: str | None = None
    categories: list[str] | None = None
    tags: list[str] | None = None
    price: Decimal | None = None
    merchant_id: UUID | None = None
    rating: float | None = None
    compliance_status: str | None = None
    availability_status: str | None = None


class CatalogItemResponse(BaseModel):
    """A catalog item as exposed by the API."""

    public_id: UUID = Field(..., description="Public item identifier")
    title: str
    description: str
    industry_id: UUID
    industry_name: str
    categories: list[str]
    tags: list[str]
    price: Decimal
    merchant_id: UUID
    rating: float
    compliance_status: str
    availability_status: str
    created_on: datetime | None = Field(default=None, description="When the item was created")
    updated_on: datetime | None = Field(default=None, description="When the item was last updated")


class CatalogPageResponse(BaseModel):
    """One page of catalog items with totals."""

    content: list[CatalogItemResponse] = Field(..., description="Items on this page")
    page: int = Field(..., description="Zero-based page index")
    size: int = Field(..., description="Requested page size")
    total_elements: int = Field(..., description="Total matching items")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_previous: bool = Field(..., description="Whether there is a previous page")


# ============================================================================
# Batch Schemas
# ============================================================================


class BatchItemResponse(BaseModel):
    """Outcome of one element of a batch request."""

    index: int = Field(..., description="Position of the element in the request")
    success: bool
    item: CatalogItemResponse | None = Field(default=None, description="Resulting item")
    error: ErrorResponse | None = Field(default=None, description="Why the element failed")


class BatchResponse(BaseModel):
    """Per-element outcomes of a batch request."""

    results: list[BatchItemResponse]
    succeeded: int = Field(..., description="Number of successful elements")
    failed: int = Field(..., description="Number of failed elements")
