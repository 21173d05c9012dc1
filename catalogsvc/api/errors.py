"""Mapping of domain errors onto HTTP responses."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from catalogsvc.api.schemas import ErrorDetail, ErrorResponse
from catalogsvc.domain.exceptions import (
    CatalogItemNotFoundError,
    CatalogValidationError,
    DomainError,
    RecordConflictError,
    StoreError,
)

logger = structlog.get_logger()


def error_status(exc: Exception) -> tuple[int, str]:
    """Get HTTP status and error code for an exception.

    Args:
        exc: Raised exception.

    Returns:
        Tuple of (status code, error code).
    """
    if isinstance(exc, CatalogItemNotFoundError):
        return status.HTTP_404_NOT_FOUND, "CATALOG_ITEM_NOT_FOUND"
    if isinstance(exc, CatalogValidationError):
        return status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"
    if isinstance(exc, RecordConflictError):
        return status.HTTP_409_CONFLICT, "CONFLICT"
    if isinstance(exc, StoreError):
        return status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_UNAVAILABLE"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR"


def error_response(exc: Exception, request_id: str | None = None) -> ErrorResponse:
    """Build the error envelope for an exception.

    Unexpected exceptions never leak their message.
    """
    _, error_code = error_status(exc)
    if isinstance(exc, CatalogValidationError):
        details = [ErrorDetail(field=e["field"], message=e["reason"]) for e in exc.errors]
        return ErrorResponse(
            error_code=error_code, message=exc.message, details=details, request_id=request_id
        )
    if isinstance(exc, DomainError):
        return ErrorResponse(error_code=error_code, message=exc.message, request_id=request_id)
    return ErrorResponse(
        error_code=error_code, message="An internal error occurred", request_id=request_id
    )


# ============================================================================
# Exception Handlers
# ============================================================================


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle domain errors with consistent format."""
    request_id = getattr(request.state, "request_id", None)
    status_code, error_code = error_status(exc)

    log = logger.error if status_code >= 500 else logger.info
    log(
        "Domain error",
        path=request.url.path,
        method=request.method,
        error_code=error_code,
        error=exc.message,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response(exc, request_id).model_dump(mode="json"),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests as validation failures."""
    request_id = getattr(request.state, "request_id", None)
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body") or None,
            message=error.get("msg", "invalid value"),
        )
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
    else:
        error_code = "ERROR"
        message = str(detail)

    body = ErrorResponse(error_code=error_code, message=message, request_id=request_id)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the typed exception handlers.

    Anything else is rendered by ``ErrorHandlerMiddleware``.
    """
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
