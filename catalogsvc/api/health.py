"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalogsvc.infrastructure.config import settings

router = APIRouter()
logger = structlog.get_logger()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="catalog-record-service",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Check if service is ready to accept requests.

    The in-memory store is always ready; the SQL store must answer a
    trivial query.

    Returns:
        Readiness status, 503 when the database is unreachable.
    """
    if settings.store_backend == "sql":
        from catalogsvc.infrastructure.database import check_connection

        try:
            await check_connection()
        except Exception as e:
            logger.warning("Readiness check failed", error=str(e))
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable", "store_backend": settings.store_backend},
            )

    return JSONResponse(content={"status": "ready", "store_backend": settings.store_backend})
