"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from catalogsvc.api.catalogs import router as catalogs_router
from catalogsvc.api.health import router as health_router

__all__ = [
    "catalogs_router",
    "health_router",
]
