"""Catalog record service main application module.

This module initializes the FastAPI application and configures
logging, middleware, exception handlers, routers and startup/shutdown
events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalogsvc.api.catalogs import router as catalogs_router
from catalogsvc.api.errors import setup_exception_handlers
from catalogsvc.api.health import router as health_router
from catalogsvc.api.middleware import setup_middleware
from catalogsvc.catalog.generator import GeneratorConfig
from catalogsvc.catalog.service import get_catalog_service
from catalogsvc.infrastructure.config import settings
from catalogsvc.infrastructure.logging import configure_logging

configure_logging(settings.log_level)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting catalog record service",
        version=settings.api_version,
        debug=settings.debug,
        store_backend=settings.store_backend,
    )

    if settings.seed_sample_data:
        summary = await get_catalog_service().initialize_sample_data(
            GeneratorConfig(item_count=settings.sample_data_count)
        )
        logger.info("Sample data check complete", **summary)

    yield

    # Shutdown
    logger.info("Shutting down catalog record service")
    if settings.store_backend == "sql":
        from catalogsvc.infrastructure.database import engine

        await engine.dispose()


app = FastAPI(
    title="Catalog Record Service",
    description="Catalog items with filtering, paging and read-through caching",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Domain errors -> HTTP status and error envelope
setup_exception_handlers(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(catalogs_router)
