"""Request middleware for the catalog API.

Every request gets a correlation id bound into the structlog context. Any
exception that no registered handler claims is turned into the standard
error envelope here, so it is the single catch-all path of the app.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalogsvc.api.errors import error_response, error_status

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def request_id_of(request: Request) -> str | None:
    """Correlation id assigned to a request, if any."""
    return getattr(request.state, "request_id", None)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to the request, its log lines and its response.

    A client supplied ``X-Request-ID`` is reused; otherwise a UUID is minted.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            started = time.perf_counter()
            response: Response = await call_next(request)
            logger.info(
                "Catalog request served",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Maps exceptions that escaped the route handlers onto the error envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            status_code, error_code = error_status(e)
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
                error_code=error_code,
            )
            return JSONResponse(
                status_code=status_code,
                content=error_response(e, request_id_of(request)).model_dump(mode="json"),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the catalog middleware.

    Starlette runs the last added middleware first, so the request id is
    bound before the error middleware can render an envelope.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
