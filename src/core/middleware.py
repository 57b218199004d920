"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components: CORS for the marketing site's origins, and a request context
middleware that binds a request ID to the structured logs and records
per-endpoint request metrics.
"""

import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config.settings import settings

REQUEST_ID_HEADER = "X-Request-ID"


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key", REQUEST_ID_HEADER],
        expose_headers=["Retry-After", REQUEST_ID_HEADER],
    )

    app.middleware("http")(request_context_middleware)


async def request_context_middleware(request: Request, call_next):
    """Binds a request ID to the log context and times the request.

    An incoming ``X-Request-ID`` is reused so a proxy's ID shows up in our
    logs; otherwise a new one is generated. The ID is echoed in the response.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)

    started = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - started

    lead_capture = getattr(request.app.state, "lead_capture", None)
    if lead_capture is not None:
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        lead_capture.metrics.record_request_metric(endpoint, request.method, response.status_code, duration)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
