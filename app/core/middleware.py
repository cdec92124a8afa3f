"""
Middleware configuration for the application.
Includes Correlation ID, request logging and the cross-origin policy.
"""

import time
from typing import Callable

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import Settings

logger = structlog.get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]
CORS_HEADERS = ["Content-Type", "Origin", "Accept", "X-Requested-With"]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log requests and responses with timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            content_type=request.headers.get("content-type"),
            client_ip=request.client.host if request.client else "unknown",
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                method=request.method,
                path=request.url.path,
                process_time_ms=round((time.time() - start_time) * 1000, 2),
            )
            raise

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Setup all middleware for the application.

    Starlette runs middleware in reverse order of registration, so the
    correlation id is bound before request logging runs and CORS wraps both.
    """
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
