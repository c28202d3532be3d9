"""Middleware registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from slp.config import Settings
from slp.middleware.error_handler import setup_error_handlers
from slp.middleware.logging import setup_logging
from slp.middleware.request_id import REQUEST_ID_HEADER, RequestIdMiddleware
from slp.middleware.timeout import RequestTimeoutMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and the middleware stack.

    Starlette runs middleware in reverse-add order (last added = outermost).
    The timeout sits inside the request ID so 504 responses still carry
    X-Request-Id, and CORS is outermost so it decorates every response.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
