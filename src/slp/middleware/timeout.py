"""Per-request deadline: a stalled handler is cancelled and answered with 504.

Written as plain ASGI middleware so that expiry cancels the downstream app
itself rather than only the wait for its response.
"""

import asyncio

import structlog
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()


class RequestTimeoutMiddleware:
    """Cancel HTTP requests that run longer than ``timeout_seconds``."""

    def __init__(self, app: ASGIApp, timeout_seconds: float = 15.0) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def send_tracking(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_tracking), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "request_timeout",
                path=scope.get("path"),
                method=scope.get("method"),
                timeout_seconds=self.timeout_seconds,
            )
            # Headers already went out; nothing valid can follow them.
            if started:
                raise
            response = JSONResponse(status_code=504, content={"detail": "Request timed out"})
            await response(scope, receive, send)
