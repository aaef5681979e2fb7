"""Pure ASGI middleware – latency budget and request body size limit.

Avoids BaseHTTPMiddleware limitations with streaming responses and
background tasks.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from docrelay.domain.exceptions import LatencyBudgetExceeded

logger = logging.getLogger(__name__)


_EXEMPT_PATHS = {"/health"}


async def send_json_error(
    send: Send,
    status: int,
    message: str,
    extra_headers: list[tuple[bytes, bytes]] | None = None,
) -> None:
    """Send a complete ``{"error": message}`` JSON response."""
    body = json.dumps({"error": message}).encode()
    headers = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
    ]
    headers.extend(extra_headers or [])
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})


class LatencyBudgetMiddleware:
    """Cancel and reject requests that exceed the configured latency budget.

    Adds an ``x-latency-ms`` header to every response it lets through.
    """

    def __init__(self, app: ASGIApp, budget_seconds: float = 90.0) -> None:
        self.app = app
        self._budget = budget_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "").rstrip("/")
        if path in _EXEMPT_PATHS:
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        response_started = False

        async def send_with_latency(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                elapsed_ms = (time.perf_counter() - start) * 1000
                headers = list(message.get("headers", []))
                headers.append((b"x-latency-ms", f"{elapsed_ms:.0f}".encode()))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_with_latency),
                timeout=self._budget,
            )
        except TimeoutError:
            elapsed = time.perf_counter() - start
            exc = LatencyBudgetExceeded(elapsed, self._budget)
            logger.warning(
                "Latency budget exceeded: %.2fs > %.2fs for %s",
                elapsed,
                self._budget,
                path,
            )
            if not response_started:
                await send_json_error(
                    send,
                    504,
                    str(exc),
                    [(b"x-latency-ms", f"{elapsed * 1000:.0f}".encode())],
                )


class BodySizeLimitMiddleware:
    """Reject requests whose declared ``content-length`` exceeds ``max_bytes``."""

    def __init__(self, app: ASGIApp, max_bytes: int) -> None:
        self.app = app
        self._max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for name, value in scope.get("headers", []):
            if name == b"content-length" and value.isdigit() and int(value) > self._max_bytes:
                logger.warning("Rejected %s-byte body on %s", value.decode(), scope.get("path"))
                await send_json_error(send, 413, "Request body too large")
                return

        await self.app(scope, receive, send)
