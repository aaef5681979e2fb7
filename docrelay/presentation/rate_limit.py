"""In-memory token-bucket rate limiter – pure ASGI middleware.

Every search request costs an LLM call, so each client IP gets a token
bucket with a sustained rate and a burst size.  State is per-process; a
multi-worker deployment gets one bucket set per worker.
"""

from __future__ import annotations

import logging
import math
import time

from starlette.types import ASGIApp, Receive, Scope, Send

from docrelay.presentation.middleware import send_json_error

logger = logging.getLogger(__name__)

# Paths that are always exempt from rate limiting
_EXEMPT_PATHS = {"/health", "/stats", "/docs", "/openapi.json", "/redoc"}

# Buckets idle for longer than this are evicted.
_BUCKET_TTL_SECONDS = 600.0
_EVICTION_INTERVAL = 60.0


class _TokenBucket:
    """Simple token-bucket implementation."""

    __slots__ = ("rate", "burst", "tokens", "last_refill")

    def __init__(self, rate: float, burst: int) -> None:
        self.rate = rate  # tokens per second
        self.burst = burst  # max tokens
        self.tokens = float(burst)
        self.last_refill = time.monotonic()

    def consume(self) -> bool:
        """Try to consume one token. Returns True if allowed."""
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.burst, self.tokens + elapsed * self.rate)
        self.last_refill = now
        if self.tokens >= 1.0:
            self.tokens -= 1.0
            return True
        return False

    @property
    def retry_after(self) -> int:
        """Whole seconds until the next token is available (at least 1)."""
        if self.rate <= 0:
            return 60
        missing = max(0.0, 1.0 - self.tokens)
        return max(1, math.ceil(missing / self.rate))

    @property
    def idle_seconds(self) -> float:
        """Seconds since the last request from this client."""
        return time.monotonic() - self.last_refill


class RateLimitMiddleware:
    """Per-client-IP rate limiting via token bucket.

    Parameters
    ----------
    app : ASGIApp
        The wrapped ASGI application.
    requests_per_minute : float
        Sustained request rate per client.
    burst : int
        Maximum burst size (bucket capacity).
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: float = 30.0,
        burst: int = 10,
    ) -> None:
        self.app = app
        self._rate = requests_per_minute / 60.0
        self._burst = burst
        self._buckets: dict[str, _TokenBucket] = {}
        self._last_eviction = time.monotonic()

    @staticmethod
    def _client_ip(scope: Scope) -> str:
        """Client IP from the socket peer; ``x-forwarded-for`` only when there is none."""
        client = scope.get("client")
        if client:
            return client[0]
        # Fallback for proxied connections
        for header_name, header_value in scope.get("headers", []):
            if header_name == b"x-forwarded-for":
                return header_value.decode().split(",")[0].strip()
        return "unknown"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "").rstrip("/")
        if path in _EXEMPT_PATHS:
            await self.app(scope, receive, send)
            return

        client_ip = self._client_ip(scope)
        bucket = self._buckets.get(client_ip)
        if bucket is None:
            bucket = _TokenBucket(self._rate, self._burst)
            self._buckets[client_ip] = bucket

        self._maybe_evict()

        if bucket.consume():
            await self.app(scope, receive, send)
            return

        logger.warning("Rate limit exceeded for %s on %s", client_ip, path)
        await send_json_error(
            send,
            429,
            "Rate limit exceeded. Please slow down.",
            [(b"retry-after", str(bucket.retry_after).encode())],
        )

    def _maybe_evict(self) -> None:
        """Remove idle buckets to bound memory usage."""
        now = time.monotonic()
        if now - self._last_eviction < _EVICTION_INTERVAL:
            return
        self._last_eviction = now
        stale = [
            ip for ip, bucket in self._buckets.items()
            if bucket.idle_seconds > _BUCKET_TTL_SECONDS
        ]
        for ip in stale:
            del self._buckets[ip]
        if stale:
            logger.debug("Evicted %d stale rate-limit buckets", len(stale))
