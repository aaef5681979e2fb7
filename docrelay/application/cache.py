"""Search cache – exact-match LRU with TTL.

Avoids a second LLM round-trip when the same question is asked against the
same documents.  The key covers the normalised query and every document's
name, type and content, so any change in the document set is a miss.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass

from docrelay.domain.models import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CacheEntry:
    """Immutable cache entry with expiration timestamp."""

    value: dict
    expires_at: float


class SearchCache:
    """Async-safe LRU cache with TTL.

    Parameters
    ----------
    max_size : int
        Maximum number of cached entries.
    ttl_seconds : float
        Time-to-live for each entry in seconds.
    """

    def __init__(self, max_size: int = 64, ttl_seconds: float = 300.0) -> None:
        self._max_size = max_size
        self._ttl = ttl_seconds
        self._store: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    @staticmethod
    def _key(query: str, documents: Sequence[Document]) -> str:
        """SHA-256 over the normalised query and the full document set."""
        digest = hashlib.sha256()
        digest.update(query.strip().lower().encode())
        for doc in documents:
            for part in (doc.name, doc.type, doc.content):
                digest.update(b"\x00")
                digest.update(part.encode())
        return digest.hexdigest()

    async def get(self, query: str, documents: Sequence[Document]) -> dict | None:
        """Return the cached result or None on miss/expiry."""
        key = self._key(query, documents)
        now = time.monotonic()

        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if now > entry.expires_at:
                del self._store[key]
                return None
            self._store.move_to_end(key)
            logger.debug("Cache HIT for hash=%s", key[:12])
            return entry.value

    async def put(self, query: str, documents: Sequence[Document], result: dict) -> None:
        """Store a result, evicting the least recently used entry when full."""
        key = self._key(query, documents)
        async with self._lock:
            self._store[key] = _CacheEntry(
                value=result,
                expires_at=time.monotonic() + self._ttl,
            )
            self._store.move_to_end(key)
            while len(self._store) > self._max_size:
                self._store.popitem(last=False)

    @property
    def size(self) -> int:
        return len(self._store)
