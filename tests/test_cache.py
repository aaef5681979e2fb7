"""Unit tests for the SearchCache (async-safe LRU with TTL)."""

from __future__ import annotations

import time

from docrelay.application.cache import SearchCache
from docrelay.domain.models import Document

DOCS = [Document(name="handbook.txt", content="15 vacation days")]


class TestSearchCacheBasics:
    async def test_put_and_get(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("How many vacation days?", DOCS, {"answer": "15"})
        result = await cache.get("How many vacation days?", DOCS)
        assert result is not None
        assert result["answer"] == "15"

    async def test_miss_returns_none(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        assert await cache.get("unknown question", DOCS) is None

    async def test_case_and_whitespace_normalized(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("  How Many Vacation Days?  ", DOCS, {"answer": "15"})
        assert await cache.get("how many vacation days?", DOCS) is not None

    async def test_size_property(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        assert cache.size == 0
        await cache.put("q1", DOCS, {"a": 1})
        assert cache.size == 1
        await cache.put("q2", DOCS, {"a": 2})
        assert cache.size == 2


class TestSearchCacheDocumentKey:
    async def test_changed_content_is_a_miss(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", DOCS, {"a": 1})
        edited = [Document(name="handbook.txt", content="20 vacation days")]
        assert await cache.get("q", edited) is None

    async def test_changed_name_is_a_miss(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", DOCS, {"a": 1})
        renamed = [Document(name="policy.txt", content="15 vacation days")]
        assert await cache.get("q", renamed) is None

    async def test_document_order_matters(self):
        a = Document(name="a.txt", content="A")
        b = Document(name="b.txt", content="B")
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", [a, b], {"a": 1})
        assert await cache.get("q", [b, a]) is None
        assert await cache.get("q", [a, b]) is not None

    async def test_field_boundaries_are_not_ambiguous(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", [Document(name="ab", content="c")], {"a": 1})
        assert await cache.get("q", [Document(name="a", content="bc")]) is None


class TestSearchCacheTTL:
    async def test_expired_entry_returns_none(self):
        cache = SearchCache(max_size=10, ttl_seconds=0.1)
        await cache.put("q", DOCS, {"answer": "old"})
        time.sleep(0.15)
        assert await cache.get("q", DOCS) is None
        assert cache.size == 0

    async def test_fresh_entry_returns_value(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", DOCS, {"answer": "fresh"})
        assert await cache.get("q", DOCS) is not None


class TestSearchCacheLRUEviction:
    async def test_evicts_oldest_when_full(self):
        cache = SearchCache(max_size=3, ttl_seconds=60.0)
        await cache.put("q1", DOCS, {"a": 1})
        await cache.put("q2", DOCS, {"a": 2})
        await cache.put("q3", DOCS, {"a": 3})
        # q1 is the oldest
        await cache.put("q4", DOCS, {"a": 4})
        assert await cache.get("q1", DOCS) is None  # evicted
        assert await cache.get("q2", DOCS) is not None
        assert await cache.get("q4", DOCS) is not None
        assert cache.size == 3

    async def test_access_refreshes_lru_order(self):
        cache = SearchCache(max_size=3, ttl_seconds=60.0)
        await cache.put("q1", DOCS, {"a": 1})
        await cache.put("q2", DOCS, {"a": 2})
        await cache.put("q3", DOCS, {"a": 3})
        await cache.get("q1", DOCS)
        # Now q2 is the oldest
        await cache.put("q4", DOCS, {"a": 4})
        assert await cache.get("q2", DOCS) is None
        assert await cache.get("q1", DOCS) is not None


class TestSearchCacheOverwrite:
    async def test_overwrite_updates_value(self):
        cache = SearchCache(max_size=10, ttl_seconds=60.0)
        await cache.put("q", DOCS, {"answer": "old"})
        await cache.put("q", DOCS, {"answer": "new"})
        result = await cache.get("q", DOCS)
        assert result is not None
        assert result["answer"] == "new"
        assert cache.size == 1
