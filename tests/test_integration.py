"""Integration tests – gated behind RUN_LIVE_TESTS=1.

These tests hit the real Gemini API and require a valid GEMINI_API_KEY.
"""

from __future__ import annotations

from docrelay.application.services.search_service import SearchService
from docrelay.config.settings import Settings
from docrelay.domain.models import Document
from docrelay.infrastructure.gemini_adapter import GeminiAdapter

from tests.conftest import live_test


@live_test
class TestLiveGemini:
    async def test_gemini_generates_response(self):
        adapter = GeminiAdapter(Settings())
        try:
            result = await adapter.generate("Say hello in one word.")
        finally:
            await adapter.aclose()
        assert len(result) > 0

    async def test_list_models(self):
        adapter = GeminiAdapter(Settings())
        try:
            models = await adapter.list_models()
        finally:
            await adapter.aclose()
        assert any(name.startswith("models/") for name in models)


@live_test
class TestLiveSearch:
    async def test_search_cites_the_uploaded_document(self):
        adapter = GeminiAdapter(Settings())
        documents = [
            Document(
                name="handbook.txt",
                content="New employees receive 15 vacation days per year.",
            )
        ]
        try:
            result = await SearchService(adapter).search(
                "How many vacation days do new employees get?", documents
            )
        finally:
            await adapter.aclose()
        assert "15" in result.answer
        assert result.confidence in ("high", "medium", "low")
        assert any(source.doc_name == "handbook.txt" for source in result.sources)
