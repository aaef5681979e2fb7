"""Unit tests for SearchService – LLM replaced by an in-memory fake."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from docrelay.application.services.search_service import SearchService
from docrelay.domain.exceptions import AdapterError
from docrelay.domain.models import Document

from tests.conftest import FakeLLM


class TestSearchService:
    async def test_returns_parsed_result(self, sample_documents) -> None:
        service = SearchService(FakeLLM())
        result = await service.search("How many vacation days?", sample_documents)
        assert result.answer == "X"
        assert result.confidence == "medium"
        assert result.coverage == 40
        assert [s.doc_name for s in result.sources] == ["A.txt"]
        assert result.suggestions == ["Upload B.pdf to continue."]

    async def test_prompt_carries_query_and_documents(self, sample_documents) -> None:
        llm = FakeLLM()
        await SearchService(llm).search("How many vacation days?", sample_documents)

        assert len(llm.prompts) == 1
        prompt = llm.prompts[0]
        assert "How many vacation days?" in prompt
        assert 'DOCUMENT 1: "handbook.txt"' in prompt
        assert "Dental coverage starts after 90 days" in prompt

    async def test_document_limit_is_applied(self) -> None:
        llm = FakeLLM()
        docs = [Document(name="a.txt", content="abcdefghij")]
        await SearchService(llm, max_document_chars=5).search("q", docs)
        assert "abcde\n[Content truncated...]" in llm.prompts[0]

    async def test_unstructured_reply_gives_defaults(self, sample_documents) -> None:
        service = SearchService(FakeLLM("Sorry, something went wrong."))
        result = await service.search("q", sample_documents)
        assert result.answer == ""
        assert result.confidence == "low"
        assert result.sources == []

    async def test_adapter_error_propagates(self, sample_documents) -> None:
        llm = AsyncMock()
        llm.generate.side_effect = AdapterError("Network error: Unable to reach API")
        with pytest.raises(AdapterError, match="Network error"):
            await SearchService(llm).search("q", sample_documents)

    async def test_logs_query_preview_and_result(
        self, sample_documents, caplog: pytest.LogCaptureFixture
    ) -> None:
        long_query = "w" * 150
        with caplog.at_level("INFO", logger="docrelay.application.services.search_service"):
            await SearchService(FakeLLM()).search(long_query, sample_documents)

        messages = [r.getMessage() for r in caplog.records]
        assert f'Query: "{"w" * 100}..."' in messages
        assert "Documents: 2" in messages
        assert "Result: confidence=medium, coverage=40%, sources=1, suggestions=1" in messages
