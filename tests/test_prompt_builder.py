"""Unit tests for the prompt builder – pure functions, no mocks needed."""

from __future__ import annotations

import pytest
from docrelay.application.prompts import MAX_DOCUMENT_CHARS, TRUNCATION_MARKER
from docrelay.application.services.prompt_builder import (
    build_prompt,
    render_document_block,
    truncate_content,
)
from docrelay.domain.models import Document


# ═══════════════════════════════════════════════════════════════════════════
# truncate_content
# ═══════════════════════════════════════════════════════════════════════════
class TestTruncateContent:
    def test_short_content_unchanged(self) -> None:
        assert truncate_content("hello") == "hello"

    def test_exactly_at_limit_is_not_marked(self) -> None:
        content = "a" * MAX_DOCUMENT_CHARS
        assert truncate_content(content) == content

    def test_one_over_limit_is_cut_and_marked(self) -> None:
        content = "a" * MAX_DOCUMENT_CHARS + "b"
        out = truncate_content(content)
        assert out == "a" * MAX_DOCUMENT_CHARS + TRUNCATION_MARKER
        assert "b" not in out

    def test_custom_limit(self) -> None:
        assert truncate_content("abcdef", max_chars=3) == "abc" + TRUNCATION_MARKER

    def test_default_limit_is_fifty_thousand(self) -> None:
        assert MAX_DOCUMENT_CHARS == 50_000


# ═══════════════════════════════════════════════════════════════════════════
# render_document_block
# ═══════════════════════════════════════════════════════════════════════════
class TestRenderDocumentBlock:
    def test_block_contains_index_name_type_and_content(self) -> None:
        doc = Document(name="policy.md", type="text/markdown", content="Body text")
        block = render_document_block(3, doc)
        assert 'DOCUMENT 3: "policy.md"' in block
        assert "Type: text/markdown" in block
        assert "Body text" in block

    def test_block_is_delimited(self) -> None:
        doc = Document(name="a.txt", content="x")
        lines = render_document_block(1, doc).split("\n")
        assert lines[0].startswith("═")
        assert lines[-1].startswith("═")

    def test_content_with_braces_is_rendered_literally(self) -> None:
        doc = Document(name="code.py", content="data = {'key': '{value}'}")
        assert "data = {'key': '{value}'}" in render_document_block(1, doc)

    def test_document_is_not_mutated(self) -> None:
        original = "z" * (MAX_DOCUMENT_CHARS + 10)
        doc = Document(name="big.txt", content=original)
        render_document_block(1, doc)
        assert doc.content == original


# ═══════════════════════════════════════════════════════════════════════════
# build_prompt
# ═══════════════════════════════════════════════════════════════════════════
class TestBuildPrompt:
    def test_query_is_repeated_verbatim(self, sample_documents) -> None:
        query = "What's the {policy} on   remote work?"
        assert query in build_prompt(query, sample_documents)

    def test_document_count_is_listed(self, sample_documents) -> None:
        prompt = build_prompt("q", sample_documents)
        assert "AVAILABLE DOCUMENTS (2 total):" in prompt

    def test_documents_keep_input_order_and_one_based_index(self, sample_documents) -> None:
        prompt = build_prompt("q", sample_documents)
        first = prompt.index('DOCUMENT 1: "handbook.txt"')
        second = prompt.index('DOCUMENT 2: "benefits.pdf"')
        assert first < second

    def test_blocks_are_separated_by_blank_line(self, sample_documents) -> None:
        prompt = build_prompt("q", sample_documents)
        second_block = render_document_block(2, sample_documents[1])
        assert "\n\n" + second_block in prompt

    def test_response_grammar_is_specified(self, sample_documents) -> None:
        prompt = build_prompt("q", sample_documents)
        for keyword in ("ANSWER:", "CONFIDENCE:", "COVERAGE:", "SOURCES:", "ENRICHMENT:"):
            assert keyword in prompt
        assert "Document: [document name]" in prompt
        assert 'Excerpt: "[a brief quote from the document]"' in prompt

    def test_worked_examples_are_included(self, sample_documents) -> None:
        prompt = build_prompt("q", sample_documents)
        assert "EXAMPLE GOOD SUGGESTIONS:" in prompt
        assert "EXAMPLE BAD SUGGESTIONS" in prompt
        assert '"More documentation needed" ❌' in prompt

    def test_truncation_marker_only_for_long_documents(self) -> None:
        docs = [
            Document(name="short.txt", content="short"),
            Document(name="long.txt", content="y" * (MAX_DOCUMENT_CHARS + 1)),
        ]
        prompt = build_prompt("q", docs)
        assert prompt.count("[Content truncated...]") == 1
        assert "y" * (MAX_DOCUMENT_CHARS + 1) not in prompt

    def test_no_marker_when_nothing_is_truncated(self, sample_documents) -> None:
        assert "[Content truncated...]" not in build_prompt("q", sample_documents)

    def test_custom_max_chars(self) -> None:
        docs = [Document(name="a.txt", content="abcdefgh")]
        prompt = build_prompt("q", docs, max_chars=4)
        assert "abcd\n[Content truncated...]" in prompt
        assert "abcdefgh" not in prompt

    def test_deterministic(self, sample_documents) -> None:
        assert build_prompt("q", sample_documents) == build_prompt("q", sample_documents)

    def test_empty_document_list_does_not_raise(self) -> None:
        prompt = build_prompt("q", [])
        assert "AVAILABLE DOCUMENTS (0 total):" in prompt
        assert "DOCUMENT 1:" not in prompt

    def test_none_documents_raises_type_error(self) -> None:
        with pytest.raises(TypeError):
            build_prompt("q", None)  # type: ignore[arg-type]

    def test_accepts_tuple_of_documents(self, sample_documents) -> None:
        assert build_prompt("q", tuple(sample_documents)) == build_prompt("q", sample_documents)
