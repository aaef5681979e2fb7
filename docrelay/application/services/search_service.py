"""SearchService – builds the prompt, calls the LLM and parses its reply."""

from __future__ import annotations

import logging

from opentelemetry import trace

from docrelay.application.prompts import MAX_DOCUMENT_CHARS
from docrelay.application.services.prompt_builder import build_prompt
from docrelay.application.services.response_parser import parse_response
from docrelay.domain.models import Document, ParsedResult
from docrelay.domain.protocols import LLMPort

logger = logging.getLogger(__name__)
_tracer = trace.get_tracer(__name__)

_QUERY_PREVIEW_CHARS = 100


def _preview(query: str) -> str:
    if len(query) <= _QUERY_PREVIEW_CHARS:
        return query
    return query[:_QUERY_PREVIEW_CHARS] + "..."


class SearchService:
    """Single request pipeline: query + documents → prompt → LLM → ParsedResult.

    Adapter failures (``AdapterError``) propagate to the caller; parsing
    never fails.
    """

    def __init__(self, llm: LLMPort, *, max_document_chars: int = MAX_DOCUMENT_CHARS) -> None:
        self._llm = llm
        self._max_document_chars = max_document_chars

    async def search(self, query: str, documents: list[Document]) -> ParsedResult:
        """Answer *query* from *documents*."""
        logger.info('Query: "%s"', _preview(query))
        logger.info("Documents: %d", len(documents))

        with _tracer.start_as_current_span("build_prompt") as span:
            prompt = build_prompt(query, documents, max_chars=self._max_document_chars)
            span.set_attribute("docrelay.document_count", len(documents))
            span.set_attribute("docrelay.prompt_chars", len(prompt))

        with _tracer.start_as_current_span("llm_generate"):
            raw = await self._llm.generate(prompt)

        with _tracer.start_as_current_span("parse_response") as span:
            result = parse_response(raw)
            span.set_attribute("docrelay.confidence", result.confidence)
            span.set_attribute("docrelay.coverage", result.coverage)

        logger.info(
            "Result: confidence=%s, coverage=%d%%, sources=%d, suggestions=%d",
            result.confidence,
            result.coverage,
            len(result.sources),
            len(result.suggestions),
        )
        return result
