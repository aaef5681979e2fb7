"""ResponseParser – recovers a ``ParsedResult`` from the LLM's free-text reply.

The prompt asks for ``ANSWER:``, ``CONFIDENCE:``, ``COVERAGE:``, ``SOURCES:``
and ``ENRICHMENT:`` sections, but models only approximately follow it.  Each
section has its own extractor working on the full reply text; a missing or
malformed section yields that field's default instead of an error.

Section boundaries: a section starts after its marker (and any whitespace)
and runs up to the first later occurrence of the next marker, or to the end
of the text.  Markers are matched case-insensitively.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from docrelay.application.prompts import PARSE_FAILURE_ANSWER
from docrelay.application.services.suggestion_rules import (
    clean_suggestion,
    rejection_reason,
)
from docrelay.domain.models import ParsedResult, Source

logger = logging.getLogger(__name__)

ANSWER_MARKER = "ANSWER:"
CONFIDENCE_MARKER = "CONFIDENCE:"
COVERAGE_MARKER = "COVERAGE:"
SOURCES_MARKER = "SOURCES:"
ENRICHMENT_MARKER = "ENRICHMENT:"

_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*(high|medium|low)", re.IGNORECASE)
_COVERAGE_RE = re.compile(r"COVERAGE:\s*(-?\d+)", re.IGNORECASE)

# Source entries – a new entry begins at every "Document:" marker.
_ENTRY_SPLIT_RE = re.compile(r"(?=Document:)", re.IGNORECASE)
_DOC_NAME_RE = re.compile(r"Document:\s*([^\n]+)", re.IGNORECASE)
_RELEVANCE_RE = re.compile(r"Relevance:\s*(high|medium|low)", re.IGNORECASE)
_QUOTED_EXCERPT_RE = re.compile(r'Excerpt:\s*"([^"]+)"', re.IGNORECASE)
_KEY_INFO_RE = re.compile(r"Key Information:\s*([^\n]+)", re.IGNORECASE)

_NO_GAPS_PHRASES = ("you're all set", "none needed")


@lru_cache(maxsize=None)
def _marker_re(marker: str) -> re.Pattern[str]:
    return re.compile(re.escape(marker), re.IGNORECASE)


# ---------------------------------------------------------------------------
# Section boundaries
# ---------------------------------------------------------------------------
def section_text(text: str, marker: str, until: tuple[str, ...] = ()) -> str | None:
    """Return the raw text of the section opened by *marker*.

    The section starts after the first occurrence of *marker* and any
    whitespace following it, and stops at the earliest later occurrence of
    any marker in *until* (or the end of *text*).  Returns None when
    *marker* does not occur.
    """
    opening = _marker_re(marker).search(text)
    if opening is None:
        return None

    cursor = opening.end()
    while cursor < len(text) and text[cursor].isspace():
        cursor += 1

    end = len(text)
    for boundary in until:
        closing = _marker_re(boundary).search(text, cursor)
        if closing is not None and closing.start() < end:
            end = closing.start()
    return text[cursor:end]


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------
def extract_answer(text: str) -> str:
    """Answer text between ``ANSWER:`` and ``CONFIDENCE:``."""
    section = section_text(text, ANSWER_MARKER, until=(CONFIDENCE_MARKER,))
    return section.strip() if section is not None else ""


def extract_confidence(text: str) -> str:
    match = _CONFIDENCE_RE.search(text)
    return match.group(1).lower() if match else "low"


def extract_coverage(text: str) -> int:
    """Self-reported coverage percentage, clamped to [0, 100]."""
    match = _COVERAGE_RE.search(text)
    if match is None:
        return 0
    return min(100, max(0, int(match.group(1))))


def parse_source_entry(entry: str) -> Source | None:
    """Parse one ``Document:`` entry; None if it has no document name."""
    doc_match = _DOC_NAME_RE.search(entry)
    if doc_match is None:
        return None
    doc_name = doc_match.group(1).strip()
    if not doc_name:
        return None

    relevance_match = _RELEVANCE_RE.search(entry)
    excerpt_match = _QUOTED_EXCERPT_RE.search(entry) or _KEY_INFO_RE.search(entry)
    return Source(
        doc_name=doc_name,
        relevance=relevance_match.group(1).lower() if relevance_match else "medium",
        excerpt=excerpt_match.group(1).strip() if excerpt_match else "",
    )


def extract_sources(text: str) -> list[Source]:
    """Cited documents listed between ``SOURCES:`` and ``ENRICHMENT:``."""
    section = section_text(text, SOURCES_MARKER, until=(ENRICHMENT_MARKER,))
    if section is None:
        return []

    sources: list[Source] = []
    for entry in _ENTRY_SPLIT_RE.split(section):
        source = parse_source_entry(entry)
        if source is not None:
            sources.append(source)
    return sources


def extract_suggestions(text: str) -> list[str]:
    """Actionable follow-ups from the ``ENRICHMENT:`` section."""
    section = section_text(text, ENRICHMENT_MARKER)
    if section is None:
        return []

    lowered = section.lower().replace("’", "'")
    if any(phrase in lowered for phrase in _NO_GAPS_PHRASES):
        return []

    suggestions: list[str] = []
    for line in section.split("\n"):
        trimmed = line.strip()
        reason = rejection_reason(trimmed)
        if reason is None:
            suggestions.append(clean_suggestion(trimmed))
        elif trimmed:
            logger.debug("Dropped enrichment line [%s]: %.80s", reason, trimmed)
    return suggestions


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def parse_response(raw: str) -> ParsedResult:
    """Parse an LLM reply into a ``ParsedResult``.  Never raises.

    If an extractor fails unexpectedly, the fields gathered so far are kept
    and, when no answer was recovered, a user-facing fallback answer is set.
    """
    result = ParsedResult()
    try:
        result.answer = extract_answer(raw)
        result.confidence = extract_confidence(raw)
        result.coverage = extract_coverage(raw)
        result.sources = extract_sources(raw)
        result.suggestions = extract_suggestions(raw)
    except Exception:
        logger.exception("Error parsing LLM response – returning fallback result")
        if not result.answer:
            result.answer = PARSE_FAILURE_ANSWER
    return result
