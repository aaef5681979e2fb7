"""Domain models for the document Q&A relay."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Level = Literal["high", "medium", "low"]
LEVELS: tuple[str, ...] = ("high", "medium", "low")


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------
class Document(BaseModel):
    """A caller-supplied document whose text has already been extracted."""

    name: str = Field(..., min_length=1)
    type: str = "text/plain"
    content: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------
class Source(BaseModel):
    """A document the LLM cited, with its relevance and a supporting excerpt."""

    model_config = ConfigDict(populate_by_name=True)

    doc_name: str = Field(..., alias="docName")
    relevance: Level = "medium"
    excerpt: str = ""


# ---------------------------------------------------------------------------
# ParsedResult
# ---------------------------------------------------------------------------
class ParsedResult(BaseModel):
    """Structured view of an LLM reply.

    Every field has a safe default so a partially parsed reply is always a
    valid result.  ``coverage`` is clamped by the parser, the model only
    enforces the range.
    """

    answer: str = ""
    confidence: Level = "low"
    coverage: int = Field(default=0, ge=0, le=100)
    sources: list[Source] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
