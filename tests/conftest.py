"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os

import pytest
from docrelay.config.settings import Settings
from docrelay.domain.models import Document

# ---------------------------------------------------------------------------
# Skip marker for live-API tests
# ---------------------------------------------------------------------------
live_test = pytest.mark.skipif(
    os.getenv("RUN_LIVE_TESTS", "0") != "1",
    reason="Live tests disabled (set RUN_LIVE_TESTS=1 to enable)",
)

# The exchange used throughout the parser and API tests.
WELL_FORMED_REPLY = (
    "ANSWER: X\n"
    "CONFIDENCE: medium\n"
    "COVERAGE: 40\n"
    "SOURCES:\n"
    "Document: A.txt\n"
    "Relevance: high\n"
    'Excerpt: "quote"\n'
    "ENRICHMENT:\n"
    "Upload B.pdf to continue."
)


class FakeLLM:
    """In-memory ``LLMPort`` returning a canned reply and recording prompts."""

    def __init__(self, reply: str = WELL_FORMED_REPLY) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str, *, system_prompt: str = "") -> str:
        self.prompts.append(prompt)
        return self.reply

    @property
    def usage_summary(self) -> dict[str, int]:
        return {"total_calls": len(self.prompts)}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings() -> Settings:
    """Return a Settings instance with safe defaults for testing."""
    return Settings(
        LLM_PROVIDER="gemini",
        GEMINI_API_KEY="test-key",
        LATENCY_BUDGET_SECONDS=30.0,
        LOG_FILE="",  # disable file logging in tests
    )


@pytest.fixture()
def sample_documents() -> list[Document]:
    """Two small documents in upload order."""
    return [
        Document(
            name="handbook.txt",
            type="text/plain",
            content="New employees receive 15 vacation days per year.",
        ),
        Document(
            name="benefits.pdf",
            type="application/pdf",
            content="Dental coverage starts after 90 days of employment.",
        ),
    ]
