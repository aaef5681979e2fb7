"""Domain protocols (interfaces) – depend on nothing outside the domain layer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# LLM Port
# ---------------------------------------------------------------------------
@runtime_checkable
class LLMPort(Protocol):
    """Abstraction over any LLM backend (Gemini, Groq, OpenAI)."""

    async def generate(self, prompt: str, *, system_prompt: str = "") -> str:
        """Return the raw text completion for the given prompt."""
        ...
