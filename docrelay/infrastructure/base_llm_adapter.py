"""Base LLM adapter – shared logic for the LangChain-backed providers.

Extracts the common generate / retry / usage-tracking logic of the Groq
and OpenAI adapters into a single template base class.

Includes prompt/completion audit logging and basic token-cost tracking
for operational visibility.
"""

from __future__ import annotations

import asyncio
import logging
import time

from langchain_core.messages import HumanMessage, SystemMessage
from tenacity import (
    before_sleep_log,
    retry,
    stop_after_attempt,
    wait_exponential,
)

from docrelay.domain.exceptions import AdapterError

logger = logging.getLogger(__name__)

# Dedicated logger for the LLM audit trail (prompt/completion pairs).
audit_logger = logging.getLogger("docrelay.llm_audit")


class UsageTracker:
    """Cumulative call and token counters, safe under concurrent requests."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.total_calls: int = 0
        self.total_prompt_tokens: int = 0
        self.total_completion_tokens: int = 0

    @property
    def summary(self) -> dict[str, int]:
        return {
            "total_calls": self.total_calls,
            "total_prompt_tokens": self.total_prompt_tokens,
            "total_completion_tokens": self.total_completion_tokens,
            "total_tokens": self.total_prompt_tokens + self.total_completion_tokens,
        }

    async def record(self, prompt_tokens: int, completion_tokens: int) -> None:
        async with self._lock:
            self.total_calls += 1
            self.total_prompt_tokens += prompt_tokens
            self.total_completion_tokens += completion_tokens


def log_interaction(
    provider_name: str,
    *,
    prompt: str,
    response_text: str,
    elapsed_ms: float,
) -> None:
    """Write a prompt/completion pair to the audit logger."""
    audit_logger.debug(
        "LLM call [%s] elapsed=%.0fms | prompt=%.200s... | response=%.300s...",
        provider_name,
        elapsed_ms,
        prompt,
        response_text,
    )


class BaseLLMAdapter:
    """Template base class for LangChain-backed LLM adapters.

    Subclasses must set ``self._client`` and ``self._provider_name`` in
    their ``__init__`` before calling ``super().__init__()``.
    """

    _client: object  # LangChain ChatModel
    _provider_name: str  # e.g. "Groq", "OpenAI"

    def __init__(self) -> None:
        self._usage = UsageTracker()

    # ── Cost / token tracking ────────────────────────────────────────────

    @property
    def usage_summary(self) -> dict[str, int]:
        """Return cumulative token usage stats for monitoring."""
        return self._usage.summary

    async def _track_usage(self, response: object) -> None:
        """Extract and accumulate token usage from LangChain response metadata."""
        prompt_tokens = 0
        completion_tokens = 0
        usage = getattr(response, "usage_metadata", None)
        if usage and isinstance(usage, dict):
            prompt_tokens = usage.get("input_tokens", 0)
            completion_tokens = usage.get("output_tokens", 0)
        elif hasattr(response, "response_metadata"):
            meta = response.response_metadata or {}
            token_usage = meta.get("token_usage", {})
            prompt_tokens = token_usage.get("prompt_tokens", 0)
            completion_tokens = token_usage.get("completion_tokens", 0)

        await self._usage.record(prompt_tokens, completion_tokens)

    # ── Public API ───────────────────────────────────────────────────────

    async def generate(self, prompt: str, *, system_prompt: str = "") -> str:
        """Send a prompt and return the text completion."""
        messages = self._build_messages(prompt, system_prompt)
        start = time.perf_counter()
        try:
            response = await self._invoke_with_retry(messages)
            elapsed_ms = (time.perf_counter() - start) * 1000
            await self._track_usage(response)
            result_text = str(response.content)
            log_interaction(
                self._provider_name,
                prompt=prompt,
                response_text=result_text,
                elapsed_ms=elapsed_ms,
            )
            return result_text
        except Exception as exc:
            logger.exception("%s generation failed after retries", self._provider_name)
            raise AdapterError(
                f"{self._provider_name} generation error: {exc}"
            ) from exc

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _build_messages(prompt: str, system_prompt: str) -> list:
        messages: list = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))
        return messages

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _invoke_with_retry(self, messages: list):
        """Invoke LLM with exponential backoff retry."""
        return await self._client.ainvoke(messages)
