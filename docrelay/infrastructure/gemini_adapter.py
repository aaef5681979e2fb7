"""Gemini LLM adapter – implements LLMPort over the Generative Language REST API.

Sends a JSON ``generateContent`` request and returns the first candidate's
text.  Every failure is reported as an ``AdapterError`` with a message that
is safe to show to the caller:

* transport failure        → "Network error: Unable to reach API"
* non-200 status           → provider ``error.message`` or "API request failed"
* unexpected response body → "Failed to parse API response"
"""

from __future__ import annotations

import logging
import time

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docrelay.config.settings import Settings
from docrelay.domain.exceptions import AdapterError
from docrelay.infrastructure.base_llm_adapter import UsageTracker, log_interaction

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class _RetryableStatus(Exception):
    """A throttling or server-side status worth another attempt."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


def _error_message(response: httpx.Response) -> str:
    """Provider error message from a non-200 response, if it carries one."""
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or "API request failed"


class GeminiAdapter:
    """Calls Gemini ``generateContent`` via httpx and satisfies ``LLMPort``."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not settings.GEMINI_API_KEY:
            raise AdapterError(
                "GEMINI_API_KEY is not configured. "
                "Set it in .env or as an environment variable."
            )
        self._provider_name = "Gemini"
        self._model = settings.GEMINI_MODEL
        self._generation_config = {
            "temperature": settings.GEMINI_TEMPERATURE,
            "maxOutputTokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
        }
        self._client = httpx.AsyncClient(
            base_url=settings.GEMINI_BASE_URL,
            timeout=httpx.Timeout(settings.GEMINI_TIMEOUT_SECONDS, connect=10.0),
            headers={"x-goog-api-key": settings.GEMINI_API_KEY},
            transport=transport,
        )
        self._usage = UsageTracker()

    @property
    def model(self) -> str:
        return self._model

    @property
    def usage_summary(self) -> dict[str, int]:
        """Return cumulative token usage stats for monitoring."""
        return self._usage.summary

    # ── Public API ───────────────────────────────────────────────────────

    async def generate(self, prompt: str, *, system_prompt: str = "") -> str:
        """Send a prompt and return the first candidate's text."""
        payload: dict = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self._generation_config,
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        logger.info("Calling Gemini API with model: %s", self._model)
        start = time.perf_counter()
        try:
            response = await self._post_with_retry(
                f"models/{self._model}:generateContent", payload
            )
        except _RetryableStatus as exc:
            response = exc.response
        except httpx.HTTPError as exc:
            logger.exception("Gemini request failed after retries")
            raise AdapterError("Network error: Unable to reach API") from exc
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info("Gemini status code: %d", response.status_code)
        if response.status_code != 200:
            logger.error("Gemini API error: %.500s", response.text)
            raise AdapterError(_error_message(response))

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.exception("Unexpected Gemini response body")
            raise AdapterError("Failed to parse API response") from exc

        usage = data.get("usageMetadata") or {}
        await self._usage.record(
            usage.get("promptTokenCount", 0),
            usage.get("candidatesTokenCount", 0),
        )
        log_interaction(
            self._provider_name,
            prompt=prompt,
            response_text=text,
            elapsed_ms=elapsed_ms,
        )
        return text

    async def list_models(self) -> list[str]:
        """Names of the models the configured key can use."""
        try:
            response = await self._client.get("models")
        except httpx.HTTPError as exc:
            raise AdapterError("Network error: Unable to reach API") from exc
        if response.status_code != 200:
            raise AdapterError(_error_message(response))
        try:
            return [model.get("name", "") for model in response.json().get("models", [])]
        except (ValueError, AttributeError, TypeError) as exc:
            logger.exception("Unexpected Gemini model list body")
            raise AdapterError("Failed to parse API response") from exc

    async def aclose(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    # ── Internals ────────────────────────────────────────────────────────

    @retry(
        retry=retry_if_exception_type((httpx.TransportError, _RetryableStatus)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_with_retry(self, path: str, payload: dict) -> httpx.Response:
        """POST with exponential backoff on transport errors and 429/5xx."""
        response = await self._client.post(path, json=payload)
        if response.status_code in _RETRYABLE_STATUS:
            raise _RetryableStatus(response)
        return response
