"""Dependency injection container – wires up all layers.

No global singletons. The Container is instantiated once at startup and
passed to the presentation layer.

Uses ``cached_property`` for lazy initialization – the LLM adapter is only
created when first accessed, so the app can start (and report itself as
unconfigured on ``/health``) without an API key.
"""

from __future__ import annotations

from functools import cached_property

from docrelay.application.cache import SearchCache
from docrelay.application.services.search_service import SearchService
from docrelay.config.settings import Settings
from docrelay.infrastructure.chat_adapters import GroqAdapter, OpenAIAdapter
from docrelay.infrastructure.gemini_adapter import GeminiAdapter
from docrelay.infrastructure.telemetry import configure_logging, configure_telemetry


class Container:
    """Composition root – assembles the full dependency graph.

    Usage::

        settings = Settings()
        container = Container(settings)
        # Access container.search_service, etc. – created on first use.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

        # Logging must be ready before any other component logs.
        configure_logging(self.settings)

    # ── Infrastructure adapters (lazy) ───────────────────────────────────

    @cached_property
    def llm_adapter(self) -> GeminiAdapter | GroqAdapter | OpenAIAdapter:
        """LLM adapter selected by ``LLM_PROVIDER`` (default ``"gemini"``)."""
        provider = self.settings.LLM_PROVIDER.lower()
        if provider == "groq":
            return GroqAdapter(self.settings)
        if provider == "openai":
            return OpenAIAdapter(self.settings)
        return GeminiAdapter(self.settings)

    @cached_property
    def tracer(self):
        """OpenTelemetry tracer instance (global provider is set as side-effect)."""
        return configure_telemetry(self.settings)

    # ── Application services (lazy) ──────────────────────────────────────

    @cached_property
    def search_service(self) -> SearchService:
        """Prompt building, LLM call and reply parsing for one request."""
        return SearchService(
            llm=self.llm_adapter,
            max_document_chars=self.settings.MAX_DOCUMENT_CHARS,
        )

    @cached_property
    def search_cache(self) -> SearchCache:
        """Exact-match cache of parsed results."""
        return SearchCache(
            max_size=self.settings.CACHE_MAX_SIZE,
            ttl_seconds=self.settings.CACHE_TTL_SECONDS,
        )
