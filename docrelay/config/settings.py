"""Centralised settings – loaded once, injected everywhere."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings sourced from env vars / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── LLM Provider ──────────────────────────────────────────────────────
    LLM_PROVIDER: str = "gemini"  # "gemini", "groq" or "openai"

    # ── Gemini ────────────────────────────────────────────────────────────
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash-exp"
    GEMINI_TEMPERATURE: float = 0.7
    GEMINI_MAX_OUTPUT_TOKENS: int = 2048
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT_SECONDS: float = 60.0

    # ── Groq ──────────────────────────────────────────────────────────────
    GROQ_API_KEY: str = ""
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_TEMPERATURE: float = 0.7
    GROQ_MAX_TOKENS: int = 2048

    # ── OpenAI ────────────────────────────────────────────────────────────
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_MAX_TOKENS: int = 2048

    # ── Prompt budget ─────────────────────────────────────────────────────
    MAX_DOCUMENT_CHARS: int = 50_000  # per-document content cap

    # ── HTTP ──────────────────────────────────────────────────────────────
    MAX_REQUEST_BYTES: int = 50 * 1024 * 1024  # 50 MB JSON bodies
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    APP_VERSION: str = "1.0.0"

    # ── Latency budget (seconds) ──────────────────────────────────────────
    LATENCY_BUDGET_SECONDS: float = 90.0

    # ── Rate limiting ─────────────────────────────────────────────────────
    RATE_LIMIT_RPM: float = 30.0  # sustained requests per minute per client
    RATE_LIMIT_BURST: int = 10  # max burst size

    # ── Response cache ────────────────────────────────────────────────────
    CACHE_MAX_SIZE: int = 64  # max cached search results
    CACHE_TTL_SECONDS: float = 300.0  # cache entry TTL (5 minutes)

    # ── OpenTelemetry ─────────────────────────────────────────────────────
    OTEL_SERVICE_NAME: str = "docrelay"
    OTEL_EXPORTER_ENDPOINT: str = ""

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_FORMAT: str = "text"  # "text" or "json"
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/docrelay.log"  # "" to disable file logging
    LOG_FILE_MAX_BYTES: int = 10_485_760  # 10 MB per log file
    LOG_FILE_BACKUP_COUNT: int = 5  # keep 5 rotated files

    @property
    def llm_configured(self) -> bool:
        """True when the selected provider has an API key."""
        provider = self.LLM_PROVIDER.lower()
        if provider == "groq":
            return bool(self.GROQ_API_KEY)
        if provider == "openai":
            return bool(self.OPENAI_API_KEY)
        return bool(self.GEMINI_API_KEY)
