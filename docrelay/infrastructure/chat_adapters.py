"""LangChain chat adapters (Groq, OpenAI) – implement LLMPort via BaseLLMAdapter."""

from __future__ import annotations

from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI

from docrelay.config.settings import Settings
from docrelay.domain.exceptions import AdapterError
from docrelay.infrastructure.base_llm_adapter import BaseLLMAdapter


def _require_key(name: str, value: str) -> str:
    if not value:
        raise AdapterError(
            f"{name} is not configured. Set it in .env or as an environment variable."
        )
    return value


class GroqAdapter(BaseLLMAdapter):
    """Wraps the Groq API via langchain-groq."""

    def __init__(self, settings: Settings) -> None:
        self._provider_name = "Groq"
        self._client = ChatGroq(
            api_key=_require_key("GROQ_API_KEY", settings.GROQ_API_KEY),
            model_name=settings.GROQ_MODEL,
            temperature=settings.GROQ_TEMPERATURE,
            max_tokens=settings.GROQ_MAX_TOKENS,
            timeout=60,
            max_retries=0,  # retried by the base class
        )
        super().__init__()


class OpenAIAdapter(BaseLLMAdapter):
    """Wraps the OpenAI API via langchain-openai."""

    def __init__(self, settings: Settings) -> None:
        self._provider_name = "OpenAI"
        self._client = ChatOpenAI(
            api_key=_require_key("OPENAI_API_KEY", settings.OPENAI_API_KEY),
            model=settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            timeout=60,
            max_retries=0,  # retried by the base class
        )
        super().__init__()
