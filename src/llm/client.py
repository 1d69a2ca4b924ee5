"""LLM client abstraction over chat-completions providers (OpenAI primary, Groq alternative)."""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from src.config.settings import get_settings

logger = logging.getLogger(__name__)


class CompletionErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"


class CompletionError(Exception):
    def __init__(self, kind: CompletionErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, messages: list[dict], model: str, temperature: float, max_tokens: int) -> dict:
        """Return {"content": str, "finish_reason": str, "input_tokens": int, "output_tokens": int}.

        Raises CompletionError on any provider failure.
        """
        ...


class ChatCompletionsClient(LLMClient):
    """Shared implementation for SDKs exposing the OpenAI chat-completions surface."""

    def __init__(self, sdk, sdk_client):
        self._sdk = sdk
        self._client = sdk_client

    def _classify(self, exc: Exception) -> CompletionErrorKind:
        # Order matters: APITimeoutError subclasses APIConnectionError.
        if isinstance(exc, self._sdk.RateLimitError):
            return CompletionErrorKind.RATE_LIMITED
        if isinstance(exc, self._sdk.APITimeoutError):
            return CompletionErrorKind.TIMEOUT
        if isinstance(exc, self._sdk.APIConnectionError):
            return CompletionErrorKind.CONNECTION
        return CompletionErrorKind.PROVIDER_ERROR

    async def generate(self, messages: list[dict], model: str, temperature: float, max_tokens: int) -> dict:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except self._sdk.APIError as exc:
            raise CompletionError(self._classify(exc), str(exc)) from exc

        if not response.choices or not response.choices[0].message.content:
            raise CompletionError(CompletionErrorKind.EMPTY_RESPONSE, "Provider returned no content")

        choice = response.choices[0]
        return {
            "content": choice.message.content,
            "finish_reason": choice.finish_reason,
            "input_tokens": response.usage.prompt_tokens if response.usage else 0,
            "output_tokens": response.usage.completion_tokens if response.usage else 0,
        }


def _require_key(name: str, value: str) -> None:
    if not value:
        raise CompletionError(CompletionErrorKind.PROVIDER_ERROR, f"{name} is not configured")


class OpenAIClient(ChatCompletionsClient):
    def __init__(self):
        import openai
        settings = get_settings()
        _require_key("OPENAI_API_KEY", settings.OPENAI_API_KEY)
        super().__init__(openai, openai.AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES,
        ))


class GroqClient(ChatCompletionsClient):
    def __init__(self):
        import groq
        settings = get_settings()
        _require_key("GROQ_API_KEY", settings.GROQ_API_KEY)
        super().__init__(groq, groq.AsyncGroq(
            api_key=settings.GROQ_API_KEY,
            timeout=settings.OPENAI_TIMEOUT,
            max_retries=settings.OPENAI_MAX_RETRIES,
        ))


# Singletons
_clients: dict[str, LLMClient] = {}


def get_llm_client(provider: str | None = None) -> LLMClient:
    provider = provider or get_settings().LLM_PROVIDER
    if provider not in _clients:
        if provider == "openai":
            _clients[provider] = OpenAIClient()
        elif provider == "groq":
            _clients[provider] = GroqClient()
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")
    return _clients[provider]
