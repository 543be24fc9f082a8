"""
Chat Client - opaque text completion for the assistant side-panel.

Supports Google Gemini, Anthropic Claude and OpenAI-compatible APIs.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from launchpad.config import LauncherConfig, get_config
from launchpad.core.exceptions import (
    ConfigurationError,
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful corporate assistant for Tallman Equipment. You are "
    "professional, concise, and helpful. You know about industrial equipment, "
    "safety gear, and corporate logistics."
)

RETRYABLE_STATUS_CODES = (429, 502, 503, 504)


class LLMProvider(Enum):
    """Supported chat providers."""

    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass
class ChatMessage:
    """One turn of chat history. ``role`` is "user" or "model"."""

    role: str
    text: str


@dataclass
class ChatRequest:
    """Request to the chat provider."""

    message: str
    history: list[ChatMessage] = field(default_factory=list)
    system_prompt: str | None = SYSTEM_PROMPT
    max_tokens: int = 1024
    temperature: float = 0.3


@dataclass
class ChatResponse:
    """Response from the chat provider."""

    content: str
    model: str
    provider: LLMProvider
    finish_reason: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


class LLMConfig(BaseModel):
    """Configuration for the chat client."""

    provider: LLMProvider = LLMProvider.GEMINI
    api_key: str = ""
    base_url: str | None = None
    model: str = "gemini-2.5-flash"
    timeout_seconds: int = 60


class ChatClient:
    """
    Chat client over the provider REST APIs.

    Environment variables:
    - GEMINI_API_KEY (or API_KEY): For Gemini models
    - ANTHROPIC_API_KEY: For Claude models
    - OPENAI_API_KEY: For OpenAI models

    Provider, model and base URL come from LauncherConfig; only the
    API keys are read here.
    """

    DEFAULT_MODELS = {
        LLMProvider.GEMINI: "gemini-2.5-flash",
        LLMProvider.ANTHROPIC: "claude-3-5-sonnet-20241022",
        LLMProvider.OPENAI: "gpt-4o",
    }

    API_KEY_ENV_VARS = {
        LLMProvider.GEMINI: ("GEMINI_API_KEY", "API_KEY"),
        LLMProvider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
        LLMProvider.OPENAI: ("OPENAI_API_KEY",),
    }

    def __init__(self, config: LLMConfig | None = None, transport: httpx.BaseTransport | None = None):
        """Initialize chat client with configuration."""
        self._config = config or self.config_from(get_config())
        self._client = httpx.Client(timeout=self._config.timeout_seconds, transport=transport)

    @classmethod
    def config_from(cls, launcher_config: LauncherConfig) -> LLMConfig:
        """Build the client configuration, taking the API key from the environment."""
        try:
            provider = LLMProvider(launcher_config.llm_provider.lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown LP_LLM_PROVIDER: {launcher_config.llm_provider}", env_var="LP_LLM_PROVIDER"
            )

        api_key = ""
        for env_var in cls.API_KEY_ENV_VARS[provider]:
            api_key = os.getenv(env_var, "")
            if api_key:
                break

        return LLMConfig(
            provider=provider,
            api_key=api_key,
            base_url=launcher_config.llm_base_url,
            model=launcher_config.llm_model or cls.DEFAULT_MODELS[provider],
        )

    @property
    def provider(self) -> LLMProvider:
        """Get the chat provider."""
        return self._config.provider

    @property
    def model(self) -> str:
        """Get the model name."""
        return self._config.model

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self._config.api_key)

    def complete(self, request: ChatRequest) -> ChatResponse:
        """
        Send a chat turn to the provider.

        Raises:
            LLMAuthenticationError: If no API key is configured or it is rejected
            LLMRateLimitError: If rate limit is exceeded after retries
            LLMError: For other provider errors
        """
        if not self._config.api_key:
            raise LLMAuthenticationError(
                f"API key not configured for {self._config.provider.value}. "
                f"Set {self.API_KEY_ENV_VARS[self._config.provider][0]} environment variable.",
                provider=self._config.provider.value,
            )

        try:
            return self._complete_with_retry(request)
        except httpx.HTTPStatusError as e:
            self._handle_http_error(e)
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            raise LLMError(
                f"Chat request failed: {e}",
                provider=self._config.provider.value,
                model=self._config.model,
            ) from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=20),
        retry=retry_if_exception_type(httpx.HTTPStatusError),
        reraise=True,
    )
    def _complete_with_retry(self, request: ChatRequest) -> ChatResponse:
        """Dispatch to the provider; only 429/502/503/504 are retried."""
        try:
            if self._config.provider == LLMProvider.ANTHROPIC:
                return self._anthropic_complete(request)
            if self._config.provider == LLMProvider.OPENAI:
                return self._openai_complete(request)
            return self._gemini_complete(request)
        except httpx.HTTPStatusError as e:
            if e.response.status_code in RETRYABLE_STATUS_CODES:
                raise
            self._handle_http_error(e)

    def _handle_http_error(self, error: httpx.HTTPStatusError) -> None:
        """Convert HTTP errors to LLM exceptions."""
        status_code = error.response.status_code
        provider = self._config.provider.value

        if status_code in (401, 403):
            raise LLMAuthenticationError(f"Authentication failed for {provider}", provider=provider)
        if status_code == 429:
            raise LLMRateLimitError(f"Rate limit exceeded for {provider}", provider=provider)
        raise LLMError(
            f"HTTP error from {provider}: {status_code}",
            provider=provider,
            model=self._config.model,
            status_code=status_code,
        )

    def _gemini_complete(self, request: ChatRequest) -> ChatResponse:
        """Complete using the Gemini generateContent API."""
        base = self._config.base_url or "https://generativelanguage.googleapis.com/v1beta"
        url = f"{base}/models/{self._config.model}:generateContent"

        contents = [
            {"role": "model" if m.role == "model" else "user", "parts": [{"text": m.text}]}
            for m in request.history
        ]
        contents.append({"role": "user", "parts": [{"text": request.message}]})

        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "maxOutputTokens": request.max_tokens,
                "temperature": request.temperature,
            },
        }
        if request.system_prompt:
            body["systemInstruction"] = {"parts": [{"text": request.system_prompt}]}

        response = self._client.post(
            url,
            headers={"x-goog-api-key": self._config.api_key, "content-type": "application/json"},
            json=body,
        )
        response.raise_for_status()
        data = response.json()

        candidate = data["candidates"][0]
        text = "".join(part.get("text", "") for part in candidate["content"]["parts"])
        return ChatResponse(
            content=text,
            model=data.get("modelVersion", self._config.model),
            provider=LLMProvider.GEMINI,
            finish_reason=candidate.get("finishReason"),
            raw_response=data,
        )

    def _anthropic_complete(self, request: ChatRequest) -> ChatResponse:
        """Complete using Anthropic's Messages API."""
        messages = [
            {"role": "assistant" if m.role == "model" else "user", "content": m.text}
            for m in request.history
        ]
        messages.append({"role": "user", "content": request.message})

        body: dict[str, Any] = {
            "model": self._config.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": messages,
        }
        if request.system_prompt:
            body["system"] = request.system_prompt

        response = self._client.post(
            self._config.base_url or "https://api.anthropic.com/v1/messages",
            headers={
                "x-api-key": self._config.api_key,
                "anthropic-version": "2023-06-01",
                "content-type": "application/json",
            },
            json=body,
        )
        response.raise_for_status()
        data = response.json()

        return ChatResponse(
            content=data["content"][0]["text"],
            model=data["model"],
            provider=LLMProvider.ANTHROPIC,
            finish_reason=data.get("stop_reason"),
            raw_response=data,
        )

    def _openai_complete(self, request: ChatRequest) -> ChatResponse:
        """Complete using OpenAI's chat completions API (or compatible)."""
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.extend(
            {"role": "assistant" if m.role == "model" else "user", "content": m.text}
            for m in request.history
        )
        messages.append({"role": "user", "content": request.message})

        response = self._client.post(
            self._config.base_url or "https://api.openai.com/v1/chat/completions",
            headers={
                "Authorization": f"Bearer {self._config.api_key}",
                "content-type": "application/json",
            },
            json={
                "model": self._config.model,
                "max_tokens": request.max_tokens,
                "temperature": request.temperature,
                "messages": messages,
            },
        )
        response.raise_for_status()
        data = response.json()

        return ChatResponse(
            content=data["choices"][0]["message"]["content"],
            model=data["model"],
            provider=LLMProvider.OPENAI,
            finish_reason=data["choices"][0].get("finish_reason"),
            raw_response=data,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()

