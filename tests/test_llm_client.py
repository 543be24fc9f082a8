"""Tests for the chat client."""

import json

import httpx
import pytest
from tenacity import wait_none

from launchpad.config import LauncherConfig, get_config
from launchpad.core.exceptions import (
    ConfigurationError,
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
)
from launchpad.llm.client import (
    SYSTEM_PROMPT,
    ChatClient,
    ChatMessage,
    ChatRequest,
    LLMConfig,
    LLMProvider,
)


def _gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}


def _client(handler, provider: LLMProvider = LLMProvider.GEMINI, api_key: str = "k") -> ChatClient:
    return ChatClient(
        config=LLMConfig(provider=provider, api_key=api_key, model=ChatClient.DEFAULT_MODELS[provider]),
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    """Retries run without sleeping."""
    monkeypatch.setattr(ChatClient._complete_with_retry.retry, "wait", wait_none())


class TestChatRequest:
    """Tests for ChatRequest defaults."""

    def test_defaults(self) -> None:
        """Requests carry the corporate system prompt by default."""
        req = ChatRequest(message="Hi")
        assert req.system_prompt == SYSTEM_PROMPT
        assert req.history == []
        assert req.max_tokens == 1024


class TestConfiguration:
    """Tests for building the client from LauncherConfig."""

    def test_gemini_key_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GEMINI_API_KEY configures the default provider."""
        monkeypatch.setenv("GEMINI_API_KEY", "abc")
        config = ChatClient.config_from(LauncherConfig())
        assert config.provider == LLMProvider.GEMINI
        assert config.model == "gemini-2.5-flash"
        assert config.api_key == "abc"

    def test_legacy_api_key_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """API_KEY is accepted for Gemini."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "legacy")
        with ChatClient(ChatClient.config_from(LauncherConfig())) as client:
            assert client.is_configured

    def test_launcher_config_selects_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Provider, model and base URL come from LauncherConfig."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        launcher_config = LauncherConfig(
            llm_provider="anthropic", llm_model="claude-custom", llm_base_url="https://llm.internal"
        )
        with ChatClient(ChatClient.config_from(launcher_config)) as client:
            assert client.provider == LLMProvider.ANTHROPIC
            assert client.model == "claude-custom"
            assert not client.is_configured
        assert ChatClient.config_from(launcher_config).base_url == "https://llm.internal"

    def test_unknown_provider_raises(self) -> None:
        """An unsupported provider is a configuration error, not a silent fallback."""
        with pytest.raises(ConfigurationError) as exc_info:
            ChatClient.config_from(LauncherConfig(llm_provider="palm"))
        assert exc_info.value.env_var == "LP_LLM_PROVIDER"

    def test_default_client_reads_process_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without a config the process configuration is used."""
        monkeypatch.setenv("LP_LLM_PROVIDER", "openai")
        monkeypatch.setenv("LP_LLM_MODEL", "gpt-test")
        get_config.cache_clear()
        try:
            with ChatClient() as client:
                assert client.provider == LLMProvider.OPENAI
                assert client.model == "gpt-test"
        finally:
            get_config.cache_clear()

    def test_missing_key_raises(self) -> None:
        """complete() without a key is an authentication error."""
        client = _client(lambda request: httpx.Response(200, json=_gemini_reply("x")), api_key="")
        with pytest.raises(LLMAuthenticationError):
            client.complete(ChatRequest(message="Hi"))


class TestGemini:
    """Tests for the Gemini provider."""

    def test_request_shape(self) -> None:
        """History roles and the system instruction are sent."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_reply("Hello!"))

        response = _client(handler).complete(
            ChatRequest(message="Hi", history=[ChatMessage(role="user", text="a"), ChatMessage(role="model", text="b")])
        )
        assert response.content == "Hello!"
        assert response.finish_reason == "STOP"
        assert seen["url"].endswith("/models/gemini-2.5-flash:generateContent")
        assert seen["key"] == "k"
        assert [c["role"] for c in seen["body"]["contents"]] == ["user", "model", "user"]
        assert seen["body"]["systemInstruction"]["parts"][0]["text"] == SYSTEM_PROMPT

    def test_retries_transient_errors(self) -> None:
        """503 responses are retried before succeeding."""
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            if calls["n"] < 3:
                return httpx.Response(503)
            return httpx.Response(200, json=_gemini_reply("finally"))

        assert _client(handler).complete(ChatRequest(message="Hi")).content == "finally"
        assert calls["n"] == 3

    def test_rate_limit_after_retries(self) -> None:
        """Persistent 429 becomes LLMRateLimitError."""
        with pytest.raises(LLMRateLimitError):
            _client(lambda request: httpx.Response(429)).complete(ChatRequest(message="Hi"))

    def test_rejected_key(self) -> None:
        """401 is an authentication error and is not retried."""
        calls = {"n": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            return httpx.Response(401)

        with pytest.raises(LLMAuthenticationError):
            _client(handler).complete(ChatRequest(message="Hi"))
        assert calls["n"] == 1

    def test_malformed_response(self) -> None:
        """Unexpected JSON shapes are reported as LLMError."""
        with pytest.raises(LLMError):
            _client(lambda request: httpx.Response(200, json={"candidates": []})).complete(ChatRequest(message="Hi"))


class TestOtherProviders:
    """Tests for the Anthropic and OpenAI providers."""

    def test_anthropic(self) -> None:
        """Model turns are sent as assistant messages."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"content": [{"text": "ok"}], "model": "claude", "stop_reason": "end_turn"},
            )

        response = _client(handler, LLMProvider.ANTHROPIC).complete(
            ChatRequest(message="Hi", history=[ChatMessage(role="model", text="Hello")])
        )
        assert response.content == "ok"
        assert seen["body"]["messages"][0]["role"] == "assistant"
        assert seen["body"]["system"] == SYSTEM_PROMPT

    def test_openai(self) -> None:
        """The system prompt is the first message."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"content": "ok"}, "finish_reason": "stop"}], "model": "gpt-4o"},
            )

        response = _client(handler, LLMProvider.OPENAI).complete(ChatRequest(message="Hi"))
        assert response.content == "ok"
        assert seen["body"]["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
