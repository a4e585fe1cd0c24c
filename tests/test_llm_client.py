"""Tests for the provider fallback chain and key resolution."""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from channelsite.core.config import get_settings
from channelsite.core.exceptions import LLMError
from channelsite.database.connection import get_database
from channelsite.database.models import ApiKey
from channelsite.llm.client import OPENROUTER_BASE_URL, TOGETHER_BASE_URL, LLMClient
from channelsite.llm.keys import ApiKeyStore, ProviderKey


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _key_store(*providers):
    """Key store that has a key for the given providers only."""
    store = MagicMock(spec=ApiKeyStore)
    store.get_active_key.side_effect = lambda p: (
        ProviderKey(provider=p, value=f"{p}-key") if p in providers else None
    )
    return store


@pytest.fixture
def groq_cls():
    with patch("channelsite.llm.client.Groq") as groq_cls:
        yield groq_cls


@pytest.fixture
def openai_cls():
    with patch("channelsite.llm.client.OpenAI") as openai_cls:
        yield openai_cls


class TestFallbackChain:

    def test_first_provider_answers(self, groq_cls, openai_cls):
        groq_cls.return_value.chat.completions.create.return_value = _completion("<html></html>")
        store = _key_store("groq", "openrouter", "together")

        result = LLMClient(key_store=store).generate("build a site", system_prompt="sys")

        assert result.provider == "groq"
        assert result.content == "<html></html>"
        assert result.model == get_settings().groq_model
        groq_cls.assert_called_once()
        openai_cls.assert_not_called()
        store.record_usage.assert_called_once()

    def test_falls_back_to_openrouter(self, groq_cls, openai_cls):
        groq_cls.return_value.chat.completions.create.side_effect = RuntimeError("429 rate limit")
        openai_cls.return_value.chat.completions.create.return_value = _completion("ok")

        result = LLMClient(key_store=_key_store("groq", "openrouter")).generate("hi")

        assert result.provider == "openrouter"
        kwargs = openai_cls.call_args.kwargs
        assert kwargs["base_url"] == OPENROUTER_BASE_URL
        assert kwargs["api_key"] == "openrouter-key"
        assert "HTTP-Referer" in kwargs["default_headers"]

    def test_provider_without_key_is_skipped(self, groq_cls, openai_cls):
        openai_cls.return_value.chat.completions.create.return_value = _completion("ok")

        result = LLMClient(key_store=_key_store("together")).generate("hi")

        assert result.provider == "together"
        groq_cls.assert_not_called()
        assert openai_cls.call_args.kwargs["base_url"] == TOGETHER_BASE_URL

    def test_empty_response_counts_as_failure(self, groq_cls, openai_cls):
        groq_cls.return_value.chat.completions.create.return_value = _completion("   ")
        openai_cls.return_value.chat.completions.create.return_value = _completion("real answer")

        result = LLMClient(key_store=_key_store("groq", "openrouter")).generate("hi")

        assert result.provider == "openrouter"
        assert result.content == "real answer"

    def test_database_key_model_overrides_default(self, groq_cls):
        groq_cls.return_value.chat.completions.create.return_value = _completion("ok")
        store = MagicMock(spec=ApiKeyStore)
        store.get_active_key.return_value = ProviderKey(
            provider="groq", value="db-key", model="custom-model", key_id="k1"
        )

        result = LLMClient(key_store=store).generate("hi")

        assert result.model == "custom-model"
        create_kwargs = groq_cls.return_value.chat.completions.create.call_args.kwargs
        assert create_kwargs["model"] == "custom-model"

    def test_all_providers_fail(self, groq_cls, openai_cls):
        groq_cls.return_value.chat.completions.create.side_effect = RuntimeError("boom")
        openai_cls.return_value.chat.completions.create.side_effect = RuntimeError("down")

        with pytest.raises(LLMError) as exc_info:
            LLMClient(key_store=_key_store("groq", "openrouter", "together")).generate("hi")

        assert "Last error: down" in exc_info.value.message

    def test_no_keys_configured(self, groq_cls, openai_cls):
        with pytest.raises(LLMError) as exc_info:
            LLMClient(key_store=_key_store()).generate("hi")

        assert exc_info.value.message == "No LLM provider has an API key configured"
        groq_cls.assert_not_called()
        openai_cls.assert_not_called()

    def test_linear_delay_between_attempts(self, groq_cls, openai_cls):
        groq_cls.return_value.chat.completions.create.side_effect = RuntimeError("boom")
        openai_cls.return_value.chat.completions.create.side_effect = [
            RuntimeError("down"), _completion("ok")
        ]
        client = LLMClient(key_store=_key_store("groq", "openrouter", "together"))
        client.delay = 1.5

        with patch("channelsite.llm.client.time.sleep") as sleep:
            result = client.generate("hi")

        assert result.provider == "together"
        assert [c.args[0] for c in sleep.call_args_list] == [1.5, 3.0]

    def test_messages_include_history(self, groq_cls):
        groq_cls.return_value.chat.completions.create.return_value = _completion("ok")
        history = [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "reply"},
        ]

        LLMClient(key_store=_key_store("groq")).generate(
            "second", system_prompt="sys", history=history, max_tokens=500
        )

        create_kwargs = groq_cls.return_value.chat.completions.create.call_args.kwargs
        assert create_kwargs["messages"] == [
            {"role": "system", "content": "sys"},
            *history,
            {"role": "user", "content": "second"},
        ]
        assert create_kwargs["max_tokens"] == 500

    def test_available_providers(self):
        client = LLMClient(key_store=_key_store("groq", "together"))
        assert client.available_providers() == ["groq", "together"]


class TestApiKeyStore:

    def _add_key(self, **fields):
        with get_database().get_session() as session:
            row = ApiKey(name="primary", **fields)
            session.add(row)
        return row

    def test_database_key_wins(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "env-key")
        get_settings.cache_clear()
        self._add_key(provider="groq", key_value="db-key", model="llama-3.1-8b-instant")

        key = ApiKeyStore().get_active_key("groq")

        assert key.value == "db-key"
        assert key.model == "llama-3.1-8b-instant"
        assert key.from_database

    def test_inactive_key_is_ignored(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "env-key")
        get_settings.cache_clear()
        self._add_key(provider="groq", key_value="old", is_active=False)

        key = ApiKeyStore().get_active_key("groq")

        assert key.value == "env-key"
        assert not key.from_database

    def test_no_key(self):
        assert ApiKeyStore().get_active_key("openrouter") is None

    def test_record_usage(self):
        row = self._add_key(provider="together", key_value="db-key")
        store = ApiKeyStore()

        store.record_usage(store.get_active_key("together"))

        with get_database().get_session() as session:
            stored = session.get(ApiKey, row.id)
            assert stored.requests_count == 1
            assert stored.last_used_at is not None
