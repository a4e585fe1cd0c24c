"""
LLM Client with a multi-provider fallback chain.

This module provides a single interface over the providers used for
website generation and chat:
- Groq (groq SDK)
- OpenRouter and Together (OpenAI-compatible endpoints via the openai SDK)

Providers are tried in LLM_PROVIDER_ORDER. A provider without a key is
skipped, an empty response counts as a failure, and the client waits
delay * attempt between attempts. When every provider fails, LLMError
is raised carrying the last error.
"""
import time
from dataclasses import dataclass
from typing import Optional, List, Dict

from groq import Groq
from openai import OpenAI

from channelsite.core.config import get_settings
from channelsite.core.exceptions import LLMError
from channelsite.core.logging_config import get_logger
from channelsite.llm.keys import ApiKeyStore, ProviderKey

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
TOGETHER_BASE_URL = "https://api.together.xyz/v1"

SUPPORTED_PROVIDERS = ("groq", "openrouter", "together")


@dataclass
class LLMResult:
    """Text returned by the first provider that succeeded."""
    content: str
    provider: str
    model: str


class LLMClient:
    """
    Client for the Groq -> OpenRouter -> Together fallback chain.

    Example:
        >>> client = LLMClient()
        >>> result = client.generate("Build a site for my cooking channel")
        >>> result.provider
        'groq'
    """

    def __init__(self, key_store: Optional[ApiKeyStore] = None):
        self.settings = get_settings()
        self.key_store = key_store or ApiKeyStore()

        self.provider_order = [
            p for p in self.settings.llm_provider_order if p in SUPPORTED_PROVIDERS
        ]
        self.temperature = self.settings.llm_temperature
        self.max_tokens = self.settings.llm_max_tokens
        self.delay = self.settings.llm_fallback_delay_seconds

        logger.info(f"LLM Client initialized: order={' -> '.join(self.provider_order)}")

    def available_providers(self) -> List[str]:
        """Providers that currently have a key configured."""
        return [p for p in self.provider_order if self.key_store.get_active_key(p)]

    def generate(
        self,
        user_message: str,
        system_prompt: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> LLMResult:
        """
        Generate a completion, falling back across providers.

        Raises:
            LLMError: If every provider is skipped or fails
        """
        if system_prompt is None:
            system_prompt = self._get_default_system_prompt()

        messages = [{"role": "system", "content": system_prompt}]
        if history:
            messages.extend(history)
        messages.append({"role": "user", "content": user_message})

        max_tokens = max_tokens or self.max_tokens
        temperature = self.temperature if temperature is None else temperature

        last_error: Optional[Exception] = None
        attempt = 0

        for provider in self.provider_order:
            key = self.key_store.get_active_key(provider)
            if key is None:
                logger.info(f"Skipping {provider}: no API key configured")
                continue

            model = key.model or self._default_model(provider)

            try:
                if attempt > 0:
                    logger.info(f"Attempt {attempt + 1}: Falling back to {provider} ({model})...")
                    time.sleep(self.delay * attempt)
                attempt += 1

                content = self._complete(provider, key, model, messages, max_tokens, temperature)

                if not content or not content.strip():
                    raise ValueError(f"{provider} returned an empty response")

                self.key_store.record_usage(key)
                logger.info(f"Generated {len(content)} chars with {provider}/{model}")
                return LLMResult(content=content, provider=provider, model=model)

            except Exception as e:
                error_msg = str(e).lower()
                is_rate_limit = "429" in error_msg or "quota" in error_msg or "rate limit" in error_msg

                log_level = logger.warning if is_rate_limit else logger.error
                log_level(f"Provider failed ({provider}/{model}): {e}")

                last_error = e

        logger.critical("ALL LLM PROVIDERS FAILED.")
        if last_error is None:
            raise LLMError("No LLM provider has an API key configured")
        raise LLMError(f"All AI providers failed. Last error: {last_error}")

    def _complete(
        self,
        provider: str,
        key: ProviderKey,
        model: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float
    ) -> str:
        """Execute one chat completion against a provider."""
        if provider == "groq":
            client = Groq(api_key=key.value, timeout=self.settings.llm_timeout_seconds)
        elif provider == "openrouter":
            client = OpenAI(
                api_key=key.value,
                base_url=OPENROUTER_BASE_URL,
                timeout=self.settings.llm_timeout_seconds,
                default_headers={
                    "HTTP-Referer": "https://channelsite.app",
                    "X-Title": self.settings.app_name,
                },
            )
        else:
            client = OpenAI(
                api_key=key.value,
                base_url=TOGETHER_BASE_URL,
                timeout=self.settings.llm_timeout_seconds,
            )

        response = client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""

    def _default_model(self, provider: str) -> str:
        return {
            "groq": self.settings.groq_model,
            "openrouter": self.settings.openrouter_model,
            "together": self.settings.together_model,
        }[provider]

    def _get_default_system_prompt(self) -> str:
        """Get default system prompt."""
        return "You are a helpful assistant."


_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Reset the LLM client (for testing)."""
    global _llm_client
    _llm_client = None
