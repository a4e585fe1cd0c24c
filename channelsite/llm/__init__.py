"""
LLM module - Language model integration.

This module handles all LLM interactions:
- Provider key lookup (api_keys table, environment fallback)
- The Groq -> OpenRouter -> Together fallback chain
- Prompt construction (see channelsite.llm.prompts)
"""
from channelsite.core.exceptions import LLMError
from channelsite.llm.client import LLMClient, LLMResult, get_llm_client, reset_llm_client
from channelsite.llm.keys import ApiKeyStore, ProviderKey

__all__ = [
    "LLMClient",
    "LLMResult",
    "LLMError",
    "ApiKeyStore",
    "ProviderKey",
    "get_llm_client",
    "reset_llm_client",
]
