"""
API key lookup for LLM providers.

Keys managed by admins live in the api_keys table; the environment
variables are only a fallback so a fresh deployment still works.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from channelsite.core.config import get_settings
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import ApiKey

logger = get_logger(__name__)


@dataclass
class ProviderKey:
    """A resolved provider key and where it came from."""
    provider: str
    value: str
    model: Optional[str] = None
    key_id: Optional[str] = None  # None for environment keys

    @property
    def from_database(self) -> bool:
        return self.key_id is not None


class ApiKeyStore:
    """Resolves the active key for each provider."""

    def __init__(self):
        self.settings = get_settings()
        self.db = get_database()

    def _env_key(self, provider: str) -> str:
        return {
            "groq": self.settings.groq_api_key,
            "openrouter": self.settings.openrouter_api_key,
            "together": self.settings.together_api_key,
        }.get(provider, "")

    def get_active_key(self, provider: str) -> Optional[ProviderKey]:
        """
        Get the key to use for a provider.

        Priority:
        1. Newest active row in api_keys for the provider
        2. Environment variable
        """
        try:
            with self.db.get_session() as session:
                row = session.query(ApiKey).filter(
                    ApiKey.provider == provider,
                    ApiKey.is_active.is_(True),
                ).order_by(ApiKey.created_at.desc()).first()

                if row:
                    return ProviderKey(
                        provider=provider,
                        value=row.key_value,
                        model=row.model,
                        key_id=row.id,
                    )
        except SQLAlchemyError as e:
            # The environment key still lets generation proceed
            logger.warning(f"API key lookup failed for {provider}, using environment: {e}")

        env_value = self._env_key(provider)
        if env_value:
            return ProviderKey(provider=provider, value=env_value)

        return None

    def record_usage(self, key: ProviderKey) -> None:
        """Increment requests_count and last_used_at for database keys."""
        if not key.from_database:
            return

        try:
            with self.db.get_session() as session:
                row = session.get(ApiKey, key.key_id)
                if row:
                    row.requests_count = (row.requests_count or 0) + 1
                    row.last_used_at = datetime.utcnow()
        except SQLAlchemyError as e:
            logger.warning(f"Failed to record usage for {key.provider} key: {e}")
