"""
Settings for the builder API, read from the environment.

A .env file at the repository root is loaded with python-dotenv first.
Provider keys here are only fallbacks: keys stored in the api_keys
table win (see channelsite.llm.keys).
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import quote_plus

from dotenv import load_dotenv


# Before any os.environ lookups
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Immutable application settings; one instance per process (see get_settings).

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        database_url: Supabase Postgres connection string
        groq_api_key: Fallback API key for Groq (DB keys take priority)
        openrouter_api_key: Fallback API key for OpenRouter
        together_api_key: Fallback API key for Together
        llm_provider_order: Provider names in fallback order
        llm_temperature: LLM creativity (0.0 = deterministic, 1.0 = creative)
        llm_max_tokens: Maximum response length for website generation
        llm_chat_max_tokens: Maximum response length for assistant chat
        llm_fallback_delay_seconds: Base delay between provider attempts
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: Optional[str]

    # Database settings
    database_url: str

    # LLM settings
    groq_api_key: str
    openrouter_api_key: str
    together_api_key: str
    groq_model: str
    openrouter_model: str
    together_model: str
    llm_provider_order: Tuple[str, ...]
    llm_temperature: float
    llm_max_tokens: int
    llm_chat_max_tokens: int
    llm_fallback_delay_seconds: float
    llm_timeout_seconds: int

    # YouTube Data API
    youtube_api_key: str
    youtube_max_videos: int

    # GitHub sync
    github_api_url: str
    github_token: str

    # Netlify deploy
    netlify_api_url: str
    netlify_token: str
    netlify_deploy_poll_attempts: int

    # Memory / safety / limits
    memory_persistent: bool
    rate_limit_per_minute: int
    enable_audit_logging: bool
    free_project_limit: int
    admin_project_limit: int

    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """Environment value, or default; ValueError when neither exists."""
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _build_database_url() -> str:
    """
    Resolve the Supabase Postgres URL.

    Priority:
    1. DATABASE_URL (full connection string from the Supabase dashboard)
    2. SUPABASE_DB_* components
    """
    database_url = os.environ.get("DATABASE_URL")

    if not database_url:
        try:
            host = _get_env("SUPABASE_DB_HOST")
            port = _get_env("SUPABASE_DB_PORT", "5432")
            user = _get_env("SUPABASE_DB_USER", "postgres")
            password = _get_env("SUPABASE_DB_PASSWORD")
            name = _get_env("SUPABASE_DB_NAME", "postgres")
        except ValueError:
            raise ValueError(
                "Missing database configuration. Set DATABASE_URL or "
                "(SUPABASE_DB_HOST, SUPABASE_DB_PASSWORD, ...)"
            )

        database_url = (
            f"postgresql://{user}:{quote_plus(password)}@{host}:{port}/{name}"
            "?sslmode=require"
        )

    # SQLAlchemy no longer accepts the legacy postgres:// scheme
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)

    return database_url


def _parse_provider_order(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated provider list, dropping blanks."""
    return tuple(p.strip().lower() for p in raw.split(",") if p.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Settings are read once; call get_settings.cache_clear() after
    changing the environment (tests do this).

    Raises:
        ValueError: If required environment variables are missing
    """
    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "ChannelSiteBuilder"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "DEBUG"),
        log_dir=os.environ.get("LOG_DIR"),

        # Database
        database_url=_build_database_url(),

        # LLM
        groq_api_key=_get_env("GROQ_API_KEY", ""),
        openrouter_api_key=_get_env("OPENROUTER_API_KEY", ""),
        together_api_key=_get_env("TOGETHER_API_KEY", ""),
        groq_model=_get_env("GROQ_MODEL", "llama-3.3-70b-versatile"),
        openrouter_model=_get_env("OPENROUTER_MODEL", "meta-llama/llama-3.1-70b-instruct"),
        together_model=_get_env("TOGETHER_MODEL", "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo"),
        llm_provider_order=_parse_provider_order(
            _get_env("LLM_PROVIDER_ORDER", "groq,openrouter,together")
        ),
        llm_temperature=float(_get_env("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "8000")),
        llm_chat_max_tokens=int(_get_env("LLM_CHAT_MAX_TOKENS", "500")),
        llm_fallback_delay_seconds=float(_get_env("LLM_FALLBACK_DELAY_SECONDS", "1.0")),
        llm_timeout_seconds=int(_get_env("LLM_TIMEOUT_SECONDS", "120")),

        # YouTube
        youtube_api_key=_get_env("YOUTUBE_API_KEY", ""),
        youtube_max_videos=int(_get_env("YOUTUBE_MAX_VIDEOS", "12")),

        # GitHub
        github_api_url=_get_env("GITHUB_API_URL", "https://api.github.com").rstrip("/"),
        github_token=_get_env("GITHUB_TOKEN", ""),

        # Netlify
        netlify_api_url=_get_env("NETLIFY_API_URL", "https://api.netlify.com/api/v1").rstrip("/"),
        netlify_token=_get_env("NETLIFY_TOKEN", ""),
        netlify_deploy_poll_attempts=int(_get_env("NETLIFY_DEPLOY_POLL_ATTEMPTS", "30")),

        # Memory / safety / limits
        memory_persistent=_get_env("MEMORY_PERSISTENT", "true").lower() == "true",
        rate_limit_per_minute=int(_get_env("RATE_LIMIT_PER_MINUTE", "30")),
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
        free_project_limit=int(_get_env("FREE_PROJECT_LIMIT", "5")),
        admin_project_limit=int(_get_env("ADMIN_PROJECT_LIMIT", "100")),
    )
