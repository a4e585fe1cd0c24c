"""
Shared test fixtures and configuration for the entire test suite.

Provides: in-memory SQLite database, a sample generated page, a mocked
LLM client, and a TestClient with caller identity headers.
"""
import os
import tempfile

# Settings are read once and cached, so the environment must be in place
# before any channelsite import
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="channelsite-logs-")
os.environ["GROQ_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["TOGETHER_API_KEY"] = ""
os.environ["YOUTUBE_API_KEY"] = ""
os.environ["GITHUB_TOKEN"] = ""
os.environ["NETLIFY_TOKEN"] = ""
os.environ["NETLIFY_DEPLOY_POLL_ATTEMPTS"] = "0"
os.environ["LLM_FALLBACK_DELAY_SECONDS"] = "0"
os.environ["MEMORY_PERSISTENT"] = "true"
os.environ["RATE_LIMIT_PER_MINUTE"] = "30"
os.environ["FREE_PROJECT_LIMIT"] = "2"
os.environ["ENABLE_AUDIT_LOGGING"] = "true"

from unittest.mock import MagicMock

import pytest

from channelsite.core.config import get_settings
from channelsite.core.rate_limiter import reset_rate_limiter
from channelsite.database.connection import reset_database
from channelsite.database.init_db import drop_tables, init_tables
from channelsite.llm.client import LLMClient, LLMResult, reset_llm_client
from channelsite.memory import reset_memory_manager, reset_persistent_memory_manager
from channelsite.models.project import ProjectCreate
from channelsite.services.chat_service import reset_chat_service
from channelsite.services.deploy_service import reset_deploy_service
from channelsite.services.generation_service import reset_generation_service
from channelsite.services.project_service import get_project_service, reset_project_service
from channelsite.services.sync_service import reset_sync_service


USER_ID = "user-1111"
OTHER_USER_ID = "user-2222"

SAMPLE_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Test Kitchen</title>
    <style>
        :root { --primary: #e11d48; --secondary: #334155; --font-family: 'Inter', sans-serif; }
        body { font-family: var(--font-family); }
    </style>
</head>
<body>
    <header class="site-header"><nav class="navbar"><div class="logo">Test Kitchen</div><a href="#videos">Videos</a></nav></header>
    <section class="hero-section"><h1>Test Kitchen</h1><p>Cooking every week</p><button id="subscribe" class="btn-primary">Subscribe</button></section>
    <section class="video-gallery" id="videos"><h2>Latest Videos</h2><div class="video-card"><h3>Pasta night</h3></div></section>
    <footer class="site-footer"><p>&copy; 2024 Test Kitchen</p></footer>
</body>
</html>"""

SAMPLE_CHANNEL = {
    "id": "UC1234567890",
    "title": "Test Kitchen",
    "description": "Cooking every week",
    "thumbnail": "https://yt3.example/thumb.jpg",
    "subscriber_count": 125000,
    "video_count": 240,
    "view_count": 9800000,
    "custom_url": "@testkitchen",
    "videos": [],
}


def _reset_singletons():
    reset_rate_limiter()
    reset_chat_service()
    reset_generation_service()
    reset_sync_service()
    reset_deploy_service()
    reset_project_service()
    reset_llm_client()
    reset_memory_manager()
    reset_persistent_memory_manager()
    reset_database()


@pytest.fixture(autouse=True)
def fresh_state():
    """Every test gets new settings, singletons and an empty database."""
    get_settings.cache_clear()
    _reset_singletons()
    init_tables()
    yield
    drop_tables()
    _reset_singletons()


@pytest.fixture
def sample_page() -> str:
    return SAMPLE_PAGE


@pytest.fixture
def sample_channel() -> dict:
    return dict(SAMPLE_CHANNEL)


@pytest.fixture
def mock_llm(monkeypatch) -> MagicMock:
    """
    Replace the LLM client singleton.

    By default every call succeeds with Groq and returns the sample page
    wrapped in a markdown fence, the way models usually answer.
    """
    llm = MagicMock(spec=LLMClient)
    llm.provider_order = ["groq", "openrouter", "together"]
    llm.available_providers.return_value = ["groq"]
    llm.generate.return_value = LLMResult(
        content=f"Here is your website:\n```html\n{SAMPLE_PAGE}\n```",
        provider="groq",
        model="llama-3.3-70b-versatile",
    )
    monkeypatch.setattr("channelsite.llm.client._llm_client", llm)
    return llm


@pytest.fixture
def project():
    """A project owned by USER_ID with no code yet."""
    return get_project_service().create_project(
        USER_ID, "user", ProjectCreate(name="Test Kitchen Site", description="Cooking channel")
    )


@pytest.fixture
def project_with_code(project):
    get_project_service().save_source_code(project.id, USER_ID, SAMPLE_PAGE)
    return get_project_service().get_project(project.id, USER_ID)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from channelsite.api.main import app
    return TestClient(app)


@pytest.fixture
def headers() -> dict:
    return {"X-User-Id": USER_ID}
