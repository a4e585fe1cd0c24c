"""Tests for publishing projects on Netlify."""
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from channelsite.core.config import get_settings
from channelsite.core.exceptions import (
    NetlifyDeployError,
    NetlifyNotConfiguredError,
    ValidationError,
)
from channelsite.database.connection import get_database
from channelsite.database.models import DeploymentToken
from channelsite.integrations.netlify import NetlifyDeploy
from channelsite.services.deploy_service import DeployService, deploy_files, sitemap_xml
from channelsite.services.project_service import get_project_service

from tests.conftest import SAMPLE_PAGE, USER_ID

SITE_URL = "https://test-kitchen-site.netlify.app"


@pytest.fixture
def netlify() -> MagicMock:
    netlify = MagicMock(spec=NetlifyDeploy)
    netlify.create_site.return_value = {"site_id": "site-123", "url": SITE_URL}
    netlify.deploy_files.return_value = {"id": "deploy-1", "state": "uploaded"}
    netlify.wait_for_deploy.return_value = "ready"
    return netlify


@pytest.fixture
def tokens_seen() -> list:
    return []


@pytest.fixture
def service(netlify, tokens_seen, monkeypatch) -> DeployService:
    monkeypatch.setenv("NETLIFY_TOKEN", "env-token")
    monkeypatch.setenv("NETLIFY_DEPLOY_POLL_ATTEMPTS", "5")
    get_settings.cache_clear()

    def factory(token):
        tokens_seen.append(token)
        return netlify

    return DeployService(netlify_factory=factory)


def test_deploy_files():
    files = deploy_files(SAMPLE_PAGE, SITE_URL)

    assert files["index.html"] == SAMPLE_PAGE
    assert files["robots.txt"] == "User-agent: *\nAllow: /\n"
    assert f"<loc>{SITE_URL}</loc>" in files["sitemap.xml"]


def test_deploy_files_without_url_has_no_sitemap():
    assert sorted(deploy_files(SAMPLE_PAGE, "")) == ["index.html", "robots.txt"]


def test_sitemap_lastmod():
    assert "<lastmod>2026-03-01</lastmod>" in sitemap_xml(SITE_URL, datetime(2026, 3, 1, 12, 30))


class TestToken:

    def test_stored_token_wins(self, service):
        with get_database().get_session() as session:
            session.add(DeploymentToken(
                user_id=USER_ID, provider="netlify", token_name="main", token_value="db-token"
            ))

        assert service.get_token(USER_ID) == "db-token"

    def test_github_token_is_not_used(self, service):
        with get_database().get_session() as session:
            session.add(DeploymentToken(
                user_id=USER_ID, provider="github", token_name="gh", token_value="gh-token"
            ))

        assert service.get_token(USER_ID) == "env-token"

    def test_inactive_token_is_skipped(self, service):
        with get_database().get_session() as session:
            session.add(DeploymentToken(
                user_id=USER_ID, provider="netlify", token_name="old",
                token_value="old-token", is_active=False
            ))

        assert service.get_token(USER_ID) == "env-token"

    def test_no_token(self, monkeypatch):
        monkeypatch.setenv("NETLIFY_TOKEN", "")
        get_settings.cache_clear()

        with pytest.raises(NetlifyNotConfiguredError):
            DeployService().get_token(USER_ID)


class TestDeployProject:

    def test_first_deploy_creates_site(self, service, netlify, tokens_seen, project_with_code):
        result = service.deploy_project(project_with_code.id, USER_ID)

        assert tokens_seen == ["env-token"]
        netlify.create_site.assert_called_once_with("test-kitchen-site")
        site_id, files = netlify.deploy_files.call_args.args
        assert site_id == "site-123"
        assert sorted(files) == ["index.html", "robots.txt", "sitemap.xml"]
        netlify.wait_for_deploy.assert_called_once_with("deploy-1", attempts=5)

        assert result.created_site
        assert result.ready
        assert (result.site_url, result.deploy_id, result.deployed_files) == (SITE_URL, "deploy-1", 3)
        assert get_project_service().get_project(project_with_code.id, USER_ID).netlify_url == SITE_URL

    def test_custom_site_name(self, service, netlify, project_with_code):
        service.deploy_project(project_with_code.id, USER_ID, site_name="kitchen-live")
        netlify.create_site.assert_called_once_with("kitchen-live")

    def test_existing_site_is_reused(self, service, netlify, project_with_code):
        get_project_service().set_netlify_url(project_with_code.id, USER_ID, SITE_URL)

        result = service.deploy_project(project_with_code.id, USER_ID)

        netlify.create_site.assert_not_called()
        assert netlify.deploy_files.call_args.args[0] == "test-kitchen-site.netlify.app"
        assert not result.created_site
        assert result.site_url == SITE_URL

    def test_create_site_forces_a_new_site(self, service, netlify, project_with_code):
        get_project_service().set_netlify_url(project_with_code.id, USER_ID, "https://old.netlify.app")
        netlify.create_site.return_value = {"site_id": "site-456", "url": SITE_URL}

        service.deploy_project(project_with_code.id, USER_ID, create_site=True)

        netlify.create_site.assert_called_once()
        assert get_project_service().get_project(project_with_code.id, USER_ID).netlify_url == SITE_URL

    def test_ready_upload_is_not_polled(self, service, netlify, project_with_code):
        netlify.deploy_files.return_value = {"id": "deploy-1", "state": "ready"}

        assert service.deploy_project(project_with_code.id, USER_ID).state == "ready"
        netlify.wait_for_deploy.assert_not_called()

    def test_polling_disabled(self, netlify, project_with_code, monkeypatch):
        monkeypatch.setenv("NETLIFY_TOKEN", "env-token")
        monkeypatch.setenv("NETLIFY_DEPLOY_POLL_ATTEMPTS", "0")
        get_settings.cache_clear()

        result = DeployService(netlify_factory=lambda token: netlify).deploy_project(
            project_with_code.id, USER_ID
        )

        netlify.wait_for_deploy.assert_not_called()
        assert result.state == "uploaded"
        assert not result.ready

    def test_project_without_code(self, service, netlify, project):
        with pytest.raises(ValidationError):
            service.deploy_project(project.id, USER_ID)

        netlify.create_site.assert_not_called()

    def test_site_creation_failure_leaves_project_alone(self, service, netlify, project_with_code):
        netlify.create_site.side_effect = NetlifyDeployError("Failed to create site: 422")

        with pytest.raises(NetlifyDeployError):
            service.deploy_project(project_with_code.id, USER_ID)

        assert get_project_service().get_project(project_with_code.id, USER_ID).netlify_url is None
