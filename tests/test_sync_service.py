"""Tests for pushing projects to GitHub and tracking sync status."""
from unittest.mock import MagicMock

import pytest

from channelsite.core.config import get_settings
from channelsite.core.exceptions import GitHubNotConfiguredError, GitHubSyncError
from channelsite.database.connection import get_database
from channelsite.database.models import DeploymentToken
from channelsite.integrations.github import GitHubSync
from channelsite.services.project_service import get_project_service
from channelsite.services.sync_service import SyncService, final_status

from tests.conftest import USER_ID

REPO_URL = "https://github.com/alice/test-kitchen-site"


@pytest.fixture
def github() -> MagicMock:
    github = MagicMock(spec=GitHubSync)
    github.get_user_login.return_value = "alice"
    github.create_repository.return_value = REPO_URL
    github.put_file.return_value = {"content": {"sha": "file-sha"}}
    github.latest_commit_hash.return_value = "1a2b3c4"
    return github


@pytest.fixture
def tokens_seen() -> list:
    return []


@pytest.fixture
def service(github, tokens_seen, monkeypatch) -> SyncService:
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    get_settings.cache_clear()

    def factory(token):
        tokens_seen.append(token)
        return github

    return SyncService(github_factory=factory)


@pytest.mark.parametrize("synced, failed, status", [
    (2, 0, "success"),
    (1, 1, "partial"),
    (0, 2, "error"),
])
def test_final_status(synced, failed, status):
    assert final_status(synced, failed) == status


class TestToken:

    def test_stored_token_wins(self, service):
        with get_database().get_session() as session:
            session.add(DeploymentToken(
                user_id=USER_ID, provider="github", token_name="main", token_value="db-token"
            ))

        assert service.get_token(USER_ID) == "db-token"

    def test_environment_token(self, service):
        assert service.get_token(USER_ID) == "env-token"

    def test_no_token(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "")
        get_settings.cache_clear()

        with pytest.raises(GitHubNotConfiguredError):
            SyncService().get_token(USER_ID)


class TestSyncProject:

    def test_first_sync_creates_repository(self, service, github, tokens_seen, project_with_code):
        result = service.sync_project(project_with_code.id, USER_ID)

        assert tokens_seen == ["env-token"]
        github.create_repository.assert_called_once_with("test-kitchen-site", "Cooking channel")
        assert result.success
        assert result.sync_status == "success"
        assert result.repository_url == REPO_URL
        assert (result.synced_files, result.failed_files, result.total_files) == (2, 0, 2)
        assert result.commit_hash == "1a2b3c4"
        assert result.message == "Successfully synced all 2 files to GitHub"
        assert {r.path for r in result.results} == {"index.html", "README.md"}
        assert get_project_service().get_project(project_with_code.id, USER_ID).github_url == REPO_URL

    def test_existing_repository_is_reused(self, service, github, project_with_code):
        get_project_service().set_github_url(project_with_code.id, USER_ID, REPO_URL)

        service.sync_project(project_with_code.id, USER_ID, commit_message="Tweak footer")

        github.create_repository.assert_not_called()
        owner, repo, path, _, message = github.put_file.call_args.args
        assert (owner, repo, message) == ("alice", "test-kitchen-site", "Tweak footer")

    def test_partial_failure(self, service, github, project_with_code):
        github.put_file.side_effect = [
            {"content": {"sha": "a"}},
            GitHubSyncError("Failed to update file README.md: 409 - conflict"),
        ]

        result = service.sync_project(project_with_code.id, USER_ID)

        assert result.success
        assert result.sync_status == "partial"
        assert result.message == "Synced 1 files successfully, 1 failed"
        failed = [r for r in result.results if not r.success]
        assert failed[0].error.startswith("Failed to update file")

    def test_everything_fails(self, service, github, project_with_code):
        github.put_file.side_effect = GitHubSyncError("down")

        result = service.sync_project(project_with_code.id, USER_ID)

        assert not result.success
        assert result.sync_status == "error"
        assert result.commit_hash == ""
        github.latest_commit_hash.assert_not_called()

    def test_explicit_files(self, service, github, project_with_code):
        result = service.sync_project(project_with_code.id, USER_ID, files={"about.html": "<p>hi</p>"})

        assert result.total_files == 1
        assert github.put_file.call_args.args[2] == "about.html"

    def test_repository_creation_failure_is_recorded(self, service, github, project_with_code):
        github.create_repository.side_effect = GitHubSyncError("Failed to create repository: 422")

        with pytest.raises(GitHubSyncError):
            service.sync_project(project_with_code.id, USER_ID)

        status = service.get_status(project_with_code.id, USER_ID)
        assert status["sync_status"] == "error"
        assert status["error_message"] == "Failed to create repository: 422"


class TestStatus:

    def test_no_sync_yet(self, service, project):
        assert service.get_status(project.id, USER_ID) is None

    def test_status_after_sync(self, service, project_with_code):
        service.sync_project(project_with_code.id, USER_ID)

        status = service.get_status(project_with_code.id, USER_ID)
        assert status["sync_status"] == "success"
        assert status["files_synced"] == 2
        assert status["commit_hash"] == "1a2b3c4"
        assert status["last_sync_at"] is not None

    def test_status_is_upserted(self, service, github, project_with_code):
        service.sync_project(project_with_code.id, USER_ID)
        github.put_file.side_effect = GitHubSyncError("down")
        service.sync_project(project_with_code.id, USER_ID)

        status = service.get_status(project_with_code.id, USER_ID)
        assert status["sync_status"] == "error"
        # last successful sync time is kept
        assert status["last_sync_at"] is not None
