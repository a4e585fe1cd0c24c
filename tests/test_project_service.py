"""Tests for project CRUD, ownership and plan limits."""
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError as PydanticValidationError

from channelsite.core.exceptions import ChannelNotFoundError, ProjectLimitExceeded, ProjectNotFoundError
from channelsite.integrations.youtube import ChannelInfo, YouTubeClient
from channelsite.models.project import ProjectCreate, ProjectUpdate
from channelsite.services.project_service import ProjectService

from tests.conftest import OTHER_USER_ID, USER_ID


@pytest.fixture
def service() -> ProjectService:
    return ProjectService()


def _create(service, name="Site", user_id=USER_ID, role="user", **fields):
    return service.create_project(user_id, role, ProjectCreate(name=name, **fields))


class TestCreateProject:

    def test_create_and_get(self, service):
        project = _create(service, name="  Test Kitchen  ", description="Cooking")

        loaded = service.get_project(project.id, USER_ID)
        assert loaded.name == "Test Kitchen"
        assert loaded.description == "Cooking"
        assert loaded.status == "active"
        assert loaded.channel_data is None

    def test_free_plan_limit(self, service):
        _create(service, name="One")
        _create(service, name="Two")

        with pytest.raises(ProjectLimitExceeded) as exc_info:
            _create(service, name="Three")

        assert exc_info.value.limit == 2
        assert exc_info.value.status_code == 403

    def test_admin_limit(self, service):
        for i in range(3):
            _create(service, name=f"Site {i}", role="admin")
        assert service.count_projects(USER_ID) == 3

    def test_channel_is_fetched(self):
        youtube = MagicMock(spec=YouTubeClient)
        youtube.fetch_channel.return_value = ChannelInfo(id="UC1", title="Test Kitchen", subscriber_count=10)
        service = ProjectService(youtube_client=youtube)

        project = _create(service, youtube_url="https://www.youtube.com/@testkitchen")

        youtube.fetch_channel.assert_called_once_with("testkitchen")
        assert service.get_project(project.id, USER_ID).channel_data["title"] == "Test Kitchen"

    def test_channel_failure_still_creates_project(self):
        youtube = MagicMock(spec=YouTubeClient)
        youtube.fetch_channel.side_effect = ChannelNotFoundError("testkitchen")
        service = ProjectService(youtube_client=youtube)

        project = _create(service, youtube_url="https://www.youtube.com/@testkitchen")

        assert project.channel_data is None
        assert project.youtube_url == "https://www.youtube.com/@testkitchen"

    def test_no_youtube_key_skips_fetch(self, service):
        project = _create(service, youtube_url="https://www.youtube.com/@testkitchen")
        assert project.channel_data is None


class TestLimits:

    def test_limits(self, service):
        _create(service)
        limits = service.get_limits(USER_ID, "user")

        assert limits == {
            "count": 1,
            "max_projects": 2,
            "remaining": 1,
            "can_create": True,
            "usage_percentage": 50.0,
        }

    def test_limits_at_capacity(self, service):
        _create(service, name="One")
        _create(service, name="Two")
        limits = service.get_limits(USER_ID, "user")

        assert limits["remaining"] == 0
        assert not limits["can_create"]
        assert limits["usage_percentage"] == 100.0


class TestOwnership:

    def test_other_user_cannot_see_project(self, service, project):
        with pytest.raises(ProjectNotFoundError):
            service.get_project(project.id, OTHER_USER_ID)

    def test_list_only_own_projects(self, service, project):
        _create(service, name="Someone else", user_id=OTHER_USER_ID)

        projects = service.list_projects(USER_ID)
        assert [p.id for p in projects] == [project.id]

    def test_list_is_most_recent_first(self, service):
        first = _create(service, name="First")
        second = _create(service, name="Second")
        service.save_source_code(first.id, USER_ID, "<html></html>")

        assert [p.id for p in service.list_projects(USER_ID)] == [first.id, second.id]


class TestUpdateDelete:

    def test_update_only_given_fields(self, service, project):
        service.update_project(project.id, USER_ID, ProjectUpdate(status="archived"))

        loaded = service.get_project(project.id, USER_ID)
        assert loaded.status == "archived"
        assert loaded.name == "Test Kitchen Site"

    def test_save_source_code(self, service, project, sample_page):
        service.save_source_code(project.id, USER_ID, sample_page)
        assert service.get_project(project.id, USER_ID).source_code == sample_page

    def test_set_netlify_url(self, service, project):
        service.set_netlify_url(project.id, USER_ID, "https://test-kitchen-site.netlify.app")
        assert service.get_project(project.id, USER_ID).netlify_url == "https://test-kitchen-site.netlify.app"

    def test_delete(self, service, project):
        service.delete_project(project.id, USER_ID)

        with pytest.raises(ProjectNotFoundError):
            service.get_project(project.id, USER_ID)

    def test_delete_other_users_project(self, service, project):
        with pytest.raises(ProjectNotFoundError):
            service.delete_project(project.id, OTHER_USER_ID)


def test_project_files(service, project_with_code, sample_page):
    files = service.project_files(project_with_code)

    assert set(files) == {"index.html", "README.md"}
    assert files["index.html"] == sample_page
    readme = files["README.md"]
    assert readme.startswith("# Test Kitchen Site")
    assert "Cooking channel" in readme
    assert "No channel data available" in readme
    assert "Not deployed yet" in readme


class TestProjectModels:

    def test_name_is_stripped(self):
        assert ProjectCreate(name="  Test Kitchen  ").name == "Test Kitchen"
        assert ProjectUpdate(name=" Renamed ").name == "Renamed"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_is_rejected(self, name):
        with pytest.raises(PydanticValidationError):
            ProjectCreate(name=name)

    @pytest.mark.parametrize("field", ["name", "status", "verified"])
    def test_null_for_required_column_is_rejected(self, field):
        with pytest.raises(PydanticValidationError):
            ProjectUpdate(**{field: None})

    def test_null_clears_optional_fields(self):
        update = ProjectUpdate(description=None, youtube_url=None)
        assert update.model_dump(exclude_unset=True) == {"description": None, "youtube_url": None}

    def test_unset_fields_are_not_validated(self):
        assert ProjectUpdate().model_dump(exclude_unset=True) == {}
