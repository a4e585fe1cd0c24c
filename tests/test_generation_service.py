"""Tests for full generation, targeted edits and the template fallback."""
import pytest

from channelsite.core.exceptions import LLMError, ProjectNotFoundError, TargetNotFoundError
from channelsite.llm.client import LLMResult
from channelsite.memory import get_memory_manager
from channelsite.services.generation_service import GenerationService, code_quality_for
from channelsite.services.project_service import get_project_service

from tests.conftest import OTHER_USER_ID, SAMPLE_PAGE, USER_ID


@pytest.fixture
def service(mock_llm) -> GenerationService:
    return GenerationService()


def test_code_quality_for():
    assert code_quality_for("groq") == "high"
    assert code_quality_for("openrouter") == "good"
    assert code_quality_for("together") == "good"
    assert code_quality_for("fallback") == "standard"


class TestFullGeneration:

    def test_generates_and_saves(self, service, mock_llm, project):
        result = service.generate(project.id, USER_ID, "Build a site for my cooking channel")

        assert result.provider == "groq"
        assert result.code_quality == "high"
        assert not result.targeted
        assert result.valid
        assert result.code == SAMPLE_PAGE
        assert result.reply == "Website generated successfully with Groq."
        assert get_project_service().get_project(project.id, USER_ID).source_code == SAMPLE_PAGE

    def test_uses_generation_prompts(self, service, mock_llm, project, sample_channel):
        service.generate(project.id, USER_ID, "Build a site", channel=sample_channel)

        kwargs = mock_llm.generate.call_args.kwargs
        assert "Build a site" in kwargs["user_message"]
        assert "Test Kitchen" in kwargs["user_message"]

    def test_records_both_messages(self, service, project):
        service.generate(project.id, USER_ID, "Build a site")

        history = get_memory_manager().get_or_create(project.id, USER_ID).get_history()
        assert [m.role for m in history] == ["user", "assistant"]
        assert history[0].content == "Build a site"
        assert history[1].metadata["provider"] == "groq"

    def test_request_with_no_target_on_existing_page_is_full(self, service, project_with_code):
        result = service.generate(project_with_code.id, USER_ID, "do something nice")
        assert not result.targeted

    def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            service.generate("8a6e0804-2bd0-4672-b79d-d97027f9071a", USER_ID, "Build a site")

    def test_other_users_project(self, service, project):
        with pytest.raises(ProjectNotFoundError):
            service.generate(project.id, OTHER_USER_ID, "Build a site")


class TestTargetedEdit:

    def test_footer_edit(self, service, mock_llm, project_with_code):
        edited = SAMPLE_PAGE.replace('class="site-footer"', 'class="site-footer dark"')
        mock_llm.generate.return_value = LLMResult(content=edited, provider="openrouter", model="m")

        result = service.generate(project_with_code.id, USER_ID, "make the footer darker")

        assert result.targeted
        assert result.target_component == "footer"
        assert result.change_scope == "component"
        assert result.valid
        assert result.code_quality == "good"
        assert result.reply == "Updated the footer (component change) with OpenRouter."
        assert "COMPONENT-LEVEL WEBSITE EDITING" in mock_llm.generate.call_args.kwargs["user_message"]
        assert get_project_service().get_project(project_with_code.id, USER_ID).source_code == edited

    def test_oversized_edit_is_not_saved(self, service, mock_llm, project_with_code):
        rewritten = SAMPLE_PAGE.replace("</footer>", "</footer>" + "<div>extra</div>" * 10)
        mock_llm.generate.return_value = LLMResult(content=rewritten, provider="groq", model="m")

        result = service.generate(project_with_code.id, USER_ID, "make the footer darker")

        assert not result.valid
        assert "was not saved" in result.reply
        assert get_project_service().get_project(project_with_code.id, USER_ID).source_code == SAMPLE_PAGE

        history = get_memory_manager().get_or_create(project_with_code.id, USER_ID).get_history()
        assert history[-1].metadata["valid"] is False

    def test_preview_targeted_change(self, service, mock_llm, project_with_code):
        change = service.preview_targeted_change(project_with_code.id, USER_ID, "make the footer darker")

        assert change.target_component == "footer"
        mock_llm.generate.assert_not_called()

    def test_preview_without_code(self, service, project):
        with pytest.raises(TargetNotFoundError):
            service.preview_targeted_change(project.id, USER_ID, "make the footer darker")


class TestFallback:

    def test_all_providers_down_uses_template(self, service, mock_llm, project, sample_channel):
        mock_llm.generate.side_effect = LLMError("All AI providers failed. Last error: boom")

        result = service.generate(project.id, USER_ID, "Build a site", channel=sample_channel)

        assert result.provider == "fallback"
        assert result.code_quality == "standard"
        assert not result.targeted
        assert "Test Kitchen" in result.code
        assert result.reply.startswith("AI providers are currently unavailable")
        assert get_project_service().get_project(project.id, USER_ID).source_code == result.code

    def test_fallback_replaces_targeted_edit(self, service, mock_llm, project_with_code):
        mock_llm.generate.side_effect = LLMError()

        result = service.generate(project_with_code.id, USER_ID, "make the footer darker")

        assert result.provider == "fallback"
        assert not result.targeted
        assert result.target_component is None
        assert result.valid
