"""Tests for the project website assistant."""
import pytest

from channelsite.core.exceptions import LLMError
from channelsite.llm.client import LLMResult
from channelsite.memory import get_memory_manager
from channelsite.services.chat_service import APOLOGY_REPLY, ChatService

from tests.conftest import USER_ID


@pytest.fixture
def service(mock_llm) -> ChatService:
    return ChatService()


def test_reply_and_feature(service, mock_llm, project):
    mock_llm.generate.return_value = LLMResult(content="Add a video grid!", provider="groq", model="m")

    reply = service.process_message(project.id, USER_ID, "How should I show my videos?")

    assert reply.reply == "Add a video grid!"
    assert reply.feature == "video"
    assert reply.provider == "groq"
    assert mock_llm.generate.call_args.kwargs["max_tokens"] == 500


def test_context_is_last_four_messages(service, mock_llm, project):
    memory = get_memory_manager().get_or_create(project.id, USER_ID)
    for i in range(3):
        memory.add_user_message(f"question {i}")
        memory.add_assistant_message(f"answer {i}")

    service.process_message(project.id, USER_ID, "and now?")

    history = mock_llm.generate.call_args.kwargs["history"]
    assert [m["content"] for m in history] == ["question 1", "answer 1", "question 2", "answer 2"]


def test_first_message_has_no_history(service, mock_llm, project):
    service.process_message(project.id, USER_ID, "hello")
    assert mock_llm.generate.call_args.kwargs["history"] is None


def test_system_prompt_names_channel(service, mock_llm, project):
    service.process_message(project.id, USER_ID, "hello")
    assert "YouTube channel" in mock_llm.generate.call_args.kwargs["system_prompt"]


def test_messages_are_stored(service, project):
    service.process_message(project.id, USER_ID, "Which colors fit my brand?")

    history = service.get_history(project.id, USER_ID)
    assert [m.role for m in history] == ["user", "assistant"]
    assert history[1].metadata == {"provider": "groq", "feature": "branding"}


def test_provider_failure_stores_apology(service, mock_llm, project):
    mock_llm.generate.side_effect = LLMError("All AI providers failed")

    with pytest.raises(LLMError) as exc_info:
        service.process_message(project.id, USER_ID, "hello")

    assert exc_info.value.message == APOLOGY_REPLY
    history = service.get_history(project.id, USER_ID)
    assert history[-1].content == APOLOGY_REPLY


def test_clear_history(service, project):
    service.process_message(project.id, USER_ID, "hello")

    assert service.clear_history(project.id, USER_ID)
    assert service.get_history(project.id, USER_ID) == []
    assert not service.clear_history(project.id, USER_ID)
