"""
Chat Service - The website assistant conversation for a project.

This service orchestrates the chat flow:
1. Loads the project (for channel context) and its chat memory
2. Calls the provider chain with the last few messages as context
3. Stores both messages in the project chat history
4. Returns the reply with the detected feature category

Why a service layer:
1. Separation of concerns - Routes stay thin
2. Testability - Service can be tested without HTTP
"""
from dataclasses import dataclass
from typing import Optional

from channelsite.core.config import get_settings
from channelsite.core.exceptions import LLMError
from channelsite.core.logging_config import get_logger
from channelsite.llm.client import LLMClient, get_llm_client
from channelsite.llm.prompts import detect_feature, get_chat_system_prompt
from channelsite.memory import get_memory_manager
from channelsite.services.project_service import ProjectService, get_project_service

logger = get_logger(__name__)

CONTEXT_MESSAGES = 4
APOLOGY_REPLY = "I'm experiencing some technical difficulties. Please try again in a moment!"


@dataclass
class ChatReply:
    reply: str
    feature: str
    provider: str


class ChatService:
    """
    Service for the per-project website assistant.

    Example:
        >>> service = ChatService()
        >>> reply = service.process_message(project_id, user_id, "Can I add a video gallery?")
        >>> reply.feature
        'video'
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        project_service: Optional[ProjectService] = None,
        memory_manager=None
    ):
        self.settings = get_settings()
        self.llm_client = llm_client or get_llm_client()
        self.project_service = project_service or get_project_service()
        self.memory_manager = memory_manager or get_memory_manager()
        logger.info("ChatService initialized with memory support")

    def process_message(self, project_id: str, user_id: str, message: str) -> ChatReply:
        """
        Answer a chat message about a project.

        Raises:
            ProjectNotFoundError: If the project isn't the user's
            LLMError: If every provider fails (the apology is still stored)
        """
        project = self.project_service.get_project(project_id, user_id)
        memory = self.memory_manager.get_or_create(project_id, user_id)

        # Context is taken before the current message is added
        history = memory.get_recent_history(CONTEXT_MESSAGES)
        feature = detect_feature(message)

        logger.info(
            f"Processing chat: project={project_id}, message_length={len(message)}, "
            f"history={len(history)}"
        )

        memory.add_user_message(message)

        try:
            result = self.llm_client.generate(
                user_message=message,
                system_prompt=get_chat_system_prompt(project.channel_data),
                history=history or None,
                max_tokens=self.settings.llm_chat_max_tokens,
            )
        except LLMError as e:
            logger.error(f"LLM error during chat: {e.message}")
            memory.add_assistant_message(APOLOGY_REPLY, metadata={"error": True})
            raise LLMError(APOLOGY_REPLY) from e

        memory.add_assistant_message(result.content, metadata={
            "provider": result.provider,
            "feature": feature,
        })

        logger.info(f"Chat answered: project={project_id}, provider={result.provider}")
        return ChatReply(reply=result.content, feature=feature, provider=result.provider)

    def get_history(self, project_id: str, user_id: str):
        """Full chat history of a project (ownership enforced)."""
        self.project_service.get_project(project_id, user_id)
        return self.memory_manager.get_or_create(project_id, user_id).get_history()

    def clear_history(self, project_id: str, user_id: str) -> bool:
        self.project_service.get_project(project_id, user_id)
        return self.memory_manager.clear_history(project_id)


_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the chat service singleton."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


def reset_chat_service() -> None:
    """Reset the chat service (for testing)."""
    global _chat_service
    _chat_service = None
