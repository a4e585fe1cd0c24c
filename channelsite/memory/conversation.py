"""
Conversation Memory - The chat attached to a website project.

A project chat mixes assistant Q&A with generation requests; the
generation service stores which provider answered and which component a
targeted edit touched in each assistant message's metadata.

Only the last few messages go back to the LLM as context; the builder
UI shows the full (capped) history.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional, Literal

Role = Literal["user", "assistant"]


@dataclass
class Message:
    """
    One chat message of a project.

    Example:
        >>> Message(role="user", content="Make the hero darker").to_llm()
        {'role': 'user', 'content': 'Make the hero darker'}
    """
    role: Role
    content: str
    timestamp: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_llm(self) -> Dict[str, str]:
        """Chat-completions shape; metadata never reaches the provider."""
        return {"role": self.role, "content": self.content}


class ConversationMemory:
    """
    Ordered chat of one project, capped at max_messages (oldest dropped).

    Example:
        >>> memory = ConversationMemory(project_id="p-1", user_id="u-1")
        >>> memory.add_user_message("Add a dark mode toggle")
        >>> memory.add_assistant_message("Updated the header (component change) with Groq.")
        >>> len(memory.get_recent_history(4))
        2
    """

    def __init__(
        self,
        project_id: str,
        user_id: str = "",
        max_messages: int = 50
    ):
        self.project_id = project_id
        self.user_id = user_id
        self.max_messages = max_messages
        self.messages: List[Message] = []
        self.created_at = datetime.utcnow()
        self.last_activity = self.created_at

    def add_user_message(self, content: str, metadata: Optional[Dict[str, Any]] = None) -> Message:
        return self.append(Message(role="user", content=content, metadata=metadata or {}))

    def add_assistant_message(self, content: str, metadata: Optional[Dict[str, Any]] = None) -> Message:
        return self.append(Message(role="assistant", content=content, metadata=metadata or {}))

    def append(self, message: Message) -> Message:
        """Store a message; subclasses persist it as well."""
        self.messages.append(message)
        self.last_activity = message.timestamp
        del self.messages[:-self.max_messages]
        return message

    def get_history(self) -> List[Message]:
        return list(self.messages)

    def get_recent_history(self, n: int = 4) -> List[Dict[str, str]]:
        """Last n messages as LLM context."""
        if n <= 0:
            return []
        return [message.to_llm() for message in self.messages[-n:]]

    def clear(self) -> None:
        self.messages = []
        self.last_activity = datetime.utcnow()

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def is_empty(self) -> bool:
        return not self.messages
