"""
Persistent Memory Manager - project_chat_history backed storage.

Provides the MemoryManager interface on top of the Supabase
project_chat_history table, with write-through caching:
- Reads: Check in-memory cache first, then DB
- Writes: Save to DB immediately, update cache

Metadata written by the generation service (provider, target component,
change scope) is stored in the table's JSON metadata column.
"""
from datetime import datetime
from typing import Any, Dict, Optional, List
import json
import threading

from sqlalchemy.orm import Session

from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import ProjectChatMessage
from channelsite.memory.conversation import Message, ConversationMemory

logger = get_logger(__name__)


class PersistentMemoryManager:
    """
    Database-backed memory manager with in-memory caching.

    Example:
        >>> manager = PersistentMemoryManager()
        >>> memory = manager.get_or_create("project-1", "user-1")
        >>> memory.add_user_message("Make the footer blue")
        >>> # the message is now a project_chat_history row
    """

    def __init__(self, max_messages_per_project: int = 100):
        self.max_messages = max_messages_per_project
        self.db = get_database()

        self._cache: Dict[str, ConversationMemory] = {}
        self._lock = threading.RLock()

        logger.info(
            f"PersistentMemoryManager initialized: max_messages={max_messages_per_project}"
        )

    def get_or_create(self, project_id: str, user_id: str) -> ConversationMemory:
        """
        Get a project's conversation, loading stored history on first use.

        A project without rows simply starts with an empty conversation;
        rows are only written when messages are added.
        """
        with self._lock:
            if project_id in self._cache:
                logger.debug(f"[PERSISTENT] Cache hit: {project_id}")
                return self._cache[project_id]

            with self.db.get_session() as db_session:
                memory = self._load_from_db(project_id, user_id, db_session)

            self._cache[project_id] = memory
            logger.info(
                f"[PERSISTENT] Loaded project chat: {project_id} "
                f"({memory.message_count} messages)"
            )
            return memory

    def get(self, project_id: str) -> Optional[ConversationMemory]:
        """Get a project's conversation, or None when it has no messages."""
        with self._lock:
            if project_id in self._cache:
                return self._cache[project_id]

            with self.db.get_session() as db_session:
                exists = db_session.query(ProjectChatMessage.id).filter(
                    ProjectChatMessage.project_id == project_id
                ).first()
                if not exists:
                    return None
                memory = self._load_from_db(project_id, "", db_session)

            self._cache[project_id] = memory
            return memory

    def save_message(
        self,
        project_id: str,
        user_id: str,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Insert one project_chat_history row."""
        with self.db.get_session() as db_session:
            db_session.add(ProjectChatMessage(
                project_id=project_id,
                user_id=user_id,
                message_type=role,
                content=content,
                extra_data=self._serialize_metadata(metadata),
                created_at=datetime.utcnow(),
            ))

        logger.debug(f"[PERSISTENT] Saved message: project={project_id}, role={role}")

    def clear_history(self, project_id: str) -> bool:
        """Delete every message for a project."""
        with self._lock:
            if project_id in self._cache:
                self._cache[project_id].clear()

            with self.db.get_session() as db_session:
                deleted = db_session.query(ProjectChatMessage).filter(
                    ProjectChatMessage.project_id == project_id
                ).delete()

            logger.info(f"[PERSISTENT] Cleared {deleted} messages for project: {project_id}")
            return deleted > 0

    def forget(self, project_id: str) -> None:
        """Drop the cached conversation (rows go with the project's cascade)."""
        with self._lock:
            self._cache.pop(project_id, None)

    def get_stats(self) -> Dict:
        with self.db.get_session() as db_session:
            total_messages = db_session.query(ProjectChatMessage).count()

        return {
            "active_conversations": len(self._cache),
            "total_messages": total_messages,
            "storage": "persistent",
        }

    def _serialize_metadata(self, metadata: Optional[Dict]) -> Optional[Dict]:
        """Make metadata JSON-serializable (datetimes become ISO strings)."""
        if not metadata:
            return None

        try:
            json.dumps(metadata)
            return metadata
        except (TypeError, ValueError):
            safe_metadata = {}
            for key, value in metadata.items():
                if isinstance(value, datetime):
                    safe_metadata[key] = value.isoformat()
                elif isinstance(value, (str, int, float, bool, type(None))):
                    safe_metadata[key] = value
                else:
                    safe_metadata[key] = str(value)
            return safe_metadata

    def _deserialize_metadata(self, metadata: Any) -> Dict:
        """Always return a dict; older rows may hold JSON strings."""
        if not metadata:
            return {}

        if isinstance(metadata, dict):
            return metadata

        if isinstance(metadata, str):
            try:
                parsed = json.loads(metadata)
            except ValueError:
                logger.warning(f"[PERSISTENT] Failed to parse metadata: {metadata[:100]}")
                return {}
            return parsed if isinstance(parsed, dict) else {}

        return {}

    def _load_from_db(
        self,
        project_id: str,
        user_id: str,
        db_session: Session
    ) -> ConversationMemory:
        memory = PersistentConversationMemory(
            project_id=project_id,
            user_id=user_id,
            manager=self,
            max_messages=self.max_messages
        )

        rows: List[ProjectChatMessage] = db_session.query(ProjectChatMessage).filter(
            ProjectChatMessage.project_id == project_id
        ).order_by(ProjectChatMessage.created_at).all()

        for row in rows[-self.max_messages:]:
            memory.messages.append(Message(
                role=row.message_type,
                content=row.content,
                timestamp=row.created_at,
                metadata=self._deserialize_metadata(row.extra_data),
            ))
            if not memory.user_id:
                memory.user_id = row.user_id

        if memory.messages:
            memory.created_at = memory.messages[0].timestamp
            memory.last_activity = memory.messages[-1].timestamp

        return memory


class PersistentConversationMemory(ConversationMemory):
    """ConversationMemory that writes every new message to the database."""

    def __init__(
        self,
        project_id: str,
        user_id: str,
        manager: PersistentMemoryManager,
        max_messages: int = 100
    ):
        super().__init__(project_id, user_id, max_messages)
        self._manager = manager

    def append(self, message: Message) -> Message:
        self._manager.save_message(
            self.project_id, self.user_id, message.role, message.content, message.metadata
        )
        return super().append(message)


_persistent_manager: Optional[PersistentMemoryManager] = None


def get_persistent_memory_manager() -> PersistentMemoryManager:
    """Get or create the persistent memory manager singleton."""
    global _persistent_manager
    if _persistent_manager is None:
        _persistent_manager = PersistentMemoryManager()
    return _persistent_manager


def reset_persistent_memory_manager() -> None:
    """Reset the persistent memory manager (for testing)."""
    global _persistent_manager
    _persistent_manager = None
