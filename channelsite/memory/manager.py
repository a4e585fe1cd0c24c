"""
Memory Manager - In-memory project chat storage.

This module keeps project conversations in process memory:
- Lazy creation per project
- TTL-based expiry of idle conversations
- Oldest-first eviction when the cap is reached

Used when MEMORY_PERSISTENT=false (local development without Supabase
tables); history is lost on restart.
"""
from datetime import datetime, timedelta
from typing import Dict, Optional
import threading

from channelsite.core.logging_config import get_logger
from channelsite.memory.conversation import ConversationMemory

logger = get_logger(__name__)


class MemoryManager:
    """
    Manages multiple project conversations with automatic cleanup.

    Example:
        >>> manager = MemoryManager(ttl_minutes=60)
        >>> memory = manager.get_or_create("project-1", "user-1")
        >>> memory.add_user_message("Hello!")
        >>> manager.get("project-1").message_count
        1
    """

    def __init__(
        self,
        ttl_minutes: int = 60,
        max_conversations: int = 1000,
        max_messages_per_project: int = 50
    ):
        self.ttl = timedelta(minutes=ttl_minutes)
        self.max_conversations = max_conversations
        self.max_messages = max_messages_per_project

        self._conversations: Dict[str, ConversationMemory] = {}
        self._lock = threading.RLock()

        logger.info(
            f"MemoryManager initialized: "
            f"TTL={ttl_minutes}min, "
            f"max_conversations={max_conversations}, "
            f"max_messages={max_messages_per_project}"
        )

    def get_or_create(self, project_id: str, user_id: str) -> ConversationMemory:
        """Get a project's conversation, creating it if needed."""
        with self._lock:
            self._cleanup_expired()

            memory = self._conversations.get(project_id)
            if memory is not None:
                logger.debug(f"Retrieved existing conversation: {project_id}")
                return memory

            if len(self._conversations) >= self.max_conversations:
                self._evict_oldest()

            memory = ConversationMemory(
                project_id=project_id,
                user_id=user_id,
                max_messages=self.max_messages
            )
            self._conversations[project_id] = memory

            logger.info(f"Created conversation for project: {project_id}")
            return memory

    def get(self, project_id: str) -> Optional[ConversationMemory]:
        """Get a project's conversation, or None if absent/expired."""
        with self._lock:
            memory = self._conversations.get(project_id)
            if memory and self._is_expired(memory):
                del self._conversations[project_id]
                return None
            return memory

    def clear_history(self, project_id: str) -> bool:
        """Clear a project's messages but keep the conversation."""
        with self._lock:
            memory = self._conversations.get(project_id)
            if memory:
                memory.clear()
                logger.info(f"Cleared history for project: {project_id}")
                return True
            return False

    def forget(self, project_id: str) -> None:
        """Drop a project's conversation entirely (project deleted)."""
        with self._lock:
            self._conversations.pop(project_id, None)

    def get_stats(self) -> Dict:
        with self._lock:
            return {
                "active_conversations": len(self._conversations),
                "total_messages": sum(
                    m.message_count for m in self._conversations.values()
                ),
                "ttl_minutes": int(self.ttl.total_seconds() / 60),
                "storage": "memory",
            }

    def _is_expired(self, memory: ConversationMemory) -> bool:
        return datetime.utcnow() - memory.last_activity > self.ttl

    def _cleanup_expired(self) -> int:
        expired = [
            pid for pid, memory in self._conversations.items()
            if self._is_expired(memory)
        ]

        for project_id in expired:
            del self._conversations[project_id]

        if expired:
            logger.info(f"Cleaned up {len(expired)} expired conversations")

        return len(expired)

    def _evict_oldest(self) -> None:
        if not self._conversations:
            return

        oldest_id = min(
            self._conversations,
            key=lambda pid: self._conversations[pid].last_activity
        )
        del self._conversations[oldest_id]
        logger.warning(f"Evicted oldest conversation: {oldest_id}")


_memory_manager: Optional[MemoryManager] = None


def get_memory_manager() -> MemoryManager:
    """Get or create the global in-memory MemoryManager."""
    global _memory_manager
    if _memory_manager is None:
        _memory_manager = MemoryManager()
    return _memory_manager


def reset_memory_manager() -> None:
    """Reset the global MemoryManager (useful for testing)."""
    global _memory_manager
    _memory_manager = None
