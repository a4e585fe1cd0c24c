"""
Memory Package - Project chat history.

Two interchangeable managers:

## In-memory (MemoryManager)
- Fast, lost on restart
- Used when MEMORY_PERSISTENT=false

## Persistent (PersistentMemoryManager)
- Backed by the Supabase project_chat_history table
- Default

Use `get_memory_manager()` to get the manager selected by configuration.

Example:
    >>> from channelsite.memory import get_memory_manager
    >>> memory = get_memory_manager().get_or_create(project_id, user_id)
    >>> memory.add_user_message("Make the subscribe button bigger")
"""
from typing import Union

from channelsite.core.config import get_settings
from channelsite.memory.conversation import Message, ConversationMemory
from channelsite.memory.manager import (
    MemoryManager,
    get_memory_manager as get_stm_manager,
    reset_memory_manager,
)
from channelsite.memory.persistent import (
    PersistentMemoryManager,
    get_persistent_memory_manager,
    reset_persistent_memory_manager,
)


def get_memory_manager() -> Union[MemoryManager, PersistentMemoryManager]:
    """
    Get the memory manager selected by MEMORY_PERSISTENT.

    Returns:
        - PersistentMemoryManager if MEMORY_PERSISTENT=true
        - MemoryManager (in-memory) otherwise
    """
    if get_settings().memory_persistent:
        return get_persistent_memory_manager()
    return get_stm_manager()


__all__ = [
    "Message",
    "ConversationMemory",
    "MemoryManager",
    "PersistentMemoryManager",
    "get_memory_manager",
    "get_stm_manager",
    "get_persistent_memory_manager",
    "reset_memory_manager",
    "reset_persistent_memory_manager",
]
