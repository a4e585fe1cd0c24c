"""Tests for project chat memory, in-memory and persistent."""
from channelsite.memory.conversation import ConversationMemory, Message
from channelsite.memory.manager import MemoryManager
from channelsite.memory.persistent import PersistentMemoryManager

from tests.conftest import USER_ID


class TestConversationMemory:

    def test_trims_to_max_messages(self):
        memory = ConversationMemory("p-1", max_messages=3)
        for i in range(5):
            memory.add_user_message(f"m{i}")

        assert [m.content for m in memory.get_history()] == ["m2", "m3", "m4"]

    def test_recent_history_format(self):
        memory = ConversationMemory("p-1")
        memory.add_user_message("hi")
        memory.add_assistant_message("hello", metadata={"provider": "groq"})

        assert memory.get_recent_history(4) == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]
        assert memory.get_recent_history(0) == []

    def test_metadata_stays_out_of_llm_context(self):
        message = Message(role="assistant", content="x", metadata={"provider": "groq"})
        assert message.to_llm() == {"role": "assistant", "content": "x"}

    def test_clear(self):
        memory = ConversationMemory("p-1")
        memory.add_user_message("hi")
        memory.clear()

        assert memory.is_empty
        assert memory.message_count == 0


class TestMemoryManager:

    def test_get_or_create_returns_same_memory(self):
        manager = MemoryManager()
        assert manager.get_or_create("p-1", USER_ID) is manager.get_or_create("p-1", USER_ID)

    def test_clear_and_forget(self):
        manager = MemoryManager()
        manager.get_or_create("p-1", USER_ID).add_user_message("hi")

        assert manager.clear_history("p-1")
        assert manager.get("p-1").is_empty

        manager.forget("p-1")
        assert manager.get("p-1") is None


class TestPersistentMemoryManager:

    def test_messages_survive_a_new_manager(self, project):
        first = PersistentMemoryManager()
        memory = first.get_or_create(project.id, USER_ID)
        memory.add_user_message("make the footer blue")
        memory.add_assistant_message("Done", metadata={"provider": "groq", "valid": True})

        reloaded = PersistentMemoryManager().get_or_create(project.id, USER_ID)

        assert [(m.role, m.content) for m in reloaded.get_history()] == [
            ("user", "make the footer blue"),
            ("assistant", "Done"),
        ]
        assert reloaded.get_history()[1].metadata == {"provider": "groq", "valid": True}

    def test_get_without_rows(self, project):
        assert PersistentMemoryManager().get(project.id) is None

    def test_clear_history(self, project):
        manager = PersistentMemoryManager()
        manager.get_or_create(project.id, USER_ID).add_user_message("hi")

        assert manager.clear_history(project.id)
        assert PersistentMemoryManager().get(project.id) is None

    def test_stats(self, project):
        manager = PersistentMemoryManager()
        manager.get_or_create(project.id, USER_ID).add_user_message("hi")

        stats = manager.get_stats()
        assert stats["storage"] == "persistent"
        assert stats["total_messages"] == 1
        assert stats["active_conversations"] == 1

    def test_metadata_with_datetime_is_stored(self, project):
        from datetime import datetime

        manager = PersistentMemoryManager()
        manager.get_or_create(project.id, USER_ID).add_assistant_message(
            "Done", metadata={"at": datetime(2024, 1, 2, 3, 4, 5)}
        )

        reloaded = PersistentMemoryManager().get_or_create(project.id, USER_ID)
        assert reloaded.get_history()[0].metadata == {"at": "2024-01-02T03:04:05"}
