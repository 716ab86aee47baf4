import pytest

from services.history import (
    ChatHistory,
    ConversationArchive,
    GenerationHistory,
    clear_data,
    export_data,
)
from utils.constants import HistoryKind, StorageKeys


def test_generation_history_never_exceeds_cap(json_store):
    """Given repeated insertion past the cap, the list should stay capped with newest first."""
    history = GenerationHistory(HistoryKind.TEXT, limit=5, store=json_store)

    for i in range(12):
        history.add(f"prompt {i}", f"result {i}")

    items = history.entries()
    assert len(items) == 5
    assert [item["prompt"] for item in items] == [f"prompt {i}" for i in range(11, 6, -1)]


def test_generation_history_default_cap_is_fifty(json_store):
    history = GenerationHistory(HistoryKind.IMAGE, store=json_store)

    for i in range(60):
        history.add(f"p{i}", f"data:image/png;base64,{i}")

    assert len(history.entries()) == 50
    assert history.entries()[0]["prompt"] == "p59"


def test_generation_history_record_shape(json_store):
    record = GenerationHistory(HistoryKind.CODE, store=json_store).add(
        "sort a list", "sorted(xs)", {"language": "python"}
    )

    assert set(record) == {"prompt", "result", "metadata", "timestamp"}
    assert json_store.get(StorageKeys.CODE_HISTORY) == [record]


def test_generation_history_delete_by_index(json_store):
    history = GenerationHistory(HistoryKind.TEXT, store=json_store)
    history.add("first", "1")
    history.add("second", "2")

    assert history.delete(5) is False
    assert history.delete(-1) is False
    assert history.delete(0) is True
    assert [item["prompt"] for item in history.entries()] == ["first"]


def test_generation_history_rejects_unknown_kind(json_store):
    with pytest.raises(ValueError, match="Unknown history kind"):
        GenerationHistory("audio", store=json_store)


def test_history_kinds_use_separate_keys(json_store):
    GenerationHistory(HistoryKind.TEXT, store=json_store).add("t", "text")
    GenerationHistory(HistoryKind.IMAGE, store=json_store).add("i", "url")

    assert len(GenerationHistory(HistoryKind.TEXT, store=json_store).entries()) == 1
    assert GenerationHistory(HistoryKind.CODE, store=json_store).entries() == []


def test_chat_history_evicts_oldest_message(json_store):
    """Given more messages than the cap, the oldest should be dropped first."""
    history = ChatHistory("s1", limit=3, store=json_store)

    for i in range(5):
        history.add_message("user" if i % 2 == 0 else "assistant", f"message {i}")

    conversation = history.get_conversation()
    assert [m["content"] for m in conversation] == ["message 2", "message 3", "message 4"]
    assert all(set(m) == {"id", "role", "content", "timestamp"} for m in conversation)


def test_chat_history_sessions_are_isolated(json_store):
    ChatHistory("alice", store=json_store).add_message("user", "hi from alice")
    ChatHistory("bob", store=json_store).add_message("user", "hi from bob")

    assert [m["content"] for m in ChatHistory("alice", store=json_store).get_conversation()] == ["hi from alice"]


def test_chat_history_clear(json_store):
    history = ChatHistory(store=json_store)
    history.add_message("user", "hello")

    history.clear()

    assert history.session_id == "default"
    assert history.get_conversation() == []


def test_archive_inserts_new_conversations_first_and_caps(json_store):
    archive = ConversationArchive(limit=3, store=json_store)

    for i in range(5):
        archive.save([{"role": "user", "content": f"conversation {i}"}], chat_id=f"chat-{i}")

    assert [chat["id"] for chat in archive.entries()] == ["chat-4", "chat-3", "chat-2"]


def test_archive_replaces_existing_conversation_in_place(json_store):
    archive = ConversationArchive(store=json_store)
    archive.save([{"role": "user", "content": "one"}], chat_id="chat-a")
    archive.save([{"role": "user", "content": "two"}], chat_id="chat-b")

    archive.save([{"role": "user", "content": "one, continued"}], chat_id="chat-a", model="gemini")

    chats = archive.entries()
    assert [chat["id"] for chat in chats] == ["chat-b", "chat-a"]
    assert chats[1]["title"] == "one, continued"
    assert chats[1]["model"] == "gemini"


def test_archive_title_is_truncated_first_message(json_store):
    chat = ConversationArchive(store=json_store).save(
        [{"role": "user", "content": "x" * 80}, {"role": "assistant", "content": "ok"}]
    )

    assert chat["title"] == "x" * 30
    assert chat["id"].startswith("chat-")


def test_archive_refuses_empty_conversation(json_store):
    with pytest.raises(ValueError):
        ConversationArchive(store=json_store).save([])


def test_archive_get_and_delete(json_store):
    archive = ConversationArchive(store=json_store)
    archive.save([{"role": "user", "content": "keep"}], chat_id="chat-1")

    assert archive.get("chat-1")["title"] == "keep"
    assert archive.get("chat-2") is None
    assert archive.delete("chat-2") is False
    assert archive.delete("chat-1") is True
    assert archive.entries() == []


def test_export_and_clear_data(json_store):
    GenerationHistory(HistoryKind.TEXT, store=json_store).add("p", "r")
    ChatHistory("s", store=json_store).add_message("user", "hi")

    exported = export_data(json_store)
    assert set(exported["data"]) == {StorageKeys.TEXT_HISTORY, StorageKeys.chat_session("s")}
    assert "exported_at" in exported

    assert clear_data(json_store) == 2
    assert export_data(json_store)["data"] == {}
