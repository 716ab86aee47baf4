"""
History persistence for chat sessions, saved conversations and generations.
Every list is a JSON blob in the JSON store, capped at a configured size.
"""
import time
import uuid
from datetime import datetime, timezone
from typing import Optional
from config import Config
from utils.constants import HistoryKind, StorageKeys
from utils.logger import app_logger
from utils.storage import JSONStore, get_json_store


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class GenerationHistory:
    """
    Most-recent-first list of {prompt, result, metadata, timestamp} records
    for one generation type. The oldest record is dropped on overflow.
    """

    def __init__(self, kind: str, limit: Optional[int] = None, store: Optional[JSONStore] = None):
        if kind not in HistoryKind.KEYS:
            raise ValueError(f"Unknown history kind: {kind}")
        self.kind = kind
        self.key = HistoryKind.KEYS[kind]
        self.limit = limit if limit is not None else Config.HISTORY_LIMIT
        self._store = store

    @property
    def store(self) -> JSONStore:
        return self._store or get_json_store()

    def entries(self) -> list[dict]:
        return self.store.get(self.key, [])

    def add(self, prompt: str, result, metadata: Optional[dict] = None) -> dict:
        record = {
            "prompt": prompt,
            "result": result,
            "metadata": metadata or {},
            "timestamp": _now_iso(),
        }
        items = self.entries()
        items.insert(0, record)
        self.store.set(self.key, items[:self.limit])
        return record

    def delete(self, index: int) -> bool:
        """Remove the record at index. Returns False when index is out of range."""
        items = self.entries()
        if not 0 <= index < len(items):
            return False
        items.pop(index)
        self.store.set(self.key, items)
        return True

    def clear(self) -> None:
        self.store.set(self.key, [])


class ChatHistory:
    """Per-session conversation, oldest first, capped at the most recent messages."""

    def __init__(self, session_id: Optional[str] = None, limit: Optional[int] = None, store: Optional[JSONStore] = None):
        self.session_id = session_id or Config.DEFAULT_SESSION_ID
        self.key = StorageKeys.chat_session(self.session_id)
        self.limit = limit if limit is not None else Config.CHAT_HISTORY_LIMIT
        self._store = store

    @property
    def store(self) -> JSONStore:
        return self._store or get_json_store()

    def get_conversation(self) -> list[dict]:
        return self.store.get(self.key, [])

    def add_message(self, role: str, content: str) -> dict:
        message = {
            "id": uuid.uuid4().hex[:12],
            "role": role,
            "content": content,
            "timestamp": _now_iso(),
        }
        history = self.get_conversation()
        history.append(message)
        if len(history) > self.limit:
            history = history[-self.limit:]
        self.store.set(self.key, history)
        return message

    def clear(self) -> None:
        self.store.delete(self.key)


class ConversationArchive:
    """
    Saved conversations, most recent first, capped at Config.CONVERSATION_ARCHIVE_LIMIT.
    Re-saving an existing id replaces it in place.
    """

    def __init__(self, limit: Optional[int] = None, store: Optional[JSONStore] = None):
        self.limit = limit if limit is not None else Config.CONVERSATION_ARCHIVE_LIMIT
        self._store = store

    @property
    def store(self) -> JSONStore:
        return self._store or get_json_store()

    def entries(self) -> list[dict]:
        return self.store.get(StorageKeys.CHAT_ARCHIVE, [])

    def get(self, chat_id: str) -> Optional[dict]:
        for chat in self.entries():
            if chat.get("id") == chat_id:
                return chat
        return None

    def save(self, conversation: list[dict], chat_id: Optional[str] = None, model: Optional[str] = None) -> dict:
        """
        Save a conversation. Raises ValueError for an empty conversation.
        """
        if not conversation:
            raise ValueError("Cannot save an empty conversation")

        chat_id = chat_id or f"chat-{int(time.time() * 1000)}"
        chat = {
            "id": chat_id,
            "title": conversation[0].get("content", "")[:Config.CONVERSATION_TITLE_LENGTH],
            "conversation": conversation,
            "timestamp": _now_iso(),
            "model": model,
        }

        chats = self.entries()
        for index, existing in enumerate(chats):
            if existing.get("id") == chat_id:
                chats[index] = chat
                break
        else:
            chats.insert(0, chat)

        self.store.set(StorageKeys.CHAT_ARCHIVE, chats[:self.limit])
        return chat

    def delete(self, chat_id: str) -> bool:
        chats = self.entries()
        remaining = [chat for chat in chats if chat.get("id") != chat_id]
        if len(remaining) == len(chats):
            return False
        self.store.set(StorageKeys.CHAT_ARCHIVE, remaining)
        return True


def export_data(store: Optional[JSONStore] = None) -> dict:
    """Every stored key with its decoded value, plus an export timestamp."""
    store = store or get_json_store()
    return {
        "exported_at": _now_iso(),
        "data": store.items(),
    }


def clear_data(store: Optional[JSONStore] = None) -> int:
    """Remove all persisted history. Returns the number of keys removed."""
    store = store or get_json_store()
    removed = store.clear()
    app_logger.info(f"All application data cleared ({removed} keys)")
    return removed
