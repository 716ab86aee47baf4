"""
Persistent key/value store for JSON blobs.
Server-side stand-in for browser local storage: each key holds one JSON document,
writes are last-writer-wins and there is no schema or migration.
"""
import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Optional
from config import Config
from utils.logger import app_logger


class JSONStore:
    """
    SQLite-backed store mapping string keys to JSON values.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file (default: Config.STORAGE_DB_PATH)
        """
        if db_path is None:
            db_path = Config.STORAGE_DB_PATH

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._db_path = db_path
        self._local = threading.local()
        self._init_db()

        app_logger.info(f"Storage initialized with SQLite: {self._db_path}")

    def _get_conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, 'conn'):
            self._local.conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._local.conn.row_factory = sqlite3.Row
        return self._local.conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=5000")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        conn.commit()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for key, or default when missing."""
        cursor = self._get_conn().cursor()
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return default
        return json.loads(row['value'])

    def set(self, key: str, value: Any) -> None:
        """Encode value as JSON and store it under key, replacing any previous value."""
        encoded = json.dumps(value, ensure_ascii=False)
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            (key, encoded, time.time())
        )
        conn.commit()

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0

    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally restricted to a prefix."""
        cursor = self._get_conn().cursor()
        cursor.execute("SELECT key FROM kv_store ORDER BY key")
        return [row['key'] for row in cursor.fetchall() if row['key'].startswith(prefix)]

    def items(self, prefix: str = "") -> dict[str, Any]:
        """Decoded values for every key with the given prefix."""
        cursor = self._get_conn().cursor()
        cursor.execute("SELECT key, value FROM kv_store ORDER BY key")
        return {
            row['key']: json.loads(row['value'])
            for row in cursor.fetchall()
            if row['key'].startswith(prefix)
        }

    def clear(self) -> int:
        """Remove every key. Returns the number of keys removed."""
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM kv_store")
        conn.commit()
        app_logger.info(f"Storage cleared: {cursor.rowcount} keys removed")
        return cursor.rowcount


_json_store: Optional[JSONStore] = None


def get_json_store() -> JSONStore:
    """Get the global store instance, creating it on first use."""
    global _json_store
    if _json_store is None:
        _json_store = JSONStore()
    return _json_store
