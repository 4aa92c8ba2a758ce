import sqlite3
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from constants import DEFAULT_DATA_DIR, DEFAULT_DB_FILENAME, STORAGE_KEY


logger = logging.getLogger(__name__)


class DatabaseManager:
    """SQLite-backed key-value storage with localStorage-style accessors."""

    def __init__(self, db_path=None):
        if db_path is None:
            db_path = default_db_path()
        self.db_path = str(db_path)
        self.create_tables()

    def get_connection(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def create_tables(self):
        with self.get_connection() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            ''')

    def get_item(self, key):
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            if row is None:
                return None
            return row["value"]

    def set_item(self, key, value):
        now_iso = (
            datetime.now(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, now_iso),
            )

    def remove_item(self, key):
        with self.get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self):
        with self.get_connection() as conn:
            return [row["key"] for row in conn.execute("SELECT key FROM kv_store ORDER BY key")]


class WorkoutPersistence:
    """Saves and loads the serialized workout list under a single key."""

    def __init__(self, db=None, key=STORAGE_KEY):
        self.db = db or DatabaseManager()
        self.key = key

    def save(self, payload):
        self.db.set_item(self.key, json.dumps(payload))

    def load(self):
        """
        Return the stored list, or None when nothing was saved.

        Raises:
            ValueError: if the stored value is not valid JSON
        """
        raw = self.db.get_item(self.key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Could not parse stored {self.key!r}: {exc}") from exc

    def clear(self):
        self.db.remove_item(self.key)
        logger.info("Cleared persisted %s", self.key)


def default_db_path(data_dir=None):
    base = Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR
    base.mkdir(parents=True, exist_ok=True)
    return base / DEFAULT_DB_FILENAME
