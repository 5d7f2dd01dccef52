"""
Session key-value persistence for adaptation memory.

Both stores hold one JSON document under a fixed session key, the way a
browser session storage would.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol

from config.settings import settings


class MemoryPersistence(Protocol):
    def load(self) -> Optional[str]: ...
    def save(self, document: str) -> None: ...


class InMemoryPersistence:
    """Process-local store; shared ``backing`` dicts emulate one browser session."""

    def __init__(self, key: Optional[str] = None, backing: Optional[Dict[str, str]] = None):
        self.key = key or settings.memory_session_key
        self.backing = backing if backing is not None else {}

    def load(self) -> Optional[str]:
        return self.backing.get(self.key)

    def save(self, document: str) -> None:
        self.backing[self.key] = document

    def clear(self) -> None:
        self.backing.pop(self.key, None)


# =============================================================================
# SQLITE
# =============================================================================

_SCHEMA = """CREATE TABLE IF NOT EXISTS session_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
)"""


@contextmanager
def get_db_context(path: str) -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


class SqlitePersistence:
    """Session store in a SQLite file (survives page reloads of a host shell)."""

    def __init__(self, path: Optional[str] = None, key: Optional[str] = None):
        self.path = path or settings.sqlite_path or "Session Storage/a11y_session.db"
        self.key = key or settings.memory_session_key
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with get_db_context(self.path) as conn:
            conn.execute(_SCHEMA)
            conn.commit()

    def load(self) -> Optional[str]:
        with get_db_context(self.path) as conn:
            row = conn.execute(
                "SELECT value FROM session_store WHERE key=?", (self.key,)
            ).fetchone()
            return row["value"] if row else None

    def save(self, document: str) -> None:
        with get_db_context(self.path) as conn:
            conn.execute(
                """INSERT INTO session_store(key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     value=excluded.value,
                     updated_at=datetime('now')
                """,
                (self.key, document),
            )
            conn.commit()

    def clear(self) -> None:
        with get_db_context(self.path) as conn:
            conn.execute("DELETE FROM session_store WHERE key=?", (self.key,))
            conn.commit()


def create_persistence(sqlite_path: Optional[str] = None, key: Optional[str] = None) -> MemoryPersistence:
    """Pick the store configured in settings."""
    path = sqlite_path or settings.sqlite_path
    if path:
        return SqlitePersistence(path, key=key)
    return InMemoryPersistence(key=key)
