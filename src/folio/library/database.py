"""SQLite-backed record storage for the library state."""

from __future__ import annotations

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Mapping, Optional

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at REAL NOT NULL
);
"""


class Database:
    """Named JSON records, one row per key.

    ``write_records`` replaces several records in one transaction so the
    persisted books and folders never disagree.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def read_record(self, key: str) -> Optional[Any]:
        row = self._conn.execute(
            "SELECT value FROM records WHERE key = ?", (key,)
        ).fetchone()
        return json.loads(row["value"]) if row else None

    def write_records(self, records: Mapping[str, Any]) -> None:
        now = time.time()
        with self._conn:
            self._conn.executemany(
                "INSERT OR REPLACE INTO records (key, value, updated_at) VALUES (?, ?, ?)",
                [
                    (key, json.dumps(value, ensure_ascii=False), now)
                    for key, value in records.items()
                ],
            )

    def keys(self) -> list[str]:
        rows = self._conn.execute("SELECT key FROM records ORDER BY key").fetchall()
        return [r["key"] for r in rows]
