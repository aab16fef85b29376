"""SQLite persistence for the teen's memories.

Persistence is best-effort: failures are logged and reported through the
return value so that a broken disk never interrupts a conversation.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from teensim.memory_store import MemoryStore
from teensim.structured_logger import StructuredLogger

LOGGER = logging.getLogger(__name__)
STRUCTURED_LOGGER = StructuredLogger(__name__)


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


class SQLiteMemoryRepository:
    """Stores a :class:`MemoryStore` snapshot in a local SQLite database."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        if db_path is None:
            default_dir = Path(os.getenv("TEENSIM_STATE_DIR", Path.cwd() / "var"))
            db_path = default_dir / "teen_memories.db"
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._initialise(self._conn)
        return self._conn

    @staticmethod
    def _initialise(conn: sqlite3.Connection) -> None:
        with conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS memories (
                    id TEXT PRIMARY KEY,
                    tier TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    times_recalled INTEGER NOT NULL DEFAULT 0,
                    data TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS patterns (
                    pattern_key TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )

    def save(self, store: MemoryStore) -> bool:
        """Replace the stored snapshot with ``store``'s contents."""

        snapshot = store.to_dict()
        recalls: Dict[str, int] = snapshot.get("recalls", {})
        rows: List[tuple[Any, ...]] = []
        for tier in ("short_term", "long_term"):
            for position, item in enumerate(snapshot[tier]):
                rows.append(
                    (
                        item["id"],
                        tier,
                        position,
                        recalls.get(item["id"], 0),
                        json.dumps(item, ensure_ascii=False),
                    )
                )
        updated = _timestamp()
        try:
            conn = self._connect()
            with conn:
                conn.execute("DELETE FROM memories")
                conn.execute("DELETE FROM patterns")
                conn.executemany(
                    "INSERT INTO memories(id, tier, position, times_recalled, data) VALUES (?, ?, ?, ?, ?)",
                    rows,
                )
                conn.executemany(
                    "INSERT INTO patterns(pattern_key, data, updated_at) VALUES (?, ?, ?)",
                    [
                        (f"{p['action']}_{p['scenario']}", json.dumps(p, ensure_ascii=False), updated)
                        for p in snapshot["patterns"]
                    ],
                )
        except (sqlite3.Error, OSError) as exc:
            LOGGER.error("Failed to save memories to %s: %s", self.db_path, exc)
            STRUCTURED_LOGGER.log_error(type(exc).__name__, str(exc), {"db_path": str(self.db_path)})
            return False
        LOGGER.info("Saved %d memories to %s", len(rows), self.db_path)
        return True

    def load_into(self, store: MemoryStore) -> bool:
        """Load the stored snapshot into ``store``; returns False on failure."""

        try:
            conn = self._connect()
            memory_rows = conn.execute(
                "SELECT tier, times_recalled, data FROM memories ORDER BY tier, position"
            ).fetchall()
            pattern_rows = conn.execute("SELECT data FROM patterns").fetchall()
            snapshot: Dict[str, Any] = {"short_term": [], "long_term": [], "recalls": {}, "patterns": []}
            for row in memory_rows:
                item = json.loads(row["data"])
                snapshot.setdefault(row["tier"], []).append(item)
                snapshot["recalls"][item["id"]] = row["times_recalled"]
            snapshot["patterns"] = [json.loads(row["data"]) for row in pattern_rows]
            store.load_dict(snapshot)
        except (sqlite3.Error, OSError, ValueError, KeyError, TypeError) as exc:
            LOGGER.error("Failed to load memories from %s: %s", self.db_path, exc)
            STRUCTURED_LOGGER.log_error(type(exc).__name__, str(exc), {"db_path": str(self.db_path)})
            return False
        LOGGER.info("Loaded %d memories from %s", len(store), self.db_path)
        return True

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None
