"""Unit tests for persistence module."""

import tempfile
from pathlib import Path
from unittest import TestCase

from teensim.config import MemoryConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import Emotion, MemoryType, PlayerAction, Response, Scenario
from teensim.memory_store import MemoryStore
from teensim.persistence import SQLiteMemoryRepository
from tests.conftest import FakeClock


class TestSQLiteMemoryRepository(TestCase):
    """Tests for SQLiteMemoryRepository class."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / "state" / "memories.db"
        self.repository = SQLiteMemoryRepository(self.db_path)
        self.clock = FakeClock()
        self.config = MemoryConfig(short_term_capacity=2, long_term_capacity=4)
        self.store = MemoryStore(self.config, now=self.clock)

    def tearDown(self):
        self.repository.close()

    def _populate(self):
        state = EmotionalState()
        self.store.record(MemoryType.BETRAYAL, "read my texts", -0.9, Scenario.LIMIT_SCREEN_TIME, Emotion.ANGRY, -20.0)
        self.clock.advance(hours=1)
        self.store.record_interaction(PlayerAction.LISTEN, Response.NEGOTIATE_CALM, state, Scenario.BEDTIME)
        self.clock.advance(hours=1)
        self.store.record_interaction(PlayerAction.BRIBERY, Response.SARCASTIC, state, Scenario.BEDTIME)
        self.store.relevant_memory(Scenario.BEDTIME, state)

    def test_save_and_load(self):
        self._populate()
        assert self.repository.save(self.store) is True
        assert self.db_path.exists()

        restored = MemoryStore(self.config, now=self.clock)
        assert self.repository.load_into(restored) is True
        assert restored.short_term == self.store.short_term
        assert restored.long_term == self.store.long_term
        for memory in self.store.short_term + self.store.long_term:
            assert restored.times_recalled(memory) == self.store.times_recalled(memory)
        assert restored.get_pattern(PlayerAction.BRIBERY, Scenario.BEDTIME).occurrences == 1

    def test_save_replaces_previous_snapshot(self):
        self._populate()
        self.repository.save(self.store)
        self.store.clear()
        self.repository.save(self.store)

        restored = MemoryStore(self.config, now=self.clock)
        assert self.repository.load_into(restored) is True
        assert len(restored) == 0
        assert restored.patterns == []

    def test_load_from_empty_database(self):
        restored = MemoryStore(self.config, now=self.clock)
        assert self.repository.load_into(restored) is True
        assert len(restored) == 0

    def test_save_failure_is_reported(self):
        blocker = Path(self.temp_dir) / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        repository = SQLiteMemoryRepository(blocker / "memories.db")
        self._populate()
        assert repository.save(self.store) is False
        # The in-memory store is untouched.
        assert len(self.store) == 3

    def test_corrupt_rows_leave_store_unchanged(self):
        self._populate()
        self.repository.save(self.store)
        conn = self.repository._connect()
        with conn:
            conn.execute("UPDATE memories SET data = 'not json'")

        target = MemoryStore(self.config, now=self.clock)
        target.record(MemoryType.CONVERSATION, "keep me", 0.1, Scenario.BEDTIME, Emotion.NEUTRAL, 0.0)
        assert self.repository.load_into(target) is False
        assert [m.content for m in target.short_term] == ["keep me"]

    def test_mistyped_rows_leave_store_unchanged(self):
        self._populate()
        self.repository.save(self.store)
        conn = self.repository._connect()
        with conn:
            conn.execute(
                "UPDATE memories SET data = ?",
                ('{"id": "x", "type": "Promise", "timestamp": 5}',),
            )

        target = MemoryStore(self.config, now=self.clock)
        target.record(MemoryType.CONVERSATION, "keep me", 0.1, Scenario.BEDTIME, Emotion.NEUTRAL, 0.0)
        assert self.repository.load_into(target) is False
        assert [m.content for m in target.short_term] == ["keep me"]
