"""Pytest fixtures shared across the test suite."""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

import pytest

from teensim.config import SimulationConfig
from teensim.memory_store import MemoryStore
from teensim.presentation import RecordingUIEventSink


class FakeClock:
    """Manually advanced UTC clock for memory timestamps."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingSpeaker:
    def __init__(self) -> None:
        self.lines = []

    def speak(self, text, emotion=None):
        self.lines.append((text, emotion))

    def stop(self):
        pass


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def memory(clock) -> MemoryStore:
    return MemoryStore(now=clock)


@pytest.fixture
def config(tmp_path) -> SimulationConfig:
    return SimulationConfig(state_dir=tmp_path, opening_memory_chance=0.0)


@pytest.fixture
def ui_sink() -> RecordingUIEventSink:
    return RecordingUIEventSink()


@pytest.fixture
def speaker() -> RecordingSpeaker:
    return RecordingSpeaker()
