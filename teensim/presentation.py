"""Abstractions for dialogue text, speech output and UI event delivery.

The engine speaks in terms of these small interfaces so that any
presentation layer (a terminal, a game engine, a headless test harness)
can be plugged in without the core depending on it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from teensim.emotional_state import EmotionalState
from teensim.enums import Emotion, PlayerAction, Response, Scenario

LOGGER = logging.getLogger(__name__)


@dataclass
class UIEvent:
    """Typed UI directive for dialogue panels, reactions, or outcome screens."""

    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


class UIEventSink(ABC):
    """Abstract consumer for UI events produced by the engine."""

    @abstractmethod
    def emit(self, event: UIEvent) -> None:
        """Dispatch a UI event to the presentation layer."""


class NullUIEventSink(UIEventSink):
    def emit(self, event: UIEvent) -> None:
        LOGGER.debug("Dropping UI event %s", event.kind)


class RecordingUIEventSink(UIEventSink):
    """Keeps every emitted event in memory; handy for headless runs."""

    def __init__(self) -> None:
        self.events: List[UIEvent] = []

    def emit(self, event: UIEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> List[UIEvent]:
        return [event for event in self.events if event.kind == kind]


class DialogueProvider(ABC):
    """Source of the lines spoken by the player and the teen."""

    @abstractmethod
    def opening(self, scenario: Scenario, state: EmotionalState) -> str:
        """Teen's first line for a scenario, shaped by the current mood."""

    @abstractmethod
    def response(self, scenario: Scenario, response: Response, emotion: Emotion) -> str:
        """Teen's line for a chosen response."""

    @abstractmethod
    def player_line(self, scenario: Scenario, action: PlayerAction) -> str:
        """Canned player line for an action picked from a menu."""


class Speaker(ABC):
    """Speech output. ``speak`` must return without waiting for audio."""

    @abstractmethod
    def speak(self, text: str, emotion: Emotion = Emotion.NEUTRAL) -> None:
        """Queue ``text`` for speech."""

    def stop(self) -> None:
        """Release any audio resources."""


class NullSpeaker(Speaker):
    def speak(self, text: str, emotion: Emotion = Emotion.NEUTRAL) -> None:
        LOGGER.debug("Speech disabled; not speaking: %s", text)
