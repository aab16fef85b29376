"""Emotional state of the simulated teenager."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from teensim.enums import Emotion

OBSERVATION_SIZE = 11

_SIGNED_FIELDS = ("relationship", "mood")
_UNSIGNED_FIELDS = (
    "trust",
    "stress",
    "autonomy_need",
    "respect_received",
    "tiredness",
    "hunger",
)

# Initial ranges used when a training episode starts from a random state.
TRAINING_RANGES: Dict[str, tuple[float, float]] = {
    "relationship": (-30.0, 50.0),
    "mood": (-40.0, 40.0),
    "trust": (20.0, 70.0),
    "stress": (20.0, 70.0),
    "autonomy_need": (60.0, 90.0),
    "respect_received": (30.0, 70.0),
    "tiredness": (10.0, 80.0),
    "hunger": (10.0, 60.0),
}


@dataclass
class EmotionalState:
    """Bounded scalar model of how the teen currently feels.

    Signed axes live in [-100, 100], the rest in [0, 100]. Every mutation
    clamps and the derived emotion is refreshed after each update.
    """

    relationship: float = 0.0
    mood: float = 0.0
    trust: float = 50.0
    stress: float = 30.0
    autonomy_need: float = 70.0
    respect_received: float = 50.0
    tiredness: float = 20.0
    hunger: float = 30.0
    consecutive_negative: int = 0
    consecutive_positive: int = 0
    _emotion: Emotion = field(default=Emotion.NEUTRAL, init=False, repr=False)

    def __post_init__(self) -> None:
        for name in _SIGNED_FIELDS:
            setattr(self, name, self._clamp_signed(float(getattr(self, name))))
        for name in _UNSIGNED_FIELDS:
            setattr(self, name, self._clamp_unsigned(float(getattr(self, name))))
        self.consecutive_negative = max(0, int(self.consecutive_negative))
        self.consecutive_positive = max(0, int(self.consecutive_positive))
        self.derive_emotion()

    @property
    def current_emotion(self) -> Emotion:
        return self._emotion

    def apply_interaction(
        self,
        relationship_delta: float,
        mood_delta: float,
        respect_delta: float,
        was_respectful: bool,
    ) -> Emotion:
        """Apply one player interaction and return the re-derived emotion."""

        self.relationship = self._clamp_signed(self.relationship + relationship_delta)
        self.mood = self._clamp_signed(self.mood + mood_delta)
        self.respect_received = self._clamp_unsigned(self.respect_received + respect_delta)

        if mood_delta < 0:
            self.consecutive_negative += 1
            self.consecutive_positive = 0
        elif mood_delta > 0:
            self.consecutive_positive += 1
            self.consecutive_negative = 0

        self.trust = self._clamp_unsigned(self.trust + (2.0 if was_respectful else -5.0))
        return self.derive_emotion()

    def decay(self, dt: float, rate_per_second: float = 2.0, stress_floor: float = 10.0) -> Emotion:
        """Relax mood toward neutral and stress toward its floor over ``dt`` seconds."""

        rate = rate_per_second * max(0.0, dt)
        if self.mood > 0:
            self.mood = max(0.0, self.mood - rate)
        elif self.mood < 0:
            self.mood = min(0.0, self.mood + rate)
        self.stress = max(stress_floor, self.stress - rate * 0.5)
        return self.derive_emotion()

    def derive_emotion(self) -> Emotion:
        """Classify the state with the first matching rule."""

        if self.mood > 50 and self.relationship > 30:
            emotion = Emotion.HAPPY
        elif self.mood > 20 and self.respect_received > 60:
            emotion = Emotion.RECEPTIVE
        elif self.mood < -50 and self.stress > 60:
            emotion = Emotion.ANGRY
        elif self.mood < -30 and self.autonomy_need > 70 and self.respect_received < 40:
            emotion = Emotion.DEFIANT
        elif self.mood < -20:
            emotion = Emotion.ANNOYED
        elif self.trust < 30 and self.stress > 50:
            emotion = Emotion.ANXIOUS
        elif self.relationship < -40:
            emotion = Emotion.SAD
        else:
            emotion = Emotion.NEUTRAL
        self._emotion = emotion
        return emotion

    def to_observation_vector(self) -> np.ndarray:
        return np.array(
            [
                self.relationship / 100.0,
                self.mood / 100.0,
                self.trust / 100.0,
                self.stress / 100.0,
                self.autonomy_need / 100.0,
                self.respect_received / 100.0,
                self.tiredness / 100.0,
                self.hunger / 100.0,
                self.consecutive_negative / 10.0,
                self.consecutive_positive / 10.0,
                self._emotion.ordinal / 8.0,
            ],
            dtype=np.float32,
        )

    def snapshot(self) -> Dict[str, Any]:
        """Return a rounded copy of the state for logs and UI payloads."""

        return {
            "relationship": round(self.relationship, 1),
            "mood": round(self.mood, 1),
            "trust": round(self.trust, 1),
            "stress": round(self.stress, 1),
            "autonomy_need": round(self.autonomy_need, 1),
            "respect_received": round(self.respect_received, 1),
            "tiredness": round(self.tiredness, 1),
            "hunger": round(self.hunger, 1),
            "emotion": self._emotion.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: getattr(self, name) for name in _SIGNED_FIELDS + _UNSIGNED_FIELDS}
        data["consecutive_negative"] = self.consecutive_negative
        data["consecutive_positive"] = self.consecutive_positive
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmotionalState":
        known = _SIGNED_FIELDS + _UNSIGNED_FIELDS + ("consecutive_negative", "consecutive_positive")
        return cls(**{key: data[key] for key in known if key in data})

    def copy(self) -> "EmotionalState":
        return EmotionalState.from_dict(self.to_dict())

    @classmethod
    def randomized(cls, rng: Optional[random.Random] = None) -> "EmotionalState":
        """Build a state drawn from the training-episode ranges."""

        rng = rng or random.Random()
        return cls(**{name: rng.uniform(low, high) for name, (low, high) in TRAINING_RANGES.items()})

    @staticmethod
    def _clamp_signed(value: float) -> float:
        return max(-100.0, min(100.0, value))

    @staticmethod
    def _clamp_unsigned(value: float) -> float:
        return max(0.0, min(100.0, value))
