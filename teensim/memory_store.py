"""Short- and long-term episodic memory for the simulated teenager."""

from __future__ import annotations

import logging
import math
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Tuple

import numpy as np

from teensim.config import MemoryConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import Emotion, MemoryType, PlayerAction, Response, Scenario

LOGGER = logging.getLogger(__name__)

OBSERVATION_SIZE = 8

_ACTION_WEIGHTS: Dict[PlayerAction, float] = {
    PlayerAction.AUTHORITARIAN: -0.7,
    PlayerAction.GUILT_TRIP: -0.5,
    PlayerAction.BRIBERY: 0.3,
    PlayerAction.LOGICAL: 0.5,
    PlayerAction.COMPROMISE: 0.5,
    PlayerAction.EMPATHETIC: 0.7,
    PlayerAction.LISTEN: 0.7,
}

_DIALOGUE_TEMPLATES: Dict[MemoryType, str] = {
    MemoryType.PROMISE: "You said you'd help me {when}!",
    MemoryType.BROKEN_PROMISE: "You promised {when}, but you didn't keep your word!",
    MemoryType.REPEATED_ACTION: "You always do this! Just like {when}!",
    MemoryType.POSITIVE_MOMENT: "Remember {when} when you helped me? That was nice.",
    MemoryType.PUNISHMENT: "You grounded me {when}, remember?",
    MemoryType.EMOTIONAL_OUTBURST: "{When} you made me so upset!",
}

PatternKey = Tuple[PlayerAction, Scenario]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _clamp_weight(value: float) -> float:
    return max(-1.0, min(1.0, value))


def time_reference(elapsed: timedelta) -> str:
    """Describe how long ago something happened in the teen's words."""

    minutes = elapsed.total_seconds() / 60.0
    if minutes < 5:
        return "just now"
    if minutes < 30:
        return "a few minutes ago"
    hours = minutes / 60.0
    if hours < 2:
        return "earlier"
    if hours < 24:
        return "today"
    days = hours / 24.0
    if days < 2:
        return "yesterday"
    if days < 7:
        return "a few days ago"
    if days < 30:
        return "last week"
    return "a while ago"


@dataclass(frozen=True)
class Memory:
    """Immutable record of something the teen remembers.

    How often a memory has been recalled is tracked by the owning
    :class:`MemoryStore`, keyed by ``id``.
    """

    type: MemoryType
    content: str
    emotional_weight: float
    scenario: Scenario
    emotion_at_time: Emotion
    relationship_at_time: float
    timestamp: datetime = field(default_factory=_utcnow)
    is_important: Optional[bool] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    importance_threshold: float = field(default=0.7, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "emotional_weight", _clamp_weight(float(self.emotional_weight)))
        if self.is_important is None:
            object.__setattr__(
                self, "is_important", abs(self.emotional_weight) > self.importance_threshold
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "emotional_weight": self.emotional_weight,
            "timestamp": self.timestamp.isoformat(),
            "is_important": self.is_important,
            "scenario": self.scenario.value,
            "emotion_at_time": self.emotion_at_time.value,
            "relationship_at_time": self.relationship_at_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Memory":
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return cls(
            type=MemoryType.coerce(data["type"], MemoryType.CONVERSATION),
            content=str(data.get("content", "")),
            emotional_weight=float(data.get("emotional_weight", 0.0)),
            scenario=Scenario.coerce(data.get("scenario")),
            emotion_at_time=Emotion.coerce(data.get("emotion_at_time"), Emotion.NEUTRAL),
            relationship_at_time=float(data.get("relationship_at_time", 0.0)),
            timestamp=timestamp,
            is_important=bool(data.get("is_important", False)),
            id=str(data.get("id") or uuid.uuid4().hex),
        )


@dataclass
class PatternMemory:
    """How often the player used an action in a scenario, and how it felt."""

    action: PlayerAction
    scenario: Scenario
    occurrences: int = 1
    last_occurrence: datetime = field(default_factory=_utcnow)
    average_emotional_impact: float = 0.0

    @property
    def key(self) -> str:
        return f"{self.action.value}_{self.scenario.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "scenario": self.scenario.value,
            "occurrences": self.occurrences,
            "last_occurrence": self.last_occurrence.isoformat(),
            "average_emotional_impact": self.average_emotional_impact,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternMemory":
        last = datetime.fromisoformat(data["last_occurrence"])
        if last.tzinfo is None:
            last = last.replace(tzinfo=UTC)
        return cls(
            action=PlayerAction.coerce(data["action"], PlayerAction.LOGICAL),
            scenario=Scenario.coerce(data["scenario"]),
            occurrences=max(1, int(data.get("occurrences", 1))),
            last_occurrence=last,
            average_emotional_impact=float(data.get("average_emotional_impact", 0.0)),
        )


class MemoryStore:
    """Bounded two-tier memory with relevance-scored recall.

    New memories land in a short-term buffer. When it overflows the oldest
    entry is promoted to long-term storage if it was important or recalled
    often enough, otherwise it is forgotten. Long-term overflow evicts the
    least recalled, least emotional memory.
    """

    def __init__(
        self,
        config: Optional[MemoryConfig] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or MemoryConfig()
        self._now = now or _utcnow
        self._short_term: Deque[Memory] = deque()
        self._long_term: List[Memory] = []
        self._recalls: Dict[str, int] = {}
        self._patterns: Dict[PatternKey, PatternMemory] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def record(
        self,
        memory_type: MemoryType,
        content: str,
        weight: float,
        scenario: Scenario,
        emotion: Emotion,
        relationship: float,
        important: Optional[bool] = None,
    ) -> Memory:
        memory = Memory(
            type=memory_type,
            content=content,
            emotional_weight=weight,
            scenario=scenario,
            emotion_at_time=emotion,
            relationship_at_time=relationship,
            timestamp=self._now(),
            is_important=important,
            importance_threshold=self.config.importance_threshold,
        )
        self.add(memory)
        return memory

    def add(self, memory: Memory) -> None:
        """Insert a fully built memory and enforce capacity bounds."""

        with self._lock:
            self._short_term.append(memory)
            self._recalls.setdefault(memory.id, 0)
            while len(self._short_term) > self.config.short_term_capacity:
                oldest = self._short_term.popleft()
                if oldest.is_important or self._recalls.get(oldest.id, 0) > self.config.promotion_recalls:
                    self._long_term.append(oldest)
                    LOGGER.debug("Promoted memory %s to long-term", oldest.id)
                else:
                    self._recalls.pop(oldest.id, None)
            while len(self._long_term) > self.config.long_term_capacity:
                evicted = min(
                    self._long_term,
                    key=lambda m: (self._recalls.get(m.id, 0), abs(m.emotional_weight)),
                )
                self._long_term.remove(evicted)
                self._recalls.pop(evicted.id, None)
                LOGGER.debug("Evicted long-term memory %s", evicted.id)

    def record_interaction(
        self,
        action: PlayerAction,
        response: Response,
        state: EmotionalState,
        scenario: Scenario,
    ) -> Memory:
        """Remember one conversation turn and update the matching pattern."""

        weight = self.interaction_weight(action, response, state)
        content = f"During {scenario.value}: You {action.value}, I {response.value}"
        memory = self.record(
            self._interaction_type(action, response, state),
            content,
            weight,
            scenario,
            state.current_emotion,
            state.relationship,
        )
        self.record_pattern(action, scenario, weight)
        LOGGER.debug("Recorded memory: %s (weight %.2f)", content, weight)
        return memory

    def record_promise(self, promise: str, scenario: Scenario, state: EmotionalState) -> Memory:
        return self.record(
            MemoryType.PROMISE,
            f"You promised: {promise}",
            0.5,
            scenario,
            state.current_emotion,
            state.relationship,
            important=True,
        )

    def record_broken_promise(self, promise: Memory) -> Memory:
        return self.record(
            MemoryType.BROKEN_PROMISE,
            f"You broke your promise: {promise.content}",
            -0.8,
            promise.scenario,
            Emotion.ANGRY,
            promise.relationship_at_time,
            important=True,
        )

    def record_pattern(self, action: PlayerAction, scenario: Scenario, weight: float) -> PatternMemory:
        with self._lock:
            key = (action, scenario)
            pattern = self._patterns.get(key)
            if pattern is None:
                pattern = PatternMemory(
                    action=action,
                    scenario=scenario,
                    last_occurrence=self._now(),
                    average_emotional_impact=weight,
                )
                self._patterns[key] = pattern
            else:
                pattern.occurrences += 1
                pattern.last_occurrence = self._now()
                pattern.average_emotional_impact = (
                    pattern.average_emotional_impact * (pattern.occurrences - 1) + weight
                ) / pattern.occurrences
            return pattern

    @staticmethod
    def interaction_weight(action: PlayerAction, response: Response, state: EmotionalState) -> float:
        weight = _ACTION_WEIGHTS.get(action, 0.0)
        if response in (Response.ANGRY, Response.DEFIANT):
            weight -= 0.2
        elif response is Response.COMPLIANT:
            weight += 0.2
        weight += (state.relationship - 50.0) / 100.0
        return _clamp_weight(weight)

    @staticmethod
    def _interaction_type(action: PlayerAction, response: Response, state: EmotionalState) -> MemoryType:
        if action is PlayerAction.GUILT_TRIP:
            return MemoryType.PUNISHMENT
        if action is PlayerAction.BRIBERY:
            return MemoryType.REWARD
        if response is Response.ANGRY and state.stress > 70:
            return MemoryType.EMOTIONAL_OUTBURST
        if state.relationship > 70:
            return MemoryType.POSITIVE_MOMENT
        return MemoryType.CONVERSATION

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------
    def relevant_memory(self, scenario: Scenario, state: EmotionalState) -> Optional[Memory]:
        """Return the memory most relevant to the current moment, if any.

        This is not a pure query: the returned memory's recall count is
        incremented, which makes it more likely to be recalled again and to
        survive eviction.
        """

        with self._lock:
            candidates = self._all_memories()
            if not candidates:
                return None
            now = self._now()
            emotion = state.current_emotion
            best = max(candidates, key=lambda m: self._relevance(m, scenario, emotion, now))
            if self._relevance(best, scenario, emotion, now) <= self.config.recall_threshold:
                return None
            self._recalls[best.id] = self._recalls.get(best.id, 0) + 1
            return best

    def _relevance(self, memory: Memory, scenario: Scenario, emotion: Emotion, now: datetime) -> float:
        score = 0.0
        if memory.scenario is scenario:
            score += 0.3
        days = max(0.0, (now - memory.timestamp).total_seconds() / 86400.0)
        score += self.config.recent_bias * math.exp(-days * self.config.decay_per_day)
        score += self.config.emotional_bias * abs(memory.emotional_weight)
        score += self._recalls.get(memory.id, 0) * 0.1
        if memory.emotion_at_time is emotion:
            score += 0.2
        return score

    def times_recalled(self, memory: Memory) -> int:
        with self._lock:
            return self._recalls.get(memory.id, 0)

    def memories_of_type(self, memory_type: MemoryType, count: int = 5) -> List[Memory]:
        """Return up to ``count`` held memories of a type, newest first."""

        with self._lock:
            matches = [m for m in self._all_memories() if m.type is memory_type]
        matches.sort(key=lambda m: m.timestamp, reverse=True)
        return matches[:max(0, count)]

    def memory_dialogue(self, memory: Optional[Memory]) -> Optional[str]:
        """Turn a memory into a line the teen can say out loud."""

        if memory is None:
            return None
        when = time_reference(self._now() - memory.timestamp)
        template = _DIALOGUE_TEMPLATES.get(memory.type)
        if template is None:
            return f"{when[0].upper()}{when[1:]}: {memory.content}"
        return template.format(when=when, When=f"{when[0].upper()}{when[1:]}")

    def get_pattern(self, action: PlayerAction, scenario: Scenario) -> Optional[PatternMemory]:
        with self._lock:
            return self._patterns.get((action, scenario))

    def has_repeated_pattern(
        self, action: PlayerAction, scenario: Scenario, min_occurrences: int = 3
    ) -> bool:
        pattern = self.get_pattern(action, scenario)
        return pattern is not None and pattern.occurrences >= min_occurrences

    @property
    def short_term(self) -> List[Memory]:
        with self._lock:
            return list(self._short_term)

    @property
    def long_term(self) -> List[Memory]:
        with self._lock:
            return list(self._long_term)

    @property
    def patterns(self) -> List[PatternMemory]:
        with self._lock:
            return list(self._patterns.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._short_term) + len(self._long_term)

    def clear(self) -> None:
        with self._lock:
            self._short_term.clear()
            self._long_term.clear()
            self._recalls.clear()
            self._patterns.clear()

    def _all_memories(self) -> List[Memory]:
        return list(self._short_term) + self._long_term

    # ------------------------------------------------------------------
    # Learner features
    # ------------------------------------------------------------------
    def observation_vector(self) -> np.ndarray:
        with self._lock:
            held = self._all_memories()
            obs = np.zeros(OBSERVATION_SIZE, dtype=np.float32)
            if self._short_term:
                obs[0] = sum(m.emotional_weight for m in self._short_term) / len(self._short_term)
            obs[1] = min(1.0, self._count(held, MemoryType.BROKEN_PROMISE) / 5.0)
            obs[2] = min(1.0, self._count(held, MemoryType.POSITIVE_MOMENT) / 10.0)
            obs[3] = min(1.0, self._count(held, MemoryType.PUNISHMENT) / 5.0)
            if self._patterns:
                obs[4] = sum(min(1.0, p.occurrences / 10.0) for p in self._patterns.values()) / len(
                    self._patterns
                )
            obs[5] = min(1.0, len(held) / 50.0)
            if held:
                most_recalled = max(held, key=lambda m: self._recalls.get(m.id, 0))
                obs[6] = abs(most_recalled.emotional_weight)
            positives = [m for m in held if m.type is MemoryType.POSITIVE_MOMENT]
            if positives:
                latest = max(positives, key=lambda m: m.timestamp)
                days = (self._now() - latest.timestamp).total_seconds() / 86400.0
                obs[7] = max(0.0, min(1.0, days / 7.0))
            else:
                obs[7] = 1.0
            return obs

    @staticmethod
    def _count(memories: Iterable[Memory], memory_type: MemoryType) -> int:
        return sum(1 for m in memories if m.type is memory_type)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "short_term": [m.to_dict() for m in self._short_term],
                "long_term": [m.to_dict() for m in self._long_term],
                "recalls": {mid: count for mid, count in self._recalls.items() if count},
                "patterns": [p.to_dict() for p in self._patterns.values()],
            }

    def load_dict(self, data: Dict[str, Any]) -> None:
        """Replace the store's contents with a previously serialized snapshot."""

        short_term = [Memory.from_dict(item) for item in data.get("short_term", [])]
        long_term = [Memory.from_dict(item) for item in data.get("long_term", [])]
        patterns = [PatternMemory.from_dict(item) for item in data.get("patterns", [])]
        recalls = {str(k): int(v) for k, v in (data.get("recalls") or {}).items()}
        with self._lock:
            self.clear()
            self._short_term.extend(short_term[-self.config.short_term_capacity:])
            self._long_term.extend(long_term[-self.config.long_term_capacity:])
            for memory in self._all_memories():
                self._recalls[memory.id] = recalls.get(memory.id, 0)
            for pattern in patterns:
                self._patterns[(pattern.action, pattern.scenario)] = pattern

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[MemoryConfig] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> "MemoryStore":
        store = cls(config=config, now=now)
        store.load_dict(data)
        return store
