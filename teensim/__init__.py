"""Conversational core for the teen persuasion simulator."""

from teensim.emotional_state import EmotionalState
from teensim.engine import ConversationEngine, TurnOutcome
from teensim.enums import Emotion, MemoryType, PlayerAction, Response, Scenario
from teensim.memory_store import Memory, MemoryStore

__all__ = [
    "ConversationEngine",
    "Emotion",
    "EmotionalState",
    "Memory",
    "MemoryStore",
    "MemoryType",
    "PlayerAction",
    "Response",
    "Scenario",
    "TurnOutcome",
]
