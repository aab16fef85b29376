"""Response selection: the teen's choice of how to answer the player."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from teensim.config import SimulationConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import PlayerAction, Response, Scenario
from teensim.memory_store import Memory, MemoryStore
from teensim.observations import build_observation

LOGGER = logging.getLogger(__name__)

TERMINAL_RESPONSES = frozenset({Response.COMPLIANT, Response.ANGRY, Response.DEFIANT})

LearnedFunction = Callable[[np.ndarray], int]


@dataclass(frozen=True)
class PolicyContext:
    """Read-only view of everything a policy may consider for one turn."""

    state: EmotionalState
    scenario: Scenario
    last_action: Optional[PlayerAction] = None
    turn: int = 0
    max_turns: int = 10
    memory: Optional[MemoryStore] = None
    relevant_memory: Optional[Memory] = None

    def observation(self) -> np.ndarray:
        return build_observation(
            self.state,
            self.scenario,
            self.last_action,
            self.turn,
            self.max_turns,
            self.memory,
        )


def is_terminal(response: Response) -> bool:
    """True for responses that end a conversation on their own."""
    return response in TERMINAL_RESPONSES


class ResponsePolicy(ABC):
    """Chooses the teen's response for a turn. Never mutates the context."""

    name = "policy"

    @abstractmethod
    def choose(self, context: PolicyContext) -> Response:
        """Return the response for this turn."""


class RuleBasedPolicy(ResponsePolicy):
    """Deterministic cascade over the emotional state; first match wins."""

    name = "rule_based"

    def choose(self, context: PolicyContext) -> Response:
        s = context.state
        if s.mood > 30 and s.relationship > 20:
            return Response.COMPLIANT
        if s.mood < -40:
            return Response.ANGRY
        if s.respect_received < 40 and s.autonomy_need > 70:
            return Response.DEFIANT
        if s.mood < -20:
            return Response.SARCASTIC
        if s.trust > 50 and s.mood > 0:
            return Response.NEGOTIATE_CALM
        if s.mood < -10:
            return Response.EMOTIONAL_PLEAD
        if s.trust > 40:
            return Response.REASONABLE_REFUSAL
        return Response.DISMISSIVE


class LearnedPolicy(ResponsePolicy):
    """Delegates to an externally trained function over the observation vector.

    Invalid indices or failing calls fall back to the rule-based cascade so a
    misbehaving model never stalls a conversation.
    """

    name = "learned"

    def __init__(self, fn: LearnedFunction, fallback: Optional[ResponsePolicy] = None) -> None:
        self._fn = fn
        self._fallback = fallback or RuleBasedPolicy()

    def choose(self, context: PolicyContext) -> Response:
        try:
            index = int(self._fn(context.observation()))
        except Exception as exc:
            LOGGER.warning("Learned policy failed (%s); using rule-based fallback", exc)
            return self._fallback.choose(context)
        if not 0 <= index < len(Response):
            LOGGER.warning("Learned policy returned invalid index %s; using rule-based fallback", index)
            return self._fallback.choose(context)
        return Response.from_index(index)


def build_policy(
    config: Optional[SimulationConfig] = None,
    learned_fn: Optional[LearnedFunction] = None,
) -> ResponsePolicy:
    """Build the policy selected by ``config.policy_mode``."""
    config = config or SimulationConfig()
    if config.policy_mode == "learned":
        if learned_fn is None:
            LOGGER.warning("Learned policy requested but no model supplied; using rule-based policy")
            return RuleBasedPolicy()
        return LearnedPolicy(learned_fn)
    return RuleBasedPolicy()
