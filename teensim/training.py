"""Episode environment for training a response policy with an external learner.

The environment plays the parent with a scripted opponent and lets the
learner pick the teen's response. Observations follow the layout in
:mod:`teensim.observations`; the learner itself lives outside this package.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

from teensim.config import SimulationConfig
from teensim.emotional_state import EmotionalState
from teensim.engine import ACTION_EFFECTS
from teensim.enums import PlayerAction, Response, Scenario
from teensim.memory_store import MemoryStore
from teensim.observations import OBSERVATION_SIZE, build_observation
from teensim.policy import is_terminal
from teensim.reward import RewardModel

LOGGER = logging.getLogger(__name__)

Opponent = Callable[[EmotionalState, Scenario, random.Random], PlayerAction]


def random_opponent(state: EmotionalState, scenario: Scenario, rng: random.Random) -> PlayerAction:
    return rng.choice(list(PlayerAction))


class TrainingEnvironment:
    """Gym-style ``reset``/``step`` loop over one simulated teen.

    Memories persist across episodes, matching how the teen remembers earlier
    conversations during play.
    """

    observation_size = OBSERVATION_SIZE
    action_count = len(Response)

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        reward_model: Optional[RewardModel] = None,
        memory: Optional[MemoryStore] = None,
        opponent: Optional[Opponent] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or SimulationConfig(training_mode=True)
        self.reward_model = reward_model or RewardModel(self.config.reward)
        self.memory = memory or MemoryStore(self.config.memory)
        self.opponent = opponent or random_opponent
        self._rng = rng or random.Random()
        self.state = EmotionalState()
        self.scenario = Scenario.GO_TO_SCHOOL
        self.turn = 0
        self.last_action: Optional[PlayerAction] = None
        self.has_complied = False
        self.episode_return = 0.0
        self.episodes = 0
        self._done = True

    def reset(self, seed: Optional[int] = None) -> np.ndarray:
        """Start a new episode from a random state and scenario."""
        if seed is not None:
            self._rng.seed(seed)
        self.state = EmotionalState.randomized(self._rng)
        self.scenario = self._rng.choice(list(Scenario))
        self.turn = 0
        self.has_complied = False
        self.episode_return = 0.0
        self.episodes += 1
        self._done = False
        self._player_turn()
        return self.observation()

    def step(self, response_index: int) -> Tuple[np.ndarray, float, bool, Dict[str, Any]]:
        """Apply the learner's response and let the opponent move again."""
        if self._done:
            raise RuntimeError("Episode is over; call reset() before step()")
        response = Response.coerce(int(response_index), Response.DISMISSIVE)
        self.turn += 1

        step = self.reward_model.step_reward(response, self.state, self.last_action)
        reward = step.value
        if step.complied:
            self.has_complied = True
        self.memory.record_interaction(self.last_action, response, self.state, self.scenario)

        done = is_terminal(response) or self.turn >= self.config.max_turns
        if done:
            reward += self.reward_model.episode_reward(self.has_complied, self.state.relationship)
            self._done = True
        else:
            self._player_turn()

        self.episode_return += reward
        info = {
            "response": response.value,
            "emotion": self.state.current_emotion.value,
            "relationship": self.state.relationship,
            "turn": self.turn,
            "has_complied": self.has_complied,
        }
        if done:
            LOGGER.debug("Episode %d finished after %d turns, return %.2f", self.episodes, self.turn, self.episode_return)
        return self.observation(), reward, done, info

    def observation(self) -> np.ndarray:
        return build_observation(
            self.state,
            self.scenario,
            self.last_action,
            self.turn,
            self.config.max_turns,
            self.memory,
        )

    def _player_turn(self) -> None:
        action = self.opponent(self.state, self.scenario, self._rng)
        effect = ACTION_EFFECTS[action]
        self.state.apply_interaction(effect.relationship, effect.mood, effect.respect, effect.respectful)
        self.last_action = action


def run_episode(env: TrainingEnvironment, choose: Callable[[np.ndarray], int], seed: Optional[int] = None) -> float:
    """Play one episode with ``choose`` and return the undiscounted return."""
    obs = env.reset(seed)
    done = False
    while not done:
        obs, _, done, _ = env.step(choose(obs))
    return env.episode_return
