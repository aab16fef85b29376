"""Fixed-layout observation vectors handed to external learners.

Layout (33 float32 values):

* ``[0:11]``  emotional state (see ``EmotionalState.to_observation_vector``)
* ``[11:17]`` scenario one-hot
* ``[17:24]`` last player action one-hot (all zeros before the first action)
* ``[24]``    turn count divided by the turn cap
* ``[25:33]`` memory features (see ``MemoryStore.observation_vector``)
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from teensim import emotional_state, memory_store
from teensim.emotional_state import EmotionalState
from teensim.enums import PlayerAction, Scenario
from teensim.memory_store import MemoryStore

STATE_SLICE = slice(0, emotional_state.OBSERVATION_SIZE)
SCENARIO_SLICE = slice(STATE_SLICE.stop, STATE_SLICE.stop + len(Scenario))
ACTION_SLICE = slice(SCENARIO_SLICE.stop, SCENARIO_SLICE.stop + len(PlayerAction))
TURN_INDEX = ACTION_SLICE.stop
MEMORY_SLICE = slice(TURN_INDEX + 1, TURN_INDEX + 1 + memory_store.OBSERVATION_SIZE)
OBSERVATION_SIZE = MEMORY_SLICE.stop


def one_hot(index: Optional[int], size: int) -> np.ndarray:
    vector = np.zeros(size, dtype=np.float32)
    if index is not None and 0 <= index < size:
        vector[index] = 1.0
    return vector


def build_observation(
    state: EmotionalState,
    scenario: Scenario,
    last_action: Optional[PlayerAction],
    turn: int,
    max_turns: int,
    memory: Optional[MemoryStore] = None,
) -> np.ndarray:
    memory_features = (
        memory.observation_vector()
        if memory is not None
        else np.zeros(memory_store.OBSERVATION_SIZE, dtype=np.float32)
    )
    return np.concatenate(
        [
            state.to_observation_vector(),
            one_hot(scenario.ordinal, len(Scenario)),
            one_hot(last_action.ordinal if last_action is not None else None, len(PlayerAction)),
            np.array([turn / max(1, max_turns)], dtype=np.float32),
            memory_features,
        ]
    ).astype(np.float32)
