"""Tests for response policies."""

from unittest.mock import MagicMock

import numpy as np
import pytest

from teensim.config import SimulationConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import PlayerAction, Response, Scenario
from teensim.observations import (
    ACTION_SLICE,
    MEMORY_SLICE,
    OBSERVATION_SIZE,
    SCENARIO_SLICE,
    TURN_INDEX,
    build_observation,
)
from teensim.policy import (
    LearnedPolicy,
    PolicyContext,
    RuleBasedPolicy,
    build_policy,
    is_terminal,
)


def _context(**fields):
    return PolicyContext(state=EmotionalState(**fields), scenario=Scenario.BEDTIME)


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"mood": 40, "relationship": 30}, Response.COMPLIANT),
        ({"mood": -50}, Response.ANGRY),
        ({"mood": 0, "respect_received": 30, "autonomy_need": 80}, Response.DEFIANT),
        ({"mood": -30}, Response.SARCASTIC),
        ({"mood": 10, "trust": 60}, Response.NEGOTIATE_CALM),
        ({"mood": -15}, Response.EMOTIONAL_PLEAD),
        ({"mood": 0, "trust": 45}, Response.REASONABLE_REFUSAL),
        ({"mood": 0, "trust": 30}, Response.DISMISSIVE),
    ],
)
def test_rule_cascade(fields, expected):
    assert RuleBasedPolicy().choose(_context(**fields)) is expected


def test_rule_order_angry_before_defiant():
    context = _context(mood=-45, respect_received=20, autonomy_need=90)
    assert RuleBasedPolicy().choose(context) is Response.ANGRY


def test_policy_does_not_mutate_state():
    context = _context(mood=-15)
    before = context.state.to_dict()
    RuleBasedPolicy().choose(context)
    assert context.state.to_dict() == before


@pytest.mark.parametrize("response", list(Response))
def test_is_terminal(response):
    assert is_terminal(response) == (response in {Response.COMPLIANT, Response.ANGRY, Response.DEFIANT})


def test_learned_policy_uses_index():
    fn = MagicMock(return_value=6)
    policy = LearnedPolicy(fn)
    assert policy.choose(_context()) is Response.DEFIANT
    observation = fn.call_args.args[0]
    assert observation.shape == (OBSERVATION_SIZE,)


def test_learned_policy_falls_back_on_bad_index():
    policy = LearnedPolicy(lambda obs: 42)
    assert policy.choose(_context(mood=40, relationship=30)) is Response.COMPLIANT


def test_learned_policy_falls_back_on_error():
    def broken(obs):
        raise RuntimeError("model not loaded")

    policy = LearnedPolicy(broken)
    assert policy.choose(_context(mood=-50)) is Response.ANGRY


def test_build_policy():
    assert isinstance(build_policy(SimulationConfig()), RuleBasedPolicy)
    learned_config = SimulationConfig(policy_mode="learned")
    assert isinstance(build_policy(learned_config, lambda obs: 0), LearnedPolicy)
    assert isinstance(build_policy(learned_config), RuleBasedPolicy)


def test_observation_layout(memory):
    state = EmotionalState(relationship=20)
    obs = build_observation(state, Scenario.CLEAN_ROOM, PlayerAction.BRIBERY, 2, 10, memory)
    assert obs.shape == (OBSERVATION_SIZE,)
    assert obs.dtype == np.float32
    np.testing.assert_array_equal(obs[:11], state.to_observation_vector())
    assert obs[SCENARIO_SLICE].tolist() == [0, 0, 1, 0, 0, 0]
    assert obs[ACTION_SLICE].tolist() == [0, 0, 0, 1, 0, 0, 0]
    assert obs[TURN_INDEX] == pytest.approx(0.2)
    np.testing.assert_array_equal(obs[MEMORY_SLICE], memory.observation_vector())


def test_observation_without_action_or_memory():
    obs = build_observation(EmotionalState(), Scenario.GO_TO_SCHOOL, None, 0, 10)
    assert not obs[ACTION_SLICE].any()
    assert not obs[MEMORY_SLICE].any()
