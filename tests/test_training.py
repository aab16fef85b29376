"""Tests for the training environment."""

import random

import pytest

from teensim.config import SimulationConfig
from teensim.enums import PlayerAction, Response
from teensim.observations import OBSERVATION_SIZE
from teensim.training import TrainingEnvironment, run_episode


def _always(action):
    return lambda state, scenario, rng: action


def _env(tmp_path, **overrides):
    config = SimulationConfig(state_dir=tmp_path, training_mode=True, **overrides)
    return TrainingEnvironment(config, opponent=_always(PlayerAction.LISTEN), rng=random.Random(9))


def test_reset_returns_observation(tmp_path):
    env = _env(tmp_path)
    obs = env.reset(seed=1)
    assert obs.shape == (OBSERVATION_SIZE,)
    assert env.observation_size == OBSERVATION_SIZE
    assert env.action_count == len(Response)
    assert env.last_action is PlayerAction.LISTEN
    assert env.turn == 0


def test_compliance_ends_episode(tmp_path):
    env = _env(tmp_path)
    env.reset(seed=1)
    obs, reward, done, info = env.step(Response.COMPLIANT.ordinal)
    assert done is True
    assert info["response"] == "Compliant"
    assert info["turn"] == 1
    assert obs.shape == (OBSERVATION_SIZE,)
    assert env.episode_return == pytest.approx(reward)


def test_turn_cap(tmp_path):
    env = _env(tmp_path, max_turns=3)
    env.reset(seed=2)
    dones = [env.step(Response.DISMISSIVE.ordinal)[2] for _ in range(3)]
    assert dones == [False, False, True]
    with pytest.raises(RuntimeError):
        env.step(Response.DISMISSIVE.ordinal)


def test_invalid_index_is_dismissive(tmp_path):
    env = _env(tmp_path)
    env.reset(seed=3)
    _, _, _, info = env.step(99)
    assert info["response"] == "Dismissive"


def test_step_before_reset_raises(tmp_path):
    env = _env(tmp_path)
    with pytest.raises(RuntimeError):
        env.step(0)


def test_memories_persist_across_episodes(tmp_path):
    env = _env(tmp_path, max_turns=2)
    first = run_episode(env, lambda obs: Response.REASONABLE_REFUSAL.ordinal, seed=4)
    held_after_first = len(env.memory)
    run_episode(env, lambda obs: Response.REASONABLE_REFUSAL.ordinal, seed=5)
    assert held_after_first == 2
    assert len(env.memory) == 4
    assert env.episodes == 2
    assert isinstance(first, float)


def test_seeded_episodes_are_reproducible(tmp_path):
    returns = []
    for _ in range(2):
        env = TrainingEnvironment(
            SimulationConfig(state_dir=tmp_path, training_mode=True),
            rng=random.Random(0),
        )
        returns.append(run_episode(env, lambda obs: Response.NEGOTIATE_CALM.ordinal, seed=42))
    assert returns[0] == returns[1]
