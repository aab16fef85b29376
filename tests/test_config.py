"""Tests for configuration loading."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from teensim.config import MemoryConfig, SimulationConfig, load_env_file


def test_defaults():
    config = SimulationConfig()
    assert config.max_turns == 10
    assert config.policy_mode == "rule_based"
    assert config.training_mode is False
    assert config.memory.short_term_capacity == 20
    assert config.memory.long_term_capacity == 50
    assert config.reward.compliance_reward == 1.0
    assert config.db_path == Path("var") / "teen_memories.db"


def test_policy_mode_is_validated():
    assert SimulationConfig(policy_mode=" Learned ").policy_mode == "learned"
    with pytest.raises(ValidationError):
        SimulationConfig(policy_mode="random")


def test_ranges_are_validated():
    with pytest.raises(ValidationError):
        SimulationConfig(max_turns=0)
    with pytest.raises(ValidationError):
        SimulationConfig(opening_memory_chance=1.5)
    with pytest.raises(ValidationError):
        MemoryConfig(short_term_capacity=0)


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TEENSIM_MAX_TURNS", "6")
    monkeypatch.setenv("TEENSIM_POLICY_MODE", "learned")
    monkeypatch.setenv("TEENSIM_TRAINING_MODE", "yes")
    monkeypatch.setenv("TEENSIM_STATE_DIR", str(tmp_path))
    monkeypatch.setenv("TEENSIM_SPEECH", "0")
    monkeypatch.setenv("TEENSIM_SHORT_TERM_CAPACITY", "5")

    config = SimulationConfig.from_env()
    assert config.max_turns == 6
    assert config.policy_mode == "learned"
    assert config.training_mode is True
    assert config.speech_enabled is False
    assert config.memory.short_term_capacity == 5
    assert config.db_path == tmp_path / "teen_memories.db"


def test_load_env_file_does_not_override(monkeypatch, tmp_path):
    env_file = tmp_path / "teensim.env"
    env_file.write_text(
        "# comment\nTEENSIM_TEST_NEW=from_file\nTEENSIM_TEST_SET = from_file\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("TEENSIM_TEST_NEW", raising=False)
    monkeypatch.setenv("TEENSIM_TEST_SET", "from_env")

    load_env_file(str(env_file))
    try:
        assert os.environ["TEENSIM_TEST_NEW"] == "from_file"
        assert os.environ["TEENSIM_TEST_SET"] == "from_env"
    finally:
        os.environ.pop("TEENSIM_TEST_NEW", None)


def test_load_env_file_missing_is_ignored(tmp_path):
    load_env_file(str(tmp_path / "missing.env"))
