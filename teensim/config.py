"""Centralized configuration management for the simulator."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from teensim.constants import (
    DEFAULT_DB_NAME,
    DEFAULT_DECAY_RATE_PER_SECOND,
    DEFAULT_EMOTIONAL_BIAS,
    DEFAULT_IMPORTANCE_THRESHOLD,
    DEFAULT_LONG_TERM_CAPACITY,
    DEFAULT_MAX_STRIKES,
    DEFAULT_MAX_TURNS,
    DEFAULT_MEMORY_DECAY_PER_DAY,
    DEFAULT_OPENING_MEMORY_CHANCE,
    DEFAULT_POLICY_MODE,
    DEFAULT_PROMOTION_RECALLS,
    DEFAULT_RECALL_THRESHOLD,
    DEFAULT_RECENT_BIAS,
    DEFAULT_SHORT_TERM_CAPACITY,
    DEFAULT_SPEECH_RATE,
    DEFAULT_SPEECH_VOLUME,
    DEFAULT_STATE_DIR,
    DEFAULT_STRESS_FLOOR,
    DEFAULT_TICK_INTERVAL_SECONDS,
    VALID_POLICY_MODES,
)


class MemoryConfig(BaseModel):
    """Capacity and retrieval tuning for the memory store."""

    short_term_capacity: int = Field(default=DEFAULT_SHORT_TERM_CAPACITY, ge=1, le=1000)
    long_term_capacity: int = Field(default=DEFAULT_LONG_TERM_CAPACITY, ge=1, le=10000)
    decay_per_day: float = Field(default=DEFAULT_MEMORY_DECAY_PER_DAY, ge=0.0, le=10.0)
    recent_bias: float = Field(default=DEFAULT_RECENT_BIAS, ge=0.0, le=1.0)
    emotional_bias: float = Field(default=DEFAULT_EMOTIONAL_BIAS, ge=0.0, le=1.0)
    importance_threshold: float = Field(default=DEFAULT_IMPORTANCE_THRESHOLD, ge=0.0, le=1.0)
    recall_threshold: float = Field(default=DEFAULT_RECALL_THRESHOLD, ge=0.0)
    promotion_recalls: int = Field(default=DEFAULT_PROMOTION_RECALLS, ge=0)


class RewardConfig(BaseModel):
    """Shaping constants used by the reward model during training."""

    compliance_reward: float = 1.0
    relationship_reward: float = 0.5
    poor_relationship_penalty: float = -0.5
    unrealistic_compliance_penalty: float = 0.3
    consistency_bonus: float = 0.1
    success_bonus: float = 1.0
    failed_relationship_penalty: float = -0.5
    negotiate_bonus: float = 0.3
    sarcasm_bonus: float = 0.2
    anger_bonus: float = 0.2
    dismissive_bonus: float = 0.1
    plead_bonus: float = 0.2
    defiance_bonus: float = 0.2
    refusal_bonus: float = 0.4
    relationship_scale: float = Field(default=0.1, ge=0.0, le=1.0)


class SimulationConfig(BaseModel):
    """Type-safe configuration for the simulator with validation."""

    max_turns: int = Field(default=DEFAULT_MAX_TURNS, ge=1, le=100)
    policy_mode: str = Field(default=DEFAULT_POLICY_MODE)
    training_mode: bool = False
    state_dir: Path = Field(default=Path(DEFAULT_STATE_DIR))
    db_name: str = Field(default=DEFAULT_DB_NAME)
    decay_rate: float = Field(default=DEFAULT_DECAY_RATE_PER_SECOND, ge=0.0, le=100.0)
    stress_floor: float = Field(default=DEFAULT_STRESS_FLOOR, ge=0.0, le=100.0)
    tick_interval: float = Field(default=DEFAULT_TICK_INTERVAL_SECONDS, ge=0.05, le=60.0)
    opening_memory_chance: float = Field(default=DEFAULT_OPENING_MEMORY_CHANCE, ge=0.0, le=1.0)
    speech_enabled: bool = False
    speech_rate: int = Field(default=DEFAULT_SPEECH_RATE, ge=50, le=400)
    speech_volume: float = Field(default=DEFAULT_SPEECH_VOLUME, ge=0.0, le=1.0)
    max_strikes: int = Field(default=DEFAULT_MAX_STRIKES, ge=1, le=10)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    reward: RewardConfig = Field(default_factory=RewardConfig)

    @field_validator("policy_mode")
    @classmethod
    def validate_policy_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in VALID_POLICY_MODES:
            raise ValueError(f"policy_mode must be one of {', '.join(VALID_POLICY_MODES)}")
        return v

    @property
    def db_path(self) -> Path:
        return self.state_dir / self.db_name

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """Load configuration from environment variables."""
        return cls(
            max_turns=int(os.getenv("TEENSIM_MAX_TURNS", str(DEFAULT_MAX_TURNS))),
            policy_mode=os.getenv("TEENSIM_POLICY_MODE", DEFAULT_POLICY_MODE),
            training_mode=_env_flag("TEENSIM_TRAINING_MODE"),
            state_dir=Path(os.getenv("TEENSIM_STATE_DIR", DEFAULT_STATE_DIR)),
            db_name=os.getenv("TEENSIM_DB_NAME", DEFAULT_DB_NAME),
            decay_rate=float(
                os.getenv("TEENSIM_DECAY_RATE", str(DEFAULT_DECAY_RATE_PER_SECOND))
            ),
            tick_interval=max(
                0.05,
                float(os.getenv("TEENSIM_TICK_INTERVAL", str(DEFAULT_TICK_INTERVAL_SECONDS))),
            ),
            opening_memory_chance=float(
                os.getenv("TEENSIM_OPENING_MEMORY_CHANCE", str(DEFAULT_OPENING_MEMORY_CHANCE))
            ),
            speech_enabled=_env_flag("TEENSIM_SPEECH"),
            speech_rate=int(os.getenv("TEENSIM_SPEECH_RATE", str(DEFAULT_SPEECH_RATE))),
            max_strikes=int(os.getenv("TEENSIM_MAX_STRIKES", str(DEFAULT_MAX_STRIKES))),
            memory=MemoryConfig(
                short_term_capacity=int(
                    os.getenv("TEENSIM_SHORT_TERM_CAPACITY", str(DEFAULT_SHORT_TERM_CAPACITY))
                ),
                long_term_capacity=int(
                    os.getenv("TEENSIM_LONG_TERM_CAPACITY", str(DEFAULT_LONG_TERM_CAPACITY))
                ),
            ),
        )


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def load_env_file(path: str) -> None:
    """Populate ``os.environ`` from a simple KEY=VALUE file without overriding."""
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())
