"""Reward shaping for training a learned response policy.

The reward model only reads state; it never influences which response the
teen gives during play.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from teensim.config import RewardConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import RESPECTFUL_ACTIONS, Emotion, PlayerAction, Response

CONSISTENT_RESPONSES: Dict[Emotion, FrozenSet[Response]] = {
    Emotion.HAPPY: frozenset({Response.COMPLIANT, Response.NEGOTIATE_CALM}),
    Emotion.ANGRY: frozenset({Response.ANGRY, Response.DEFIANT}),
    Emotion.ANNOYED: frozenset({Response.SARCASTIC, Response.DISMISSIVE}),
    Emotion.SAD: frozenset({Response.EMOTIONAL_PLEAD}),
    Emotion.DEFIANT: frozenset({Response.DEFIANT, Response.SARCASTIC}),
    Emotion.RECEPTIVE: frozenset({Response.NEGOTIATE_CALM, Response.REASONABLE_REFUSAL}),
}


def is_consistent(response: Response, emotion: Emotion) -> bool:
    """Whether a response plausibly matches the teen's emotion."""
    allowed = CONSISTENT_RESPONSES.get(emotion)
    return allowed is None or response in allowed


@dataclass(frozen=True)
class StepReward:
    value: float
    complied: bool = False
    ended_well: bool = False


class RewardModel:
    """Scores each response for realism given the emotional state."""

    def __init__(self, config: Optional[RewardConfig] = None) -> None:
        self.config = config or RewardConfig()

    def step_reward(
        self,
        response: Response,
        state: EmotionalState,
        last_action: Optional[PlayerAction],
    ) -> StepReward:
        cfg = self.config
        emotion = state.current_emotion
        reward = 0.0
        complied = False

        if response is Response.COMPLIANT:
            if state.relationship > 20 and last_action in RESPECTFUL_ACTIONS:
                reward += cfg.compliance_reward
                complied = True
            elif state.relationship < -20:
                reward -= cfg.unrealistic_compliance_penalty
        elif response is Response.NEGOTIATE_CALM:
            if state.mood > -30 and state.trust > 40:
                reward += cfg.negotiate_bonus
        elif response is Response.SARCASTIC:
            if emotion is Emotion.ANNOYED and state.relationship > -40:
                reward += cfg.sarcasm_bonus
        elif response is Response.ANGRY:
            if state.mood < -40 or emotion is Emotion.ANGRY:
                reward += cfg.anger_bonus
        elif response is Response.DISMISSIVE:
            if state.autonomy_need > 60 and state.mood < 20:
                reward += cfg.dismissive_bonus
        elif response is Response.EMOTIONAL_PLEAD:
            if emotion in (Emotion.SAD, Emotion.ANXIOUS):
                reward += cfg.plead_bonus
        elif response is Response.DEFIANT:
            if state.respect_received < 40 and state.autonomy_need > 70 and state.mood < -20:
                reward += cfg.defiance_bonus
        elif response is Response.REASONABLE_REFUSAL:
            if state.trust > 50 and state.mood > 0:
                reward += cfg.refusal_bonus

        if state.relationship > 40:
            reward += cfg.relationship_reward * cfg.relationship_scale
        if state.relationship < -60:
            reward += cfg.poor_relationship_penalty * cfg.relationship_scale
        if is_consistent(response, emotion):
            reward += cfg.consistency_bonus

        return StepReward(value=reward, complied=complied, ended_well=complied)

    def episode_reward(self, has_complied: bool, relationship: float) -> float:
        """Terminal bonus or penalty for the whole conversation."""
        if has_complied and relationship > 0:
            return self.config.success_bonus
        if not has_complied and relationship < -40:
            return self.config.failed_relationship_penalty
        return 0.0
