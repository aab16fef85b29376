"""Unit tests for reward module."""

from unittest import TestCase

import pytest

from teensim.config import RewardConfig
from teensim.emotional_state import EmotionalState
from teensim.enums import Emotion, PlayerAction, Response
from teensim.reward import RewardModel, is_consistent


class TestRewardModel(TestCase):
    """Tests for RewardModel class."""

    def setUp(self):
        self.model = RewardModel()

    def test_respectful_compliance_is_rewarded(self):
        state = EmotionalState(relationship=30, mood=60)
        step = self.model.step_reward(Response.COMPLIANT, state, PlayerAction.LISTEN)
        assert step.complied is True
        assert step.value == pytest.approx(1.1)

    def test_compliance_after_disrespect_is_not_counted(self):
        state = EmotionalState(relationship=30, mood=60)
        step = self.model.step_reward(Response.COMPLIANT, state, PlayerAction.AUTHORITARIAN)
        assert step.complied is False
        assert step.value == pytest.approx(0.1)

    def test_unrealistic_compliance_is_penalised(self):
        state = EmotionalState(relationship=-30)
        step = self.model.step_reward(Response.COMPLIANT, state, PlayerAction.LISTEN)
        assert step.value == pytest.approx(-0.2)

    def test_consistent_anger(self):
        state = EmotionalState(mood=-55, stress=70)
        assert state.current_emotion is Emotion.ANGRY
        step = self.model.step_reward(Response.ANGRY, state, PlayerAction.AUTHORITARIAN)
        assert step.value == pytest.approx(0.3)

    def test_inconsistent_response_gets_no_bonus(self):
        state = EmotionalState(mood=60, relationship=50)
        assert state.current_emotion is Emotion.HAPPY
        step = self.model.step_reward(Response.SARCASTIC, state, PlayerAction.LOGICAL)
        # Only the good-relationship shaping applies.
        assert step.value == pytest.approx(0.05)

    def test_poor_relationship_penalty(self):
        state = EmotionalState(relationship=-70)
        assert state.current_emotion is Emotion.SAD
        step = self.model.step_reward(Response.EMOTIONAL_PLEAD, state, PlayerAction.GUILT_TRIP)
        # plead bonus 0.2, poor relationship -0.05, consistency 0.1
        assert step.value == pytest.approx(0.25)

    def test_episode_reward(self):
        assert self.model.episode_reward(True, 10) == 1.0
        assert self.model.episode_reward(False, -50) == -0.5
        assert self.model.episode_reward(False, 0) == 0.0
        assert self.model.episode_reward(True, -10) == 0.0

    def test_constants_are_configurable(self):
        model = RewardModel(RewardConfig(compliance_reward=5.0, consistency_bonus=0.0))
        state = EmotionalState(relationship=30, mood=60)
        assert model.step_reward(Response.COMPLIANT, state, PlayerAction.EMPATHETIC).value == 5.0


def test_consistency_mapping():
    assert is_consistent(Response.DEFIANT, Emotion.DEFIANT)
    assert is_consistent(Response.SARCASTIC, Emotion.DEFIANT)
    assert not is_consistent(Response.COMPLIANT, Emotion.ANGRY)
    # Emotions without a mapping accept any response.
    assert is_consistent(Response.DISMISSIVE, Emotion.NEUTRAL)
