"""Scenario generation, descriptions, tips and outcome statistics."""

from __future__ import annotations

import random
from typing import Dict, Optional

from teensim.emotional_state import EmotionalState
from teensim.enums import Scenario

DESCRIPTIONS: Dict[Scenario, str] = {
    Scenario.GO_TO_SCHOOL: "The teen doesn't want to go to school. You need to convince them.",
    Scenario.DO_HOMEWORK: "The teen is avoiding homework. You need to get them to complete it.",
    Scenario.CLEAN_ROOM: "The teen's room is messy. You want them to clean it.",
    Scenario.LIMIT_SCREEN_TIME: "The teen has been on their device too long. You need to set limits.",
    Scenario.BEDTIME: "It's bedtime but the teen doesn't want to sleep yet.",
    Scenario.COME_TO_FAMILY: "You want the teen to spend time with the family, but they're isolated.",
}

TIPS: Dict[Scenario, str] = {
    Scenario.GO_TO_SCHOOL: "Tip: Listen to understand why they don't want to go. There might be bullying or anxiety.",
    Scenario.DO_HOMEWORK: "Tip: Offer to help or break it into smaller tasks. Avoid making it a power struggle.",
    Scenario.CLEAN_ROOM: "Tip: Respect their space. Compromise on minimum standards rather than perfection.",
    Scenario.LIMIT_SCREEN_TIME: "Tip: Set clear boundaries together. Explain the 'why' behind limits.",
    Scenario.BEDTIME: "Tip: Acknowledge they're growing up. Negotiate a reasonable time together.",
    Scenario.COME_TO_FAMILY: "Tip: Understand their need for independence. Make family time appealing, not forced.",
}

# (start hour inclusive, end hour exclusive, tiredness range, hunger range)
TIME_OF_DAY_BANDS = (
    (6, 9, (50.0, 90.0), (40.0, 80.0)),
    (9, 15, (20.0, 50.0), (30.0, 60.0)),
    (15, 18, (30.0, 60.0), (50.0, 90.0)),
    (18, 21, (40.0, 70.0), (20.0, 50.0)),
)
LATE_NIGHT_BAND = ((60.0, 95.0), (10.0, 40.0))


class ScenarioManager:
    """Picks scenarios, perturbs the teen's state and tracks success rates."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        randomize: bool = True,
        forced: Scenario = Scenario.GO_TO_SCHOOL,
        randomize_time_of_day: bool = True,
    ) -> None:
        self._rng = rng or random.Random()
        self.randomize = randomize
        self.forced = forced
        self.randomize_time_of_day = randomize_time_of_day
        self.generated = 0
        self.successes = 0
        self.failures = 0

    def generate(self) -> Scenario:
        self.generated += 1
        if self.randomize:
            return self._rng.choice(list(Scenario))
        return self.forced

    def apply_environmental_factors(self, state: EmotionalState, hour: Optional[int] = None) -> None:
        """Set tiredness and hunger for a time of day, then vary stress and autonomy.

        ``hour`` defaults to a random hour between 6 and 22.
        """
        if self.randomize_time_of_day or hour is not None:
            if hour is None:
                hour = self._rng.randrange(6, 23)
            tired_range, hunger_range = LATE_NIGHT_BAND
            for start, end, tired, hunger in TIME_OF_DAY_BANDS:
                if start <= hour < end:
                    tired_range, hunger_range = tired, hunger
                    break
            state.tiredness = self._rng.uniform(*tired_range)
            state.hunger = self._rng.uniform(*hunger_range)
        state.stress = self._rng.uniform(20.0, 70.0)
        state.autonomy_need = self._rng.uniform(60.0, 90.0)
        state.derive_emotion()

    @staticmethod
    def difficulty(state: EmotionalState) -> float:
        """Rough 0..1 estimate of how hard the teen will be to persuade."""
        score = 0.0
        if state.relationship < 0:
            score += abs(state.relationship) / 100.0
        if state.mood < 0:
            score += abs(state.mood) / 100.0
        score += (100.0 - state.trust) / 100.0
        score += state.stress / 100.0
        return score / 4.0

    def record_outcome(self, success: bool) -> None:
        if success:
            self.successes += 1
        else:
            self.failures += 1

    def success_rate(self) -> float:
        """Percentage of recorded conversations that succeeded."""
        total = self.successes + self.failures
        if total == 0:
            return 0.0
        return self.successes / total * 100.0

    @staticmethod
    def description(scenario: Scenario) -> str:
        return DESCRIPTIONS.get(scenario, "Interact with the teenager.")

    @staticmethod
    def tips(scenario: Scenario, state: EmotionalState) -> str:
        tips = TIPS.get(scenario, "")
        if state.mood < -40:
            tips += "\nWarning: Teen is in a very negative mood. Approach with empathy."
        if state.relationship < -30:
            tips += "\nWarning: Relationship is strained. Rebuild trust before making demands."
        if state.trust < 30:
            tips += "\nWarning: Trust is very low. They won't respond well to authority."
        return tips
