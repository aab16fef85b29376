"""Word-list sentiment scoring for interview answers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List

LOGGER = logging.getLogger(__name__)

POSITIVE_WORDS = frozenset({
    "yes", "great", "excellent", "good", "absolutely", "definitely",
    "strong", "skilled", "experienced", "passionate", "enthusiastic",
    "love", "enjoy", "excited", "confident",
})
NEGATIVE_WORDS = frozenset({
    "no", "bad", "terrible", "poor", "unfortunately", "difficult",
    "struggle", "weak", "inexperienced", "unsure", "confused",
})
UNCERTAIN_WORDS = frozenset({
    "maybe", "perhaps", "possibly", "might", "could", "somewhat",
    "kind of", "sort of", "i think", "i guess", "probably",
})
FILLER_WORDS = frozenset({
    "um", "uh", "er", "ah", "like", "you know", "basically",
    "actually", "literally", "well", "so", "hmm",
})
PROFESSIONAL_WORDS = frozenset({
    "experience", "skills", "professional", "qualified", "competent",
    "expertise", "knowledge", "project", "team", "leadership",
    "achieve", "results", "successful", "efficient",
})
ASSERTIVE_WORDS = frozenset({
    "will", "can", "must", "certainly", "absolutely", "definitely",
    "ensure", "guarantee", "committed", "determined",
})
DEFENSIVE_WORDS = frozenset({
    "but", "however", "actually", "technically", "well actually",
    "to be fair", "in my defense",
})

_SPLIT = re.compile(r"[ ,.!?;:]")


class Sentiment(Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


@dataclass
class SentimentResult:
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: float = 0.0
    nervousness: float = 0.0
    assertiveness: float = 0.0
    professionalism: float = 0.0
    contains_humor: bool = False
    sounds_uncertain: bool = False
    sounds_defensive: bool = False
    word_count: int = 0


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class SentimentAnalyzer:
    """Counts keyword hits and turns them into 0..1 ratios.

    Single words are matched against whole tokens; multi-word phrases are
    matched as substrings of the lowercased answer.
    """

    def analyze(self, text: str) -> SentimentResult:
        result = SentimentResult()
        if not text or not text.strip():
            return result

        lower = text.lower()
        words = [w.strip() for w in _SPLIT.split(lower)]
        result.word_count = sum(1 for w in words if len(w) > 2)

        positive = self._count(lower, words, POSITIVE_WORDS)
        negative = self._count(lower, words, NEGATIVE_WORDS)
        uncertain = self._count(lower, words, UNCERTAIN_WORDS)
        filler = self._count(lower, words, FILLER_WORDS)
        professional = self._count(lower, words, PROFESSIONAL_WORDS)
        assertive = self._count(lower, words, ASSERTIVE_WORDS)
        defensive = self._count(lower, words, DEFENSIVE_WORDS)

        if positive > negative:
            result.sentiment = Sentiment.POSITIVE
        elif negative > positive:
            result.sentiment = Sentiment.NEGATIVE

        result.confidence = _clamp01((positive + negative) / max(1.0, result.word_count * 0.3))
        result.nervousness = _clamp01((filler * 2 + uncertain) / max(1.0, result.word_count * 0.5))
        result.assertiveness = _clamp01(assertive / max(1.0, result.word_count * 0.2))
        result.professionalism = _clamp01(professional / max(1.0, result.word_count * 0.3))
        result.contains_humor = "!" in lower or "haha" in lower or "lol" in lower
        result.sounds_uncertain = uncertain > 2 or filler > 3
        result.sounds_defensive = defensive > 1 or "but" in lower

        LOGGER.debug(
            "Sentiment %s confidence=%.2f nervous=%.2f assertive=%.2f professional=%.2f",
            result.sentiment.value,
            result.confidence,
            result.nervousness,
            result.assertiveness,
            result.professionalism,
        )
        return result

    @staticmethod
    def _count(lower: str, words: List[str], keywords: FrozenSet[str]) -> int:
        count = 0
        for keyword in keywords:
            if " " in keyword:
                count += lower.count(keyword)
            else:
                count += words.count(keyword)
        return count

    @staticmethod
    def feedback(result: SentimentResult) -> str:
        if result.nervousness > 0.6:
            return "You sound nervous. Take a breath!"
        if result.sounds_defensive:
            return "Getting defensive already?"
        if result.assertiveness < 0.3 and result.confidence < 0.4:
            return "Where's your confidence?"
        if result.professionalism > 0.7:
            return "Very professional. TOO professional..."
        if result.contains_humor:
            return "Humor? In an interview? Bold move."
        return "Interesting answer..."
