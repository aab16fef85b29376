"""Keyword-based classification of free-text player input into an action."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from teensim.enums import PlayerAction

LOGGER = logging.getLogger(__name__)

KeywordTable = Dict[PlayerAction, List[Tuple[str, float]]]

KEYWORDS: KeywordTable = {
    PlayerAction.EMPATHETIC: [
        ("understand", 3.0), ("feel", 2.0), ("feeling", 2.0), ("feelings", 2.0),
        ("sorry", 2.5), ("care", 2.0), ("caring", 2.0), ("love", 2.0),
        ("support", 2.0), ("here for you", 3.0), ("worried about", 2.5),
        ("i know", 2.0), ("must be hard", 3.0), ("difficult", 1.5),
        ("empathize", 3.0), ("sympathize", 2.5), ("appreciate", 2.0),
        ("see why", 2.0), ("makes sense", 2.0), ("valid", 2.0),
    ],
    PlayerAction.LISTEN: [
        ("tell me", 3.0), ("what's wrong", 3.0), ("what happened", 2.5),
        ("listen", 2.5), ("talk", 2.0), ("talking", 2.0), ("hear", 2.0),
        ("share", 2.0), ("explain", 2.0), ("help me understand", 3.0),
        ("going on", 2.0), ("bothering", 2.5), ("upset", 2.0),
        ("want to know", 2.5), ("tell you what", 1.0), ("let's talk", 3.0),
        ("open up", 2.0), ("comfortable", 1.5),
    ],
    PlayerAction.COMPROMISE: [
        ("how about", 3.0), ("what if", 3.0), ("together", 2.5),
        ("compromise", 3.0), ("meet", 2.0), ("halfway", 2.5),
        ("work something out", 3.0), ("find a way", 2.5), ("both", 2.0),
        ("deal", 2.0), ("agree", 2.0), ("fair", 2.0),
        ("let's", 2.0), ("we can", 2.0), ("middle ground", 3.0),
        ("alternative", 2.0), ("option", 1.5), ("instead", 1.5),
    ],
    PlayerAction.LOGICAL: [
        ("because", 2.5), ("important", 2.0), ("need to", 2.0),
        ("should", 2.0), ("reason", 2.5), ("think", 1.5),
        ("consider", 2.0), ("fact", 2.5), ("studies", 2.0),
        ("research", 2.0), ("evidence", 2.5), ("makes sense", 2.0),
        ("logically", 3.0), ("rationally", 2.5), ("understand that", 2.0),
        ("consequence", 2.5), ("result", 2.0), ("leads to", 2.0),
        ("future", 2.0), ("goal", 1.5),
    ],
    PlayerAction.BRIBERY: [
        ("if you", 3.0), ("reward", 3.0), ("give you", 2.5),
        ("money", 2.5), ("buy", 2.0), ("get you", 2.5),
        ("allowance", 2.5), ("pay", 2.0), ("extra", 2.0),
        ("treat", 2.0), ("prize", 2.0), ("gift", 2.0),
        ("earn", 2.0), ("bonus", 2.0), ("special", 1.5),
        ("then you can", 2.5), ("in exchange", 3.0), ("deal", 2.0),
    ],
    PlayerAction.GUILT_TRIP: [
        ("after all", 3.0), ("disappoint", 3.0), ("disappointed", 3.0),
        ("how could", 3.0), ("ungrateful", 3.0), ("sacrifice", 3.0),
        ("everything i", 2.5), ("all i do", 3.0), ("for you", 2.0),
        ("never", 2.0), ("always", 2.0), ("ashamed", 3.0),
        ("embarrassed", 2.5), ("let me down", 3.0), ("expected more", 3.0),
        ("thought you", 2.0), ("used to", 2.0), ("what happened to", 2.5),
        ("selfish", 3.0), ("only think", 2.5),
    ],
    PlayerAction.AUTHORITARIAN: [
        ("must", 3.0), ("will", 2.5), ("now", 2.5),
        ("immediately", 3.0), ("right now", 3.0), ("do it", 2.5),
        ("told you", 2.5), ("order", 2.5), ("command", 3.0),
        ("obey", 3.0), ("listen to me", 2.5), ("do what i say", 3.0),
        ("no choice", 2.5), ("don't care", 2.5), ("end of discussion", 3.0),
        ("that's final", 3.0), ("i said", 2.0), ("don't question", 3.0),
        ("because i said so", 3.0), ("my house", 2.5), ("my rules", 2.5),
    ],
}


@dataclass(frozen=True)
class Classification:
    action: PlayerAction
    confidence: float


class ActionClassifier:
    """Scores text against a fixed keyword table plus tone heuristics.

    Classification is pure: the same text always yields the same result.
    Ties go to the action declared first in :class:`PlayerAction`.
    """

    MAX_TEXT_LENGTH = 2000
    CONTROL_CHARS = frozenset(chr(code) for code in range(32) if chr(code) not in "\t\n\r")

    def __init__(self, keywords: KeywordTable | None = None) -> None:
        self._keywords = keywords if keywords is not None else KEYWORDS

    @classmethod
    def sanitize(cls, text: str) -> str:
        """Strip control characters and cap the length of raw player input."""
        if not isinstance(text, str):
            return ""
        cleaned = "".join(c for c in text if c not in cls.CONTROL_CHARS)
        if len(cleaned) > cls.MAX_TEXT_LENGTH:
            cleaned = cleaned[:cls.MAX_TEXT_LENGTH]
        return cleaned.strip()

    def classify(self, text: str) -> Classification:
        if not text or not text.strip():
            return Classification(PlayerAction.LOGICAL, 0.0)
        scores = self.scores(text)
        best = PlayerAction.default()
        for action in PlayerAction:
            if scores[action] > scores[best]:
                best = action
        return Classification(best, scores[best])

    def keyword_scores(self, text: str) -> Dict[PlayerAction, float]:
        lower = text.lower()
        return {
            action: sum(weight for keyword, weight in self._keywords.get(action, []) if keyword in lower)
            for action in PlayerAction
        }

    def scores(self, text: str) -> Dict[PlayerAction, float]:
        """Return the final score for every action, tone modifiers included."""
        scores = self.keyword_scores(text)

        scores[PlayerAction.AUTHORITARIAN] += text.count("!") * 2.0
        questions = text.count("?")
        scores[PlayerAction.LISTEN] += questions * 1.5
        scores[PlayerAction.EMPATHETIC] += questions * 1.0

        word_count = len(text.split(" "))
        if word_count > 15:
            scores[PlayerAction.EMPATHETIC] += 1.0
            scores[PlayerAction.LOGICAL] += 1.0
        elif word_count < 5:
            scores[PlayerAction.AUTHORITARIAN] += 1.5

        # Shouting is judged on the raw text, before lowercasing.
        letters = [c for c in text if c.isalpha()]
        if letters and all(c.isupper() for c in letters):
            scores[PlayerAction.AUTHORITARIAN] += 3.0

        return scores

    def detailed_analysis(self, text: str) -> str:
        """Human-readable breakdown of a classification for debugging."""
        result = self.classify(text)
        lines = [
            f'Text: "{text}"',
            f"Detected Action: {result.action.value}",
            f"Confidence: {result.confidence:.2f}",
            "",
            "Scores:",
        ]
        for action, score in self.keyword_scores(text).items():
            lines.append(f"  {action.value}: {score:.2f}")
        return "\n".join(lines)
