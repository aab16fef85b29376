"""'Job Interview From Hell' mini-game: five absurd questions, three strikes.

The interviewer is a small state machine. Each answer is scored by the
sentiment analyzer (and the voice analyzer when audio is available),
validated against the question's rule, and moves the interviewer's mood.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from teensim.constants import DEFAULT_MAX_STRIKES
from teensim.enums import Emotion
from teensim.event_bus import EventBus, EventType
from teensim.presentation import NullSpeaker, Speaker
from teensim.sentiment import SentimentAnalyzer, SentimentResult
from teensim.voice_analysis import VoiceMetrics

LOGGER = logging.getLogger(__name__)

OPENING_LINE = "Welcome to your FINAL interview. Let's see if you can handle this..."
PASS_LINE = "You know what? Against all odds... you're HIRED. Congratulations, I guess."


class InterviewerMood(Enum):
    PROFESSIONAL = "Professional"
    CONFUSED = "Confused"
    ANNOYED = "Annoyed"
    AGGRESSIVE = "Aggressive"
    AMUSED = "Amused"
    UNHINGED = "Unhinged"


class ValidationType(Enum):
    FORBIDDEN_WORDS = "ForbiddenWords"
    MUST_BE_EMOTIONAL = "MustBeEmotional"
    MUST_BE_CONFIDENT = "MustBeConfident"
    MUST_BE_CREATIVE = "MustBeCreative"
    VOICE_ACTING = "VoiceActing"


class InterviewStatus(Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    PASSED = "Passed"
    FAILED = "Failed"


MOOD_PREFIXES = {
    InterviewerMood.CONFUSED: "Wait, what? Uh... ",
    InterviewerMood.ANNOYED: "*sigh* Fine. ",
    InterviewerMood.AGGRESSIVE: "LISTEN. ",
    InterviewerMood.AMUSED: "*chuckles* Okay, okay. ",
    InterviewerMood.UNHINGED: "HAHAHA! Wait, serious now. ",
}

MOOD_EMOTIONS = {
    InterviewerMood.AGGRESSIVE: Emotion.ANGRY,
    InterviewerMood.ANNOYED: Emotion.ANNOYED,
    InterviewerMood.AMUSED: Emotion.HAPPY,
}

FAIL_LINES = {
    InterviewerMood.AGGRESSIVE: "GET OUT. You're REJECTED.",
    InterviewerMood.UNHINGED: "I can't believe it. You actually failed. SECURITY!",
}
DEFAULT_FAIL_LINE = "I'm sorry, but this isn't working out. Interview TERMINATED."

PASSED_REPLIES = (
    "Hmm. Not terrible.",
    "I'll allow it.",
    "Interesting. Moving on.",
    "That'll do... I guess.",
)
FAILED_REPLIES = (
    "What was that?!",
    "Are you even trying?",
    "That's strike {strikes}.",
    "Unbelievable.",
)


@dataclass(frozen=True)
class Question:
    number: int
    text: str
    validation: ValidationType
    forbidden_words: Tuple[str, ...] = ()
    hint: str = ""


DEFAULT_QUESTIONS: Tuple[Question, ...] = (
    Question(
        1,
        "Tell me about yourself... but do it as if you're hiding a terrible secret.",
        ValidationType.VOICE_ACTING,
        hint="Sound mysterious and guilty!",
    ),
    Question(
        2,
        "Describe cloud computing... WITHOUT using the words: cloud, data, server, internet, or compute.",
        ValidationType.FORBIDDEN_WORDS,
        forbidden_words=("cloud", "data", "server", "internet", "compute", "computing"),
        hint="Get creative with synonyms!",
    ),
    Question(
        3,
        "You paused for 0.7 seconds. Are you lying, or are you simply nervous? Explain.",
        ValidationType.MUST_BE_CONFIDENT,
        hint="Be confident, no hesitation!",
    ),
    Question(
        4,
        "For this question, answer as a MEDIEVAL WARRIOR trying to get a software job. Why should we hire you?",
        ValidationType.VOICE_ACTING,
        hint="ACT like a warrior! Deep voice, passion!",
    ),
    Question(
        5,
        "Final question. Convince me why YOU deserve this job... using PURE EMOTION. No smart words. Just feeling.",
        ValidationType.MUST_BE_EMOTIONAL,
        hint="Show passion and intensity!",
    ),
)

BONUS_QUESTIONS: Tuple[Question, ...] = (
    Question(99, "If you were a sandwich, what salary would you expect?", ValidationType.MUST_BE_CREATIVE),
    Question(99, "Explain your biggest weakness... but make it FUNNY.", ValidationType.MUST_BE_CREATIVE),
    Question(99, "Wait, what position did you even apply for? Tell me again.", ValidationType.MUST_BE_CONFIDENT),
    Question(99, "Sing your resume. I'm serious.", ValidationType.VOICE_ACTING),
)


class QuestionBank:
    """Ordered list of interview questions."""

    def __init__(self, questions: Optional[List[Question]] = None) -> None:
        self._questions: List[Question] = list(questions or DEFAULT_QUESTIONS)

    def __len__(self) -> int:
        return len(self._questions)

    def get(self, index: int) -> Optional[Question]:
        if 0 <= index < len(self._questions):
            return self._questions[index]
        LOGGER.error("Invalid question index: %s", index)
        return None

    def add_bonus(self, rng: random.Random) -> Question:
        """Swap one of the middle questions for a random bonus question."""
        if len(self._questions) < 3:
            raise ValueError("Need at least three questions to insert a bonus")
        index = rng.randrange(1, len(self._questions) - 1)
        bonus = rng.choice(BONUS_QUESTIONS)
        self._questions[index] = bonus
        LOGGER.debug("Replaced question %d with bonus: %s", index + 1, bonus.text)
        return bonus


@dataclass
class AnswerResult:
    passed: bool
    feedback: str
    reply: str
    mood: InterviewerMood
    strikes: int
    sentiment: SentimentResult
    status: InterviewStatus
    next_question: Optional[str] = None
    voice_description: str = "Text input"
    lines: List[str] = field(default_factory=list)


class InterviewSession:
    """Runs one interview from the opening line to a pass or fail."""

    def __init__(
        self,
        questions: Optional[QuestionBank] = None,
        sentiment: Optional[SentimentAnalyzer] = None,
        rng: Optional[random.Random] = None,
        max_strikes: int = DEFAULT_MAX_STRIKES,
        speaker: Optional[Speaker] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.questions = questions or QuestionBank()
        self.sentiment = sentiment or SentimentAnalyzer()
        self._rng = rng or random.Random()
        self.max_strikes = max_strikes
        self.speaker = speaker or NullSpeaker()
        self.event_bus = event_bus
        self.mood = InterviewerMood.PROFESSIONAL
        self.index = 0
        self.strikes = 0
        self.status = InterviewStatus.NOT_STARTED

    @property
    def finished(self) -> bool:
        return self.status in (InterviewStatus.PASSED, InterviewStatus.FAILED)

    def start(self) -> List[str]:
        """Reset and return the opening line followed by the first question."""
        self.index = 0
        self.strikes = 0
        self.mood = InterviewerMood.PROFESSIONAL
        self.status = InterviewStatus.IN_PROGRESS
        lines = [self._say(OPENING_LINE)]
        lines.append(self._ask())
        return lines

    def current_question(self) -> Optional[Question]:
        if self.status is not InterviewStatus.IN_PROGRESS:
            return None
        return self.questions.get(self.index)

    def question_text(self, question: Optional[Question] = None) -> str:
        question = question or self.current_question()
        if question is None:
            return ""
        return MOOD_PREFIXES.get(self.mood, "") + question.text

    def answer(self, transcript: str, voice: Optional[VoiceMetrics] = None) -> AnswerResult:
        """Judge one answer; ``voice`` is None for typed answers."""
        if self.status is not InterviewStatus.IN_PROGRESS:
            raise RuntimeError("Interview is not in progress")
        question = self.current_question()
        if question is None:
            raise RuntimeError("No question to answer")

        transcript = transcript or ""
        sentiment = self.sentiment.analyze(transcript)
        passed, feedback = self.validate(question, transcript, sentiment, voice)
        if not passed:
            self.strikes += 1
        self._update_mood(passed, sentiment)

        lines: List[str] = []
        reply = self._fallback_reply(passed)
        lines.append(self._say(reply))

        next_question = None
        if self.strikes >= self.max_strikes:
            self.status = InterviewStatus.FAILED
            lines.append(self._say(FAIL_LINES.get(self.mood, DEFAULT_FAIL_LINE)))
            self._publish_finished()
        elif passed:
            self.index += 1
            if self.index >= len(self.questions):
                self.status = InterviewStatus.PASSED
                lines.append(self._say(PASS_LINE))
                self._publish_finished()
            else:
                next_question = self._ask()
                lines.append(next_question)

        LOGGER.info(
            "Interview answer %s (question %d, strikes %d/%d, mood %s)",
            "passed" if passed else "failed",
            question.number,
            self.strikes,
            self.max_strikes,
            self.mood.value,
        )
        return AnswerResult(
            passed=passed,
            feedback=feedback,
            reply=reply,
            mood=self.mood,
            strikes=self.strikes,
            sentiment=sentiment,
            status=self.status,
            next_question=next_question,
            voice_description=voice.describe() if voice is not None else "Text input",
            lines=lines,
        )

    @staticmethod
    def validate(
        question: Question,
        transcript: str,
        sentiment: SentimentResult,
        voice: Optional[VoiceMetrics] = None,
    ) -> Tuple[bool, str]:
        """Apply the question's rule; returns ``(passed, feedback)``."""
        lower = transcript.lower()
        kind = question.validation
        if kind is ValidationType.FORBIDDEN_WORDS:
            for word in question.forbidden_words:
                if word.lower() in lower:
                    return False, f"You said '{word}'! FORBIDDEN!"
        elif kind is ValidationType.MUST_BE_EMOTIONAL:
            if voice is not None:
                if not voice.sounds_emotional and sentiment.assertiveness < 0.5:
                    return False, "That was pathetic. Where's the emotion?"
            elif sentiment.assertiveness < 0.5 and not sentiment.contains_humor:
                return False, "That was pathetic. Where's the emotion?"
        elif kind is ValidationType.MUST_BE_CONFIDENT:
            if voice is not None:
                if voice.sounds_nervous or sentiment.sounds_uncertain:
                    return False, "You sound nervous. Not convinced."
            elif sentiment.sounds_uncertain:
                return False, "You sound uncertain. Not convinced."
        elif kind is ValidationType.MUST_BE_CREATIVE:
            if sentiment.word_count < 10:
                return False, "Too short. Be more creative!"
        elif kind is ValidationType.VOICE_ACTING:
            if voice is not None:
                if voice.pitch_variation < 30.0 and not voice.sounds_emotional:
                    return False, "That's not acting. DO IT AGAIN."
            elif sentiment.word_count < 15:
                return False, "That's not acting. Be more expressive!"
        return True, "Acceptable... for now."

    def speech_emotion(self) -> Emotion:
        return MOOD_EMOTIONS.get(self.mood, Emotion.NEUTRAL)

    def _update_mood(self, passed: bool, sentiment: SentimentResult) -> None:
        if not passed:
            if self.mood is InterviewerMood.ANNOYED:
                self.mood = InterviewerMood.AGGRESSIVE
            elif self.mood is not InterviewerMood.AGGRESSIVE:
                self.mood = InterviewerMood.ANNOYED
            return
        roll = self._rng.random()
        if sentiment.contains_humor:
            self.mood = InterviewerMood.AMUSED
        elif roll < 0.2:
            self.mood = InterviewerMood.UNHINGED
        elif roll < 0.4:
            self.mood = InterviewerMood.CONFUSED
        else:
            self.mood = InterviewerMood.PROFESSIONAL

    def _fallback_reply(self, passed: bool) -> str:
        if passed:
            return self._rng.choice(PASSED_REPLIES)
        return self._rng.choice(FAILED_REPLIES).format(strikes=self.strikes)

    def _ask(self) -> str:
        text = self._say(self.question_text())
        if self.event_bus is not None:
            self.event_bus.publish(
                EventType.INTERVIEW_QUESTION,
                {"index": self.index, "text": text, "mood": self.mood.value},
            )
        return text

    def _say(self, text: str) -> str:
        self.speaker.speak(text, self.speech_emotion())
        return text

    def _publish_finished(self) -> None:
        LOGGER.info("Interview %s with %d strikes", self.status.value.lower(), self.strikes)
        if self.event_bus is not None:
            self.event_bus.publish(
                EventType.INTERVIEW_FINISHED,
                {"status": self.status.value, "strikes": self.strikes, "mood": self.mood.value},
            )
