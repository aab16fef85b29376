"""Tests for the job interview mini-game."""

import random
import unittest

import pytest

from teensim.enums import Emotion
from teensim.event_bus import EventBus, EventType
from teensim.interview import (
    BONUS_QUESTIONS,
    DEFAULT_QUESTIONS,
    OPENING_LINE,
    PASS_LINE,
    InterviewerMood,
    InterviewSession,
    InterviewStatus,
    Question,
    QuestionBank,
    ValidationType,
)
from teensim.sentiment import SentimentAnalyzer
from teensim.voice_analysis import VoiceMetrics
from tests.conftest import RecordingSpeaker

PASSING_ANSWERS = [
    "I grew up on a quiet farm where nobody ever asked what grew behind the old locked greenhouse door",
    "Renting someone else's machines far away and paying by the hour",
    "I am certain. I was focused.",
    "Hear me, lords of code, for I have slain dragons of bugs and shall defend your castle servers with honor",
    "I want this job so much!",
]


def _validate(number, transcript, voice=None):
    question = DEFAULT_QUESTIONS[number - 1]
    sentiment = SentimentAnalyzer().analyze(transcript)
    return InterviewSession.validate(question, transcript, sentiment, voice)


class TestValidation(unittest.TestCase):
    def test_forbidden_words(self):
        assert _validate(2, "It's like a cloud of other computers") == (False, "You said 'cloud'! FORBIDDEN!")
        assert _validate(2, "Renting machines far away")[0] is True

    def test_creative_needs_length(self):
        question = BONUS_QUESTIONS[0]
        sentiment = SentimentAnalyzer().analyze("a tuna salary")
        passed, feedback = InterviewSession.validate(question, "a tuna salary", sentiment)
        assert passed is False
        assert feedback == "Too short. Be more creative!"

    def test_voice_acting(self):
        assert _validate(1, "I am fine") == (False, "That's not acting. Be more expressive!")
        assert _validate(1, "I am fine", VoiceMetrics(pitch_variation=10.0)) == (
            False,
            "That's not acting. DO IT AGAIN.",
        )
        assert _validate(1, "I am fine", VoiceMetrics(pitch_variation=45.0))[0] is True
        assert _validate(1, "I am fine", VoiceMetrics(sounds_emotional=True))[0] is True

    def test_confidence(self):
        assert _validate(3, "maybe perhaps possibly") == (False, "You sound uncertain. Not convinced.")
        assert _validate(3, "I was focused", VoiceMetrics(sounds_nervous=True)) == (
            False,
            "You sound nervous. Not convinced.",
        )
        assert _validate(3, "I was focused", VoiceMetrics()) == (True, "Acceptable... for now.")

    def test_emotion(self):
        assert _validate(5, "ok fine") == (False, "That was pathetic. Where's the emotion?")
        assert _validate(5, "I will absolutely crush it")[0] is True
        assert _validate(5, "ok fine", VoiceMetrics(sounds_emotional=True))[0] is True


class TestQuestionBank(unittest.TestCase):
    def test_defaults(self):
        bank = QuestionBank()
        assert len(bank) == 5
        assert bank.get(0).number == 1
        assert bank.get(1).validation is ValidationType.FORBIDDEN_WORDS
        assert bank.get(5) is None
        assert bank.get(-1) is None

    def test_bonus_replaces_middle_question(self):
        bank = QuestionBank()
        bonus = bank.add_bonus(random.Random(0))
        assert bonus in BONUS_QUESTIONS
        assert len(bank) == 5
        assert bank.get(0) == DEFAULT_QUESTIONS[0]
        assert bank.get(4) == DEFAULT_QUESTIONS[4]
        assert [bank.get(i) for i in range(1, 4)].count(bonus) == 1

    def test_bonus_needs_three_questions(self):
        bank = QuestionBank([
            Question(1, "one", ValidationType.MUST_BE_CREATIVE),
            Question(2, "two", ValidationType.MUST_BE_CREATIVE),
        ])
        with pytest.raises(ValueError):
            bank.add_bonus(random.Random(0))


class TestInterviewSession(unittest.TestCase):
    def setUp(self):
        self.speaker = RecordingSpeaker()
        self.bus = EventBus()
        self.session = InterviewSession(rng=random.Random(7), speaker=self.speaker, event_bus=self.bus)

    def test_answer_before_start_raises(self):
        with pytest.raises(RuntimeError):
            self.session.answer("hello")
        assert self.session.current_question() is None
        assert self.session.question_text() == ""

    def test_start(self):
        asked = []
        self.bus.subscribe(EventType.INTERVIEW_QUESTION, asked.append)
        lines = self.session.start()
        assert lines == [OPENING_LINE, DEFAULT_QUESTIONS[0].text]
        assert self.session.status is InterviewStatus.IN_PROGRESS
        assert asked == [{"index": 0, "text": DEFAULT_QUESTIONS[0].text, "mood": "Professional"}]
        assert self.speaker.lines[0] == (OPENING_LINE, Emotion.NEUTRAL)

    def test_three_strikes_fail(self):
        finished = []
        self.bus.subscribe(EventType.INTERVIEW_FINISHED, finished.append)
        self.session.start()

        first = self.session.answer("no")
        assert first.passed is False
        assert first.strikes == 1
        assert first.mood is InterviewerMood.ANNOYED
        assert first.status is InterviewStatus.IN_PROGRESS
        assert first.voice_description == "Text input"
        assert self.session.question_text().startswith("*sigh* Fine. ")
        assert self.speaker.lines[-1][1] is Emotion.ANNOYED

        second = self.session.answer("no")
        assert second.mood is InterviewerMood.AGGRESSIVE

        third = self.session.answer("no")
        assert third.status is InterviewStatus.FAILED
        assert third.strikes == 3
        assert third.lines[-1] == "GET OUT. You're REJECTED."
        assert self.session.finished
        assert self.session.index == 0
        assert finished == [{"status": "Failed", "strikes": 3, "mood": "Aggressive"}]

        with pytest.raises(RuntimeError):
            self.session.answer("let me try again")

    def test_full_pass(self):
        self.session.start()
        results = [self.session.answer(text) for text in PASSING_ANSWERS]

        assert all(result.passed for result in results)
        assert [result.status for result in results[:-1]] == [InterviewStatus.IN_PROGRESS] * 4
        assert results[-1].status is InterviewStatus.PASSED
        assert results[-1].lines[-1] == PASS_LINE
        assert results[-1].mood is InterviewerMood.AMUSED
        assert results[0].next_question.endswith(DEFAULT_QUESTIONS[1].text)
        assert self.session.strikes == 0
        assert self.session.current_question() is None

    def test_failure_keeps_same_question(self):
        self.session.start()
        result = self.session.answer("It runs on the cloud")
        assert result.passed is False
        assert result.feedback == "That's not acting. Be more expressive!"
        assert result.next_question is None
        assert self.session.current_question() == DEFAULT_QUESTIONS[0]

    def test_voice_description_reported(self):
        self.session.start()
        result = self.session.answer("I am fine", VoiceMetrics(sounds_emotional=True))
        assert result.passed is True
        assert result.voice_description == "Emotional and expressive"

    def test_custom_strike_limit(self):
        session = InterviewSession(rng=random.Random(1), max_strikes=1)
        session.start()
        result = session.answer("no")
        assert result.status is InterviewStatus.FAILED
        assert result.lines[-1] == "I'm sorry, but this isn't working out. Interview TERMINATED."
