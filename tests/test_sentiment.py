"""Unit tests for sentiment module."""

from unittest import TestCase

from teensim.sentiment import Sentiment, SentimentAnalyzer, SentimentResult


class TestSentimentAnalyzer(TestCase):
    """Tests for SentimentAnalyzer class."""

    def setUp(self):
        self.analyzer = SentimentAnalyzer()

    def test_empty_text(self):
        result = self.analyzer.analyze("   ")
        assert result == SentimentResult()

    def test_positive_professional_answer(self):
        result = self.analyzer.analyze("Yes, I am absolutely confident and passionate about this great team project.")
        assert result.sentiment is Sentiment.POSITIVE
        assert result.word_count == 10
        assert result.confidence == 1.0
        assert result.assertiveness == 0.5
        assert abs(result.professionalism - 2 / 3) < 1e-9
        assert result.sounds_defensive is False
        assert result.contains_humor is False

    def test_negative_answer(self):
        result = self.analyzer.analyze("no this is bad and terrible")
        assert result.sentiment is Sentiment.NEGATIVE

    def test_nervous_answer(self):
        result = self.analyzer.analyze("um uh well i guess maybe like um")
        assert result.nervousness == 1.0
        assert result.sounds_uncertain is True
        assert SentimentAnalyzer.feedback(result) == "You sound nervous. Take a breath!"

    def test_phrases_are_counted(self):
        result = self.analyzer.analyze("it is kind of sort of working, i think, probably")
        # kind of, sort of, i think, probably
        assert result.sounds_uncertain is True

    def test_defensive_and_humor(self):
        defensive = self.analyzer.analyze("I did it but")
        assert defensive.sounds_defensive is True
        assert SentimentAnalyzer.feedback(defensive) == "Getting defensive already?"

        funny = self.analyzer.analyze("haha I will absolutely win")
        assert funny.contains_humor is True
        assert SentimentAnalyzer.feedback(funny) == "Humor? In an interview? Bold move."

    def test_feedback_without_confidence(self):
        result = self.analyzer.analyze("there were some things happening there")
        assert SentimentAnalyzer.feedback(result) == "Where's your confidence?"
