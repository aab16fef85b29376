"""Unit tests for action_classifier module."""

from unittest import TestCase

from teensim.action_classifier import ActionClassifier, Classification
from teensim.enums import PlayerAction


class TestActionClassifier(TestCase):
    """Tests for ActionClassifier class."""

    def setUp(self):
        self.classifier = ActionClassifier()

    def test_empty_input_defaults_to_logical(self):
        assert self.classifier.classify("") == Classification(PlayerAction.LOGICAL, 0.0)
        assert self.classifier.classify("   \n") == Classification(PlayerAction.LOGICAL, 0.0)

    def test_listen_with_question(self):
        result = self.classifier.classify("Tell me what's wrong?")
        assert result.action is PlayerAction.LISTEN
        # tell me 3 + what's wrong 3 + one question mark 1.5
        assert result.confidence == 7.5

    def test_shouting_adds_authoritarian_weight(self):
        quiet = self.classifier.classify("do it now!")
        loud = self.classifier.classify("DO IT NOW!")
        assert quiet == Classification(PlayerAction.AUTHORITARIAN, 8.5)
        assert loud == Classification(PlayerAction.AUTHORITARIAN, 11.5)

    def test_ties_go_to_first_declared_action(self):
        # "deal" scores 2.0 for both Bribery and Compromise.
        result = self.classifier.classify("deal")
        assert result.action is PlayerAction.BRIBERY
        assert result.confidence == 2.0

    def test_long_messages_favour_empathy_and_logic(self):
        text = "I understand that this feels unfair and I really want us to find a way through this week together"
        scores = self.classifier.scores(text)
        keyword_scores = self.classifier.keyword_scores(text)
        assert scores[PlayerAction.EMPATHETIC] == keyword_scores[PlayerAction.EMPATHETIC] + 1.0
        assert scores[PlayerAction.LOGICAL] == keyword_scores[PlayerAction.LOGICAL] + 1.0

    def test_classification_is_pure(self):
        text = "How about we compromise and meet halfway?"
        first = self.classifier.classify(text)
        for _ in range(5):
            assert self.classifier.classify(text) == first
        assert first.action is PlayerAction.COMPROMISE

    def test_custom_keyword_table(self):
        classifier = ActionClassifier({PlayerAction.BRIBERY: [("pizza", 5.0)]})
        result = classifier.classify("we could get pizza later tonight okay")
        assert result.action is PlayerAction.BRIBERY
        assert result.confidence == 5.0

    def test_sanitize(self):
        assert ActionClassifier.sanitize("\x00hi\x07 there ") == "hi there"
        assert len(ActionClassifier.sanitize("a" * 5000)) == ActionClassifier.MAX_TEXT_LENGTH
        assert ActionClassifier.sanitize(None) == ""  # type: ignore[arg-type]

    def test_detailed_analysis(self):
        report = self.classifier.detailed_analysis("Tell me what's wrong?")
        assert "Detected Action: Listen" in report
        assert "Confidence: 7.50" in report
        assert "  Listen: 6.00" in report
