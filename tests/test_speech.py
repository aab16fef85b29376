"""Tests for the background text-to-speech speaker."""

import unittest

from teensim.enums import Emotion
from teensim.presentation import NullSpeaker
from teensim.speech import Pyttsx3Speaker, build_speaker, speech_rate_for


class FakeEngine:
    def __init__(self):
        self.properties = {}
        self.said = []
        self.rates = []

    def setProperty(self, name, value):
        self.properties[name] = value

    def say(self, text):
        self.said.append(text)
        self.rates.append(self.properties.get("rate"))

    def runAndWait(self):
        pass


class TestSpeechRate(unittest.TestCase):
    def test_rates_follow_emotion(self):
        self.assertEqual(speech_rate_for(Emotion.ANGRY, 150), 195)
        self.assertEqual(speech_rate_for(Emotion.SAD, 150), 120)
        self.assertEqual(speech_rate_for(Emotion.HAPPY, 150), 165)
        self.assertEqual(speech_rate_for(Emotion.NEUTRAL, 150), 150)


class TestPyttsx3Speaker(unittest.TestCase):
    def test_speaks_on_worker_thread(self):
        engine = FakeEngine()
        speaker = Pyttsx3Speaker(base_rate=100, volume=2.0, engine_factory=lambda: engine)
        speaker.speak("Fine, whatever.", Emotion.ANGRY)
        speaker.speak("  ")
        speaker.speak("Okay.", Emotion.SAD)
        speaker.wait_until_idle()
        speaker.stop()

        self.assertEqual(engine.said, ["Fine, whatever.", "Okay."])
        self.assertEqual(engine.rates, [130, 80])
        self.assertEqual(engine.properties["volume"], 1.0)

    def test_unavailable_engine_is_disabled(self):
        def broken_factory():
            raise RuntimeError("no audio device")

        speaker = Pyttsx3Speaker(engine_factory=broken_factory)
        speaker.speak("Hello?")
        speaker.wait_until_idle()
        self.assertFalse(speaker.is_available())
        # Further lines are dropped without raising.
        speaker.speak("Anyone?")
        speaker.stop()

    def test_engine_errors_do_not_stop_worker(self):
        engine = FakeEngine()
        calls = []

        def flaky_say(text):
            calls.append(text)
            if len(calls) == 1:
                raise RuntimeError("driver hiccup")

        engine.say = flaky_say
        speaker = Pyttsx3Speaker(engine_factory=lambda: engine)
        speaker.speak("first")
        speaker.speak("second")
        speaker.wait_until_idle()
        speaker.stop()
        self.assertEqual(calls, ["first", "second"])


class TestBuildSpeaker(unittest.TestCase):
    def test_disabled_returns_null_speaker(self):
        self.assertIsInstance(build_speaker(False), NullSpeaker)

    def test_enabled_returns_pyttsx3_speaker(self):
        speaker = build_speaker(True, base_rate=180, volume=0.5)
        self.assertIsInstance(speaker, Pyttsx3Speaker)
        self.assertEqual(speaker.base_rate, 180)
        self.assertEqual(speaker.volume, 0.5)
