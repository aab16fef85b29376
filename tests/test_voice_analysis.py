"""Tests for voice heuristics."""

import numpy as np
import pytest

from teensim.voice_analysis import VoiceAnalyzer, VoiceMetrics

SAMPLE_RATE = 16000


def _tone(seconds, frequency=200.0, amplitude=0.5):
    t = np.arange(int(seconds * SAMPLE_RATE)) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * frequency * t)


def test_empty_clip_returns_defaults():
    assert VoiceAnalyzer().analyze([], SAMPLE_RATE) == VoiceMetrics()
    assert VoiceAnalyzer().analyze(_tone(0.1), 0) == VoiceMetrics()


def test_pitch_and_volume_of_steady_tone():
    metrics = VoiceAnalyzer().analyze(_tone(2.0), SAMPLE_RATE)
    assert metrics.total_duration == pytest.approx(2.0)
    assert metrics.average_pitch == pytest.approx(200.0, abs=5.0)
    assert metrics.pitch_variation < 5.0
    assert metrics.average_volume == pytest.approx(0.5 / np.sqrt(2), rel=1e-3)
    assert metrics.pause_count == 0


def test_detect_pitch():
    window = _tone(0.128, frequency=250.0)
    assert VoiceAnalyzer.detect_pitch(window, SAMPLE_RATE) == pytest.approx(250.0, abs=5.0)


def test_pauses_are_counted():
    clip = np.concatenate([_tone(1.0), np.zeros(SAMPLE_RATE), _tone(1.0)])
    metrics = VoiceAnalyzer().analyze(clip, SAMPLE_RATE)
    assert metrics.pause_count == 1
    assert metrics.average_pause_length == pytest.approx(1.0)
    assert 60.0 <= metrics.speech_rate <= 240.0


def test_short_gaps_are_not_pauses():
    clip = np.concatenate([_tone(1.0), np.zeros(int(0.1 * SAMPLE_RATE)), _tone(1.0)])
    assert VoiceAnalyzer().analyze(clip, SAMPLE_RATE).pause_count == 0


def test_describe():
    assert VoiceMetrics(sounds_confident=True, sounds_nervous=True).describe() == "Confident and steady"
    assert VoiceMetrics(sounds_nervous=True).describe() == "Nervous and hesitant"
    assert VoiceMetrics(sounds_emotional=True).describe() == "Emotional and expressive"
    assert VoiceMetrics().describe() == "Neutral"
