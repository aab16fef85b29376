"""Rough voice heuristics (volume, pitch, pauses, pace) over raw audio samples.

These numbers are deliberately coarse: they only need to tell a steady
answer from a shaky one, not to be accurate acoustics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

LOGGER = logging.getLogger(__name__)

PAUSE_THRESHOLD = 0.3
NERVOUS_PAUSE_THRESHOLD = 0.5
SILENCE_ENERGY = 0.001
MIN_PITCH_HZ = 50.0
MAX_PITCH_HZ = 500.0
PITCH_WINDOW = 2048

Samples = Union[Sequence[float], np.ndarray]


@dataclass
class VoiceMetrics:
    average_pitch: float = 0.0
    pitch_variation: float = 0.0
    average_volume: float = 0.0
    volume_variation: float = 0.0
    speech_rate: float = 0.0
    pause_count: int = 0
    average_pause_length: float = 0.0
    total_duration: float = 0.0
    sounds_confident: bool = False
    sounds_nervous: bool = False
    sounds_emotional: bool = False

    def describe(self) -> str:
        if self.sounds_confident:
            return "Confident and steady"
        if self.sounds_nervous:
            return "Nervous and hesitant"
        if self.sounds_emotional:
            return "Emotional and expressive"
        return "Neutral"


class VoiceAnalyzer:
    """Computes :class:`VoiceMetrics` from mono float samples in [-1, 1]."""

    def analyze(self, samples: Samples, sample_rate: int) -> VoiceMetrics:
        metrics = VoiceMetrics()
        audio = np.asarray(samples, dtype=np.float64).ravel()
        if audio.size == 0 or sample_rate <= 0:
            LOGGER.warning("Invalid audio clip; skipping voice analysis")
            return metrics

        metrics.total_duration = audio.size / float(sample_rate)
        self._analyze_volume(audio, metrics)
        self._analyze_pitch(audio, sample_rate, metrics)
        self._analyze_pauses(audio, sample_rate, metrics)
        self._classify(metrics)

        LOGGER.debug(
            "Voice pitch=%.0fHz volume=%.2f rate=%.0fwpm pauses=%d confident=%s nervous=%s",
            metrics.average_pitch,
            metrics.average_volume,
            metrics.speech_rate,
            metrics.pause_count,
            metrics.sounds_confident,
            metrics.sounds_nervous,
        )
        return metrics

    @staticmethod
    def _analyze_volume(audio: np.ndarray, metrics: VoiceMetrics) -> None:
        magnitude = np.abs(audio)
        rms = float(np.sqrt(np.mean(magnitude ** 2)))
        metrics.average_volume = rms
        metrics.volume_variation = float(np.sqrt(np.mean((magnitude - rms) ** 2)))

    def _analyze_pitch(self, audio: np.ndarray, sample_rate: int, metrics: VoiceMetrics) -> None:
        hop = PITCH_WINDOW // 2
        pitches = []
        for start in range(0, audio.size - PITCH_WINDOW, hop):
            window = audio[start:start + PITCH_WINDOW]
            if float(np.sum(window ** 2)) < SILENCE_ENERGY:
                continue
            pitch = self.detect_pitch(window, sample_rate)
            if MIN_PITCH_HZ < pitch < MAX_PITCH_HZ:
                pitches.append(pitch)
        if pitches:
            values = np.asarray(pitches)
            metrics.average_pitch = float(values.mean())
            metrics.pitch_variation = float(values.std())

    @staticmethod
    def detect_pitch(window: np.ndarray, sample_rate: int) -> float:
        """Autocorrelation pitch estimate for one window, in Hz."""
        min_lag = max(1, int(sample_rate / MAX_PITCH_HZ))
        max_lag = min(int(sample_rate / MIN_PITCH_HZ), window.size // 2)
        best_lag = min_lag
        best = 0.0
        for lag in range(min_lag, max_lag):
            correlation = float(np.dot(window[:-lag], window[lag:]))
            if correlation > best:
                best = correlation
                best_lag = lag
        return sample_rate / best_lag

    @staticmethod
    def _analyze_pauses(audio: np.ndarray, sample_rate: int, metrics: VoiceMetrics) -> None:
        window = max(1, int(0.05 * sample_rate))
        pauses = []
        in_pause = False
        pause_start = 0
        speech_frames = 0
        for start in range(0, audio.size, window):
            chunk = audio[start:start + window]
            silent = float(np.mean(chunk ** 2)) < SILENCE_ENERGY
            if silent:
                if not in_pause:
                    in_pause = True
                    pause_start = start
            else:
                if in_pause:
                    length = (start - pause_start) / float(sample_rate)
                    if length >= PAUSE_THRESHOLD:
                        pauses.append(length)
                    in_pause = False
                speech_frames += 1
        metrics.pause_count = len(pauses)
        if pauses:
            metrics.average_pause_length = float(np.mean(pauses))
        speech_time = speech_frames * window / float(sample_rate)
        if speech_time > 0 and metrics.total_duration > 0:
            # Assume roughly half a second per spoken word.
            rate = (speech_time / 0.5) * (60.0 / metrics.total_duration)
            metrics.speech_rate = float(np.clip(rate, 60.0, 240.0))

    @staticmethod
    def _classify(metrics: VoiceMetrics) -> None:
        steady_volume = metrics.volume_variation < 0.1
        good_volume = metrics.average_volume > 0.05
        few_pauses = metrics.pause_count < 3 or metrics.average_pause_length < NERVOUS_PAUSE_THRESHOLD
        steady_pitch = metrics.pitch_variation < 30.0
        good_rate = 100.0 < metrics.speech_rate < 180.0
        metrics.sounds_confident = steady_volume and good_volume and few_pauses and steady_pitch and good_rate

        many_pauses = metrics.pause_count > 5 or metrics.average_pause_length > NERVOUS_PAUSE_THRESHOLD
        unstable_pitch = metrics.pitch_variation > 50.0
        extreme_rate = metrics.speech_rate < 80.0 or metrics.speech_rate > 200.0
        unstable_volume = metrics.volume_variation > 0.15
        metrics.sounds_nervous = many_pauses or unstable_pitch or extreme_rate or unstable_volume

        metrics.sounds_emotional = metrics.pitch_variation > 40.0 and metrics.volume_variation > 0.12
