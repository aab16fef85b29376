"""Non-blocking text-to-speech for the teen and the interviewer."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Optional, Tuple

from teensim.constants import DEFAULT_SPEECH_RATE, DEFAULT_SPEECH_VOLUME
from teensim.enums import Emotion
from teensim.presentation import NullSpeaker, Speaker

LOGGER = logging.getLogger(__name__)

_RATE_MULTIPLIERS = {
    Emotion.ANGRY: 1.3,
    Emotion.DEFIANT: 1.3,
    Emotion.SAD: 0.8,
    Emotion.ANXIOUS: 0.8,
    Emotion.HAPPY: 1.1,
    Emotion.RECEPTIVE: 1.1,
}


def speech_rate_for(emotion: Emotion, base_rate: int = DEFAULT_SPEECH_RATE) -> int:
    """Words per minute for an emotion: faster when angry, slower when sad."""
    return int(base_rate * _RATE_MULTIPLIERS.get(emotion, 1.0))


def _default_engine_factory() -> Any:
    import pyttsx3

    return pyttsx3.init()


class Pyttsx3Speaker(Speaker):
    """Speaks queued lines on a background thread using ``pyttsx3``.

    ``speak`` only enqueues; the engine is created and driven entirely on the
    worker thread, so callers never wait for audio.
    """

    def __init__(
        self,
        base_rate: int = DEFAULT_SPEECH_RATE,
        volume: float = DEFAULT_SPEECH_VOLUME,
        engine_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.base_rate = base_rate
        self.volume = max(0.0, min(1.0, volume))
        self._engine_factory = engine_factory or _default_engine_factory
        self._queue: "queue.Queue[Optional[Tuple[str, Emotion]]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._available = True
        self._lock = threading.Lock()

    def speak(self, text: str, emotion: Emotion = Emotion.NEUTRAL) -> None:
        text = (text or "").strip()
        if not text or not self._available:
            return
        self._queue.put((text, emotion))
        self._ensure_worker()

    def stop(self) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is not None:
            self._queue.put(None)
            thread.join(timeout=2.0)

    def wait_until_idle(self) -> None:
        """Block until every queued line has been handled."""
        self._queue.join()

    def is_available(self) -> bool:
        return self._available

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self._run, name="teensim-speech", daemon=True)
            self._thread.start()

    def _run(self) -> None:
        try:
            engine = self._engine_factory()
            engine.setProperty("volume", self.volume)
        except Exception as exc:
            LOGGER.error("Text-to-speech unavailable: %s", exc)
            self._available = False
            self._drain()
            return

        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                text, emotion = item
                engine.setProperty("rate", speech_rate_for(emotion, self.base_rate))
                engine.say(text)
                engine.runAndWait()
            except Exception as exc:
                LOGGER.error("Text-to-speech error: %s", exc)
            finally:
                self._queue.task_done()

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
            self._queue.task_done()


def build_speaker(enabled: bool, base_rate: int = DEFAULT_SPEECH_RATE, volume: float = DEFAULT_SPEECH_VOLUME) -> Speaker:
    if not enabled:
        return NullSpeaker()
    return Pyttsx3Speaker(base_rate=base_rate, volume=volume)
