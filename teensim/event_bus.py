"""In-process notifications for conversation and interview lifecycle events.

The engine publishes from both the turn path and the decay ticker thread, so
the subscriber table is guarded by a lock and handlers run on the publishing
thread after the lock is released.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, DefaultDict, List

LOGGER = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventType(Enum):
    CONVERSATION_STARTED = "conversation_started"
    TURN_COMPLETED = "turn_completed"
    EMOTION_CHANGED = "emotion_changed"
    MEMORY_RECALLED = "memory_recalled"
    CONVERSATION_ENDED = "conversation_ended"
    CONVERSATION_ABORTED = "conversation_aborted"
    INTERVIEW_QUESTION = "interview_question"
    INTERVIEW_FINISHED = "interview_finished"


class EventBus:
    """Fan-out of lifecycle events to observers such as UIs and trainers."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[EventType, List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)
        LOGGER.debug("Subscribed %r to %s", handler, event_type.value)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event_type)
            if not handlers or handler not in handlers:
                return
            handlers.remove(handler)
        LOGGER.debug("Unsubscribed %r from %s", handler, event_type.value)

    def subscriber_count(self, event_type: EventType) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))

    def publish(self, event_type: EventType, data: Any = None) -> None:
        """Deliver ``data`` to every handler of ``event_type``.

        A failing handler is logged and skipped; the publisher never sees
        the exception.
        """
        with self._lock:
            handlers = tuple(self._handlers.get(event_type, ()))
        for handler in handlers:
            try:
                handler(data)
            except Exception as exc:
                LOGGER.error("Handler %r failed on %s: %s", handler, event_type.value, exc)

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
        LOGGER.debug("Removed all event subscribers")
