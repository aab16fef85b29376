"""Performance and outcome metrics for the simulator."""

from collections import Counter, deque
from typing import Any, Deque, Dict


class PerformanceMetrics:
    """Turn timing and conversation outcome counters."""

    def __init__(self) -> None:
        self.turn_times: Deque[float] = deque(maxlen=100)
        self.tick_times: Deque[float] = deque(maxlen=100)
        self.conversations_started: int = 0
        self.outcomes: Counter = Counter()
        self.errors: int = 0

    def record_turn(self, duration: float) -> None:
        """Record the duration of one conversation turn."""
        self.turn_times.append(duration)

    def record_tick(self, duration: float) -> None:
        """Record the duration of one decay tick."""
        self.tick_times.append(duration)

    def record_conversation_started(self) -> None:
        self.conversations_started += 1

    def record_outcome(self, outcome: str) -> None:
        """Record how a conversation ended (e.g. a final response name)."""
        self.outcomes[outcome] += 1

    def record_error(self) -> None:
        """Record an error."""
        self.errors += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get performance statistics."""
        return {
            "avg_turn_time_ms": (
                sum(self.turn_times) / len(self.turn_times) * 1000
                if self.turn_times else 0
            ),
            "avg_tick_time_ms": (
                sum(self.tick_times) / len(self.tick_times) * 1000
                if self.tick_times else 0
            ),
            "turn_count": len(self.turn_times),
            "conversations_started": self.conversations_started,
            "outcomes": dict(self.outcomes),
            "total_errors": self.errors,
        }
