"""Structured logging with JSON-formatted context for conversation analysis."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Dict, Optional


class StructuredLogger:
    """Logger that emits JSON-formatted structured logs for later analysis."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_conversation_started(
        self,
        scenario: str,
        state: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the start of a conversation."""
        event: Dict[str, Any] = {
            "event": "conversation_started",
            "scenario": scenario,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if state:
            event["state"] = state

        self.logger.info(json.dumps(event, ensure_ascii=False))

    def log_turn(
        self,
        turn: int,
        action: str,
        response: str,
        emotion: str,
        duration: float,
        reward: Optional[float] = None,
    ) -> None:
        """Log one completed player/teen exchange with timing."""
        event: Dict[str, Any] = {
            "event": "turn_completed",
            "turn": turn,
            "action": action,
            "response": response,
            "emotion": emotion,
            "duration_ms": round(duration * 1000, 2),
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if reward is not None:
            event["reward"] = round(reward, 4)

        self.logger.info(json.dumps(event, ensure_ascii=False))

    def log_memory_recalled(self, memory_id: str, memory_type: str, times_recalled: int) -> None:
        event = {
            "event": "memory_recalled",
            "memory_id": memory_id,
            "memory_type": memory_type,
            "times_recalled": times_recalled,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        self.logger.debug(json.dumps(event, ensure_ascii=False))

    def log_conversation_ended(
        self,
        scenario: str,
        final_response: Optional[str],
        turns: int,
        reason: str,
    ) -> None:
        """Log the end of a conversation and why it ended."""
        event = {
            "event": "conversation_ended",
            "scenario": scenario,
            "final_response": final_response,
            "turns": turns,
            "reason": reason,
            "timestamp": datetime.now(UTC).isoformat(),
        }

        self.logger.info(json.dumps(event, ensure_ascii=False))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log an error with context."""
        event = {
            "event": "error",
            "error_type": error_type,
            "error_message": error_message,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        if context:
            event["context"] = context

        self.logger.error(json.dumps(event, ensure_ascii=False))
