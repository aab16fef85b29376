"""Closed enumerations shared by every simulator component.

Member order is significant: observation vectors encode ordinals and the
action classifier breaks ties by declaration order.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)


class _OrderedEnum(Enum):
    """Enum with ordinal access and lenient coercion from names or indices."""

    @property
    def ordinal(self) -> int:
        return list(type(self)).index(self)

    @classmethod
    def default(cls):
        return next(iter(cls))

    @classmethod
    def from_index(cls, index: int):
        members = list(cls)
        if 0 <= index < len(members):
            return members[index]
        raise IndexError(f"{cls.__name__} index out of range: {index}")

    @classmethod
    def lookup(cls, value: Any):
        """Return the member for ``value``, or None when nothing matches.

        Accepts a member, a member name or value (case-insensitive), or an
        integer ordinal.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            members = list(cls)
            return members[value] if 0 <= value < len(members) else None
        if isinstance(value, str):
            key = value.strip().replace(" ", "").replace("_", "").casefold()
            for member in cls:
                if key in (member.name.replace("_", "").casefold(), str(member.value).casefold()):
                    return member
        return None

    @classmethod
    def coerce(cls, value: Any, default: Optional[Any] = None):
        """Return a member for ``value`` or ``default`` when it is unknown."""
        member = cls.lookup(value)
        if member is not None:
            return member
        fallback = default if default is not None else cls.default()
        LOGGER.debug("Unknown %s %r; using %s", cls.__name__, value, fallback.name)
        return fallback


class Scenario(_OrderedEnum):
    GO_TO_SCHOOL = "GoToSchool"
    DO_HOMEWORK = "DoHomework"
    CLEAN_ROOM = "CleanRoom"
    LIMIT_SCREEN_TIME = "LimitScreenTime"
    BEDTIME = "Bedtime"
    COME_TO_FAMILY = "ComeToFamily"


class PlayerAction(_OrderedEnum):
    AUTHORITARIAN = "Authoritarian"
    EMPATHETIC = "Empathetic"
    LOGICAL = "Logical"
    BRIBERY = "Bribery"
    GUILT_TRIP = "GuiltTrip"
    LISTEN = "Listen"
    COMPROMISE = "Compromise"


class Response(_OrderedEnum):
    COMPLIANT = "Compliant"
    NEGOTIATE_CALM = "NegotiateCalm"
    SARCASTIC = "Sarcastic"
    ANGRY = "Angry"
    DISMISSIVE = "Dismissive"
    EMOTIONAL_PLEAD = "EmotionalPlead"
    DEFIANT = "Defiant"
    REASONABLE_REFUSAL = "ReasonableRefusal"


class Emotion(_OrderedEnum):
    HAPPY = "Happy"
    NEUTRAL = "Neutral"
    ANNOYED = "Annoyed"
    ANGRY = "Angry"
    SAD = "Sad"
    DEFIANT = "Defiant"
    ANXIOUS = "Anxious"
    RECEPTIVE = "Receptive"


class MemoryType(_OrderedEnum):
    PROMISE = "Promise"
    BROKEN_PROMISE = "BrokenPromise"
    REPEATED_ACTION = "RepeatedAction"
    POSITIVE_MOMENT = "PositiveMoment"
    BETRAYAL = "Betrayal"
    ACHIEVEMENT = "Achievement"
    PUNISHMENT = "Punishment"
    REWARD = "Reward"
    CONVERSATION = "Conversation"
    EMOTIONAL_OUTBURST = "EmotionalOutburst"


class ConversationPhase(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


RESPECTFUL_ACTIONS = frozenset(
    {PlayerAction.EMPATHETIC, PlayerAction.LISTEN, PlayerAction.COMPROMISE}
)
