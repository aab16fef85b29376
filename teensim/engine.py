"""Turn-based conversation state machine between the player and the teen."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from teensim.action_classifier import ActionClassifier
from teensim.config import SimulationConfig
from teensim.dialogue import DialogueDatabase
from teensim.emotional_state import EmotionalState
from teensim.enums import ConversationPhase, Emotion, PlayerAction, Response, Scenario
from teensim.event_bus import EventBus, EventType
from teensim.memory_store import Memory, MemoryStore
from teensim.metrics import PerformanceMetrics
from teensim.policy import PolicyContext, ResponsePolicy, build_policy, is_terminal
from teensim.presentation import DialogueProvider, NullSpeaker, NullUIEventSink, Speaker, UIEvent, UIEventSink
from teensim.reward import RewardModel
from teensim.structured_logger import StructuredLogger

LOGGER = logging.getLogger(__name__)
STRUCTURED_LOGGER = StructuredLogger(__name__)


@dataclass(frozen=True)
class ActionEffect:
    relationship: float
    mood: float
    respect: float
    respectful: bool


ACTION_EFFECTS: Dict[PlayerAction, ActionEffect] = {
    PlayerAction.AUTHORITARIAN: ActionEffect(-5.0, -10.0, -8.0, False),
    PlayerAction.EMPATHETIC: ActionEffect(8.0, 10.0, 10.0, True),
    PlayerAction.LOGICAL: ActionEffect(2.0, 3.0, 5.0, True),
    PlayerAction.BRIBERY: ActionEffect(-3.0, 5.0, -5.0, False),
    PlayerAction.GUILT_TRIP: ActionEffect(-8.0, -8.0, -10.0, False),
    PlayerAction.LISTEN: ActionEffect(10.0, 8.0, 12.0, True),
    PlayerAction.COMPROMISE: ActionEffect(7.0, 10.0, 10.0, True),
}

# Unknown input is reported as a plain, reasoned request but moves nothing.
DEFAULT_ACTION = PlayerAction.LOGICAL
NEUTRAL_EFFECT = ActionEffect(0.0, 0.0, 0.0, True)

OUTCOME_MESSAGES: Dict[Response, str] = {
    Response.ANGRY: "The teen stormed off angry. The relationship suffered.",
    Response.DEFIANT: "The teen refused and is being defiant. This didn't go well.",
}


@dataclass
class TurnRecord:
    turn: int
    scenario: Scenario
    action: PlayerAction
    response: Response
    emotion: Emotion
    player_text: str
    teen_text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class Opening:
    scenario: Scenario
    text: str
    emotion: Emotion
    memory_reference: Optional[str] = None


@dataclass(frozen=True)
class TurnOutcome:
    turn: int
    action: PlayerAction
    response: Response
    emotion: Emotion
    player_text: str
    text: str
    memory_reference: Optional[str]
    ended: bool
    end_reason: Optional[str]
    reward: Optional[float]
    state: Dict[str, Any]
    confidence: Optional[float] = None


class ConversationEngine:
    """Owns one character's conversation and serializes turns with decay ticks.

    Every public operation takes the same re-entrant lock, so a host may call
    :meth:`tick` from a scheduler thread while turns arrive on another.
    Speech and UI delivery are fire-and-forget.
    """

    def __init__(
        self,
        state: Optional[EmotionalState] = None,
        memory: Optional[MemoryStore] = None,
        policy: Optional[ResponsePolicy] = None,
        classifier: Optional[ActionClassifier] = None,
        config: Optional[SimulationConfig] = None,
        dialogue: Optional[DialogueProvider] = None,
        speaker: Optional[Speaker] = None,
        ui_sink: Optional[UIEventSink] = None,
        event_bus: Optional[EventBus] = None,
        reward_model: Optional[RewardModel] = None,
        metrics: Optional[PerformanceMetrics] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.state = state or EmotionalState()
        self.memory = memory or MemoryStore(self.config.memory)
        self.policy = policy or build_policy(self.config)
        self.classifier = classifier or ActionClassifier()
        self._rng = rng or random.Random()
        self.dialogue = dialogue or DialogueDatabase(rng=self._rng)
        self.speaker = speaker or NullSpeaker()
        self.ui_sink = ui_sink or NullUIEventSink()
        self.event_bus = event_bus or EventBus()
        if reward_model is None and self.config.training_mode:
            reward_model = RewardModel(self.config.reward)
        self.reward_model = reward_model
        self.metrics = metrics or PerformanceMetrics()

        self._lock = threading.RLock()
        self._phase = ConversationPhase.IDLE
        self._scenario = Scenario.GO_TO_SCHOOL
        self._turn = 0
        self._log: List[TurnRecord] = []
        self._transcript: List[str] = []
        self._last_action: Optional[PlayerAction] = None
        self._final_response: Optional[Response] = None
        self._end_reason: Optional[str] = None
        self._has_complied = False
        self._ended_well = False
        self._total_reward = 0.0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def phase(self) -> ConversationPhase:
        return self._phase

    @property
    def scenario(self) -> Scenario:
        return self._scenario

    @property
    def turn(self) -> int:
        return self._turn

    @property
    def last_action(self) -> Optional[PlayerAction]:
        return self._last_action

    @property
    def final_response(self) -> Optional[Response]:
        return self._final_response

    @property
    def end_reason(self) -> Optional[str]:
        return self._end_reason

    @property
    def has_complied(self) -> bool:
        return self._has_complied

    @property
    def ended_well(self) -> bool:
        return self._ended_well

    @property
    def total_reward(self) -> float:
        return self._total_reward

    def history(self) -> List[TurnRecord]:
        with self._lock:
            return list(self._log)

    def history_text(self) -> str:
        with self._lock:
            return "\n".join(self._transcript)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, scenario: Any = None) -> Opening:
        """Begin a conversation; unknown scenarios fall back to the default."""

        with self._lock:
            if self._phase is ConversationPhase.ACTIVE:
                LOGGER.info("Restarting active conversation on %s", self._scenario.value)
            self._clear_conversation()
            if scenario is not None:
                self._scenario = Scenario.coerce(scenario)
            self._phase = ConversationPhase.ACTIVE

            text = self.dialogue.opening(self._scenario, self.state)
            reference: Optional[str] = None
            memory = self.memory.relevant_memory(self._scenario, self.state)
            if memory is not None and self._rng.random() < self.config.opening_memory_chance:
                reference = self.memory.memory_dialogue(memory)
                text = f"{reference} {text}"
                self._publish_recall(memory)

            emotion = self.state.current_emotion
            self._transcript.append(f"Teen: {text}")
            self.metrics.record_conversation_started()
            STRUCTURED_LOGGER.log_conversation_started(self._scenario.value, self.state.snapshot())
            self.speaker.speak(text, emotion)
            self.ui_sink.emit(UIEvent("dialogue", {"author": "Teen", "text": text, "emotion": emotion.value}))
            self.ui_sink.emit(UIEvent("reaction", {"emotion": emotion.value, "response": None}))
            self.event_bus.publish(
                EventType.CONVERSATION_STARTED,
                {"scenario": self._scenario, "text": text, "emotion": emotion},
            )
            return Opening(self._scenario, text, emotion, reference)

    def reset(self) -> None:
        """Return to idle. Memories survive; only per-conversation data is cleared."""

        with self._lock:
            self._clear_conversation()
            self._phase = ConversationPhase.IDLE

    def abort(self, reason: str = "aborted") -> None:
        """Force the conversation to end without recording the interrupted turn."""

        with self._lock:
            if self._phase is not ConversationPhase.ACTIVE:
                return
            self._phase = ConversationPhase.ENDED
            self._end_reason = reason
            self.metrics.record_outcome(reason)
            STRUCTURED_LOGGER.log_conversation_ended(self._scenario.value, None, self._turn, reason)
            self.event_bus.publish(EventType.CONVERSATION_ABORTED, {"scenario": self._scenario, "reason": reason})

    def tick(self, dt: float) -> Emotion:
        """Advance emotional decay by ``dt`` seconds of simulation time."""

        started = time.perf_counter()
        with self._lock:
            before = self.state.current_emotion
            emotion = self.state.decay(dt, self.config.decay_rate, self.config.stress_floor)
            if emotion is not before:
                self.ui_sink.emit(UIEvent("reaction", {"emotion": emotion.value, "response": None}))
                self.event_bus.publish(EventType.EMOTION_CHANGED, {"from": before, "to": emotion})
        self.metrics.record_tick(time.perf_counter() - started)
        return emotion

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------
    def submit_text(self, text: str) -> TurnOutcome:
        """Classify free text and process it as the player's action."""

        cleaned = self.classifier.sanitize(text)
        result = self.classifier.classify(cleaned)
        LOGGER.debug("Classified %r as %s (%.2f)", cleaned, result.action.value, result.confidence)
        return self.submit_action(result.action, player_text=cleaned, confidence=result.confidence)

    def submit_action(
        self,
        action: Any,
        player_text: Optional[str] = None,
        confidence: Optional[float] = None,
    ) -> TurnOutcome:
        """Process one player action and return the teen's reaction."""

        started = time.perf_counter()
        with self._lock:
            if self._phase is not ConversationPhase.ACTIVE:
                LOGGER.info("Conversation %s; starting %s for player action", self._phase.value, self._scenario.value)
                self.start(self._scenario)

            known = PlayerAction.lookup(action)
            if known is None:
                LOGGER.debug("Unknown player action %r; treating as neutral %s", action, DEFAULT_ACTION.value)
            action = known or DEFAULT_ACTION
            if player_text is None:
                player_text = self.dialogue.player_line(self._scenario, action)
            self._turn += 1
            self._last_action = action
            self._transcript.append(f"Player: {player_text}")

            effect = ACTION_EFFECTS[known] if known is not None else NEUTRAL_EFFECT
            self.state.apply_interaction(effect.relationship, effect.mood, effect.respect, effect.respectful)
            emotion = self.state.current_emotion

            memory = self.memory.relevant_memory(self._scenario, self.state)
            reference = self.memory.memory_dialogue(memory) if memory is not None else None
            if memory is not None:
                self._publish_recall(memory)

            context = PolicyContext(
                state=self.state,
                scenario=self._scenario,
                last_action=action,
                turn=self._turn,
                max_turns=self.config.max_turns,
                memory=self.memory,
                relevant_memory=memory,
            )
            response = self.policy.choose(context)

            text = self.dialogue.response(self._scenario, response, emotion)
            if reference:
                text = f"{reference} {text}"

            if known is not None:
                self.memory.record_interaction(action, response, self.state, self._scenario)

            reward = self._score(response, action)

            end_reason: Optional[str] = None
            if is_terminal(response):
                end_reason = response.value
            elif self._turn >= self.config.max_turns:
                end_reason = "max_turns"

            if end_reason is not None and self.reward_model is not None:
                final = self.reward_model.episode_reward(self._has_complied, self.state.relationship)
                self._total_reward += final
                reward = (reward or 0.0) + final

            self._log.append(
                TurnRecord(self._turn, self._scenario, action, response, emotion, player_text, text)
            )
            self._transcript.append(f"Teen: {text}")

            self.speaker.speak(text, emotion)
            self.ui_sink.emit(UIEvent("dialogue", {"author": "Player", "text": player_text}))
            self.ui_sink.emit(UIEvent("dialogue", {"author": "Teen", "text": text, "emotion": emotion.value}))
            self.ui_sink.emit(
                UIEvent(
                    "reaction",
                    {
                        "emotion": emotion.value,
                        "response": response.value,
                        "action": action.value,
                        "relationship": self.state.relationship,
                    },
                )
            )

            duration = time.perf_counter() - started
            self.metrics.record_turn(duration)
            STRUCTURED_LOGGER.log_turn(self._turn, action.value, response.value, emotion.value, duration, reward)
            outcome = TurnOutcome(
                turn=self._turn,
                action=action,
                response=response,
                emotion=emotion,
                player_text=player_text,
                text=text,
                memory_reference=reference,
                ended=end_reason is not None,
                end_reason=end_reason,
                reward=reward,
                state=self.state.snapshot(),
                confidence=confidence,
            )
            self.event_bus.publish(EventType.TURN_COMPLETED, outcome)
            if end_reason is not None:
                self._end(response, end_reason)
            return outcome

    def outcome_message(self, response: Optional[Response] = None) -> str:
        """Summary line for how the conversation ended."""

        response = response if response is not None else self._final_response
        if response is Response.COMPLIANT:
            if self.state.relationship > 40:
                return "Success! The teen agreed and feels good about it."
            return "The teen agreed, but seems reluctant."
        return OUTCOME_MESSAGES.get(response, "The conversation ended inconclusively.")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _score(self, response: Response, action: PlayerAction) -> Optional[float]:
        if self.reward_model is None:
            if response is Response.COMPLIANT:
                self._ended_well = True
            return None
        step = self.reward_model.step_reward(response, self.state, action)
        if step.complied:
            self._has_complied = True
            self._ended_well = True
        self._total_reward += step.value
        return step.value

    def _end(self, response: Response, reason: str) -> None:
        self._phase = ConversationPhase.ENDED
        self._final_response = response
        self._end_reason = reason
        message = self.outcome_message(response)
        self.metrics.record_outcome(response.value)
        STRUCTURED_LOGGER.log_conversation_ended(self._scenario.value, response.value, self._turn, reason)
        LOGGER.info(
            "Conversation ended: %s after %d turns (relationship %.1f)",
            response.value,
            self._turn,
            self.state.relationship,
        )
        self.ui_sink.emit(UIEvent("outcome", {"message": message, "ended_well": self._ended_well}))
        self.event_bus.publish(
            EventType.CONVERSATION_ENDED,
            {"scenario": self._scenario, "response": response, "reason": reason, "message": message},
        )

    def _publish_recall(self, memory: Memory) -> None:
        count = self.memory.times_recalled(memory)
        STRUCTURED_LOGGER.log_memory_recalled(memory.id, memory.type.value, count)
        self.event_bus.publish(EventType.MEMORY_RECALLED, memory)

    def _clear_conversation(self) -> None:
        self._turn = 0
        self._log.clear()
        self._transcript.clear()
        self._last_action = None
        self._final_response = None
        self._end_reason = None
        self._has_complied = False
        self._ended_well = False
        self._total_reward = 0.0
