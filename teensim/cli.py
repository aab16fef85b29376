"""Command line entry points: text play mode, the interview and a classifier probe."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import threading
from typing import Callable, List, Optional, TextIO

from teensim.action_classifier import ActionClassifier
from teensim.config import SimulationConfig, load_env_file
from teensim.engine import ConversationEngine, TurnOutcome
from teensim.enums import PlayerAction, Response, Scenario
from teensim.interview import InterviewSession, InterviewStatus, QuestionBank
from teensim.persistence import SQLiteMemoryRepository
from teensim.scenarios import ScenarioManager
from teensim.speech import build_speaker
from teensim.training import TrainingEnvironment, run_episode

LOGGER = logging.getLogger(__name__)

ENV_FILE = "teensim.env"
QUIT_COMMANDS = {"/quit", "/exit", "quit", "exit"}

InputFn = Callable[[str], str]


class DecayTicker:
    """Calls ``engine.tick`` on a background thread until stopped."""

    def __init__(self, engine: ConversationEngine, interval: float) -> None:
        self.engine = engine
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="teensim-decay", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.engine.tick(self.interval)
            except Exception as exc:
                LOGGER.error("Decay tick failed: %s", exc)
                self.engine.metrics.record_error()


def _action_menu() -> str:
    return "  ".join(f"{i}) {action.value}" for i, action in enumerate(PlayerAction, start=1))


def _print_outcome(outcome: TurnOutcome, out: TextIO) -> None:
    print(f"  [{outcome.action.value}] -> {outcome.response.value} ({outcome.emotion.value})", file=out)
    print(f"Teen: {outcome.text}", file=out)


def play(
    config: SimulationConfig,
    scenario: Optional[str] = None,
    rounds: int = 1,
    input_fn: InputFn = input,
    out: TextIO = sys.stdout,
    rng: Optional[random.Random] = None,
) -> int:
    """Interactive text conversation. Numbers pick an action; anything else is classified."""
    rng = rng or random.Random()
    repository = SQLiteMemoryRepository(config.db_path)
    speaker = build_speaker(config.speech_enabled, config.speech_rate, config.speech_volume)
    engine = ConversationEngine(config=config, speaker=speaker, rng=rng)
    repository.load_into(engine.memory)
    manager = ScenarioManager(rng=rng, randomize=scenario is None)
    if scenario is not None:
        manager.forced = Scenario.coerce(scenario)
    ticker = DecayTicker(engine, config.tick_interval)
    ticker.start()

    try:
        for _ in range(rounds):
            chosen = manager.generate()
            manager.apply_environmental_factors(engine.state)
            opening = engine.start(chosen)
            print("", file=out)
            print(manager.description(chosen), file=out)
            print(manager.tips(chosen, engine.state), file=out)
            print(f"Teen: {opening.text}", file=out)
            print(_action_menu(), file=out)

            while True:
                try:
                    line = input_fn("You: ").strip()
                except EOFError:
                    engine.abort("input_closed")
                    return 0
                if not line:
                    continue
                if line.lower() in QUIT_COMMANDS:
                    engine.abort("player_quit")
                    return 0
                if line.isdigit() and 1 <= int(line) <= len(PlayerAction):
                    outcome = engine.submit_action(PlayerAction.from_index(int(line) - 1))
                    print(f"You: {outcome.player_text}", file=out)
                else:
                    outcome = engine.submit_text(line)
                _print_outcome(outcome, out)
                if outcome.ended:
                    break

            manager.record_outcome(engine.final_response is Response.COMPLIANT)
            print(engine.outcome_message(), file=out)
            print(f"Relationship: {engine.state.relationship:.0f}", file=out)
        print(f"Success rate: {manager.success_rate():.0f}%", file=out)
        return 0
    finally:
        ticker.stop()
        repository.save(engine.memory)
        repository.close()
        speaker.stop()
        LOGGER.info("Session stats: %s", engine.metrics.get_stats())


def interview(
    config: SimulationConfig,
    bonus: bool = False,
    input_fn: InputFn = input,
    out: TextIO = sys.stdout,
    rng: Optional[random.Random] = None,
) -> int:
    """Typed answers only; voice analysis needs recorded audio."""
    rng = rng or random.Random()
    questions = QuestionBank()
    if bonus:
        questions.add_bonus(rng)
    speaker = build_speaker(config.speech_enabled, config.speech_rate, config.speech_volume)
    session = InterviewSession(questions, rng=rng, max_strikes=config.max_strikes, speaker=speaker)
    try:
        for line in session.start():
            print(f"Interviewer: {line}", file=out)
        while not session.finished:
            try:
                answer = input_fn("You: ")
            except EOFError:
                return 1
            result = session.answer(answer)
            print(f"  {result.feedback} (strikes {result.strikes}/{session.max_strikes})", file=out)
            for line in result.lines:
                print(f"Interviewer: {line}", file=out)
        return 0 if session.status is InterviewStatus.PASSED else 1
    finally:
        speaker.stop()


def classify(texts: List[str], detailed: bool = False, out: TextIO = sys.stdout) -> int:
    classifier = ActionClassifier()
    for text in texts:
        if detailed:
            print(classifier.detailed_analysis(text), file=out)
            print("", file=out)
        else:
            result = classifier.classify(text)
            print(f"{result.action.value}\t{result.confidence:.2f}\t{text}", file=out)
    return 0


def train_demo(config: SimulationConfig, episodes: int, seed: Optional[int], out: TextIO = sys.stdout) -> int:
    """Run episodes with a random responder to sanity-check rewards."""
    rng = random.Random(seed)
    env = TrainingEnvironment(config.model_copy(update={"training_mode": True}), rng=rng)
    returns = []
    for episode in range(episodes):
        episode_seed = None if seed is None else seed + episode
        returns.append(run_episode(env, lambda _obs: rng.randrange(env.action_count), episode_seed))
    average = sum(returns) / len(returns) if returns else 0.0
    print(f"Episodes: {len(returns)}  average return: {average:.2f}", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="teensim", description="Teen persuasion simulator")
    parser.add_argument("--env-file", default=ENV_FILE, help="KEY=VALUE file loaded before reading TEENSIM_* settings")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play_parser = subparsers.add_parser("play", help="Talk to the teen in the terminal")
    play_parser.add_argument(
        "--scenario",
        help="Scenario name, e.g. GoToSchool (default: random)",
    )
    play_parser.add_argument("--rounds", type=int, default=1, help="Number of conversations to play")
    play_parser.add_argument("--max-turns", type=int, help="Override the turn limit")
    play_parser.add_argument("--speech", action="store_true", help="Speak the teen's lines with pyttsx3")

    interview_parser = subparsers.add_parser("interview", help="Play the job interview mini-game")
    interview_parser.add_argument("--bonus", action="store_true", help="Swap in a random bonus question")
    interview_parser.add_argument("--speech", action="store_true", help="Speak the interviewer's lines")

    classify_parser = subparsers.add_parser("classify", help="Show how text is classified into a player action")
    classify_parser.add_argument("text", nargs="+", help="Player lines to classify")
    classify_parser.add_argument("--detailed", action="store_true", help="Print keyword scores")

    train_parser = subparsers.add_parser("train-demo", help="Run training episodes with a random responder")
    train_parser.add_argument("--episodes", type=int, default=10)
    train_parser.add_argument("--seed", type=int)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    load_env_file(args.env_file)
    config = SimulationConfig.from_env()
    updates = {}
    if getattr(args, "speech", False):
        updates["speech_enabled"] = True
    if getattr(args, "max_turns", None):
        updates["max_turns"] = args.max_turns
    if updates:
        config = SimulationConfig(**{**config.model_dump(), **updates})

    try:
        if args.command == "play":
            return play(config, scenario=args.scenario, rounds=max(1, args.rounds))
        if args.command == "interview":
            return interview(config, bonus=args.bonus)
        if args.command == "classify":
            return classify(args.text, detailed=args.detailed)
        if args.command == "train-demo":
            return train_demo(config, max(1, args.episodes), args.seed)
    except KeyboardInterrupt:
        LOGGER.info("Keyboard interrupt received; exiting")
        return 130
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
