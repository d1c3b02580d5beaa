"""
Drill session: one learner, one sequence of answers.

The session owns the Mastery Matrix, Tally Ledger, Timing Ledger,
answer history and the problem currently on screen. Front ends hold a
single DrillSession and pass every answer through submit_answer() or
select_choice(); nothing here does I/O.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from loguru import logger

from .config import DrillConfig, get_config
from .feedback import RewardSink
from .mastery import MasteryMatrix, Pair, PairStatus
from .selector import ProblemSelector
from .tally import TallyLedger
from .timing import TimingLedger


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class AnswerOutcome:
    """Result of one accepted answer."""

    pair: Pair
    value: int
    correct: bool
    reward: bool
    response_ms: float | None
    status: PairStatus


@dataclass
class DrillSession:
    """Owned context for a drill session. Mutated only by submit_answer()."""

    config: DrillConfig
    selector: ProblemSelector
    mastery: MasteryMatrix
    tally: TallyLedger
    timings: TimingLedger
    problem: Pair
    choices: list[int]
    history: list[tuple[Pair, bool]] = field(default_factory=list)
    prompt_time: float | None = None
    clock: Callable[[], float] = _now_ms
    feedback: RewardSink | None = None

    # =========================================================================
    # Queries
    # =========================================================================

    def current_problem(self) -> tuple[Pair, list[int]]:
        return self.problem, list(self.choices)

    @property
    def answer(self) -> int:
        return self.problem[0] * self.problem[1]

    @property
    def accuracy(self) -> float:
        """Fraction of correct answers this session (0.0 when nothing answered)."""
        if not self.history:
            return 0.0
        return sum(1 for _, correct in self.history if correct) / len(self.history)

    def serialize_tally(self) -> list[list[int]]:
        return self.tally.to_matrix()

    def serialize_timings(self) -> list[list[list[float]]]:
        return self.timings.to_matrix()

    # =========================================================================
    # Events
    # =========================================================================

    def mark_shown(self) -> None:
        """Start timing the current problem if it is not timed yet."""
        if self.prompt_time is None:
            self.prompt_time = self.clock()

    def select_choice(self, key: str) -> AnswerOutcome | None:
        """
        Answer with a 1-based choice key ("1".."n_choices").

        Anything else is ignored and returns None.
        """
        try:
            n = int(key)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric key {key!r}")
            return None
        if n < 1 or n > len(self.choices):
            logger.debug(f"Ignoring out-of-range key {key!r}")
            return None
        return self.submit_answer(self.choices[n - 1])

    def submit_answer(self, value: Any) -> AnswerOutcome | None:
        """
        Process one answer and move on to the next problem.

        Args:
            value: The chosen product; must be one of the current choices

        Returns:
            AnswerOutcome, or None if value was not an offered choice
        """
        if not isinstance(value, int) or isinstance(value, bool):
            logger.debug(f"Ignoring non-integer answer {value!r}")
            return None
        if value not in self.choices:
            logger.debug(f"Ignoring answer {value} not among choices {self.choices}")
            return None

        pair = self.problem
        now = self.clock()
        response_ms = None if self.prompt_time is None else now - self.prompt_time

        correct = value == self.answer
        # Median must be read before this answer's time is recorded
        reward = (
            correct
            and response_ms is not None
            and response_ms < self.timings.median(pair)
        )
        if reward and self.feedback is not None:
            self.feedback.reward(pair)

        self.timings.record(pair, response_ms)
        self.history.append((pair, correct))
        status = self.mastery.update(pair, correct, response_ms)
        self.tally.update(pair, correct)

        logger.debug(
            f"answer {value} to {pair[0]}x{pair[1]}: correct={correct} "
            f"reward={reward} response_ms={response_ms}"
        )

        self.prompt_time = self.clock()
        self.problem, self.choices = self.selector.new_problem(self.mastery, self.tally)

        return AnswerOutcome(
            pair=pair,
            value=value,
            correct=correct,
            reward=reward,
            response_ms=response_ms,
            status=status,
        )


def create_engine(
    saved_tally: Any = None,
    saved_timings: Any = None,
    config: DrillConfig | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
    feedback: RewardSink | None = None,
) -> DrillSession:
    """
    Start a drill session, adopting saved ledgers when their shape is valid.

    Args:
        saved_tally: Matrix from a previous serialize_tally(), or None
        saved_timings: Matrix from a previous serialize_timings(), or None
        config: Drill configuration (cached defaults if None)
        rng: Random source; seeded from config.seed if None
        clock: Millisecond clock (wall clock if None)
        feedback: Receiver for reward signals

    Returns:
        A DrillSession showing its first problem
    """
    config = config or get_config()
    rng = rng or random.Random(config.seed)
    selector = ProblemSelector(config, rng)

    problem, choices = selector.new_problem()

    return DrillSession(
        config=config,
        selector=selector,
        mastery=MasteryMatrix(config),
        tally=TallyLedger.from_matrix(config, saved_tally),
        timings=TimingLedger.from_matrix(config, saved_timings),
        problem=problem,
        choices=choices,
        clock=clock or _now_ms,
        feedback=feedback,
    )
