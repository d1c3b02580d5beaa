"""
Problem Selector: weighted choice of the next problem.

Every pair gets a weight from its mastery status, nudged by its tally:

    Unknown        -> sufficient
    InProgress(c)  -> max(c, 0)
    Finished       -> 0
    tally m < 0    -> weight += -m
    tally m > 0    -> weight -= 1   (only while weight > 1)

The pool repeats each pair's flat index weight + 1 times, so no pair
ever drops out entirely. Choices are drawn from the pool with
replacement; the posed problem is one of them and the answer choices
are all of their products.
"""

from __future__ import annotations

import random

from loguru import logger

from .config import DrillConfig
from .mastery import Finished, InProgress, MasteryMatrix, Pair, PairStatus, Unknown
from .tally import TallyLedger


class ProblemSelector:
    """Builds the weighted pool and draws candidate pairs."""

    def __init__(self, config: DrillConfig, rng: random.Random | None = None):
        """
        Initialize the selector.

        Args:
            config: Drill configuration
            rng: Random source (seed it for reproducible draws)
        """
        self.config = config
        self.rng = rng or random.Random()

    # =========================================================================
    # Weighting
    # =========================================================================

    def base_weight(self, status: PairStatus) -> int:
        if isinstance(status, Unknown):
            return self.config.sufficient
        if isinstance(status, InProgress):
            return max(status.count, 0)
        if isinstance(status, Finished):
            return 0
        raise TypeError(f"Not a PairStatus: {status!r}")

    def weight(self, status: PairStatus, tally: int) -> int:
        """Selection weight before the +1 floor."""
        n = self.base_weight(status)
        if tally < 0:
            n += -tally
        elif tally > 0 and n > 1:
            n -= 1
        return n

    def build_pool(self, mastery: MasteryMatrix, tally: TallyLedger) -> list[int]:
        """Flat pair indices, each repeated weight + 1 times."""
        size = self.config.dimension
        pool: list[int] = []
        for i, status in enumerate(mastery):
            n = self.weight(status, tally[(i // size, i % size)])
            pool.extend([i] * (n + 1))
        logger.debug(f"weighted pool: {len(pool)} entries")
        return pool

    def pair_at(self, index: int) -> Pair:
        size = self.config.dimension
        return (index // size, index % size)

    # =========================================================================
    # Drawing
    # =========================================================================

    def choose_choices(
        self,
        mastery: MasteryMatrix | None = None,
        tally: TallyLedger | None = None,
    ) -> list[Pair]:
        """
        Draw n_choices pairs.

        With no mastery/tally (first problem of a session) pairs are
        uniform over the whole factor range.
        """
        if mastery is None or tally is None:
            top = self.config.max_factor
            return [
                (self.rng.randint(0, top), self.rng.randint(0, top))
                for _ in range(self.config.n_choices)
            ]

        pool = self.build_pool(mastery, tally)
        chosen = [self.pair_at(self.rng.choice(pool)) for _ in range(self.config.n_choices)]
        logger.debug(f"chosen: {chosen}")
        return chosen

    def new_problem(
        self,
        mastery: MasteryMatrix | None = None,
        tally: TallyLedger | None = None,
    ) -> tuple[Pair, list[int]]:
        """
        Pick the next problem and its answer choices.

        Returns:
            (posed pair, products of every chosen pair in draw order)
        """
        choices = self.choose_choices(mastery, tally)
        problem = choices[self.rng.randrange(len(choices))]
        answers = [a * b for a, b in choices]
        return problem, answers
