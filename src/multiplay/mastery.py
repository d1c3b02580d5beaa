"""
Mastery Matrix: per-pair progress toward "finished".

Each ordered pair (a, b) carries one PairStatus:

    Unknown -> InProgress(+-1)
    InProgress(n) -> Finished        when n + adjust >= sufficient
    InProgress(n) -> InProgress(n + adjust)
    Finished -> InProgress(sufficient + adjust)

A correct answer given faster than the fast threshold finishes the pair
immediately, whatever its previous status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from loguru import logger

from .config import DrillConfig

Pair = tuple[int, int]

# =============================================================================
# Pair Status
# =============================================================================


@dataclass(frozen=True)
class Unknown:
    """Pair never answered."""

    css_class = "unknown"


@dataclass(frozen=True)
class InProgress:
    """Pair answered at least once; count may go negative."""

    count: int

    css_class = "in-progress"


@dataclass(frozen=True)
class Finished:
    """Pair mastered."""

    css_class = "finished"


PairStatus = Union[Unknown, InProgress, Finished]

UNKNOWN = Unknown()
FINISHED = Finished()


def next_status(
    status: PairStatus,
    correct: bool,
    sufficient: int,
    fast: bool = False,
) -> PairStatus:
    """
    Apply one answer to a pair status.

    Args:
        status: Current status of the pair
        correct: Whether the answer was right
        sufficient: Count at which an in-progress pair is finished
        fast: Whether the answer beat the fast threshold

    Returns:
        The new PairStatus
    """
    if correct and fast:
        return FINISHED

    adjust = 1 if correct else -1

    if isinstance(status, Unknown):
        return InProgress(adjust)
    if isinstance(status, InProgress):
        if status.count + adjust >= sufficient:
            return FINISHED
        return InProgress(status.count + adjust)
    if isinstance(status, Finished):
        return InProgress(sufficient + adjust)

    raise TypeError(f"Not a PairStatus: {status!r}")


# =============================================================================
# Matrix
# =============================================================================


class MasteryMatrix:
    """Dense grid of PairStatus for every pair in the factor range."""

    def __init__(self, config: DrillConfig):
        self.config = config
        size = config.dimension
        self._cells: list[list[PairStatus]] = [[UNKNOWN] * size for _ in range(size)]

    def __getitem__(self, pair: Pair) -> PairStatus:
        a, b = pair
        return self._cells[a][b]

    def __setitem__(self, pair: Pair, status: PairStatus) -> None:
        a, b = pair
        self._cells[a][b] = status

    def __iter__(self):
        """Statuses in flat (row-major) order."""
        for row in self._cells:
            yield from row

    @property
    def rows(self) -> list[list[PairStatus]]:
        return self._cells

    def update(self, pair: Pair, correct: bool, elapsed_ms: float | None = None) -> PairStatus:
        """
        Record an answer for a pair.

        Args:
            pair: The posed pair
            correct: Whether the answer was right
            elapsed_ms: Response time, or None if the prompt was never timed

        Returns:
            The pair's new status
        """
        fast = elapsed_ms is not None and elapsed_ms < self.config.fast_milliseconds
        new_status = next_status(self[pair], correct, self.config.sufficient, fast=fast)
        logger.debug(f"pairs[{pair[0]}][{pair[1]}] <- {new_status}")
        self[pair] = new_status
        return new_status

    def display_value(self, pair: Pair) -> int:
        """Number shown in a progress grid cell."""
        status = self[pair]
        if isinstance(status, InProgress):
            return max(status.count, 0)
        if isinstance(status, Finished):
            return self.config.sufficient
        return 0

    def counts(self) -> dict[str, int]:
        """Number of pairs in each status class."""
        result = {Unknown.css_class: 0, InProgress.css_class: 0, Finished.css_class: 0}
        for status in self:
            result[status.css_class] += 1
        return result
