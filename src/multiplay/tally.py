"""
Tally Ledger: running correct-minus-incorrect score per pair.

The tally is the only part of the drill history that survives between
sessions, so it is stored and restored as a plain square matrix.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from .config import DrillConfig
from .mastery import Pair


class TallyLedger:
    """Signed counter per pair. No bounds."""

    def __init__(self, config: DrillConfig, counts: list[list[int]] | None = None):
        self.config = config
        size = config.dimension
        self.counts = counts if counts is not None else [[0] * size for _ in range(size)]

    def __getitem__(self, pair: Pair) -> int:
        a, b = pair
        return self.counts[a][b]

    def update(self, pair: Pair, correct: bool) -> int:
        """Add +1 for a correct answer, -1 otherwise. Returns the new count."""
        a, b = pair
        self.counts[a][b] += 1 if correct else -1
        return self.counts[a][b]

    def to_matrix(self) -> list[list[int]]:
        """Copy of the counts for the persistence layer."""
        return [list(row) for row in self.counts]

    @classmethod
    def from_matrix(cls, config: DrillConfig, data: Any) -> TallyLedger:
        """
        Adopt a saved matrix, or start fresh if its shape is wrong.

        Both the outer and every inner dimension must equal
        config.dimension and every cell must be an int.
        """
        if data is None:
            return cls(config)
        if not _valid_matrix(data, config.dimension):
            logger.warning("Ignoring invalid tally from saved state")
            return cls(config)
        return cls(config, [list(row) for row in data])


def _valid_matrix(data: Any, size: int) -> bool:
    if not isinstance(data, list) or len(data) != size:
        return False
    for row in data:
        if not isinstance(row, list) or len(row) != size:
            return False
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in row):
            return False
    return True
