"""
Timing Ledger: recent response times per pair.

Each pair keeps its last K response times, most recent first. Pairs
that were never answered hold a "slow" sentinel (twice the fast
threshold) so they never look fast.
"""

from __future__ import annotations

import math
from typing import Any

from loguru import logger

from .config import DrillConfig
from .mastery import Pair


def median(samples: list[float]) -> float:
    """Median of a non-empty sample list; mean of the middle two for even lengths."""
    ordered = sorted(samples)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


class TimingLedger:
    """Fixed-length response time history per pair."""

    def __init__(self, config: DrillConfig, samples: list[list[list[float]]] | None = None):
        self.config = config
        if samples is None:
            size = config.dimension
            fill = config.slow_sentinel
            samples = [
                [[fill] * config.timing_samples for _ in range(size)] for _ in range(size)
            ]
        self.samples = samples

    def __getitem__(self, pair: Pair) -> list[float]:
        a, b = pair
        return self.samples[a][b]

    def record(self, pair: Pair, response_ms: float | None) -> None:
        """
        Push a response time onto the front of the pair's history.

        The oldest sample falls off the end, so the length stays K.
        A missing time is ignored.
        """
        if response_ms is None:
            logger.debug(f"No response time for {pair}; timing unchanged")
            return
        a, b = pair
        history = self.samples[a][b]
        history.insert(0, float(response_ms))
        history.pop()

    def median(self, pair: Pair) -> float:
        """Median of the pair's samples. Does not mutate the ledger."""
        return median(self[pair])

    def to_matrix(self) -> list[list[list[float]]]:
        """Copy of the samples for the persistence layer."""
        return [[list(cell) for cell in row] for row in self.samples]

    @classmethod
    def from_matrix(cls, config: DrillConfig, data: Any) -> TimingLedger:
        """Adopt saved samples, or start fresh with sentinels if the shape is wrong."""
        if data is None:
            return cls(config)
        if not _valid_samples(data, config.dimension, config.timing_samples):
            logger.warning("Ignoring invalid timings from saved state")
            return cls(config)
        return cls(config, [[[float(v) for v in cell] for cell in row] for row in data])


def _valid_samples(data: Any, size: int, depth: int) -> bool:
    if not isinstance(data, list) or len(data) != size:
        return False
    for row in data:
        if not isinstance(row, list) or len(row) != size:
            return False
        for cell in row:
            if not isinstance(cell, list) or len(cell) != depth:
                return False
            if not all(
                isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
                for v in cell
            ):
                return False
    return True
