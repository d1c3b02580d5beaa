"""
Reward feedback for fast, correct answers.

The drill engine only signals that a reward is due; what happens next
(a sound, a cheer) is up to the RewardSink it was given.
"""

from __future__ import annotations

import random
from typing import Protocol

from rich.console import Console

from .mastery import Pair

CHEERS = [
    "broccoli",
    "carrot",
    "carrot",
    "corn",
    "potato",
    "squash",
    "zucchini",
    "zucchini",
]


class RewardSink(Protocol):
    """Receives reward signals from a drill session."""

    def reward(self, pair: Pair) -> None:
        """Celebrate a fast, correct answer to pair."""
        ...


class ConsoleCheer:
    """Prints a random vegetable cheer and rings the terminal bell."""

    def __init__(self, console: Console | None = None, rng: random.Random | None = None):
        self.console = console or Console()
        self.rng = rng or random.Random()
        self.last_cheer: str | None = None

    def reward(self, pair: Pair) -> None:
        self.last_cheer = self.rng.choice(CHEERS)
        self.console.bell()
        self.console.print(f"[bold green]{self.last_cheer.upper()}![/bold green] {pair[0]} x {pair[1]}, speedy!")
