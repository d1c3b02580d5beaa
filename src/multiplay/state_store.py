"""
JSON state persistence for the drill.

Stores the tally and timing matrices between sessions so the selector
keeps favouring the facts a learner struggles with.

File location: ~/.multiplay/state.json (see DrillConfig.state_path)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from .config import STORAGE_KEY


@dataclass
class SavedState:
    """Raw persisted matrices. Shapes are validated by the ledgers, not here."""

    tally: Any = None
    timings: Any = None


class StateStore:
    """
    Reads and writes the saved drill state.

    Saving is fire-and-forget: failures are logged and the in-memory
    session stays the source of truth.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> SavedState:
        """Load saved matrices; anything unreadable loads as empty."""
        if not self.path.exists():
            return SavedState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return SavedState()

        if not isinstance(data, dict) or data.get("key") != STORAGE_KEY:
            logger.warning(f"Ignoring foreign state file {self.path}")
            return SavedState()

        return SavedState(tally=data.get("tally"), timings=data.get("timings"))

    def save(self, tally: list[list[int]], timings: list[list[list[float]]]) -> bool:
        """Write both matrices. Returns False (and logs) on failure."""
        payload = {"key": STORAGE_KEY, "tally": tally, "timings": timings}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f)
        except OSError as e:
            logger.warning(f"Could not save state to {self.path}: {e}")
            return False
        return True

    def delete(self) -> bool:
        """Remove the state file."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False
