"""
Multiplay: adaptive multiplication drill.

Components:
- MasteryMatrix: Per-pair Unknown / InProgress / Finished state machine
- TallyLedger: Correct-minus-incorrect count per pair
- TimingLedger: Recent response times per pair
- ProblemSelector: Weighted choice of the next problem
- DrillSession: One learner's answers, ledgers and current problem
- StateStore: JSON persistence
"""

from .config import DrillConfig, get_config
from .mastery import FINISHED, UNKNOWN, Finished, InProgress, MasteryMatrix, Pair, PairStatus, Unknown
from .selector import ProblemSelector
from .session import AnswerOutcome, DrillSession, create_engine
from .state_store import SavedState, StateStore
from .tally import TallyLedger
from .timing import TimingLedger

__all__ = [
    # Config
    "DrillConfig",
    "get_config",
    # Mastery
    "Pair",
    "PairStatus",
    "Unknown",
    "InProgress",
    "Finished",
    "UNKNOWN",
    "FINISHED",
    "MasteryMatrix",
    # Ledgers
    "TallyLedger",
    "TimingLedger",
    # Selection
    "ProblemSelector",
    # Session
    "DrillSession",
    "AnswerOutcome",
    "create_engine",
    # Persistence
    "StateStore",
    "SavedState",
]
