"""Draft resolution package.

Modules:
  - types        : core domain dataclasses (TeamStanding, CompPick, PickSlot, DraftSummary, ...)
  - config       : tuning constants (pick budget, comp cutoffs, outcome rates, grades)
  - errors       : DraftResult / DraftInvariantError and the failure codes
  - standings    : worst-to-best ordering of the regular-season standings (pure)
  - compensatory : compensatory pick allocation from free-agency losses (pure)
  - order        : draft order, slot resolution and the pick ledger (pure)
  - cursor       : round/pick cursor with variable round lengths (pure)
  - pool         : prospects, scouting ranges, procedural draft class
  - outcome      : bust/normal/gem outcome probabilities and potential boosts
  - players      : drafted and undrafted player records, rookie contracts
  - needs        : positional needs analysis
  - audit        : pre-draft roster/pick audit
  - grades       : post-draft team grades and standout picks
  - state        : immutable DraftState + snapshot (de)serialization
  - session      : draft state machine operations (pure)
  - completion   : completion safeguards, UDFA conversion, lock
  - ai           : best-available AI policy
  - locks        : process-local serial lock
  - engine       : DraftEngine, the single writer of the live state
"""

from __future__ import annotations

from .engine import DraftEngine
from .errors import DraftInvariantError, DraftResult, FailureKind
from .state import CompletionState, DraftState
from .types import (
    CompPick,
    DraftGrade,
    DraftOutcome,
    DraftPickEntry,
    DraftSummary,
    FreeAgencyTransaction,
    OutcomeCategory,
    PickSlot,
    Position,
    TeamStanding,
)

__all__ = [
    "DraftEngine",
    "DraftInvariantError",
    "DraftResult",
    "FailureKind",
    "DraftState",
    "CompletionState",
    "CompPick",
    "DraftGrade",
    "DraftOutcome",
    "DraftPickEntry",
    "DraftSummary",
    "FreeAgencyTransaction",
    "OutcomeCategory",
    "PickSlot",
    "Position",
    "TeamStanding",
]
