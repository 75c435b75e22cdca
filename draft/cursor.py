from __future__ import annotations

"""Pick advancement state machine.

State is {round, pick} plus the per-round compensatory counts. Rounds have
variable length: 32 base slots, plus comp(r) for rounds 3..7.

    advance():
        last slot of the last round -> complete (no increment)
        otherwise pick + 1, rolling into the next round past max_pick(round)

The cursor is an immutable value; advance() returns a new cursor. A complete
cursor returns itself.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping

from .config import COMP_ROUNDS, MAX_ROUNDS, TEAMS_PER_ROUND
from .errors import PICK_OUT_OF_RANGE, ROUND_OUT_OF_RANGE, DraftInvariantError

logger = logging.getLogger(__name__)


def _freeze_counts(counts: Mapping[Any, Any]) -> Dict[int, int]:
    out: Dict[int, int] = {}
    for k, v in dict(counts or {}).items():
        r = int(k)
        n = int(v or 0)
        if n < 0:
            raise DraftInvariantError(PICK_OUT_OF_RANGE, f"negative compensatory count for round {r}")
        if n and r not in COMP_ROUNDS:
            raise DraftInvariantError(ROUND_OUT_OF_RANGE, f"compensatory picks in round {r}")
        if n:
            out[r] = n
    return out


@dataclass(frozen=True, slots=True)
class PickCursor:
    round: int = 1
    pick: int = 1
    comp_counts: Dict[int, int] = field(default_factory=dict)
    is_complete: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "round", int(self.round))
        object.__setattr__(self, "pick", int(self.pick))
        object.__setattr__(self, "comp_counts", _freeze_counts(self.comp_counts))
        self.check()

    def max_pick(self, round_no: int | None = None) -> int:
        r = self.round if round_no is None else int(round_no)
        if r in COMP_ROUNDS:
            return TEAMS_PER_ROUND + int(self.comp_counts.get(r, 0))
        return TEAMS_PER_ROUND

    @property
    def total_slots(self) -> int:
        return sum(self.max_pick(r) for r in range(1, MAX_ROUNDS + 1))

    @property
    def is_last_slot(self) -> bool:
        return self.round == MAX_ROUNDS and self.pick == self.max_pick(MAX_ROUNDS)

    def check(self) -> None:
        """Raise DraftInvariantError if the cursor is outside the draft."""
        if self.round < 1 or self.round > MAX_ROUNDS:
            raise DraftInvariantError(
                ROUND_OUT_OF_RANGE,
                f"round {self.round} outside 1..{MAX_ROUNDS}",
                {"round": self.round, "pick": self.pick},
            )
        if self.pick < 1 or self.pick > self.max_pick():
            raise DraftInvariantError(
                PICK_OUT_OF_RANGE,
                f"pick {self.pick} outside 1..{self.max_pick()} in round {self.round}",
                {"round": self.round, "pick": self.pick, "max_pick": self.max_pick()},
            )
        if self.is_complete and not self.is_last_slot:
            raise DraftInvariantError(
                PICK_OUT_OF_RANGE,
                "complete cursor must rest on the last slot",
                {"round": self.round, "pick": self.pick},
            )

    def advance(self) -> "PickCursor":
        if self.is_complete:
            return self
        if self.is_last_slot:
            logger.info("DRAFT_CURSOR_COMPLETE round=%d pick=%d", self.round, self.pick)
            return replace(self, is_complete=True)

        nxt = self.pick + 1
        if nxt > self.max_pick():
            logger.info("DRAFT_ROUND_COMPLETE round=%d picks=%d", self.round, self.max_pick())
            return replace(self, round=self.round + 1, pick=1)
        return replace(self, pick=nxt)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": int(self.round),
            "pick": int(self.pick),
            "comp_counts": {str(k): int(v) for k, v in sorted(self.comp_counts.items())},
            "is_complete": bool(self.is_complete),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PickCursor":
        return cls(
            round=int(d.get("round") or 1),
            pick=int(d.get("pick") or 1),
            comp_counts=dict(d.get("comp_counts") or {}),
            is_complete=bool(d.get("is_complete", False)),
        )
