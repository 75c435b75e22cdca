from __future__ import annotations

"""Draft errors and result values.

Two channels:
  - DraftInvariantError: the engine reached a state that should be impossible
    (pick budget exceeded, round 8, partial UDFA conversion). Raised, never
    swallowed. The server layer maps it to HTTP 500.
  - DraftResult: explicit success/failure value for recoverable outcomes.
    VALIDATION = the request is malformed for the current state (inactive
    draft, wrong team on the clock). REJECTED = a business rule blocks the
    action (draft already completed, week advance while drafting).
    Failures never mutate state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


@dataclass
class DraftInvariantError(Exception):
    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


class FailureKind(str, Enum):
    VALIDATION = "validation"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class DraftResult:
    ok: bool
    value: Any = None
    kind: Optional[FailureKind] = None
    code: str = ""
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, value: Any = None) -> "DraftResult":
        return cls(ok=True, value=value)

    @classmethod
    def invalid(cls, code: str, message: str, **details: Any) -> "DraftResult":
        return cls(ok=False, kind=FailureKind.VALIDATION, code=code, message=message, details=dict(details))

    @classmethod
    def rejected(cls, code: str, message: str, **details: Any) -> "DraftResult":
        return cls(ok=False, kind=FailureKind.REJECTED, code=code, message=message, details=dict(details))

    def unwrap(self) -> Any:
        """Return value or raise ValueError (test/CLI convenience)."""
        if not self.ok:
            raise ValueError(f"{self.code}: {self.message}")
        return self.value

    def error_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value if self.kind is not None else None,
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


# Invariant codes
PICK_BUDGET_EXCEEDED = "DRAFT_PICK_BUDGET_EXCEEDED"
ROUND_OUT_OF_RANGE = "DRAFT_ROUND_OUT_OF_RANGE"
PICK_OUT_OF_RANGE = "DRAFT_PICK_OUT_OF_RANGE"
UDFA_CONVERSION_FAILED = "DRAFT_UDFA_CONVERSION_FAILED"
SNAPSHOT_INCONSISTENT = "DRAFT_SNAPSHOT_INCONSISTENT"

# Validation codes
DRAFT_NOT_ACTIVE = "DRAFT_NOT_ACTIVE"
ORDER_NOT_LOCKED = "DRAFT_ORDER_NOT_LOCKED"
INSUFFICIENT_TEAMS = "DRAFT_INSUFFICIENT_TEAMS"
NOT_ON_THE_CLOCK = "DRAFT_TEAM_NOT_ON_THE_CLOCK"
PROSPECT_NOT_AVAILABLE = "DRAFT_PROSPECT_NOT_AVAILABLE"
NO_PROSPECTS_LEFT = "DRAFT_NO_PROSPECTS_LEFT"
INSUFFICIENT_SCOUTING_POINTS = "DRAFT_INSUFFICIENT_SCOUTING_POINTS"
BAD_PAYLOAD = "DRAFT_BAD_PAYLOAD"
STALE_VERSION = "DRAFT_STALE_VERSION"

# Business rejection codes
DRAFT_ALREADY_COMPLETED = "DRAFT_ALREADY_COMPLETED"
DRAFT_ALREADY_ACTIVE = "DRAFT_ALREADY_ACTIVE"
DRAFT_WRONG_WEEK = "DRAFT_WRONG_WEEK"
DRAFT_LOCKED = "DRAFT_LOCKED"
DRAFT_UNRESOLVED = "DRAFT_UNRESOLVED"
SUMMARY_PENDING = "DRAFT_SUMMARY_PENDING"
