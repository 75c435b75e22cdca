from __future__ import annotations

"""Immutable draft state.

DraftState is a value: every session/completion operation returns a new
instance with version + 1. The engine keeps the only live reference.

Snapshot shape (state_to_dict) is JSON-compatible and re-validated on load.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .compensatory import comp_picks_per_round
from .config import MAX_ROUNDS, SCOUTING_POINTS_PER_DRAFT, TEAMS_PER_ROUND
from .cursor import PickCursor
from .errors import SNAPSHOT_INCONSISTENT, DraftInvariantError
from .order import overall_pick_number
from .players import PlayerRecord
from .pool import Prospect
from .types import CompletionPhase, CompPick, DraftPickEntry, DraftSummary, TeamId


@dataclass(frozen=True, slots=True)
class CompletionState:
    phase: CompletionPhase = CompletionPhase.ACTIVE
    summaries: Tuple[DraftSummary, ...] = ()
    showing_summary: bool = False
    can_advance_week: bool = True
    lock_reason: str = ""
    udfa_count: int = 0

    @property
    def is_locked(self) -> bool:
        return self.phase == CompletionPhase.LOCKED

    def summary_for(self, team_id: TeamId) -> Optional[DraftSummary]:
        for s in self.summaries:
            if s.team_id == team_id:
                return s
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "summaries": [s.to_dict() for s in self.summaries],
            "showing_summary": bool(self.showing_summary),
            "can_advance_week": bool(self.can_advance_week),
            "lock_reason": str(self.lock_reason),
            "udfa_count": int(self.udfa_count),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CompletionState":
        return cls(
            phase=CompletionPhase(str(d.get("phase") or CompletionPhase.ACTIVE.value)),
            summaries=tuple(DraftSummary.from_dict(s) for s in (d.get("summaries") or []) if isinstance(s, Mapping)),
            showing_summary=bool(d.get("showing_summary", False)),
            can_advance_week=bool(d.get("can_advance_week", True)),
            lock_reason=str(d.get("lock_reason") or ""),
            udfa_count=int(d.get("udfa_count") or 0),
        )


@dataclass(frozen=True, slots=True)
class DraftState:
    season: int
    is_active: bool = False
    is_order_locked: bool = False
    cursor: PickCursor = field(default_factory=PickCursor)
    draft_order: Tuple[TeamId, ...] = ()
    team_names: Dict[TeamId, str] = field(default_factory=dict)
    prospects: Tuple[Prospect, ...] = ()
    comp_picks: Tuple[CompPick, ...] = ()
    pick_ledger: Tuple[DraftPickEntry, ...] = ()
    drafted: Tuple[PlayerRecord, ...] = ()
    picks_made: int = 0
    scouting_points_available: int = SCOUTING_POINTS_PER_DRAFT
    completion: CompletionState = field(default_factory=CompletionState)
    version: int = 0

    @property
    def comp_counts(self) -> Dict[int, int]:
        return dict(self.cursor.comp_counts)

    @property
    def pick_budget(self) -> int:
        return TEAMS_PER_ROUND * MAX_ROUNDS + len(self.comp_picks)

    @property
    def is_completed(self) -> bool:
        return self.completion.phase != CompletionPhase.ACTIVE

    def prospect(self, prospect_id: str) -> Optional[Prospect]:
        pid = str(prospect_id)
        for p in self.prospects:
            if p.id == pid:
                return p
        return None

    def team_name(self, team_id: TeamId) -> str:
        return self.team_names.get(team_id) or team_id


def state_to_dict(state: DraftState) -> Dict[str, Any]:
    return {
        "season": int(state.season),
        "is_active": bool(state.is_active),
        "is_order_locked": bool(state.is_order_locked),
        "cursor": state.cursor.to_dict(),
        "draft_order": list(state.draft_order),
        "team_names": dict(state.team_names),
        "prospects": [p.to_dict() for p in state.prospects],
        "comp_picks": [c.to_dict() for c in state.comp_picks],
        "pick_ledger": [e.to_dict() for e in state.pick_ledger],
        "drafted": [p.to_dict() for p in state.drafted],
        "picks_made": int(state.picks_made),
        "scouting_points_available": int(state.scouting_points_available),
        "completion": state.completion.to_dict(),
        "version": int(state.version),
    }


def _inconsistent(message: str, **details: Any) -> DraftInvariantError:
    return DraftInvariantError(SNAPSHOT_INCONSISTENT, message, details or None)


def validate_state(state: DraftState) -> DraftState:
    """Cross-field checks for a rehydrated state. Raises DraftInvariantError."""
    state.cursor.check()

    expected_counts = {r: n for r, n in comp_picks_per_round(state.comp_picks).items() if n}
    if dict(state.cursor.comp_counts) != expected_counts:
        raise _inconsistent(
            "cursor compensatory counts do not match the awarded picks",
            cursor=dict(state.cursor.comp_counts),
            comp_picks=expected_counts,
        )

    if state.draft_order and len(state.draft_order) != TEAMS_PER_ROUND * MAX_ROUNDS:
        raise _inconsistent("draft order has the wrong length", length=len(state.draft_order))

    if state.picks_made < 0 or state.picks_made > state.pick_budget:
        raise _inconsistent("picks made outside the pick budget", picks_made=state.picks_made)

    # picks consumed so far = slots before the cursor (+1 once the last slot is used)
    consumed = overall_pick_number(state.cursor.round, state.cursor.pick, state.cursor.comp_counts) - 1
    if state.cursor.is_complete:
        consumed += 1
    if state.picks_made != consumed:
        raise _inconsistent(
            "picks made does not match the cursor position",
            picks_made=state.picks_made,
            cursor=state.cursor.to_dict(),
        )

    if state.completion.is_locked and state.prospects:
        raise _inconsistent("locked draft still holds prospects", prospects=len(state.prospects))
    if state.is_active and state.is_completed:
        raise _inconsistent("draft is active and completed at the same time")
    return state


def state_from_dict(d: Mapping[str, Any]) -> DraftState:
    """Rehydrate a snapshot; raises DraftInvariantError when it is inconsistent."""
    if not isinstance(d, Mapping):
        raise _inconsistent("snapshot must be a mapping")
    try:
        state = _build_state(d)
    except (TypeError, ValueError, KeyError) as exc:
        raise _inconsistent(f"malformed snapshot: {exc}") from exc
    return validate_state(state)


def _build_state(d: Mapping[str, Any]) -> DraftState:
    return DraftState(
        season=int(d.get("season") or 0),
        is_active=bool(d.get("is_active", False)),
        is_order_locked=bool(d.get("is_order_locked", False)),
        cursor=PickCursor.from_dict(d.get("cursor") or {}),
        draft_order=tuple(str(t) for t in (d.get("draft_order") or [])),
        team_names={str(k): str(v) for k, v in dict(d.get("team_names") or {}).items()},
        prospects=tuple(Prospect.from_dict(p) for p in (d.get("prospects") or [])),
        comp_picks=tuple(CompPick.from_dict(c) for c in (d.get("comp_picks") or [])),
        pick_ledger=tuple(DraftPickEntry.from_dict(e) for e in (d.get("pick_ledger") or [])),
        drafted=tuple(PlayerRecord.from_dict(p) for p in (d.get("drafted") or [])),
        picks_made=int(d.get("picks_made") or 0),
        scouting_points_available=int(d.get("scouting_points_available") or 0),
        completion=CompletionState.from_dict(d.get("completion") or {}),
        version=int(d.get("version") or 0),
    )
