from __future__ import annotations

"""Draft session operations (pure).

Every operation takes a DraftState and returns a DraftResult. On success the
value is the new state (or a PickResult carrying it); on failure the input
state is untouched. Only invariant breaks raise (DraftInvariantError).

Flow:
    initialize_draft_state -> prepare_draft -> start_draft
        -> (make_pick | advance_pick)* until the cursor completes
        -> completion.complete_draft
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .compensatory import allocate_comp_picks, comp_picks_per_round, inject_comp_picks
from .completion import validate_after_pick
from .config import DRAFT_WEEK, MAX_ROUNDS, SCOUTING_POINTS_PER_DRAFT, TEAMS_PER_ROUND
from .cursor import PickCursor
from .errors import (
    BAD_PAYLOAD,
    DRAFT_ALREADY_ACTIVE,
    DRAFT_ALREADY_COMPLETED,
    DRAFT_NOT_ACTIVE,
    DRAFT_WRONG_WEEK,
    INSUFFICIENT_SCOUTING_POINTS,
    INSUFFICIENT_TEAMS,
    NOT_ON_THE_CLOCK,
    ORDER_NOT_LOCKED,
    PROSPECT_NOT_AVAILABLE,
    DraftResult,
)
from .order import build_draft_order, default_pick_ledger, resolve_slot
from .outcome import resolve_outcome
from .players import PlayerRecord, create_drafted_player
from .pool import coerce_prospects, generate_draft_class
from .standings import coerce_standings
from .state import DraftState, state_from_dict, state_to_dict
from .types import CompletionPhase, DraftOutcome, DraftPickEntry, PickSlot, TeamId, norm_team_id

logger = logging.getLogger(__name__)

_SENSITIVE_KEYS: Set[str] = {"true_overall", "true_potential", "attributes"}


def _deep_drop_keys(obj: Any, keys: Set[str]) -> Any:
    """Recursively remove sensitive keys from nested dict/list structures."""
    if isinstance(obj, dict):
        return {str(k): _deep_drop_keys(v, keys) for k, v in obj.items() if str(k) not in keys}
    if isinstance(obj, list):
        return [_deep_drop_keys(v, keys) for v in obj]
    return obj


@dataclass(frozen=True, slots=True)
class PickResult:
    state: DraftState
    slot: PickSlot
    player: Optional[PlayerRecord] = None
    outcome: Optional[DraftOutcome] = None
    forfeited: bool = False

    @property
    def draft_complete(self) -> bool:
        return self.state.cursor.is_complete

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slot": self.slot.to_dict(),
            "player": None if self.player is None else self.player.to_dict(),
            "outcome": None if self.outcome is None else self.outcome.to_dict(),
            "forfeited": bool(self.forfeited),
            "draft_complete": bool(self.draft_complete),
            "version": int(self.state.version),
        }


def initialize_draft_state(season: int) -> DraftState:
    return DraftState(season=int(season))


def prepare_draft(
    state: DraftState,
    standings: Sequence[Any],
    transactions: Iterable[Any],
    *,
    player_names: Optional[Mapping[str, str]] = None,
    pick_ledger: Optional[Sequence[DraftPickEntry]] = None,
    prospects: Optional[Sequence[Any]] = None,
    class_seed: Optional[int] = None,
) -> DraftResult:
    """Lock the order, award compensatory picks and load the prospect pool."""
    if state.is_completed:
        return DraftResult.rejected(DRAFT_ALREADY_COMPLETED, "Draft already completed")
    if state.is_active:
        return DraftResult.rejected(DRAFT_ALREADY_ACTIVE, "Draft already active")

    try:
        rows = coerce_standings(standings)
    except TypeError as exc:
        return DraftResult.invalid(BAD_PAYLOAD, str(exc))
    if len(rows) < TEAMS_PER_ROUND:
        return DraftResult.invalid(
            INSUFFICIENT_TEAMS,
            f"Draft needs {TEAMS_PER_ROUND} teams, got {len(rows)}",
            teams=len(rows),
        )
    if len(rows) > TEAMS_PER_ROUND:
        return DraftResult.invalid(BAD_PAYLOAD, f"Draft supports {TEAMS_PER_ROUND} teams, got {len(rows)}")

    order = build_draft_order(rows, rounds=MAX_ROUNDS)
    try:
        comp = allocate_comp_picks(transactions, player_names=player_names)
    except TypeError as exc:
        return DraftResult.invalid(BAD_PAYLOAD, str(exc))

    season = int(state.season)
    if pick_ledger is None:
        base_ledger: List[DraftPickEntry] = default_pick_ledger(order, year=season) + default_pick_ledger(
            order, year=season + 1
        )
    else:
        base_ledger = [e if isinstance(e, DraftPickEntry) else DraftPickEntry.from_dict(e) for e in pick_ledger]
    ledger = inject_comp_picks(base_ledger, comp, season)

    try:
        pool = coerce_prospects(prospects) if prospects is not None else generate_draft_class(season, seed=class_seed)
    except (TypeError, KeyError, ValueError) as exc:
        return DraftResult.invalid(BAD_PAYLOAD, f"bad prospect row: {exc}")

    counts = {r: n for r, n in comp_picks_per_round(comp).items() if n}
    new_state = replace(
        state,
        is_order_locked=True,
        cursor=PickCursor(comp_counts=counts),
        draft_order=tuple(order),
        team_names={st.team_id: st.name for st in rows},
        prospects=tuple(pool),
        comp_picks=tuple(comp),
        pick_ledger=tuple(ledger),
        drafted=(),
        picks_made=0,
        scouting_points_available=SCOUTING_POINTS_PER_DRAFT,
        version=state.version + 1,
    )
    logger.info(
        "DRAFT_PREPARED season=%s prospects=%d comp_picks=%d budget=%d",
        season,
        len(pool),
        len(comp),
        new_state.pick_budget,
    )
    return DraftResult.success(new_state)


def start_draft(state: DraftState, *, current_week: int) -> DraftResult:
    if state.is_completed:
        return DraftResult.rejected(DRAFT_ALREADY_COMPLETED, "Draft already completed")
    if int(current_week) != DRAFT_WEEK:
        return DraftResult.rejected(
            DRAFT_WRONG_WEEK,
            f"Draft not available (week {DRAFT_WEEK} only)",
            current_week=int(current_week),
        )
    if state.is_active:
        return DraftResult.rejected(DRAFT_ALREADY_ACTIVE, "Draft already active")
    if not state.is_order_locked:
        return DraftResult.invalid(ORDER_NOT_LOCKED, "Draft order has not been locked")

    logger.info("DRAFT_STARTED season=%s", state.season)
    return DraftResult.success(replace(state, is_active=True, version=state.version + 1))


def _check_pickable(state: DraftState) -> Optional[DraftResult]:
    if not state.is_active or state.cursor.is_complete:
        return DraftResult.invalid(DRAFT_NOT_ACTIVE, "Draft is not active")
    if not state.is_order_locked:
        return DraftResult.invalid(ORDER_NOT_LOCKED, "Draft order has not been locked")
    return None


def current_slot(state: DraftState) -> Optional[PickSlot]:
    """Who is on the clock; None outside an active draft."""
    if not state.is_active or state.cursor.is_complete or not state.draft_order:
        return None
    return resolve_slot(
        year=state.season,
        round_no=state.cursor.round,
        pick=state.cursor.pick,
        draft_order=state.draft_order,
        comp_picks=state.comp_picks,
        comp_counts=state.cursor.comp_counts,
        pick_ledger=state.pick_ledger,
    )


def _consume_slot(state: DraftState, **changes: Any) -> DraftState:
    picks_made = state.picks_made + 1
    validate_after_pick(picks_made, state.cursor.round, state.cursor.pick, state.cursor.comp_counts)
    cursor = state.cursor.advance()
    nxt = replace(state, cursor=cursor, picks_made=picks_made, version=state.version + 1, **changes)
    if cursor.is_complete:
        nxt = replace(nxt, is_active=False, completion=replace(nxt.completion, phase=CompletionPhase.COMPLETING))
        logger.info("DRAFT_ALL_PICKS_MADE season=%s picks_made=%d", nxt.season, picks_made)
    return nxt


def make_pick(state: DraftState, team_id: TeamId, prospect_id: str, *, rng: random.Random) -> DraftResult:
    """Apply a selection for the team on the clock. Value: PickResult."""
    blocked = _check_pickable(state)
    if blocked is not None:
        return blocked

    slot = current_slot(state)
    tid = norm_team_id(team_id)
    if slot is None or slot.drafting_team_id != tid:
        return DraftResult.invalid(
            NOT_ON_THE_CLOCK,
            f"{tid} is not on the clock",
            on_the_clock=None if slot is None else slot.drafting_team_id,
        )

    prospect = state.prospect(prospect_id)
    if prospect is None:
        return DraftResult.invalid(PROSPECT_NOT_AVAILABLE, f"Prospect {prospect_id} is not available")

    outcome = resolve_outcome(prospect, slot.round, prospect.true_overall, rng=rng)
    player = create_drafted_player(
        prospect,
        team_id=tid,
        round_no=slot.round,
        pick=slot.pick,
        overall_no=slot.overall_no,
        season=state.season,
        outcome=outcome,
    )
    nxt = _consume_slot(
        state,
        prospects=tuple(p for p in state.prospects if p.id != prospect.id),
        drafted=state.drafted + (player,),
    )
    logger.info(
        "DRAFT_PICK overall=%d round=%d pick=%d team=%s prospect=%s outcome=%s",
        slot.overall_no,
        slot.round,
        slot.pick,
        tid,
        prospect.id,
        outcome.category.value,
    )
    return DraftResult.success(PickResult(state=nxt, slot=slot, player=player, outcome=outcome))


def advance_pick(state: DraftState) -> DraftResult:
    """Forfeit the slot on the clock. Value: PickResult."""
    blocked = _check_pickable(state)
    if blocked is not None:
        return blocked
    slot = current_slot(state)
    nxt = _consume_slot(state)
    logger.info("DRAFT_PICK_FORFEITED overall=%d team=%s", slot.overall_no, slot.drafting_team_id)
    return DraftResult.success(PickResult(state=nxt, slot=slot, forfeited=True))


def spend_scouting_points(state: DraftState, prospect_id: str, points: int) -> DraftResult:
    try:
        pts = int(points)
    except (TypeError, ValueError):
        return DraftResult.invalid(BAD_PAYLOAD, f"points must be an integer, got {points!r}")
    if pts < 1:
        return DraftResult.invalid(BAD_PAYLOAD, "points must be at least 1")
    if state.completion.is_locked:
        return DraftResult.rejected(DRAFT_ALREADY_COMPLETED, "Draft already completed")
    if state.scouting_points_available < pts:
        return DraftResult.invalid(
            INSUFFICIENT_SCOUTING_POINTS,
            f"Only {state.scouting_points_available} scouting points left",
            available=state.scouting_points_available,
        )
    prospect = state.prospect(prospect_id)
    if prospect is None:
        return DraftResult.invalid(PROSPECT_NOT_AVAILABLE, f"Prospect {prospect_id} is not available")

    scouted = prospect.with_scouting(pts)
    return DraftResult.success(
        replace(
            state,
            prospects=tuple(scouted if p.id == prospect.id else p for p in state.prospects),
            scouting_points_available=state.scouting_points_available - pts,
            version=state.version + 1,
        )
    )


def state_to_public_dict(state: DraftState) -> Dict[str, Any]:
    """User-facing view: fog of war on prospects, summaries included."""
    slot = current_slot(state)
    return {
        "season": int(state.season),
        "is_active": bool(state.is_active),
        "is_order_locked": bool(state.is_order_locked),
        "cursor": state.cursor.to_dict(),
        "on_the_clock": None if slot is None else slot.to_dict(),
        "picks_made": int(state.picks_made),
        "pick_budget": int(state.pick_budget),
        "comp_picks": [c.to_dict() for c in state.comp_picks],
        "prospects": [p.to_public_dict() for p in state.prospects],
        "drafted": [_deep_drop_keys(p.to_dict(), _SENSITIVE_KEYS) for p in state.drafted],
        "scouting_points_available": int(state.scouting_points_available),
        "completion": state.completion.to_dict(),
        "version": int(state.version),
    }


__all__ = [
    "PickResult",
    "initialize_draft_state",
    "prepare_draft",
    "start_draft",
    "current_slot",
    "make_pick",
    "advance_pick",
    "spend_scouting_points",
    "state_to_dict",
    "state_from_dict",
    "state_to_public_dict",
]
