from __future__ import annotations

"""Draft completion safeguards.

Phases move forward only:

    ACTIVE -> COMPLETING -> LOCKED

- validate_after_pick() runs after every consumed slot. Breaking the pick
  budget or the round/pick bounds is a logic defect and raises
  DraftInvariantError; nothing here tries to recover from it.
- complete_draft() converts every prospect left on the board into an
  undrafted free agent, locks the draft and grades every team. It is guarded
  by the LOCKED phase: a second call is a no-op that converts nobody.
- A locked draft can only be opened again from week DRAFT_UNLOCK_WEEK of the
  regular season.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from config import ALL_TEAM_IDS

from .config import DRAFT_UNLOCK_WEEK, MAX_ROUNDS, REGULAR_SEASON_PHASE, TEAMS_PER_ROUND
from .errors import (
    DRAFT_LOCKED,
    DRAFT_UNRESOLVED,
    PICK_BUDGET_EXCEEDED,
    PICK_OUT_OF_RANGE,
    ROUND_OUT_OF_RANGE,
    SUMMARY_PENDING,
    UDFA_CONVERSION_FAILED,
    DraftInvariantError,
    DraftResult,
)
from .grades import future_assets_grade, identify_standouts, needs_grade, overall_grade, value_grade
from .needs import analyze_team_needs
from .players import PlayerRecord, create_udfa_player
from .pool import Prospect
from .state import CompletionState, DraftState
from .types import CompletionPhase, DraftSummary, TeamId, norm_team_id

logger = logging.getLogger(__name__)

LOCK_REASON = "Draft completed - locked until week 2 of the regular season"


def validate_after_pick(
    overall_pick_count: int,
    round_no: int,
    pick: int,
    comp_counts: Mapping[int, int],
) -> None:
    """Fail fast if the draft has gone past its fixed pick budget."""
    comps = sum(int(v or 0) for v in comp_counts.values())
    budget = TEAMS_PER_ROUND * MAX_ROUNDS + comps
    if int(overall_pick_count) > budget:
        raise DraftInvariantError(
            PICK_BUDGET_EXCEEDED,
            f"draft exceeded {budget} picks (current: {overall_pick_count})",
            {"overall_pick_count": int(overall_pick_count), "budget": budget},
        )
    if int(round_no) > MAX_ROUNDS or int(round_no) < 1:
        raise DraftInvariantError(ROUND_OUT_OF_RANGE, f"draft round {round_no} outside 1..{MAX_ROUNDS}")
    max_pick = TEAMS_PER_ROUND + int(comp_counts.get(int(round_no), 0) or 0)
    if int(pick) > max_pick or int(pick) < 1:
        raise DraftInvariantError(
            PICK_OUT_OF_RANGE,
            f"pick {pick} exceeded {max_pick} in round {round_no}",
            {"round": int(round_no), "pick": int(pick), "max_pick": max_pick},
        )


@dataclass(frozen=True, slots=True)
class CompletionOutcome:
    state: DraftState
    free_agents: Tuple[PlayerRecord, ...] = ()
    already_completed: bool = False


def convert_undrafted(prospects: Sequence[Prospect], *, rng: random.Random) -> List[PlayerRecord]:
    return [create_udfa_player(p, rng=rng) for p in prospects]


def _check_udfa_conversion(remaining: Sequence[Prospect], expected: int, produced: int) -> None:
    if produced != expected:
        logger.warning("UDFA_COUNT_MISMATCH added=%d expected=%d", produced, expected)
    if remaining:
        raise DraftInvariantError(
            UDFA_CONVERSION_FAILED,
            f"{len(remaining)} prospects still remain in the draft pool",
            {"remaining": [p.id for p in remaining]},
        )


def _summary_team_ids(state: DraftState, team_ids: Optional[Iterable[TeamId]]) -> List[TeamId]:
    if team_ids is not None:
        ids = [norm_team_id(t) for t in team_ids]
    elif state.draft_order:
        ids = [norm_team_id(t) for t in state.draft_order[:TEAMS_PER_ROUND]]
    else:
        ids = [norm_team_id(t) for t in ALL_TEAM_IDS]
    seen: set[str] = set()
    out: List[TeamId] = []
    for t in ids:
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out


def build_team_summary(
    state: DraftState,
    team_id: TeamId,
    *,
    roster: Iterable[Any],
    rng: Optional[random.Random] = None,
) -> DraftSummary:
    tid = norm_team_id(team_id)
    picks = [p for p in state.drafted if p.team_id == tid]
    needs = analyze_team_needs(tid, roster, rng=rng)
    ng = needs_grade(needs, picks)
    vg = value_grade(picks)
    fg = future_assets_grade(state.pick_ledger, tid, next_year=int(state.season) + 1)
    return DraftSummary(
        team_id=tid,
        team_name=state.team_name(tid),
        season=int(state.season),
        total_picks=len(picks),
        drafted_player_ids=tuple(p.id for p in picks),
        needs_grade=ng,
        value_grade=vg,
        future_assets_grade=fg,
        overall_grade=overall_grade(ng, vg, fg),
        standout_picks=tuple(identify_standouts(picks)),
    )


def complete_draft(
    state: DraftState,
    *,
    roster: Iterable[Any] = (),
    rng: random.Random,
    team_ids: Optional[Iterable[TeamId]] = None,
) -> DraftResult:
    """Finalize the draft. Value: CompletionOutcome.

    roster is the league roster as it stood before the draft; it only feeds
    the needs analysis behind the needs grade.
    """
    if state.completion.is_locked:
        logger.info("DRAFT_COMPLETION_SKIPPED season=%s already locked", state.season)
        return DraftResult.success(CompletionOutcome(state=state, already_completed=True))

    if state.is_active and not state.cursor.is_complete:
        return DraftResult.rejected(
            DRAFT_UNRESOLVED,
            "Draft is still in progress",
            round=state.cursor.round,
            pick=state.cursor.pick,
        )

    completing = replace(
        state,
        is_active=False,
        completion=replace(state.completion, phase=CompletionPhase.COMPLETING),
    )

    expected = len(completing.prospects)
    free_agents = convert_undrafted(completing.prospects, rng=rng)
    converted = {p.id for p in free_agents}
    remaining = tuple(p for p in completing.prospects if p.id not in converted)
    _check_udfa_conversion(remaining, expected, len(free_agents))

    roster_rows = list(roster or [])
    cleared = replace(completing, prospects=remaining)
    summaries = tuple(
        build_team_summary(cleared, t, roster=roster_rows, rng=rng) for t in _summary_team_ids(cleared, team_ids)
    )

    locked = replace(
        cleared,
        completion=CompletionState(
            phase=CompletionPhase.LOCKED,
            summaries=summaries,
            showing_summary=True,
            can_advance_week=False,
            lock_reason=LOCK_REASON,
            udfa_count=len(free_agents),
        ),
        version=state.version + 1,
    )
    logger.info(
        "DRAFT_COMPLETED season=%s picks_made=%d udfa=%d summaries=%d",
        locked.season,
        locked.picks_made,
        len(free_agents),
        len(summaries),
    )
    return DraftResult.success(CompletionOutcome(state=locked, free_agents=tuple(free_agents)))


def validate_draft_access(state: DraftState, *, season_phase: str, week: int) -> DraftResult:
    if not state.completion.is_locked:
        return DraftResult.success(True)
    if str(season_phase) == REGULAR_SEASON_PHASE and int(week) >= DRAFT_UNLOCK_WEEK:
        return DraftResult.success(True)
    return DraftResult.rejected(DRAFT_LOCKED, state.completion.lock_reason or LOCK_REASON)


def dismiss_summary(state: DraftState) -> DraftResult:
    """Close the mandatory summary and allow week advancement again."""
    if not state.completion.is_locked:
        return DraftResult.rejected(DRAFT_UNRESOLVED, "Draft has not been completed")
    if not state.completion.showing_summary and state.completion.can_advance_week:
        return DraftResult.success(state)
    return DraftResult.success(
        replace(
            state,
            completion=replace(state.completion, showing_summary=False, can_advance_week=True),
            version=state.version + 1,
        )
    )


def can_advance_week(state: DraftState) -> DraftResult:
    if state.is_active:
        return DraftResult.rejected(DRAFT_UNRESOLVED, "Draft in progress - finish the draft before advancing")
    if state.completion.phase == CompletionPhase.COMPLETING:
        return DraftResult.rejected(DRAFT_UNRESOLVED, "Draft completion has not finished")
    if state.completion.is_locked and not state.completion.can_advance_week:
        return DraftResult.rejected(SUMMARY_PENDING, "Review the draft summary before advancing")
    return DraftResult.success(True)
