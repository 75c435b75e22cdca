from __future__ import annotations

"""Draft order construction (pure).

Responsibilities:
  - From final standings -> one worst->best order repeated for every round
    (fixed order, no snake).
  - Slot resolution: (round, pick) -> original team, compensatory award and
    the drafting team according to the pick ownership ledger.

Layout of a round:
  slots 1..32            base picks, in the repeated worst->best order
  slots 33..32+comp(r)   compensatory picks for round r, value descending

Note:
  This module outputs "original order". The drafting team (pick owner after
  trades) is read from the ledger in resolve_slot().
"""

import logging
from typing import List, Mapping, Optional, Sequence

from .config import MAX_ROUNDS, TEAMS_PER_ROUND
from .compensatory import comp_picks_for_round
from .errors import PICK_OUT_OF_RANGE, ROUND_OUT_OF_RANGE, DraftInvariantError
from .standings import rank_teams_worst_to_best
from .types import CompPick, DraftPickEntry, PickSlot, TeamId, norm_team_id

logger = logging.getLogger(__name__)


def build_draft_order(standings: Sequence[object], *, rounds: int = MAX_ROUNDS) -> List[TeamId]:
    """Return a flat, round-major list of original team ids (rounds x teams)."""
    rounds_i = int(rounds)
    if rounds_i < 1:
        raise ValueError(f"rounds must be >= 1, got {rounds!r}")
    base = rank_teams_worst_to_best(standings)
    order: List[TeamId] = []
    for _ in range(rounds_i):
        order.extend(base)
    logger.info("DRAFT_ORDER_ESTABLISHED teams=%d rounds=%d first=%s", len(base), rounds_i, base[:1])
    return order


def max_pick_for_round(round_no: int, comp_counts: Mapping[int, int]) -> int:
    """32 base slots plus the round's compensatory supplement."""
    return int(TEAMS_PER_ROUND) + int(comp_counts.get(int(round_no), 0) or 0)


def overall_pick_number(round_no: int, pick: int, comp_counts: Mapping[int, int]) -> int:
    """1-based overall pick number, counting compensatory slots of earlier rounds."""
    r = int(round_no)
    p = int(pick)
    if r < 1 or r > MAX_ROUNDS:
        raise DraftInvariantError(ROUND_OUT_OF_RANGE, f"round {r} outside 1..{MAX_ROUNDS}")
    if p < 1 or p > max_pick_for_round(r, comp_counts):
        raise DraftInvariantError(PICK_OUT_OF_RANGE, f"pick {p} outside round {r}", {"round": r, "pick": p})
    before = sum(max_pick_for_round(rr, comp_counts) for rr in range(1, r))
    return before + p


def _ledger_owner(
    ledger: Sequence[DraftPickEntry],
    *,
    year: int,
    round_no: int,
    original_team_id: TeamId,
    is_compensatory: bool,
    comp_index: int = 0,
) -> Optional[TeamId]:
    # Comp entries for the same (team, round) are matched in ledger order.
    seen = 0
    for e in ledger:
        if int(e.year) != int(year) or int(e.round) != int(round_no):
            continue
        if e.original_team_id != original_team_id or bool(e.is_compensatory) != bool(is_compensatory):
            continue
        if is_compensatory and seen < comp_index:
            seen += 1
            continue
        return e.current_team_id or None
    return None


def resolve_slot(
    *,
    year: int,
    round_no: int,
    pick: int,
    draft_order: Sequence[TeamId],
    comp_picks: Sequence[CompPick],
    comp_counts: Mapping[int, int],
    pick_ledger: Sequence[DraftPickEntry] = (),
) -> PickSlot:
    """Who is on the clock for (round_no, pick)."""
    r = int(round_no)
    p = int(pick)
    overall_no = overall_pick_number(r, p, comp_counts)

    if p <= TEAMS_PER_ROUND:
        idx = (r - 1) * TEAMS_PER_ROUND + (p - 1)
        if idx >= len(draft_order):
            raise DraftInvariantError(
                PICK_OUT_OF_RANGE,
                "draft order shorter than the current slot",
                {"round": r, "pick": p, "order_len": len(draft_order)},
            )
        original = norm_team_id(draft_order[idx])
        owner = _ledger_owner(
            pick_ledger, year=year, round_no=r, original_team_id=original, is_compensatory=False
        )
        return PickSlot(
            round=r,
            pick=p,
            overall_no=overall_no,
            original_team_id=original,
            drafting_team_id=owner or original,
        )

    in_round = comp_picks_for_round(comp_picks, r)
    comp_idx = p - TEAMS_PER_ROUND - 1
    if comp_idx >= len(in_round):
        raise DraftInvariantError(PICK_OUT_OF_RANGE, f"no compensatory pick at round {r} pick {p}")
    cp = in_round[comp_idx]
    # nth comp pick of this team within the round -> nth matching ledger row
    nth = sum(1 for x in in_round[:comp_idx] if x.team_id == cp.team_id)
    owner = _ledger_owner(
        pick_ledger,
        year=year,
        round_no=r,
        original_team_id=cp.team_id,
        is_compensatory=True,
        comp_index=nth,
    )
    return PickSlot(
        round=r,
        pick=p,
        overall_no=overall_no,
        original_team_id=cp.team_id,
        drafting_team_id=owner or cp.team_id,
        is_compensatory=True,
        comp_pick=cp,
    )


def picks_owned_by_team(ledger: Sequence[DraftPickEntry], team_id: TeamId, *, year: int) -> List[DraftPickEntry]:
    tid = norm_team_id(team_id)
    return [e for e in ledger if int(e.year) == int(year) and e.current_team_id == tid]


def default_pick_ledger(draft_order: Sequence[TeamId], *, year: int, rounds: int = MAX_ROUNDS) -> List[DraftPickEntry]:
    """One untraded entry per (team, round) for a draft year."""
    teams: List[TeamId] = []
    for t in draft_order[:TEAMS_PER_ROUND]:
        tid = norm_team_id(t)
        if tid not in teams:
            teams.append(tid)
    out: List[DraftPickEntry] = []
    for r in range(1, int(rounds) + 1):
        for tid in teams:
            out.append(DraftPickEntry(year=int(year), round=r, original_team_id=tid, current_team_id=tid))
    return out

