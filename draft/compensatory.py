from __future__ import annotations

"""Compensatory pick allocation ("net loss" formula).

Turns the prior signing period's free-agency ledger into the compensatory
picks appended to rounds 3..7.

Pipeline (deterministic, no randomness):
  1) qualification filter (UFA, expired naturally, signed before deadline,
     APY >= MIN_QUALIFYING_APY); failing moves neither cost nor earn picks
  2) valuation (APY in millions x snap bonus x honors bonus x 100)
  3) round by percentile over all qualifying moves, value descending
  4) per-team lost/gained ledgers
  5) cancellation: each gained player cancels at most one lost player
       A. same round
       B. a larger round number (lower tier)
       C. the highest value lost player left, regardless of round
  6) top MAX_COMP_PICKS_PER_TEAM per team, league-wide value order,
     truncated to MAX_COMP_PICKS_TOTAL

Rule C can let a low-value signing cancel a high-value loss. That matches the
formula this league has always used and is kept as is.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .config import (
    ALL_PRO_BONUS,
    CFA_VALUE_SCALE,
    COMP_ROUND_CUTOFFS,
    COMP_ROUNDS,
    MAX_COMP_PICKS_PER_TEAM,
    MAX_COMP_PICKS_TOTAL,
    MIN_QUALIFYING_APY,
    PRO_BOWL_BONUS,
    SNAP_BONUS_STEPS,
)
from .types import CompPick, DraftPickEntry, FreeAgencyTransaction, TeamId

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompensatoryCandidate:
    """Qualifying transaction annotated for one allocation run."""

    transaction: FreeAgencyTransaction
    value: float
    projected_round: Optional[int] = None


@dataclass(slots=True)
class _TeamLedger:
    lost: List[CompensatoryCandidate]
    gained: List[CompensatoryCandidate]


def qualifies(tx: FreeAgencyTransaction) -> bool:
    return bool(
        tx.is_unrestricted_free_agent
        and tx.contract_expired_naturally
        and tx.signed_before_deadline
        and float(tx.average_yearly_value) >= float(MIN_QUALIFYING_APY)
    )


def cfa_value(tx: FreeAgencyTransaction) -> float:
    """Value score; salary dominates, snap share and honors multiply."""
    score = float(tx.average_yearly_value) / 1_000_000.0

    for floor, mult in SNAP_BONUS_STEPS:
        if float(tx.snap_percentage) > floor:
            score *= mult
            break

    if tx.is_all_pro:
        score *= ALL_PRO_BONUS
    elif tx.is_pro_bowl:
        score *= PRO_BOWL_BONUS

    return score * CFA_VALUE_SCALE


def round_for_percentile(percentile: float) -> Optional[int]:
    for cutoff, round_no in COMP_ROUND_CUTOFFS:
        if percentile >= cutoff:
            return int(round_no)
    return None


def _coerce_transactions(transactions: Iterable[Any]) -> List[FreeAgencyTransaction]:
    out: List[FreeAgencyTransaction] = []
    for tx in transactions or []:
        if isinstance(tx, FreeAgencyTransaction):
            out.append(tx)
        elif isinstance(tx, Mapping):
            out.append(FreeAgencyTransaction.from_dict(tx))
        else:
            raise TypeError(f"transaction must be FreeAgencyTransaction or mapping, got {type(tx).__name__}")
    return out


def _ranked_candidates(transactions: Iterable[Any]) -> List[CompensatoryCandidate]:
    """Qualifying candidates, value descending, rounds assigned (None = no pick)."""
    cands = [
        CompensatoryCandidate(transaction=tx, value=cfa_value(tx))
        for tx in _coerce_transactions(transactions)
        if qualifies(tx)
    ]
    # stable: equal values keep ledger order
    cands.sort(key=lambda c: c.value, reverse=True)
    n = len(cands)
    for i, c in enumerate(cands):
        c.projected_round = round_for_percentile(1.0 - i / n)
    return cands


def _cancel(team_id: TeamId, ledger: _TeamLedger) -> List[CompensatoryCandidate]:
    remaining = sorted(ledger.lost, key=lambda c: c.value, reverse=True)
    gained = sorted(ledger.gained, key=lambda c: c.value, reverse=True)

    for g in gained:
        if not remaining:
            break
        g_round = int(g.projected_round or 0)

        idx = next((i for i, c in enumerate(remaining) if c.projected_round == g_round), None)
        rule = "A"
        if idx is None:
            idx = next((i for i, c in enumerate(remaining) if int(c.projected_round or 8) > g_round), None)
            rule = "B"
        if idx is None:
            idx = 0
            rule = "C"

        cancelled = remaining.pop(idx)
        logger.debug(
            "COMP_CANCEL team=%s rule=%s gained_round=%s lost_round=%s lost_player=%s",
            team_id,
            rule,
            g_round,
            cancelled.projected_round,
            cancelled.transaction.player_id,
        )
    return remaining


def allocate_comp_picks(
    transactions: Iterable[Any],
    *,
    player_names: Optional[Mapping[str, str]] = None,
) -> List[CompPick]:
    """Compute compensatory picks for one draft, value descending.

    Never returns more than MAX_COMP_PICKS_TOTAL picks, more than
    MAX_COMP_PICKS_PER_TEAM for one team, or a round outside COMP_ROUNDS.
    """
    names = dict(player_names or {})
    cands = [c for c in _ranked_candidates(transactions) if c.projected_round is not None]
    if not cands:
        logger.info("COMP_PICKS_ALLOCATED total=0 qualifying=0")
        return []

    # insertion ordered: first team seen first
    ledgers: Dict[TeamId, _TeamLedger] = {}
    for c in cands:
        tx = c.transaction
        ledgers.setdefault(tx.old_team_id, _TeamLedger(lost=[], gained=[])).lost.append(c)
        ledgers.setdefault(tx.new_team_id, _TeamLedger(lost=[], gained=[])).gained.append(c)

    preliminary: List[CompPick] = []
    for team_id, ledger in ledgers.items():
        remaining = _cancel(team_id, ledger)
        for c in remaining[:MAX_COMP_PICKS_PER_TEAM]:
            pid = str(c.transaction.player_id)
            preliminary.append(
                CompPick(
                    team_id=c.transaction.old_team_id,
                    round=int(c.projected_round),
                    rank=int(math.floor(c.value)),
                    value=float(c.value),
                    player_id=pid,
                    player_name=names.get(pid) or "Unknown Player",
                )
            )

    preliminary.sort(key=lambda p: p.value, reverse=True)
    final = preliminary[:MAX_COMP_PICKS_TOTAL]

    logger.info(
        "COMP_PICKS_ALLOCATED total=%d qualifying=%d teams=%d by_round=%s",
        len(final),
        len(cands),
        len(ledgers),
        comp_picks_per_round(final),
    )
    return final


def comp_picks_per_round(comp_picks: Sequence[CompPick]) -> Dict[int, int]:
    """round -> count, every compensatory round present (0 when none)."""
    counts: Dict[int, int] = {int(r): 0 for r in COMP_ROUNDS}
    for p in comp_picks:
        counts[int(p.round)] = counts.get(int(p.round), 0) + 1
    return counts


def comp_picks_for_round(comp_picks: Sequence[CompPick], round_no: int) -> List[CompPick]:
    """Compensatory picks of one round in slot order (value descending)."""
    return sorted(
        (p for p in comp_picks if int(p.round) == int(round_no)),
        key=lambda p: p.value,
        reverse=True,
    )


def describe_top_candidates(transactions: Iterable[Any], *, limit: int = 10) -> List[Dict[str, Any]]:
    """Diagnostics: top qualifying moves by value with their projected round."""
    rows: List[Dict[str, Any]] = []
    for i, c in enumerate(_ranked_candidates(transactions)[: max(0, int(limit))], start=1):
        tx = c.transaction
        row = {
            "rank": i,
            "player_id": tx.player_id,
            "old_team_id": tx.old_team_id,
            "new_team_id": tx.new_team_id,
            "value": round(c.value, 2),
            "apy_millions": round(float(tx.average_yearly_value) / 1_000_000.0, 1),
            "snap_percentage": round(float(tx.snap_percentage) * 100.0),
            "is_pro_bowl": bool(tx.is_pro_bowl),
            "is_all_pro": bool(tx.is_all_pro),
            "projected_round": c.projected_round,
        }
        logger.debug("COMP_DIAG %s", row)
        rows.append(row)
    return rows


def inject_comp_picks(
    ledger: Sequence[DraftPickEntry],
    comp_picks: Sequence[CompPick],
    year: int,
) -> List[DraftPickEntry]:
    """Return a new ledger with one compensatory entry per awarded pick.

    Existing compensatory entries for the year are replaced, so running this
    twice for the same draft does not duplicate picks.
    """
    y = int(year)
    out = [e for e in ledger if not (e.is_compensatory and int(e.year) == y)]
    for r in COMP_ROUNDS:
        for p in comp_picks_for_round(comp_picks, r):
            out.append(
                DraftPickEntry(
                    year=y,
                    round=int(p.round),
                    original_team_id=p.team_id,
                    current_team_id=p.team_id,
                    notes=f"Compensatory pick (lost {p.player_name})",
                    is_compensatory=True,
                )
            )
    return out
