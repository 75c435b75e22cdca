from __future__ import annotations

"""Post-draft grading (pure).

Component grades use the plain letter scale (A/B/C/D/F). The overall grade is
the mean of the component grade points, re-bucketed on the same scale.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .config import EXPECTED_OVERALL_BY_ROUND, EXPECTED_OVERALL_DEFAULT, MAX_ROUNDS, MAX_STANDOUTS, REACH_MARGIN
from .players import PlayerRecord
from .types import DraftGrade, DraftPickEntry, StandoutPick, StandoutType, TeamId, norm_team_id


def _bucket(score: float, cutoffs: Tuple[float, float, float, float]) -> DraftGrade:
    a, b, c, d = cutoffs
    if score >= a:
        return DraftGrade.A
    if score >= b:
        return DraftGrade.B
    if score >= c:
        return DraftGrade.C
    if score >= d:
        return DraftGrade.D
    return DraftGrade.F


def expected_overall_range(round_no: Optional[int]) -> Tuple[int, int]:
    return EXPECTED_OVERALL_BY_ROUND.get(int(round_no or MAX_ROUNDS), EXPECTED_OVERALL_DEFAULT)


def _pick_round(p: PlayerRecord) -> int:
    return int(p.draft_round or MAX_ROUNDS)


def needs_grade(needs: Sequence[str], picks: Iterable[PlayerRecord]) -> DraftGrade:
    """Picks at a need position, as a share of the number of needs.

    Every such pick counts, so two picks at one need position count twice.
    """
    wanted = [str(n).upper() for n in needs]
    hits = sum(1 for p in picks if str(p.position).upper() in wanted)
    share = hits / max(len(wanted), 1)
    return _bucket(share, (0.8, 0.6, 0.4, 0.2))


def pick_value_score(p: PlayerRecord) -> int:
    lo, hi = expected_overall_range(_pick_round(p))
    ovr = int(p.overall)
    if ovr > hi + 5:
        return 2
    if ovr > hi:
        return 1
    if ovr < lo - 5:
        return -2
    if ovr < lo:
        return -1
    return 0


def value_grade(picks: Sequence[PlayerRecord]) -> DraftGrade:
    total = sum(pick_value_score(p) for p in picks)
    avg = total / max(len(picks), 1)
    return _bucket(avg, (1.5, 0.5, -0.5, -1.5))


def future_assets_grade(ledger: Sequence[DraftPickEntry], team_id: TeamId, *, next_year: int) -> DraftGrade:
    """Net next-year picks held vs. originally owned."""
    tid = norm_team_id(team_id)
    held = sum(1 for e in ledger if int(e.year) == int(next_year) and e.current_team_id == tid)
    original = sum(1 for e in ledger if int(e.year) == int(next_year) and e.original_team_id == tid)
    return _bucket(float(held - original), (3, 1, -1, -3))


def overall_grade(needs: DraftGrade, value: DraftGrade, assets: DraftGrade) -> DraftGrade:
    avg = (needs.points + value.points + assets.points) / 3.0
    return _bucket(avg, (3.5, 2.5, 1.5, 0.5))


def _steal_margin(p: PlayerRecord) -> int:
    return int(p.overall) - expected_overall_range(_pick_round(p))[1]


def _reach_margin(p: PlayerRecord) -> int:
    return int(p.overall) - expected_overall_range(_pick_round(p))[0]


def identify_standouts(picks: Sequence[PlayerRecord]) -> List[StandoutPick]:
    """Steal, reach (only if clearly below the round floor), high upside.

    max()/min() keep the earliest pick on ties.
    """
    if not picks:
        return []
    out: List[StandoutPick] = []

    steal = max(picks, key=_steal_margin)
    out.append(
        StandoutPick(
            player_id=steal.id,
            player_name=steal.name,
            type=StandoutType.STEAL,
            explanation=f"Excellent value - {steal.overall} overall in round {steal.draft_round}",
        )
    )

    reach = min(picks, key=_reach_margin)
    if _reach_margin(reach) < -REACH_MARGIN:
        out.append(
            StandoutPick(
                player_id=reach.id,
                player_name=reach.name,
                type=StandoutType.REACH,
                explanation=f"Reached for need - {reach.overall} overall in round {reach.draft_round}",
            )
        )

    upside = max(picks, key=lambda p: int(p.potential))
    out.append(
        StandoutPick(
            player_id=upside.id,
            player_name=upside.name,
            type=StandoutType.POTENTIAL,
            explanation=f"High upside - {upside.potential} potential ceiling",
        )
    )
    return out[:MAX_STANDOUTS]
