from __future__ import annotations

"""Draft standings utilities (pure).

This module normalizes final regular season records supplied by the season
subsystem and provides the deterministic "worst -> best" ranking used by the
draft order.

Input contract:
  A sequence of TeamStanding, or of dict rows with keys
  team_id, name, wins, losses, ties, power_ranking.

Design:
 - No I/O here. This module is pure.
 - Win percentage is compared exactly (Fraction) so that 9-8 and 9-8-0 never
   drift apart through float rounding.
"""

from fractions import Fraction
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .types import TeamId, TeamStanding


def coerce_standings(rows: Iterable[Any]) -> List[TeamStanding]:
    """Accept TeamStanding or mapping rows; drop rows without a team id."""
    out: List[TeamStanding] = []
    seen: set[str] = set()
    for row in rows or []:
        if isinstance(row, TeamStanding):
            st = row
        elif isinstance(row, Mapping):
            st = TeamStanding.from_dict(row)
        else:
            raise TypeError(f"standing row must be TeamStanding or mapping, got {type(row).__name__}")
        if not st.team_id or st.team_id in seen:
            continue
        seen.add(st.team_id)
        out.append(st)
    return out


def win_fraction(st: TeamStanding) -> Fraction:
    """Exact win percentage; ties count half. 0 games -> 0."""
    gp = st.games_played
    if gp <= 0:
        return Fraction(0)
    return Fraction(2 * st.wins + st.ties, 2 * gp)


def _ordering_key(st: TeamStanding) -> Tuple[Fraction, int, int, int, str]:
    # worst first: lower win%, fewer wins, more losses, higher power ranking number, name
    return (win_fraction(st), st.wins, -st.losses, -st.power_ranking, st.name)


def rank_teams_worst_to_best(standings: Sequence[Any]) -> List[TeamId]:
    """Return team ids sorted from worst -> best.

    Tie handling (applied in order):
      - fewer wins first
      - more losses first
      - higher power ranking number (worse ranked) first
      - team name, lexical
    """
    rows = coerce_standings(standings)
    return [st.team_id for st in sorted(rows, key=_ordering_key)]


def rank_teams_best_to_worst(standings: Sequence[Any]) -> List[TeamId]:
    return list(reversed(rank_teams_worst_to_best(standings)))


def standings_by_team(standings: Sequence[Any]) -> Dict[TeamId, TeamStanding]:
    return {st.team_id: st for st in coerce_standings(standings)}
