from __future__ import annotations

"""Team positional needs (pure).

A need is a position where the roster is thinnest relative to its healthy
depth target. Positions below target always rank ahead of positions at or
above it, so a team always reports `limit` needs.
"""

import random
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import MAX_TEAM_NEEDS, POSITION_DEPTH_TARGETS
from .types import TeamId, norm_team_id


def _row(player: Any) -> Mapping[str, Any]:
    if isinstance(player, Mapping):
        return player
    to_dict = getattr(player, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"roster entry must be a mapping or record, got {type(player).__name__}")


def team_roster(roster: Iterable[Any], team_id: TeamId, *, active_only: bool = True) -> List[Mapping[str, Any]]:
    tid = norm_team_id(team_id)
    out: List[Mapping[str, Any]] = []
    for p in roster or []:
        row = _row(p)
        if norm_team_id(row.get("team_id")) != tid:
            continue
        if active_only and str(row.get("status") or "active") != "active":
            continue
        out.append(row)
    return out


def position_counts(roster: Iterable[Any], team_id: TeamId) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for row in team_roster(roster, team_id):
        pos = str(row.get("position") or "").upper()
        if pos:
            counts[pos] = counts.get(pos, 0) + 1
    return counts


def analyze_team_needs(
    team_id: TeamId,
    roster: Iterable[Any],
    *,
    rng: Optional[random.Random] = None,
    limit: int = MAX_TEAM_NEEDS,
) -> List[str]:
    """Positions the team should address, most urgent first.

    With an rng, positions with the same fill ratio are shuffled; without one
    they keep depth-table order.
    """
    counts = position_counts(roster, team_id)
    rows = []
    for idx, (pos, target) in enumerate(POSITION_DEPTH_TARGETS):
        fill = counts.get(pos, 0) / float(target)
        tiebreak = rng.random() if rng is not None else float(idx)
        rows.append((fill >= 1.0, fill, tiebreak, pos))
    rows.sort()
    return [pos for _, _, _, pos in rows[: max(0, int(limit))]]
