from __future__ import annotations

"""Pre-draft roster audit.

Checks that a team has enough room under the offseason roster limit for every
pick it currently owns, and flags positions with nobody on the roster.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence

from .config import AUDIT_TIGHT_SPOTS, MAX_ROSTER_SIZE
from .needs import team_roster
from .order import picks_owned_by_team
from .types import DraftPickEntry, Position, TeamId, norm_team_id


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


@dataclass(frozen=True, slots=True)
class DraftAuditResult:
    team_id: TeamId
    can_enter_draft: bool
    current_roster_count: int
    max_roster_size: int
    available_spots: int
    draft_picks_count: int
    spots_needed: int
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "can_enter_draft": bool(self.can_enter_draft),
            "current_roster_count": int(self.current_roster_count),
            "max_roster_size": int(self.max_roster_size),
            "available_spots": int(self.available_spots),
            "draft_picks_count": int(self.draft_picks_count),
            "spots_needed": int(self.spots_needed),
            "recommendations": list(self.recommendations),
        }


def perform_pre_draft_audit(
    team_id: TeamId,
    roster: Iterable[Any],
    ledger: Sequence[DraftPickEntry],
    season: int,
) -> DraftAuditResult:
    tid = norm_team_id(team_id)
    current = team_roster(roster, tid)
    current_count = len(current)
    available = MAX_ROSTER_SIZE - current_count
    picks = len(picks_owned_by_team(ledger, tid, year=season))
    spots_needed = max(0, picks - available)
    can_enter = spots_needed == 0

    recs: List[str] = []
    if not can_enter:
        recs.append(f"Need to free up {_plural(spots_needed, 'roster spot')} before the draft")
        recs.append("Cut low-rated players from the roster")
        recs.append("Trade players to other teams")
        recs.append("Release players nearing retirement")
    else:
        after = available - picks
        recs.append("Ready to enter the draft")
        recs.append(f"{_plural(after, 'spot')} will remain after the draft")
        if after < AUDIT_TIGHT_SPOTS:
            recs.append("Consider freeing more space for post-draft flexibility")

    present = {str(r.get("position") or "").upper() for r in current}
    for pos in Position:
        if pos.value not in present:
            recs.append(f"No {pos.value}s on roster - consider drafting one")

    return DraftAuditResult(
        team_id=tid,
        can_enter_draft=can_enter,
        current_roster_count=current_count,
        max_roster_size=MAX_ROSTER_SIZE,
        available_spots=available,
        draft_picks_count=picks,
        spots_needed=spots_needed,
        recommendations=recs,
    )
