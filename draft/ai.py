from __future__ import annotations

"""Draft AI interfaces.

Shared protocol for AI draft policies plus the default best-player-available
policy. AI teams only see public information: the scouting range midpoint,
never a prospect's true ratings.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

from .pool import Prospect
from .types import PickSlot


class DraftAIPolicy(Protocol):
    def choose(self, prospects: Sequence[Prospect], slot: PickSlot) -> Optional[Prospect]:
        ...


def _board_key(p: Prospect) -> Tuple[float, int, str]:
    lo, hi = p.scouting_range
    rank = int(p.overall_rank) if int(p.overall_rank) > 0 else 1_000_000
    return (-(lo + hi) / 2.0, rank, str(p.id))


def select_best_available(prospects: Sequence[Prospect]) -> Optional[Prospect]:
    """Highest scouting midpoint; ties go to the better big-board rank."""
    if not prospects:
        return None
    return min(prospects, key=_board_key)


@dataclass(frozen=True, slots=True)
class BestAvailablePolicy:
    def choose(self, prospects: Sequence[Prospect], slot: PickSlot) -> Optional[Prospect]:
        return select_best_available(prospects)
