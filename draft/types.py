from __future__ import annotations

"""Draft domain types.

This module is deliberately dependency-light so it can be imported by every
other draft module (standings, compensatory, cursor, outcome, completion).

Conventions:
- team_id is an uppercase abbreviation (e.g. 'KC')
- rounds are 1..7; picks are per-round slot numbers (1..32 + comp picks)
- every record has to_dict()/from_dict() producing JSON-friendly dicts
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


TeamId = str
RoundNo = int


def norm_team_id(v: Any) -> str:
    """Normalize team id into canonical form used across the project."""
    return str(v or "").strip().upper()


def _to_int(x: Any, default: int = 0) -> int:
    if x is None or isinstance(x, bool):
        return default
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def _to_float(x: Any, default: float = 0.0) -> float:
    if x is None or isinstance(x, bool):
        return default
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


class Position(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    OL = "OL"
    DL = "DL"
    LB = "LB"
    CB = "CB"
    S = "S"
    K = "K"
    P = "P"


class OutcomeCategory(str, Enum):
    BUST = "bust"
    NORMAL = "normal"
    GEM = "gem"


class DraftGrade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"
    D_PLUS = "D+"
    D = "D"
    F = "F"

    @property
    def points(self) -> float:
        return _GRADE_POINTS[self]


_GRADE_POINTS: Dict[DraftGrade, float] = {
    DraftGrade.A_PLUS: 4.3,
    DraftGrade.A: 4.0,
    DraftGrade.B_PLUS: 3.3,
    DraftGrade.B: 3.0,
    DraftGrade.C_PLUS: 2.3,
    DraftGrade.C: 2.0,
    DraftGrade.D_PLUS: 1.3,
    DraftGrade.D: 1.0,
    DraftGrade.F: 0.0,
}


class StandoutType(str, Enum):
    STEAL = "steal"
    REACH = "reach"
    POTENTIAL = "potential"


class CompletionPhase(str, Enum):
    ACTIVE = "active"
    COMPLETING = "completing"
    LOCKED = "locked"


@dataclass(frozen=True, slots=True)
class TeamStanding:
    """Final regular season record used for draft ordering."""

    team_id: TeamId
    name: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    power_ranking: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "team_id", norm_team_id(self.team_id))
        object.__setattr__(self, "name", str(self.name or self.team_id))
        object.__setattr__(self, "wins", max(0, _to_int(self.wins)))
        object.__setattr__(self, "losses", max(0, _to_int(self.losses)))
        object.__setattr__(self, "ties", max(0, _to_int(self.ties)))
        object.__setattr__(self, "power_ranking", _to_int(self.power_ranking))

    @property
    def games_played(self) -> int:
        return int(self.wins + self.losses + self.ties)

    @property
    def win_pct(self) -> float:
        gp = self.games_played
        if gp <= 0:
            return 0.0
        return (float(self.wins) + 0.5 * float(self.ties)) / float(gp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "wins": int(self.wins),
            "losses": int(self.losses),
            "ties": int(self.ties),
            "power_ranking": int(self.power_ranking),
            "win_pct": float(self.win_pct),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "TeamStanding":
        return cls(
            team_id=str(d.get("team_id") or ""),
            name=str(d.get("name") or ""),
            wins=_to_int(d.get("wins")),
            losses=_to_int(d.get("losses")),
            ties=_to_int(d.get("ties")),
            power_ranking=_to_int(d.get("power_ranking")),
        )


@dataclass(frozen=True, slots=True)
class FreeAgencyTransaction:
    """One free-agent signing from the prior signing period (immutable)."""

    id: str
    player_id: str
    position: str
    old_team_id: TeamId
    new_team_id: TeamId
    average_yearly_value: float
    snap_percentage: float = 0.0
    is_all_pro: bool = False
    is_pro_bowl: bool = False
    is_unrestricted_free_agent: bool = True
    contract_expired_naturally: bool = True
    signed_before_deadline: bool = True
    transaction_date: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "old_team_id", norm_team_id(self.old_team_id))
        object.__setattr__(self, "new_team_id", norm_team_id(self.new_team_id))
        object.__setattr__(self, "average_yearly_value", _to_float(self.average_yearly_value))
        object.__setattr__(self, "snap_percentage", _to_float(self.snap_percentage))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "player_id": str(self.player_id),
            "position": str(self.position),
            "old_team_id": self.old_team_id,
            "new_team_id": self.new_team_id,
            "average_yearly_value": float(self.average_yearly_value),
            "snap_percentage": float(self.snap_percentage),
            "is_all_pro": bool(self.is_all_pro),
            "is_pro_bowl": bool(self.is_pro_bowl),
            "is_unrestricted_free_agent": bool(self.is_unrestricted_free_agent),
            "contract_expired_naturally": bool(self.contract_expired_naturally),
            "signed_before_deadline": bool(self.signed_before_deadline),
            "transaction_date": str(self.transaction_date),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "FreeAgencyTransaction":
        return cls(
            id=str(d.get("id") or ""),
            player_id=str(d.get("player_id") or ""),
            position=str(d.get("position") or ""),
            old_team_id=str(d.get("old_team_id") or ""),
            new_team_id=str(d.get("new_team_id") or ""),
            average_yearly_value=_to_float(d.get("average_yearly_value")),
            snap_percentage=_to_float(d.get("snap_percentage")),
            is_all_pro=bool(d.get("is_all_pro", False)),
            is_pro_bowl=bool(d.get("is_pro_bowl", False)),
            is_unrestricted_free_agent=bool(d.get("is_unrestricted_free_agent", True)),
            contract_expired_naturally=bool(d.get("contract_expired_naturally", True)),
            signed_before_deadline=bool(d.get("signed_before_deadline", True)),
            transaction_date=str(d.get("transaction_date") or ""),
        )


@dataclass(frozen=True, slots=True)
class CompPick:
    """An awarded compensatory pick (rounds 3..7)."""

    team_id: TeamId
    round: RoundNo
    rank: int
    value: float
    player_id: str
    player_name: str = "Unknown Player"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "round": int(self.round),
            "rank": int(self.rank),
            "value": float(self.value),
            "player_id": str(self.player_id),
            "player_name": str(self.player_name),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CompPick":
        return cls(
            team_id=norm_team_id(d.get("team_id")),
            round=_to_int(d.get("round")),
            rank=_to_int(d.get("rank")),
            value=_to_float(d.get("value")),
            player_id=str(d.get("player_id") or ""),
            player_name=str(d.get("player_name") or "Unknown Player"),
        )


@dataclass(frozen=True, slots=True)
class DraftPickEntry:
    """Pick ownership ledger row. Mutated by trades elsewhere, read here."""

    year: int
    round: RoundNo
    original_team_id: TeamId
    current_team_id: TeamId
    notes: str = ""
    is_compensatory: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "year", _to_int(self.year))
        object.__setattr__(self, "round", _to_int(self.round))
        object.__setattr__(self, "original_team_id", norm_team_id(self.original_team_id))
        object.__setattr__(self, "current_team_id", norm_team_id(self.current_team_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": int(self.year),
            "round": int(self.round),
            "original_team_id": self.original_team_id,
            "current_team_id": self.current_team_id,
            "notes": str(self.notes),
            "is_compensatory": bool(self.is_compensatory),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DraftPickEntry":
        return cls(
            year=_to_int(d.get("year")),
            round=_to_int(d.get("round")),
            original_team_id=str(d.get("original_team_id") or ""),
            current_team_id=str(d.get("current_team_id") or ""),
            notes=str(d.get("notes") or ""),
            is_compensatory=bool(d.get("is_compensatory", False)),
        )


@dataclass(frozen=True, slots=True)
class OutcomeWeights:
    bust: float
    normal: float
    gem: float

    @property
    def total(self) -> float:
        return float(self.bust + self.normal + self.gem)

    def to_dict(self) -> Dict[str, float]:
        return {"bust": float(self.bust), "normal": float(self.normal), "gem": float(self.gem)}


@dataclass(frozen=True, slots=True)
class DraftOutcome:
    """Resolved career outcome for one drafted prospect."""

    category: OutcomeCategory
    potential_boost: int
    final_potential: int
    reasoning: str
    weights: Optional[OutcomeWeights] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "potential_boost": int(self.potential_boost),
            "final_potential": int(self.final_potential),
            "reasoning": str(self.reasoning),
            "weights": None if self.weights is None else self.weights.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DraftOutcome":
        w = d.get("weights")
        weights = None
        if isinstance(w, Mapping):
            weights = OutcomeWeights(
                bust=_to_float(w.get("bust")),
                normal=_to_float(w.get("normal")),
                gem=_to_float(w.get("gem")),
            )
        return cls(
            category=OutcomeCategory(str(d.get("category") or "normal")),
            potential_boost=_to_int(d.get("potential_boost")),
            final_potential=_to_int(d.get("final_potential")),
            reasoning=str(d.get("reasoning") or ""),
            weights=weights,
        )


@dataclass(frozen=True, slots=True)
class PickSlot:
    """Who is on the clock for one (round, pick)."""

    round: RoundNo
    pick: int
    overall_no: int
    original_team_id: TeamId
    drafting_team_id: TeamId
    is_compensatory: bool = False
    comp_pick: Optional[CompPick] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": int(self.round),
            "pick": int(self.pick),
            "overall_no": int(self.overall_no),
            "original_team_id": self.original_team_id,
            "drafting_team_id": self.drafting_team_id,
            "is_compensatory": bool(self.is_compensatory),
            "comp_pick": None if self.comp_pick is None else self.comp_pick.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class StandoutPick:
    player_id: str
    player_name: str
    type: StandoutType
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": str(self.player_id),
            "player_name": str(self.player_name),
            "type": self.type.value,
            "explanation": str(self.explanation),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "StandoutPick":
        return cls(
            player_id=str(d.get("player_id") or ""),
            player_name=str(d.get("player_name") or ""),
            type=StandoutType(str(d.get("type") or "steal")),
            explanation=str(d.get("explanation") or ""),
        )


@dataclass(frozen=True, slots=True)
class DraftSummary:
    """Team-scoped post-draft report."""

    team_id: TeamId
    team_name: str
    season: int
    total_picks: int
    drafted_player_ids: tuple
    needs_grade: DraftGrade
    value_grade: DraftGrade
    future_assets_grade: DraftGrade
    overall_grade: DraftGrade
    standout_picks: tuple = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "season": int(self.season),
            "total_picks": int(self.total_picks),
            "drafted_player_ids": list(self.drafted_player_ids),
            "needs_grade": self.needs_grade.value,
            "value_grade": self.value_grade.value,
            "future_assets_grade": self.future_assets_grade.value,
            "overall_grade": self.overall_grade.value,
            "standout_picks": [s.to_dict() for s in self.standout_picks],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DraftSummary":
        return cls(
            team_id=norm_team_id(d.get("team_id")),
            team_name=str(d.get("team_name") or ""),
            season=_to_int(d.get("season")),
            total_picks=_to_int(d.get("total_picks")),
            drafted_player_ids=tuple(str(x) for x in (d.get("drafted_player_ids") or [])),
            needs_grade=DraftGrade(str(d.get("needs_grade") or "F")),
            value_grade=DraftGrade(str(d.get("value_grade") or "F")),
            future_assets_grade=DraftGrade(str(d.get("future_assets_grade") or "F")),
            overall_grade=DraftGrade(str(d.get("overall_grade") or "F")),
            standout_picks=tuple(
                StandoutPick.from_dict(s) for s in (d.get("standout_picks") or []) if isinstance(s, Mapping)
            ),
        )
