from __future__ import annotations

"""Draft prospect pool.

A Prospect carries the hidden truth (true_overall / true_potential) next to
what scouts can see (scouting_range). Two serialization shapes:

  - to_dict(): full internal shape, used for snapshots.
  - to_public_dict(): user-facing shape. Fog-of-war rule: hidden ratings and
    attributes are only exposed once the prospect is fully scouted.

Procedural classes (generate_draft_class) are fully determined by the seed.
"""

import hashlib
import math
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .config import (
    DRAFT_CLASS_SIZE,
    MAX_ROUNDS,
    MEDICAL_GRADE_CUTOFFS,
    PROCEDURAL_POSITION_WEIGHTS,
    PROCEDURAL_ROUND_CUTOFFS,
    SCOUTING_HALF_WIDTH_STEPS,
    SCOUTING_HALF_WIDTH_UDFA,
    SCOUTING_RANGE_CEIL,
    SCOUTING_RANGE_FLOOR,
    UDFA_PROJECTION,
)

# Attributes behind the position rating used when a prospect goes undrafted.
POSITION_OVERALL_ATTRS: Dict[str, Tuple[str, ...]] = {
    "QB": ("field_vision", "decision_making", "competitiveness", "awareness", "hands"),
    "RB": ("speed", "agility", "carrying", "hands", "competitiveness"),
    "WR": ("speed", "hands", "field_vision", "agility", "jumping"),
}
DEFAULT_OVERALL_ATTRS: Tuple[str, ...] = ("speed", "strength", "awareness", "agility", "competitiveness")

# Never exposed before a prospect is fully scouted.
_HIDDEN_KEYS: Set[str] = {"true_overall", "true_potential", "attributes", "overall_rank"}


def stable_int_seed(*parts: Any) -> int:
    """Cross-process stable seed (avoid Python's randomized hash())."""
    h = hashlib.md5(":".join(str(p) for p in parts).encode("utf-8")).hexdigest()
    return int(h[:8], 16)


def _round_half_up(x: float) -> int:
    return int(math.floor(float(x) + 0.5))


def _safe_int(x: Any, *, default: int = 0) -> int:
    try:
        if x is None:
            return default
        return int(x)
    except (TypeError, ValueError):
        return default


def scouting_half_width(projected_round: int) -> int:
    r = int(projected_round)
    for max_round, half in SCOUTING_HALF_WIDTH_STEPS:
        if r <= max_round:
            return int(half)
    return int(SCOUTING_HALF_WIDTH_UDFA)


def compute_scouting_range(true_overall: int, projected_round: int) -> Tuple[int, int]:
    """Fog-of-war range; earlier projections are better known."""
    half = scouting_half_width(projected_round)
    return (
        max(SCOUTING_RANGE_FLOOR, int(true_overall) - half),
        min(SCOUTING_RANGE_CEIL, int(true_overall) + half),
    )


@dataclass(frozen=True, slots=True)
class Prospect:
    id: str
    first_name: str
    last_name: str
    position: str
    college: str = "Unknown"
    age: int = 22
    height_in: int = 74
    weight_lb: int = 225
    attributes: Dict[str, int] = field(default_factory=dict)
    personality: Dict[str, int] = field(default_factory=dict)
    projected_round: int = UDFA_PROJECTION
    overall_rank: int = 0
    scouting_grade: str = "C"
    medical_grade: str = "A"
    character_grade: str = "B"
    # forty_yard / vertical_jump / bench_press / three_cone, all optional
    combine: Optional[Dict[str, float]] = None
    true_overall: int = 60
    true_potential: int = 70
    scouting_range: Tuple[int, int] = (SCOUTING_RANGE_FLOOR, SCOUTING_RANGE_CEIL)
    scouting_points_spent: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", str(self.position or "").upper())
        lo, hi = self.scouting_range
        object.__setattr__(self, "scouting_range", (int(lo), int(hi)))

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_revealed(self) -> bool:
        return int(self.scouting_points_spent) >= 2

    def position_overall(self) -> int:
        """Position rating from attributes; missing attributes read as true_overall."""
        keys = POSITION_OVERALL_ATTRS.get(self.position, DEFAULT_OVERALL_ATTRS)
        vals = [_safe_int(self.attributes.get(k), default=int(self.true_overall)) for k in keys]
        return _round_half_up(sum(vals) / len(vals))

    def with_scouting(self, points: int) -> "Prospect":
        """Spend points on this prospect: 1 halves the range, 2+ reveals."""
        spent = int(self.scouting_points_spent) + int(points)
        lo, hi = self.scouting_range
        if spent >= 2:
            rng = (int(self.true_overall), int(self.true_overall))
        elif spent == 1:
            mid = _round_half_up((lo + hi) / 2)
            half = max(1, _round_half_up((hi - lo) / 4))
            rng = (max(SCOUTING_RANGE_FLOOR, mid - half), min(SCOUTING_RANGE_CEIL, mid + half))
        else:
            rng = (lo, hi)
        return replace(self, scouting_points_spent=spent, scouting_range=rng)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "first_name": str(self.first_name),
            "last_name": str(self.last_name),
            "position": str(self.position),
            "college": str(self.college),
            "age": int(self.age),
            "height_in": int(self.height_in),
            "weight_lb": int(self.weight_lb),
            "attributes": dict(self.attributes),
            "personality": dict(self.personality),
            "projected_round": int(self.projected_round),
            "overall_rank": int(self.overall_rank),
            "scouting_grade": str(self.scouting_grade),
            "medical_grade": str(self.medical_grade),
            "character_grade": str(self.character_grade),
            "combine": None if self.combine is None else dict(self.combine),
            "true_overall": int(self.true_overall),
            "true_potential": int(self.true_potential),
            "scouting_range": [int(self.scouting_range[0]), int(self.scouting_range[1])],
            "scouting_points_spent": int(self.scouting_points_spent),
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """User-facing JSON shape (fog of war applied)."""
        d = self.to_dict()
        d["name"] = self.name
        if self.is_revealed:
            return d
        return {k: v for k, v in d.items() if k not in _HIDDEN_KEYS}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Prospect":
        true_ovr = _safe_int(d.get("true_overall"), default=60)
        proj = _safe_int(d.get("projected_round"), default=UDFA_PROJECTION)
        rng = d.get("scouting_range")
        if isinstance(rng, (list, tuple)) and len(rng) == 2:
            scouting_range = (_safe_int(rng[0]), _safe_int(rng[1]))
        else:
            scouting_range = compute_scouting_range(true_ovr, proj)
        combine = d.get("combine")
        return cls(
            id=str(d.get("id") or ""),
            first_name=str(d.get("first_name") or ""),
            last_name=str(d.get("last_name") or ""),
            position=str(d.get("position") or "LB"),
            college=str(d.get("college") or "Unknown"),
            age=_safe_int(d.get("age"), default=22),
            height_in=_safe_int(d.get("height_in"), default=74),
            weight_lb=_safe_int(d.get("weight_lb"), default=225),
            attributes={str(k): _safe_int(v) for k, v in dict(d.get("attributes") or {}).items()},
            personality={str(k): _safe_int(v) for k, v in dict(d.get("personality") or {}).items()},
            projected_round=proj,
            overall_rank=_safe_int(d.get("overall_rank")),
            scouting_grade=str(d.get("scouting_grade") or "C"),
            medical_grade=str(d.get("medical_grade") or "A"),
            character_grade=str(d.get("character_grade") or "B"),
            combine={str(k): float(v) for k, v in combine.items()} if isinstance(combine, Mapping) else None,
            true_overall=true_ovr,
            true_potential=_safe_int(d.get("true_potential"), default=70),
            scouting_range=scouting_range,
            scouting_points_spent=_safe_int(d.get("scouting_points_spent")),
        )


def coerce_prospects(rows: Sequence[Any]) -> List[Prospect]:
    out: List[Prospect] = []
    for row in rows or []:
        if isinstance(row, Prospect):
            out.append(row)
        elif isinstance(row, Mapping):
            out.append(Prospect.from_dict(row))
        else:
            raise TypeError(f"prospect must be Prospect or mapping, got {type(row).__name__}")
    return out


# ---------------------------------------------------------------------------
# Procedural draft class
# ---------------------------------------------------------------------------

_FIRST_NAMES = (
    "Marcus", "DeShawn", "Tyrell", "Jordan", "Elijah",
    "Malik", "Jaylon", "Darius", "Cameron", "Nathan",
    "Isaiah", "Brendan", "Trevon", "Caleb", "Derrick",
)
_LAST_NAMES = (
    "Williams", "Johnson", "Brown", "Jackson", "Davis",
    "Harris", "Thompson", "Moore", "Walker", "White",
    "Taylor", "Anderson", "Robinson", "Clark", "Mitchell",
)
_COLLEGES = (
    "Alabama", "Georgia", "Ohio State", "LSU", "Clemson", "Michigan", "Texas",
    "Oregon", "Iowa", "Utah", "Baylor", "Pittsburgh", "Boise State", "Tulane",
    "Wake Forest", "Appalachian State", "Toledo", "Fresno State",
)
_SCOUTING_GRADES = ("A+", "A", "B", "C", "D")

_ATTR_KEYS = (
    "speed", "strength", "agility", "jumping", "awareness", "hands",
    "carrying", "field_vision", "decision_making", "competitiveness",
)

# (overall lo, hi), (potential lo, hi) by projected round bucket
_RATING_BANDS: Dict[str, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    "first": ((71, 84), (85, 99)),
    "early": ((65, 75), (78, 90)),
    "late": ((55, 68), (65, 82)),
}


def _procedural_round(roll: float) -> int:
    for cutoff, round_no in PROCEDURAL_ROUND_CUTOFFS:
        if roll < cutoff:
            return int(round_no)
    return MAX_ROUNDS


def _medical_grade(roll: float) -> str:
    for cutoff, grade in MEDICAL_GRADE_CUTOFFS:
        if roll < cutoff:
            return grade
    return "D"


def _scouting_grade(rng: random.Random, projected_round: int) -> str:
    # earlier projections skew towards the top of the scale
    idx = min(len(_SCOUTING_GRADES) - 1, max(0, (projected_round - 1) // 2 + rng.randint(-1, 1)))
    return _SCOUTING_GRADES[idx]


def _combine(rng: random.Random, position: str) -> Dict[str, float]:
    return {
        "forty_yard": round(rng.uniform(4.3, 5.3) if position not in ("OL", "DL") else rng.uniform(4.8, 5.6), 2),
        "vertical_jump": round(rng.uniform(26.0, 42.0), 1),
        "bench_press": float(rng.randint(8, 38)),
        "three_cone": round(rng.uniform(6.7, 8.2), 2),
    }


def generate_prospect(rng: random.Random, *, index: int, season: int) -> Prospect:
    positions = [p for p, _ in PROCEDURAL_POSITION_WEIGHTS]
    weights = [w for _, w in PROCEDURAL_POSITION_WEIGHTS]
    position = rng.choices(positions, weights=weights, k=1)[0]
    projected_round = _procedural_round(rng.random())

    band = "first" if projected_round == 1 else ("early" if projected_round <= 3 else "late")
    (olo, ohi), (plo, phi) = _RATING_BANDS[band]
    true_overall = rng.randint(olo, ohi)
    true_potential = max(true_overall, rng.randint(plo, phi))

    attributes = {k: max(30, min(99, true_overall + rng.randint(-8, 8))) for k in _ATTR_KEYS}
    personality = {
        "work_ethic": rng.randint(40, 99),
        "motivation": rng.randint(40, 99),
        "leadership": rng.randint(30, 99),
        "discipline": rng.randint(30, 99),
    }

    return Prospect(
        id=f"P{int(season)}-{index:04d}",
        first_name=rng.choice(_FIRST_NAMES),
        last_name=rng.choice(_LAST_NAMES),
        position=position,
        college=rng.choice(_COLLEGES),
        age=rng.randint(20, 24),
        height_in=rng.randint(68, 79),
        weight_lb=rng.randint(180, 330),
        attributes=attributes,
        personality=personality,
        projected_round=projected_round,
        scouting_grade=_scouting_grade(rng, projected_round),
        medical_grade=_medical_grade(rng.random()),
        character_grade=rng.choice(("A", "B", "B", "C", "D")),
        combine=_combine(rng, position),
        true_overall=true_overall,
        true_potential=true_potential,
        scouting_range=compute_scouting_range(true_overall, projected_round),
    )


def generate_draft_class(
    season: int,
    *,
    seed: Optional[int] = None,
    size: int = DRAFT_CLASS_SIZE,
) -> List[Prospect]:
    """Seeded procedural class, big-board ranked (projection, then true overall)."""
    rng = random.Random(stable_int_seed("draft_class", int(season), seed if seed is not None else "default"))
    raw = [generate_prospect(rng, index=i + 1, season=season) for i in range(int(size))]
    ranked = sorted(raw, key=lambda p: (p.projected_round, -p.true_overall, p.id))
    return [replace(p, overall_rank=i) for i, p in enumerate(ranked, start=1)]
