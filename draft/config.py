from __future__ import annotations

"""Tuning parameters for the draft engine.

Notes
-----
Round-indexed tables use the draft round (1..7) as key. Rounds outside the
tables fall back to the *_DEFAULT values.
"""

from typing import Dict, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Draft shape
# ---------------------------------------------------------------------------

TEAMS_PER_ROUND: int = 32
MAX_ROUNDS: int = 7
BASE_DRAFT_PICKS: int = TEAMS_PER_ROUND * MAX_ROUNDS  # 224

# Compensatory picks only exist in these rounds.
COMP_ROUNDS: Tuple[int, ...] = (3, 4, 5, 6, 7)

# Calendar gates (league weeks).
DRAFT_WEEK: int = 15
# A locked draft only re-opens from this regular season week on.
DRAFT_UNLOCK_WEEK: int = 2
REGULAR_SEASON_PHASE: str = "regular_season"

# Scouting points handed out when a draft is prepared.
SCOUTING_POINTS_PER_DRAFT: int = 15

# ---------------------------------------------------------------------------
# Compensatory picks (net-loss formula)
# ---------------------------------------------------------------------------

# Keeps minimum-salary signings out of the formula.
MIN_QUALIFYING_APY: int = 1_500_000

MAX_COMP_PICKS_PER_TEAM: int = 4
MAX_COMP_PICKS_TOTAL: int = 32

# (percentile floor, round), checked top-down.
COMP_ROUND_CUTOFFS: Tuple[Tuple[float, int], ...] = (
    (0.95, 3),
    (0.90, 4),
    (0.85, 5),
    (0.75, 6),
    (0.65, 7),
)

# Snap share bonus: (exclusive lower bound, multiplier), checked top-down.
SNAP_BONUS_STEPS: Tuple[Tuple[float, float], ...] = (
    (0.75, 1.10),
    (0.50, 1.05),
)
ALL_PRO_BONUS: float = 1.25
PRO_BOWL_BONUS: float = 1.15
CFA_VALUE_SCALE: float = 100.0

# ---------------------------------------------------------------------------
# Outcome probability model
# ---------------------------------------------------------------------------

BASE_SUCCESS_RATE: Dict[int, float] = {1: 0.70, 2: 0.49, 3: 0.30, 4: 0.20, 5: 0.15, 6: 0.09, 7: 0.06}
BASE_STAR_RATE: Dict[int, float] = {1: 0.25, 2: 0.10, 3: 0.01, 4: 0.007, 5: 0.004, 6: 0.003, 7: 0.002}
SUCCESS_RATE_DEFAULT: float = 0.10
STAR_RATE_DEFAULT: float = 0.005

# position -> (success_mult, star_mult)
POSITION_RATE_MULTS: Dict[str, Tuple[float, float]] = {
    "QB": (0.95, 1.15),
    "OL": (0.95, 1.15),
    "TE": (1.05, 0.95),
    "DL": (1.05, 0.95),
}
# Skill positions get this boost only from LATE_ROUND_SKILL_FROM on.
LATE_ROUND_SKILL_POSITIONS: FrozenSet[str] = frozenset({"RB", "WR", "LB"})
LATE_ROUND_SKILL_FROM: int = 4
LATE_ROUND_SKILL_MULTS: Tuple[float, float] = (1.10, 1.25)

# Personality: both traits strictly above this.
DRIVE_TRAIT_THRESHOLD: int = 80
DRIVE_GEM_MULT: float = 1.25
DRIVE_BUST_MULT: float = 0.90

MEDICAL_RISK_GRADES: FrozenSet[str] = frozenset({"C", "D"})
MEDICAL_RISK_BUST_MULT: float = 1.20

# High scouting grade that slid more than one round past projection.
FALLER_SCOUTING_GRADES: FrozenSet[str] = frozenset({"A+", "A"})
FALLER_ROUND_SLACK: int = 1
FALLER_GEM_MULT: float = 1.30
# Projection used when a prospect has none.
UNPROJECTED_ROUND: int = 7

ELITE_SCHOOLS: FrozenSet[str] = frozenset({
    "Alabama", "Georgia", "Ohio State", "LSU", "Clemson",
    "Michigan", "Texas", "Oklahoma", "Penn State", "Notre Dame",
})
ELITE_SCHOOL_BUST_MULT: float = 0.90
ELITE_SCHOOL_NORMAL_MULT: float = 1.15

EXCEPTIONAL_ATHLETE_GEM_MULT: float = 1.10
EXCEPTIONAL_ATHLETE_NORMAL_MULT: float = 1.05
EXCEPTIONAL_ATHLETE_BUST_MULT: float = 0.90

CHARACTER_A_BUST_MULT: float = 0.85
CHARACTER_A_NORMAL_MULT: float = 1.10
CHARACTER_D_BUST_MULT: float = 1.30
CHARACTER_D_GEM_MULT: float = 0.80

# Combine thresholds by position family.
SPEED_POSITIONS: FrozenSet[str] = frozenset({"QB", "RB", "WR", "CB"})
HYBRID_POSITIONS: FrozenSet[str] = frozenset({"TE", "LB", "S"})
POWER_POSITIONS: FrozenSet[str] = frozenset({"OL", "DL"})
SPEED_MAX_FORTY: float = 4.4
SPEED_MIN_VERTICAL: float = 38.0
HYBRID_MAX_FORTY: float = 4.6
HYBRID_MIN_VERTICAL: float = 36.0
POWER_MIN_BENCH: int = 30
POWER_MAX_THREE_CONE: float = 7.5
# Missing combine measurements are read as these.
COMBINE_DEFAULTS: Dict[str, float] = {
    "forty_yard": 5.0,
    "vertical_jump": 30.0,
    "bench_press": 15.0,
    "three_cone": 8.0,
}

# Inclusive potential boost ranges: outcome -> round -> (lo, hi).
# Key 0 is the fallback for rounds not listed.
POTENTIAL_BOOST_RANGES: Dict[str, Dict[int, Tuple[int, int]]] = {
    "bust": {1: (0, 5), 2: (0, 7), 3: (0, 8), 0: (0, 10)},
    "gem": {1: (15, 25), 2: (14, 22), 3: (18, 26), 0: (22, 32)},
    "normal": {
        1: (10, 20), 2: (8, 16), 3: (6, 14), 4: (5, 12),
        5: (3, 10), 6: (3, 10), 7: (3, 10), 0: (2, 8),
    },
}

# (max age inclusive, multiplier), checked top-down; older -> AGE_MULT_OLDEST.
AGE_MULT_STEPS: Tuple[Tuple[int, float], ...] = (
    (20, 1.15),
    (21, 1.08),
    (22, 1.00),
    (23, 0.92),
)
AGE_MULT_OLDEST: float = 0.85

MAX_POTENTIAL: int = 99

# ---------------------------------------------------------------------------
# Completion / UDFA
# ---------------------------------------------------------------------------

UDFA_OVERALL_PENALTY: int = 15
UDFA_OVERALL_FLOOR: int = 50
UDFA_POTENTIAL_RANGE: Tuple[int, int] = (60, 80)
LEAGUE_MIN_SALARY: int = 750_000
UDFA_INCENTIVES: int = 50_000

# Rookie scale (total value) by round; ROOKIE_BASE_DEFAULT otherwise.
ROOKIE_BASE_VALUE: Dict[int, int] = {
    1: 8_000_000,
    2: 4_000_000,
    3: 2_500_000,
    4: 1_800_000,
    5: 1_200_000,
    6: 900_000,
    7: 750_000,
}
ROOKIE_BASE_DEFAULT: int = 600_000
ROOKIE_CONTRACT_YEARS: int = 4

DRAFTED_PLAYER_MORALE: int = 75
UDFA_MORALE: int = 50

# Expected overall range (min, max) by round for value grading.
EXPECTED_OVERALL_BY_ROUND: Dict[int, Tuple[int, int]] = {
    1: (80, 95),
    2: (75, 85),
    3: (70, 80),
    4: (65, 75),
    5: (60, 70),
    6: (55, 65),
    7: (50, 60),
}
EXPECTED_OVERALL_DEFAULT: Tuple[int, int] = (50, 60)

REACH_MARGIN: int = 3
MAX_STANDOUTS: int = 3

# ---------------------------------------------------------------------------
# Team needs / roster audit
# ---------------------------------------------------------------------------

# Minimum healthy depth per position; below -> need.
POSITION_DEPTH_TARGETS: Tuple[Tuple[str, int], ...] = (
    ("QB", 2),
    ("RB", 3),
    ("WR", 4),
    ("TE", 2),
    ("OL", 6),
    ("DL", 5),
    ("LB", 4),
    ("CB", 4),
    ("S", 2),
)
MAX_TEAM_NEEDS: int = 3

MAX_ROSTER_SIZE: int = 90
AUDIT_TIGHT_SPOTS: int = 5

# ---------------------------------------------------------------------------
# Prospect generation / fog of war
# ---------------------------------------------------------------------------

DRAFT_CLASS_SIZE: int = 250
UDFA_PROJECTION: int = 8

SCOUTING_RANGE_FLOOR: int = 40
SCOUTING_RANGE_CEIL: int = 99
# (max projected round inclusive, half width); beyond -> SCOUTING_HALF_WIDTH_UDFA.
SCOUTING_HALF_WIDTH_STEPS: Tuple[Tuple[int, int], ...] = (
    (1, 3),
    (3, 5),
    (5, 7),
    (7, 9),
)
SCOUTING_HALF_WIDTH_UDFA: int = 12

# Cumulative thresholds for the procedural projected round.
PROCEDURAL_ROUND_CUTOFFS: Tuple[Tuple[float, int], ...] = (
    (0.13, 1),
    (0.26, 2),
    (0.41, 3),
    (0.56, 4),
    (0.71, 5),
    (0.85, 6),
)

# Relative position weights for procedural classes.
PROCEDURAL_POSITION_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    ("QB", 2), ("RB", 3), ("WR", 5), ("TE", 2), ("OL", 5), ("DL", 4),
    ("LB", 3), ("CB", 4), ("S", 2), ("K", 1), ("P", 1),
)

MEDICAL_GRADE_CUTOFFS: Tuple[Tuple[float, str], ...] = (
    (0.50, "A"),
    (0.80, "B"),
    (0.95, "C"),
)
