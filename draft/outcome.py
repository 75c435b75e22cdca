from __future__ import annotations

"""Outcome probability model for drafted prospects.

resolve_outcome() is the only entry point that draws randomness; the RNG is
always injected so identical seeds reproduce identical drafts.

Steps:
  1) base success/star rates by round
  2) position multipliers
  3) bands: bust = 1 - success, gem = star, normal = success - gem
  4) sequential modifiers (personality, medical, faller, school, combine,
     character), never renormalized in between
  5) renormalize to 1
  6) one uniform draw: bust | gem | normal
  7) boost from the (outcome x round) range table, scaled by age, floored
  8) final potential clamped to [base_overall, 99]
"""

import logging
import math
import random
from typing import Optional, Tuple

from .config import (
    AGE_MULT_OLDEST,
    AGE_MULT_STEPS,
    BASE_STAR_RATE,
    BASE_SUCCESS_RATE,
    CHARACTER_A_BUST_MULT,
    CHARACTER_A_NORMAL_MULT,
    CHARACTER_D_BUST_MULT,
    CHARACTER_D_GEM_MULT,
    COMBINE_DEFAULTS,
    DRIVE_BUST_MULT,
    DRIVE_GEM_MULT,
    DRIVE_TRAIT_THRESHOLD,
    ELITE_SCHOOL_BUST_MULT,
    ELITE_SCHOOL_NORMAL_MULT,
    ELITE_SCHOOLS,
    EXCEPTIONAL_ATHLETE_BUST_MULT,
    EXCEPTIONAL_ATHLETE_GEM_MULT,
    EXCEPTIONAL_ATHLETE_NORMAL_MULT,
    FALLER_GEM_MULT,
    FALLER_ROUND_SLACK,
    FALLER_SCOUTING_GRADES,
    HYBRID_MAX_FORTY,
    HYBRID_MIN_VERTICAL,
    HYBRID_POSITIONS,
    LATE_ROUND_SKILL_FROM,
    LATE_ROUND_SKILL_MULTS,
    LATE_ROUND_SKILL_POSITIONS,
    MAX_POTENTIAL,
    MEDICAL_RISK_BUST_MULT,
    MEDICAL_RISK_GRADES,
    POSITION_RATE_MULTS,
    POTENTIAL_BOOST_RANGES,
    POWER_MAX_THREE_CONE,
    POWER_MIN_BENCH,
    POWER_POSITIONS,
    SPEED_MAX_FORTY,
    SPEED_MIN_VERTICAL,
    SPEED_POSITIONS,
    STAR_RATE_DEFAULT,
    SUCCESS_RATE_DEFAULT,
    UNPROJECTED_ROUND,
)
from .pool import Prospect
from .types import DraftOutcome, OutcomeCategory, OutcomeWeights

logger = logging.getLogger(__name__)

_REASONING = {
    OutcomeCategory.BUST: "Failed to meet expectations",
    OutcomeCategory.GEM: "Exceeded expectations - star potential",
    OutcomeCategory.NORMAL: "Solid starter quality",
}


def position_multipliers(position: str, assigned_round: int) -> Tuple[float, float]:
    """(success_mult, star_mult) for a position drafted in assigned_round."""
    pos = str(position or "").upper()
    if pos in LATE_ROUND_SKILL_POSITIONS:
        return LATE_ROUND_SKILL_MULTS if int(assigned_round) >= LATE_ROUND_SKILL_FROM else (1.0, 1.0)
    return POSITION_RATE_MULTS.get(pos, (1.0, 1.0))


def _combine_value(prospect: Prospect, key: str) -> float:
    combine = prospect.combine or {}
    v = combine.get(key)
    return float(COMBINE_DEFAULTS[key] if v is None else v)


def is_exceptional_athlete(prospect: Prospect) -> bool:
    """Position-family combine thresholds. No combine results -> False."""
    if not prospect.combine:
        return False
    pos = prospect.position
    if pos in SPEED_POSITIONS:
        return _combine_value(prospect, "forty_yard") < SPEED_MAX_FORTY and _combine_value(
            prospect, "vertical_jump"
        ) > SPEED_MIN_VERTICAL
    if pos in HYBRID_POSITIONS:
        return _combine_value(prospect, "forty_yard") < HYBRID_MAX_FORTY and _combine_value(
            prospect, "vertical_jump"
        ) > HYBRID_MIN_VERTICAL
    if pos in POWER_POSITIONS:
        return _combine_value(prospect, "bench_press") > POWER_MIN_BENCH and _combine_value(
            prospect, "three_cone"
        ) < POWER_MAX_THREE_CONE
    return False


def _has_elite_drive(prospect: Prospect) -> bool:
    p = prospect.personality or {}
    return (
        int(p.get("work_ethic", 0) or 0) > DRIVE_TRAIT_THRESHOLD
        and int(p.get("motivation", 0) or 0) > DRIVE_TRAIT_THRESHOLD
    )


def _is_faller(prospect: Prospect, assigned_round: int) -> bool:
    projected = int(prospect.projected_round or 0) or UNPROJECTED_ROUND
    return prospect.scouting_grade in FALLER_SCOUTING_GRADES and int(assigned_round) > projected + FALLER_ROUND_SLACK


def raw_weights(prospect: Prospect, assigned_round: int) -> OutcomeWeights:
    """Bands after every modifier, before renormalization."""
    r = int(assigned_round)
    success = BASE_SUCCESS_RATE.get(r, SUCCESS_RATE_DEFAULT)
    star = BASE_STAR_RATE.get(r, STAR_RATE_DEFAULT)

    s_mult, st_mult = position_multipliers(prospect.position, r)
    success *= s_mult
    star *= st_mult

    bust = 1.0 - success
    gem = star
    normal = success - gem

    if _has_elite_drive(prospect):
        gem *= DRIVE_GEM_MULT
        bust *= DRIVE_BUST_MULT

    if prospect.medical_grade in MEDICAL_RISK_GRADES:
        bust *= MEDICAL_RISK_BUST_MULT

    if _is_faller(prospect, r):
        gem *= FALLER_GEM_MULT

    if prospect.college in ELITE_SCHOOLS:
        bust *= ELITE_SCHOOL_BUST_MULT
        normal *= ELITE_SCHOOL_NORMAL_MULT

    if is_exceptional_athlete(prospect):
        gem *= EXCEPTIONAL_ATHLETE_GEM_MULT
        normal *= EXCEPTIONAL_ATHLETE_NORMAL_MULT
        bust *= EXCEPTIONAL_ATHLETE_BUST_MULT

    if prospect.character_grade == "A":
        bust *= CHARACTER_A_BUST_MULT
        normal *= CHARACTER_A_NORMAL_MULT
    elif prospect.character_grade == "D":
        bust *= CHARACTER_D_BUST_MULT
        gem *= CHARACTER_D_GEM_MULT

    return OutcomeWeights(bust=bust, normal=normal, gem=gem)


def outcome_weights(prospect: Prospect, assigned_round: int) -> OutcomeWeights:
    """Renormalized bands; sums to 1.0."""
    w = raw_weights(prospect, assigned_round)
    total = w.total
    if total <= 0:
        raise ValueError(f"non-positive outcome weight total for prospect {prospect.id}")
    return OutcomeWeights(bust=w.bust / total, normal=w.normal / total, gem=w.gem / total)


def age_multiplier(age: int) -> float:
    a = int(age)
    for max_age, mult in AGE_MULT_STEPS:
        if a <= max_age:
            return mult
    return AGE_MULT_OLDEST


def boost_range(category: OutcomeCategory, assigned_round: int) -> Tuple[int, int]:
    table = POTENTIAL_BOOST_RANGES[category.value]
    return table.get(int(assigned_round), table[0])


def potential_boost(category: OutcomeCategory, assigned_round: int, age: int, rng: random.Random) -> int:
    lo, hi = boost_range(category, assigned_round)
    raw = rng.randint(lo, hi)
    return int(math.floor(raw * age_multiplier(age)))


def classify_roll(roll: float, weights: OutcomeWeights) -> OutcomeCategory:
    if roll < weights.bust:
        return OutcomeCategory.BUST
    if roll < weights.bust + weights.gem:
        return OutcomeCategory.GEM
    return OutcomeCategory.NORMAL


def resolve_outcome(
    prospect: Prospect,
    assigned_round: int,
    base_overall: int,
    *,
    rng: random.Random,
    weights: Optional[OutcomeWeights] = None,
) -> DraftOutcome:
    """Roll the career outcome for one drafted prospect."""
    w = weights if weights is not None else outcome_weights(prospect, assigned_round)
    category = classify_roll(rng.random(), w)
    boost = potential_boost(category, assigned_round, prospect.age, rng)
    base = int(base_overall)
    final_potential = min(MAX_POTENTIAL, max(base, base + boost))

    logger.debug(
        "DRAFT_OUTCOME prospect=%s round=%s category=%s boost=%d potential=%d",
        prospect.id,
        assigned_round,
        category.value,
        boost,
        final_potential,
    )
    return DraftOutcome(
        category=category,
        potential_boost=boost,
        final_potential=final_potential,
        reasoning=_REASONING[category],
        weights=w,
    )
