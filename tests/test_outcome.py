from __future__ import annotations

import random

import pytest

from draft.outcome import (
    age_multiplier,
    boost_range,
    classify_roll,
    is_exceptional_athlete,
    outcome_weights,
    position_multipliers,
    potential_boost,
    raw_weights,
    resolve_outcome,
)
from draft.pool import generate_draft_class
from draft.types import OutcomeCategory, OutcomeWeights

from .conftest import make_prospect


class _MaxRng(random.Random):
    def randint(self, a, b):
        return b


def test_base_bands_round_one():
    w = raw_weights(make_prospect(), 1)
    assert w.bust == pytest.approx(0.30)
    assert w.gem == pytest.approx(0.25)
    assert w.normal == pytest.approx(0.45)


def test_unlisted_round_uses_defaults():
    w = raw_weights(make_prospect(position="K"), 9)
    assert w.bust == pytest.approx(0.90)
    assert w.gem == pytest.approx(0.005)


def test_position_multipliers():
    assert position_multipliers("QB", 1) == (0.95, 1.15)
    assert position_multipliers("RB", 3) == (1.0, 1.0)
    assert position_multipliers("RB", 4) == (1.10, 1.25)
    assert position_multipliers("K", 2) == (1.0, 1.0)


def test_elite_drive_requires_both_traits_above_80():
    plain = raw_weights(make_prospect(), 1)
    driven = raw_weights(make_prospect(personality={"work_ethic": 81, "motivation": 81}), 1)
    borderline = raw_weights(make_prospect(personality={"work_ethic": 80, "motivation": 95}), 1)
    assert driven.gem == pytest.approx(plain.gem * 1.25)
    assert driven.bust == pytest.approx(plain.bust * 0.90)
    assert borderline == plain


def test_medical_and_character_modifiers():
    plain = raw_weights(make_prospect(), 2)
    risky = raw_weights(make_prospect(medical_grade="D", character_grade="D"), 2)
    assert risky.bust == pytest.approx(plain.bust * 1.20 * 1.30)
    assert risky.gem == pytest.approx(plain.gem * 0.80)
    clean = raw_weights(make_prospect(character_grade="A"), 2)
    assert clean.normal == pytest.approx(plain.normal * 1.10)


def test_faller_bonus_past_one_round_of_slack():
    p = make_prospect(scouting_grade="A", projected_round=1)
    assert raw_weights(p, 2).gem == pytest.approx(raw_weights(make_prospect(), 2).gem)
    assert raw_weights(p, 3).gem == pytest.approx(0.01 * 1.30)


def test_exceptional_athlete_thresholds():
    assert is_exceptional_athlete(
        make_prospect(position="WR", combine={"forty_yard": 4.35, "vertical_jump": 39.0})
    )
    assert not is_exceptional_athlete(
        make_prospect(position="WR", combine={"forty_yard": 4.45, "vertical_jump": 39.0})
    )
    assert is_exceptional_athlete(make_prospect(position="OL", combine={"bench_press": 31, "three_cone": 7.4}))
    assert is_exceptional_athlete(make_prospect(position="LB", combine={"forty_yard": 4.5, "vertical_jump": 37}))
    assert not is_exceptional_athlete(make_prospect(position="WR", combine=None))
    assert not is_exceptional_athlete(make_prospect(position="K", combine={"forty_yard": 4.2}))


def test_weights_sum_to_one_across_class():
    for p in generate_draft_class(2025, seed=3, size=60):
        for r in range(1, 8):
            assert outcome_weights(p, r).total == pytest.approx(1.0)


def test_classify_roll_bands():
    w = OutcomeWeights(bust=0.3, normal=0.5, gem=0.2)
    assert classify_roll(0.0, w) is OutcomeCategory.BUST
    assert classify_roll(0.29, w) is OutcomeCategory.BUST
    assert classify_roll(0.3, w) is OutcomeCategory.GEM
    assert classify_roll(0.49, w) is OutcomeCategory.GEM
    assert classify_roll(0.5, w) is OutcomeCategory.NORMAL


def test_age_multiplier_steps():
    assert age_multiplier(19) == 1.15
    assert age_multiplier(20) == 1.15
    assert age_multiplier(21) == 1.08
    assert age_multiplier(22) == 1.00
    assert age_multiplier(23) == 0.92
    assert age_multiplier(27) == 0.85


def test_boost_ranges():
    assert boost_range(OutcomeCategory.GEM, 1) == (15, 25)
    assert boost_range(OutcomeCategory.GEM, 6) == (22, 32)
    assert boost_range(OutcomeCategory.NORMAL, 7) == (3, 10)
    assert boost_range(OutcomeCategory.NORMAL, 9) == (2, 8)
    assert boost_range(OutcomeCategory.BUST, 4) == (0, 10)


def test_potential_boost_floors_after_age_scaling():
    assert potential_boost(OutcomeCategory.GEM, 1, 20, _MaxRng()) == 28  # floor(25 * 1.15)
    assert potential_boost(OutcomeCategory.NORMAL, 2, 23, _MaxRng()) == 14  # floor(16 * 0.92)


def test_round_one_elite_school_gem():
    p = make_prospect(college="Alabama", age=22, true_overall=75)
    out = resolve_outcome(p, 1, 75, rng=random.Random(5), weights=OutcomeWeights(bust=0.0, normal=0.0, gem=1.0))
    assert out.category is OutcomeCategory.GEM
    assert out.final_potential > 75 + 14
    assert out.reasoning == "Exceeded expectations - star potential"


def test_final_potential_clamped():
    rng = random.Random(11)
    for base in (40, 70, 95, 99):
        for _ in range(50):
            out = resolve_outcome(make_prospect(age=20), 6, base, rng=rng)
            assert base <= out.final_potential <= 99


def test_same_seed_same_outcomes():
    p = make_prospect()
    a = [resolve_outcome(p, r, 70, rng=random.Random(42)) for r in range(1, 8)]
    b = [resolve_outcome(p, r, 70, rng=random.Random(42)) for r in range(1, 8)]
    assert a == b
