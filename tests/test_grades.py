from __future__ import annotations

from draft.grades import (
    future_assets_grade,
    identify_standouts,
    needs_grade,
    overall_grade,
    pick_value_score,
    value_grade,
)
from draft.players import PlayerRecord, rookie_contract
from draft.types import DraftGrade, DraftPickEntry, StandoutType


def _pick(pid, round_no, overall, potential=70, position="WR"):
    return PlayerRecord(
        id=pid,
        first_name="P",
        last_name=pid,
        position=position,
        age=22,
        college="Unknown",
        overall=overall,
        potential=potential,
        status="active",
        contract=rookie_contract(round_no),
        team_id="KC",
        draft_round=round_no,
    )


def test_needs_grade_counts_each_pick_at_a_need():
    needs = ["QB", "OL", "CB"]
    picks = [_pick("a", 1, 85, position="QB")]
    assert needs_grade(needs, picks) is DraftGrade.D
    # a second QB counts again: 2 of 3
    picks.append(_pick("b", 2, 80, position="QB"))
    assert needs_grade(needs, picks) is DraftGrade.B
    picks.append(_pick("c", 3, 75, position="WR"))
    assert needs_grade(needs, picks) is DraftGrade.B
    picks.append(_pick("d", 4, 70, position="QB"))
    assert needs_grade(needs, picks) is DraftGrade.A
    assert needs_grade(needs, [_pick("e", 5, 65, position="K")]) is DraftGrade.F
    assert needs_grade(["QB"], []) is DraftGrade.F


def test_pick_value_score_bands():
    # round 3 expects 70..80
    assert pick_value_score(_pick("a", 3, 86)) == 2
    assert pick_value_score(_pick("b", 3, 85)) == 1
    assert pick_value_score(_pick("c", 3, 75)) == 0
    assert pick_value_score(_pick("d", 3, 69)) == -1
    assert pick_value_score(_pick("e", 3, 64)) == -2


def test_value_grade():
    assert value_grade([_pick("a", 7, 70), _pick("b", 7, 70)]) is DraftGrade.A
    assert value_grade([_pick("a", 1, 85)]) is DraftGrade.C
    assert value_grade([_pick("a", 1, 60), _pick("b", 1, 60)]) is DraftGrade.F
    assert value_grade([]) is DraftGrade.C


def test_future_assets_grade():
    ledger = [
        DraftPickEntry(year=2026, round=r, original_team_id="KC", current_team_id="KC") for r in range(1, 8)
    ]
    assert future_assets_grade(ledger, "KC", next_year=2026) is DraftGrade.C
    extra = [
        DraftPickEntry(year=2026, round=r, original_team_id="SF", current_team_id="KC") for r in range(1, 4)
    ]
    assert future_assets_grade(ledger + extra, "KC", next_year=2026) is DraftGrade.A
    traded = [
        DraftPickEntry(year=2026, round=r, original_team_id="KC", current_team_id="SF" if r <= 3 else "KC")
        for r in range(1, 8)
    ]
    assert future_assets_grade(traded, "KC", next_year=2026) is DraftGrade.D


def test_overall_grade_mean_points():
    assert overall_grade(DraftGrade.A, DraftGrade.A, DraftGrade.B) is DraftGrade.A
    assert overall_grade(DraftGrade.A, DraftGrade.C, DraftGrade.C) is DraftGrade.B
    assert overall_grade(DraftGrade.F, DraftGrade.F, DraftGrade.C) is DraftGrade.D
    assert overall_grade(DraftGrade.F, DraftGrade.F, DraftGrade.F) is DraftGrade.F


def test_standouts():
    picks = [
        _pick("steal", 5, 78, potential=80),
        _pick("reach", 1, 70, potential=75),
        _pick("upside", 4, 68, potential=95),
    ]
    out = identify_standouts(picks)
    assert [(s.type, s.player_id) for s in out] == [
        (StandoutType.STEAL, "steal"),
        (StandoutType.REACH, "reach"),
        (StandoutType.POTENTIAL, "upside"),
    ]
    assert out[0].explanation == "Excellent value - 78 overall in round 5"


def test_no_reach_within_margin():
    picks = [_pick("a", 1, 78, potential=90), _pick("b", 2, 80, potential=85)]
    out = identify_standouts(picks)
    assert [s.type for s in out] == [StandoutType.STEAL, StandoutType.POTENTIAL]
    assert identify_standouts([]) == []
