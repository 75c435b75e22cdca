from __future__ import annotations

import random

import pytest

from draft.completion import (
    can_advance_week,
    complete_draft,
    dismiss_summary,
    validate_after_pick,
    validate_draft_access,
)
from draft.errors import (
    DRAFT_ALREADY_COMPLETED,
    DRAFT_LOCKED,
    DRAFT_UNRESOLVED,
    PICK_BUDGET_EXCEEDED,
    PICK_OUT_OF_RANGE,
    ROUND_OUT_OF_RANGE,
    SUMMARY_PENDING,
    DraftInvariantError,
    FailureKind,
)
from draft.session import prepare_draft, spend_scouting_points, start_draft
from draft.types import CompletionPhase

from .conftest import make_standings, run_draft


@pytest.fixture
def finished_state(active_state):
    return run_draft(active_state, random.Random(99))


def test_validate_after_pick_budget():
    counts = {3: 2, 7: 1}
    validate_after_pick(227, 7, 33, counts)
    with pytest.raises(DraftInvariantError) as exc:
        validate_after_pick(228, 7, 33, counts)
    assert exc.value.code == PICK_BUDGET_EXCEEDED


def test_validate_after_pick_bounds():
    with pytest.raises(DraftInvariantError) as exc:
        validate_after_pick(10, 8, 1, {})
    assert exc.value.code == ROUND_OUT_OF_RANGE
    with pytest.raises(DraftInvariantError) as exc:
        validate_after_pick(10, 1, 33, {3: 4})
    assert exc.value.code == PICK_OUT_OF_RANGE


def test_cannot_complete_mid_draft(active_state):
    res = complete_draft(active_state, rng=random.Random(1))
    assert res.kind is FailureKind.REJECTED
    assert res.code == DRAFT_UNRESOLVED


def test_completion_converts_and_locks(finished_state):
    res = complete_draft(finished_state, rng=random.Random(1))
    assert res.ok
    outcome = res.value
    st = outcome.state

    assert not outcome.already_completed
    assert len(outcome.free_agents) == 20
    assert all(p.is_udfa and p.status == "free_agent" for p in outcome.free_agents)
    assert all(60 <= p.potential <= 80 and p.overall >= 50 for p in outcome.free_agents)
    assert st.prospects == ()
    assert st.completion.phase is CompletionPhase.LOCKED
    assert st.completion.showing_summary
    assert not st.completion.can_advance_week
    assert st.completion.udfa_count == 20
    assert len(st.completion.summaries) == 32
    assert st.version == finished_state.version + 1


def test_completion_is_idempotent(finished_state):
    first = complete_draft(finished_state, rng=random.Random(1)).value
    second = complete_draft(first.state, rng=random.Random(1)).value
    assert second.already_completed
    assert second.free_agents == ()
    assert second.state is first.state
    assert second.state.completion.udfa_count == first.state.completion.udfa_count
    assert second.state.prospects == ()


def test_completion_without_any_picks(prepared_state):
    res = complete_draft(prepared_state, rng=random.Random(1))
    assert res.ok
    assert len(res.value.free_agents) == 250
    assert res.value.state.prospects == ()


def test_summary_for_team(finished_state):
    roster = [{"id": "kc-qb", "team_id": "ARI", "position": "QB", "status": "active"}]
    st = complete_draft(finished_state, roster=roster, rng=random.Random(1)).value.state
    summary = st.completion.summary_for("ARI")
    assert summary.team_name == "ARI Club"
    assert summary.total_picks == 9
    assert len(summary.drafted_player_ids) == 9
    assert 1 <= len(summary.standout_picks) <= 3
    d = summary.to_dict()
    assert d["overall_grade"] in {"A", "B", "C", "D", "F"}


def test_summaries_for_explicit_teams(finished_state):
    st = complete_draft(finished_state, rng=random.Random(1), team_ids=["kc", "KC", "SF"]).value.state
    assert [s.team_id for s in st.completion.summaries] == ["KC", "SF"]


def test_locked_draft_blocks_other_operations(finished_state):
    st = complete_draft(finished_state, rng=random.Random(1)).value.state
    assert prepare_draft(st, make_standings(), []).code == DRAFT_ALREADY_COMPLETED
    assert start_draft(st, current_week=15).code == DRAFT_ALREADY_COMPLETED
    assert spend_scouting_points(st, "any", 1).code == DRAFT_ALREADY_COMPLETED


def test_week_advance_and_summary_dismissal(active_state, finished_state):
    assert can_advance_week(active_state).code == DRAFT_UNRESOLVED
    assert can_advance_week(finished_state).code == DRAFT_UNRESOLVED

    st = complete_draft(finished_state, rng=random.Random(1)).value.state
    pending = can_advance_week(st)
    assert pending.kind is FailureKind.REJECTED and pending.code == SUMMARY_PENDING

    dismissed = dismiss_summary(st).value
    assert not dismissed.completion.showing_summary
    assert can_advance_week(dismissed).ok
    assert dismiss_summary(dismissed).value is dismissed
    assert dismiss_summary(active_state).code == DRAFT_UNRESOLVED


def test_access_reopens_in_week_two(finished_state):
    st = complete_draft(finished_state, rng=random.Random(1)).value.state
    assert validate_draft_access(st, season_phase="offseason", week=20).code == DRAFT_LOCKED
    assert validate_draft_access(st, season_phase="regular_season", week=1).code == DRAFT_LOCKED
    assert validate_draft_access(st, season_phase="regular_season", week=2).ok
    assert validate_draft_access(finished_state, season_phase="offseason", week=20).ok
