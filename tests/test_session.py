from __future__ import annotations

import random

import pytest

from draft.errors import (
    BAD_PAYLOAD,
    DRAFT_ALREADY_ACTIVE,
    DRAFT_NOT_ACTIVE,
    DRAFT_WRONG_WEEK,
    INSUFFICIENT_SCOUTING_POINTS,
    INSUFFICIENT_TEAMS,
    NOT_ON_THE_CLOCK,
    ORDER_NOT_LOCKED,
    PROSPECT_NOT_AVAILABLE,
    DraftInvariantError,
    FailureKind,
)
from draft.session import (
    advance_pick,
    current_slot,
    initialize_draft_state,
    make_pick,
    prepare_draft,
    spend_scouting_points,
    start_draft,
    state_from_dict,
    state_to_dict,
    state_to_public_dict,
)
from draft.types import CompletionPhase

from .conftest import make_standings, run_draft


def test_prepare_locks_order_and_awards_comp_picks(prepared_state):
    st = prepared_state
    assert st.is_order_locked and not st.is_active
    assert st.version == 1
    assert st.draft_order[0] == "ARI"
    assert st.comp_counts == {3: 2, 4: 1, 5: 1, 6: 2}
    assert st.pick_budget == 230
    assert len(st.prospects) == 250
    assert st.scouting_points_available == 15
    assert len(st.pick_ledger) == 224 * 2 + 6
    assert st.team_name("ARI") == "ARI Club"


def test_prepare_needs_every_team():
    res = prepare_draft(initialize_draft_state(2025), make_standings()[:31], [])
    assert not res.ok
    assert res.kind is FailureKind.VALIDATION
    assert res.code == INSUFFICIENT_TEAMS


def test_prepare_rejects_bad_rows():
    res = prepare_draft(initialize_draft_state(2025), make_standings() + ["oops"], [])
    assert res.code == BAD_PAYLOAD


def test_prepare_rejected_while_active(active_state):
    res = prepare_draft(active_state, make_standings(), [])
    assert res.kind is FailureKind.REJECTED
    assert res.code == DRAFT_ALREADY_ACTIVE


def test_start_gates(prepared_state):
    wrong = start_draft(prepared_state, current_week=14)
    assert wrong.kind is FailureKind.REJECTED and wrong.code == DRAFT_WRONG_WEEK

    unlocked = start_draft(initialize_draft_state(2025), current_week=15)
    assert unlocked.kind is FailureKind.VALIDATION and unlocked.code == ORDER_NOT_LOCKED

    ok = start_draft(prepared_state, current_week=15)
    assert ok.ok and ok.value.is_active
    again = start_draft(ok.value, current_week=15)
    assert again.code == DRAFT_ALREADY_ACTIVE


def test_pick_validation_leaves_state_untouched(prepared_state, active_state, rng):
    pid = active_state.prospects[0].id
    assert make_pick(prepared_state, "ARI", pid, rng=rng).code == DRAFT_NOT_ACTIVE
    assert make_pick(active_state, "KC", pid, rng=rng).code == NOT_ON_THE_CLOCK
    assert make_pick(active_state, "ARI", "nope", rng=rng).code == PROSPECT_NOT_AVAILABLE
    assert active_state.picks_made == 0
    assert len(active_state.prospects) == 250


def test_pick_materializes_player(active_state, rng):
    prospect = active_state.prospects[0]
    res = make_pick(active_state, "ari", prospect.id, rng=rng)
    assert res.ok
    pick = res.value
    st = pick.state

    assert st.version == active_state.version + 1
    assert st.picks_made == 1
    assert (st.cursor.round, st.cursor.pick) == (1, 2)
    assert st.prospect(prospect.id) is None
    assert pick.player.team_id == "ARI"
    assert (pick.player.draft_round, pick.player.draft_pick, pick.player.draft_overall) == (1, 1, 1)
    assert pick.player.overall == prospect.true_overall
    assert pick.player.morale == 75
    assert pick.player.potential == pick.outcome.final_potential
    assert current_slot(st).drafting_team_id == "ATL"
    # input state unchanged
    assert active_state.picks_made == 0


def test_forfeit_consumes_slot(active_state):
    res = advance_pick(active_state)
    assert res.ok and res.value.forfeited
    assert res.value.state.picks_made == 1
    assert res.value.state.drafted == ()
    assert len(res.value.state.prospects) == 250


def test_comp_slots_follow_base_slots(active_state):
    st = active_state
    for _ in range(32 * 3):
        st = advance_pick(st).value.state
    slot = current_slot(st)
    assert (slot.round, slot.pick) == (3, 33)
    assert slot.is_compensatory and slot.drafting_team_id == "ARI"
    assert slot.overall_no == 97


def test_full_draft_consumes_exact_budget(active_state, rng):
    st = run_draft(active_state, rng)
    assert st.picks_made == 230
    assert st.cursor.is_complete
    assert not st.is_active
    assert st.completion.phase is CompletionPhase.COMPLETING
    assert len(st.drafted) == 230
    assert len(st.prospects) == 20
    assert len({p.id for p in st.drafted}) == 230
    ari = [p for p in st.drafted if p.team_id == "ARI"]
    assert len(ari) == 9
    assert make_pick(st, "ARI", st.prospects[0].id, rng=rng).code == DRAFT_NOT_ACTIVE


def test_scouting_points(prepared_state):
    pid = prepared_state.prospects[0].id
    res = spend_scouting_points(prepared_state, pid, 2)
    assert res.ok
    st = res.value
    assert st.scouting_points_available == 13
    assert st.prospect(pid).is_revealed

    assert spend_scouting_points(st, pid, 14).code == INSUFFICIENT_SCOUTING_POINTS
    assert spend_scouting_points(st, pid, 0).code == BAD_PAYLOAD
    assert spend_scouting_points(st, pid, "x").code == BAD_PAYLOAD
    assert spend_scouting_points(st, "nope", 1).code == PROSPECT_NOT_AVAILABLE


def test_snapshot_round_trip_mid_draft(active_state, rng):
    st = run_draft(active_state, rng, max_picks=70)
    snap = state_to_dict(st)
    again = state_from_dict(snap)
    assert state_to_dict(again) == snap
    assert again.cursor == st.cursor
    assert current_slot(again) == current_slot(st)


def test_inconsistent_snapshot_raises(active_state, rng):
    st = run_draft(active_state, rng, max_picks=5)
    snap = state_to_dict(st)

    bad_counts = dict(snap, cursor=dict(snap["cursor"], comp_counts={"3": 1}))
    with pytest.raises(DraftInvariantError):
        state_from_dict(bad_counts)

    with pytest.raises(DraftInvariantError):
        state_from_dict(dict(snap, picks_made=9))

    with pytest.raises(DraftInvariantError):
        state_from_dict(dict(snap, cursor={"round": 8, "pick": 1}))


def test_public_state_hides_hidden_ratings(active_state, rng):
    st = run_draft(active_state, rng, max_picks=2)
    public = state_to_public_dict(st)
    assert public["on_the_clock"]["drafting_team_id"] == "BAL"
    assert all("true_overall" not in p for p in public["prospects"])
    assert all("attributes" not in p for p in public["drafted"])
    assert public["pick_budget"] == 230


def test_same_seed_same_draft(active_state):
    a = run_draft(active_state, random.Random(7))
    b = run_draft(active_state, random.Random(7))
    assert state_to_dict(a) == state_to_dict(b)
