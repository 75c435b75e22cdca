from __future__ import annotations

import random
from typing import Any, Dict, List, Sequence, Tuple

import pytest

from config import ALL_TEAM_IDS
from draft.ai import select_best_available
from draft.pool import Prospect
from draft.session import (
    advance_pick,
    current_slot,
    initialize_draft_state,
    make_pick,
    prepare_draft,
    start_draft,
)
from draft.types import FreeAgencyTransaction, TeamStanding


def make_standings() -> List[TeamStanding]:
    """32 teams; ALL_TEAM_IDS order is also worst -> best."""
    rows: List[TeamStanding] = []
    for i, tid in enumerate(ALL_TEAM_IDS):
        wins, ties = i // 2, i % 2
        rows.append(
            TeamStanding(
                team_id=tid,
                name=f"{tid} Club",
                wins=wins,
                ties=ties,
                losses=17 - wins - ties,
                power_ranking=32 - i,
            )
        )
    return rows


def make_tx(idx: int, old: str, new: str, apy: float, **kw: Any) -> FreeAgencyTransaction:
    return FreeAgencyTransaction(
        id=f"T{idx}",
        player_id=f"PL{idx}",
        position=kw.pop("position", "WR"),
        old_team_id=old,
        new_team_id=new,
        average_yearly_value=apy,
        **kw,
    )


def ranked_txs(moves: Sequence[Tuple[str, str]]) -> List[FreeAgencyTransaction]:
    """One qualifying signing per (old, new) pair, APY strictly descending."""
    return [make_tx(i, old, new, 20_000_000 - i * 500_000) for i, (old, new) in enumerate(moves)]


def make_prospect(pid: str = "X1", **kw: Any) -> Prospect:
    base: Dict[str, Any] = dict(
        id=pid,
        first_name="Test",
        last_name=pid,
        position="LB",
        college="Unknown",
        age=22,
        projected_round=3,
        true_overall=70,
        true_potential=80,
        scouting_range=(65, 75),
    )
    base.update(kw)
    return Prospect(**base)


def run_draft(state, rng, *, max_picks=None):
    """Best-available picks (forfeits once the board is empty) until done."""
    made = 0
    while current_slot(state) is not None and (max_picks is None or made < max_picks):
        slot = current_slot(state)
        best = select_best_available(state.prospects)
        res = make_pick(state, slot.drafting_team_id, best.id, rng=rng) if best else advance_pick(state)
        assert res.ok, res.error_dict()
        state = res.value.state
        made += 1
    return state


def comp_transactions() -> List[FreeAgencyTransaction]:
    """Awards two round-3 picks to ARI and four later picks to CHI."""
    moves = [("ARI", "ZZA"), ("ARI", "ZZB")] + [("CHI", "ZZC")] * 18
    return ranked_txs(moves)


@pytest.fixture
def standings() -> List[TeamStanding]:
    return make_standings()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def prepared_state():
    res = prepare_draft(initialize_draft_state(2025), make_standings(), comp_transactions(), class_seed=7)
    assert res.ok
    return res.value


@pytest.fixture
def active_state(prepared_state):
    res = start_draft(prepared_state, current_week=15)
    assert res.ok
    return res.value


@pytest.fixture(autouse=True)
def _reset_app_engine():
    from app.services.draft_facade import reset_engine

    reset_engine()
    yield
    reset_engine()
