from __future__ import annotations

import pytest

from draft.compensatory import (
    allocate_comp_picks,
    cfa_value,
    comp_picks_for_round,
    comp_picks_per_round,
    describe_top_candidates,
    inject_comp_picks,
    qualifies,
    round_for_percentile,
)
from draft.types import DraftPickEntry

from .conftest import make_tx, ranked_txs


def _filler(n):
    return [("DAL", "DEN")] * n


def test_qualification_filter():
    assert qualifies(make_tx(1, "A", "B", 1_500_000))
    assert not qualifies(make_tx(2, "A", "B", 1_499_999))
    assert not qualifies(make_tx(3, "A", "B", 5_000_000, is_unrestricted_free_agent=False))
    assert not qualifies(make_tx(4, "A", "B", 5_000_000, contract_expired_naturally=False))
    assert not qualifies(make_tx(5, "A", "B", 5_000_000, signed_before_deadline=False))


def test_cfa_value_multipliers():
    assert cfa_value(make_tx(1, "A", "B", 10_000_000)) == pytest.approx(1000.0)
    assert cfa_value(make_tx(2, "A", "B", 10_000_000, snap_percentage=0.8, is_pro_bowl=True)) == pytest.approx(
        10 * 1.10 * 1.15 * 100
    )
    # snap bounds are exclusive
    assert cfa_value(make_tx(3, "A", "B", 10_000_000, snap_percentage=0.75)) == pytest.approx(1050.0)
    assert cfa_value(make_tx(4, "A", "B", 10_000_000, snap_percentage=0.5)) == pytest.approx(1000.0)
    # All-Pro wins over Pro Bowl
    assert cfa_value(make_tx(5, "A", "B", 10_000_000, is_all_pro=True, is_pro_bowl=True)) == pytest.approx(1250.0)


@pytest.mark.parametrize(
    "percentile, expected",
    [(1.0, 3), (0.95, 3), (0.94, 4), (0.90, 4), (0.85, 5), (0.80, 6), (0.75, 6), (0.65, 7), (0.64, None)],
)
def test_round_for_percentile(percentile, expected):
    assert round_for_percentile(percentile) == expected


def test_empty_ledger_gives_no_picks():
    assert allocate_comp_picks([]) == []
    assert allocate_comp_picks([make_tx(1, "A", "B", 1_000_000)]) == []


def test_top_losses_award_round_three():
    txs = ranked_txs([("ARI", "ZZA"), ("ARI", "ZZB")] + _filler(18))
    picks = allocate_comp_picks(txs, player_names={"PL0": "Star Receiver"})

    ari = [p for p in picks if p.team_id == "ARI"]
    assert [p.round for p in ari] == [3, 3]
    assert ari[0].player_name == "Star Receiver"
    assert ari[1].player_name == "Unknown Player"
    assert ari[0].rank == int(ari[0].value)

    dal = [p for p in picks if p.team_id == "DAL"]
    assert [p.round for p in dal] == [4, 5, 6, 6]


def test_same_round_gain_cancels_loss():
    txs = ranked_txs([("ARI", "BAL"), ("CHI", "ARI")] + _filler(18))
    picks = allocate_comp_picks(txs)
    teams = {p.team_id for p in picks}
    assert "ARI" not in teams
    assert [p.round for p in picks if p.team_id == "CHI"] == [3]
    # gaining teams never earn picks
    assert "BAL" not in teams


def test_ten_transactions_top_loss_cancelled_by_gain():
    # N=10: only the top candidate reaches round 3
    txs = ranked_txs([("ARI", "BAL"), ("CHI", "ARI")] + _filler(8))
    rows = describe_top_candidates(txs, limit=10)
    assert [r["player_id"] for r in rows] == [f"PL{i}" for i in range(10)]
    assert rows[0]["projected_round"] == 3
    assert rows[1]["projected_round"] == 4

    picks = allocate_comp_picks(txs)
    assert not [p for p in picks if p.team_id == "ARI"]


def test_gain_cancels_lower_tier_loss_first():
    # ARI gains a round-3 player, loses a round-5 player
    txs = ranked_txs([("KC", "ARI"), ("DAL", "DEN"), ("DAL", "DEN"), ("ARI", "SF")] + _filler(16))
    picks = allocate_comp_picks(txs)
    assert not [p for p in picks if p.team_id == "ARI"]
    assert [p.round for p in picks if p.team_id == "KC"] == [3]


def test_late_gain_still_cancels_top_loss():
    # only a round-7 gain, only a round-3 loss: falls through to the highest-value loss
    moves = [("ARI", "SF")] + _filler(5) + [("KC", "ARI")] + _filler(13)
    picks = allocate_comp_picks(ranked_txs(moves))
    assert not [p for p in picks if p.team_id == "ARI"]
    assert [p.round for p in picks if p.team_id == "KC"] == [7]


def test_same_round_cancelled_before_lower_tier():
    # ARI loses a round-3 and a round-4 player, gains one round-3 player
    moves = [("ARI", "SF"), ("KC", "ARI"), ("ARI", "SEA")] + _filler(17)
    picks = allocate_comp_picks(ranked_txs(moves))
    # PL1 (round 3) is KC's loss; ARI's PL0 (round 3) is the one cancelled
    ari = [p for p in picks if p.team_id == "ARI"]
    assert [(p.round, p.player_id) for p in ari] == [(4, "PL2")]


def test_per_team_cap():
    moves = [("ARI", "SF")] * 8 + _filler(12)
    picks = allocate_comp_picks(ranked_txs(moves))
    ari = [p for p in picks if p.team_id == "ARI"]
    assert len(ari) == 4
    assert [p.player_id for p in ari] == ["PL0", "PL1", "PL2", "PL3"]


def test_league_cap_drops_lowest_values():
    txs = [make_tx(i, f"T{i:03d}", "SINK", 50_000_000 - i * 100_000) for i in range(100)]
    picks = allocate_comp_picks(txs)
    assert len(picks) == 32
    values = [p.value for p in picks]
    assert values == sorted(values, reverse=True)
    assert all(3 <= p.round <= 7 for p in picks)
    assert picks[-1].player_id == "PL31"


def test_allocator_bounds_hold_for_mixed_ledger():
    teams = ["ARI", "ATL", "BAL", "BUF", "CAR", "CHI"]
    txs = [
        make_tx(i, teams[i % 6], teams[(i * 5 + 1) % 6], 2_000_000 + (i * 7919) % 30_000_000,
                snap_percentage=(i % 10) / 10.0, is_pro_bowl=(i % 7 == 0))
        for i in range(300)
    ]
    picks = allocate_comp_picks(txs)
    assert len(picks) <= 32
    per_team = {}
    for p in picks:
        per_team[p.team_id] = per_team.get(p.team_id, 0) + 1
        assert p.round in (3, 4, 5, 6, 7)
    assert all(n <= 4 for n in per_team.values())


def test_deterministic():
    txs = ranked_txs([("ARI", "ZZA"), ("CHI", "ARI")] + _filler(30))
    assert allocate_comp_picks(txs) == allocate_comp_picks(list(txs))


def test_round_helpers():
    txs = ranked_txs([("ARI", "ZZA"), ("ARI", "ZZB")] + _filler(18))
    picks = allocate_comp_picks(txs)
    counts = comp_picks_per_round(picks)
    assert counts == {3: 2, 4: 1, 5: 1, 6: 2, 7: 0}
    r3 = comp_picks_for_round(picks, 3)
    assert [p.player_id for p in r3] == ["PL0", "PL1"]
    assert comp_picks_for_round(picks, 1) == []


def test_inject_comp_picks_replaces_previous_entries():
    txs = ranked_txs([("ARI", "ZZA"), ("ARI", "ZZB")] + _filler(18))
    picks = allocate_comp_picks(txs)
    base = [DraftPickEntry(year=2025, round=1, original_team_id="ARI", current_team_id="ARI")]
    once = inject_comp_picks(base, picks, 2025)
    twice = inject_comp_picks(once, picks, 2025)
    assert len(once) == 1 + len(picks)
    assert once == twice
    comp_rows = [e for e in once if e.is_compensatory]
    assert all(e.year == 2025 and e.current_team_id == e.original_team_id for e in comp_rows)
    assert comp_rows[0].notes.startswith("Compensatory pick")


def test_bad_transaction_type_raises():
    with pytest.raises(TypeError):
        allocate_comp_picks([42])
