from __future__ import annotations

import random

from draft.audit import perform_pre_draft_audit
from draft.needs import analyze_team_needs, position_counts
from draft.types import DraftPickEntry


def _players(team, pos, n, status="active"):
    return [{"id": f"{team}-{pos}-{i}", "team_id": team, "position": pos, "status": status} for i in range(n)]


def _full_depth(team):
    rows = []
    for pos, n in (("QB", 2), ("RB", 3), ("WR", 4), ("TE", 2), ("OL", 6), ("DL", 5), ("LB", 4), ("CB", 4), ("S", 2)):
        rows += _players(team, pos, n)
    return rows


def test_empty_roster_keeps_depth_table_order():
    assert analyze_team_needs("KC", []) == ["QB", "RB", "WR"]


def test_thinnest_positions_first():
    roster = _players("KC", "QB", 2) + _players("KC", "RB", 3) + _players("KC", "WR", 4) + _players("KC", "OL", 3)
    assert analyze_team_needs("KC", roster) == ["TE", "DL", "LB"]


def test_only_the_teams_active_players_count():
    roster = _players("KC", "QB", 2, status="injured_reserve") + _players("SF", "QB", 3)
    assert position_counts(roster, "kc") == {}
    assert analyze_team_needs("KC", roster)[0] == "QB"


def test_full_roster_still_reports_needs():
    needs = analyze_team_needs("KC", _full_depth("KC"), limit=3)
    assert len(needs) == 3


def test_rng_shuffles_ties_reproducibly():
    a = analyze_team_needs("KC", [], rng=random.Random(1), limit=9)
    b = analyze_team_needs("KC", [], rng=random.Random(1), limit=9)
    assert a == b
    assert sorted(a) == sorted(["QB", "RB", "WR", "TE", "OL", "DL", "LB", "CB", "S"])


def _ledger(team, n, year=2025):
    return [DraftPickEntry(year=year, round=r, original_team_id=team, current_team_id=team) for r in range(1, n + 1)]


def test_audit_blocks_full_roster():
    roster = _players("KC", "WR", 88)
    audit = perform_pre_draft_audit("KC", roster, _ledger("KC", 7), 2025)
    assert not audit.can_enter_draft
    assert audit.available_spots == 2
    assert audit.spots_needed == 5
    assert audit.recommendations[0] == "Need to free up 5 roster spots before the draft"


def test_audit_ready_with_tight_space():
    roster = _full_depth("KC") + _players("KC", "K", 1) + _players("KC", "P", 1)
    roster += _players("KC", "LB", 90 - len(roster) - 10)
    audit = perform_pre_draft_audit("KC", roster, _ledger("KC", 7), 2025)
    assert audit.can_enter_draft
    assert audit.available_spots == 10
    assert audit.recommendations[:3] == [
        "Ready to enter the draft",
        "3 spots will remain after the draft",
        "Consider freeing more space for post-draft flexibility",
    ]
    assert not any(r.startswith("No ") for r in audit.recommendations)


def test_audit_flags_missing_positions():
    audit = perform_pre_draft_audit("KC", _players("KC", "QB", 1), [], 2025)
    assert audit.can_enter_draft
    assert "No Ks on roster - consider drafting one" in audit.recommendations
    assert not any(r.startswith("No QBs") for r in audit.recommendations)
    assert audit.to_dict()["max_roster_size"] == 90
