from __future__ import annotations

"""Materialized players produced by the draft.

A successful pick turns a Prospect into a rostered rookie on a rookie-scale
contract. Completion turns every prospect left on the board into an
undrafted free agent on a league-minimum one-year deal.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import (
    DRAFTED_PLAYER_MORALE,
    LEAGUE_MIN_SALARY,
    ROOKIE_BASE_DEFAULT,
    ROOKIE_BASE_VALUE,
    ROOKIE_CONTRACT_YEARS,
    UDFA_INCENTIVES,
    UDFA_MORALE,
    UDFA_OVERALL_FLOOR,
    UDFA_OVERALL_PENALTY,
    UDFA_POTENTIAL_RANGE,
)
from .pool import Prospect
from .types import DraftOutcome, TeamId, norm_team_id

STATUS_ACTIVE = "active"
STATUS_FREE_AGENT = "free_agent"


@dataclass(frozen=True, slots=True)
class Contract:
    total_value: int
    years: int
    current_year_cap: int
    guaranteed_money: int = 0
    signing_bonus: int = 0
    incentives: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_value": int(self.total_value),
            "years": int(self.years),
            "current_year_cap": int(self.current_year_cap),
            "guaranteed_money": int(self.guaranteed_money),
            "signing_bonus": int(self.signing_bonus),
            "incentives": int(self.incentives),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Contract":
        return cls(
            total_value=int(d.get("total_value") or 0),
            years=int(d.get("years") or 1),
            current_year_cap=int(d.get("current_year_cap") or 0),
            guaranteed_money=int(d.get("guaranteed_money") or 0),
            signing_bonus=int(d.get("signing_bonus") or 0),
            incentives=int(d.get("incentives") or 0),
        )


def rookie_contract(round_no: int) -> Contract:
    """Rookie scale by round; fully guaranteed in round 1."""
    total = int(ROOKIE_BASE_VALUE.get(int(round_no), ROOKIE_BASE_DEFAULT))
    years = int(ROOKIE_CONTRACT_YEARS)
    return Contract(
        total_value=total,
        years=years,
        current_year_cap=total // years,
        guaranteed_money=total if int(round_no) == 1 else total // 4,
        signing_bonus=total // 4,
    )


def udfa_contract() -> Contract:
    return Contract(
        total_value=int(LEAGUE_MIN_SALARY),
        years=1,
        current_year_cap=int(LEAGUE_MIN_SALARY),
        incentives=int(UDFA_INCENTIVES),
    )


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    id: str
    first_name: str
    last_name: str
    position: str
    age: int
    college: str
    overall: int
    potential: int
    status: str
    contract: Contract
    team_id: Optional[TeamId] = None
    draft_year: int = 0
    draft_round: int = 0
    draft_pick: int = 0
    draft_overall: int = 0
    morale: int = UDFA_MORALE
    is_udfa: bool = False
    attributes: Dict[str, int] = field(default_factory=dict)
    personality: Dict[str, int] = field(default_factory=dict)
    outcome: Optional[DraftOutcome] = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "first_name": str(self.first_name),
            "last_name": str(self.last_name),
            "name": self.name,
            "position": str(self.position),
            "age": int(self.age),
            "college": str(self.college),
            "overall": int(self.overall),
            "potential": int(self.potential),
            "status": str(self.status),
            "contract": self.contract.to_dict(),
            "team_id": self.team_id,
            "draft_year": int(self.draft_year),
            "draft_round": int(self.draft_round),
            "draft_pick": int(self.draft_pick),
            "draft_overall": int(self.draft_overall),
            "morale": int(self.morale),
            "is_udfa": bool(self.is_udfa),
            "attributes": dict(self.attributes),
            "personality": dict(self.personality),
            "outcome": None if self.outcome is None else self.outcome.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PlayerRecord":
        outcome = d.get("outcome")
        team_id = d.get("team_id")
        return cls(
            id=str(d.get("id") or ""),
            first_name=str(d.get("first_name") or ""),
            last_name=str(d.get("last_name") or ""),
            position=str(d.get("position") or ""),
            age=int(d.get("age") or 22),
            college=str(d.get("college") or ""),
            overall=int(d.get("overall") or 0),
            potential=int(d.get("potential") or 0),
            status=str(d.get("status") or STATUS_ACTIVE),
            contract=Contract.from_dict(d.get("contract") or {}),
            team_id=norm_team_id(team_id) if team_id else None,
            draft_year=int(d.get("draft_year") or 0),
            draft_round=int(d.get("draft_round") or 0),
            draft_pick=int(d.get("draft_pick") or 0),
            draft_overall=int(d.get("draft_overall") or 0),
            morale=int(d.get("morale") or 0),
            is_udfa=bool(d.get("is_udfa", False)),
            attributes=dict(d.get("attributes") or {}),
            personality=dict(d.get("personality") or {}),
            outcome=DraftOutcome.from_dict(outcome) if isinstance(outcome, Mapping) else None,
        )


def create_drafted_player(
    prospect: Prospect,
    *,
    team_id: TeamId,
    round_no: int,
    pick: int,
    overall_no: int,
    season: int,
    outcome: DraftOutcome,
) -> PlayerRecord:
    return PlayerRecord(
        id=prospect.id,
        first_name=prospect.first_name,
        last_name=prospect.last_name,
        position=prospect.position,
        age=int(prospect.age),
        college=prospect.college,
        overall=int(prospect.true_overall),
        potential=int(outcome.final_potential),
        status=STATUS_ACTIVE,
        contract=rookie_contract(round_no),
        team_id=norm_team_id(team_id),
        draft_year=int(season),
        draft_round=int(round_no),
        draft_pick=int(pick),
        draft_overall=int(overall_no),
        morale=DRAFTED_PLAYER_MORALE,
        attributes=dict(prospect.attributes),
        personality=dict(prospect.personality),
        outcome=outcome,
    )


def udfa_overall(prospect: Prospect) -> int:
    return max(UDFA_OVERALL_FLOOR, prospect.position_overall() - UDFA_OVERALL_PENALTY)


def create_udfa_player(prospect: Prospect, *, rng: random.Random) -> PlayerRecord:
    lo, hi = UDFA_POTENTIAL_RANGE
    return PlayerRecord(
        id=prospect.id,
        first_name=prospect.first_name,
        last_name=prospect.last_name,
        position=prospect.position,
        age=int(prospect.age),
        college=prospect.college,
        overall=udfa_overall(prospect),
        potential=rng.randint(lo, hi),
        status=STATUS_FREE_AGENT,
        contract=udfa_contract(),
        morale=UDFA_MORALE,
        is_udfa=True,
        attributes=dict(prospect.attributes),
        personality=dict(prospect.personality),
    )
