from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TeamStandingModel(BaseModel):
    team_id: str
    name: str = ""
    wins: int = 0
    losses: int = 0
    ties: int = 0
    power_ranking: int = 0


class FreeAgencyTransactionModel(BaseModel):
    id: str
    player_id: str
    position: str = ""
    old_team_id: str
    new_team_id: str
    average_yearly_value: float
    snap_percentage: float = 0.0
    is_all_pro: bool = False
    is_pro_bowl: bool = False
    is_unrestricted_free_agent: bool = True
    contract_expired_naturally: bool = True
    signed_before_deadline: bool = True
    transaction_date: str = ""


class DraftPrepareRequest(BaseModel):
    # Standings must cover all 32 teams; transactions feed compensatory picks.
    season: int
    standings: List[TeamStandingModel] = Field(default_factory=list)
    transactions: List[FreeAgencyTransactionModel] = Field(default_factory=list)
    player_names: Dict[str, str] = Field(default_factory=dict)
    # Optional explicit class; otherwise generated from class_seed.
    prospects: Optional[List[Dict[str, Any]]] = None
    class_seed: Optional[int] = None
    pick_ledger: Optional[List[Dict[str, Any]]] = None
    roster: List[Dict[str, Any]] = Field(default_factory=list)
    user_team_ids: List[str] = Field(default_factory=list)
    rng_seed: Optional[int] = None
    expected_version: Optional[int] = None


class DraftStartRequest(BaseModel):
    current_week: int
    expected_version: Optional[int] = None


class DraftPickRequest(BaseModel):
    team_id: str
    prospect_id: str
    expected_version: Optional[int] = None


class DraftVersionedRequest(BaseModel):
    expected_version: Optional[int] = None


class DraftSimulateRequest(BaseModel):
    max_picks: Optional[int] = None
    expected_version: Optional[int] = None


class DraftCompleteRequest(BaseModel):
    team_ids: Optional[List[str]] = None


class DraftScoutingRequest(BaseModel):
    prospect_id: str
    points: int = 1
    expected_version: Optional[int] = None


class DraftSnapshotImportRequest(BaseModel):
    snapshot: Dict[str, Any]
    expected_version: Optional[int] = None
