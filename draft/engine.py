from __future__ import annotations

"""Draft engine orchestration.

DraftEngine owns the live DraftState for one league-season and is the only
writer. It ties together:
  - session: pure pick/advance operations
  - ai: best-available autopick for AI-controlled teams
  - completion: UDFA conversion, lock and summaries

Every mutation runs under draft_exec_serial_lock and can be pinned to the
state version the caller last saw (expected_version). A stale writer gets a
validation failure instead of overwriting newer state.
"""

import logging
import random
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .ai import BestAvailablePolicy, DraftAIPolicy
from .audit import DraftAuditResult, perform_pre_draft_audit
from .completion import CompletionOutcome, can_advance_week, complete_draft, dismiss_summary, validate_draft_access
from .errors import DRAFT_NOT_ACTIVE, STALE_VERSION, DraftResult
from .locks import DraftOp, draft_exec_serial_lock
from .players import PlayerRecord
from .session import (
    PickResult,
    advance_pick,
    current_slot,
    initialize_draft_state,
    make_pick,
    prepare_draft,
    spend_scouting_points,
    start_draft,
    state_to_public_dict,
)
from .state import DraftState, state_from_dict, state_to_dict
from .types import DraftPickEntry, DraftSummary, PickSlot, TeamId, norm_team_id

logger = logging.getLogger(__name__)


def _team_set(team_ids: Iterable[TeamId]) -> Set[TeamId]:
    return {tid for tid in (norm_team_id(t) for t in team_ids or ()) if tid}


class DraftEngine:
    """Single-writer owner of one season's draft."""

    def __init__(
        self,
        season: int,
        *,
        rng: Optional[random.Random] = None,
        user_team_ids: Iterable[TeamId] = (),
        roster: Optional[List[Any]] = None,
        free_agents: Optional[List[PlayerRecord]] = None,
        policy: Optional[DraftAIPolicy] = None,
        lock_timeout_s: Optional[float] = None,
    ) -> None:
        self._state: DraftState = initialize_draft_state(season)
        self.rng = rng if rng is not None else random.Random()
        self.user_team_ids = _team_set(user_team_ids)
        self.roster: List[Any] = list(roster or [])
        self.free_agents: List[PlayerRecord] = list(free_agents or [])
        self.policy: DraftAIPolicy = policy if policy is not None else BestAvailablePolicy()
        self.lock_timeout_s = lock_timeout_s

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def version(self) -> int:
        return int(self._state.version)

    def on_the_clock(self) -> Optional[PickSlot]:
        return current_slot(self._state)

    def public_state(self) -> Dict[str, Any]:
        return state_to_public_dict(self._state)

    def summary(self, team_id: TeamId) -> Optional[DraftSummary]:
        return self._state.completion.summary_for(norm_team_id(team_id))

    def audit(self, team_id: TeamId, *, ledger: Optional[Sequence[DraftPickEntry]] = None) -> DraftAuditResult:
        return perform_pre_draft_audit(
            team_id,
            self.roster,
            list(ledger) if ledger is not None else list(self._state.pick_ledger),
            self._state.season,
        )

    def can_advance_week(self) -> DraftResult:
        return can_advance_week(self._state)

    def validate_access(self, *, season_phase: str, week: int) -> DraftResult:
        return validate_draft_access(self._state, season_phase=season_phase, week=week)

    def export_snapshot(self) -> Dict[str, Any]:
        return state_to_dict(self._state)

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------

    def _stale(self, expected_version: Optional[int]) -> Optional[DraftResult]:
        if expected_version is None or int(expected_version) == self.version:
            return None
        return DraftResult.invalid(
            STALE_VERSION,
            f"Draft state changed (expected version {expected_version}, current {self.version})",
            expected_version=int(expected_version),
            current_version=self.version,
        )

    def _run(
        self,
        op: DraftOp,
        step: Callable[[DraftState], DraftResult],
        expected_version: Optional[int],
    ) -> DraftResult:
        with draft_exec_serial_lock(op, timeout_s=self.lock_timeout_s):
            stale = self._stale(expected_version)
            if stale is not None:
                return stale
            res = step(self._state)
            if res.ok:
                nxt = res.value.state if isinstance(res.value, (PickResult, CompletionOutcome)) else res.value
                if isinstance(nxt, DraftState):
                    self._state = nxt
            else:
                logger.info("DRAFT_OP_BLOCKED op=%s code=%s message=%s", op.value, res.code, res.message)
            return res

    def prepare(
        self,
        standings: Sequence[Any],
        transactions: Iterable[Any] = (),
        *,
        player_names: Optional[Mapping[str, str]] = None,
        pick_ledger: Optional[Sequence[DraftPickEntry]] = None,
        prospects: Optional[Sequence[Any]] = None,
        class_seed: Optional[int] = None,
        user_team_ids: Optional[Iterable[TeamId]] = None,
        roster: Optional[Sequence[Any]] = None,
        expected_version: Optional[int] = None,
    ) -> DraftResult:
        """Lock the order and load the class.

        user_team_ids and roster replace the engine's own only when the
        prepare succeeds.
        """
        with draft_exec_serial_lock(DraftOp.PREPARE, timeout_s=self.lock_timeout_s):
            res = self._run(
                DraftOp.PREPARE,
                lambda s: prepare_draft(
                    s,
                    standings,
                    list(transactions or []),
                    player_names=player_names,
                    pick_ledger=pick_ledger,
                    prospects=prospects,
                    class_seed=class_seed,
                ),
                expected_version,
            )
            if res.ok:
                if user_team_ids is not None:
                    self.user_team_ids = _team_set(user_team_ids)
                if roster is not None:
                    self.roster = list(roster)
            return res

    def start(self, *, current_week: int, expected_version: Optional[int] = None) -> DraftResult:
        return self._run(DraftOp.START, lambda s: start_draft(s, current_week=current_week), expected_version)

    def _after_pick(self, res: DraftResult) -> DraftResult:
        if res.ok and isinstance(res.value, PickResult) and res.value.draft_complete:
            done = self.complete()
            if not done.ok:
                return done
        return res

    def pick(self, team_id: TeamId, prospect_id: str, *, expected_version: Optional[int] = None) -> DraftResult:
        with draft_exec_serial_lock(DraftOp.USER_PICK, timeout_s=self.lock_timeout_s):
            res = self._run(
                DraftOp.USER_PICK,
                lambda s: make_pick(s, team_id, prospect_id, rng=self.rng),
                expected_version,
            )
            return self._after_pick(res)

    def advance(self, *, expected_version: Optional[int] = None) -> DraftResult:
        with draft_exec_serial_lock(DraftOp.ADVANCE, timeout_s=self.lock_timeout_s):
            return self._after_pick(self._run(DraftOp.ADVANCE, advance_pick, expected_version))

    def _ai_step(self, state: DraftState) -> DraftResult:
        slot = current_slot(state)
        if slot is None:
            return DraftResult.invalid(DRAFT_NOT_ACTIVE, "Draft is not active")
        choice = self.policy.choose(state.prospects, slot)
        if choice is None:
            return advance_pick(state)
        return make_pick(state, slot.drafting_team_id, choice.id, rng=self.rng)

    def auto_pick(self, *, expected_version: Optional[int] = None) -> DraftResult:
        """Let the AI pick for whoever is on the clock (user teams included)."""
        with draft_exec_serial_lock(DraftOp.AUTO_PICK, timeout_s=self.lock_timeout_s):
            return self._after_pick(self._run(DraftOp.AUTO_PICK, self._ai_step, expected_version))

    def simulate_to_user(
        self,
        *,
        max_picks: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> DraftResult:
        """Run AI picks until a user team is on the clock or the draft ends.

        Value: list of PickResult.
        """
        with draft_exec_serial_lock(DraftOp.SIM_TO_USER, timeout_s=self.lock_timeout_s):
            stale = self._stale(expected_version)
            if stale is not None:
                return stale
            made: List[PickResult] = []
            limit = int(max_picks) if max_picks is not None else None
            while True:
                if limit is not None and len(made) >= limit:
                    break
                slot = self.on_the_clock()
                if slot is None:
                    break
                if slot.drafting_team_id in self.user_team_ids:
                    break
                res = self._after_pick(self._run(DraftOp.AI_PICK, self._ai_step, None))
                if not res.ok:
                    return res
                made.append(res.value)
            logger.info("DRAFT_SIMULATED picks=%d version=%d", len(made), self.version)
            return DraftResult.success(made)

    def complete(self, *, team_ids: Optional[Iterable[TeamId]] = None) -> DraftResult:
        """Finalize; appends drafted players to the roster and UDFAs to free agency once."""
        with draft_exec_serial_lock(DraftOp.COMPLETE, timeout_s=self.lock_timeout_s):
            res = self._run(
                DraftOp.COMPLETE,
                lambda s: complete_draft(s, roster=list(self.roster), rng=self.rng, team_ids=team_ids),
                None,
            )
            if res.ok and not res.value.already_completed:
                self.roster.extend(self._state.drafted)
                self.free_agents.extend(res.value.free_agents)
                logger.info(
                    "DRAFT_ROSTERS_UPDATED drafted=%d udfa=%d free_agents=%d",
                    len(self._state.drafted),
                    len(res.value.free_agents),
                    len(self.free_agents),
                )
            return res

    def spend_scouting(self, prospect_id: str, points: int, *, expected_version: Optional[int] = None) -> DraftResult:
        return self._run(DraftOp.SCOUTING, lambda s: spend_scouting_points(s, prospect_id, points), expected_version)

    def dismiss_summary(self) -> DraftResult:
        return self._run(DraftOp.DISMISS_SUMMARY, dismiss_summary, None)

    def import_snapshot(self, snapshot: Mapping[str, Any], *, expected_version: Optional[int] = None) -> DraftResult:
        """Replace the live state with a validated snapshot.

        An inconsistent snapshot raises DraftInvariantError and the live state
        is kept.
        """
        return self._run(DraftOp.IMPORT_SNAPSHOT, lambda s: DraftResult.success(state_from_dict(snapshot)), expected_version)
