from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter

from app.schemas.common import EmptyRequest
from app.schemas.draft import (
    DraftCompleteRequest,
    DraftPickRequest,
    DraftPrepareRequest,
    DraftScoutingRequest,
    DraftSimulateRequest,
    DraftSnapshotImportRequest,
    DraftStartRequest,
    DraftVersionedRequest,
)
from app.services.draft_facade import (
    _draft_error_response,
    _invariant_error_response,
    _no_draft_response,
    _ok,
    build_engine,
    get_engine,
    install_engine,
)
from draft.errors import DraftInvariantError

router = APIRouter()


def _pick_payload(result: Any) -> Dict[str, Any]:
    return result.to_dict()


@router.post("/api/draft/prepare")
async def api_draft_prepare(req: DraftPrepareRequest):
    # A new season gets its own engine, served only once prepare succeeds.
    engine = get_engine()
    fresh = engine is None or engine.state.season != int(req.season)
    if fresh:
        engine = build_engine(req.season, rng_seed=req.rng_seed)
    try:
        res = engine.prepare(
            [s.model_dump() for s in req.standings],
            [t.model_dump() for t in req.transactions],
            player_names=req.player_names,
            pick_ledger=req.pick_ledger,
            prospects=req.prospects,
            class_seed=req.class_seed,
            user_team_ids=req.user_team_ids,
            roster=list(req.roster),
            expected_version=req.expected_version,
        )
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    if fresh:
        install_engine(engine)
    st = engine.state
    return _ok(
        engine,
        season=int(st.season),
        draft_order=list(st.draft_order[:32]),
        comp_picks=[c.to_dict() for c in st.comp_picks],
        pick_budget=int(st.pick_budget),
        prospects=len(st.prospects),
    )


@router.post("/api/draft/start")
async def api_draft_start(req: DraftStartRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    res = engine.start(current_week=req.current_week, expected_version=req.expected_version)
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine)


@router.get("/api/draft/state")
async def api_draft_state():
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    return {"ok": True, "state": engine.public_state()}


@router.get("/api/draft/on-the-clock")
async def api_draft_on_the_clock():
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    slot = engine.on_the_clock()
    return _ok(engine, slot=None if slot is None else slot.to_dict())


@router.post("/api/draft/pick")
async def api_draft_pick(req: DraftPickRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    try:
        res = engine.pick(req.team_id, req.prospect_id, expected_version=req.expected_version)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, pick=_pick_payload(res.value))


@router.post("/api/draft/pick/auto")
async def api_draft_auto_pick(req: DraftVersionedRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    try:
        res = engine.auto_pick(expected_version=req.expected_version)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, pick=_pick_payload(res.value))


@router.post("/api/draft/simulate-to-user")
async def api_draft_simulate_to_user(req: DraftSimulateRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    try:
        res = engine.simulate_to_user(max_picks=req.max_picks, expected_version=req.expected_version)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    picks: List[Dict[str, Any]] = [_pick_payload(p) for p in res.value]
    slot = engine.on_the_clock()
    return _ok(
        engine,
        picks=picks,
        on_the_clock=None if slot is None else slot.to_dict(),
        completed=engine.state.completion.is_locked,
    )


@router.post("/api/draft/advance")
async def api_draft_advance(req: DraftVersionedRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    try:
        res = engine.advance(expected_version=req.expected_version)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, pick=_pick_payload(res.value))


@router.post("/api/draft/complete")
async def api_draft_complete(req: DraftCompleteRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    try:
        res = engine.complete(team_ids=req.team_ids)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    outcome = res.value
    return _ok(
        engine,
        already_completed=bool(outcome.already_completed),
        udfa_count=len(outcome.free_agents),
        completion=engine.state.completion.to_dict(),
    )


@router.get("/api/draft/summary/{team_id}")
async def api_draft_summary(team_id: str):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    summary = engine.summary(team_id)
    if summary is None:
        return _ok(engine, summary=None)
    return _ok(engine, summary=summary.to_dict())


@router.post("/api/draft/summary/dismiss")
async def api_draft_summary_dismiss(req: EmptyRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    res = engine.dismiss_summary()
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, can_advance_week=engine.state.completion.can_advance_week)


@router.get("/api/draft/can-advance-week")
async def api_draft_can_advance_week():
    engine = get_engine()
    if engine is None:
        return {"ok": True, "can_advance_week": True}
    res = engine.can_advance_week()
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, can_advance_week=True)


@router.get("/api/draft/access")
async def api_draft_access(season_phase: str, week: int):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    res = engine.validate_access(season_phase=season_phase, week=week)
    if not res.ok:
        return _draft_error_response(res)
    return _ok(engine, allowed=True)


@router.post("/api/draft/scouting")
async def api_draft_scouting(req: DraftScoutingRequest):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    res = engine.spend_scouting(req.prospect_id, req.points, expected_version=req.expected_version)
    if not res.ok:
        return _draft_error_response(res)
    prospect = engine.state.prospect(req.prospect_id)
    return _ok(
        engine,
        prospect=None if prospect is None else prospect.to_public_dict(),
        scouting_points_available=int(engine.state.scouting_points_available),
    )


@router.get("/api/draft/audit/{team_id}")
async def api_draft_audit(team_id: str):
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    return _ok(engine, audit=engine.audit(team_id).to_dict())


@router.get("/api/draft/free-agents")
async def api_draft_free_agents():
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    return _ok(engine, free_agents=[p.to_dict() for p in engine.free_agents])


@router.get("/api/draft/snapshot")
async def api_draft_snapshot_export():
    engine = get_engine()
    if engine is None:
        return _no_draft_response()
    return _ok(engine, snapshot=engine.export_snapshot())


@router.post("/api/draft/snapshot")
async def api_draft_snapshot_import(req: DraftSnapshotImportRequest):
    engine = get_engine()
    fresh = engine is None
    if fresh:
        engine = build_engine(int(req.snapshot.get("season") or 0))
    try:
        res = engine.import_snapshot(req.snapshot, expected_version=req.expected_version)
    except DraftInvariantError as exc:
        return _invariant_error_response(exc)
    if not res.ok:
        return _draft_error_response(res)
    if fresh:
        install_engine(engine)
    return _ok(engine, season=int(engine.state.season))
