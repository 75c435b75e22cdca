from __future__ import annotations

from fastapi import APIRouter

from app.services.draft_facade import get_engine

router = APIRouter()


@router.get("/")
async def root():
    """Health check with the live draft's headline status."""
    engine = get_engine()
    if engine is None:
        return {"message": "Draft server", "draft": None}
    st = engine.state
    return {
        "message": "Draft server",
        "draft": {
            "season": int(st.season),
            "is_active": bool(st.is_active),
            "phase": st.completion.phase.value,
            "picks_made": int(st.picks_made),
            "version": engine.version,
        },
    }
