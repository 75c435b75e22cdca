from __future__ import annotations

import random
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from config import DRAFT_RNG_SEED
from draft.engine import DraftEngine
from draft.errors import DraftInvariantError, DraftResult, FailureKind

_ENGINE: Optional[DraftEngine] = None


def get_engine() -> Optional[DraftEngine]:
    return _ENGINE


def build_engine(season: int, *, rng_seed: Optional[int] = None, **kwargs: Any) -> DraftEngine:
    """A fresh engine that is not yet serving requests."""
    seed = rng_seed if rng_seed is not None else DRAFT_RNG_SEED
    rng = random.Random(seed) if seed is not None else random.Random()
    return DraftEngine(int(season), rng=rng, **kwargs)


def install_engine(engine: DraftEngine) -> DraftEngine:
    """Replace the process-wide engine (one live draft per server)."""
    global _ENGINE
    _ENGINE = engine
    return engine


def reset_engine() -> None:
    global _ENGINE
    _ENGINE = None


def _draft_error_response(result: DraftResult) -> JSONResponse:
    payload = {"ok": False, "error": result.error_dict()}
    status = 409 if result.kind == FailureKind.REJECTED else 400
    return JSONResponse(status_code=status, content=payload)


def _invariant_error_response(error: DraftInvariantError) -> JSONResponse:
    payload = {
        "ok": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details,
        },
    }
    return JSONResponse(status_code=500, content=payload)


def _no_draft_response() -> JSONResponse:
    payload = {
        "ok": False,
        "error": {"code": "DRAFT_NOT_PREPARED", "message": "No draft has been prepared", "details": None},
    }
    return JSONResponse(status_code=404, content=payload)


def _ok(engine: DraftEngine, **extra: Any) -> Dict[str, Any]:
    return {"ok": True, "version": engine.version, **extra}
