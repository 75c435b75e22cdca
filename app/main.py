from __future__ import annotations

import hmac
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import DRAFT_ADMIN_TOKEN, DRAFT_RNG_SEED, LOG_LEVEL
from draft.errors import DraftInvariantError
from app.api.router import api_router
from app.services.draft_facade import _invariant_error_response

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Draft Resolution Server")


def _admin_token() -> str:
    return (os.environ.get("DRAFT_ADMIN_TOKEN") or DRAFT_ADMIN_TOKEN).strip()


@app.on_event("startup")
def _startup_log_config() -> None:
    logger.info(
        "DRAFT_SERVER_START rng_seed=%s admin_guard=%s",
        DRAFT_RNG_SEED if DRAFT_RNG_SEED is not None else "random",
        "on" if _admin_token() else "off",
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _admin_guard_middleware(request: Request, call_next):
    """Require X-Admin-Token on draft writes when DRAFT_ADMIN_TOKEN is set.

    Reads (GET) stay open so spectators can follow the board.
    """
    token = _admin_token()
    is_write = (request.method or "GET").upper() == "POST" and (request.url.path or "").startswith("/api/")
    if token and is_write:
        provided = (request.headers.get("X-Admin-Token") or "").strip()
        if not hmac.compare_digest(provided, token):
            logger.warning("DRAFT_ADMIN_REJECTED path=%s", request.url.path)
            return JSONResponse(status_code=401, content={"detail": "Unauthorized: invalid X-Admin-Token"})
    return await call_next(request)


@app.exception_handler(DraftInvariantError)
async def _draft_invariant_handler(request: Request, exc: DraftInvariantError):
    logger.error("DRAFT_INVARIANT_BROKEN path=%s code=%s message=%s", request.url.path, exc.code, exc.message)
    return _invariant_error_response(exc)


app.include_router(api_router)
