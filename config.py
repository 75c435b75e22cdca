from __future__ import annotations

"""Process-level settings for the draft server.

Tuning constants for the draft itself live in draft/config.py. This module only
carries league identity and values read from the environment.
"""

import os
from typing import Optional, Tuple

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 32-team league, alphabetical by abbreviation.
ALL_TEAM_IDS: Tuple[str, ...] = (
    "ARI", "ATL", "BAL", "BUF", "CAR", "CHI", "CIN", "CLE",
    "DAL", "DEN", "DET", "GB", "HOU", "IND", "JAX", "KC",
    "LAC", "LAR", "LV", "MIA", "MIN", "NE", "NO", "NYG",
    "NYJ", "PHI", "PIT", "SEA", "SF", "TB", "TEN", "WAS",
)


def _env_int(name: str) -> Optional[int]:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc


# Optional fixed seed for the server's draft RNG (reproducible drafts).
DRAFT_RNG_SEED: Optional[int] = _env_int("DRAFT_RNG_SEED")

# If set, state-changing API calls must carry X-Admin-Token.
DRAFT_ADMIN_TOKEN: str = (os.environ.get("DRAFT_ADMIN_TOKEN") or "").strip()

LOG_LEVEL: str = (os.environ.get("DRAFT_LOG_LEVEL") or "INFO").strip().upper()
