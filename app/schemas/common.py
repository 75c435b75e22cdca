from __future__ import annotations

from pydantic import BaseModel


class EmptyRequest(BaseModel):
    """Body for POST endpoints that take no parameters."""

    pass
