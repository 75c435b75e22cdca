from __future__ import annotations

"""draft.locks

Process-local lock that serializes every state-changing draft operation.
Each critical section is labelled with a DraftOp; the stack of labels held
by the owning thread is kept so a timed-out caller can report who is
holding the draft.

Constraints:
- threading.RLock based. Multiple uvicorn workers are NOT synchronized.
- Re-entrant: simulate_to_user holds SIM_TO_USER while each AI_PICK and the
  trailing COMPLETE nest inside it.
- The holder stack is only mutated while the lock is held.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from threading import RLock
from typing import Iterator, List, Optional, Union

logger = logging.getLogger(__name__)


class DraftOp(str, Enum):
    PREPARE = "PREPARE"
    START = "START"
    USER_PICK = "USER_PICK"
    AUTO_PICK = "AUTO_PICK"
    AI_PICK = "AI_PICK"
    ADVANCE = "ADVANCE"
    SIM_TO_USER = "SIM_TO_USER"
    COMPLETE = "COMPLETE"
    SCOUTING = "SCOUTING"
    DISMISS_SUMMARY = "DISMISS_SUMMARY"
    IMPORT_SNAPSHOT = "IMPORT_SNAPSHOT"


_LOCK = RLock()
_HOLDERS: List[str] = []


def _label(op: Union[DraftOp, str]) -> str:
    return op.value if isinstance(op, DraftOp) else str(op or "UNLABELLED")


def _wait_seconds(timeout_s: Optional[float]) -> float:
    if timeout_s is None:
        return -1
    try:
        return max(0.0, float(timeout_s))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"timeout_s must be seconds, got {timeout_s!r}") from exc


def current_holders() -> List[str]:
    """Labels of the sections currently holding the lock, outermost first."""
    return list(_HOLDERS)


@contextmanager
def draft_exec_serial_lock(op: Union[DraftOp, str], *, timeout_s: Optional[float] = None) -> Iterator[None]:
    """Run one draft critical section.

    timeout_s=None waits forever; a negative value means a single try.
    Raises TimeoutError when the lock stays busy.
    """
    label = _label(op)
    if not _LOCK.acquire(timeout=_wait_seconds(timeout_s)):
        holder = _HOLDERS[0] if _HOLDERS else "unknown"
        logger.warning("DRAFT_LOCK_TIMEOUT op=%s holder=%s timeout_s=%s", label, holder, timeout_s)
        raise TimeoutError(f"draft is busy with {holder}; {label} gave up after {timeout_s}s")
    _HOLDERS.append(label)
    if len(_HOLDERS) > 1:
        logger.debug("DRAFT_LOCK_NESTED stack=%s", "/".join(_HOLDERS))
    try:
        yield
    finally:
        _HOLDERS.pop()
        _LOCK.release()


__all__ = [
    "DraftOp",
    "current_holders",
    "draft_exec_serial_lock",
]
