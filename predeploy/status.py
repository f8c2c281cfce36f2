"""
Traffic-light status model for the pre-deploy report.

Provides:
  - Status / ConditionResult / Glyph enums
  - reduce_status()    – worst-of reduction over integration statuses
  - condition_glyph()  – glyph for a single alerting condition
  - status_glyph()     – glyph for an integration or overall status
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class Status(str, Enum):
    OK = "ok"
    WARN = "warn"
    ERROR = "error"
    UNKNOWN = "unknown"


class ConditionResult(str, Enum):
    TRUE = "true"
    FALSE = "false"
    INDETERMINATE = "indeterminate"

    @classmethod
    def parse(cls, state: Any) -> "ConditionResult":
        """Map a raw condition state ("true"/"false"/anything) to a result."""
        if isinstance(state, cls):
            return state
        if isinstance(state, bool):
            return cls.TRUE if state else cls.FALSE
        if isinstance(state, str) and state.strip().lower() in ("true", "false"):
            return cls(state.strip().lower())
        return cls.INDETERMINATE


class Glyph(str, Enum):
    RED = ":red_circle:"
    GREEN = ":green_circle:"
    WHITE = ":white_circle:"
    YELLOW = ":yellow_circle:"


# Checked in this order; the first severity present wins.
SEVERITY_ORDER: tuple[Status, ...] = (Status.ERROR, Status.WARN, Status.UNKNOWN)

_STATUS_GLYPHS: dict[Status, Glyph] = {
    Status.UNKNOWN: Glyph.WHITE,
    Status.ERROR: Glyph.RED,
    Status.OK: Glyph.GREEN,
    Status.WARN: Glyph.YELLOW,
}


def _coerce(value: Any) -> Status | None:
    if value is None or value is False:
        return None
    if isinstance(value, Status):
        return value
    try:
        return Status(value)
    except ValueError:
        raise ValueError(f"Not a status value: {value!r}") from None


def reduce_status(statuses: Iterable[Any]) -> Status:
    """Reduce integration statuses to the single worst one.

    Absent entries (None or False) never raise severity. An empty or
    all-absent sequence is OK.
    """
    present = {s for s in (_coerce(v) for v in statuses) if s is not None}
    for severity in SEVERITY_ORDER:
        if severity in present:
            return severity
    return Status.OK


def condition_glyph(result: Any) -> Glyph:
    """Red when the condition fired, green when it did not, white otherwise."""
    state = getattr(result, "state", result)
    if state is None:
        return Glyph.WHITE
    parsed = ConditionResult.parse(state)
    if parsed is ConditionResult.TRUE:
        return Glyph.RED
    if parsed is ConditionResult.FALSE:
        return Glyph.GREEN
    return Glyph.WHITE


def status_glyph(status: Status | str) -> Glyph:
    try:
        return _STATUS_GLYPHS[Status(status)]
    except ValueError:
        raise ValueError(f"Not a status value: {status!r}") from None
