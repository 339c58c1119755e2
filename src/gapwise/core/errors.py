"""Input-shape errors raised by the engine.

Degenerate inputs (empty collections, zero totals) are never errors. Only
values outside their domain are rejected, and they are rejected rather than
clamped so that upstream data-integrity bugs stay visible.
"""

from __future__ import annotations

from typing import Any

from ..models.maturity import MaturityLevel


class EngineInputError(ValueError):
    """A field carried a value outside its allowed domain."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {field}: {value!r} ({reason})")


def validate_maturity(value: Any, field: str = "maturity") -> int:
    """Return value if it is an integer maturity level 0-4."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EngineInputError(field, value, "expected an integer maturity level")
    if not MaturityLevel.NONEXISTENT <= value <= MaturityLevel.OPTIMIZED:
        raise EngineInputError(field, value, "maturity must be between 0 and 4")
    return int(value)


def validate_count(value: Any, field: str) -> int:
    """Return value if it is a non-negative integer count."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EngineInputError(field, value, "expected an integer count")
    if value < 0:
        raise EngineInputError(field, value, "count cannot be negative")
    return value
