"""Timestamp normalisation shared by every dated model.

Snapshots mix offset-aware values (``2025-06-01T00:00:00Z``) with naive ones,
and the clock may be either. Everything is compared as naive UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return to_naive_utc(datetime.now(timezone.utc))


Timestamp = Annotated[datetime, AfterValidator(to_naive_utc)]
