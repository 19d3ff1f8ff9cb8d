"""Timestamp normalization shared by the record boundary, filters and exporters.

Every datetime that enters the core is timezone-aware UTC. SQLite hands back
naive values for ``DateTime(timezone=True)`` columns; those are read as UTC.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive input is taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with a ``Z`` suffix, e.g. ``2024-05-01T08:00:00Z``."""
    if value is None:
        return None
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def parse_date_bound(raw: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse a ``start_date``/``end_date`` query value.

    Accepts ``YYYY-MM-DD`` or a full ISO-8601 timestamp. A bare date expands to
    midnight, or to the last instant of the day when ``end_of_day`` is set, so
    an end bound of ``2024-04-25`` still includes events on the 25th.
    Unparsable input returns None (no constraint).
    """
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        if value.endswith(("Z", "z")):
            value = value[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(value))
    except (ValueError, OverflowError):
        logger.debug("Ignoring unparsable date bound %r", raw)
        return None
