"""Event narrowing and ordering.

Filters are conjunctive: vessel identity, confidence tier and a date window.
The date window uses overlap semantics against each event's effective
interval ``[event_start, event_end or event_start]``, so an event that spans a
window boundary still matches.

Nothing here mutates its input; every function returns a new list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from app.models.base import ConfidenceEnum
from app.schemas.event import EventFilters, EventRecord

logger = logging.getLogger(__name__)

_CONFIDENCE_BY_VALUE: dict[str, ConfidenceEnum] = {c.value: c for c in ConfidenceEnum}


@dataclass(frozen=True)
class DateBounds:
    min_date: Optional[str] = None
    max_date: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.min_date is not None


def parse_confidence(raw: Optional[str]) -> Optional[ConfidenceEnum]:
    """Map a raw query value to a tier; anything unrecognized means no filter."""
    if not raw:
        return None
    confidence = _CONFIDENCE_BY_VALUE.get(raw)
    if confidence is None:
        logger.debug("Ignoring unrecognized confidence filter %r", raw)
    return confidence


def _matches(event: EventRecord, filters: EventFilters) -> bool:
    if filters.vessel_id and event.vessel_id != filters.vessel_id:
        return False
    if filters.confidence is not None and event.confidence != filters.confidence:
        return False
    if filters.start_date is not None and event.effective_end < filters.start_date:
        return False
    if filters.end_date is not None and event.event_start > filters.end_date:
        return False
    return True


def filter_events(
    events: Iterable[EventRecord], filters: Optional[EventFilters] = None
) -> list[EventRecord]:
    if filters is None:
        return list(events)
    return [e for e in events if _matches(e, filters)]


def sort_by_recency(events: Iterable[EventRecord]) -> list[EventRecord]:
    """Most recently verified first; ties keep their input order."""
    return sorted(events, key=lambda e: e.last_verified_at, reverse=True)


def events_for_vessel(events: Sequence[EventRecord], vessel_id: Optional[str]) -> list[EventRecord]:
    if not vessel_id:
        return list(events)
    return [e for e in events if e.vessel_id == vessel_id]


def latest_events_by_vessel(events: Iterable[EventRecord]) -> dict[str, EventRecord]:
    """Single pass: the most recently verified event per vessel (first wins ties)."""
    latest: dict[str, EventRecord] = {}
    for event in events:
        existing = latest.get(event.vessel_id)
        if existing is None or event.last_verified_at > existing.last_verified_at:
            latest[event.vessel_id] = event
    return latest


def derive_date_bounds(events: Iterable[EventRecord]) -> DateBounds:
    """Earliest effective start and latest effective end, as ISO dates."""
    min_start = None
    max_end = None
    for event in events:
        if min_start is None or event.event_start < min_start:
            min_start = event.event_start
        if max_end is None or event.effective_end > max_end:
            max_end = event.effective_end
    if min_start is None:
        return DateBounds()
    return DateBounds(min_date=min_start.date().isoformat(), max_date=max_end.date().isoformat())
