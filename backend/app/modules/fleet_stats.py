"""Fleet statistics rollup for the dashboard header.

Counters (all relative to a reference time, default now):
1. total_vessels: every known vessel
2. events_last_30_days: events verified within 30 days of the reference
3. active_deployments: vessels whose latest event is recent and still ongoing
4. vessels_missing_updates: vessels with no event, or whose latest
   verification is older than 14 days

The snapshot is always recomputed; nothing is cached or persisted.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from app.modules.event_filter import latest_events_by_vessel
from app.schemas.event import EventRecord
from app.schemas.stats import FleetStatistics
from app.schemas.vessel import VesselRecord
from app.utils.dates import ensure_utc

logger = logging.getLogger(__name__)

# Thresholds
RECENT_WINDOW = timedelta(days=30)
STALE_AFTER = timedelta(days=14)


def _is_recent(event: EventRecord, reference: datetime) -> bool:
    # Magnitude check: forward-dated verifications also count as recent.
    return abs(reference - event.last_verified_at) <= RECENT_WINDOW


def _is_ongoing(event: EventRecord, reference: datetime) -> bool:
    return event.event_end is None or event.event_end >= reference


def compute_fleet_statistics(
    vessels: Sequence[VesselRecord],
    events: Sequence[EventRecord],
    reference_time: Optional[datetime] = None,
) -> FleetStatistics:
    reference = ensure_utc(reference_time) if reference_time else datetime.now(timezone.utc)

    events_last_30_days = sum(1 for e in events if _is_recent(e, reference))
    latest = latest_events_by_vessel(events)

    active = 0
    missing = 0
    for vessel in vessels:
        event = latest.get(vessel.id)
        if event is None:
            missing += 1
            continue
        if _is_recent(event, reference) and _is_ongoing(event, reference):
            active += 1
        if reference - event.last_verified_at > STALE_AFTER:
            missing += 1

    logger.debug(
        "Fleet statistics at %s: %d vessels, %d events (%d recent)",
        reference.isoformat(), len(vessels), len(events), events_last_30_days,
    )
    return FleetStatistics(
        total_vessels=len(vessels),
        active_deployments=active,
        events_last_30_days=events_last_30_days,
        vessels_missing_updates=missing,
        generated_at=reference,
    )
