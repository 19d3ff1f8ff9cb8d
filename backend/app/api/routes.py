from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.modules.event_filter import (
    derive_date_bounds,
    latest_events_by_vessel,
    parse_confidence,
    sort_by_recency,
)
from app.modules.export import ExportPayload, export_dataset, resolve_dataset
from app.modules.fleet_stats import compute_fleet_statistics
from app.modules.record_source import RecordSource, SqlRecordSource
from app.modules.serializers import event_properties, vessel_index, vessel_properties
from app.schemas.event import EventFilters
from app.utils.dates import parse_date_bound
from app.utils.pagination import paginate, parse_pagination

logger = logging.getLogger(__name__)

router = APIRouter()


def get_record_source(db: Session = Depends(get_db)) -> RecordSource:
    return SqlRecordSource(db)


def _event_filters(
    vessel: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    confidence: Optional[str],
) -> EventFilters:
    """Build filters from raw query values; unusable values impose no constraint."""
    return EventFilters(
        vessel_id=vessel or None,
        start_date=parse_date_bound(start_date),
        end_date=parse_date_bound(end_date, end_of_day=True),
        confidence=parse_confidence(confidence),
    )


def _download(payload: ExportPayload) -> Response:
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{payload.filename}"',
            "Cache-Control": settings.EXPORT_CACHE_CONTROL,
        },
    )


# ---------------------------------------------------------------------------
# Vessels
# ---------------------------------------------------------------------------

@router.get("/vessels", tags=["vessels"])
def list_vessels(source: RecordSource = Depends(get_record_source)):
    """All tracked vessels, ordered by name."""
    vessels = source.list_vessels()
    return {"data": [vessel_properties(v) for v in vessels], "count": len(vessels)}


@router.get("/vessels/{vessel_id}", tags=["vessels"])
def get_vessel(vessel_id: str, source: RecordSource = Depends(get_record_source)):
    """Vessel profile with its most recently verified event."""
    vessel = next((v for v in source.list_vessels() if v.id == vessel_id), None)
    if vessel is None:
        raise HTTPException(status_code=404, detail="Vessel not found")

    latest = latest_events_by_vessel(source.list_events(EventFilters(vessel_id=vessel_id)))
    latest_event = latest.get(vessel_id)
    return {
        "data": vessel_properties(vessel),
        "latest_event": event_properties(latest_event, vessel) if latest_event else None,
    }


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@router.get("/events", tags=["events"])
def list_events(
    vessel: Optional[str] = Query(None, description="Vessel id"),
    start_date: Optional[str] = Query(None, description="ISO date or timestamp (inclusive)"),
    end_date: Optional[str] = Query(None, description="ISO date or timestamp (inclusive)"),
    confidence: Optional[str] = Query(None, description="High|Medium|Low"),
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    source: RecordSource = Depends(get_record_source),
):
    """Filtered events, most recently verified first, paginated."""
    filters = _event_filters(vessel, start_date, end_date, confidence)
    page_request = parse_pagination(page, page_size if page_size is not None else limit, offset)

    events = sort_by_recency(source.list_events(filters))
    result = paginate(events, page_request.page, page_request.page_size)
    by_id = vessel_index(source.list_vessels())
    bounds = derive_date_bounds(events)

    return {
        "data": [event_properties(e, by_id.get(e.vessel_id)) for e in result.data],
        "page": page_request.page,
        "page_size": page_request.page_size,
        "total": result.total,
        "total_pages": result.total_pages,
        "date_bounds": {"min_date": bounds.min_date, "max_date": bounds.max_date},
    }


@router.get("/events/{event_id}", tags=["events"])
def get_event(event_id: str, source: RecordSource = Depends(get_record_source)):
    """Single event with its review history (newest first)."""
    event = source.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    vessel = vessel_index(source.list_vessels()).get(event.vessel_id)
    logs = source.list_review_logs(event_id)
    return {
        "data": event_properties(event, vessel),
        "review_logs": [log.model_dump(mode="json") for log in logs],
    }


# ---------------------------------------------------------------------------
# Dashboard Stats
# ---------------------------------------------------------------------------

@router.get("/stats", tags=["dashboard"])
def get_stats(source: RecordSource = Depends(get_record_source)):
    """Fleet statistics computed now over the full dataset."""
    stats = compute_fleet_statistics(source.list_vessels(), source.list_events())
    return {"data": stats.model_dump(mode="json")}


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _export(
    fmt: str,
    dataset: Optional[str],
    filters: EventFilters,
    source: RecordSource,
) -> Response:
    dataset = resolve_dataset(dataset)
    vessels = source.list_vessels()
    events = source.list_events(filters) if dataset == "events" else []
    return _download(export_dataset(dataset, fmt, vessels, events))


@router.get("/export/csv", tags=["export"])
def export_csv(
    dataset: Optional[str] = Query(None, description="events (default) or vessels"),
    vessel: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    confidence: Optional[str] = None,
    source: RecordSource = Depends(get_record_source),
):
    """CSV snapshot. Coordinates are rounded to 0.1 degree."""
    return _export("csv", dataset, _event_filters(vessel, start_date, end_date, confidence), source)


@router.get("/export/geojson", tags=["export"])
def export_geojson(
    dataset: Optional[str] = Query(None, description="events (default) or vessels"),
    vessel: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    confidence: Optional[str] = None,
    source: RecordSource = Depends(get_record_source),
):
    """GeoJSON FeatureCollection snapshot. Coordinates are rounded to 0.1 degree."""
    return _export("geojson", dataset, _event_filters(vessel, start_date, end_date, confidence), source)
