"""Flat CSV and GeoJSON renderings of vessels and events.

Both formats share one flattened field set (snake_case, CSV header order).
Event rows resolve the owning vessel's name, hull, class and homeport by
``vessel_id``; an unknown vessel leaves those columns empty.

CSV convention: quote only when a value contains a comma, quote, CR or LF;
CRLF after every line including the last.
"""
from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Mapping, Optional, Sequence

from app.schemas.event import EventRecord
from app.schemas.vessel import VesselRecord
from app.utils.dates import format_timestamp
from app.utils.geo import rounded_position

CSV_LINE_TERMINATOR = "\r\n"

EVENT_FIELDS: tuple[str, ...] = (
    "id",
    "vessel_id",
    "vessel_name",
    "hull_number",
    "vessel_class",
    "homeport",
    "event_start",
    "event_end",
    "location_name",
    "latitude",
    "longitude",
    "confidence",
    "evidence_type",
    "summary",
    "source_url",
    "source_excerpt",
    "last_verified_at",
    "created_at",
    "updated_at",
)

VESSEL_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "hull_number",
    "vessel_class",
    "homeport",
    "image",
)


def vessel_index(vessels: Iterable[VesselRecord]) -> dict[str, VesselRecord]:
    return {v.id: v for v in vessels}


def event_properties(event: EventRecord, vessel: Optional[VesselRecord]) -> dict[str, Any]:
    """Public flat projection of an event; coordinates are always rounded."""
    latitude, longitude = rounded_position(event.latitude, event.longitude)
    return {
        "id": event.id,
        "vessel_id": event.vessel_id,
        "vessel_name": vessel.name if vessel else None,
        "hull_number": vessel.hull_number if vessel else None,
        "vessel_class": vessel.vessel_class if vessel else None,
        "homeport": vessel.homeport if vessel else None,
        "event_start": format_timestamp(event.event_start),
        "event_end": format_timestamp(event.event_end),
        "location_name": event.location_name,
        "latitude": latitude,
        "longitude": longitude,
        "confidence": event.confidence.value,
        "evidence_type": event.evidence_type,
        "summary": event.summary,
        "source_url": event.source_url,
        "source_excerpt": event.source_excerpt,
        "last_verified_at": format_timestamp(event.last_verified_at),
        "created_at": format_timestamp(event.created_at),
        "updated_at": format_timestamp(event.updated_at),
    }


def vessel_properties(vessel: VesselRecord) -> dict[str, Any]:
    return {
        "id": vessel.id,
        "name": vessel.name,
        "hull_number": vessel.hull_number,
        "vessel_class": vessel.vessel_class,
        "homeport": vessel.homeport,
        "image": vessel.image_url,
    }


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        # Rounded coordinates: repr of n/10 is the one-decimal form
        return repr(value)
    return str(value)


def render_csv(fields: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator=CSV_LINE_TERMINATOR, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(fields)
    for row in rows:
        writer.writerow([_csv_value(row.get(field)) for field in fields])
    return output.getvalue()


def events_to_csv(events: Iterable[EventRecord], vessels: Iterable[VesselRecord]) -> str:
    by_id = vessel_index(vessels)
    rows = (event_properties(e, by_id.get(e.vessel_id)) for e in events)
    return render_csv(EVENT_FIELDS, rows)


def vessels_to_csv(vessels: Iterable[VesselRecord]) -> str:
    return render_csv(VESSEL_FIELDS, (vessel_properties(v) for v in vessels))


def _feature(properties: dict[str, Any], latitude: Optional[float], longitude: Optional[float]) -> dict:
    geometry = None
    if latitude is not None and longitude is not None:
        # GeoJSON order is [lon, lat]
        geometry = {"type": "Point", "coordinates": [longitude, latitude]}
    return {"type": "Feature", "geometry": geometry, "properties": properties}


def feature_collection(features: Iterable[dict]) -> dict:
    return {"type": "FeatureCollection", "features": list(features)}


def events_to_geojson(events: Iterable[EventRecord], vessels: Iterable[VesselRecord]) -> dict:
    by_id = vessel_index(vessels)
    features = []
    for event in events:
        props = event_properties(event, by_id.get(event.vessel_id))
        features.append(_feature(props, props["latitude"], props["longitude"]))
    return feature_collection(features)


def vessels_to_geojson(vessels: Iterable[VesselRecord]) -> dict:
    return feature_collection(_feature(vessel_properties(v), None, None) for v in vessels)
