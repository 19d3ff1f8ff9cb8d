"""Downloadable dataset snapshots (CSV / GeoJSON).

Two datasets (events, vessels) in two formats. Events are ordered by
recency before rendering so identical inputs always give identical bytes.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from app.modules.event_filter import sort_by_recency
from app.modules.serializers import (
    events_to_csv,
    events_to_geojson,
    vessels_to_csv,
    vessels_to_geojson,
)
from app.schemas.event import EventRecord
from app.schemas.vessel import VesselRecord

logger = logging.getLogger(__name__)

EXPORT_DATASETS: tuple[str, ...] = ("events", "vessels")
DEFAULT_DATASET = "events"

# format → (file extension, media type)
EXPORT_FORMATS: dict[str, tuple[str, str]] = {
    "csv": ("csv", "text/csv; charset=utf-8"),
    "geojson": ("geojson", "application/geo+json; charset=utf-8"),
}


class InvalidExportDatasetError(ValueError):
    def __init__(self, dataset: str):
        super().__init__(
            f"Invalid dataset '{dataset}'. Supported values are 'events' or 'vessels'."
        )
        self.dataset = dataset


class InvalidExportFormatError(ValueError):
    def __init__(self, fmt: str):
        super().__init__(f"Invalid export format '{fmt}'. Supported values are 'csv' or 'geojson'.")
        self.fmt = fmt


@dataclass(frozen=True)
class ExportPayload:
    content: bytes
    filename: str
    media_type: str


def resolve_dataset(raw: Optional[str]) -> str:
    """Absent selects events; an explicit unknown value is rejected."""
    if raw is None:
        return DEFAULT_DATASET
    if raw not in EXPORT_DATASETS:
        raise InvalidExportDatasetError(raw)
    return raw


def export_dataset(
    dataset: Optional[str],
    fmt: str,
    vessels: Sequence[VesselRecord],
    events: Sequence[EventRecord],
) -> ExportPayload:
    dataset = resolve_dataset(dataset)
    if fmt not in EXPORT_FORMATS:
        raise InvalidExportFormatError(fmt)
    extension, media_type = EXPORT_FORMATS[fmt]

    if dataset == "events":
        ordered = sort_by_recency(events)
        if fmt == "csv":
            body = events_to_csv(ordered, vessels)
        else:
            body = _dump_geojson(events_to_geojson(ordered, vessels))
        count = len(ordered)
    else:
        if fmt == "csv":
            body = vessels_to_csv(vessels)
        else:
            body = _dump_geojson(vessels_to_geojson(vessels))
        count = len(vessels)

    logger.info("Exported %d %s as %s", count, dataset, fmt)
    return ExportPayload(
        content=body.encode("utf-8"),
        filename=f"osint-{dataset}.{extension}",
        media_type=media_type,
    )


def _dump_geojson(payload: dict) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)
