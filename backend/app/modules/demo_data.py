"""Static dataset loading (YAML) and database seeding.

The YAML file has three top-level lists: ``vessels``, ``events`` and
``review_logs``, keyed with the same snake_case names as the database columns.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml
from sqlalchemy.orm import Session

from app.modules.record_source import InMemoryRecordSource, validate_records
from app.schemas.event import EventRecord
from app.schemas.review_log import ReviewLogRecord
from app.schemas.vessel import VesselRecord

logger = logging.getLogger(__name__)

# config/ is at repo root (one level above backend/)
_REPO_ROOT = Path(__file__).resolve().parents[3]


def resolve_dataset_path(path: Union[str, Path]) -> Path:
    """Use ``path`` as given if it exists, otherwise relative to the repo root."""
    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return _REPO_ROOT / candidate


def load_dataset(path: Union[str, Path]) -> InMemoryRecordSource:
    dataset_path = resolve_dataset_path(path)
    with open(dataset_path) as f:
        raw = yaml.safe_load(f) or {}

    source = InMemoryRecordSource(
        vessels=validate_records(VesselRecord, raw.get("vessels") or [], "Vessel"),
        events=validate_records(EventRecord, raw.get("events") or [], "Event"),
        review_logs=validate_records(ReviewLogRecord, raw.get("review_logs") or [], "Review log"),
    )
    logger.info(
        "Loaded %d vessels, %d events, %d review logs from %s",
        len(source.vessels), len(source.events), len(source.review_logs), dataset_path,
    )
    return source


def seed_database(db: Session, source: InMemoryRecordSource) -> dict[str, int]:
    """Insert records whose ids are not already present. Commits once."""
    from app.models.event import VesselEvent
    from app.models.review_log import ReviewLog
    from app.models.vessel import Vessel

    inserted = {"vessels": 0, "events": 0, "review_logs": 0}

    existing = {row[0] for row in db.query(Vessel.id).all()}
    for vessel in source.vessels:
        if vessel.id in existing:
            continue
        db.add(Vessel(**vessel.model_dump(exclude_none=True)))
        inserted["vessels"] += 1
    db.flush()

    existing = {row[0] for row in db.query(VesselEvent.id).all()}
    for event in source.events:
        if event.id in existing:
            continue
        db.add(VesselEvent(**event.model_dump(exclude_none=True)))
        inserted["events"] += 1
    db.flush()

    existing = {row[0] for row in db.query(ReviewLog.id).all()}
    for log in source.review_logs:
        if log.id in existing:
            continue
        db.add(ReviewLog(**log.model_dump(exclude_none=True)))
        inserted["review_logs"] += 1

    db.commit()
    logger.info("Seeded %s", inserted)
    return inserted
