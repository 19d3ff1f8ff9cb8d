"""Record sources: where vessels, events and review logs come from.

The core only sees already-shaped, validated records. Two implementations:

  SqlRecordSource:       SQLAlchemy session. Vessel and confidence filters
                         are pushed into SQL, the date window is applied by
                         ``filter_events``.
  InMemoryRecordSource:  static collections (demo dataset file, tests).

Failures fall into two categories:
  RecordSourceError:       the store could not be queried (the driver error
                           is kept as ``__cause__``)
  DatasetValidationError:  rows came back but do not fit the record schema
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Protocol, Sequence, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.modules.event_filter import filter_events
from app.schemas.event import EventFilters, EventRecord
from app.schemas.review_log import ReviewLogRecord
from app.schemas.vessel import VesselRecord

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class RecordSourceError(Exception):
    """The underlying store failed (unreachable, query error)."""


class DatasetValidationError(Exception):
    """Records returned by the store failed schema validation."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class RecordSource(Protocol):
    def list_vessels(self) -> list[VesselRecord]: ...

    def list_events(self, filters: Optional[EventFilters] = None) -> list[EventRecord]: ...

    def get_event(self, event_id: str) -> Optional[EventRecord]: ...

    def list_review_logs(self, event_id: str) -> list[ReviewLogRecord]: ...


def validate_records(model: type[R], rows: Iterable[Any], label: str) -> list[R]:
    """Validate ORM rows or dicts into frozen records, or raise DatasetValidationError."""
    try:
        return [model.model_validate(row) for row in rows]
    except ValidationError as exc:
        logger.error("%s dataset invalid: %s", label, exc)
        raise DatasetValidationError(
            f"{label} dataset invalid",
            errors=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


class SqlRecordSource:
    def __init__(self, db: Session):
        self.db = db

    def list_vessels(self) -> list[VesselRecord]:
        from app.models.vessel import Vessel

        try:
            rows = self.db.query(Vessel).order_by(Vessel.name.asc(), Vessel.id.asc()).all()
        except SQLAlchemyError as exc:
            raise RecordSourceError("Failed to load vessels") from exc
        return validate_records(VesselRecord, rows, "Vessel")

    def list_events(self, filters: Optional[EventFilters] = None) -> list[EventRecord]:
        from app.models.event import VesselEvent

        try:
            q = self.db.query(VesselEvent)
            if filters is not None and filters.vessel_id:
                q = q.filter(VesselEvent.vessel_id == filters.vessel_id)
            if filters is not None and filters.confidence is not None:
                q = q.filter(VesselEvent.confidence == filters.confidence)
            rows = q.order_by(VesselEvent.last_verified_at.desc(), VesselEvent.id.asc()).all()
        except SQLAlchemyError as exc:
            raise RecordSourceError("Failed to load events") from exc
        return filter_events(validate_records(EventRecord, rows, "Event"), filters)

    def get_event(self, event_id: str) -> Optional[EventRecord]:
        from app.models.event import VesselEvent

        try:
            row = self.db.query(VesselEvent).filter(VesselEvent.id == event_id).first()
        except SQLAlchemyError as exc:
            raise RecordSourceError("Failed to load event") from exc
        if row is None:
            return None
        return validate_records(EventRecord, [row], "Event")[0]

    def list_review_logs(self, event_id: str) -> list[ReviewLogRecord]:
        from app.models.review_log import ReviewLog

        try:
            rows = (
                self.db.query(ReviewLog)
                .filter(ReviewLog.event_id == event_id)
                .order_by(ReviewLog.created_at.desc(), ReviewLog.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            raise RecordSourceError("Failed to load review logs") from exc
        return validate_records(ReviewLogRecord, rows, "Review log")


class InMemoryRecordSource:
    def __init__(
        self,
        vessels: Sequence[VesselRecord] = (),
        events: Sequence[EventRecord] = (),
        review_logs: Sequence[ReviewLogRecord] = (),
    ):
        self.vessels = tuple(vessels)
        self.events = tuple(events)
        self.review_logs = tuple(review_logs)

    def list_vessels(self) -> list[VesselRecord]:
        return sorted(self.vessels, key=lambda v: (v.name, v.id))

    def list_events(self, filters: Optional[EventFilters] = None) -> list[EventRecord]:
        return filter_events(self.events, filters)

    def get_event(self, event_id: str) -> Optional[EventRecord]:
        return next((e for e in self.events if e.id == event_id), None)

    def list_review_logs(self, event_id: str) -> list[ReviewLogRecord]:
        logs = [log for log in self.review_logs if log.event_id == event_id]
        return sorted(logs, key=lambda log: log.created_at, reverse=True)
