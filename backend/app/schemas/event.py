"""Pydantic schemas for vessel events and the filters applied to them."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models.base import ConfidenceEnum
from app.schemas.common import SourceRecord
from app.utils.dates import ensure_utc


class EventRecord(SourceRecord):
    id: str
    vessel_id: str
    event_start: datetime
    event_end: Optional[datetime] = None
    location_name: str
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    confidence: ConfidenceEnum
    evidence_type: str
    summary: str
    source_url: str
    source_excerpt: Optional[str] = None
    last_verified_at: datetime
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _position_is_a_pair(self) -> "EventRecord":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

    @property
    def effective_end(self) -> datetime:
        """End of the event interval; point observations end where they start."""
        return self.event_end if self.event_end is not None else self.event_start


class EventFilters(BaseModel):
    """Parsed, validated event constraints. None means unconstrained."""

    model_config = ConfigDict(frozen=True)

    vessel_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    confidence: Optional[ConfidenceEnum] = None

    @field_validator("start_date", "end_date", mode="after")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None
