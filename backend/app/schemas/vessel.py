"""Pydantic schema for Vessel records, used at the record-source boundary."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from app.schemas.common import SourceRecord


class VesselRecord(SourceRecord):
    id: str
    name: str
    hull_number: str
    vessel_class: str
    homeport: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
