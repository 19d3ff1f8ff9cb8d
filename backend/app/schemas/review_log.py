"""Pydantic schema for analyst review log entries."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from app.models.base import ConfidenceEnum
from app.schemas.common import SourceRecord


class ReviewLogRecord(SourceRecord):
    id: str
    event_id: str
    reviewer: str
    review_notes: str
    confidence_adjustment: Optional[ConfidenceEnum] = None
    created_at: datetime
