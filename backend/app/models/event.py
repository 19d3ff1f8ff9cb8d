"""Vessel event: one sourced observation of a vessel's position or status."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String, Float, Text, DateTime, ForeignKey, Enum as SAEnum, CheckConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base, ConfidenceEnum


class VesselEvent(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint(
            "(latitude IS NULL AND longitude IS NULL) OR "
            "(latitude IS NOT NULL AND longitude IS NOT NULL)",
            name="ck_event_position_pair",
        ),
        CheckConstraint("latitude IS NULL OR (latitude >= -90 AND latitude <= 90)", name="ck_event_latitude"),
        CheckConstraint("longitude IS NULL OR (longitude >= -180 AND longitude <= 180)", name="ck_event_longitude"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    vessel_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vessels.id"), nullable=False, index=True
    )
    event_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # NULL end means a point-in-time observation
    event_end: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    location_name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    confidence: Mapped[ConfidenceEnum] = mapped_column(
        SAEnum(ConfidenceEnum, values_callable=lambda e: [m.value for m in e]),
        nullable=False, index=True,
    )
    evidence_type: Mapped[str] = mapped_column(String(100), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    source_excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Refreshed on re-verification without touching the substantive content
    last_verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now()
    )

    vessel = relationship("Vessel", back_populates="events")
    review_logs: Mapped[list] = relationship(
        "ReviewLog", back_populates="event", cascade="all, delete-orphan"
    )
