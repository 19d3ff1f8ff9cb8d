"""Shared declarative base and enums for all models."""
from __future__ import annotations

import enum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ConfidenceEnum(str, enum.Enum):
    # Corroboration tiers. Compared by equality only; there is no ordering.
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
