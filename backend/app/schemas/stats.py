"""Derived fleet statistics snapshot."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FleetStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_vessels: int = Field(ge=0)
    active_deployments: int = Field(ge=0)
    events_last_30_days: int = Field(ge=0)
    vessels_missing_updates: int = Field(ge=0)
    generated_at: datetime
