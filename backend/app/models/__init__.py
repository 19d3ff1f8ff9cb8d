"""Import all models to register them with SQLAlchemy metadata."""
from app.models.base import Base, ConfidenceEnum
from app.models.vessel import Vessel
from app.models.event import VesselEvent
from app.models.review_log import ReviewLog

__all__ = [
    "Base",
    "ConfidenceEnum",
    "Vessel",
    "VesselEvent",
    "ReviewLog",
]
