"""Shared test fixtures: sample records, an in-memory record source and API clients."""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.routes import get_record_source
from app.database import get_db
from app.main import app
from app.models import Base
from app.modules.record_source import InMemoryRecordSource
from app.schemas.event import EventRecord
from app.schemas.review_log import ReviewLogRecord
from app.schemas.vessel import VesselRecord

FORD_ID = "11111111-1111-1111-1111-111111111111"
NIMITZ_ID = "22222222-2222-2222-2222-222222222222"
ROOSEVELT_ID = "33333333-3333-3333-3333-333333333333"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_vessel(vessel_id: str, name: str, **overrides) -> VesselRecord:
    fields = {
        "id": vessel_id,
        "name": name,
        "hull_number": "CVN-00",
        "vessel_class": "Nimitz-class",
        "homeport": None,
        "image_url": None,
    }
    fields.update(overrides)
    return VesselRecord(**fields)


def make_event(event_id: str, vessel_id: str, **overrides) -> EventRecord:
    fields = {
        "id": event_id,
        "vessel_id": vessel_id,
        "event_start": utc(2024, 5, 1, 8),
        "event_end": None,
        "location_name": "At sea",
        "latitude": None,
        "longitude": None,
        "confidence": "High",
        "evidence_type": "Media Report",
        "summary": "Observed underway.",
        "source_url": "https://example.org/report",
        "source_excerpt": None,
        "last_verified_at": utc(2024, 5, 2, 12),
        "created_at": utc(2024, 5, 2, 12),
        "updated_at": utc(2024, 5, 2, 12),
    }
    fields.update(overrides)
    return EventRecord(**fields)


@pytest.fixture
def sample_vessels():
    return [
        make_vessel(FORD_ID, "USS Gerald R. Ford", hull_number="CVN-78", vessel_class="Ford-class",
                    homeport="Naval Station Norfolk"),
        make_vessel(NIMITZ_ID, "USS Nimitz", hull_number="CVN-68", homeport="Naval Base Kitsap"),
        make_vessel(ROOSEVELT_ID, "USS Theodore Roosevelt", hull_number="CVN-71",
                    homeport="Naval Base San Diego"),
    ]


@pytest.fixture
def sample_events():
    return [
        make_event(
            "aaaaaaa1-aaaa-aaaa-aaaa-aaaaaaaaaaa1", FORD_ID,
            event_start=utc(2024, 5, 1, 8),
            latitude=36.8508, longitude=-76.2859,
            location_name="North Atlantic, east of Norfolk",
            confidence="High",
            last_verified_at=utc(2024, 5, 2, 12),
        ),
        make_event(
            "aaaaaaa2-aaaa-aaaa-aaaa-aaaaaaaaaaa2", NIMITZ_ID,
            event_start=utc(2024, 4, 18), event_end=utc(2024, 4, 22),
            latitude=21.3069, longitude=-157.8583,
            location_name="Honolulu, Hawaii",
            confidence="Medium",
            last_verified_at=utc(2024, 4, 23, 15, 30),
        ),
        make_event(
            "aaaaaaa3-aaaa-aaaa-aaaa-aaaaaaaaaaa3", ROOSEVELT_ID,
            event_start=utc(2024, 3, 28),
            location_name="Western Pacific (exact position undisclosed)",
            confidence="Low",
            last_verified_at=utc(2024, 4, 1, 10),
        ),
    ]


@pytest.fixture
def sample_review_logs():
    return [
        ReviewLogRecord(
            id="bbbbbbb1-bbbb-bbbb-bbbb-bbbbbbbbbbb1",
            event_id="aaaaaaa1-aaaa-aaaa-aaaa-aaaaaaaaaaa1",
            reviewer="Duty Officer",
            review_notes="Confirmed via official imagery.",
            confidence_adjustment="High",
            created_at=utc(2024, 5, 2, 14),
        ),
        ReviewLogRecord(
            id="bbbbbbb3-bbbb-bbbb-bbbb-bbbbbbbbbbb3",
            event_id="aaaaaaa1-aaaa-aaaa-aaaa-aaaaaaaaaaa1",
            reviewer="Analyst",
            review_notes="Second look.",
            created_at=utc(2024, 5, 3, 9),
        ),
    ]


@pytest.fixture
def memory_source(sample_vessels, sample_events, sample_review_logs):
    return InMemoryRecordSource(sample_vessels, sample_events, sample_review_logs)


@pytest.fixture
def sqlite_session():
    """Real SQLAlchemy session on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def mock_db():
    """MagicMock database session; returns empty results for all queries by default."""
    session = MagicMock()
    session.query.return_value.order_by.return_value.all.return_value = []
    session.query.return_value.filter.return_value.first.return_value = None
    session.query.return_value.filter.return_value.order_by.return_value.all.return_value = []
    return session


@pytest.fixture
def api_client(memory_source):
    """TestClient with the record source overridden to use the in-memory sample data."""
    app.dependency_overrides[get_record_source] = lambda: memory_source
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def db_api_client(mock_db):
    """TestClient with the DB session dependency overridden to use a MagicMock."""
    def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
