"""Tests for YAML dataset loading and database seeding (app.modules.demo_data)."""
import pytest

from app.config import settings
from app.models import ReviewLog, Vessel, VesselEvent
from app.modules.demo_data import load_dataset, resolve_dataset_path, seed_database
from app.modules.record_source import DatasetValidationError


def test_bundled_dataset_loads():
    source = load_dataset(settings.DEMO_DATASET)
    assert len(source.vessels) == 3
    assert len(source.events) == 3
    assert len(source.review_logs) == 2


def test_relative_path_resolves_from_repo_root():
    path = resolve_dataset_path("config/demo_dataset.yaml")
    assert path.exists()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset(tmp_path / "absent.yaml")


def test_empty_file_gives_empty_source(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    source = load_dataset(path)
    assert source.list_vessels() == []
    assert source.list_events() == []


def test_invalid_rows_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "vessels:\n"
        "  - id: v1\n"
        "    name: Test\n"
        "    hull_number: X-1\n"
        "events:\n"
        "  - id: e1\n"
        "    vessel_id: v1\n"
    )
    with pytest.raises(DatasetValidationError) as exc_info:
        load_dataset(path)
    assert "Vessel" in str(exc_info.value)
    assert any(err["loc"] == ("vessel_class",) for err in exc_info.value.errors)


def test_seed_inserts_and_is_idempotent(sqlite_session):
    source = load_dataset(settings.DEMO_DATASET)

    first = seed_database(sqlite_session, source)
    assert first == {"vessels": 3, "events": 3, "review_logs": 2}

    second = seed_database(sqlite_session, source)
    assert second == {"vessels": 0, "events": 0, "review_logs": 0}

    assert sqlite_session.query(Vessel).count() == 3
    assert sqlite_session.query(VesselEvent).count() == 3
    assert sqlite_session.query(ReviewLog).count() == 2


def test_seed_keeps_full_precision(sqlite_session):
    seed_database(sqlite_session, load_dataset(settings.DEMO_DATASET))
    row = sqlite_session.query(VesselEvent).filter(
        VesselEvent.id == "aaaaaaa1-aaaa-aaaa-aaaa-aaaaaaaaaaa1"
    ).first()
    assert row.latitude == pytest.approx(36.8508)
    assert row.longitude == pytest.approx(-76.2859)
