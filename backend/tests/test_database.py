"""Tests for lazy engine/session creation (app.database)."""
import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from app import database


@pytest.fixture(autouse=True)
def _fresh_engine():
    database.reset_engine()
    yield
    database.reset_engine()


@patch("app.database.create_engine")
def test_engine_built_once_under_concurrent_first_use(mock_create):
    def slow_create(url, **kwargs):
        time.sleep(0.05)
        return MagicMock()

    mock_create.side_effect = slow_create
    results = []
    start = threading.Barrier(8)

    def worker():
        start.wait()
        results.append(database.get_engine())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert mock_create.call_count == 1
    assert len({id(engine) for engine in results}) == 1


@patch("app.database.create_engine")
def test_pool_settings_for_server_databases(mock_create):
    with patch.object(database.settings, "DATABASE_URL", "postgresql+psycopg2://u:p@db/osint"):
        database.get_engine()
    kwargs = mock_create.call_args.kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == database.settings.DB_POOL_SIZE
    assert "connect_args" not in kwargs


def test_sqlite_engine_and_init_db(tmp_path):
    url = f"sqlite:///{tmp_path / 'fleet.db'}"
    with patch.object(database.settings, "DATABASE_URL", url):
        database.init_db()
        session = database.get_session()
        try:
            from app.models import Vessel
            assert session.query(Vessel).count() == 0
        finally:
            session.close()


def test_reset_engine_rebuilds():
    with patch("app.database.create_engine", side_effect=lambda url, **kw: MagicMock()) as mock_create:
        first = database.get_engine()
        database.reset_engine()
        second = database.get_engine()
    assert first is not second
    assert mock_create.call_count == 2
