from __future__ import annotations

import threading
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from app.config import settings

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
# Guards first-use creation; FastAPI runs sync routes on a threadpool
_init_lock = threading.Lock()


def _build_engine(url: str) -> Engine:
    engine_kwargs: dict = {"pool_pre_ping": True}
    if "sqlite" in url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
    engine = create_engine(url, **engine_kwargs)

    if "sqlite" in url:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


def get_engine() -> Engine:
    """Return the process-wide engine, creating it from settings on first use."""
    global _engine
    if _engine is None:
        with _init_lock:
            if _engine is None:
                _engine = _build_engine(settings.DATABASE_URL)
    return _engine


def get_session() -> Session:
    global _session_factory
    if _session_factory is None:
        engine = get_engine()
        with _init_lock:
            if _session_factory is None:
                _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    db = get_session()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables. Called on first run."""
    from app.models import Base  # noqa: F401 - ensure all models are registered
    Base.metadata.create_all(bind=get_engine())


def reset_engine() -> None:
    """Dispose the cached engine so the next call rebuilds it from settings."""
    global _engine, _session_factory
    with _init_lock:
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _session_factory = None
