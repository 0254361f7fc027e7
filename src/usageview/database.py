"""SQLite storage for the short-link service."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Column, Index, MetaData, String, Table, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .core.settings import get_settings

metadata = MetaData()

short_links = Table(
    "short_links",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("data", Text, nullable=False),
    Column("created_at", String(40), nullable=False),
    Index("idx_short_links_created_at", "created_at"),
)

_engine: Engine | None = None
_engine_url: str | None = None
_session_factory: sessionmaker[Session] | None = None


def database_path() -> Path:
    """Configured SQLite file, resolved against the working directory."""

    path = get_settings().database_path.expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def get_engine() -> Engine:
    """Return the engine for the configured database, rebuilding it when the path moves."""

    global _engine, _engine_url, _session_factory
    url = f"sqlite:///{database_path()}"
    if _engine is None or _engine_url != url:
        if _engine is not None:
            _engine.dispose()
        _engine = create_engine(url, connect_args={"check_same_thread": False})
        _engine_url = url
        _session_factory = None
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    engine = get_engine()
    if _session_factory is None:
        _session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    return _session_factory


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Commit on success, roll back on any error."""

    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def bootstrap_database() -> Engine:
    """Create the short-link table (and its index) when missing."""

    engine = get_engine()
    metadata.create_all(engine)
    return engine


def reset_state() -> None:
    """Drop the cached engine (tests point each case at a fresh file)."""

    global _engine, _engine_url, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_url = None
    _session_factory = None


__all__ = [
    "bootstrap_database",
    "database_path",
    "get_engine",
    "metadata",
    "reset_state",
    "session_scope",
    "short_links",
]
