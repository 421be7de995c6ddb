"""Engine/session helpers for the SQL backend.

Each repository call acquires its own Session and releases it before
returning; nothing here keeps a connection alive between calls beyond the
engine's own pool.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from contactbook.core.config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _connect_args(url: str, timeout: int) -> dict:
    backend = make_url(url).get_backend_name()
    if timeout <= 0:
        return {"check_same_thread": False} if backend == "sqlite" else {}
    if backend == "sqlite":
        return {"timeout": timeout, "check_same_thread": False}
    if backend in ("mysql", "mariadb"):
        # pymysql and mysqlclient both accept read/write timeouts
        return {"connect_timeout": timeout, "read_timeout": timeout, "write_timeout": timeout}
    if backend == "postgresql":
        return {"connect_timeout": timeout, "options": f"-c statement_timeout={timeout * 1000}"}
    return {}


def _sqlite_pragmas(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
        # LIKE is ASCII case-insensitive on SQLite unless told otherwise
        cursor.execute("PRAGMA case_sensitive_like = ON")
    finally:
        cursor.close()


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    url = (settings.database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    engine = create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        echo=settings.sql_echo,
        connect_args=_connect_args(url, settings.db_timeout_seconds),
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_pragmas)
    logger.debug("engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


def acquire() -> Session:
    """Open a new session bound to the configured engine."""
    return _get_sessionmaker()()


def release(session: Session | None) -> None:
    """Close the session; safe to call on an already closed one."""
    if session is not None:
        session.close()


@contextmanager
def get_session() -> Iterator[Session]:
    session = acquire()
    try:
        yield session
    except BaseException:
        session.rollback()
        raise
    finally:
        release(session)


@contextmanager
def transaction() -> Iterator[Session]:
    """Session wrapped in a single transaction: commit on success, rollback otherwise."""
    with get_session() as session:
        with session.begin():
            yield session
