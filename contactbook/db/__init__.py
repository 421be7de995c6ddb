"""Database helpers (engine/session export)."""

from .session import Base, acquire, get_engine, get_session, release, transaction

__all__ = ["Base", "acquire", "get_engine", "get_session", "release", "transaction"]
