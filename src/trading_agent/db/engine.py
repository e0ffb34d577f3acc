"""Ledger database engine — one process-wide engine, disposed on shutdown."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

_engine: Engine | None = None


def database_url(url: str) -> str:
    """Pin bare ``postgresql://`` URLs to the psycopg (v3) driver."""
    scheme, sep, rest = url.partition("://")
    if sep and scheme == "postgresql":
        return f"postgresql+psycopg://{rest}"
    return url


def init_engine(url: str, **kwargs) -> sessionmaker[Session]:
    """Create the engine for *url* and return its session factory.

    Calling it again replaces (and disposes) the previous engine.
    """
    global _engine
    dispose_engine()
    _engine = create_engine(database_url(url), pool_pre_ping=True, **kwargs)
    return sessionmaker(bind=_engine, expire_on_commit=False)


def dispose_engine() -> None:
    """Close pooled connections and forget the engine. Safe to call twice."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None
