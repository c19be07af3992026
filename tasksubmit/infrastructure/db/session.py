from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .base import Base


def create_storage_engine(url: str) -> Engine:
    """Create the engine for client storage and make sure its tables exist.

    In-memory SQLite URLs get a static pool so every session sees the same
    database for the lifetime of the engine.
    """
    kwargs: dict = {"future": True}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs.update(
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    engine = create_engine(url, **kwargs)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)
