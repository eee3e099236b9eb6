"""Engine and session helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeAlias
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tempsnap.config import DEFAULT_DATABASE_URL


SessionFactory: TypeAlias = sessionmaker[Session]
IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def get_database_url() -> str:
    """Get DB URL from environment."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def build_engine(url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if url in IN_MEMORY_URLS:
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> SessionFactory:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    """Context manager for DB session lifecycle."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
