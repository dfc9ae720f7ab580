"""Engine and session factory construction."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from rentals.infrastructure.persistence.orm import Base


def is_in_memory(database_url: str) -> bool:
    """True for SQLite URLs that name no file (one shared connection)."""
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def make_engine(database_url: str, echo: bool = False) -> Engine:
    kwargs: dict = {"pool_pre_ping": True, "future": True, "echo": echo}
    if database_url.startswith("sqlite"):
        # Sessions run on worker threads; SQLite waits up to 30s for a writer.
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    return create_engine(database_url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(engine)
