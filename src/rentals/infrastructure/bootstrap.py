"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable

from rentals.infrastructure.config import get_settings
from rentals.infrastructure.locking import ProductLockRegistry
from rentals.infrastructure.persistence.db import (
    init_db,
    is_in_memory,
    make_engine,
    make_session_factory,
)
from rentals.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def build_unit_of_work_factory(
    database_url: str,
    lock_timeout: float = 10.0,
    echo: bool = False,
) -> UnitOfWorkFactory:
    """Create the schema if needed and return a factory of units of work.

    All units of work from one factory share a single lock registry, so
    they serialize against each other per product. That needs one
    connection per unit of work, so in-memory SQLite is refused.
    """
    if is_in_memory(database_url):
        raise ValueError(
            f"In-memory database {database_url!r} is not supported; "
            "use a SQLite file or a server database"
        )
    engine = make_engine(database_url, echo=echo)
    init_db(engine)
    session_factory = make_session_factory(engine)
    locks = ProductLockRegistry()

    def unit_of_work() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory, locks, lock_timeout)

    return unit_of_work


@lru_cache()
def unit_of_work_factory() -> UnitOfWorkFactory:
    """Process-wide factory built from settings."""
    settings = get_settings()
    return build_unit_of_work_factory(
        settings.database_url,
        lock_timeout=settings.lock_timeout,
        echo=settings.database_echo,
    )


def clock() -> datetime:
    return datetime.now(timezone.utc)
