"""SQLAlchemy implementation of UnitOfWork.

``lock_product`` is the per-product serialization point. It combines:

* the process-wide ``ProductLockRegistry`` (serializes threads of this
  process, and is the only guard on SQLite, which ignores FOR UPDATE), and
* ``SELECT ... FOR UPDATE`` on the product row (serializes separate
  processes on databases with row locks, e.g. PostgreSQL).

Locks are held until commit, rollback or close.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from rentals.domain.exceptions import ConcurrencyConflictError
from rentals.domain.model.product import Product
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.infrastructure.locking import ProductLockRegistry
from rentals.infrastructure.persistence.orm import ProductRecord
from rentals.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
)
from rentals.infrastructure.persistence.sql_reservation_repository import (
    SqlReservationRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        locks: ProductLockRegistry,
        lock_timeout: float,
    ) -> None:
        self._session = session_factory()
        self._locks = locks
        self._lock_timeout = lock_timeout
        self._held: list[str] = []
        self.products = SqlProductRepository(self._session)
        self.reservations = SqlReservationRepository(self._session)

    def lock_product(self, product_id: str) -> Product | None:
        newly_acquired = product_id not in self._held
        if newly_acquired:
            if not self._locks.acquire(product_id, self._lock_timeout):
                raise ConcurrencyConflictError(
                    f"Timed out after {self._lock_timeout}s waiting for product "
                    f"'{product_id}'; retry the request"
                )
            self._held.append(product_id)

        try:
            record = self._session.execute(
                select(ProductRecord)
                .where(ProductRecord.id == product_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except OperationalError as exc:
            if newly_acquired:
                self._release(product_id)
            raise ConcurrencyConflictError(
                f"Could not lock product '{product_id}': {exc.orig}"
            ) from exc

        if record is None:
            if newly_acquired:
                self._release(product_id)
            return None
        return SqlProductRepository.to_domain(record)

    def commit(self) -> None:
        try:
            self._session.commit()
        except OperationalError as exc:
            self._session.rollback()
            raise ConcurrencyConflictError(f"Commit failed: {exc.orig}") from exc
        finally:
            self._release_all()

    def rollback(self) -> None:
        try:
            self._session.rollback()
        finally:
            self._release_all()

    def close(self) -> None:
        try:
            self._session.close()
        finally:
            self._release_all()

    # --- Internal helpers -----------------------------------------------------

    def _release(self, product_id: str) -> None:
        self._held.remove(product_id)
        self._locks.release(product_id)

    def _release_all(self) -> None:
        while self._held:
            self._locks.release(self._held.pop())
