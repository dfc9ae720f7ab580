"""Abstract unit of work: one transaction plus the per-product lock.

Every operation that mutates a product's reservation set runs inside a
unit of work and calls ``lock_product`` before reading the ledger, so the
check-then-write sequence for one product is never interleaved with
another writer's.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.product import Product
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import (
    ReservationRepository,
)


class UnitOfWork(ABC):

    products: ProductRepository
    reservations: ReservationRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Anything not explicitly committed is discarded.
        self.rollback()
        self.close()

    @abstractmethod
    def lock_product(self, product_id: str) -> Product | None:
        """Acquire the product's serialization point and reload it.

        The lock is held until the unit of work commits or rolls back.
        Returns None (without holding a lock) if the product does not exist.
        """

    @abstractmethod
    def commit(self) -> None:
        """Make all changes durable and release held locks."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes and release held locks."""

    def close(self) -> None:
        """Release any resources held by the unit of work."""
