"""Domain service: Inventory Record bookkeeping.

Keeps each product's cached ``available_quantity`` consistent with the
reservation ledger. The cache is always recomputed from the ledger, never
incremented or decremented, and every write to it happens inside the
same unit of work (and under the same product lock) as the ledger change
that prompted it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

import structlog

from rentals.domain.exceptions import EntityNotFoundError, UnavailableError
from rentals.domain.model.product import Product
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability_calculator import AvailabilityCalculator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InventoryAudit:
    product_id: str
    total_quantity: int
    cached_available: int
    computed_available: int

    @property
    def in_sync(self) -> bool:
        return self.cached_available == self.computed_available


class InventoryBookkeeper:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._calculator = AvailabilityCalculator(uow.products, uow.reservations)

    def refresh(self, product: Product) -> Product:
        """Recompute the cached counter from the ledger and persist it."""
        product.refresh_available(self.computed_available(product))
        self._uow.products.save(product)
        return product

    def computed_available(self, product: Product) -> int:
        free = self._calculator.free_units_at(product, self._clock())
        return max(0, min(free, product.total_quantity))

    def audit(self, product: Product) -> InventoryAudit:
        """Compare the cached counter against a fresh ledger summation."""
        return InventoryAudit(
            product_id=product.id,
            total_quantity=product.total_quantity,
            cached_available=product.available_quantity,
            computed_available=self.computed_available(product),
        )

    def set_total_quantity(self, product_id: str, total_quantity: int) -> Product:
        """Change the number of units owned.

        A reduction below the peak number of units held by active
        reservations is refused, since it would oversell them.
        """
        product = self._uow.lock_product(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")

        previous = product.total_quantity
        product.set_total_quantity(total_quantity)

        committed = self._calculator.peak_load(product.id)
        if total_quantity < committed:
            raise UnavailableError(
                f"Cannot reduce {product.name} to {total_quantity} units: "
                f"{committed} are committed to active reservations at peak",
                available_quantity=max(previous - committed, 0),
            )

        self.refresh(product)
        logger.info(
            "inventory_adjusted",
            product_id=product.id,
            previous_total=previous,
            total=total_quantity,
            available=product.available_quantity,
        )
        return product

    def refresh_all(self) -> list[Product]:
        """Refresh every product's cache (time moves holds in and out of 'now')."""
        refreshed: list[Product] = []
        # Fixed lock order across callers.
        for listed in sorted(self._uow.products.list_all(), key=lambda p: p.id):
            product = self._uow.lock_product(listed.id)
            if product is None:
                continue
            refreshed.append(self.refresh(product))
        return refreshed
