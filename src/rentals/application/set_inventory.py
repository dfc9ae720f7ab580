"""Application service: Set Inventory use case.

A manual change to the number of units owned. It goes through the same
product lock as reservations so the cached counter is refreshed in the
same unit of work.
"""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ProductDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.inventory_bookkeeping import InventoryBookkeeper
from rentals.domain.service.reservation_lifecycle import Clock, utcnow


class SetInventoryHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self, product_id: str, total_quantity: int) -> ProductDTO:
        """Set the total number of units owned for a product."""
        with self._uow_factory() as uow:
            bookkeeper = InventoryBookkeeper(uow, self._clock)
            product = bookkeeper.set_total_quantity(product_id, total_quantity)
            uow.commit()
        return ProductDTO.from_domain(product)
