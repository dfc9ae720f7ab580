"""Application service: Show Inventory use case (query).

Reports, per product, the cached available count next to a fresh
computation from the reservation ledger so drift is visible.
"""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import InventoryLineDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.inventory_bookkeeping import InventoryBookkeeper
from rentals.domain.service.reservation_lifecycle import Clock, utcnow


class ShowInventoryHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self) -> list[InventoryLineDTO]:
        with self._uow_factory() as uow:
            bookkeeper = InventoryBookkeeper(uow, self._clock)
            return [
                InventoryLineDTO.from_audit(product, bookkeeper.audit(product))
                for product in uow.products.list_all()
            ]
