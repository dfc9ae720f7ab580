"""Application service: Refresh Inventory use case.

Recomputes every product's cached available count for the current
instant. Run periodically: holds start and end as time passes even when
nothing is written.
"""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ProductDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.inventory_bookkeeping import InventoryBookkeeper
from rentals.domain.service.reservation_lifecycle import Clock, utcnow


class RefreshInventoryHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self) -> list[ProductDTO]:
        with self._uow_factory() as uow:
            refreshed = InventoryBookkeeper(uow, self._clock).refresh_all()
            uow.commit()
        return [ProductDTO.from_domain(p) for p in refreshed]
