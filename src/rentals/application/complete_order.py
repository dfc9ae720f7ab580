"""Application service: Complete Order use case.

Called when an order's rental period ends and the return is processed;
completes every reservation the order still holds.
"""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ReservationDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.reservation_lifecycle import (
    Clock,
    ReservationLifecycleService,
    utcnow,
)


class CompleteOrderHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self, order_id: str) -> list[ReservationDTO]:
        with self._uow_factory() as uow:
            svc = ReservationLifecycleService(uow, self._clock)
            completed = svc.complete_for_order(order_id)
            uow.commit()
        return [ReservationDTO.from_domain(r) for r in completed]
