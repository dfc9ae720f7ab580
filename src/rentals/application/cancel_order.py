"""Application service: Cancel Order use case.

When an order is cancelled before its rental ends, every reservation it
still holds is released in one unit of work. Reservations that already
completed are left untouched as a historical record.
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


class CancelOrderHandler:

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
            released = svc.release_for_order(order_id)
            uow.commit()
        return [ReservationDTO.from_domain(r) for r in released]
