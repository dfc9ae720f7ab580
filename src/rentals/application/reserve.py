"""Application service: Reserve use case.

Called by the order workflow when an order is confirmed with dates and
quantities. The availability check and the reservation write happen in
one unit of work under the product's lock; the lock is released when the
unit of work commits or rolls back.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable

from rentals.application.dto import ReservationDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.reservation_lifecycle import (
    Clock,
    ReservationLifecycleService,
    utcnow,
)


class ReserveHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(
        self,
        product_id: str,
        order_id: str,
        start: str | date | datetime,
        end: str | date | datetime,
        quantity: int,
    ) -> ReservationDTO:
        """Hold units for an order.

        Errors (not found, invalid range or quantity, unavailable) are
        raised to the caller and never retried here.
        """
        with self._uow_factory() as uow:
            svc = ReservationLifecycleService(uow, self._clock)
            reservation = svc.reserve(product_id, order_id, start, end, quantity)
            uow.commit()
        return ReservationDTO.from_domain(reservation)
