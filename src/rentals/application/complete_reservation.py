"""Application service: Complete Reservation use case (equipment returned)."""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ReservationDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.reservation_lifecycle import (
    Clock,
    ReservationLifecycleService,
    utcnow,
)


class CompleteReservationHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def handle(self, reservation_id: str) -> ReservationDTO:
        with self._uow_factory() as uow:
            svc = ReservationLifecycleService(uow, self._clock)
            reservation = svc.complete(reservation_id)
            uow.commit()
        return ReservationDTO.from_domain(reservation)
