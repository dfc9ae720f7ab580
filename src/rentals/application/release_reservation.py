"""Application service: Release Reservation use case.

Cancels an active reservation. Releasing a reservation that is already
cancelled or completed is an error, not a no-op, so a duplicate call from
the order workflow surfaces instead of being masked.
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


class ReleaseReservationHandler:

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
            reservation = svc.release(reservation_id)
            uow.commit()
        return ReservationDTO.from_domain(reservation)
