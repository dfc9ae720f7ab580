"""Application service: Show Reservation use case (query)."""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ReservationDTO
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.repository.unit_of_work import UnitOfWork


class ShowReservationHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, reservation_id: str) -> ReservationDTO:
        with self._uow_factory() as uow:
            reservation = uow.reservations.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation '{reservation_id}' not found")
        return ReservationDTO.from_domain(reservation)
