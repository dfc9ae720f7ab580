"""Application service: List Reservations use case (query)."""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ReservationDTO
from rentals.domain.exceptions import EntityNotFoundError, ValidationError
from rentals.domain.model.reservation import ReservationStatus
from rentals.domain.repository.unit_of_work import UnitOfWork


class ListReservationsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: str, status: str | None = None) -> list[ReservationDTO]:
        """List a product's reservation ledger, optionally filtered by status."""
        wanted = _parse_status(status)
        with self._uow_factory() as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            reservations = uow.reservations.list_for_product(product_id, wanted)
        return [ReservationDTO.from_domain(r) for r in reservations]


def _parse_status(raw: str | None) -> ReservationStatus | None:
    if raw is None:
        return None
    try:
        return ReservationStatus(raw.strip().lower())
    except ValueError as exc:
        choices = ", ".join(s.value for s in ReservationStatus)
        raise ValidationError(f"Unknown status '{raw}' (expected one of: {choices})") from exc
