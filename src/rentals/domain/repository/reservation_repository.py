"""Abstract repository for the reservation ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.reservation import Reservation, ReservationStatus
from rentals.domain.model.value_objects import DateRange


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Reservation | None:
        """Return a reservation by its ID, or None if not found."""

    @abstractmethod
    def list_for_product(
        self,
        product_id: str,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        """Return a product's reservations ordered by start date."""

    @abstractmethod
    def list_for_order(self, order_id: str) -> list[Reservation]:
        """Return every reservation held by an order."""

    @abstractmethod
    def find_active_overlapping(
        self, product_id: str, date_range: DateRange
    ) -> list[Reservation]:
        """Return active reservations of a product overlapping *date_range*."""

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Insert a new reservation."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a status change on an existing reservation."""
