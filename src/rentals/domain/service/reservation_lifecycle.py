"""Domain service: Reservation Lifecycle.

The single place that creates, cancels and completes reservations. Each
operation takes the product's lock through the unit of work before it
reads the ledger, so an availability check and the write that depends on
it are one atomic step with respect to every other mutator of the same
product.

The service never commits; the calling handler owns the transaction.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable

import structlog

from rentals.domain.exceptions import (
    EntityNotFoundError,
    InvalidQuantityError,
    UnavailableError,
)
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import DateRange, Quantity
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability_calculator import AvailabilityCalculator
from rentals.domain.service.inventory_bookkeeping import InventoryBookkeeper

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReservationLifecycleService:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock
        self._calculator = AvailabilityCalculator(uow.products, uow.reservations)
        self._bookkeeper = InventoryBookkeeper(uow, clock)

    def reserve(
        self,
        product_id: str,
        order_id: str,
        start: str | date | datetime,
        end: str | date | datetime,
        quantity: int,
    ) -> Reservation:
        """Hold *quantity* units of a product for an order over ``[start, end)``.

        Steps:
        1. Validate the range and quantity (no I/O).
        2. Lock the product; nothing else can mutate its ledger until the
           unit of work ends.
        3. Re-check availability against the ledger under the lock.
        4. Insert the reservation and refresh the cached counter.
        """
        period = DateRange.parse(start, end)
        wanted = Quantity(quantity)
        now = self._clock()
        reservation = Reservation.create(product_id, order_id, wanted, period, now=now)

        product = self._lock(product_id)
        if wanted.value > product.total_quantity:
            raise InvalidQuantityError(
                f"Cannot reserve {wanted.value} of {product.name} "
                f"(only {product.total_quantity} owned)"
            )

        result = self._calculator.evaluate(product, period, wanted)
        if not result.available:
            logger.info(
                "reservation_rejected",
                product_id=product.id,
                order_id=reservation.order_id,
                requested=wanted.value,
                available=result.available_quantity,
            )
            raise UnavailableError(
                f"Insufficient availability for {product.name} over {period} "
                f"(need {wanted.value}, have {result.available_quantity} available)",
                available_quantity=result.available_quantity,
            )

        self._uow.reservations.add(reservation)
        self._bookkeeper.refresh(product)
        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            product_id=product.id,
            order_id=reservation.order_id,
            quantity=wanted.value,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
        )
        return reservation

    def release(self, reservation_id: str) -> Reservation:
        """Cancel an active reservation, returning its units to the pool."""
        reservation = self._load(reservation_id)
        product = self._lock(reservation.product_id)
        # Reload under the lock so the state check sees the latest write.
        reservation = self._load(reservation_id)
        reservation.cancel(now=self._clock())
        self._uow.reservations.save(reservation)
        self._bookkeeper.refresh(product)
        logger.info(
            "reservation_released",
            reservation_id=reservation.id,
            product_id=product.id,
            order_id=reservation.order_id,
        )
        return reservation

    def complete(self, reservation_id: str) -> Reservation:
        """Finish an active reservation at the normal end of the rental."""
        reservation = self._load(reservation_id)
        product = self._lock(reservation.product_id)
        reservation = self._load(reservation_id)
        reservation.complete(now=self._clock())
        self._uow.reservations.save(reservation)
        self._bookkeeper.refresh(product)
        logger.info(
            "reservation_completed",
            reservation_id=reservation.id,
            product_id=product.id,
            order_id=reservation.order_id,
        )
        return reservation

    def release_for_order(self, order_id: str) -> list[Reservation]:
        """Cancel every active reservation held by an order."""
        return [self.release(r.id) for r in self._active_for_order(order_id)]

    def complete_for_order(self, order_id: str) -> list[Reservation]:
        """Complete every active reservation held by an order."""
        return [self.complete(r.id) for r in self._active_for_order(order_id)]

    # --- Internal helpers -----------------------------------------------------

    def _lock(self, product_id: str) -> Product:
        product = self._uow.lock_product(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product

    def _load(self, reservation_id: str) -> Reservation:
        reservation = self._uow.reservations.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation '{reservation_id}' not found")
        return reservation

    def _active_for_order(self, order_id: str) -> list[Reservation]:
        active = [r for r in self._uow.reservations.list_for_order(order_id) if r.is_active]
        # Fixed product lock order.
        active.sort(key=lambda r: (r.product_id, r.id))
        if not active:
            raise EntityNotFoundError(f"No active reservations for order '{order_id}'")
        return active
