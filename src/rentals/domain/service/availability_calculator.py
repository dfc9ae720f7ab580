"""Domain service: Availability Calculator.

Answers "are N units of this product free over [start, end)?" by
subtracting the quantities of overlapping active reservations from the
product's total stock. The reservation ledger is the only authority; the
product's cached ``available_quantity`` is never consulted here.

Every method is a pure read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from rentals.domain.exceptions import DomainException, EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation, ReservationStatus
from rentals.domain.model.value_objects import DateRange, Quantity, to_utc
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import (
    ReservationRepository,
)

Instant = str | date | datetime


@dataclass(frozen=True)
class AvailabilityResult:
    product_id: str
    period: DateRange
    requested_quantity: int
    total_quantity: int
    reserved_quantity: int
    available: bool
    available_quantity: int


@dataclass(frozen=True)
class AvailabilityQuery:
    """One item of a bulk availability request."""

    product_id: str
    start: Instant
    end: Instant
    quantity: int


@dataclass(frozen=True)
class BulkAvailabilityResult:
    query: AvailabilityQuery
    result: AvailabilityResult | None = None
    error_kind: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class CalendarDay:
    day: DateRange
    total_quantity: int
    reserved_quantity: int
    available_quantity: int

    @property
    def status(self) -> str:
        if self.available_quantity <= 0:
            return "fully_booked"
        if self.reserved_quantity > 0:
            return "limited"
        return "available"


class AvailabilityCalculator:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def check(
        self,
        product_id: str,
        start: Instant,
        end: Instant,
        quantity: int,
    ) -> AvailabilityResult:
        """Check whether *quantity* units are free over ``[start, end)``.

        Raises InvalidRangeError, InvalidQuantityError or
        EntityNotFoundError for bad input.
        """
        period = DateRange.parse(start, end)
        wanted = Quantity(quantity)
        product = self._require_product(product_id)
        return self.evaluate(product, period, wanted)

    def evaluate(
        self, product: Product, period: DateRange, quantity: Quantity
    ) -> AvailabilityResult:
        """Compute availability for an already-loaded product."""
        overlapping = self._reservation_repo.find_active_overlapping(
            product.id, period
        )
        reserved = sum(r.quantity.value for r in overlapping)
        free = product.total_quantity - reserved
        return AvailabilityResult(
            product_id=product.id,
            period=period,
            requested_quantity=quantity.value,
            total_quantity=product.total_quantity,
            reserved_quantity=reserved,
            # A request above total stock can never fit, whatever the ledger says.
            available=quantity.value <= product.total_quantity and free >= quantity.value,
            available_quantity=max(free, 0),
        )

    def check_bulk(
        self, queries: Iterable[AvailabilityQuery]
    ) -> list[BulkAvailabilityResult]:
        """Check each query independently.

        This is not a transactional multi-item check: a failing query is
        reported in its own result and does not affect the others.
        """
        results: list[BulkAvailabilityResult] = []
        for query in queries:
            try:
                result = self.check(
                    query.product_id, query.start, query.end, query.quantity
                )
            except DomainException as exc:
                results.append(
                    BulkAvailabilityResult(query=query, error_kind=exc.kind, error=str(exc))
                )
            else:
                results.append(BulkAvailabilityResult(query=query, result=result))
        return results

    def free_units_at(self, product: Product, instant: datetime) -> int:
        """Units not held by any active reservation at *instant*."""
        instant = to_utc(instant)
        held = sum(
            r.quantity.value
            for r in self._reservation_repo.list_for_product(
                product.id, ReservationStatus.ACTIVE
            )
            if r.period.contains(instant)
        )
        return product.total_quantity - held

    def peak_load(self, product_id: str, window: DateRange | None = None) -> int:
        """Largest number of units held by active reservations at one instant.

        With *window*, only instants inside the window are considered.
        """
        if window is None:
            active = self._reservation_repo.list_for_product(
                product_id, ReservationStatus.ACTIVE
            )
        else:
            active = self._reservation_repo.find_active_overlapping(product_id, window)
        return peak_load(active, window)

    def calendar(
        self, product_id: str, start: Instant, end: Instant
    ) -> list[CalendarDay]:
        """Per-day availability over ``[start, end)``.

        Each day uses the same overlap summation as ``check``.
        """
        period = DateRange.parse(start, end)
        product = self._require_product(product_id)
        active = self._reservation_repo.find_active_overlapping(product.id, period)

        days: list[CalendarDay] = []
        for day in period.days():
            reserved = sum(r.quantity.value for r in active if r.period.overlaps(day))
            days.append(
                CalendarDay(
                    day=day,
                    total_quantity=product.total_quantity,
                    reserved_quantity=reserved,
                    available_quantity=max(product.total_quantity - reserved, 0),
                )
            )
        return days

    def _require_product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product


def peak_load(
    reservations: Iterable[Reservation], window: DateRange | None = None
) -> int:
    """Sweep-line maximum of concurrently held units.

    At equal instants releases are applied before acquisitions, so a
    back-to-back handover does not count twice. Periods are clipped to
    *window* when one is given.
    """
    events: list[tuple[datetime, int]] = []
    for r in reservations:
        start, end = r.period.start, r.period.end
        if window is not None:
            if not r.period.overlaps(window):
                continue
            start, end = max(start, window.start), min(end, window.end)
        events.append((start, r.quantity.value))
        events.append((end, -r.quantity.value))
    # Negative deltas sort first at the same instant.
    events.sort(key=lambda e: (e[0], e[1]))

    current = peak = 0
    for _, delta in events:
        current += delta
        peak = max(peak, current)
    return peak
