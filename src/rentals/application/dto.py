"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the outer surfaces (CLI, HTTP) and the
application layer without exposing domain internals. Instants are
rendered as ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.model.product import Product
from rentals.domain.model.reservation import Reservation
from rentals.domain.service.availability_calculator import (
    AvailabilityResult,
    BulkAvailabilityResult,
    CalendarDay,
)
from rentals.domain.service.inventory_bookkeeping import InventoryAudit


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    category_id: str | None
    daily_rate: str  # formatted, e.g. "$45.00"
    total_quantity: int
    available_quantity: int

    @staticmethod
    def from_domain(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            category_id=product.category_id,
            daily_rate=str(product.daily_rate),
            total_quantity=product.total_quantity,
            available_quantity=product.available_quantity,
        )


@dataclass(frozen=True)
class ReservationDTO:
    id: str
    product_id: str
    order_id: str
    quantity: int
    start_date: str
    end_date: str
    status: str
    created_at: str
    updated_at: str

    @staticmethod
    def from_domain(reservation: Reservation) -> ReservationDTO:
        return ReservationDTO(
            id=reservation.id,
            product_id=reservation.product_id,
            order_id=reservation.order_id,
            quantity=reservation.quantity.value,
            start_date=reservation.period.start.isoformat(),
            end_date=reservation.period.end.isoformat(),
            status=reservation.status.value,
            created_at=reservation.created_at.isoformat(),
            updated_at=reservation.updated_at.isoformat(),
        )


@dataclass(frozen=True)
class AvailabilityDTO:
    product_id: str
    start_date: str
    end_date: str
    requested_quantity: int
    total_quantity: int
    reserved_quantity: int
    available: bool
    available_quantity: int

    @staticmethod
    def from_domain(result: AvailabilityResult) -> AvailabilityDTO:
        return AvailabilityDTO(
            product_id=result.product_id,
            start_date=result.period.start.isoformat(),
            end_date=result.period.end.isoformat(),
            requested_quantity=result.requested_quantity,
            total_quantity=result.total_quantity,
            reserved_quantity=result.reserved_quantity,
            available=result.available,
            available_quantity=result.available_quantity,
        )


@dataclass(frozen=True)
class BulkAvailabilityDTO:
    """One entry of a bulk answer: either a result or the error it hit."""

    product_id: str
    result: AvailabilityDTO | None
    error_kind: str | None
    error: str | None

    @staticmethod
    def from_domain(item: BulkAvailabilityResult) -> BulkAvailabilityDTO:
        return BulkAvailabilityDTO(
            product_id=item.query.product_id,
            result=AvailabilityDTO.from_domain(item.result) if item.result else None,
            error_kind=item.error_kind,
            error=item.error,
        )


@dataclass(frozen=True)
class CalendarDayDTO:
    date: str
    total_quantity: int
    reserved_quantity: int
    available_quantity: int
    status: str

    @staticmethod
    def from_domain(day: CalendarDay) -> CalendarDayDTO:
        return CalendarDayDTO(
            date=day.day.start.date().isoformat(),
            total_quantity=day.total_quantity,
            reserved_quantity=day.reserved_quantity,
            available_quantity=day.available_quantity,
            status=day.status,
        )


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    total: int
    cached_available: int
    computed_available: int
    in_sync: bool

    @staticmethod
    def from_audit(product: Product, audit: InventoryAudit) -> InventoryLineDTO:
        return InventoryLineDTO(
            product_id=product.id,
            product_name=product.name,
            total=audit.total_quantity,
            cached_available=audit.cached_available,
            computed_available=audit.computed_available,
            in_sync=audit.in_sync,
        )
