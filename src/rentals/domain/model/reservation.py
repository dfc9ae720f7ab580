"""Reservation aggregate: one time-bounded hold on a product's units.

A reservation belongs to exactly one order. It is always created
``ACTIVE`` and ends in one of two terminal states:

    ACTIVE -> COMPLETED   (equipment returned at the end of the rental)
    ACTIVE -> CANCELLED   (order cancelled before completion)

Only active reservations count against availability.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rentals.domain.exceptions import InvalidStateError, ValidationError
from rentals.domain.model.value_objects import DateRange, Quantity


class ReservationStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Reservation:
    id: str
    product_id: str
    order_id: str
    quantity: Quantity
    period: DateRange
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def create(
        product_id: str,
        order_id: str,
        quantity: Quantity,
        period: DateRange,
        now: datetime | None = None,
    ) -> Reservation:
        if not order_id or not str(order_id).strip():
            raise ValidationError("Order reference is required")
        stamp = now or _utcnow()
        return Reservation(
            id=uuid.uuid4().hex,
            product_id=product_id,
            order_id=str(order_id).strip(),
            quantity=quantity,
            period=period,
            status=ReservationStatus.ACTIVE,
            created_at=stamp,
            updated_at=stamp,
        )

    # --- State transitions ----------------------------------------------------

    def complete(self, now: datetime | None = None) -> None:
        """Transition ACTIVE -> COMPLETED."""
        self._transition(ReservationStatus.COMPLETED, now)

    def cancel(self, now: datetime | None = None) -> None:
        """Transition ACTIVE -> CANCELLED."""
        self._transition(ReservationStatus.CANCELLED, now)

    # --- Queries ----------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def overlaps(self, date_range: DateRange) -> bool:
        """True if this hold counts against availability within *date_range*."""
        return self.is_active and self.period.overlaps(date_range)

    # --- Internal helpers -------------------------------------------------------

    def _transition(self, target: ReservationStatus, now: datetime | None) -> None:
        if self.status != ReservationStatus.ACTIVE:
            raise InvalidStateError(
                f"Cannot mark reservation {self.id} {target.value}: "
                f"current status is {self.status.value}, expected active"
            )
        self.status = target
        self.updated_at = now or _utcnow()
