"""SQLAlchemy implementation of ReservationRepository."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from rentals.domain.model.reservation import Reservation, ReservationStatus
from rentals.domain.model.value_objects import DateRange, Quantity
from rentals.domain.repository.reservation_repository import (
    ReservationRepository,
)
from rentals.infrastructure.persistence.orm import ReservationRecord


def to_db_time(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_db_time(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


class SqlReservationRepository(ReservationRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ReservationRepository interface --------------------------------------

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        record = self._session.get(
            ReservationRecord, reservation_id, populate_existing=True
        )
        return self._to_domain(record) if record else None

    def list_for_product(
        self,
        product_id: str,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        stmt = select(ReservationRecord).where(ReservationRecord.product_id == product_id)
        if status is not None:
            stmt = stmt.where(ReservationRecord.status == status.value)
        stmt = stmt.order_by(ReservationRecord.start_date, ReservationRecord.id)
        return self._fetch(stmt)

    def list_for_order(self, order_id: str) -> list[Reservation]:
        stmt = (
            select(ReservationRecord)
            .where(ReservationRecord.order_id == order_id)
            .order_by(ReservationRecord.start_date, ReservationRecord.id)
        )
        return self._fetch(stmt)

    def find_active_overlapping(
        self, product_id: str, date_range: DateRange
    ) -> list[Reservation]:
        # Half-open overlap: start < other.end AND other.start < end.
        stmt = (
            select(ReservationRecord)
            .where(
                ReservationRecord.product_id == product_id,
                ReservationRecord.status == ReservationStatus.ACTIVE.value,
                ReservationRecord.start_date < to_db_time(date_range.end),
                ReservationRecord.end_date > to_db_time(date_range.start),
            )
            .order_by(ReservationRecord.start_date, ReservationRecord.id)
        )
        return self._fetch(stmt)

    def add(self, reservation: Reservation) -> None:
        record = ReservationRecord(id=reservation.id)
        self._apply(record, reservation)
        self._session.add(record)
        self._session.flush()

    def save(self, reservation: Reservation) -> None:
        record = self._session.get(ReservationRecord, reservation.id)
        if record is None:
            self.add(reservation)
            return
        self._apply(record, reservation)
        self._session.flush()

    def _fetch(self, stmt) -> list[Reservation]:
        # Rows loaded earlier in this session may be stale once a lock is held.
        rows = self._session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_domain(r) for r in rows.scalars()]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _apply(record: ReservationRecord, reservation: Reservation) -> None:
        record.product_id = reservation.product_id
        record.order_id = reservation.order_id
        record.quantity = reservation.quantity.value
        record.start_date = to_db_time(reservation.period.start)
        record.end_date = to_db_time(reservation.period.end)
        record.status = reservation.status.value
        record.created_at = to_db_time(reservation.created_at)
        record.updated_at = to_db_time(reservation.updated_at)

    @staticmethod
    def _to_domain(record: ReservationRecord) -> Reservation:
        return Reservation(
            id=record.id,
            product_id=record.product_id,
            order_id=record.order_id,
            quantity=Quantity(record.quantity),
            period=DateRange(
                from_db_time(record.start_date), from_db_time(record.end_date)
            ),
            status=ReservationStatus(record.status),
            created_at=from_db_time(record.created_at),
            updated_at=from_db_time(record.updated_at),
        )
