"""Application service: Availability Calendar use case (query)."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

from rentals.application.dto import CalendarDayDTO
from rentals.domain.exceptions import InvalidRangeError
from rentals.domain.model.value_objects import DateRange
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability_calculator import AvailabilityCalculator

MAX_CALENDAR_SPAN = timedelta(days=366)


class AvailabilityCalendarHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        product_id: str,
        start: str | date | datetime,
        end: str | date | datetime,
    ) -> list[CalendarDayDTO]:
        """Day-by-day availability of a product over ``[start, end)``."""
        period = DateRange.parse(start, end)
        if period.duration > MAX_CALENDAR_SPAN:
            raise InvalidRangeError(
                f"Calendar range may span at most {MAX_CALENDAR_SPAN.days} days"
            )

        with self._uow_factory() as uow:
            calculator = AvailabilityCalculator(uow.products, uow.reservations)
            days = calculator.calendar(product_id, period.start, period.end)
        return [CalendarDayDTO.from_domain(day) for day in days]
