"""Application service: Check Availability use case (query).

Availability checks outside a reservation attempt are not serialized
against writers; ``ReserveHandler`` repeats the check under the product
lock before it writes anything.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable

from rentals.application.dto import AvailabilityDTO, BulkAvailabilityDTO
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability_calculator import (
    AvailabilityCalculator,
    AvailabilityQuery,
)


class CheckAvailabilityHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        product_id: str,
        start: str | date | datetime,
        end: str | date | datetime,
        quantity: int,
    ) -> AvailabilityDTO:
        with self._uow_factory() as uow:
            calculator = AvailabilityCalculator(uow.products, uow.reservations)
            result = calculator.check(product_id, start, end, quantity)
        return AvailabilityDTO.from_domain(result)

    def handle_bulk(
        self, queries: Iterable[AvailabilityQuery]
    ) -> list[BulkAvailabilityDTO]:
        """Answer several independent checks; one result per query, in order."""
        with self._uow_factory() as uow:
            calculator = AvailabilityCalculator(uow.products, uow.reservations)
            results = calculator.check_bulk(queries)
        return [BulkAvailabilityDTO.from_domain(item) for item in results]
