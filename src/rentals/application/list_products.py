"""Application service: List Products use case (query)."""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ProductDTO
from rentals.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ProductDTO]:
        with self._uow_factory() as uow:
            return [ProductDTO.from_domain(p) for p in uow.products.list_all()]
