"""Application service: Add Product use case."""

from __future__ import annotations

from typing import Callable

from rentals.application.dto import ProductDTO
from rentals.domain.exceptions import ValidationError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        name: str,
        daily_rate: str,
        total_quantity: int,
        category_id: str | None = None,
        product_id: str | None = None,
    ) -> ProductDTO:
        """Add a new rentable product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        with self._uow_factory() as uow:
            if uow.products.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Product '{name.strip()}' already exists")

            if product_id is not None:
                if uow.products.get_by_id(product_id) is not None:
                    raise ValidationError(f"Product ID '{product_id}' already in use")
            else:
                product_id = uow.products.next_id()

            product = Product.create(
                id=product_id,
                name=name,
                daily_rate=Money.of(daily_rate),
                total_quantity=total_quantity,
                category_id=category_id,
            )
            uow.products.save(product)
            uow.commit()

        return ProductDTO.from_domain(product)
