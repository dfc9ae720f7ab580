"""Product aggregate: the inventory record for a rentable item.

Products live independently of reservations. They own the number of units
in the fleet; ``available_quantity`` is only a cache of what the
reservation ledger says is free at the evaluation instant.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import InvalidQuantityError, ValidationError
from rentals.domain.model.value_objects import Money


@dataclass
class Product:
    """Aggregate root for rentable inventory.

    Invariants:
    - ``total_quantity`` is never negative
    - ``0 <= available_quantity <= total_quantity``

    The ``__init__`` is intentionally simple so repositories can
    reconstitute persisted products; use ``Product.create()`` for new ones.
    """

    id: str
    name: str
    daily_rate: Money
    total_quantity: int
    available_quantity: int
    category_id: str | None = None

    @staticmethod
    def create(
        id: str,
        name: str,
        daily_rate: Money,
        total_quantity: int,
        category_id: str | None = None,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_stock(total_quantity)
        return Product(
            id=id,
            name=name.strip(),
            daily_rate=daily_rate,
            total_quantity=total_quantity,
            available_quantity=total_quantity,
            category_id=category_id,
        )

    def set_total_quantity(self, total_quantity: int) -> None:
        """Record a manual change in the number of units owned.

        The cached availability must be refreshed by the caller in the
        same unit of work.
        """
        _check_stock(total_quantity)
        self.total_quantity = total_quantity
        self.available_quantity = min(self.available_quantity, total_quantity)

    def refresh_available(self, free_units: int) -> None:
        """Overwrite the cached free-unit count with a fresh computation."""
        self.available_quantity = max(0, min(free_units, self.total_quantity))


def _check_stock(total_quantity: int) -> None:
    if not isinstance(total_quantity, int) or isinstance(total_quantity, bool):
        raise InvalidQuantityError(
            f"Total quantity must be an integer, got {type(total_quantity).__name__}"
        )
    if total_quantity < 0:
        raise InvalidQuantityError("Total quantity cannot be negative")
