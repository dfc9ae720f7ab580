"""SQLAlchemy implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.product_repository import ProductRepository
from rentals.infrastructure.persistence.orm import ProductRecord


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        ids = self._session.execute(select(ProductRecord.id)).scalars().all()
        numeric = [int(i) for i in ids if i.isdigit()]
        return str(max(numeric) + 1) if numeric else "1"

    def get_by_id(self, product_id: str) -> Product | None:
        record = self._session.get(ProductRecord, product_id, populate_existing=True)
        return self.to_domain(record) if record else None

    def get_by_name(self, name: str) -> Product | None:
        record = self._session.execute(
            select(ProductRecord).where(func.lower(ProductRecord.name) == name.lower())
        ).scalars().first()
        return self.to_domain(record) if record else None

    def list_all(self) -> list[Product]:
        records = self._session.execute(
            select(ProductRecord).order_by(ProductRecord.name)
        ).scalars().all()
        return [self.to_domain(r) for r in records]

    def save(self, product: Product) -> None:
        record = self._session.get(ProductRecord, product.id)
        if record is None:
            record = ProductRecord(id=product.id)
            self._session.add(record)
        record.name = product.name
        record.category_id = product.category_id
        record.daily_rate = product.daily_rate.amount
        record.currency = product.daily_rate.currency
        record.total_quantity = product.total_quantity
        record.available_quantity = product.available_quantity
        self._session.flush()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def to_domain(record: ProductRecord) -> Product:
        return Product(
            id=record.id,
            name=record.name,
            category_id=record.category_id,
            daily_rate=Money.of(record.daily_rate, record.currency or "USD"),
            total_quantity=record.total_quantity,
            available_quantity=record.available_quantity,
        )
