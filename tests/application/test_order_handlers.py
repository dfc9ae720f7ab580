"""Integration tests for the order-level cancel and complete use cases."""

from datetime import datetime, timezone

import pytest

from rentals.application.cancel_order import CancelOrderHandler
from rentals.application.complete_order import CompleteOrderHandler
from rentals.application.reserve import ReserveHandler
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from tests.fakes import FakeStore, FixedClock


def _setup() -> tuple[FakeStore, FixedClock]:
    """Order O1 holds a tent and two chairs; O2 holds one chair."""
    store = FakeStore([
        Product.create(id="T", name="Tent", daily_rate=Money.of("25"), total_quantity=2),
        Product.create(id="C", name="Chair", daily_rate=Money.of("3"), total_quantity=4),
    ])
    clock = FixedClock(datetime(2025, 3, 2, tzinfo=timezone.utc))
    reserve = ReserveHandler(store.uow_factory, clock)
    reserve.handle("T", "O1", "2025-03-01", "2025-03-05", 1)
    reserve.handle("C", "O1", "2025-03-01", "2025-03-05", 2)
    reserve.handle("C", "O2", "2025-03-01", "2025-03-05", 1)
    return store, clock


class TestCancelOrder:

    def test_releases_all_order_holds(self):
        store, clock = _setup()
        released = CancelOrderHandler(store.uow_factory, clock).handle("O1")

        assert {(r.product_id, r.status) for r in released} == {("T", "cancelled"), ("C", "cancelled")}
        assert store.product("T").available_quantity == 2
        assert store.product("C").available_quantity == 3

    def test_second_cancel_finds_nothing(self):
        store, clock = _setup()
        handler = CancelOrderHandler(store.uow_factory, clock)
        handler.handle("O1")
        with pytest.raises(EntityNotFoundError):
            handler.handle("O1")


class TestCompleteOrder:

    def test_completes_only_that_order(self):
        store, clock = _setup()
        completed = CompleteOrderHandler(store.uow_factory, clock).handle("O2")

        assert [r.status for r in completed] == ["completed"]
        statuses = sorted((r.order_id, r.status.value) for r in store.reservations.values())
        assert statuses == [("O1", "active"), ("O1", "active"), ("O2", "completed")]
