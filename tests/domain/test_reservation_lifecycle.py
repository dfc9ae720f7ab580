"""Unit tests for the ReservationLifecycleService domain service.

Each test runs the service inside a FakeUnitOfWork and commits, the way
the application handlers do.
"""

import random
import threading
from datetime import datetime, timezone

import pytest

from rentals.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InvalidQuantityError,
    InvalidRangeError,
    InvalidStateError,
    UnavailableError,
)
from rentals.domain.model.product import Product
from rentals.domain.model.reservation import ReservationStatus
from rentals.domain.model.value_objects import Money
from rentals.domain.service.availability_calculator import (
    AvailabilityCalculator,
    peak_load,
)
from rentals.domain.service.inventory_bookkeeping import InventoryBookkeeper
from rentals.domain.service.reservation_lifecycle import ReservationLifecycleService
from tests.fakes import FakeStore, FixedClock

UTC = timezone.utc


def _store(*specs: tuple[str, int]) -> FakeStore:
    """Create a store with (product_id, total) products."""
    return FakeStore([
        Product.create(id=pid, name=f"Item {pid}", daily_rate=Money.of("10"), total_quantity=total)
        for pid, total in specs
    ])


def _run(store: FakeStore, clock: FixedClock, op: str, *args):
    with store.uow_factory() as uow:
        result = getattr(ReservationLifecycleService(uow, clock), op)(*args)
        uow.commit()
    return result


@pytest.fixture
def clock() -> FixedClock:
    # Inside the March rentals used below.
    return FixedClock(datetime(2025, 3, 2, 12, tzinfo=UTC))


class TestReserve:

    def test_creates_active_reservation(self, clock):
        store = _store(("P", 3))
        r = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)

        assert r.status == ReservationStatus.ACTIVE
        assert store.reservations[r.id].quantity.value == 2
        assert store.reservations[r.id].created_at == clock.now

    def test_refreshes_cached_availability(self, clock):
        store = _store(("P", 3))
        _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)
        assert store.product("P").available_quantity == 1

    def test_future_hold_leaves_cache_untouched(self, clock):
        store = _store(("P", 3))
        _run(store, clock, "reserve", "P", "O1", "2025-04-01", "2025-04-05", 2)
        assert store.product("P").available_quantity == 3

    def test_unavailable_rejected_with_free_count(self, clock):
        store = _store(("P", 3))
        _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)

        with pytest.raises(UnavailableError, match="Insufficient availability") as exc_info:
            _run(store, clock, "reserve", "P", "O2", "2025-03-03", "2025-03-07", 2)

        assert exc_info.value.available_quantity == 1
        assert len(store.reservations) == 1

    def test_quantity_above_total_rejected(self, clock):
        store = _store(("P", 3))
        with pytest.raises(InvalidQuantityError, match="only 3 owned"):
            _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 4)
        assert store.reservations == {}

    def test_invalid_range(self, clock):
        store = _store(("P", 3))
        with pytest.raises(InvalidRangeError):
            _run(store, clock, "reserve", "P", "O1", "2025-03-05", "2025-03-05", 1)

    def test_unknown_product(self, clock):
        store = _store(("P", 3))
        with pytest.raises(EntityNotFoundError):
            _run(store, clock, "reserve", "X", "O1", "2025-03-01", "2025-03-05", 1)

    def test_failure_leaves_no_lock_behind(self, clock):
        store = _store(("P", 1))
        _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 1)
        with pytest.raises(UnavailableError):
            _run(store, clock, "reserve", "P", "O2", "2025-03-01", "2025-03-05", 1)

        # The product's lock must be free again.
        assert store.locks.acquire("P", timeout=0.1)
        store.locks.release("P")


class TestHandover:

    def test_back_to_back_reservations_both_fit(self, clock):
        store = _store(("P", 1))
        _run(store, clock, "reserve", "P", "O1", "2025-01-01", "2025-01-05", 1)
        _run(store, clock, "reserve", "P", "O2", "2025-01-05", "2025-01-10", 1)
        assert len(store.reservations) == 2

    def test_one_day_overlap_is_refused(self, clock):
        store = _store(("P", 1))
        _run(store, clock, "reserve", "P", "O1", "2025-01-01", "2025-01-06", 1)
        with pytest.raises(UnavailableError):
            _run(store, clock, "reserve", "P", "O2", "2025-01-05", "2025-01-10", 1)
        assert len(store.reservations) == 1


class TestConcreteScenario:

    def test_reserve_check_release_sequence(self, clock):
        store = _store(("P", 3))

        def check(start, end, qty):
            with store.uow_factory() as uow:
                return AvailabilityCalculator(uow.products, uow.reservations).check("P", start, end, qty)

        o1 = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)

        r = check("2025-03-02", "2025-03-04", 2)
        assert (r.available, r.available_quantity) == (False, 1)
        r = check("2025-03-02", "2025-03-04", 1)
        assert (r.available, r.available_quantity) == (True, 1)

        _run(store, clock, "reserve", "P", "O2", "2025-03-06", "2025-03-10", 3)

        _run(store, clock, "release", o1.id)
        r = check("2025-03-02", "2025-03-04", 3)
        assert (r.available, r.available_quantity) == (True, 3)


class TestReleaseAndComplete:

    def test_release_restores_availability(self, clock):
        store = _store(("P", 3))
        r = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 3)
        assert store.product("P").available_quantity == 0

        released = _run(store, clock, "release", r.id)

        assert released.status == ReservationStatus.CANCELLED
        assert store.reservations[r.id].status == ReservationStatus.CANCELLED
        assert store.product("P").available_quantity == 3

    def test_complete_restores_availability(self, clock):
        store = _store(("P", 3))
        r = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)

        done = _run(store, clock, "complete", r.id)

        assert done.status == ReservationStatus.COMPLETED
        assert store.product("P").available_quantity == 3

    @pytest.mark.parametrize("first", ["release", "complete"])
    @pytest.mark.parametrize("second", ["release", "complete"])
    def test_terminal_reservations_cannot_move(self, clock, first, second):
        store = _store(("P", 3))
        r = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)
        _run(store, clock, first, r.id)
        status = store.reservations[r.id].status

        with pytest.raises(InvalidStateError):
            _run(store, clock, second, r.id)
        assert store.reservations[r.id].status == status
        assert store.product("P").available_quantity == 3

    def test_unknown_reservation(self, clock):
        store = _store(("P", 3))
        with pytest.raises(EntityNotFoundError, match="Reservation 'missing'"):
            _run(store, clock, "release", "missing")

    def test_transition_stamps_update_time(self, clock):
        store = _store(("P", 3))
        r = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 1)
        clock.now = datetime(2025, 3, 5, 9, tzinfo=UTC)

        done = _run(store, clock, "complete", r.id)

        assert done.updated_at == clock.now
        assert done.created_at == datetime(2025, 3, 2, 12, tzinfo=UTC)


class TestOrderTransitions:

    def test_release_for_order_cancels_every_active_hold(self, clock):
        store = _store(("P", 3), ("Q", 2))
        _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)
        _run(store, clock, "reserve", "Q", "O1", "2025-03-01", "2025-03-05", 2)
        other = _run(store, clock, "reserve", "P", "O2", "2025-03-01", "2025-03-05", 1)

        released = _run(store, clock, "release_for_order", "O1")

        assert len(released) == 2
        assert all(r.status == ReservationStatus.CANCELLED for r in released)
        assert store.reservations[other.id].is_active
        assert store.product("P").available_quantity == 2
        assert store.product("Q").available_quantity == 2

    def test_complete_for_order_skips_finished_holds(self, clock):
        store = _store(("P", 3))
        a = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 1)
        _run(store, clock, "reserve", "P", "O1", "2025-03-06", "2025-03-08", 1)
        _run(store, clock, "release", a.id)

        completed = _run(store, clock, "complete_for_order", "O1")

        assert len(completed) == 1
        assert store.reservations[a.id].status == ReservationStatus.CANCELLED

    def test_order_without_active_holds(self, clock):
        store = _store(("P", 3))
        with pytest.raises(EntityNotFoundError, match="No active reservations"):
            _run(store, clock, "release_for_order", "O404")


class TestCacheAgreement:

    def test_cache_matches_ledger_after_mixed_sequence(self, clock):
        store = _store(("P", 5))
        a = _run(store, clock, "reserve", "P", "O1", "2025-03-01", "2025-03-05", 2)
        b = _run(store, clock, "reserve", "P", "O2", "2025-03-02", "2025-03-03", 2)
        _run(store, clock, "reserve", "P", "O3", "2025-03-10", "2025-03-12", 5)
        _run(store, clock, "release", b.id)
        c = _run(store, clock, "reserve", "P", "O4", "2025-03-01", "2025-03-04", 3)
        _run(store, clock, "complete", a.id)

        held_now = sum(
            r.quantity.value for r in store.reservations_for("P")
            if r.is_active and r.period.contains(clock.now)
        )
        assert held_now == c.quantity.value
        assert store.product("P").available_quantity == 5 - held_now

    @pytest.mark.parametrize("seed", range(8))
    def test_cache_in_sync_after_every_step(self, seed):
        rng = random.Random(seed)
        store = _store(("P", 4), ("Q", 2))
        clock = FixedClock(datetime(2025, 3, 1, tzinfo=UTC))

        for _ in range(60):
            op = rng.choice(["reserve", "reserve", "release", "complete", "set_total", "refresh"])
            try:
                with store.uow_factory() as uow:
                    if op == "reserve":
                        start = rng.randint(1, 12)
                        ReservationLifecycleService(uow, clock).reserve(
                            rng.choice(["P", "Q"]),
                            f"O{rng.randint(1, 5)}",
                            datetime(2025, 3, start, tzinfo=UTC),
                            datetime(2025, 3, start + rng.randint(1, 4), tzinfo=UTC),
                            rng.randint(1, 3),
                        )
                    elif op in ("release", "complete"):
                        if not store.reservations:
                            continue
                        rid = rng.choice(sorted(store.reservations))
                        getattr(ReservationLifecycleService(uow, clock), op)(rid)
                    elif op == "set_total":
                        InventoryBookkeeper(uow, clock).set_total_quantity(
                            rng.choice(["P", "Q"]), rng.randint(0, 6)
                        )
                    else:
                        # Holds start and end as time passes; refresh catches up.
                        clock.now = datetime(2025, 3, rng.randint(1, 16), rng.randint(0, 23), tzinfo=UTC)
                        InventoryBookkeeper(uow, clock).refresh_all()
                    uow.commit()
            except DomainException:
                pass

            with store.uow_factory() as uow:
                bookkeeper = InventoryBookkeeper(uow, clock)
                for product in uow.products.list_all():
                    assert bookkeeper.audit(product).in_sync, (op, product.id)
                    active = [r for r in store.reservations_for(product.id) if r.is_active]
                    assert peak_load(active) <= product.total_quantity


class TestConcurrency:

    def test_parallel_reserves_never_oversell(self, clock):
        store = _store(("P", 5))
        barrier = threading.Barrier(12)
        outcomes: list[str] = []
        outcome_guard = threading.Lock()

        def attempt(n: int) -> None:
            barrier.wait()
            try:
                _run(store, clock, "reserve", "P", f"O{n}", "2025-03-01", "2025-03-05", 1)
                result = "ok"
            except UnavailableError:
                result = "unavailable"
            with outcome_guard:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(n,)) for n in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 5
        assert outcomes.count("unavailable") == 7
        active = [r for r in store.reservations_for("P") if r.is_active]
        assert peak_load(active) == 5
        assert store.product("P").available_quantity == 0

    def test_parallel_reserve_and_release_stay_consistent(self, clock):
        store = _store(("P", 2))
        held = [
            _run(store, clock, "reserve", "P", f"OLD{n}", "2025-03-01", "2025-03-05", 1)
            for n in range(2)
        ]
        errors: list[Exception] = []

        def release(rid: str) -> None:
            _run(store, clock, "release", rid)

        def reserve(n: int) -> None:
            try:
                _run(store, clock, "reserve", "P", f"NEW{n}", "2025-03-01", "2025-03-05", 1)
            except UnavailableError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=release, args=(r.id,)) for r in held]
        threads += [threading.Thread(target=reserve, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        active = [r for r in store.reservations_for("P") if r.is_active]
        assert peak_load(active) <= 2
        assert len(active) + len(errors) == 4
        assert store.product("P").available_quantity == 2 - len(active)
