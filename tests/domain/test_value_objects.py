"""Unit tests for domain value objects."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentals.domain.exceptions import (
    InvalidQuantityError,
    InvalidRangeError,
    ValidationError,
)
from rentals.domain.model.value_objects import (
    DateRange,
    Money,
    Quantity,
    parse_instant,
    to_utc,
)

UTC = timezone.utc


def _day(d: int) -> datetime:
    return datetime(2024, 7, d, tzinfo=UTC)


# ── Instants ─────────────────────────────────────────────────────────────────


class TestInstants:

    def test_plain_date_becomes_utc_midnight(self):
        assert to_utc(date(2024, 7, 1)) == _day(1)

    def test_naive_datetime_is_taken_as_utc(self):
        assert to_utc(datetime(2024, 7, 1, 9)) == datetime(2024, 7, 1, 9, tzinfo=UTC)

    def test_offset_is_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-4))
        assert to_utc(datetime(2024, 7, 1, 20, tzinfo=eastern)) == datetime(2024, 7, 2, 0, tzinfo=UTC)

    def test_parse_accepts_z_suffix(self):
        assert parse_instant("2024-07-01T00:00:00Z") == _day(1)

    def test_parse_accepts_date_only(self):
        assert parse_instant("2024-07-01") == _day(1)

    def test_parse_rejects_garbage(self):
        with pytest.raises(InvalidRangeError, match="Invalid ISO-8601"):
            parse_instant("next tuesday")

    def test_parse_rejects_non_temporal_values(self):
        with pytest.raises(InvalidRangeError):
            parse_instant(42)


# ── DateRange ────────────────────────────────────────────────────────────────


class TestDateRange:

    def test_end_must_follow_start(self):
        with pytest.raises(InvalidRangeError, match="must be after"):
            DateRange(_day(5), _day(1))

    def test_empty_range_rejected(self):
        with pytest.raises(InvalidRangeError):
            DateRange(_day(1), _day(1))

    def test_parse_from_strings(self):
        r = DateRange.parse("2024-07-01", "2024-07-03")
        assert r.start == _day(1)
        assert r.end == _day(3)
        assert r.duration == timedelta(days=2)

    def test_overlapping_ranges(self):
        assert DateRange(_day(1), _day(5)).overlaps(DateRange(_day(4), _day(8)))
        assert DateRange(_day(4), _day(8)).overlaps(DateRange(_day(1), _day(5)))

    def test_containment_overlaps(self):
        assert DateRange(_day(1), _day(10)).overlaps(DateRange(_day(3), _day(4)))

    def test_back_to_back_ranges_do_not_overlap(self):
        """A rental ending at the instant another begins is a clean handover."""
        first = DateRange(_day(1), _day(5))
        second = DateRange(_day(5), _day(8))
        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_disjoint_ranges_do_not_overlap(self):
        assert not DateRange(_day(1), _day(2)).overlaps(DateRange(_day(3), _day(4)))

    def test_contains_is_half_open(self):
        r = DateRange(_day(1), _day(5))
        assert r.contains(_day(1))
        assert r.contains(_day(4))
        assert not r.contains(_day(5))

    def test_days_cover_range(self):
        days = list(DateRange(_day(1), _day(4)).days())
        assert [d.start for d in days] == [_day(1), _day(2), _day(3)]
        assert days[-1].end == _day(4)

    def test_last_day_is_truncated(self):
        r = DateRange(_day(1), datetime(2024, 7, 2, 6, tzinfo=UTC))
        days = list(r.days())
        assert len(days) == 2
        assert days[-1].end == datetime(2024, 7, 2, 6, tzinfo=UTC)

    def test_str(self):
        assert str(DateRange(_day(1), _day(2))) == (
            "[2024-07-01T00:00:00+00:00, 2024-07-02T00:00:00+00:00)"
        )


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(InvalidQuantityError, match="must be positive"):
            Quantity(value)

    @pytest.mark.parametrize("value", [1.5, "2", True])
    def test_non_integer_rejected(self, value):
        with pytest.raises(InvalidQuantityError, match="must be an integer"):
            Quantity(value)

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            Quantity(0)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_of_factory_from_string(self):
        assert Money.of("45.5").amount == Decimal("45.5")

    def test_formatting(self):
        assert str(Money.of("45.5")) == "$45.50"

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("lots")
