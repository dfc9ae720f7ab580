"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterator

from rentals.domain.exceptions import (
    InvalidQuantityError,
    InvalidRangeError,
    ValidationError,
)

ONE_DAY = timedelta(days=1)


def to_utc(value: date | datetime) -> datetime:
    """Normalise a date or datetime to an aware UTC datetime.

    Plain dates become midnight; naive datetimes are taken to be UTC.
    """
    if not isinstance(value, datetime):
        if not isinstance(value, date):
            raise InvalidRangeError(
                f"Expected a date or datetime, got {type(value).__name__}"
            )
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_instant(raw: str | date | datetime) -> datetime:
    """Parse an ISO-8601 string (or pass through a date/datetime) to UTC."""
    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_utc(datetime.fromisoformat(text))
        except ValueError as exc:
            raise InvalidRangeError(f"Invalid ISO-8601 timestamp: {raw!r}") from exc
    return to_utc(raw)


@dataclass(frozen=True)
class DateRange:
    """Half-open interval ``[start, end)`` of UTC instants.

    Two ranges overlap iff ``s1 < e2 and s2 < e1``, so a rental ending at
    the instant another begins does not conflict with it.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", to_utc(self.start))
        object.__setattr__(self, "end", to_utc(self.end))
        if not self.start < self.end:
            raise InvalidRangeError(
                f"End date {self.end.isoformat()} must be after "
                f"start date {self.start.isoformat()}"
            )

    @staticmethod
    def parse(start: str | date | datetime, end: str | date | datetime) -> DateRange:
        return DateRange(parse_instant(start), parse_instant(end))

    def overlaps(self, other: DateRange) -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        instant = to_utc(instant)
        return self.start <= instant < self.end

    def days(self) -> Iterator[DateRange]:
        """Yield consecutive one-day windows covering the range.

        The final window is truncated at ``end``.
        """
        cursor = self.start
        while cursor < self.end:
            upper = min(cursor + ONE_DAY, self.end)
            yield DateRange(cursor, upper)
            cursor = upper

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot reserve zero or negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise InvalidQuantityError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidQuantityError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
