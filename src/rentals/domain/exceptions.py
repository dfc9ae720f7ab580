"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and translate them into
user-facing messages or status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "domain_error"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "validation_error"


class InvalidRangeError(ValidationError):
    """A date range whose end does not come after its start."""

    kind = "invalid_range"


class InvalidQuantityError(ValidationError):
    """A quantity that is not positive, or exceeds what the product owns."""

    kind = "invalid_quantity"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"


class UnavailableError(DomainException):
    """Not enough free units for the requested period."""

    kind = "unavailable"

    def __init__(self, message: str, available_quantity: int = 0) -> None:
        super().__init__(message)
        self.available_quantity = available_quantity


class InvalidStateError(DomainException):
    """A transition was attempted on a reservation that is no longer active."""

    kind = "invalid_state"


class ConcurrencyConflictError(DomainException):
    """The product's serialization point could not be acquired.

    Callers should retry the whole check-then-reserve sequence.
    """

    kind = "concurrency_conflict"
