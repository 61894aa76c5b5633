"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each booking error carries the fields a caller needs to retry (which product,
which date, which slot).
"""

from __future__ import annotations

from datetime import date


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidCartError(ValidationError):
    """The cart is empty or one of its items is malformed."""


class InvalidCompositionError(ValidationError):
    """A bundle has no registered composition, or the composition is invalid."""


class AddressRequiredError(ValidationError):
    """Delivery and pickup addresses are both required."""


class DateRangeRequiredError(ValidationError):
    """A rental or scheduling date is missing or the range is inverted."""


class InsufficientInventoryError(DomainException):
    """Not enough units of a leaf product are free for the requested dates."""

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient inventory for {product_name} "
            f"(need {requested}, have {available} available)"
        )


class SlotFullError(DomainException):
    """The daily delivery or pickup cap has been reached for a date."""

    def __init__(self, day: date, kind: str, cap: int) -> None:
        self.day = day
        self.kind = kind
        self.cap = cap
        super().__init__(
            f"No {kind} slots left on {day.isoformat()} "
            f"(limit is {cap} per day)"
        )


class DuplicateFolioError(DomainException):
    """A generated folio collided with an existing order. Safe to retry."""

    def __init__(self, folio: str) -> None:
        self.folio = folio
        super().__init__(f"Folio '{folio}' is already in use")


class PaymentDeclinedError(DomainException):
    """The payment gateway did not approve the charge. Nothing was persisted."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Payment declined: {detail}")


class PostPaymentPersistenceError(DomainException):
    """Payment was captured but the order could not be persisted.

    Never retried automatically: a retry could charge the customer twice.
    Operators reconcile using ``confirmation_id``.
    """

    def __init__(self, confirmation_id: str, cause: Exception) -> None:
        self.confirmation_id = confirmation_id
        self.cause = cause
        super().__init__(
            "Payment received, order pending manual confirmation "
            f"(payment confirmation {confirmation_id}): {cause}"
        )
