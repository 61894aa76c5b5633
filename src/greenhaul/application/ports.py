"""Ports to collaborators outside the booking core.

The payment gateway and the notification channel are owned by other
systems. The application layer talks to them only through these
interfaces; concrete adapters live in ``greenhaul.infrastructure``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from greenhaul.domain.model.value_objects import Money

APPROVED = "approved"
DECLINED = "declined"


class PaymentGatewayError(Exception):
    """The gateway could not be reached or answered with garbage."""


@dataclass(frozen=True)
class PaymentAuthorization:
    status: str
    confirmation_id: str | None
    detail: str = ""

    @property
    def approved(self) -> bool:
        # Anything other than an explicit approval is a decline.
        return self.status == APPROVED


class PaymentGateway(ABC):

    @abstractmethod
    def authorize(self, amount: Money, token: str, payer: str) -> PaymentAuthorization:
        """Charge ``amount``. Raises PaymentGatewayError on transport failure."""


@dataclass(frozen=True)
class OrderCreatedNotification:
    folio: str
    user_id: int
    total: str
    delivery_date: date
    pickup_date: date
    items: tuple[tuple[str, int], ...]
    contact_email: str | None = None


class Notifier(ABC):

    @abstractmethod
    def order_created(self, notification: OrderCreatedNotification) -> None:
        """Tell the customer (and operations) that an order was booked."""
