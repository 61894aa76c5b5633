"""Data Transfer Objects — plain containers that cross layer boundaries.

Requests carry raw caller input into the application layer, where it is
validated before any transaction starts. Outputs carry formatted data back
out without exposing domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one cart line as sent by the storefront."""

    product_id: int | None
    name: str | None
    quantity: int | None
    price: str | Decimal | int | float | None


@dataclass(frozen=True)
class CreateOrderRequest:
    """Input: everything needed to book and persist one order."""

    user_id: int
    cart_items: list[CartItemSpec]
    delivery_address_id: int | None
    pickup_address_id: int | None
    date_start: date | None
    date_end: date | None
    delivery_date: date | None
    pickup_date: date | None
    total_amount: str | Decimal | int | float | None
    contact_email: str | None = None


@dataclass(frozen=True)
class PaymentRequest:
    """Input: the card token and payer identity handed to the gateway."""

    token: str
    payer: str


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemDTO:
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$150.00"
    line_total: str


@dataclass(frozen=True)
class ReservationDTO:
    product_id: int
    quantity: int
    date_start: str
    date_end: str  # includes the cleaning day
    status: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a persisted order, identified by its folio."""

    folio: str
    user_id: int
    status: str
    total: str
    order_date: str
    delivery_date: str
    pickup_date: str
    delivery_address_id: int
    pickup_address_id: int
    items: list[OrderItemDTO]
    reservations: list[ReservationDTO] = field(default_factory=list)
    payment_reference: str | None = None


@dataclass(frozen=True)
class PaidOrderDTO:
    order: OrderDTO
    payment_confirmation: str
    state: str

    @property
    def folio(self) -> str:
        return self.order.folio


@dataclass(frozen=True)
class AvailabilityDTO:
    product_id: int
    product_name: str
    quantity: int
    date_start: str
    date_end: str
    available: bool
    remaining: int


@dataclass(frozen=True)
class CalendarDayDTO:
    date: str
    deliveries: int
    pickups: int
    deliveries_available: int
    pickups_available: int
