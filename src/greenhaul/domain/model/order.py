"""Order aggregate — a committed rental booking.

The Order owns its line items. Line items are price/name snapshots taken
at booking time and are independent of how bundles were expanded into
reservations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from greenhaul.domain.exceptions import (
    AddressRequiredError,
    DateRangeRequiredError,
    InvalidCartError,
    ValidationError,
)
from greenhaul.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    ACTIVE = "activo"
    PAID = "pagado"
    COMPLETED = "completado"
    CANCELLED = "cancelado"


@dataclass(frozen=True)
class CartItem:
    """What the customer put in the cart. Never persisted as-is."""

    product_id: int
    name: str
    quantity: int
    price: Money

    @staticmethod
    def parse(
        product_id: object,
        name: object,
        quantity: object,
        price: object,
    ) -> CartItem:
        """Validate raw request values and build a cart item."""
        if product_id is None or isinstance(product_id, bool) or not isinstance(product_id, int):
            raise InvalidCartError(f"Cart item {name!r} has no valid product id")
        if not isinstance(name, str) or not name.strip():
            raise InvalidCartError(f"Cart item for product #{product_id} has no name")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidCartError(
                f"Cart item '{name}' needs a positive integer quantity, got {quantity!r}"
            )
        if price is None:
            raise InvalidCartError(f"Cart item '{name}' has no price")
        try:
            money = price if isinstance(price, Money) else Money.of(price)
        except ValidationError as exc:
            raise InvalidCartError(f"Cart item '{name}' has an invalid price: {exc}") from exc
        return CartItem(product_id=product_id, name=name.strip(), quantity=quantity, price=money)


@dataclass
class OrderItem:
    """Captures the name and price of a cart line at order time."""

    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    id: int | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @staticmethod
    def from_cart(item: CartItem) -> OrderItem:
        return OrderItem(
            product_name=item.name,
            quantity=Quantity(item.quantity),
            unit_price=item.price,
        )


@dataclass
class Order:
    """Aggregate root for rental orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    folio: str
    user_id: int
    total_amount: Money
    delivery_date: date
    pickup_date: date
    delivery_address_id: int
    pickup_address_id: int
    items: list[OrderItem]
    status: OrderStatus = OrderStatus.ACTIVE
    order_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payment_reference: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        folio: str,
        user_id: int,
        total_amount: Money,
        delivery_date: date,
        pickup_date: date,
        delivery_address_id: int,
        pickup_address_id: int,
        items: list[OrderItem],
        status: OrderStatus = OrderStatus.ACTIVE,
        payment_reference: str | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not folio:
            raise ValidationError("Orders need a folio")
        if not items:
            raise InvalidCartError("Order must contain at least one item")
        if delivery_address_id is None or pickup_address_id is None:
            raise AddressRequiredError("Delivery and pickup addresses are required")
        if delivery_date is None or pickup_date is None:
            raise DateRangeRequiredError("Delivery and pickup dates are required")
        if pickup_date < delivery_date:
            raise DateRangeRequiredError(
                f"Pickup date {pickup_date.isoformat()} is before delivery date "
                f"{delivery_date.isoformat()}"
            )
        if status is OrderStatus.PAID and not payment_reference:
            raise ValidationError("Paid orders must carry a payment reference")

        return Order(
            id=None,
            folio=folio,
            user_id=user_id,
            total_amount=total_amount,
            delivery_date=delivery_date,
            pickup_date=pickup_date,
            delivery_address_id=delivery_address_id,
            pickup_address_id=pickup_address_id,
            items=list(items),
            status=status,
            payment_reference=payment_reference,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def items_total(self) -> Money:
        result = Money(Decimal("0.00"), self.total_amount.currency)
        for item in self.items:
            result = result + item.line_total
        return result
