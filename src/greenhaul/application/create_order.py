"""Application service: Create Order use case (the booking transaction).

This is the only place that writes orders and reservations. Validation
and persistence run in the same unit of work: the leaf products and the
delivery/pickup days are row-locked before availability and slot counts
are read, so two concurrent bookings can never both see the last free
unit or the last free slot.

Steps inside the transaction:
1. Expand the cart into leaf requirements and check availability.
2. Check delivery and pickup slot capacity.
3. Generate a folio and insert the order (one retry on a folio clash).
4. Link the delivery and pickup addresses.
5. Insert one active reservation per leaf, cleaning day included.
6. Insert one line item per cart item.
7. Commit. Anything raised before this point rolls everything back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from greenhaul.application.dto import CreateOrderRequest, OrderDTO
from greenhaul.application.ports import Notifier, OrderCreatedNotification
from greenhaul.application.show_order import to_order_dto
from greenhaul.domain.exceptions import (
    AddressRequiredError,
    DateRangeRequiredError,
    DomainException,
    DuplicateFolioError,
    EntityNotFoundError,
    InvalidCartError,
    InvalidCompositionError,
    ValidationError,
)
from greenhaul.domain.model.order import CartItem, Order, OrderItem, OrderStatus
from greenhaul.domain.model.reservation import Reservation
from greenhaul.domain.model.value_objects import DateRange, Money
from greenhaul.domain.repository.unit_of_work import UnitOfWork
from greenhaul.domain.service.availability_checker import AvailabilityChecker
from greenhaul.domain.service.bundle_resolver import BundleResolver
from greenhaul.domain.service.folio import FolioGenerator
from greenhaul.domain.service.slot_capacity_checker import (
    DAILY_SLOT_CAP,
    SlotCapacityChecker,
    SlotKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingPlan:
    """A CreateOrderRequest that has passed boundary validation."""

    user_id: int
    cart: tuple[CartItem, ...]
    rental: DateRange
    delivery_date: date
    pickup_date: date
    delivery_address_id: int
    pickup_address_id: int
    total: Money
    contact_email: str | None = None


def validate_booking_request(request: CreateOrderRequest) -> BookingPlan:
    """Check the request shape. Touches no storage."""
    if not request.cart_items:
        raise InvalidCartError("Cart is empty")
    cart = tuple(
        CartItem.parse(spec.product_id, spec.name, spec.quantity, spec.price)
        for spec in request.cart_items
    )

    if request.delivery_address_id is None or request.pickup_address_id is None:
        raise AddressRequiredError("Both a delivery and a pickup address are required")

    if request.date_start is None or request.date_end is None:
        raise DateRangeRequiredError("Rental start and end dates are required")
    rental = DateRange(request.date_start, request.date_end)

    if request.delivery_date is None or request.pickup_date is None:
        raise DateRangeRequiredError("Delivery and pickup dates are required")
    if request.pickup_date < request.delivery_date:
        raise DateRangeRequiredError(
            f"Pickup date {request.pickup_date.isoformat()} is before delivery date "
            f"{request.delivery_date.isoformat()}"
        )

    if request.total_amount is None:
        raise InvalidCartError("Order total is required")
    try:
        total = Money.of(request.total_amount)
    except ValidationError as exc:
        raise InvalidCartError(f"Invalid order total: {exc}") from exc

    return BookingPlan(
        user_id=request.user_id,
        cart=cart,
        rental=rental,
        delivery_date=request.delivery_date,
        pickup_date=request.pickup_date,
        delivery_address_id=request.delivery_address_id,
        pickup_address_id=request.pickup_address_id,
        total=total,
        contact_email=request.contact_email,
    )


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        folio_generator: FolioGenerator | None = None,
        notifier: Notifier | None = None,
        daily_slot_cap: int = DAILY_SLOT_CAP,
    ) -> None:
        self._uow = uow
        self._folios = folio_generator or FolioGenerator()
        self._notifier = notifier
        self._daily_slot_cap = daily_slot_cap

    def handle(self, request: CreateOrderRequest) -> OrderDTO:
        """Validate and book an unpaid (``activo``) order."""
        booking = validate_booking_request(request)
        return self.commit(booking)

    def precheck(self, booking: BookingPlan) -> None:
        """Run the booking validation without locks and without writing.

        Advisory only: the result can be stale by the time ``commit`` runs,
        which re-checks everything under lock.
        """
        with self._uow:
            self._verify(booking, lock=False)

    def commit(
        self,
        booking: BookingPlan,
        status: OrderStatus = OrderStatus.ACTIVE,
        payment_reference: str | None = None,
    ) -> OrderDTO:
        with self._uow:
            try:
                requirements = self._verify(booking, lock=True)
            except DomainException as exc:
                logger.info("Booking rejected for user %s: %s", booking.user_id, exc)
                raise

            order = self._insert_order(booking, status, payment_reference)
            if order.items_total.amount != order.total_amount.amount:
                logger.warning(
                    "Order %s total %s differs from its line items (%s)",
                    order.folio,
                    order.total_amount,
                    order.items_total,
                )
            self._uow.orders.link_addresses(order)

            reservations: list[Reservation] = []
            for product_id, quantity in requirements.items():
                reservation = Reservation.for_booking(
                    product_id=product_id,
                    quantity=quantity,
                    rental=booking.rental,
                    user_id=booking.user_id,
                    order_id=order.id,
                )
                self._uow.reservations.add(reservation)
                reservations.append(reservation)

            for item in order.items:
                self._uow.orders.add_item(order, item)

            self._uow.commit()

        logger.info(
            "Order %s committed for user %s (%d items, %d leaf reservations, %s)",
            order.folio,
            order.user_id,
            len(order.items),
            len(reservations),
            order.status.value,
        )
        self._notify(order, booking)
        return to_order_dto(order, reservations)

    # --- Validation -----------------------------------------------------------

    def _verify(self, booking: BookingPlan, lock: bool) -> dict[int, int]:
        """Return leaf requirements after checking stock and slots."""
        uow = self._uow

        cart_ids = {item.product_id for item in booking.cart}
        products = uow.products.get_many(cart_ids)
        missing = sorted(cart_ids - products.keys())
        if missing:
            raise EntityNotFoundError(f"Product #{missing[0]} not found")

        bundle_ids = [pid for pid, product in products.items() if product.is_bundle]
        resolver = BundleResolver(bundle_ids, uow.bundles.get_many(bundle_ids))
        requirements = resolver.expand(booking.cart)

        if lock:
            leaves = uow.products.lock(requirements)
        else:
            leaves = uow.products.get_many(requirements)
        for product_id in requirements:
            leaf = leaves.get(product_id)
            if leaf is not None and leaf.is_bundle:
                raise InvalidCompositionError(
                    f"'{leaf.name}' is a bundle and cannot be a bundle component"
                )

        checker = AvailabilityChecker(uow.products, uow.reservations)
        checker.ensure_all(requirements, booking.rental, leaves)

        if lock:
            uow.orders.lock_schedule_days({booking.delivery_date, booking.pickup_date})
        slots = SlotCapacityChecker(uow.orders, self._daily_slot_cap)
        slots.ensure_capacity(booking.delivery_date, SlotKind.DELIVERY)
        slots.ensure_capacity(booking.pickup_date, SlotKind.PICKUP)

        return requirements

    # --- Persistence helpers --------------------------------------------------

    def _insert_order(
        self,
        booking: BookingPlan,
        status: OrderStatus,
        payment_reference: str | None,
    ) -> Order:
        order = self._new_order(booking, status, payment_reference)
        try:
            self._uow.orders.add(order)
        except DuplicateFolioError as exc:
            logger.warning("Folio %s already taken, generating a new one", exc.folio)
            order = self._new_order(booking, status, payment_reference)
            self._uow.orders.add(order)
        return order

    def _new_order(
        self,
        booking: BookingPlan,
        status: OrderStatus,
        payment_reference: str | None,
    ) -> Order:
        return Order.create(
            folio=self._folios.next(),
            user_id=booking.user_id,
            total_amount=booking.total,
            delivery_date=booking.delivery_date,
            pickup_date=booking.pickup_date,
            delivery_address_id=booking.delivery_address_id,
            pickup_address_id=booking.pickup_address_id,
            items=[OrderItem.from_cart(item) for item in booking.cart],
            status=status,
            payment_reference=payment_reference,
        )

    def _notify(self, order: Order, booking: BookingPlan) -> None:
        if self._notifier is None:
            return
        notification = OrderCreatedNotification(
            folio=order.folio,
            user_id=order.user_id,
            total=str(order.total_amount),
            delivery_date=order.delivery_date,
            pickup_date=order.pickup_date,
            items=tuple((item.product_name, item.quantity.value) for item in order.items),
            contact_email=booking.contact_email,
        )
        # The order is already committed; a notification problem must not
        # reach the caller.
        try:
            self._notifier.order_created(notification)
        except Exception:
            logger.exception("Could not hand off notification for order %s", order.folio)
