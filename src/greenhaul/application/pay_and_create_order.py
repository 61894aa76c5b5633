"""Application service: Pay and Create Order use case.

Charges the customer through the external gateway, then books the order
with status ``pagado``.

    PENDING -> PAYMENT_AUTHORIZED -> ORDER_COMMITTED
    PENDING -> PAYMENT_AUTHORIZED -> ORDER_FAILED
    PENDING -> PAYMENT_DECLINED

The charge happens before the booking transaction opens, so no database
lock is held while the gateway call is in flight. Between the two steps
stock or slots may have been taken; the booking re-validates under lock
and, if it fails, the charge has already happened. That case surfaces as
PostPaymentPersistenceError carrying the confirmation id and is never
retried here, since a retry could charge twice.
"""

from __future__ import annotations

import logging
from enum import Enum

from greenhaul.application.create_order import (
    CreateOrderHandler,
    validate_booking_request,
)
from greenhaul.application.dto import CreateOrderRequest, PaidOrderDTO, PaymentRequest
from greenhaul.application.ports import PaymentGateway, PaymentGatewayError
from greenhaul.domain.exceptions import PaymentDeclinedError, PostPaymentPersistenceError
from greenhaul.domain.model.order import OrderStatus

logger = logging.getLogger(__name__)


class PaymentState(Enum):
    PENDING = "PENDING"
    PAYMENT_AUTHORIZED = "PAYMENT_AUTHORIZED"
    PAYMENT_DECLINED = "PAYMENT_DECLINED"
    ORDER_COMMITTED = "ORDER_COMMITTED"
    ORDER_FAILED = "ORDER_FAILED"


class PayAndCreateOrderHandler:

    def __init__(
        self,
        order_handler: CreateOrderHandler,
        gateway: PaymentGateway,
    ) -> None:
        self._order_handler = order_handler
        self._gateway = gateway

    def handle(
        self,
        payment: PaymentRequest,
        request: CreateOrderRequest,
    ) -> PaidOrderDTO:
        booking = validate_booking_request(request)
        # Refuse obviously unbookable carts before any money moves.
        self._order_handler.precheck(booking)

        state = PaymentState.PENDING
        try:
            authorization = self._gateway.authorize(booking.total, payment.token, payment.payer)
        except PaymentGatewayError as exc:
            state = self._transition(state, PaymentState.PAYMENT_DECLINED, booking.user_id)
            raise PaymentDeclinedError(f"payment gateway unavailable ({exc})") from exc

        if not authorization.approved or not authorization.confirmation_id:
            state = self._transition(state, PaymentState.PAYMENT_DECLINED, booking.user_id)
            raise PaymentDeclinedError(authorization.detail or authorization.status)

        confirmation_id = authorization.confirmation_id
        state = self._transition(state, PaymentState.PAYMENT_AUTHORIZED, booking.user_id)

        try:
            order = self._order_handler.commit(
                booking,
                status=OrderStatus.PAID,
                payment_reference=confirmation_id,
            )
        except Exception as exc:
            state = self._transition(state, PaymentState.ORDER_FAILED, booking.user_id)
            logger.error(
                "Payment %s captured for user %s but the order was not persisted; "
                "manual reconciliation required: %s",
                confirmation_id,
                booking.user_id,
                exc,
            )
            raise PostPaymentPersistenceError(confirmation_id, exc) from exc

        state = self._transition(state, PaymentState.ORDER_COMMITTED, booking.user_id)
        return PaidOrderDTO(
            order=order,
            payment_confirmation=confirmation_id,
            state=state.value,
        )

    @staticmethod
    def _transition(current: PaymentState, new: PaymentState, user_id: int) -> PaymentState:
        logger.info("Paid checkout for user %s: %s -> %s", user_id, current.value, new.value)
        return new
