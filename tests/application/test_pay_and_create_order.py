"""Integration tests for the paid checkout flow."""

from datetime import date

import pytest

from greenhaul.application.create_order import CreateOrderHandler
from greenhaul.application.dto import CartItemSpec, CreateOrderRequest, PaymentRequest
from greenhaul.application.pay_and_create_order import PayAndCreateOrderHandler
from greenhaul.domain.exceptions import (
    InsufficientInventoryError,
    InvalidCartError,
    PaymentDeclinedError,
    PostPaymentPersistenceError,
)
from greenhaul.domain.model.value_objects import Money
from tests.fakes import (
    DecliningPaymentGateway,
    FakePaymentGateway,
    FakeStore,
    FakeUnitOfWork,
    UnreachablePaymentGateway,
)

CHAIR = 1
PAYMENT = PaymentRequest(token="tok_visa", payer="ana@example.com")


def _request(qty: int = 4, **overrides) -> CreateOrderRequest:
    fields = dict(
        user_id=7,
        cart_items=[CartItemSpec(CHAIR, "Silla", qty, "35.00")],
        delivery_address_id=100,
        pickup_address_id=101,
        date_start=date(2025, 3, 10),
        date_end=date(2025, 3, 12),
        delivery_date=date(2025, 3, 10),
        pickup_date=date(2025, 3, 12),
        total_amount="140.00",
    )
    fields.update(overrides)
    return CreateOrderRequest(**fields)


def _setup(gateway=None, stock: int = 10):
    store = FakeStore()
    store.add_product(CHAIR, "Silla", "35.00", stock=stock)
    uow = FakeUnitOfWork(store)
    gateway = gateway or FakePaymentGateway(confirmation_id="PAY-123")
    handler = PayAndCreateOrderHandler(CreateOrderHandler(uow), gateway)
    return handler, uow, gateway


class TestPaidCheckout:

    def test_approved_payment_books_paid_order(self):
        handler, uow, gateway = _setup()
        result = handler.handle(PAYMENT, _request())

        assert result.state == "ORDER_COMMITTED"
        assert result.payment_confirmation == "PAY-123"
        assert result.order.status == "pagado"
        assert result.order.payment_reference == "PAY-123"
        assert result.folio == result.order.folio
        assert gateway.calls == [(Money.of("140.00"), "tok_visa", "ana@example.com")]
        assert len(uow.store.orders) == 1

    def test_declined_payment_writes_nothing(self):
        handler, uow, _ = _setup(gateway=DecliningPaymentGateway("card expired"))
        with pytest.raises(PaymentDeclinedError, match="card expired"):
            handler.handle(PAYMENT, _request())
        assert uow.store.orders == {}
        assert uow.store.reservations == []

    def test_unreachable_gateway_counts_as_decline(self):
        handler, uow, _ = _setup(gateway=UnreachablePaymentGateway())
        with pytest.raises(PaymentDeclinedError, match="unavailable"):
            handler.handle(PAYMENT, _request())
        assert uow.store.orders == {}

    def test_approval_without_confirmation_is_a_decline(self):
        handler, uow, _ = _setup(gateway=FakePaymentGateway(confirmation_id=None))
        with pytest.raises(PaymentDeclinedError):
            handler.handle(PAYMENT, _request())
        assert uow.store.orders == {}

    def test_invalid_request_never_reaches_gateway(self):
        handler, _, gateway = _setup()
        with pytest.raises(InvalidCartError):
            handler.handle(PAYMENT, _request(cart_items=[]))
        assert gateway.calls == []

    def test_unbookable_cart_is_refused_before_charging(self):
        handler, _, gateway = _setup(stock=2)
        with pytest.raises(InsufficientInventoryError):
            handler.handle(PAYMENT, _request(qty=3))
        assert gateway.calls == []


class TestPaymentCapturedButBookingFailed:

    def test_stock_taken_after_charge_surfaces_confirmation(self):
        store = FakeStore()
        store.add_product(CHAIR, "Silla", "35.00", stock=4)
        uow = FakeUnitOfWork(store)
        order_handler = CreateOrderHandler(uow)

        class RacingGateway(FakePaymentGateway):
            def authorize(self, amount, token, payer):
                # Another customer books the same chairs while we are charging.
                order_handler.handle(_request(qty=4, user_id=8))
                return super().authorize(amount, token, payer)

        handler = PayAndCreateOrderHandler(order_handler, RacingGateway(confirmation_id="PAY-9"))
        with pytest.raises(PostPaymentPersistenceError) as excinfo:
            handler.handle(PAYMENT, _request(qty=4))

        assert excinfo.value.confirmation_id == "PAY-9"
        assert isinstance(excinfo.value.__cause__, InsufficientInventoryError)
        assert "pending manual confirmation" in str(excinfo.value)
        assert [o.user_id for o in uow.store.orders.values()] == [8]

    def test_storage_failure_after_charge(self, monkeypatch):
        handler, uow, _ = _setup()

        def broken_commit(self):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(FakeUnitOfWork, "commit", broken_commit)
        with pytest.raises(PostPaymentPersistenceError) as excinfo:
            handler.handle(PAYMENT, _request())
        assert excinfo.value.confirmation_id == "PAY-123"
        assert uow.store.orders == {}
