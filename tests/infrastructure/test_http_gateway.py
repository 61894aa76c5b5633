"""Tests for the HTTP payment gateway adapter using httpx.MockTransport."""

import json

import httpx
import pytest

from greenhaul.application.ports import PaymentGatewayError
from greenhaul.domain.model.value_objects import Money
from greenhaul.infrastructure.payment.http_gateway import HttpPaymentGateway


def _gateway(handler) -> HttpPaymentGateway:
    client = httpx.Client(base_url="https://pay.test", transport=httpx.MockTransport(handler))
    return HttpPaymentGateway("https://pay.test", client=client)


class TestAuthorize:

    def test_approved(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"status": "approved", "confirmation_id": "PAY-77"})

        auth = _gateway(handler).authorize(Money.of("1500.00"), "tok_visa", "ana@example.com")

        assert auth.approved
        assert auth.confirmation_id == "PAY-77"
        assert seen["path"] == "/authorize"
        assert seen["body"] == {
            "amount": "1500.00",
            "currency": "MXN",
            "token": "tok_visa",
            "payer": "ana@example.com",
        }

    def test_declined(self):
        def handler(request):
            return httpx.Response(200, json={"status": "declined", "detail": "insufficient funds"})

        auth = _gateway(handler).authorize(Money.of("10"), "tok", "p")
        assert not auth.approved
        assert auth.confirmation_id is None
        assert auth.detail == "insufficient funds"

    def test_unknown_status_is_not_approved(self):
        def handler(request):
            return httpx.Response(200, json={"status": "review", "confirmation_id": "X"})

        assert not _gateway(handler).authorize(Money.of("10"), "tok", "p").approved

    def test_timeout_raises_gateway_error(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(PaymentGatewayError):
            _gateway(handler).authorize(Money.of("10"), "tok", "p")

    def test_server_error_raises_gateway_error(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(PaymentGatewayError):
            _gateway(handler).authorize(Money.of("10"), "tok", "p")

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>ok</html>")

        with pytest.raises(PaymentGatewayError, match="non-JSON"):
            _gateway(handler).authorize(Money.of("10"), "tok", "p")

    def test_approved_without_confirmation(self):
        def handler(request):
            return httpx.Response(200, json={"status": "approved"})

        with pytest.raises(PaymentGatewayError, match="confirmation id"):
            _gateway(handler).authorize(Money.of("10"), "tok", "p")
