"""HTTP adapter for the external payment gateway.

Posts one authorization request per paid checkout:

    POST {base_url}/authorize
    {"amount": "1500.00", "currency": "MXN", "token": "...", "payer": "..."}

and expects ``{"status": "approved"|"declined", "confirmation_id": ..., "detail": ...}``.
Transport failures, timeouts, non-2xx answers and unreadable bodies all
raise PaymentGatewayError, which the checkout treats as a decline.
"""

from __future__ import annotations

import logging

import httpx

from greenhaul.application.ports import (
    APPROVED,
    PaymentAuthorization,
    PaymentGateway,
    PaymentGatewayError,
)
from greenhaul.domain.model.value_objects import Money

logger = logging.getLogger(__name__)


class HttpPaymentGateway(PaymentGateway):

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        api_key: str = "",
        client: httpx.Client | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
        )

    def authorize(self, amount: Money, token: str, payer: str) -> PaymentAuthorization:
        payload = {
            "amount": str(amount.amount),
            "currency": amount.currency,
            "token": token,
            "payer": payer,
        }
        try:
            response = self._client.post("/authorize", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Payment gateway request failed: %s", exc)
            raise PaymentGatewayError(str(exc)) from exc
        except ValueError as exc:
            raise PaymentGatewayError("gateway returned a non-JSON body") from exc

        if not isinstance(body, dict) or "status" not in body:
            raise PaymentGatewayError("gateway response has no status")

        status = str(body["status"]).lower()
        confirmation_id = body.get("confirmation_id")
        if status == APPROVED and not confirmation_id:
            raise PaymentGatewayError("approved response without a confirmation id")

        logger.info("Payment gateway answered %s for payer %s", status, payer)
        return PaymentAuthorization(
            status=status,
            confirmation_id=str(confirmation_id) if confirmation_id else None,
            detail=str(body.get("detail") or ""),
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()
