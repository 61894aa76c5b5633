"""Order confirmation notifiers."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from greenhaul.application.ports import Notifier, OrderCreatedNotification

logger = logging.getLogger(__name__)


def render_order_email(notification: OrderCreatedNotification) -> tuple[str, str]:
    """Return (subject, body) for an order confirmation."""
    subject = f"Your GreenHaul order {notification.folio}"
    lines = [
        f"Order {notification.folio} is booked.",
        "",
        f"Delivery: {notification.delivery_date.isoformat()}",
        f"Pickup:   {notification.pickup_date.isoformat()}",
        "",
    ]
    lines.extend(f"  {qty} x {name}" for name, qty in notification.items)
    lines.extend(["", f"Total: {notification.total}"])
    return subject, "\n".join(lines)


class SmtpEmailNotifier(Notifier):

    def __init__(
        self,
        host: str,
        port: int = 587,
        sender: str = "no-reply@greenhaul.mx",
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        fallback_to: str = "",
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._fallback_to = fallback_to.strip()
        self._timeout = timeout

    def recipient_for(self, notification: OrderCreatedNotification) -> str | None:
        if notification.contact_email and notification.contact_email.strip():
            return notification.contact_email.strip()
        return self._fallback_to or None

    def order_created(self, notification: OrderCreatedNotification) -> None:
        recipient = self.recipient_for(notification)
        if recipient is None:
            logger.info("No recipient for order %s, skipping email", notification.folio)
            return

        subject, body = render_order_email(notification)
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(body)

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._username and self._password:
                server.login(self._username, self._password)
            server.send_message(msg)
        logger.info("Confirmation for order %s sent to %s", notification.folio, recipient)


class LoggingNotifier(Notifier):
    """Used when no SMTP host is configured."""

    def order_created(self, notification: OrderCreatedNotification) -> None:
        logger.info(
            "Order %s booked for user %s (%s, delivery %s, pickup %s)",
            notification.folio,
            notification.user_id,
            notification.total,
            notification.delivery_date.isoformat(),
            notification.pickup_date.isoformat(),
        )
