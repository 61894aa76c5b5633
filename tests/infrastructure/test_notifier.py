"""Tests for the notification adapters."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date

import pytest

from greenhaul.application.ports import OrderCreatedNotification
from greenhaul.infrastructure.notification import email
from greenhaul.infrastructure.notification.background import BackgroundNotifier
from greenhaul.infrastructure.notification.email import SmtpEmailNotifier, render_order_email
from tests.fakes import ExplodingNotifier, RecordingNotifier

NOTIFICATION = OrderCreatedNotification(
    folio="GH-20250301-120000-AAAAAA",
    user_id=7,
    total="$500.00",
    delivery_date=date(2025, 3, 10),
    pickup_date=date(2025, 3, 12),
    items=(("Paquete Fiesta", 2),),
    contact_email="ana@example.com",
)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(email.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


class TestSmtpEmailNotifier:

    def test_sends_to_contact_email(self, fake_smtp):
        notifier = SmtpEmailNotifier("smtp.test", 2525, username="u", password="p")
        notifier.order_created(NOTIFICATION)

        server = fake_smtp.instances[0]
        assert (server.host, server.port) == ("smtp.test", 2525)
        assert server.started_tls
        assert server.logged_in == ("u", "p")
        msg = server.messages[0]
        assert msg["To"] == "ana@example.com"
        assert "GH-20250301-120000-AAAAAA" in msg["Subject"]

    def test_falls_back_to_operations_address(self, fake_smtp):
        notifier = SmtpEmailNotifier("smtp.test", use_tls=False, fallback_to="ops@greenhaul.mx")
        notifier.order_created(replace(NOTIFICATION, contact_email=None))
        assert fake_smtp.instances[0].messages[0]["To"] == "ops@greenhaul.mx"
        assert not fake_smtp.instances[0].started_tls

    def test_no_recipient_sends_nothing(self, fake_smtp):
        notifier = SmtpEmailNotifier("smtp.test")
        notifier.order_created(replace(NOTIFICATION, contact_email=""))
        assert fake_smtp.instances == []


def test_render_lists_items_and_dates():
    subject, body = render_order_email(NOTIFICATION)
    assert subject == "Your GreenHaul order GH-20250301-120000-AAAAAA"
    assert "2 x Paquete Fiesta" in body
    assert "Delivery: 2025-03-10" in body
    assert "Total: $500.00" in body


class TestBackgroundNotifier:

    def test_delivers_on_worker(self):
        inner = RecordingNotifier()
        notifier = BackgroundNotifier(inner, ThreadPoolExecutor(max_workers=1))
        notifier.order_created(NOTIFICATION)
        notifier.shutdown()
        assert inner.sent == [NOTIFICATION]

    def test_failure_is_logged_not_raised(self, caplog):
        notifier = BackgroundNotifier(ExplodingNotifier(), ThreadPoolExecutor(max_workers=1))
        notifier.order_created(NOTIFICATION)
        notifier.shutdown()
        assert "Notification for order GH-20250301-120000-AAAAAA failed" in caplog.text
