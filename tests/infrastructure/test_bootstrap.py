"""Tests for the composition root's shared resources."""

import pytest

from greenhaul.infrastructure import bootstrap
from greenhaul.infrastructure.config import get_settings


@pytest.fixture
def fresh_bootstrap(tmp_path, monkeypatch):
    monkeypatch.setenv("GREENHAUL_DATABASE_URL", f"sqlite:///{tmp_path / 'boot.db'}")
    monkeypatch.setenv("GREENHAUL_PAYMENT_GATEWAY_URL", "https://pay.test")
    monkeypatch.setenv("GREENHAUL_SMTP_HOST", "")
    get_settings.cache_clear()
    bootstrap.shutdown()
    yield
    bootstrap.shutdown()
    get_settings.cache_clear()


def test_payment_gateway_is_shared(fresh_bootstrap):
    assert bootstrap.payment_gateway() is bootstrap.payment_gateway()
    first = bootstrap.pay_and_create_order_handler()
    second = bootstrap.pay_and_create_order_handler()
    assert first._gateway is second._gateway


def test_shutdown_closes_the_gateway_client(fresh_bootstrap):
    gateway = bootstrap.payment_gateway()
    assert not gateway.is_closed

    bootstrap.shutdown()

    assert gateway.is_closed
    replacement = bootstrap.payment_gateway()
    assert replacement is not gateway
    assert not replacement.is_closed


def test_shutdown_without_resources_is_a_no_op(fresh_bootstrap):
    bootstrap.shutdown()
    bootstrap.shutdown()
