"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. The engine and the
notification pool are built once per process and reused.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from greenhaul.application.add_product import AddProductHandler
from greenhaul.application.check_availability import CheckAvailabilityHandler
from greenhaul.application.create_order import CreateOrderHandler
from greenhaul.application.define_bundle import DefineBundleHandler
from greenhaul.application.pay_and_create_order import PayAndCreateOrderHandler
from greenhaul.application.ports import Notifier, PaymentGateway
from greenhaul.application.set_stock import SetStockHandler
from greenhaul.application.show_calendar import ShowCalendarHandler
from greenhaul.application.show_order import ShowOrderHandler
from greenhaul.infrastructure.config import Settings, get_settings
from greenhaul.infrastructure.notification.background import BackgroundNotifier
from greenhaul.infrastructure.notification.email import LoggingNotifier, SmtpEmailNotifier
from greenhaul.infrastructure.payment.http_gateway import HttpPaymentGateway
from greenhaul.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from greenhaul.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


def settings() -> Settings:
    return get_settings()


@lru_cache
def engine() -> Engine:
    return build_engine(settings())


@lru_cache
def session_factory() -> sessionmaker[Session]:
    return build_session_factory(engine())


def init_database() -> None:
    create_schema(engine())


def unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory())


@lru_cache
def notifier() -> Notifier:
    cfg = settings()
    if cfg.smtp_host:
        inner: Notifier = SmtpEmailNotifier(
            host=cfg.smtp_host,
            port=cfg.smtp_port,
            sender=cfg.smtp_from,
            username=cfg.smtp_username,
            password=cfg.smtp_password,
            use_tls=cfg.smtp_use_tls,
            fallback_to=cfg.notify_to,
        )
    else:
        inner = LoggingNotifier()
    return BackgroundNotifier(inner, workers=cfg.notification_workers)


@lru_cache
def _http_gateway() -> HttpPaymentGateway:
    cfg = settings()
    return HttpPaymentGateway(
        base_url=cfg.payment_gateway_url,
        timeout=cfg.payment_timeout_seconds,
        api_key=cfg.payment_api_key,
    )


def payment_gateway() -> PaymentGateway:
    return _http_gateway()


# --- Handlers -----------------------------------------------------------------


def create_order_handler() -> CreateOrderHandler:
    return CreateOrderHandler(
        unit_of_work(),
        notifier=notifier(),
        daily_slot_cap=settings().daily_slot_cap,
    )


def pay_and_create_order_handler() -> PayAndCreateOrderHandler:
    return PayAndCreateOrderHandler(create_order_handler(), payment_gateway())


def show_order_handler() -> ShowOrderHandler:
    return ShowOrderHandler(unit_of_work())


def check_availability_handler() -> CheckAvailabilityHandler:
    return CheckAvailabilityHandler(unit_of_work())


def show_calendar_handler() -> ShowCalendarHandler:
    return ShowCalendarHandler(unit_of_work(), daily_slot_cap=settings().daily_slot_cap)


def add_product_handler() -> AddProductHandler:
    return AddProductHandler(unit_of_work())


def set_stock_handler() -> SetStockHandler:
    return SetStockHandler(unit_of_work())


def define_bundle_handler() -> DefineBundleHandler:
    return DefineBundleHandler(unit_of_work())


def shutdown() -> None:
    """Drain pending notifications and close pooled connections."""
    if _http_gateway.cache_info().currsize:
        _http_gateway().close()
        _http_gateway.cache_clear()
    if notifier.cache_info().currsize:
        pending = notifier()
        if isinstance(pending, BackgroundNotifier):
            pending.shutdown(wait=True)
        notifier.cache_clear()
    if engine.cache_info().currsize:
        engine().dispose()
    session_factory.cache_clear()
    engine.cache_clear()
