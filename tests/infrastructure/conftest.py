"""Fixtures backed by a throwaway SQLite database file."""

from __future__ import annotations

from decimal import Decimal

import pytest

from greenhaul.domain.model.product import BundleComponent, BundleComposition, Product, ProductKind
from greenhaul.domain.model.value_objects import Money
from greenhaul.infrastructure.config import Settings
from greenhaul.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from greenhaul.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'greenhaul.db'}", db_pool_timeout=30)


@pytest.fixture
def engine(settings):
    engine = build_engine(settings)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def make_uow(session_factory):
    def _make() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory)

    return _make


@pytest.fixture
def catalog(make_uow) -> dict[str, int]:
    """Silla (stock 10), Mesa (stock 2) and a bundle of 4 sillas + 1 mesa."""
    with make_uow() as uow:
        chair = Product(None, "Silla", Money(Decimal("35.00")), 10)
        table = Product(None, "Mesa", Money(Decimal("150.00")), 2)
        pack = Product(None, "Paquete Fiesta", Money(Decimal("250.00")), 0, ProductKind.BUNDLE)
        for product in (chair, table, pack):
            uow.products.save(product)
        uow.bundles.save(
            BundleComposition(pack.id, (BundleComponent(chair.id, 4), BundleComponent(table.id, 1)))
        )
        uow.commit()
    return {"chair": chair.id, "table": table.id, "pack": pack.id}
