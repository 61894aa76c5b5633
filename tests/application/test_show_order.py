"""Tests for the ShowOrder query."""

from datetime import date

import pytest

from greenhaul.application.create_order import CreateOrderHandler
from greenhaul.application.dto import CartItemSpec, CreateOrderRequest
from greenhaul.application.show_order import ShowOrderHandler
from greenhaul.domain.exceptions import EntityNotFoundError
from tests.fakes import FakeStore, FakeUnitOfWork, fixed_folios


def test_round_trip_by_folio():
    store = FakeStore()
    store.add_product(1, "Silla", "35.00", stock=10)
    uow = FakeUnitOfWork(store)
    CreateOrderHandler(uow, folio_generator=fixed_folios("C0FFEE")).handle(
        CreateOrderRequest(
            user_id=7,
            cart_items=[CartItemSpec(1, "Silla", 4, "35.00")],
            delivery_address_id=100,
            pickup_address_id=101,
            date_start=date(2025, 3, 10),
            date_end=date(2025, 3, 12),
            delivery_date=date(2025, 3, 10),
            pickup_date=date(2025, 3, 12),
            total_amount="140",
        )
    )

    dto = ShowOrderHandler(uow).handle("GH-20250301-120000-C0FFEE")
    assert dto.total == "$140.00"
    assert dto.items[0].line_total == "$140.00"
    assert dto.reservations[0].date_end == "2025-03-13"
    assert (dto.delivery_address_id, dto.pickup_address_id) == (100, 101)


def test_unknown_folio():
    with pytest.raises(EntityNotFoundError):
        ShowOrderHandler(FakeUnitOfWork()).handle("GH-nope")
