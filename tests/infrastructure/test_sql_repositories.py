"""Tests for the SQLAlchemy repositories against SQLite."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from greenhaul.domain.exceptions import DuplicateFolioError
from greenhaul.domain.model.order import Order, OrderItem, OrderStatus
from greenhaul.domain.model.reservation import Reservation, ReservationStatus
from greenhaul.domain.model.value_objects import DateRange, Money, Quantity
from greenhaul.infrastructure.persistence.tables import ScheduleDayRow


def _order(folio: str, delivery=date(2025, 3, 10), pickup=date(2025, 3, 12)) -> Order:
    return Order.create(
        folio=folio,
        user_id=7,
        total_amount=Money.of("290.00"),
        delivery_date=delivery,
        pickup_date=pickup,
        delivery_address_id=100,
        pickup_address_id=101,
        items=[
            OrderItem("Silla", Quantity(4), Money.of("35.00")),
            OrderItem("Mesa", Quantity(1), Money.of("150.00")),
        ],
        status=OrderStatus.PAID,
        payment_reference="PAY-1",
    )


def _store_order(uow, order: Order) -> None:
    uow.orders.add(order)
    uow.orders.link_addresses(order)
    for item in order.items:
        uow.orders.add_item(order, item)


class TestProducts:

    def test_save_assigns_id_and_round_trips(self, make_uow, catalog):
        with make_uow() as uow:
            chair = uow.products.get_by_id(catalog["chair"])
        assert chair.name == "Silla"
        assert chair.price.amount == Decimal("35.00")
        assert chair.stock == 10

    def test_get_by_name_is_case_insensitive(self, make_uow, catalog):
        with make_uow() as uow:
            assert uow.products.get_by_name("  sILLA ").id == catalog["chair"]
            assert uow.products.get_by_name("Carpa") is None

    def test_lock_returns_requested_rows(self, make_uow, catalog):
        with make_uow() as uow:
            locked = uow.products.lock([catalog["table"], catalog["chair"], 999])
        assert set(locked) == {catalog["chair"], catalog["table"]}

    def test_update_stock(self, make_uow, catalog):
        with make_uow() as uow:
            table = uow.products.get_by_id(catalog["table"])
            table.stock = 7
            uow.products.save(table)
            uow.commit()
        with make_uow() as uow:
            assert uow.products.get_by_id(catalog["table"]).stock == 7

    def test_uncommitted_changes_are_discarded(self, make_uow, catalog):
        with make_uow() as uow:
            table = uow.products.get_by_id(catalog["table"])
            table.stock = 0
            uow.products.save(table)
        with make_uow() as uow:
            assert uow.products.get_by_id(catalog["table"]).stock == 2


class TestBundles:

    def test_components_in_registration_order(self, make_uow, catalog):
        with make_uow() as uow:
            composition = uow.bundles.get(catalog["pack"])
        assert composition.component_ids == [catalog["chair"], catalog["table"]]
        assert composition.components[0].quantity_per_bundle_unit == 4

    def test_unregistered_bundle(self, make_uow, catalog):
        with make_uow() as uow:
            assert uow.bundles.get(catalog["chair"]) is None
            assert uow.bundles.get_many([catalog["chair"]]) == {}


class TestReservations:

    def test_reserved_quantity_uses_inclusive_overlap(self, make_uow, catalog):
        chair = catalog["chair"]
        with make_uow() as uow:
            uow.reservations.add(
                Reservation.for_booking(chair, 3, DateRange(date(2025, 3, 10), date(2025, 3, 12)), 7)
            )
            uow.reservations.add(
                Reservation(None, chair, Quantity(2), DateRange(date(2025, 3, 1), date(2025, 3, 5)), 7,
                            status=ReservationStatus.CANCELLED)
            )
            uow.commit()

        with make_uow() as uow:
            repo = uow.reservations
            assert repo.reserved_quantity(chair, DateRange(date(2025, 3, 13), date(2025, 3, 13))) == 3
            assert repo.reserved_quantity(chair, DateRange(date(2025, 3, 14), date(2025, 3, 20))) == 0
            assert repo.reserved_quantity(chair, DateRange(date(2025, 3, 1), date(2025, 3, 9))) == 0
            assert repo.reserved_quantity(catalog["table"], DateRange(date(2025, 3, 10), date(2025, 3, 10))) == 0


class TestOrders:

    def test_round_trip_by_folio(self, make_uow, catalog):
        with make_uow() as uow:
            order = _order("GH-20250301-120000-AAAAAA")
            _store_order(uow, order)
            uow.commit()
        assert order.id is not None

        with make_uow() as uow:
            loaded = uow.orders.get_by_folio("GH-20250301-120000-AAAAAA")
        assert loaded.status is OrderStatus.PAID
        assert loaded.payment_reference == "PAY-1"
        assert loaded.total_amount == Money.of("290.00")
        assert (loaded.delivery_address_id, loaded.pickup_address_id) == (100, 101)
        assert [(i.product_name, i.quantity.value) for i in loaded.items] == [("Silla", 4), ("Mesa", 1)]
        assert loaded.order_date.tzinfo is not None

    def test_duplicate_folio_keeps_transaction_usable(self, make_uow, catalog):
        with make_uow() as uow:
            _store_order(uow, _order("GH-DUP"))
            uow.commit()

        with make_uow() as uow:
            uow.reservations.add(
                Reservation.for_booking(catalog["chair"], 1, DateRange(date(2025, 4, 1), date(2025, 4, 1)), 7)
            )
            with pytest.raises(DuplicateFolioError):
                uow.orders.add(_order("GH-DUP"))
            _store_order(uow, _order("GH-FRESH"))
            uow.commit()

        with make_uow() as uow:
            assert uow.orders.get_by_folio("GH-FRESH") is not None
            assert uow.reservations.reserved_quantity(
                catalog["chair"], DateRange(date(2025, 4, 1), date(2025, 4, 1))
            ) == 1

    def test_slot_counts(self, make_uow, catalog):
        with make_uow() as uow:
            _store_order(uow, _order("GH-1", date(2025, 3, 10), date(2025, 3, 12)))
            _store_order(uow, _order("GH-2", date(2025, 3, 10), date(2025, 3, 10)))
            uow.commit()
        with make_uow() as uow:
            assert uow.orders.count_deliveries_on(date(2025, 3, 10)) == 2
            assert uow.orders.count_pickups_on(date(2025, 3, 10)) == 1
            assert uow.orders.count_pickups_on(date(2025, 3, 12)) == 1
            assert uow.orders.count_deliveries_on(date(2025, 3, 11)) == 0

    def test_lock_schedule_days_creates_rows_once(self, make_uow, session_factory):
        days = [date(2025, 3, 12), date(2025, 3, 10), date(2025, 3, 12)]
        for _ in range(2):
            with make_uow() as uow:
                uow.orders.lock_schedule_days(days)
                uow.commit()
        with session_factory() as session:
            stored = sorted(session.scalars(select(ScheduleDayRow.day)))
        assert stored == [date(2025, 3, 10), date(2025, 3, 12)]
