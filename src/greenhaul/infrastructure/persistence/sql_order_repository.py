"""SQLAlchemy implementation of OrderRepository."""

from __future__ import annotations

from datetime import date, timezone
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from greenhaul.domain.exceptions import DuplicateFolioError
from greenhaul.domain.model.order import Order, OrderItem, OrderStatus
from greenhaul.domain.model.value_objects import Money, Quantity
from greenhaul.domain.repository.order_repository import OrderRepository
from greenhaul.infrastructure.persistence.tables import (
    OrderAddressRow,
    OrderItemRow,
    OrderRow,
    ScheduleDayRow,
)


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- Writes ---------------------------------------------------------------

    def add(self, order: Order) -> None:
        row = OrderRow(
            folio=order.folio,
            user_id=order.user_id,
            total_amount=order.total_amount.amount,
            status=order.status.value,
            order_date=order.order_date,
            delivery_date=order.delivery_date,
            pickup_date=order.pickup_date,
            payment_reference=order.payment_reference,
        )
        # Savepoint so a folio clash leaves the outer transaction (and its
        # locks) intact for a retry.
        try:
            with self._session.begin_nested():
                self._session.add(row)
                self._session.flush()
        except IntegrityError as exc:
            if self._folio_taken(order.folio):
                raise DuplicateFolioError(order.folio) from exc
            raise
        order.id = row.id

    def link_addresses(self, order: Order) -> None:
        self._session.add(
            OrderAddressRow(
                order_id=order.id,
                folio=order.folio,
                delivery_address_id=order.delivery_address_id,
                pickup_address_id=order.pickup_address_id,
            )
        )
        self._session.flush()

    def add_item(self, order: Order, item: OrderItem) -> None:
        row = OrderItemRow(
            order_id=order.id,
            product_name=item.product_name,
            quantity=item.quantity.value,
            price=item.unit_price.amount,
        )
        self._session.add(row)
        self._session.flush()
        item.id = row.id

    def lock_schedule_days(self, days: Iterable[date]) -> None:
        for day in sorted(set(days)):
            stmt = select(ScheduleDayRow).where(ScheduleDayRow.day == day).with_for_update()
            if self._session.scalars(stmt).first() is not None:
                continue
            try:
                with self._session.begin_nested():
                    self._session.add(ScheduleDayRow(day=day))
                    self._session.flush()
            except IntegrityError:
                # A concurrent booking created the row first; lock theirs.
                self._session.scalars(stmt).first()

    # --- Reads ----------------------------------------------------------------

    def get_by_folio(self, folio: str) -> Order | None:
        row = self._session.scalars(select(OrderRow).where(OrderRow.folio == folio)).first()
        return self._to_domain(row) if row is not None else None

    def count_deliveries_on(self, day: date) -> int:
        stmt = select(func.count(OrderRow.id)).where(OrderRow.delivery_date == day)
        return int(self._session.scalar(stmt) or 0)

    def count_pickups_on(self, day: date) -> int:
        stmt = select(func.count(OrderRow.id)).where(OrderRow.pickup_date == day)
        return int(self._session.scalar(stmt) or 0)

    def _folio_taken(self, folio: str) -> bool:
        stmt = select(func.count(OrderRow.id)).where(OrderRow.folio == folio)
        return bool(self._session.scalar(stmt))

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        order_date = row.order_date
        if order_date.tzinfo is None:
            order_date = order_date.replace(tzinfo=timezone.utc)
        return Order(
            id=row.id,
            folio=row.folio,
            user_id=row.user_id,
            total_amount=Money.of(row.total_amount),
            delivery_date=row.delivery_date,
            pickup_date=row.pickup_date,
            delivery_address_id=row.address.delivery_address_id if row.address else None,
            pickup_address_id=row.address.pickup_address_id if row.address else None,
            items=[
                OrderItem(
                    id=item.id,
                    product_name=item.product_name,
                    quantity=Quantity(item.quantity),
                    unit_price=Money.of(item.price),
                )
                for item in row.items
            ],
            status=OrderStatus(row.status),
            order_date=order_date,
            payment_reference=row.payment_reference,
        )
