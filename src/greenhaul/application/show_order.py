"""Application service: Show Order use case (query)."""

from __future__ import annotations

from greenhaul.application.dto import OrderDTO, OrderItemDTO, ReservationDTO
from greenhaul.domain.exceptions import EntityNotFoundError
from greenhaul.domain.model.order import Order
from greenhaul.domain.model.reservation import Reservation
from greenhaul.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, folio: str) -> OrderDTO:
        with self._uow:
            order = self._uow.orders.get_by_folio(folio)
            if order is None:
                raise EntityNotFoundError(f"Order '{folio}' not found")
            reservations = self._uow.reservations.list_for_order(order.id)
            return to_order_dto(order, reservations)


def to_order_dto(order: Order, reservations: list[Reservation]) -> OrderDTO:
    return OrderDTO(
        folio=order.folio,
        user_id=order.user_id,
        status=order.status.value,
        total=str(order.total_amount),
        order_date=order.order_date.strftime("%Y-%m-%d %H:%M UTC"),
        delivery_date=order.delivery_date.isoformat(),
        pickup_date=order.pickup_date.isoformat(),
        delivery_address_id=order.delivery_address_id,
        pickup_address_id=order.pickup_address_id,
        items=[
            OrderItemDTO(
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        reservations=[
            ReservationDTO(
                product_id=r.product_id,
                quantity=r.quantity.value,
                date_start=r.period.start.isoformat(),
                date_end=r.period.end.isoformat(),
                status=r.status.value,
            )
            for r in reservations
        ],
        payment_reference=order.payment_reference,
    )
