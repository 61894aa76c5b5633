"""SQLAlchemy implementation of ReservationRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from greenhaul.domain.model.reservation import Reservation, ReservationStatus
from greenhaul.domain.model.value_objects import DateRange, Quantity
from greenhaul.domain.repository.reservation_repository import ReservationRepository
from greenhaul.infrastructure.persistence.tables import ReservationRow


class SqlReservationRepository(ReservationRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, reservation: Reservation) -> None:
        row = ReservationRow(
            product_id=reservation.product_id,
            order_id=reservation.order_id,
            user_id=reservation.user_id,
            quantity=reservation.quantity.value,
            date_start=reservation.period.start,
            date_end=reservation.period.end,
            status=reservation.status.value,
        )
        self._session.add(row)
        self._session.flush()
        reservation.id = row.id

    def reserved_quantity(self, product_id: int, period: DateRange) -> int:
        # Inclusive overlap: the stored end already carries the cleaning day.
        stmt = select(func.coalesce(func.sum(ReservationRow.quantity), 0)).where(
            ReservationRow.product_id == product_id,
            ReservationRow.status == ReservationStatus.ACTIVE.value,
            ReservationRow.date_start <= period.end,
            ReservationRow.date_end >= period.start,
        )
        return int(self._session.scalar(stmt) or 0)

    def list_for_order(self, order_id: int) -> list[Reservation]:
        stmt = (
            select(ReservationRow)
            .where(ReservationRow.order_id == order_id)
            .order_by(ReservationRow.id)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    @staticmethod
    def _to_domain(row: ReservationRow) -> Reservation:
        return Reservation(
            id=row.id,
            product_id=row.product_id,
            quantity=Quantity(row.quantity),
            period=DateRange(row.date_start, row.date_end),
            user_id=row.user_id,
            order_id=row.order_id,
            status=ReservationStatus(row.status),
        )
