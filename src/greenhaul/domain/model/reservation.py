"""Reservation: one entry in the reservation ledger.

A reservation holds ``quantity`` units of a single leaf product for an
inclusive date window. The stored window already includes the cleaning
day after the return date, so availability checks compare it as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from greenhaul.domain.exceptions import ValidationError
from greenhaul.domain.model.value_objects import DateRange, Quantity

# Units stay out of circulation this many days after they come back.
CLEANING_DAYS = 1


class ReservationStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass
class Reservation:

    id: int | None
    product_id: int
    quantity: Quantity
    period: DateRange  # includes the cleaning buffer
    user_id: int
    order_id: int | None = None
    status: ReservationStatus = ReservationStatus.ACTIVE

    @staticmethod
    def for_booking(
        product_id: int,
        quantity: int,
        rental: DateRange,
        user_id: int,
        order_id: int | None = None,
    ) -> Reservation:
        """Build an active reservation for a rental window.

        The end date is pushed out by the cleaning buffer here, at write
        time, and nowhere else.
        """
        if product_id is None:
            raise ValidationError("Reservations must reference a product")
        return Reservation(
            id=None,
            product_id=product_id,
            quantity=Quantity(quantity),
            period=rental.extended_by(CLEANING_DAYS),
            user_id=user_id,
            order_id=order_id,
        )

    @property
    def is_active(self) -> bool:
        return self.status is ReservationStatus.ACTIVE

    def blocks(self, requested: DateRange) -> bool:
        """True if this reservation holds units during ``requested``."""
        return self.is_active and self.period.overlaps(requested)
