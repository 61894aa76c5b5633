"""Abstract repository for the reservation ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from greenhaul.domain.model.reservation import Reservation
from greenhaul.domain.model.value_objects import DateRange


class ReservationRepository(ABC):

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Insert a new reservation, assigning its id."""

    @abstractmethod
    def reserved_quantity(self, product_id: int, period: DateRange) -> int:
        """Sum the quantities of active reservations overlapping ``period``."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[Reservation]:
        """Return every reservation written for an order."""
