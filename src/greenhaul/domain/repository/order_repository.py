"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable

from greenhaul.domain.model.order import Order, OrderItem


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Insert the order row and assign its id.

        Raises DuplicateFolioError if the folio is already taken; the
        surrounding transaction stays usable so the caller may retry.
        """

    @abstractmethod
    def link_addresses(self, order: Order) -> None:
        """Insert the row tying the order to its delivery and pickup addresses."""

    @abstractmethod
    def add_item(self, order: Order, item: OrderItem) -> None:
        """Insert one line item for an already-added order."""

    @abstractmethod
    def get_by_folio(self, folio: str) -> Order | None:
        """Return an order by its folio, or None if not found."""

    @abstractmethod
    def count_deliveries_on(self, day: date) -> int:
        """Number of orders, in any status, delivering on ``day``."""

    @abstractmethod
    def count_pickups_on(self, day: date) -> int:
        """Number of orders, in any status, picking up on ``day``."""

    @abstractmethod
    def lock_schedule_days(self, days: Iterable[date]) -> None:
        """Serialize slot counting for ``days`` until the transaction ends."""
