"""Abstract unit of work: one atomic booking transaction.

Usage::

    with uow:
        ...
        uow.commit()

Leaving the block without calling ``commit()`` (including by an
exception) rolls back every write made through the repositories.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from greenhaul.domain.repository.order_repository import OrderRepository
from greenhaul.domain.repository.product_repository import (
    BundleRepository,
    ProductRepository,
)
from greenhaul.domain.repository.reservation_repository import ReservationRepository


class UnitOfWork(ABC):

    products: ProductRepository
    bundles: BundleRepository
    reservations: ReservationRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write in this unit durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes. A no-op after a successful commit."""
