"""Domain service: Availability Checker.

Answers "are ``quantity`` units of this leaf product free between these
dates?" by subtracting the active, overlapping reservations from the
product's owned stock. Reservation windows are stored with the cleaning
day already appended, so they are compared unchanged against the raw
requested window.

``ensure_all`` is the two-phase entry point used when booking: every
leaf is validated before the caller writes anything, so a failure on the
last product leaves no partial hold behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping

from greenhaul.domain.exceptions import (
    EntityNotFoundError,
    InsufficientInventoryError,
    ValidationError,
)
from greenhaul.domain.model.product import Product
from greenhaul.domain.model.value_objects import DateRange, Quantity
from greenhaul.domain.repository.product_repository import ProductRepository
from greenhaul.domain.repository.reservation_repository import ReservationRepository


@dataclass(frozen=True)
class AvailabilityResult:
    product_id: int
    requested: int
    remaining: int

    @property
    def available(self) -> bool:
        return self.remaining >= self.requested


class AvailabilityChecker:

    def __init__(
        self,
        product_repo: ProductRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._product_repo = product_repo
        self._reservation_repo = reservation_repo

    def is_available(
        self,
        product_id: int,
        quantity: int,
        date_start: date,
        date_end: date,
    ) -> AvailabilityResult:
        """Check a single leaf product for a date range."""
        qty = Quantity(quantity)
        period = DateRange(date_start, date_end)

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        return self.check(product, qty.value, period)

    def check(self, product: Product, quantity: int, period: DateRange) -> AvailabilityResult:
        if product.is_bundle:
            raise ValidationError(
                f"'{product.name}' is a bundle; availability is tracked per component"
            )
        reserved = self._reservation_repo.reserved_quantity(product.id, period)
        return AvailabilityResult(
            product_id=product.id,
            requested=quantity,
            remaining=product.stock - reserved,
        )

    def ensure_all(
        self,
        requirements: Mapping[int, int],
        period: DateRange,
        products: Mapping[int, Product],
    ) -> list[AvailabilityResult]:
        """Validate every leaf requirement, raising on the first shortfall.

        ``products`` must already hold every required leaf (normally the
        row-locked products of the current transaction).
        """
        results: list[AvailabilityResult] = []
        for product_id in sorted(requirements):
            product = products.get(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")
            result = self.check(product, requirements[product_id], period)
            if not result.available:
                raise InsufficientInventoryError(
                    product_id=product.id,
                    product_name=product.name,
                    requested=result.requested,
                    available=max(result.remaining, 0),
                )
            results.append(result)
        return results
