"""Application service: Check Availability use case (query).

Leaf products are checked directly. For a bundle every component is
checked at ``quantity_per_bundle_unit * quantity`` and ``remaining`` is
reported in whole bundles, limited by the scarcest component.
"""

from __future__ import annotations

from datetime import date

from greenhaul.application.dto import AvailabilityDTO
from greenhaul.domain.exceptions import EntityNotFoundError
from greenhaul.domain.model.value_objects import DateRange, Quantity
from greenhaul.domain.repository.unit_of_work import UnitOfWork
from greenhaul.domain.service.availability_checker import AvailabilityChecker
from greenhaul.domain.service.bundle_resolver import BundleResolver


class CheckAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        quantity: int,
        date_start: date,
        date_end: date,
    ) -> AvailabilityDTO:
        qty = Quantity(quantity)
        period = DateRange(date_start, date_end)

        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")

            checker = AvailabilityChecker(self._uow.products, self._uow.reservations)

            if not product.is_bundle:
                result = checker.is_available(product_id, qty.value, period.start, period.end)
                available, remaining = result.available, result.remaining
            else:
                resolver = BundleResolver([product.id], self._uow.bundles.get_many([product.id]))
                composition = resolver.composition_of(product.id)
                components = self._uow.products.get_many(composition.component_ids)
                available = True
                remaining = None
                for component in composition.components:
                    leaf = components.get(component.component_product_id)
                    if leaf is None:
                        raise EntityNotFoundError(
                            f"Product #{component.component_product_id} not found"
                        )
                    per_unit = component.quantity_per_bundle_unit
                    result = checker.check(leaf, per_unit * qty.value, period)
                    available = available and result.available
                    whole_bundles = max(result.remaining, 0) // per_unit
                    remaining = whole_bundles if remaining is None else min(remaining, whole_bundles)

        return AvailabilityDTO(
            product_id=product.id,
            product_name=product.name,
            quantity=qty.value,
            date_start=period.start.isoformat(),
            date_end=period.end.isoformat(),
            available=available,
            remaining=remaining,
        )
