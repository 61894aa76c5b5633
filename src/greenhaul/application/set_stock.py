"""Application service: Set Stock use case.

Changes how many units of a leaf product are owned. Existing
reservations are untouched; lowering stock below what is already
reserved simply makes the product unavailable until reservations end.
"""

from __future__ import annotations

from greenhaul.domain.exceptions import EntityNotFoundError, ValidationError
from greenhaul.domain.repository.unit_of_work import UnitOfWork


class SetStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_name: str, stock: int) -> None:
        if stock < 0:
            raise ValidationError("Stock cannot be negative")

        with self._uow:
            product = self._uow.products.get_by_name(product_name)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{product_name}'")
            if product.is_bundle:
                raise ValidationError(
                    f"'{product.name}' is a bundle; set stock on its components"
                )
            product.stock = stock
            self._uow.products.save(product)
            self._uow.commit()
