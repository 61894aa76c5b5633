"""Application service: Add Product use case."""

from __future__ import annotations

from greenhaul.domain.exceptions import ValidationError
from greenhaul.domain.model.product import Product, ProductKind
from greenhaul.domain.model.value_objects import Money
from greenhaul.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        price: str,
        stock: int = 0,
        kind: str = ProductKind.STANDALONE.value,
    ) -> Product:
        """Add a new leaf product or bundle to the catalog."""
        try:
            product_kind = ProductKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown product kind '{kind}'") from None

        product = Product.create(name=name, price=Money.of(price), stock=stock, kind=product_kind)

        with self._uow:
            if self._uow.products.get_by_name(product.name) is not None:
                raise ValidationError(f"Product '{product.name}' already exists")
            self._uow.products.save(product)
            self._uow.commit()
        return product
