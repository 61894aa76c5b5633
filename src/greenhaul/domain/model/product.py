"""Product aggregate and bundle compositions.

Products live independently of orders. A product is either a leaf
component (it has physical stock and is what reservations track) or a
bundle (a sellable kit made of fixed quantities of leaf components).
Never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from greenhaul.domain.exceptions import InvalidCompositionError, ValidationError
from greenhaul.domain.model.value_objects import Money


class ProductKind(Enum):
    STANDALONE = "standalone"
    BUNDLE = "bundle"


@dataclass
class Product:
    """A product in the catalog.

    ``stock`` is the total number of owned units. It is never decremented
    at booking time; it is the ceiling that date-scoped reservations are
    checked against.
    """

    id: int | None
    name: str
    price: Money
    stock: int = 0
    kind: ProductKind = ProductKind.STANDALONE

    @property
    def is_bundle(self) -> bool:
        return self.kind is ProductKind.BUNDLE

    @staticmethod
    def create(
        name: str,
        price: Money,
        stock: int = 0,
        kind: ProductKind = ProductKind.STANDALONE,
    ) -> Product:
        """Create a new catalog product, enforcing all invariants."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not isinstance(stock, int) or stock < 0:
            raise ValidationError("Stock must be a non-negative integer")
        if kind is ProductKind.BUNDLE and stock != 0:
            raise ValidationError(
                "Bundles hold no stock of their own; set stock on the components"
            )
        return Product(id=None, name=name.strip(), price=price, stock=stock, kind=kind)


@dataclass(frozen=True)
class BundleComponent:
    component_product_id: int
    quantity_per_bundle_unit: int


@dataclass(frozen=True)
class BundleComposition:
    """Immutable list of the leaf components making up one bundle unit."""

    bundle_id: int
    components: tuple[BundleComponent, ...]

    def __post_init__(self) -> None:
        if not self.components:
            raise InvalidCompositionError(
                f"Bundle #{self.bundle_id} must have at least one component"
            )
        seen: set[int] = set()
        for component in self.components:
            if component.quantity_per_bundle_unit <= 0:
                raise InvalidCompositionError(
                    f"Bundle #{self.bundle_id}: component quantities must be positive"
                )
            if component.component_product_id == self.bundle_id:
                raise InvalidCompositionError(
                    f"Bundle #{self.bundle_id} cannot contain itself"
                )
            if component.component_product_id in seen:
                raise InvalidCompositionError(
                    f"Bundle #{self.bundle_id} lists component "
                    f"#{component.component_product_id} more than once"
                )
            seen.add(component.component_product_id)

    @property
    def component_ids(self) -> list[int]:
        return [c.component_product_id for c in self.components]
