"""Application service: Define Bundle use case.

Registers (or replaces) the fixed list of leaf components that make up
one unit of a bundle product.
"""

from __future__ import annotations

from greenhaul.domain.exceptions import EntityNotFoundError, InvalidCompositionError
from greenhaul.domain.model.product import BundleComponent, BundleComposition
from greenhaul.domain.repository.unit_of_work import UnitOfWork


class DefineBundleHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, bundle_name: str, components: list[tuple[str, int]]) -> BundleComposition:
        """Define a bundle from ``(component name, quantity per bundle)`` pairs."""
        with self._uow:
            bundle = self._uow.products.get_by_name(bundle_name)
            if bundle is None:
                raise EntityNotFoundError(f"Product not found: '{bundle_name}'")
            if not bundle.is_bundle:
                raise InvalidCompositionError(f"'{bundle.name}' is not a bundle product")

            parts: list[BundleComponent] = []
            for name, quantity in components:
                component = self._uow.products.get_by_name(name)
                if component is None:
                    raise EntityNotFoundError(f"Product not found: '{name}'")
                if component.is_bundle:
                    raise InvalidCompositionError(
                        f"'{component.name}' is a bundle; bundles may only contain "
                        f"leaf products"
                    )
                parts.append(BundleComponent(component.id, quantity))

            composition = BundleComposition(bundle_id=bundle.id, components=tuple(parts))
            self._uow.bundles.save(composition)
            self._uow.commit()
        return composition
