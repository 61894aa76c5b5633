"""Domain service: Bundle Resolver.

Turns cart lines into net per-leaf quantity requirements. A bundle line
contributes ``quantity_per_bundle_unit * cart_quantity`` to each of its
components; a leaf line contributes its own quantity. When the same leaf
is reached several ways the contributions are summed.

Pure: all lookups are handed in up front, nothing is read or written.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from greenhaul.domain.exceptions import InvalidCompositionError
from greenhaul.domain.model.product import BundleComposition


class BundleResolver:

    def __init__(
        self,
        bundle_ids: Iterable[int],
        compositions: Mapping[int, BundleComposition],
    ) -> None:
        self._bundle_ids = frozenset(bundle_ids)
        self._compositions = dict(compositions)

    def is_bundle(self, product_id: int) -> bool:
        return product_id in self._bundle_ids

    def composition_of(self, bundle_id: int) -> BundleComposition:
        composition = self._compositions.get(bundle_id)
        if composition is None:
            raise InvalidCompositionError(
                f"Bundle #{bundle_id} has no registered composition"
            )
        for component_id in composition.component_ids:
            if component_id in self._bundle_ids:
                raise InvalidCompositionError(
                    f"Bundle #{bundle_id} contains bundle #{component_id}; "
                    f"bundles may only contain leaf products"
                )
        return composition

    def expand(self, cart_items: Iterable) -> dict[int, int]:
        """Return ``{leaf_product_id: total_quantity}`` for the cart.

        ``cart_items`` may be any objects exposing ``product_id`` and
        ``quantity``. Keys appear in the order they are first reached.
        """
        totals: dict[int, int] = {}
        for item in cart_items:
            if self.is_bundle(item.product_id):
                for component in self.composition_of(item.product_id).components:
                    pid = component.component_product_id
                    totals[pid] = (
                        totals.get(pid, 0)
                        + component.quantity_per_bundle_unit * item.quantity
                    )
            else:
                totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
        return totals
