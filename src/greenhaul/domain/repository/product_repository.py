"""Abstract repository for the Product aggregate and bundle compositions.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from greenhaul.domain.model.product import BundleComposition, Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name (case-insensitive), or None."""

    @abstractmethod
    def get_many(self, product_ids: Iterable[int]) -> dict[int, Product]:
        """Return the known products among ``product_ids``, keyed by id."""

    @abstractmethod
    def lock(self, product_ids: Iterable[int]) -> dict[int, Product]:
        """Like ``get_many`` but holds a row lock until the transaction ends.

        Locks are taken in ascending id order.
        """

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product, assigning an id if needed."""


class BundleRepository(ABC):

    @abstractmethod
    def get(self, bundle_id: int) -> BundleComposition | None:
        """Return the composition registered for a bundle, or None."""

    @abstractmethod
    def get_many(self, bundle_ids: Iterable[int]) -> dict[int, BundleComposition]:
        """Return the registered compositions among ``bundle_ids``."""

    @abstractmethod
    def save(self, composition: BundleComposition) -> None:
        """Register or replace a bundle's composition."""
