"""SQLAlchemy implementations of ProductRepository and BundleRepository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from greenhaul.domain.model.product import (
    BundleComponent,
    BundleComposition,
    Product,
    ProductKind,
)
from greenhaul.domain.model.value_objects import Money
from greenhaul.domain.repository.product_repository import (
    BundleRepository,
    ProductRepository,
)
from greenhaul.infrastructure.persistence.tables import BundleComponentRow, ProductRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> Product | None:
        stmt = select(ProductRow).where(func.lower(ProductRow.name) == name.strip().lower())
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def get_many(self, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        stmt = select(ProductRow).where(ProductRow.id.in_(ids))
        return {row.id: self._to_domain(row) for row in self._session.scalars(stmt)}

    def lock(self, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        stmt = (
            select(ProductRow)
            .where(ProductRow.id.in_(ids))
            .order_by(ProductRow.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {row.id: self._to_domain(row) for row in self._session.scalars(stmt)}

    def list_all(self) -> list[Product]:
        stmt = select(ProductRow).order_by(ProductRow.id)
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id) if product.id is not None else None
        if row is None:
            row = ProductRow()
            self._session.add(row)
        row.name = product.name
        row.price = product.price.amount
        row.stock = product.stock
        row.kind = product.kind.value
        self._session.flush()
        product.id = row.id

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=Money.of(row.price),
            stock=row.stock,
            kind=ProductKind(row.kind),
        )


class SqlBundleRepository(BundleRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, bundle_id: int) -> BundleComposition | None:
        return self.get_many([bundle_id]).get(bundle_id)

    def get_many(self, bundle_ids: Iterable[int]) -> dict[int, BundleComposition]:
        ids = sorted(set(bundle_ids))
        if not ids:
            return {}
        stmt = (
            select(BundleComponentRow)
            .where(BundleComponentRow.bundle_id.in_(ids))
            .order_by(BundleComponentRow.bundle_id, BundleComponentRow.position)
        )
        grouped: dict[int, list[BundleComponent]] = {}
        for row in self._session.scalars(stmt):
            grouped.setdefault(row.bundle_id, []).append(
                BundleComponent(row.component_id, row.quantity)
            )
        return {
            bundle_id: BundleComposition(bundle_id, tuple(components))
            for bundle_id, components in grouped.items()
        }

    def save(self, composition: BundleComposition) -> None:
        self._session.execute(
            delete(BundleComponentRow).where(
                BundleComponentRow.bundle_id == composition.bundle_id
            )
        )
        for position, component in enumerate(composition.components):
            self._session.add(
                BundleComponentRow(
                    bundle_id=composition.bundle_id,
                    component_id=component.component_product_id,
                    quantity=component.quantity_per_bundle_unit,
                    position=position,
                )
            )
        self._session.flush()
