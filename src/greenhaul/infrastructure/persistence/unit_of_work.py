"""SQLAlchemy unit of work: one session and one transaction per ``with`` block."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from greenhaul.domain.repository.unit_of_work import UnitOfWork
from greenhaul.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from greenhaul.infrastructure.persistence.sql_product_repository import (
    SqlBundleRepository,
    SqlProductRepository,
)
from greenhaul.infrastructure.persistence.sql_reservation_repository import (
    SqlReservationRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.products = SqlProductRepository(self._session)
        self.bundles = SqlBundleRepository(self._session)
        self.reservations = SqlReservationRepository(self._session)
        self.orders = SqlOrderRepository(self._session)
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            super().__exit__(*exc_info)
        finally:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
