"""SQLAlchemy Unit of Work: one session, one transaction per ``with`` block."""

from __future__ import annotations

import logging

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from rentals.domain.exceptions import StoreError
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.infrastructure.persistence.sql_repositories import (
    SqlOrderRepository,
    SqlProductRepository,
    SqlReservationRepository,
    SqlUnitRepository,
)

logger = logging.getLogger(__name__)


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.products = SqlProductRepository(self._session)
        self.units = SqlUnitRepository(self._session)
        self.reservations = SqlReservationRepository(self._session)
        self.orders = SqlOrderRepository(self._session)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            super().__exit__(exc_type, exc_value, traceback)
        finally:
            self._session.close()  # type: ignore[union-attr]
            self._session = None

        if isinstance(exc_value, DBAPIError):
            logger.warning("Store error, transaction rolled back: %s", exc_value)
            raise StoreError(f"Store operation failed: {exc_value.orig}") from exc_value

    def commit(self) -> None:
        try:
            self._session.commit()  # type: ignore[union-attr]
        except DBAPIError as exc:
            self._session.rollback()  # type: ignore[union-attr]
            logger.warning("Commit failed, transaction rolled back: %s", exc)
            raise StoreError(f"Store commit failed: {exc.orig}") from exc

    def rollback(self) -> None:
        self._session.rollback()  # type: ignore[union-attr]
