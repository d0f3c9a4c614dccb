"""SQLAlchemy-backed implementations of the domain repositories.

Locking reads use ``SELECT ... FOR UPDATE`` on PostgreSQL.  SQLite has no
row locks; it serialises writers on the whole database instead, so the
clause is simply left out there.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from rentals.domain.model.order import (
    CustomerContact,
    Order,
    OrderLine,
    OrderStatus,
)
from rentals.domain.model.product import Product
from rentals.domain.model.unit import Reservation, Unit
from rentals.domain.model.value_objects import Money, Quantity, RentalWindow, as_utc
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.repository.unit_repository import UnitRepository
from rentals.infrastructure.persistence.sql_models import (
    OrderLineRow,
    OrderRow,
    ProductRow,
    ReservationRow,
    UnitRow,
)


def is_postgres(session: Session) -> bool:
    return session.get_bind().dialect.name == "postgresql"


def for_update(session: Session, stmt: Select) -> Select:
    """Add a row lock to *stmt* where the dialect supports one."""
    if is_postgres(session):
        return stmt.with_for_update()
    return stmt


def _to_db(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


def _from_db(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


def _money(amount: Decimal, currency: str) -> Money:
    return Money.of(amount, currency)


# --- Products -----------------------------------------------------------------


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, product_id: str) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> Product | None:
        stmt = select(ProductRow).where(func.lower(ProductRow.name) == name.lower())
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        rows = self._session.scalars(select(ProductRow)).all()
        products = [self._to_domain(row) for row in rows]
        return sorted(products, key=lambda p: (len(p.id), p.id))

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id)
        if row is None:
            row = ProductRow(id=product.id)
            self._session.add(row)
        row.name = product.name
        row.category = product.category
        row.description = product.description
        row.price_per_day = product.price_per_day.amount
        row.currency = product.price_per_day.currency
        row.quantity = product.quantity
        row.is_active = product.is_active
        self._session.flush()

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price_per_day=_money(row.price_per_day, row.currency),
            quantity=row.quantity,
            category=row.category or "",
            description=row.description or "",
            is_active=row.is_active,
        )


# --- Units --------------------------------------------------------------------


class SqlUnitRepository(UnitRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_product(
        self,
        product_id: str,
        *,
        active_only: bool = False,
        lock: bool = False,
    ) -> list[Unit]:
        stmt = select(UnitRow).where(UnitRow.product_id == product_id)
        if active_only:
            stmt = stmt.where(UnitRow.is_active.is_(True))
        stmt = stmt.order_by(UnitRow.ordinal)
        if lock:
            stmt = for_update(self._session, stmt)
        return [self._to_domain(row) for row in self._session.scalars(stmt).all()]

    def add(self, unit: Unit) -> None:
        row = UnitRow(product_id=unit.product_id, ordinal=unit.ordinal, is_active=unit.is_active)
        self._session.add(row)
        self._session.flush()
        unit.id = row.id

    def save(self, unit: Unit) -> None:
        row = self._session.get(UnitRow, unit.id)
        if row is None:
            self.add(unit)
            return
        row.is_active = unit.is_active
        self._session.flush()

    @staticmethod
    def _to_domain(row: UnitRow) -> Unit:
        return Unit(id=row.id, product_id=row.product_id, ordinal=row.ordinal, is_active=row.is_active)


# --- Reservations -------------------------------------------------------------


class SqlReservationRepository(ReservationRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        row = self._session.get(ReservationRow, reservation_id)
        return self._to_domain(row) if row is not None else None

    def list_for_product(self, product_id: str) -> list[Reservation]:
        stmt = (
            select(ReservationRow)
            .where(ReservationRow.product_id == product_id)
            .order_by(ReservationRow.start_at, ReservationRow.id)
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt).all()]

    def list_overlapping(self, product_id: str, window: RentalWindow) -> list[Reservation]:
        # NOT (end1 <= start2 OR start1 >= end2)
        stmt = select(ReservationRow).where(
            ReservationRow.product_id == product_id,
            ReservationRow.start_at < _to_db(window.end),
            ReservationRow.end_at > _to_db(window.start),
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt).all()]

    def list_covering(self, product_id: str, instant: datetime) -> list[Reservation]:
        at = _to_db(instant)
        stmt = select(ReservationRow).where(
            ReservationRow.product_id == product_id,
            ReservationRow.start_at <= at,
            ReservationRow.end_at > at,
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt).all()]

    def add(self, reservation: Reservation) -> None:
        row = ReservationRow(
            product_id=reservation.product_id,
            unit_id=reservation.unit_id,
            order_id=reservation.order_id,
            start_at=_to_db(reservation.window.start),
            end_at=_to_db(reservation.window.end),
            created_at=_to_db(reservation.created_at),
        )
        self._session.add(row)
        self._session.flush()
        reservation.id = row.id

    def delete(self, reservation_id: int) -> None:
        row = self._session.get(ReservationRow, reservation_id)
        if row is not None:
            self._session.delete(row)
            self._session.flush()

    @staticmethod
    def _to_domain(row: ReservationRow) -> Reservation:
        return Reservation(
            id=row.id,
            product_id=row.product_id,
            unit_id=row.unit_id,
            window=RentalWindow(_from_db(row.start_at), _from_db(row.end_at)),
            order_id=row.order_id,
            created_at=_from_db(row.created_at),
        )


# --- Orders -------------------------------------------------------------------


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, order_id: int, *, lock: bool = False) -> Order | None:
        stmt = select(OrderRow).where(OrderRow.id == order_id)
        if lock:
            stmt = for_update(self._session, stmt)
        row = self._session.scalars(stmt).first()
        return self._to_domain(row) if row is not None else None

    def list_by_status(self, status: OrderStatus | None = None) -> list[Order]:
        stmt = select(OrderRow).order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
        if status is not None:
            stmt = stmt.where(OrderRow.status == status.value)
        return [self._to_domain(row) for row in self._session.scalars(stmt).all()]

    def save(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id) if order.id is not None else None
        if row is None:
            row = OrderRow(
                created_at=_to_db(order.created_at),
                lines=[
                    OrderLineRow(
                        position=position,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        start_at=_to_db(line.window.start),
                        end_at=_to_db(line.window.end),
                        quantity=line.quantity.value,
                        price_per_day=line.price_per_day.amount,
                        currency=line.price_per_day.currency,
                    )
                    for position, line in enumerate(order.lines)
                ],
            )
            self._session.add(row)

        # Lines are fixed at creation; only the header changes afterwards
        row.customer_name = order.customer.name
        row.customer_phone = order.customer.phone
        row.customer_address = order.customer.address
        row.status = order.status.value
        row.notification_handle = order.notification_handle
        row.updated_at = _to_db(order.updated_at)
        self._session.flush()
        order.id = row.id

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        return Order(
            id=row.id,
            customer=CustomerContact(
                name=row.customer_name,
                phone=row.customer_phone,
                address=row.customer_address or "",
            ),
            lines=[
                OrderLine(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    window=RentalWindow(_from_db(line.start_at), _from_db(line.end_at)),
                    quantity=Quantity(line.quantity),
                    price_per_day=_money(line.price_per_day, line.currency),
                )
                for line in row.lines
            ],
            status=OrderStatus(row.status),
            created_at=_from_db(row.created_at),
            updated_at=_from_db(row.updated_at),
            notification_handle=row.notification_handle,
        )
