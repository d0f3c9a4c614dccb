"""SQLAlchemy table mappings for the relational store.

Rows are plain persistence records; the repositories translate them to
and from domain objects.  Datetimes are stored as naive UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class ProductRow(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False, unique=True)
    category = Column(String(100), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    price_per_day = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))


class UnitRow(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    ordinal = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("product_id", "ordinal", name="uq_units_product_ordinal"),
    )


class ReservationRow(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    unit_id = Column(Integer, ForeignKey("units.id"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_reservations_unit_window", "unit_id", "start_at", "end_at"),
        Index("ix_reservations_product_start", "product_id", "start_at"),
    )


class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_address = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, index=True)
    notification_handle = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    lines = relationship(
        "OrderLineRow",
        order_by="OrderLineRow.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class OrderLineRow(Base):
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    product_name = Column(String(200), nullable=False)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    quantity = Column(Integer, nullable=False)
    price_per_day = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)


def create_schema(engine: Engine) -> None:
    """Create all tables (idempotent)."""
    Base.metadata.create_all(bind=engine)
