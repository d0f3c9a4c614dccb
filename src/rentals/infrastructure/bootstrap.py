"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from rentals.application.confirmation_channel import ConfirmationChannel
from rentals.infrastructure.notifications.logging_channel import LoggingConfirmationChannel
from rentals.infrastructure.notifications.telegram_channel import TelegramConfirmationChannel
from rentals.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork
from rentals.infrastructure.settings import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            # Busy wait on a locked database, in seconds
            "timeout": settings.lock_timeout_ms / 1000,
        }

    engine = create_engine(
        settings.database_url,
        connect_args=connect_args,
        echo=settings.sql_echo,
        pool_pre_ping=True,
    )

    if engine.dialect.name == "postgresql":
        lock_timeout = int(settings.lock_timeout_ms)

        @event.listens_for(engine, "connect")
        def _set_lock_timeout(dbapi_connection, connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute(f"SET lock_timeout = {lock_timeout}")
            cursor.close()

    elif engine.dialect.name == "sqlite":
        # pysqlite only opens a transaction right before the first write, so
        # an availability read would run unlocked.  Take over transaction
        # control and grab the write lock when each unit of work begins.

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn) -> None:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


@lru_cache
def engine() -> Engine:
    return build_engine(get_settings())


def unit_of_work() -> SqlUnitOfWork:
    return SqlUnitOfWork(sessionmaker(bind=engine(), autoflush=False, expire_on_commit=False))


def confirmation_channel() -> ConfirmationChannel:
    settings = get_settings()
    if settings.telegram_enabled:
        return TelegramConfirmationChannel(
            token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
            api_url=settings.telegram_api_url,
            timeout=settings.telegram_timeout,
        )
    return LoggingConfirmationChannel()
