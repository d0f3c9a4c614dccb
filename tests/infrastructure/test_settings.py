"""Tests for environment configuration and log formatting."""

import json
import logging

from rentals.infrastructure.logging_config import JSONFormatter
from rentals.infrastructure.settings import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        settings = Settings(_env_file=None)
        assert settings.database_url.startswith("sqlite")
        assert settings.currency == "KGS"
        assert not settings.telegram_enabled

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://user:pw@db:5432/rentals")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100500")
        monkeypatch.setenv("LOCK_TIMEOUT_MS", "2500")
        settings = Settings(_env_file=None)

        assert settings.database_url == "postgresql://user:pw@db:5432/rentals"
        assert settings.lock_timeout_ms == 2500
        assert settings.telegram_enabled


class TestJSONFormatter:

    def test_includes_order_context(self):
        record = logging.LogRecord(
            "rentals.test", logging.INFO, __file__, 10, "Order %s accepted", (7,), None,
        )
        record.order_id = 7

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Order 7 accepted"
        assert data["level"] == "INFO"
        assert data["order_id"] == 7
        assert "product_id" not in data
