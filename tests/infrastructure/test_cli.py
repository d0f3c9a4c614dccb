"""End-to-end CLI tests against a temporary SQLite database."""

import pytest
from click.testing import CliRunner

from rentals.infrastructure import bootstrap
from rentals.infrastructure.cli.main import cli
from rentals.infrastructure.settings import get_settings


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    bootstrap.engine.cache_clear()

    runner = CliRunner()
    result = runner.invoke(cli, ["db", "init"])
    assert result.exit_code == 0, result.output
    yield runner

    bootstrap.engine().dispose()
    bootstrap.engine.cache_clear()
    get_settings.cache_clear()


def _ok(runner, args):
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    return result.output


ITEMS = "1:2@2025-01-10T10:00/2025-01-12T10:00"


class TestProductCommands:

    def test_add_and_list(self, runner):
        out = _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "2"])
        assert "Product #1 'Camera' added at 1500.00 KGS/day with 2 unit(s)" in out

        listing = _ok(runner, ["product", "list"])
        assert "Camera" in listing

    def test_duplicate_is_reported(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500"])
        result = runner.invoke(cli, ["product", "add", "--name", "Camera", "--price", "1500"])
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestReservationCommands:

    def test_allocate_check_and_list(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "2"])
        _ok(runner, [
            "reservation", "allocate", "--product", "1",
            "--start", "2025-01-10T10:00", "--end", "2025-01-12T10:00",
        ])

        check = _ok(runner, [
            "availability", "check", "--product", "1",
            "--start", "2025-01-11", "--end", "2025-01-12",
        ])
        assert "1 of 2 free" in check

        listing = _ok(runner, ["reservation", "list", "--product", "1"])
        assert "2025-01-10 10:00 UTC" in listing

    def test_allocate_beyond_capacity_fails(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "1"])
        result = runner.invoke(cli, [
            "reservation", "allocate", "--product", "1", "--quantity", "2",
            "--start", "2025-01-10", "--end", "2025-01-11",
        ])
        assert result.exit_code == 1
        assert "1 of 1 free" in result.output

    def test_units_sync(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "3"])
        out = _ok(runner, ["units", "sync", "--product", "1", "--quantity", "1"])
        assert "active units #1" in out


class TestOrderCommands:

    def test_create_accept_show(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "2"])

        created = _ok(runner, [
            "order", "create", "--name", "Alice", "--phone", "+996 555 000 111", "--items", ITEMS,
        ])
        assert "Order #1 created" in created
        assert "PENDING" in created

        accepted = _ok(runner, ["order", "callback", "--data", "accept:1"])
        assert "Order #1 accepted, 2 unit(s) reserved." in accepted

        again = _ok(runner, ["order", "accept", "--id", "1"])
        assert "already processed (ACCEPTED)" in again

        shown = _ok(runner, ["order", "show", "--id", "1"])
        assert "status=ACCEPTED" in shown
        assert "6000.00 KGS" in shown

    def test_create_beyond_capacity_is_rejected(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "1"])
        result = runner.invoke(cli, [
            "order", "create", "--name", "Alice", "--phone", "555", "--items", ITEMS,
        ])
        assert result.exit_code == 1
        assert "Not enough Camera" in result.output
        assert "No orders found." in _ok(runner, ["order", "list"])

    def test_bad_items_format(self, runner):
        result = runner.invoke(cli, [
            "order", "create", "--name", "Alice", "--phone", "555", "--items", "1x2",
        ])
        assert result.exit_code == 2
        assert "Invalid item format" in result.output

    def test_decline_and_filter(self, runner):
        _ok(runner, ["product", "add", "--name", "Camera", "--price", "1500", "--quantity", "2"])
        _ok(runner, ["order", "create", "--name", "Alice", "--phone", "555", "--items", ITEMS])
        _ok(runner, ["order", "decline", "--id", "1"])

        assert "No orders found." in _ok(runner, ["order", "list", "--status", "pending"])
        assert "DECLINED" in _ok(runner, ["order", "list", "--status", "declined"])
