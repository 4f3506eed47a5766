"""Smoke tests for the command line, end to end against a SQLite file."""

import pytest
from click.testing import CliRunner

from teahaven.infrastructure.cli import main as cli_main
from teahaven.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path, monkeypatch):
    # Keep log handlers off the runner's short-lived streams.
    monkeypatch.setattr(cli_main, "configure_logging", lambda level: None)
    runner = CliRunner()
    env = {
        "TEAHAVEN_DATABASE_URL": f"sqlite:///{tmp_path / 'cli.db'}",
        "EMAIL_HOST": None,
        "EMAIL_PORT": None,
        "EMAIL_USER": None,
        "EMAIL_PASS": None,
    }

    def invoke(*args: str):
        return runner.invoke(cli, list(args), env=env)

    assert invoke("db", "init").exit_code == 0
    return invoke


def _seed(run) -> None:
    assert run("user", "add", "--email", "alice@example.com", "--name", "Alice Reed").exit_code == 0
    assert run(
        "user", "add", "--email", "mei@leafco.example", "--name", "Mei Tan", "--role", "seller"
    ).exit_code == 0
    result = run(
        "product", "add", "--seller-id", "2", "--name", "Sencha",
        "--price", "12.50", "--stock", "50", "--category", "Green Tea",
    )
    assert result.exit_code == 0, result.output


class TestCli:

    def test_checkout_and_show(self, run):
        _seed(run)

        result = run("order", "checkout", "--customer-id", "1", "--address", "1 Tea Lane", "--items", "1:2")
        assert result.exit_code == 0, result.output
        assert "Order #1 placed" in result.output
        assert "$25.00" in result.output

        shown = run("order", "show", "--id", "1")
        assert "status=PENDING" in shown.output

        listed = run("product", "list")
        assert "Sencha" in listed.output
        assert "48" in listed.output

    def test_insufficient_stock_reported(self, run):
        _seed(run)
        result = run("order", "checkout", "--customer-id", "1", "--address", "1 Tea Lane", "--items", "1:30,1:30")
        assert result.exit_code != 0
        assert "Insufficient stock for Sencha" in result.output

    def test_seller_cannot_checkout(self, run):
        _seed(run)
        result = run("order", "checkout", "--customer-id", "2", "--address", "1 Tea Lane", "--items", "1:1")
        assert result.exit_code != 0
        assert "Customer role required" in result.output

    def test_bad_items_format(self, run):
        _seed(run)
        result = run("order", "checkout", "--customer-id", "1", "--address", "x", "--items", "Sencha")
        assert result.exit_code != 0
        assert "Expected 'ProductId:Quantity'" in result.output

    def test_status_and_listing(self, run):
        _seed(run)
        run("order", "checkout", "--customer-id", "1", "--address", "1 Tea Lane", "--items", "1:1")

        result = run("order", "status", "--id", "1", "--seller-id", "2", "--status", "shipped")
        assert result.exit_code == 0, result.output
        assert "Order #1 is now SHIPPED." in result.output

        back = run("order", "status", "--id", "1", "--seller-id", "2", "--status", "PENDING")
        assert back.exit_code != 0

        customer_orders = run("order", "list", "--user-id", "1")
        assert "SHIPPED" in customer_orders.output
        seller_orders = run("order", "list", "--user-id", "2")
        assert "SHIPPED" in seller_orders.output

    def test_stock_command_deactivates(self, run):
        _seed(run)
        result = run("product", "stock", "--id", "1", "--seller-id", "2", "--stock", "0")
        assert result.exit_code == 0, result.output
        assert "(inactive)" in result.output
        assert "No products found." in run("product", "list").output

    def test_product_update_show_and_mine(self, run):
        _seed(run)

        result = run(
            "product", "update", "--id", "1", "--seller-id", "2",
            "--name", "Sencha Premium", "--description", "First flush", "--category", "Japanese Green",
        )
        assert result.exit_code == 0, result.output
        assert "Product #1 'Sencha Premium' updated: $12.50 (active)" in result.output

        shown = run("product", "show", "--id", "1")
        assert shown.exit_code == 0, shown.output
        assert "Sencha Premium" in shown.output
        assert "Japanese Green" in shown.output
        assert "First flush" in shown.output

        hidden = run("product", "update", "--id", "1", "--seller-id", "2", "--visibility", "inactive")
        assert "(inactive)" in hidden.output
        assert "No products found." in run("product", "list").output

        mine = run("product", "mine", "--seller-id", "2")
        assert mine.exit_code == 0, mine.output
        assert "Sencha Premium" in mine.output
        assert "inactive" in mine.output

    def test_product_update_needs_a_change(self, run):
        _seed(run)
        result = run("product", "update", "--id", "1", "--seller-id", "2")
        assert result.exit_code != 0
        assert "Nothing to update" in result.output

    def test_customer_has_no_seller_listing(self, run):
        _seed(run)
        result = run("product", "mine", "--seller-id", "1")
        assert result.exit_code != 0
        assert "Seller role required" in result.output
