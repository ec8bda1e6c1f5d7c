"""Tests for the Typer CLI with the banking service mocked out."""

from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from rich.console import Console
from typer.testing import CliRunner

import vita.presentation.cli.app as cli_module
from tests.shared.fixtures.factories import (
    USER_ID,
    bank_account,
    bank_connection,
    remote_transaction,
)
from vita.domain.banking.entities import BankTransaction
from vita.domain.banking.exceptions import AggregatorConfigError

runner = CliRunner()


@pytest.fixture
def service(monkeypatch):
    """Replace service wiring with a mock and widen the console."""
    mock_service = AsyncMock()

    @asynccontextmanager
    async def fake_banking_service():
        yield mock_service

    monkeypatch.setattr(cli_module, "_banking_service", fake_banking_service)
    monkeypatch.setattr(cli_module, "_configure_logging", lambda: None)
    monkeypatch.setattr(cli_module, "console", Console(width=200))
    return mock_service


def invoke(*args: str):
    return runner.invoke(cli_module.app, list(args))


class TestConnectionCommands:
    def test_connect_prints_url(self, service):
        service.initiate_connection.return_value = "https://connect.example.test/s"

        result = invoke(
            "bank",
            "connect",
            USER_ID,
            "--return-url",
            "https://app.example.test/cb",
        )

        assert result.exit_code == 0
        assert "https://connect.example.test/s" in result.output
        service.initiate_connection.assert_awaited_once_with(
            USER_ID,
            "https://app.example.test/cb",
        )

    def test_callback(self, service):
        service.process_callback.return_value = bank_connection("conn_1")

        result = invoke("bank", "callback", "conn_1", USER_ID)

        assert result.exit_code == 0
        assert "conn_1" in result.output
        assert "active" in result.output

    def test_callback_unknown_connection(self, service):
        service.process_callback.return_value = None

        result = invoke("bank", "callback", "conn_x", USER_ID)

        assert result.exit_code == 1

    def test_disconnect(self, service):
        connection_id = uuid4()
        service.disconnect.return_value = True

        result = invoke("bank", "disconnect", USER_ID, str(connection_id))

        assert result.exit_code == 0
        service.disconnect.assert_awaited_once_with(USER_ID, connection_id)

    def test_disconnect_not_found(self, service):
        service.disconnect.return_value = False

        result = invoke("bank", "disconnect", USER_ID, str(uuid4()))

        assert result.exit_code == 1

    def test_disconnect_rejects_malformed_id(self, service):
        result = invoke("bank", "disconnect", USER_ID, "not-a-uuid")

        assert result.exit_code == 2
        service.disconnect.assert_not_awaited()


class TestSyncCommands:
    def test_sync_success(self, service):
        service.sync_all.return_value = True

        result = invoke("bank", "sync", USER_ID)

        assert result.exit_code == 0

    def test_sync_failure_exits_non_zero(self, service):
        service.sync_all.return_value = False

        result = invoke("bank", "sync", USER_ID)

        assert result.exit_code == 1
        assert "try again" in result.output

    def test_sync_transactions(self, service):
        account_id = uuid4()
        service.sync_transactions.return_value = True

        result = invoke("bank", "sync-transactions", str(account_id))

        assert result.exit_code == 0
        service.sync_transactions.assert_awaited_once_with(account_id)


class TestListingCommands:
    def test_connections(self, service):
        service.list_connections.return_value = [bank_connection("conn_1")]

        result = invoke("bank", "connections", USER_ID)

        assert result.exit_code == 0
        assert "Nordea" in result.output
        assert "conn_1" in result.output

    def test_accounts(self, service):
        connection = bank_connection()
        service.list_accounts.return_value = [
            bank_account(connection.id, "acc_1", "1234.50", "DKK"),
        ]

        result = invoke("bank", "accounts", USER_ID)

        assert result.exit_code == 0
        assert "Account acc_1" in result.output
        assert "1,234.50 DKK" in result.output

    def test_accounts_empty(self, service):
        service.list_accounts.return_value = []

        result = invoke("bank", "accounts", USER_ID)

        assert result.exit_code == 0
        assert "No active bank accounts" in result.output

    def test_transactions_with_range(self, service):
        service.list_transactions.return_value = [
            BankTransaction.from_aggregator(
                USER_ID,
                uuid4(),
                remote_transaction("tx_1", date(2024, 1, 11), merchant="Netto"),
            ),
        ]

        result = invoke(
            "bank",
            "transactions",
            USER_ID,
            "--from",
            "2024-01-01",
            "--to",
            "2024-01-31",
        )

        assert result.exit_code == 0
        assert "2024-01-11" in result.output
        assert "Netto" in result.output
        service.list_transactions.assert_awaited_once_with(
            USER_ID,
            date(2024, 1, 1),
            date(2024, 1, 31),
        )

    def test_balance(self, service):
        service.get_total_balance.return_value = Decimal("100.00")

        result = invoke("bank", "balance", USER_ID, "--currency", "dkk")

        assert result.exit_code == 0
        assert "100.00 DKK" in result.output
        service.get_total_balance.assert_awaited_once_with(USER_ID, "dkk")


class TestErrors:
    def test_missing_credentials(self, monkeypatch):
        @asynccontextmanager
        async def unconfigured():
            raise AggregatorConfigError(missing=["saltedge_app_id"])
            yield  # pragma: no cover

        monkeypatch.setattr(cli_module, "_banking_service", unconfigured)
        monkeypatch.setattr(cli_module, "_configure_logging", lambda: None)
        monkeypatch.setattr(cli_module, "console", Console(width=200))

        result = invoke("bank", "accounts", USER_ID)

        assert result.exit_code == 1
        assert "AGGREGATOR_NOT_CONFIGURED" in result.output


class TestDbCommands:
    def test_db_init(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setattr(cli_module, "_configure_logging", lambda: None)

        result = invoke("db", "init")

        assert result.exit_code == 0
        assert "Schema is up to date" in result.output
