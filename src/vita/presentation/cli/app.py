"""Vita CLI application using Typer.

This module provides command-line access to the banking sync pipeline:
schema initialization, the connection lifecycle, account and transaction
sync, and read-only listings. It is also the entry point for scheduled
jobs (e.g. a periodic ``vita bank sync USER_ID``).
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from functools import lru_cache
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from vita.application.services import BankingService
from vita.domain.shared.exceptions import DomainException
from vita.infrastructure.integration.saltedge import SaltEdgeClient
from vita.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    display_url,
)
from vita.infrastructure.persistence.sqlalchemy.session import (
    create_engine,
    create_session_maker,
    repository_scope,
)
from vita_config.settings import get_settings

T = TypeVar("T")

app = typer.Typer(
    name="vita",
    help="Vita - bank connection and transaction sync CLI",
    no_args_is_help=True,
)
console = Console()

db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)

bank_app = typer.Typer(
    name="bank",
    help="Bank connections, accounts and transactions",
    no_args_is_help=True,
)
app.add_typer(bank_app)

DATE_FORMATS = ["%Y-%m-%d"]


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Configure application logging.

    Sets up logging for the vita application with:
    - Console output with timestamps and module names
    - Configurable log level for vita modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    settings = get_settings()
    log_level_str = settings.log_level.upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("vita").setLevel(log_level)
    logging.getLogger("vita_config").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@app.callback()
def main() -> None:
    _configure_logging()


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _banking_service() -> AsyncIterator[BankingService]:
    settings = get_settings()
    async with SaltEdgeClient.from_settings(settings) as aggregator:
        engine = create_engine(settings.database_url)
        try:
            scope = repository_scope(create_session_maker(engine))
            yield BankingService.from_settings(scope, aggregator, settings)
        finally:
            await engine.dispose()


def _run(operation: Callable[[BankingService], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with _banking_service() as service:
            return await operation(service)

    try:
        return asyncio.run(runner())
    except DomainException as e:
        console.print(f"[red]Error:[/red] {e.message} [dim]({e.code.value})[/dim]")
        raise typer.Exit(code=1) from e


def _fail(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# db
# ---------------------------------------------------------------------------


@db_app.command("init")
def db_init() -> None:
    """Create all database tables (idempotent)."""
    database_url = get_settings().database_url
    console.print(f"Database: [cyan]{display_url(database_url)}[/cyan]")
    asyncio.run(create_tables(database_url))
    console.print("[green]✓[/green] Schema is up to date")


# ---------------------------------------------------------------------------
# bank: connection lifecycle
# ---------------------------------------------------------------------------


@bank_app.command("connect")
def connect(
    user_id: str = typer.Argument(..., help="User to connect a bank for"),
    return_url: str = typer.Option(
        ...,
        "--return-url",
        help="Where the hosted consent flow returns to",
    ),
) -> None:
    """Print the hosted consent-flow URL for a user."""
    url = _run(lambda service: service.initiate_connection(user_id, return_url))
    console.print("Open this URL to connect a bank:")
    console.print(url, soft_wrap=True)


@bank_app.command("callback")
def callback(
    external_connection_id: str = typer.Argument(..., help="Aggregator connection id"),
    user_id: str = typer.Argument(..., help="User the connection belongs to"),
) -> None:
    """Process an aggregator callback and sync the connection's accounts."""
    connection = _run(
        lambda service: service.process_callback(external_connection_id, user_id),
    )
    if connection is None:
        _fail(f"Aggregator does not know connection {external_connection_id}")
    console.print(
        f"[green]✓[/green] {connection.bank_name or connection.bank_code} "
        f"({connection.external_connection_id}) is "
        f"[bold]{connection.status.value}[/bold] [dim]id={connection.id}[/dim]",
    )


@bank_app.command("disconnect")
def disconnect(
    user_id: str = typer.Argument(...),
    connection_id: UUID = typer.Argument(..., help="Internal connection id"),
) -> None:
    """Disconnect a bank; accounts become inactive, transactions are kept."""
    if not _run(lambda service: service.disconnect(user_id, connection_id)):
        _fail(f"Connection {connection_id} not found")
    console.print(f"[green]✓[/green] Disconnected {connection_id}")


@bank_app.command("refresh")
def refresh(
    user_id: str = typer.Argument(...),
    connection_id: UUID = typer.Argument(..., help="Internal connection id"),
) -> None:
    """Ask the aggregator to refresh a connection from the bank."""
    if not _run(lambda service: service.refresh_connection(user_id, connection_id)):
        _fail(f"Refresh of connection {connection_id} failed")
    console.print(f"[green]✓[/green] Refresh requested for {connection_id}")


# ---------------------------------------------------------------------------
# bank: sync
# ---------------------------------------------------------------------------


@bank_app.command("sync")
def sync(user_id: str = typer.Argument(...)) -> None:
    """Sync accounts of all active connections of a user."""
    if not _run(lambda service: service.sync_all(user_id)):
        _fail("Sync failed for at least one connection, try again later")
    console.print("[green]✓[/green] All connections synced")


@bank_app.command("sync-transactions")
def sync_transactions(
    account_id: UUID = typer.Argument(..., help="Internal bank account id"),
) -> None:
    """Fetch new transactions for one bank account."""
    if not _run(lambda service: service.sync_transactions(account_id)):
        _fail("Transaction sync failed, try again later")
    console.print(f"[green]✓[/green] Transactions synced for {account_id}")


# ---------------------------------------------------------------------------
# bank: listings
# ---------------------------------------------------------------------------


@bank_app.command("connections")
def connections(user_id: str = typer.Argument(...)) -> None:
    """List a user's bank connections."""
    items = _run(lambda service: service.list_connections(user_id))
    if not items:
        console.print("[dim]No bank connections[/dim]")
        return

    table = Table(title=f"Bank connections of {user_id}")
    table.add_column("ID", style="dim")
    table.add_column("Bank")
    table.add_column("External ID")
    table.add_column("Status")
    table.add_column("Last sync")
    table.add_column("Consent expires")
    for c in items:
        table.add_row(
            str(c.id),
            c.bank_name or c.bank_code,
            c.external_connection_id,
            c.status.value,
            c.last_sync_at.strftime("%Y-%m-%d %H:%M") if c.last_sync_at else "-",
            c.consent_expires_at.date().isoformat() if c.consent_expires_at else "-",
        )
    console.print(table)


@bank_app.command("accounts")
def accounts(user_id: str = typer.Argument(...)) -> None:
    """List a user's active bank accounts."""
    items = _run(lambda service: service.list_accounts(user_id))
    if not items:
        console.print("[dim]No active bank accounts[/dim]")
        return

    table = Table(title=f"Bank accounts of {user_id}")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("IBAN")
    table.add_column("Balance", justify="right")
    table.add_column("Available", justify="right")
    for a in items:
        table.add_row(
            str(a.id),
            a.name,
            a.account_type,
            a.iban or "-",
            f"{a.balance:,.2f} {a.currency}",
            f"{a.available_balance:,.2f}" if a.available_balance is not None else "-",
        )
    console.print(table)


@bank_app.command("transactions")
def transactions(
    user_id: str = typer.Argument(...),
    from_date: Optional[datetime] = typer.Option(
        None,
        "--from",
        formats=DATE_FORMATS,
        help="First booking date (inclusive)",
    ),
    to_date: Optional[datetime] = typer.Option(
        None,
        "--to",
        formats=DATE_FORMATS,
        help="Last booking date (inclusive)",
    ),
) -> None:
    """List a user's bank transactions, newest first."""
    items = _run(
        lambda service: service.list_transactions(
            user_id,
            from_date.date() if from_date else None,
            to_date.date() if to_date else None,
        ),
    )
    if not items:
        console.print("[dim]No transactions[/dim]")
        return

    table = Table(title=f"Bank transactions of {user_id}")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Merchant")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    for t in items:
        color = "green" if t.is_credit() else "red"
        table.add_row(
            t.booked_on.isoformat(),
            t.description[:50],
            t.merchant_name or "",
            t.transaction_type,
            f"[{color}]{t.amount:,.2f} {t.currency}[/{color}]",
        )
    console.print(table)


@bank_app.command("balance")
def balance(
    user_id: str = typer.Argument(...),
    currency: Optional[str] = typer.Option(
        None,
        "--currency",
        "-c",
        help="ISO currency code (defaults to DEFAULT_CURRENCY)",
    ),
) -> None:
    """Total balance of active accounts in one currency (no conversion)."""
    total = _run(lambda service: service.get_total_balance(user_id, currency))
    code = (currency or get_settings().default_currency).upper()
    console.print(f"Total balance: [bold]{total:,.2f} {code}[/bold]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
