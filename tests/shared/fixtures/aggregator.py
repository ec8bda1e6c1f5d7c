"""In-memory aggregator used by service and command tests."""

from datetime import date
from typing import Optional

from vita.domain.banking.exceptions import UpstreamError
from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.value_objects import (
    AggregatorAccount,
    AggregatorConnection,
    AggregatorTransaction,
    ConnectSession,
)


class FakeAggregator(AggregatorPort):
    """
    Serves whatever state a test puts into it and records every call.

    Set ``failing_connections`` to make ``get_accounts`` raise for those
    external connection ids, and ``fail_transactions`` to make
    ``get_transactions`` raise.
    """

    def __init__(self):
        self.connections: dict[str, AggregatorConnection] = {}
        self.accounts: dict[str, list[AggregatorAccount]] = {}
        self.transactions: dict[str, list[AggregatorTransaction]] = {}
        self.failing_connections: set[str] = set()
        self.fail_transactions = False
        self.fail_remove = False
        self.calls: list[tuple] = []

    async def create_connect_session(
        self,
        customer_id: str,
        return_url: str,
        provider_codes: Optional[list[str]] = None,
    ) -> ConnectSession:
        self.calls.append(
            ("create_connect_session", customer_id, return_url, provider_codes),
        )
        return ConnectSession(
            connect_url=f"https://connect.example.test/{customer_id}",
        )

    async def get_connection(
        self,
        external_connection_id: str,
    ) -> Optional[AggregatorConnection]:
        self.calls.append(("get_connection", external_connection_id))
        return self.connections.get(external_connection_id)

    async def list_connections(self, customer_id: str) -> list[AggregatorConnection]:
        self.calls.append(("list_connections", customer_id))
        return [
            c for c in self.connections.values() if c.customer_id == customer_id
        ]

    async def get_accounts(
        self,
        external_connection_id: str,
    ) -> list[AggregatorAccount]:
        self.calls.append(("get_accounts", external_connection_id))
        if external_connection_id in self.failing_connections:
            msg = "Salt Edge API error: 503"
            raise UpstreamError(msg, status_code=503, operation="get_accounts")
        return list(self.accounts.get(external_connection_id, []))

    async def get_transactions(
        self,
        external_account_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[AggregatorTransaction]:
        self.calls.append(
            ("get_transactions", external_account_id, from_date, to_date),
        )
        if self.fail_transactions:
            msg = "Salt Edge get_transactions timed out"
            raise UpstreamError(msg, operation="get_transactions")
        return list(self.transactions.get(external_account_id, []))

    async def refresh_connection(self, external_connection_id: str) -> bool:
        self.calls.append(("refresh_connection", external_connection_id))
        return external_connection_id in self.connections

    async def remove_connection(self, external_connection_id: str) -> bool:
        self.calls.append(("remove_connection", external_connection_id))
        if self.fail_remove:
            msg = "Salt Edge API error: 500"
            raise UpstreamError(msg, status_code=500, operation="remove_connection")
        return self.connections.pop(external_connection_id, None) is not None

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]
