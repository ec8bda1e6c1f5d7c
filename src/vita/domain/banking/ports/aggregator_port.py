"""Aggregator port interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from vita.domain.banking.value_objects import (
        AggregatorAccount,
        AggregatorConnection,
        AggregatorTransaction,
        ConnectSession,
    )


class AggregatorPort(ABC):
    """
    Interface for an open-banking aggregator.

    This defines what our domain needs from a third party that brokers
    consented access to a user's bank accounts and transactions.
    """

    @abstractmethod
    async def create_connect_session(
        self,
        customer_id: str,
        return_url: str,
        provider_codes: Optional[list[str]] = None,
    ) -> ConnectSession:
        """
        Request a hosted consent-flow URL for one user.

        Parameters
        ----------
        customer_id
            Identifier of the user at the aggregator
        return_url
            Where the hosted flow sends the user when it finishes
        provider_codes
            Restrict the flow to these institutions (all when omitted)

        Returns
        -------
        The hosted session, including its URL

        Raises
        ------
        UpstreamError
            On a non-2xx response or transport failure
        """

    @abstractmethod
    async def get_connection(
        self,
        external_connection_id: str,
    ) -> Optional[AggregatorConnection]:
        """
        Fetch the current state of one connection.

        Returns
        -------
        The connection, or None if the aggregator does not know it
        """

    @abstractmethod
    async def list_connections(self, customer_id: str) -> list[AggregatorConnection]:
        """List every connection the aggregator holds for a customer."""

    @abstractmethod
    async def get_accounts(
        self,
        external_connection_id: str,
    ) -> list[AggregatorAccount]:
        """List the accounts currently reported under a connection."""

    @abstractmethod
    async def get_transactions(
        self,
        external_account_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> list[AggregatorTransaction]:
        """
        Fetch posted transactions for an account.

        Parameters
        ----------
        external_account_id
            Aggregator id of the account
        from_date
            Inclusive lower bound (no lower bound when omitted)
        to_date
            Inclusive upper bound (no upper bound when omitted)

        Returns
        -------
        List of transactions; malformed records are skipped
        """

    @abstractmethod
    async def refresh_connection(self, external_connection_id: str) -> bool:
        """Ask the aggregator to re-fetch data from the bank.

        Best effort: returns False instead of raising on failure.
        """

    @abstractmethod
    async def remove_connection(self, external_connection_id: str) -> bool:
        """Remove a connection at the aggregator.

        Best effort: returns False instead of raising on failure, so that
        callers can proceed with local cleanup regardless.
        """
