"""Ask the aggregator to refresh a connection's data from the bank."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from vita.domain.banking.ports import AggregatorPort
from vita.domain.banking.repositories import BankConnectionRepository

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory

logger = logging.getLogger(__name__)


class RefreshConnectionCommand:
    """Trigger an aggregator-side refresh for one of the user's connections."""

    def __init__(
        self,
        aggregator: AggregatorPort,
        connection_repo: BankConnectionRepository,
    ):
        self._aggregator = aggregator
        self._connection_repo = connection_repo

    @classmethod
    def from_factory(
        cls,
        factory: RepositoryFactory,
        aggregator: AggregatorPort,
    ) -> RefreshConnectionCommand:
        return cls(
            aggregator=aggregator,
            connection_repo=factory.bank_connection_repository(),
        )

    async def execute(self, user_id: str, connection_id: UUID) -> bool:
        connection = await self._connection_repo.find_by_id_for_user(
            connection_id,
            user_id,
        )
        if connection is None:
            return False

        refreshed = await self._aggregator.refresh_connection(
            connection.external_connection_id,
        )
        logger.info(
            "Refresh of connection %s %s",
            connection.external_connection_id,
            "requested" if refreshed else "failed",
        )
        return refreshed
