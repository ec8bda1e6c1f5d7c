"""Start the aggregator's hosted consent flow for a user."""

from __future__ import annotations

import logging
from typing import Optional

from vita.domain.banking.ports import AggregatorPort
from vita.domain.shared.exceptions import ValidationError

logger = logging.getLogger(__name__)


class InitiateConnectionCommand:
    """Request a hosted connect URL offering the configured providers."""

    def __init__(
        self,
        aggregator: AggregatorPort,
        provider_codes: Optional[list[str]] = None,
    ):
        self._aggregator = aggregator
        self._provider_codes = provider_codes or None

    async def execute(self, user_id: str, return_url: str) -> str:
        if not user_id:
            msg = "A user id is required to start a bank connection"
            raise ValidationError(msg)
        if not return_url:
            msg = "A return URL is required to start a bank connection"
            raise ValidationError(msg)

        session = await self._aggregator.create_connect_session(
            customer_id=user_id,
            return_url=return_url,
            provider_codes=self._provider_codes,
        )
        logger.info(
            "Connect session for user %s expires at %s",
            user_id,
            session.expires_at,
        )
        return session.connect_url
