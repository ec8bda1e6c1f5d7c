"""Bank connection lifecycle status."""

from __future__ import annotations

from enum import Enum


class ConnectionStatus(Enum):
    """Lifecycle status of a bank connection.

    pending -> active -> inactive (disconnect)
    active -> error -> active | inactive
    """

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"

    @classmethod
    def from_aggregator(cls, value: str | None) -> ConnectionStatus:
        """Map an aggregator-reported status onto the local lifecycle.

        The aggregator reports ``active``, ``inactive`` or ``disabled``.
        Anything unrecognised is treated as an error state.
        """
        normalized = (value or "").strip().lower()
        if normalized == "active":
            return cls.ACTIVE
        if normalized in ("inactive", "disabled"):
            return cls.INACTIVE
        if normalized == "pending":
            return cls.PENDING
        return cls.ERROR

    def is_syncable(self) -> bool:
        return self is ConnectionStatus.ACTIVE
