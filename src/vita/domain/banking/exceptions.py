"""Banking domain exceptions.

This module defines exceptions specific to the banking bounded context:
aggregator configuration and transport failures, malformed aggregator
payloads, and lookups of connections/accounts that do not exist.
"""

from vita.domain.shared.exceptions import (
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)

# =============================================================================
# Base Banking Exception
# =============================================================================


class BankingDomainError(DomainException):
    """Base exception for banking domain errors."""


# =============================================================================
# Aggregator Exceptions
# =============================================================================


class AggregatorConfigError(BankingDomainError):
    """Raised when aggregator credentials are missing.

    Fatal at startup, not retryable.
    """

    def __init__(
        self,
        message: str = "Aggregator credentials are not configured",
        missing: list[str] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.AGGREGATOR_NOT_CONFIGURED,
            details={"missing": missing} if missing else None,
        )


class UpstreamError(BankingDomainError):
    """Raised on a non-2xx response or transport failure from the aggregator.

    Retryable by the caller; never retried internally.
    """

    def __init__(
        self,
        message: str = "Aggregator request failed",
        status_code: int | None = None,
        operation: str | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.UPSTREAM_ERROR,
            details={
                "status_code": status_code,
                "operation": operation,
                "body": body,
            },
        )
        self.status_code = status_code
        self.operation = operation


class AggregatorPayloadError(ValidationError):
    """Raised when the aggregator returns a payload of unexpected shape."""

    def __init__(
        self,
        message: str = "Unexpected aggregator payload",
        operation: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_PAYLOAD,
            details={"operation": operation, "reason": reason},
        )


# =============================================================================
# Lookup Exceptions
# =============================================================================


class BankConnectionNotFoundError(EntityNotFoundError):
    """Raised when a bank connection is unknown (or not owned by the user)."""

    def __init__(self, connection_id: object | None = None) -> None:
        msg = (
            f"Bank connection '{connection_id}' not found"
            if connection_id
            else "Bank connection not found"
        )
        super().__init__(
            message=msg,
            code=ErrorCode.CONNECTION_NOT_FOUND,
            details={"connection_id": str(connection_id)} if connection_id else None,
        )


class BankAccountNotFoundError(EntityNotFoundError):
    """Raised when a bank account is not found.

    This refers to accounts held at the bank, not in-app ledger accounts.
    """

    def __init__(self, account_id: object | None = None) -> None:
        msg = (
            f"Bank account '{account_id}' not found"
            if account_id
            else "Bank account not found"
        )
        super().__init__(
            message=msg,
            code=ErrorCode.ACCOUNT_NOT_FOUND,
            details={"account_id": str(account_id)} if account_id else None,
        )
