"""Repository factory protocol for application layer."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Protocol

from vita.domain.banking.repositories import (
    BankAccountRepository,
    BankConnectionRepository,
    BankTransactionRepository,
)


class RepositoryFactory(Protocol):
    """Protocol for creating repositories bound to one unit of work."""

    @property
    def session(self) -> Any:
        """Get the database session for transaction management.

        The type is intentionally `Any` to avoid coupling the
        application layer to specific database implementations.
        """
        ...

    def bank_connection_repository(self) -> BankConnectionRepository:
        """Get bank connection repository."""
        ...

    def bank_account_repository(self) -> BankAccountRepository:
        """Get bank account repository."""
        ...

    def bank_transaction_repository(self) -> BankTransactionRepository:
        """Get bank transaction repository."""
        ...


# Opens a unit of work: commits when the block exits normally, rolls back
# when it raises.
RepositoryScope = Callable[[], AbstractAsyncContextManager[RepositoryFactory]]
