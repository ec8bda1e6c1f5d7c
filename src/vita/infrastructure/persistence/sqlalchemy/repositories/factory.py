"""SQLAlchemy repository factory bound to one session."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from vita.infrastructure.persistence.sqlalchemy.repositories.banking import (
    BankAccountRepositorySQLAlchemy,
    BankConnectionRepositorySQLAlchemy,
    BankTransactionRepositorySQLAlchemy,
)


class SQLAlchemyRepositoryFactory:
    """SQLAlchemy implementation of the RepositoryFactory Protocol."""

    def __init__(self, session: AsyncSession):
        self._session = session

        # Cached instances (created on demand)
        self._connection_repo: BankConnectionRepositorySQLAlchemy | None = None
        self._account_repo: BankAccountRepositorySQLAlchemy | None = None
        self._transaction_repo: BankTransactionRepositorySQLAlchemy | None = None

    @property
    def session(self) -> AsyncSession:
        return self._session

    def bank_connection_repository(self) -> BankConnectionRepositorySQLAlchemy:
        if self._connection_repo is None:
            self._connection_repo = BankConnectionRepositorySQLAlchemy(self._session)
        return self._connection_repo

    def bank_account_repository(self) -> BankAccountRepositorySQLAlchemy:
        if self._account_repo is None:
            self._account_repo = BankAccountRepositorySQLAlchemy(self._session)
        return self._account_repo

    def bank_transaction_repository(self) -> BankTransactionRepositorySQLAlchemy:
        if self._transaction_repo is None:
            self._transaction_repo = BankTransactionRepositorySQLAlchemy(
                self._session,
            )
        return self._transaction_repo
