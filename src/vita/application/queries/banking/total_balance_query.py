"""Sum a user's account balances in one currency."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from vita.domain.banking.entities import normalize_currency
from vita.domain.banking.repositories import BankAccountRepository

if TYPE_CHECKING:
    from vita.application.factories import RepositoryFactory


class TotalBalanceQuery:
    """
    Total balance of the user's active accounts in one currency.

    Accounts in other currencies are excluded, not converted.
    """

    def __init__(
        self,
        account_repository: BankAccountRepository,
        default_currency: str = "DKK",
    ):
        self._account_repo = account_repository
        self._default_currency = default_currency

    @classmethod
    def from_factory(
        cls,
        factory: RepositoryFactory,
        default_currency: str = "DKK",
    ) -> TotalBalanceQuery:
        return cls(
            account_repository=factory.bank_account_repository(),
            default_currency=default_currency,
        )

    async def execute(self, user_id: str, currency: Optional[str] = None) -> Decimal:
        code = normalize_currency(currency or self._default_currency)
        return await self._account_repo.sum_active_balance(user_id, code)
