"""Application layer services."""

from vita.application.services.banking_service import BankingService

__all__ = ["BankingService"]
