"""Shared domain components.

This module exports shared exceptions and time helpers used across
domain boundaries.
"""

from vita.domain.shared.exceptions import (
    BusinessRuleViolation,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
    ValidationError,
)
from vita.domain.shared.time import ensure_tz_aware, today_utc, utc_now

__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "DomainException",
    # Exception categories
    "ValidationError",
    "BusinessRuleViolation",
    "EntityNotFoundError",
    # Utilities
    "ensure_tz_aware",
    "today_utc",
    "utc_now",
]
