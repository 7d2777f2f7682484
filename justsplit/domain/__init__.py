"""Domain models and types for justsplit.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from justsplit.domain.models import (
    CurrencyCode,
    Event,
    EventId,
    Expense,
    ExpenseId,
    Position,
    PositionedGroup,
    Settlement,
    User,
    UserId,
)

__all__ = [
    "CurrencyCode",
    "Event",
    "EventId",
    "Expense",
    "ExpenseId",
    "Position",
    "PositionedGroup",
    "Settlement",
    "User",
    "UserId",
]
