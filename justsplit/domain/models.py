"""Domain type definitions for justsplit.

These NewTypes provide semantic clarity and help with type checking:
- Position: Percentage on the normalized timeline axis (-20 to 120)
- CurrencyCode: ISO 4217 currency code (e.g., "USD")
- ExpenseId, EventId, UserId: Identifiers assigned by the app's store
"""

from dataclasses import dataclass
from typing import NewType

# Negative positions are pre-event, positions over 100 are post-event
Position = NewType("Position", float)

CurrencyCode = NewType("CurrencyCode", str)

ExpenseId = NewType("ExpenseId", str)

EventId = NewType("EventId", str)

UserId = NewType("UserId", str)


@dataclass(frozen=True)
class Expense:
    """Immutable expense record."""

    id: ExpenseId
    date: str  # ISO-8601 date or datetime
    amount: float
    currency: CurrencyCode
    settled: bool = False
    description: str | None = None
    event_id: EventId | None = None
    paid_by: UserId | None = None
    participants: tuple[UserId, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class Event:
    """Immutable event record. A missing end date means the event is ongoing."""

    id: EventId
    name: str
    start_date: str
    end_date: str | None = None
    participants: tuple[UserId, ...] = ()


@dataclass(frozen=True)
class User:
    """Immutable user record."""

    id: UserId
    name: str


@dataclass(frozen=True)
class PositionedGroup:
    """Expenses drawn as a single marker on the timeline."""

    position: Position
    expenses: tuple[Expense, ...]


@dataclass(frozen=True)
class Settlement:
    """Immutable payment needed to square a debt between two users."""

    from_user: UserId
    to_user: UserId
    amount: float
    expense_ids: tuple[ExpenseId, ...]
    event_id: EventId | None = None
    currency: CurrencyCode | None = None
