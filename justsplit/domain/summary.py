"""Pure functions for event summaries and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no ledger, no console, no network)
- No side effects
- Pure data transformations
- Easy to test

Amounts are summed per currency; no conversion happens here.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from justsplit.domain.models import CurrencyCode, Event, EventId, Expense
from justsplit.domain.timeline import Clock, calculate_timeline_progress


@dataclass(frozen=True)
class EventSummary:
    """Immutable summary of an event's expenses."""

    event: Event
    expense_count: int
    settled_count: int
    settled_percentage: float
    progress: float
    totals: dict[CurrencyCode, float]
    unsettled: dict[CurrencyCode, float]


def filter_event_expenses(expenses: Iterable[Expense], event_id: EventId) -> list[Expense]:
    """Select the expenses belonging to an event, keeping their order."""
    return [expense for expense in expenses if expense.event_id == event_id]


def calculate_settled_percentage(expenses: Sequence[Expense]) -> float:
    """Calculate the share of expenses that are settled.

    Args:
        expenses: Expenses to inspect.

    Returns:
        Percentage settled (0-100), or 0 for an empty list.
    """
    if not expenses:
        return 0.0

    settled = sum(1 for expense in expenses if expense.settled is True)
    return settled / len(expenses) * 100


def calculate_total_by_currency(expenses: Iterable[Expense]) -> dict[CurrencyCode, float]:
    """Sum expense amounts per currency.

    Args:
        expenses: Expenses to total.

    Returns:
        Dictionary of currency code to total amount, in first-seen order.
    """
    totals: dict[CurrencyCode, float] = {}
    for expense in expenses:
        totals[expense.currency] = totals.get(expense.currency, 0.0) + expense.amount
    return totals


def calculate_unsettled_amount(expenses: Iterable[Expense]) -> dict[CurrencyCode, float]:
    """Sum amounts of unsettled expenses per currency."""
    return calculate_total_by_currency(expense for expense in expenses if expense.settled is not True)


def summarize_event(
    expenses: Sequence[Expense],
    event: Event,
    now: Clock | None = None,
) -> EventSummary:
    """Build a summary for an event.

    Args:
        expenses: Expenses already filtered to the event.
        event: Event being summarized.
        now: Clock for the progress calculation.

    Returns:
        EventSummary with counts, progress, and per-currency totals.
    """
    return EventSummary(
        event=event,
        expense_count=len(expenses),
        settled_count=sum(1 for expense in expenses if expense.settled),
        settled_percentage=calculate_settled_percentage(expenses),
        progress=calculate_timeline_progress(event.start_date, event.end_date, now),
        totals=calculate_total_by_currency(expenses),
        unsettled=calculate_unsettled_amount(expenses),
    )
