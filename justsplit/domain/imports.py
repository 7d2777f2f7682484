"""Pure functions for turning CSV rows into expenses.

This module contains the functional core for expense imports:
- No I/O operations (reading the file happens in the store layer)
- No side effects
- Pure data transformations
- Easy to test
"""

from typing import TypedDict

from justsplit.domain.models import CurrencyCode, EventId, Expense, ExpenseId, UserId


class CsvMapping(TypedDict):
    """CSV column mapping configuration."""

    date_column: str
    description_column: str
    amount_column: str
    currency_column: str
    paid_by_column: str
    participants_column: str


def analyze_csv_columns(headers: list[str]) -> CsvMapping:
    """Analyze CSV headers and suggest column mappings.

    Args:
        headers: List of CSV column names.

    Returns:
        CsvMapping with the first matching header per field (empty string if not detected).
    """
    mapping = CsvMapping(
        date_column="",
        description_column="",
        amount_column="",
        currency_column="",
        paid_by_column="",
        participants_column="",
    )

    for header in headers:
        lower = header.lower()

        if not mapping["date_column"] and "date" in lower:
            mapping["date_column"] = header

        if not mapping["description_column"] and ("description" in lower or "merchant" in lower):
            mapping["description_column"] = header

        if not mapping["amount_column"] and "amount" in lower and "currency" not in lower:
            mapping["amount_column"] = header
        elif not mapping["currency_column"] and "currency" in lower:
            mapping["currency_column"] = header

        if not mapping["paid_by_column"] and ("paid by" in lower or "payer" in lower):
            mapping["paid_by_column"] = header

        if not mapping["participants_column"] and "participant" in lower:
            mapping["participants_column"] = header

    return mapping


def split_participants(raw: str) -> tuple[UserId, ...]:
    """Split a participants cell ("alice, bob" or "alice;bob") into user ids."""
    parts = raw.replace(";", ",").split(",")
    return tuple(UserId(part.strip()) for part in parts if part.strip())


def parse_csv_expense(
    row: dict[str, str],
    mapping: CsvMapping,
    expense_id: ExpenseId,
    event_id: EventId | None,
    default_currency: CurrencyCode,
) -> Expense | None:
    """Parse a CSV row into an expense.

    The date cell must already be normalized to ISO format.

    Args:
        row: CSV row as dictionary.
        mapping: Column mapping configuration.
        expense_id: Id to give the new expense.
        event_id: Event the expense belongs to.
        default_currency: Currency used when the row has none.

    Returns:
        Expense if valid, None if row should be skipped.
    """
    date = (row.get(mapping["date_column"]) or "").strip()
    if not date:
        return None

    raw_amount = (row.get(mapping["amount_column"]) or "").strip().replace(",", "")
    if not raw_amount:
        return None

    try:
        amount = abs(float(raw_amount))
    except ValueError:
        return None

    currency = (row.get(mapping["currency_column"]) or "").strip().upper() or default_currency
    paid_by = (row.get(mapping["paid_by_column"]) or "").strip()

    return Expense(
        id=expense_id,
        date=date,
        amount=amount,
        currency=CurrencyCode(currency),
        description=(row.get(mapping["description_column"]) or "").strip() or None,
        event_id=event_id,
        paid_by=UserId(paid_by) if paid_by else None,
        participants=split_participants(row.get(mapping["participants_column"]) or ""),
    )
