"""Ledger file loading and saving.

The ledger is a JSON document written by the JustSplit web app:

    {"users": [...], "events": [...], "expenses": [...]}

Records use the app's camelCase keys (startDate, eventId, paidBy, ...).
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from justsplit.dates import parse_timestamp
from justsplit.domain.models import CurrencyCode, Event, EventId, Expense, ExpenseId, User, UserId


@dataclass(frozen=True)
class Ledger:
    """Immutable snapshot of users, events, and expenses."""

    users: tuple[User, ...] = ()
    events: tuple[Event, ...] = ()
    expenses: tuple[Expense, ...] = ()


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_ledger_path() -> Path:
    """Get the default ledger path (XDG compliant)."""
    return get_xdg_data_home() / "justsplit" / "ledger.json"


def _require(record: dict[str, Any], key: str, kind: str) -> Any:
    value = record.get(key)
    if value is None or value == "":
        raise ValueError(f"{kind} {record.get('id', '?')!r} is missing '{key}'")
    return value


def _validated_date(record: dict[str, Any], key: str, kind: str) -> str:
    value = _require(record, key, kind)
    try:
        parse_timestamp(value)
    except ValueError as e:
        raise ValueError(f"{kind} {record.get('id', '?')!r} has invalid '{key}': {e}") from e
    return value


def parse_user(record: dict[str, Any]) -> User:
    """Parse a user record.

    Raises:
        ValueError: If id or name is missing.
    """
    return User(id=UserId(str(_require(record, "id", "User"))), name=str(_require(record, "name", "User")))


def parse_event(record: dict[str, Any]) -> Event:
    """Parse an event record.

    Args:
        record: Raw event dictionary.

    Returns:
        Event with validated dates.

    Raises:
        ValueError: If required fields are missing, dates are invalid, or the
            event ends before it starts.
    """
    start_date = _validated_date(record, "startDate", "Event")
    end_date = record.get("endDate") or None
    if end_date is not None:
        end_date = _validated_date(record, "endDate", "Event")
        if parse_timestamp(end_date) < parse_timestamp(start_date):
            raise ValueError(f"Event {record.get('id', '?')!r} ends before it starts")

    return Event(
        id=EventId(str(_require(record, "id", "Event"))),
        name=str(record.get("name") or "Untitled event"),
        start_date=start_date,
        end_date=end_date,
        participants=tuple(UserId(p) for p in record.get("participants") or []),
    )


def parse_expense(record: dict[str, Any]) -> Expense:
    """Parse an expense record.

    Args:
        record: Raw expense dictionary.

    Returns:
        Expense with validated date and amount.

    Raises:
        ValueError: If required fields are missing, the date is invalid, or
            the amount is negative or not a number.
    """
    raw_amount = _require(record, "amount", "Expense")
    try:
        amount = float(raw_amount)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Expense {record.get('id', '?')!r} has invalid amount {raw_amount!r}") from e
    if amount < 0:
        raise ValueError(f"Expense {record.get('id', '?')!r} has negative amount {amount}")

    event_id = record.get("eventId")
    paid_by = record.get("paidBy")

    return Expense(
        id=ExpenseId(str(_require(record, "id", "Expense"))),
        date=_validated_date(record, "date", "Expense"),
        amount=amount,
        currency=CurrencyCode(str(_require(record, "currency", "Expense")).upper()),
        settled=record.get("settled") is True,
        description=record.get("description"),
        event_id=EventId(event_id) if event_id else None,
        paid_by=UserId(paid_by) if paid_by else None,
        participants=tuple(UserId(p) for p in record.get("participants") or []),
        notes=record.get("notes"),
    )


def parse_ledger(document: dict[str, Any]) -> Ledger:
    """Parse a whole ledger document."""
    return Ledger(
        users=tuple(parse_user(u) for u in document.get("users", [])),
        events=tuple(parse_event(e) for e in document.get("events", [])),
        expenses=tuple(parse_expense(x) for x in document.get("expenses", [])),
    )


def load_ledger(ledger_path: Path | None = None) -> Ledger:
    """Load the ledger from disk.

    Args:
        ledger_path: Path to the ledger file. If None, uses default location.

    Returns:
        Parsed Ledger.

    Raises:
        FileNotFoundError: If the ledger file doesn't exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a record is invalid.
    """
    if ledger_path is None:
        ledger_path = get_ledger_path()

    with open(ledger_path, encoding="utf-8") as f:
        return parse_ledger(json.load(f))


def user_to_record(user: User) -> dict[str, Any]:
    return {"id": user.id, "name": user.name}


def event_to_record(event: Event) -> dict[str, Any]:
    record: dict[str, Any] = {"id": event.id, "name": event.name, "startDate": event.start_date}
    if event.end_date is not None:
        record["endDate"] = event.end_date
    record["participants"] = list(event.participants)
    return record


def expense_to_record(expense: Expense) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": expense.id,
        "date": expense.date,
        "amount": expense.amount,
        "currency": expense.currency,
        "settled": expense.settled,
        "participants": list(expense.participants),
    }
    optional = {
        "description": expense.description,
        "eventId": expense.event_id,
        "paidBy": expense.paid_by,
        "notes": expense.notes,
    }
    record.update({key: value for key, value in optional.items() if value is not None})
    return record


def save_ledger(ledger: Ledger, ledger_path: Path | None = None) -> None:
    """Write the ledger to disk.

    Args:
        ledger: Ledger to save.
        ledger_path: Path to the ledger file. If None, uses default location.
    """
    if ledger_path is None:
        ledger_path = get_ledger_path()

    ledger_path.parent.mkdir(parents=True, exist_ok=True)

    document = {
        "users": [user_to_record(u) for u in ledger.users],
        "events": [event_to_record(e) for e in ledger.events],
        "expenses": [expense_to_record(x) for x in ledger.expenses],
    }
    with open(ledger_path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)


def create_empty_ledger(ledger_path: Path | None = None) -> None:
    """Create an empty ledger file."""
    save_ledger(Ledger(), ledger_path)


def find_event(ledger: Ledger, event_id: str) -> Event:
    """Look up an event by id.

    Raises:
        KeyError: If no event has that id.
    """
    for event in ledger.events:
        if event.id == event_id:
            return event
    raise KeyError(event_id)
