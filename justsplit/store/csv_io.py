"""CSV import and export of expenses."""

import csv
import io
import uuid
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from justsplit.dates import parse_timestamp
from justsplit.domain.imports import CsvMapping, analyze_csv_columns, parse_csv_expense
from justsplit.domain.models import CurrencyCode, Event, EventId, Expense, ExpenseId, User

EXPORT_HEADERS = [
    "Date",
    "Description",
    "Amount",
    "Currency",
    "Paid By",
    "Participants",
    "Event",
    "Status",
    "Notes",
]


def normalize_csv_date(raw_date: str) -> str:
    """Normalize a CSV date string to ISO format (YYYY-MM-DD).

    ISO dates (including our own exports) are read as-is. Anything else goes
    through pandas.to_datetime, day first, which handles European, American,
    and various other bank formats.

    Args:
        raw_date: Raw date string from CSV.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If date cannot be parsed.
    """
    try:
        return parse_timestamp(raw_date).date().isoformat()
    except ValueError:
        pass

    # Non-ISO only: dayfirst=True swaps day and month in ISO strings
    try:
        parsed_date = pd.to_datetime(raw_date, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e

    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def import_expenses_csv(
    csv_path: Path,
    event_id: EventId | None,
    default_currency: CurrencyCode,
) -> tuple[list[Expense], int]:
    """Read expenses from a CSV file.

    Args:
        csv_path: Path to the CSV file.
        event_id: Event to attach the expenses to.
        default_currency: Currency for rows without a currency column.

    Returns:
        Tuple of (expenses, skipped_row_count). Rows without a usable date or
        amount are skipped.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If no date or amount column can be found.
    """
    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        mapping: CsvMapping = analyze_csv_columns(list(reader.fieldnames or []))

        if not mapping["date_column"] or not mapping["amount_column"]:
            raise ValueError(f"Could not find date and amount columns in {csv_path.name}")

        expenses: list[Expense] = []
        skipped = 0
        for row in reader:
            raw_date = (row.get(mapping["date_column"]) or "").strip()
            if raw_date:
                try:
                    row[mapping["date_column"]] = normalize_csv_date(raw_date)
                except ValueError:
                    skipped += 1
                    continue

            expense = parse_csv_expense(row, mapping, ExpenseId(str(uuid.uuid4())), event_id, default_currency)
            if expense is None:
                skipped += 1
            else:
                expenses.append(expense)

    return expenses, skipped


def expenses_to_csv(
    expenses: Sequence[Expense],
    users: Sequence[User],
    events: Sequence[Event],
) -> str:
    """Convert expenses to CSV text.

    Every data cell is quoted. Unknown users show as "Unknown"; expenses
    without an event show "No Event" and unknown events "Unknown Event".

    Args:
        expenses: Expenses to export.
        users: Users for resolving payer and participant names.
        events: Events for resolving event names.

    Returns:
        CSV text with a header line.
    """
    user_names = {user.id: user.name for user in users}
    event_names = {event.id: event.name for event in events}

    output = io.StringIO()
    output.write(",".join(EXPORT_HEADERS) + "\n")
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for expense in expenses:
        if expense.event_id is None:
            event_name = "No Event"
        else:
            event_name = event_names.get(expense.event_id, "Unknown Event")

        writer.writerow(
            [
                parse_timestamp(expense.date).date().isoformat(),
                expense.description or "",
                f"{expense.amount:.2f}",
                expense.currency,
                user_names.get(expense.paid_by, "Unknown") if expense.paid_by else "Unknown",
                ", ".join(user_names.get(p, "Unknown") for p in expense.participants),
                event_name,
                "Settled" if expense.settled else "Unsettled",
                expense.notes or "",
            ]
        )

    return output.getvalue().removesuffix("\n")


def write_expenses_csv(csv_text: str, output_path: Path) -> None:
    """Write CSV text to a file, creating parent directories."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(csv_text + "\n", encoding="utf-8")
