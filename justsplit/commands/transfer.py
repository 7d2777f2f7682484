"""Import and export commands for moving expenses in and out as CSV."""

import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console

from justsplit.commands.admin import find_event_or_exit, load_ledger_or_exit
from justsplit.config import get_setting, resolve_ledger_path
from justsplit.domain.models import CurrencyCode, EventId
from justsplit.domain.summary import filter_event_expenses
from justsplit.store.csv_io import expenses_to_csv, import_expenses_csv, write_expenses_csv
from justsplit.store.ledger import save_ledger

console = Console()


def import_command(csv_path: str, event_id: str, currency: str | None = None) -> None:
    """Append expenses from a CSV file to an event."""
    ledger_path = resolve_ledger_path()
    ledger = load_ledger_or_exit(ledger_path)
    event = find_event_or_exit(ledger, event_id)
    default_currency = CurrencyCode((currency or get_setting("settlement_currency")).upper())

    path = Path(csv_path).expanduser()
    try:
        expenses, skipped = import_expenses_csv(path, EventId(event.id), default_currency)
    except FileNotFoundError:
        console.print(f"[red]CSV file not found: {path}[/red]", style="bold")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Import failed: {e}[/red]", style="bold")
        sys.exit(1)

    try:
        save_ledger(replace(ledger, expenses=ledger.expenses + tuple(expenses)), ledger_path)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Imported {len(expenses)} expenses into {event.name}")
    if skipped:
        console.print(f"[yellow]Skipped {skipped} rows without a usable date or amount[/yellow]")


def export_command(output: str, event_id: str | None = None) -> None:
    """Export expenses to a CSV file."""
    ledger = load_ledger_or_exit()

    expenses = list(ledger.expenses)
    if event_id:
        expenses = filter_event_expenses(expenses, EventId(find_event_or_exit(ledger, event_id).id))

    output_path = Path(output).expanduser()
    try:
        write_expenses_csv(expenses_to_csv(expenses, ledger.users, ledger.events), output_path)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {len(expenses)} expenses to {output_path}")
