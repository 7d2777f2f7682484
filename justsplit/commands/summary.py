"""Summary command for an event's totals and settlement status."""

import sys

from rich.console import Console
from rich.table import Table

from justsplit.commands.admin import find_event_or_exit, load_ledger_or_exit
from justsplit.dates import format_date_range
from justsplit.domain.models import CurrencyCode
from justsplit.domain.summary import EventSummary, filter_event_expenses, summarize_event
from justsplit.exchange import format_amount

console = Console()


def format_progress_display_with_color(percentage: float) -> str:
    """Format a settled percentage, green when fully settled."""
    text = f"{percentage:.0f}%"
    if percentage >= 100:
        return f"[green]{text}[/green]"
    elif percentage >= 50:
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[red]{text}[/red]"


def render_currency_table(summary: EventSummary) -> Table:
    """Build the per-currency totals table."""
    table = Table(title="Totals by currency")
    table.add_column("Currency", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Unsettled", justify="right")

    for currency, total in summary.totals.items():
        unsettled = summary.unsettled.get(CurrencyCode(currency), 0.0)
        unsettled_display = format_amount(unsettled, currency) if unsettled else "[dim]-[/dim]"
        table.add_row(currency, format_amount(total, currency), unsettled_display)

    return table


def summary_command(event_id: str) -> None:
    """Show totals, unsettled amounts, and progress for an event."""
    ledger = load_ledger_or_exit()
    event = find_event_or_exit(ledger, event_id)

    try:
        summary = summarize_event(filter_event_expenses(ledger.expenses, event.id), event)
    except ValueError as e:
        console.print(f"[red]Invalid date: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"\n[bold]{event.name}[/bold] [dim]({format_date_range(event.start_date, event.end_date)})[/dim]")
    console.print(f"  Event progress: {summary.progress:.0f}%")
    console.print(
        f"  Settled: {summary.settled_count}/{summary.expense_count} "
        f"({format_progress_display_with_color(summary.settled_percentage)})"
    )

    if not summary.totals:
        console.print("\n[yellow]No expenses for this event[/yellow]")
        return

    console.print()
    console.print(render_currency_table(summary))
