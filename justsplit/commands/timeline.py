"""Timeline command for showing an event's expenses along its date range."""

import sys

from rich.console import Console
from rich.table import Table

from justsplit.commands.admin import find_event_or_exit, load_ledger_or_exit
from justsplit.dates import format_date_range, format_timeline_date
from justsplit.domain.models import PositionedGroup
from justsplit.domain.summary import filter_event_expenses
from justsplit.domain.timeline import OVERFLOW_SPAN, group_nearby_expenses
from justsplit.exchange import format_amount

console = Console()

AXIS_MIN = -OVERFLOW_SPAN
AXIS_MAX = 100 + OVERFLOW_SPAN


def axis_column(position: float, width: int) -> int:
    """Map a timeline position to a character column.

    Args:
        position: Timeline position (-20 to 120).
        width: Axis width in characters.

    Returns:
        Column index between 0 and width - 1.
    """
    fraction = (position - AXIS_MIN) / (AXIS_MAX - AXIS_MIN)
    return max(0, min(width - 1, int(fraction * (width - 1) + 0.5)))


def render_axis(groups: list[PositionedGroup], width: int = 70) -> str:
    """Draw the groups as markers on a one-line text axis.

    The event start and end are drawn as "|". A group with one expense is
    drawn as "●"; larger groups show their size (capped at 9).

    Args:
        groups: Groups to draw.
        width: Axis width in characters.

    Returns:
        Axis string of exactly width characters.
    """
    cells = ["─"] * width
    cells[axis_column(0, width)] = "|"
    cells[axis_column(100, width)] = "|"

    for group in groups:
        size = len(group.expenses)
        cells[axis_column(group.position, width)] = "●" if size == 1 else str(min(size, 9))

    return "".join(cells)


def describe_group(group: PositionedGroup) -> tuple[str, str, str]:
    """Build the date, description, and amount cells for a group row."""
    dates = sorted({format_timeline_date(expense.date) for expense in group.expenses})
    descriptions = ", ".join(expense.description or "[dim]-[/dim]" for expense in group.expenses)
    amounts = ", ".join(format_amount(expense.amount, expense.currency) for expense in group.expenses)
    return ", ".join(dates), descriptions, amounts


def timeline_command(event_id: str, width: int = 70) -> None:
    """Show an event's expenses grouped by timeline position."""
    ledger = load_ledger_or_exit()
    event = find_event_or_exit(ledger, event_id)
    expenses = filter_event_expenses(ledger.expenses, event.id)

    try:
        groups = group_nearby_expenses(expenses, event)
    except ValueError as e:
        console.print(f"[red]Invalid date: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"\n[bold]{event.name}[/bold] [dim]({format_date_range(event.start_date, event.end_date)})[/dim]")

    if not groups:
        console.print("[yellow]No expenses for this event[/yellow]")
        return

    console.print(f"\n  {render_axis(groups, width)}\n")

    table = Table(title=f"Timeline ({len(expenses)} expenses in {len(groups)} groups)")
    table.add_column("Position", justify="right", style="cyan")
    table.add_column("Date", style="white")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Settled", justify="center")

    for group in groups:
        dates, descriptions, amounts = describe_group(group)
        settled = sum(1 for expense in group.expenses if expense.settled)
        marker = "✓" if settled == len(group.expenses) else f"{settled}/{len(group.expenses)}"
        table.add_row(f"{group.position:.1f}%", dates, descriptions, amounts, marker)

    console.print(table)
