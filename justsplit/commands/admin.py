"""Admin commands for init and listing events."""

import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from justsplit.config import create_default_config, get_config_path, resolve_ledger_path
from justsplit.dates import format_date_range
from justsplit.domain.models import Event
from justsplit.domain.summary import filter_event_expenses
from justsplit.domain.timeline import calculate_timeline_progress
from justsplit.store.ledger import Ledger, create_empty_ledger, find_event, load_ledger

console = Console()


def load_ledger_or_exit(ledger_path: Path | None = None) -> Ledger:
    """Load the ledger, printing an error and exiting if it can't be read."""
    if ledger_path is None:
        ledger_path = resolve_ledger_path()

    try:
        return load_ledger(ledger_path)
    except FileNotFoundError:
        console.print("[red]Ledger not found. Run 'justsplit init' first.[/red]", style="bold")
        console.print(f"[dim]Expected location: {ledger_path}[/dim]")
        sys.exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Ledger is not valid JSON: {e}[/red]", style="bold")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid ledger: {e}[/red]", style="bold")
        sys.exit(1)


def find_event_or_exit(ledger: Ledger, event_id: str) -> Event:
    """Look up an event, printing the known ids and exiting if it is missing."""
    try:
        return find_event(ledger, event_id)
    except KeyError:
        console.print(f"[red]Event '{event_id}' not found.[/red]", style="bold")
        if ledger.events:
            console.print("\n[yellow]Available events:[/yellow]")
            for event in ledger.events:
                console.print(f"  • {event.id} ({event.name})")
        sys.exit(1)


def run_full_init(ledger_path: Path, config_path: Path) -> None:
    """Create a new ledger and config."""
    console.print(f"[cyan]Creating ledger at {ledger_path}...[/cyan]")
    create_empty_ledger(ledger_path)
    console.print("[green]✓[/green] Ledger created")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Ledger: {ledger_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize justsplit ledger and configuration."""
    config_path = get_config_path()
    ledger_path = resolve_ledger_path(config_path)

    ledger_exists = ledger_path.exists()
    config_exists = config_path.exists()

    # Guard: refuse to overwrite without force flag
    if not force and (ledger_exists or config_exists):
        console.print("[red]Initialization failed:[/red]", style="bold")
        if ledger_exists:
            console.print(f"  Ledger already exists: {ledger_path}")
        if config_exists:
            console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'justsplit init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        run_full_init(ledger_path, config_path)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def events_command() -> None:
    """List events with their date range and progress."""
    ledger = load_ledger_or_exit()

    if not ledger.events:
        console.print("[yellow]No events found[/yellow]")
        return

    table = Table(title=f"Events ({len(ledger.events)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Dates", style="white")
    table.add_column("Expenses", justify="right")
    table.add_column("Progress", justify="right")

    for event in ledger.events:
        progress = calculate_timeline_progress(event.start_date, event.end_date)
        count = len(filter_event_expenses(ledger.expenses, event.id))
        table.add_row(
            event.id,
            event.name,
            format_date_range(event.start_date, event.end_date),
            str(count),
            f"{progress:.0f}%",
        )

    console.print(table)
