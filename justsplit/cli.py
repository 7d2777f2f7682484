"""CLI entry point for justsplit."""

import typer

from justsplit.commands.admin import events_command, init_command
from justsplit.commands.settle import settle_command
from justsplit.commands.summary import summary_command
from justsplit.commands.timeline import timeline_command
from justsplit.commands.transfer import export_command, import_command

app = typer.Typer(
    name="justsplit",
    help="JustSplit - see when your group spent money and who owes whom",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """JustSplit - see when your group spent money and who owes whom."""
    pass


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing ledger and config"),
) -> None:
    """Initialize justsplit ledger and configuration."""
    init_command(force)


@app.command(name="events")
def events() -> None:
    """List your events."""
    events_command()


@app.command()
def timeline(
    event_id: str,
    width: int = typer.Option(70, "--width", "-w", min=20, help="Width of the timeline axis in characters"),
) -> None:
    """Show an event's expenses grouped along its timeline."""
    timeline_command(event_id, width)


@app.command()
def summary(event_id: str) -> None:
    """Show totals and settlement status for an event."""
    summary_command(event_id)


@app.command()
def settle(
    event_id: str = typer.Argument(None, help="Only settle this event's expenses"),
    currency: str = typer.Option(None, "--currency", "-c", help="Currency to settle in (default from config)"),
    offline: bool = typer.Option(False, "--offline", help="Use approximate built-in exchange rates"),
) -> None:
    """Work out who pays whom to settle up."""
    settle_command(event_id, currency, offline)


@app.command(name="import")
def import_csv(
    csv_path: str,
    event_id: str = typer.Option(..., "--event", "-e", help="Event to add the expenses to"),
    currency: str = typer.Option(None, "--currency", "-c", help="Currency for rows without one"),
) -> None:
    """Import expenses from a CSV file."""
    import_command(csv_path, event_id, currency)


@app.command(name="export")
def export(
    output: str,
    event_id: str = typer.Option(None, "--event", "-e", help="Only export this event's expenses"),
) -> None:
    """Export expenses to a CSV file."""
    export_command(output, event_id)


if __name__ == "__main__":
    app()
