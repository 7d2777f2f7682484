"""Settle command for working out who pays whom."""

import sys

from rich.console import Console
from rich.table import Table

from justsplit.commands.admin import find_event_or_exit, load_ledger_or_exit
from justsplit.config import get_setting
from justsplit.domain.models import CurrencyCode, EventId
from justsplit.domain.settlements import calculate_settlements
from justsplit.exchange import SUPPORTED_CURRENCIES, ExchangeRateCache, format_amount

console = Console()


def settle_command(event_id: str | None = None, currency: str | None = None, offline: bool = False) -> None:
    """Show the payments that settle outstanding expenses."""
    ledger = load_ledger_or_exit()

    scope = EventId(find_event_or_exit(ledger, event_id).id) if event_id else None
    target = CurrencyCode((currency or get_setting("settlement_currency")).upper())

    if target not in SUPPORTED_CURRENCIES:
        console.print(f"[yellow]Warning: {target} is not a supported currency, rates may fall back to 1:1[/yellow]")

    rates = ExchangeRateCache(api_url=get_setting("exchange_api_url"), offline=offline)

    try:
        settlements = calculate_settlements(
            ledger.expenses,
            ledger.users,
            event_id=scope,
            convert=rates.convert,
            currency=target,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]", style="bold")
        sys.exit(1)

    if not settlements:
        console.print("[green]Everyone is settled up![/green]")
        return

    names = {user.id: user.name for user in ledger.users}

    table = Table(title=f"Settlements in {target}")
    table.add_column("From", style="red")
    table.add_column("To", style="green")
    table.add_column("Amount", justify="right")
    table.add_column("Expenses", style="dim")

    for settlement in settlements:
        table.add_row(
            names.get(settlement.from_user, settlement.from_user),
            names.get(settlement.to_user, settlement.to_user),
            format_amount(settlement.amount, target),
            ", ".join(settlement.expense_ids) or "-",
        )

    console.print(table)
    if offline:
        console.print("[dim]Using approximate offline exchange rates[/dim]")
