"""Storage layer - ledger files and CSV import/export.

This module re-exports the public storage functions for easy importing.
"""

from justsplit.store.csv_io import expenses_to_csv, import_expenses_csv, write_expenses_csv
from justsplit.store.ledger import (
    Ledger,
    create_empty_ledger,
    find_event,
    get_ledger_path,
    load_ledger,
    save_ledger,
)

__all__ = [
    # Ledger
    "Ledger",
    "create_empty_ledger",
    "find_event",
    "get_ledger_path",
    "load_ledger",
    "save_ledger",
    # CSV
    "expenses_to_csv",
    "import_expenses_csv",
    "write_expenses_csv",
]
