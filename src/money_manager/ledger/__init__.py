"""Ledger projections for display and export."""

from money_manager.ledger.export import COLUMNS, HEADERS, ledger_stats, ledger_table, write_ledger_csv
from money_manager.ledger.models import LedgerStats

__all__ = [
    "COLUMNS",
    "HEADERS",
    "LedgerStats",
    "ledger_stats",
    "ledger_table",
    "write_ledger_csv",
]
