"""Tabular projection and CSV export of ledger rows."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence

from money_manager.ledger.models import LedgerStats

if TYPE_CHECKING:
    from money_manager.calculator.models import TradeRow

COLUMNS = ("serial", "trade_amount", "result", "total", "final_amount")
HEADERS = ("Sl No", "Trade Amount", "Result", "Total", "Final Amount")


def _numeric_result(row: TradeRow) -> Optional[float]:
    if row.is_pending:
        return None
    try:
        return float(row.result)
    except (TypeError, ValueError):
        return None


def ledger_stats(rows: Sequence[TradeRow]) -> LedgerStats:
    """Count resolved trades; the trailing pending row is never counted."""
    wins = 0
    losses = 0
    for row in rows[:-1]:
        result = _numeric_result(row)
        if result is None:
            continue
        if result > 0:
            wins += 1
        elif result < 0:
            losses += 1

    total = len(rows) - 1 if rows else 0
    win_percent = wins / total * 100 if total > 0 else 0.0
    loss_percent = losses / total * 100 if total > 0 else 0.0
    return LedgerStats(
        total=total,
        wins=wins,
        losses=losses,
        win_percent=win_percent,
        loss_percent=loss_percent,
    )


def _format(value: Any, decimals: int) -> str:
    if isinstance(value, str):
        return value
    return f"{value:.{decimals}f}"


def ledger_table(rows: Iterable[TradeRow], decimals: int = 4) -> list[dict[str, str]]:
    table = []
    for row in rows:
        table.append(
            {
                "serial": str(row.serial),
                "trade_amount": _format(row.trade_amount, decimals),
                "result": _format(row.result, decimals),
                "total": _format(row.total, decimals),
                "final_amount": _format(row.final_amount, decimals),
            }
        )
    return table


def write_ledger_csv(
    path: str | Path,
    rows: Iterable[TradeRow],
    footer: Optional[str] = None,
    decimals: int = 4,
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADERS)
        for entry in ledger_table(rows, decimals):
            writer.writerow([entry[column] for column in COLUMNS])
        if footer:
            writer.writerow([footer])
    return path
