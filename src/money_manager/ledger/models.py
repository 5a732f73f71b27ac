"""Read-only views over the trade ledger."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerStats:
    total: int
    wins: int
    losses: int
    win_percent: float
    loss_percent: float
