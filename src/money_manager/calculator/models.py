"""Data models for the trade sizing calculator."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

PENDING = "-"

RowResult = Union[str, float]


class TradeOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"


@dataclass(frozen=True)
class TradingParameters:
    n_trades: int = 7
    loss_capture_pct: float = 0.5
    profit_capture_pct: float = 0.8
    leverage: float = 50.0
    fee_pct: float = 0.12

    @property
    def l(self) -> float:  # noqa: E743
        return self.loss_capture_pct

    @property
    def m(self) -> float:
        return self.profit_capture_pct

    @property
    def t(self) -> float:
        return self.leverage

    @property
    def f(self) -> float:
        return self.fee_pct

    def with_changes(self, **changes) -> "TradingParameters":
        return replace(self, **changes)


@dataclass(frozen=True)
class DerivedCoefficients:
    divisor: float
    p: float  # loss % per trade including fees
    q: float  # profit % per trade excluding fees


@dataclass(frozen=True)
class TradeRow:
    serial: int
    trade_amount: float
    result: RowResult
    total: float
    final_amount: float

    @property
    def is_pending(self) -> bool:
        return self.result == PENDING


@dataclass(frozen=True)
class ChangeSummary:
    percent: float
    amount: float


@dataclass
class CalculatorState:
    initial_amount: float
    params: TradingParameters = field(default_factory=TradingParameters)
    total_result: float = 0.0
    current_trade: float = 0.0
    win_baseline: float = 0.0
    loss_accumulator: float = 0.0
    trade_count: int = 0
    rows: list[TradeRow] = field(default_factory=list)

    @property
    def initialized(self) -> bool:
        return bool(self.rows)

    def clone(self) -> "CalculatorState":
        # Rows and parameters are frozen, so a fresh list is enough to detach.
        return replace(self, rows=list(self.rows))


@dataclass(frozen=True)
class SessionSnapshot:
    state: CalculatorState
    history: tuple[CalculatorState, ...] = ()
    redo_stack: tuple[CalculatorState, ...] = ()
