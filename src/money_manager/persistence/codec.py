"""Convert calculator snapshots to and from JSON-compatible documents."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from money_manager.calculator.models import (
    PENDING,
    CalculatorState,
    SessionSnapshot,
    TradeRow,
    TradingParameters,
)


def _finite(value: float, key: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot persist non-finite value for {key}: {value}")
    return value


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required snapshot key: {key}")
    return data[key]


def _whole_number(value: Any, key: str) -> int:
    number = float(value)
    if isinstance(value, bool) or not math.isfinite(number) or not number.is_integer():
        raise ValueError(f"Snapshot key {key} must be a whole number, got {value!r}")
    return int(number)


def encode_row(row: TradeRow) -> dict[str, Any]:
    result = row.result if row.result == PENDING else _finite(row.result, "result")
    return {
        "sl": row.serial,
        "tradeAmount": _finite(row.trade_amount, "tradeAmount"),
        "result": result,
        "total": _finite(row.total, "total"),
        "finalAmount": _finite(row.final_amount, "finalAmount"),
    }


def decode_row(data: dict[str, Any]) -> TradeRow:
    result = _require(data, "result")
    if result != PENDING:
        result = float(result)
    return TradeRow(
        serial=int(_require(data, "sl")),
        trade_amount=float(_require(data, "tradeAmount")),
        result=result,
        total=float(_require(data, "total")),
        final_amount=float(_require(data, "finalAmount")),
    )


def encode_state(state: CalculatorState) -> dict[str, Any]:
    params = state.params
    return {
        "initialAmount": _finite(state.initial_amount, "initialAmount"),
        "nTrades": params.n_trades,
        "l": params.loss_capture_pct,
        "m": params.profit_capture_pct,
        "t": params.leverage,
        "f": params.fee_pct,
        "totalResult": _finite(state.total_result, "totalResult"),
        "currentTrade": _finite(state.current_trade, "currentTrade"),
        "winBaseline": _finite(state.win_baseline, "winBaseline"),
        "lossAccumulator": _finite(state.loss_accumulator, "lossAccumulator"),
        "tradeCount": state.trade_count,
        "rows": [encode_row(row) for row in state.rows],
    }


def decode_state(data: dict[str, Any]) -> CalculatorState:
    if not isinstance(data, dict):
        raise ValueError("Snapshot state must be a mapping")
    defaults = TradingParameters()
    params = TradingParameters(
        n_trades=_whole_number(data.get("nTrades", defaults.n_trades), "nTrades"),
        loss_capture_pct=float(data.get("l", defaults.loss_capture_pct)),
        profit_capture_pct=float(data.get("m", defaults.profit_capture_pct)),
        leverage=float(data.get("t", defaults.leverage)),
        fee_pct=float(data.get("f", defaults.fee_pct)),
    )
    return CalculatorState(
        initial_amount=float(_require(data, "initialAmount")),
        params=params,
        total_result=float(data.get("totalResult", 0.0)),
        current_trade=float(data.get("currentTrade", 0.0)),
        win_baseline=float(data.get("winBaseline", 0.0)),
        loss_accumulator=float(data.get("lossAccumulator", 0.0)),
        trade_count=int(data.get("tradeCount", 0)),
        rows=[decode_row(row) for row in data.get("rows", [])],
    )


def encode_snapshot(
    snapshot: SessionSnapshot,
    include_history: bool = False,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    payload = encode_state(snapshot.state)
    if include_history:
        payload["history"] = [encode_state(state) for state in snapshot.history]
        payload["redoStack"] = [encode_state(state) for state in snapshot.redo_stack]
    payload["timestamp"] = (now or datetime.now(timezone.utc)).isoformat()
    return payload


def decode_snapshot(data: dict[str, Any]) -> SessionSnapshot:
    state = decode_state(data)
    history = tuple(decode_state(item) for item in data.get("history") or [])
    redo_stack = tuple(decode_state(item) for item in data.get("redoStack") or [])
    return SessionSnapshot(state=state, history=history, redo_stack=redo_stack)
