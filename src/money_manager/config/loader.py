"""Load calculator configuration files."""

from __future__ import annotations

import hashlib
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from money_manager.calculator.models import TradingParameters
from money_manager.config.models import (
    AppConfig,
    CalculatorDefaults,
    LedgerConfig,
    MonitoringConfig,
    PersistenceConfig,
)

# Short names used by stored calculator settings.
_PARAM_ALIASES = {
    "nTrades": "n_trades",
    "l": "loss_capture_pct",
    "m": "profit_capture_pct",
    "t": "leverage",
    "f": "fee_pct",
    "initialAmount": "initial_amount",
}


def load_config(path: str | Path) -> AppConfig:
    path = Path(path)
    data = _load_yaml(path)

    return AppConfig(
        name=str(_require(data, "name")),
        version=str(_require(data, "version")),
        defaults=_parse_defaults(data.get("defaults", {})),
        persistence=_parse_persistence(data.get("persistence", {})),
        monitoring=_parse_monitoring(data.get("monitoring", {})),
        ledger=_parse_ledger(data.get("ledger", {})),
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _section(data: Any, name: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config section {name} must be a mapping")
    return data


def _parse_defaults(data: Any) -> CalculatorDefaults:
    data = {_PARAM_ALIASES.get(key, key): value for key, value in _section(data, "defaults").items()}
    fallback = TradingParameters()
    try:
        n_trades = int(data.get("n_trades", fallback.n_trades))
        params = TradingParameters(
            n_trades=n_trades,
            loss_capture_pct=float(data.get("loss_capture_pct", fallback.loss_capture_pct)),
            profit_capture_pct=float(data.get("profit_capture_pct", fallback.profit_capture_pct)),
            leverage=float(data.get("leverage", fallback.leverage)),
            fee_pct=float(data.get("fee_pct", fallback.fee_pct)),
        )
        initial_amount = float(data.get("initial_amount", CalculatorDefaults.initial_amount))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid calculator defaults: {exc}") from exc
    if n_trades < 1:
        raise ValueError(f"Invalid n_trades: {n_trades}")
    if initial_amount <= 0:
        raise ValueError(f"Invalid initial_amount: {initial_amount}")
    return CalculatorDefaults(initial_amount=initial_amount, params=params)


def _parse_persistence(data: Any) -> PersistenceConfig:
    data = _section(data, "persistence")
    debounce_seconds = float(data.get("debounce_seconds", 1.0))
    if debounce_seconds < 0:
        raise ValueError(f"Invalid debounce_seconds: {debounce_seconds}")
    return PersistenceConfig(
        state_dir=str(data.get("state_dir", "runtime/sessions")),
        debounce_seconds=debounce_seconds,
        include_history=bool(data.get("include_history", False)),
    )


def _parse_monitoring(data: Any) -> MonitoringConfig:
    data = _section(data, "monitoring")
    return MonitoringConfig(
        audit_log_path=str(data.get("audit_log_path", "runtime/audit.log")),
    )


def _parse_ledger(data: Any) -> LedgerConfig:
    data = _section(data, "ledger")
    return LedgerConfig(
        decimals=int(data.get("decimals", 4)),
        footer=str(data.get("footer", "Money Manager")),
    )


def serialize_config(config: AppConfig) -> dict[str, Any]:
    return asdict(config)
