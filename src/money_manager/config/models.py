"""Configuration models for calculator deployments."""

from __future__ import annotations

from dataclasses import dataclass, field

from money_manager.calculator.models import TradingParameters


@dataclass(frozen=True)
class CalculatorDefaults:
    initial_amount: float = 6500.0
    params: TradingParameters = field(default_factory=TradingParameters)


@dataclass(frozen=True)
class PersistenceConfig:
    state_dir: str = "runtime/sessions"
    debounce_seconds: float = 1.0
    include_history: bool = False


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class LedgerConfig:
    decimals: int = 4
    footer: str = "Money Manager"


@dataclass(frozen=True)
class AppConfig:
    name: str
    version: str
    defaults: CalculatorDefaults = CalculatorDefaults()
    persistence: PersistenceConfig = PersistenceConfig()
    monitoring: MonitoringConfig = MonitoringConfig()
    ledger: LedgerConfig = LedgerConfig()
