"""Config loading."""

from money_manager.config.loader import compute_config_hash, load_config, serialize_config
from money_manager.config.models import (
    AppConfig,
    CalculatorDefaults,
    LedgerConfig,
    MonitoringConfig,
    PersistenceConfig,
)

__all__ = [
    "AppConfig",
    "CalculatorDefaults",
    "LedgerConfig",
    "MonitoringConfig",
    "PersistenceConfig",
    "compute_config_hash",
    "load_config",
    "serialize_config",
]
