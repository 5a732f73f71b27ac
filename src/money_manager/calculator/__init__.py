"""Trade sizing calculator: formulas, state transitions and session history."""

from money_manager.calculator.errors import (
    CalculatorError,
    EntitlementDeniedError,
    InvalidInputError,
    NotInitializedError,
)
from money_manager.calculator.formulas import resolve, validate_parameters
from money_manager.calculator.history import HistoryManager
from money_manager.calculator.models import (
    PENDING,
    CalculatorState,
    ChangeSummary,
    DerivedCoefficients,
    SessionSnapshot,
    TradeOutcome,
    TradeRow,
    TradingParameters,
)
from money_manager.calculator.session import CalculatorSession

__all__ = [
    "PENDING",
    "CalculatorError",
    "CalculatorSession",
    "CalculatorState",
    "ChangeSummary",
    "DerivedCoefficients",
    "EntitlementDeniedError",
    "HistoryManager",
    "InvalidInputError",
    "NotInitializedError",
    "SessionSnapshot",
    "TradeOutcome",
    "TradeRow",
    "TradingParameters",
    "resolve",
    "validate_parameters",
]
