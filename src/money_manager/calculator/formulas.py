"""Position sizing formulas.

Every function here is pure and operates on plain floats. The arithmetic
order is fixed so results are reproducible bit for bit: ``q`` is computed once
and reused inside the divisor, and nothing is rounded between steps.
"""

from __future__ import annotations

import math

from money_manager.calculator.errors import InvalidInputError
from money_manager.calculator.models import ChangeSummary, DerivedCoefficients, TradingParameters


def _div(numerator: float, denominator: float) -> float:
    # IEEE-754 division: x/0 is a signed infinity and 0/0 is nan.
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and int(exponent) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        return math.nan


def base_ratio(params: TradingParameters) -> float:
    return _div(params.l + params.m, params.m - params.f)


def calculate_p(params: TradingParameters) -> float:
    return (params.l + params.f) * params.t


def calculate_q(params: TradingParameters) -> float:
    return (params.m - params.f) * params.t


def calculate_divisor(params: TradingParameters, q: float | None = None) -> float:
    if q is None:
        q = calculate_q(params)
    return _pow(base_ratio(params), params.n_trades - 1) * (1 + q / 100) - q / 100


def resolve(params: TradingParameters) -> DerivedCoefficients:
    """Derive (divisor, p, q) from the five trading parameters.

    Never raises: degenerate inputs such as ``m == f`` produce ``inf`` or
    ``nan`` in the result. Use :func:`validate_parameters` to reject them.
    """
    q = calculate_q(params)
    p = calculate_p(params)
    divisor = calculate_divisor(params, q)
    return DerivedCoefficients(divisor=divisor, p=p, q=q)


def validate_parameters(params: TradingParameters) -> DerivedCoefficients:
    values = {
        "n_trades": params.n_trades,
        "loss_capture_pct": params.loss_capture_pct,
        "profit_capture_pct": params.profit_capture_pct,
        "leverage": params.leverage,
        "fee_pct": params.fee_pct,
    }
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
    if params.n_trades < 1 or int(params.n_trades) != params.n_trades:
        raise InvalidInputError(f"n_trades must be a positive integer, got {params.n_trades!r}")
    if params.m == params.f:
        raise InvalidInputError("profit_capture_pct must differ from fee_pct")

    coefficients = resolve(params)
    if coefficients.q == 0:
        raise InvalidInputError("effective profit rate q is zero")
    for name in ("divisor", "p", "q"):
        value = getattr(coefficients, name)
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} is not finite for these parameters")
    if coefficients.divisor == 0:
        raise InvalidInputError("divisor is zero for these parameters")
    return coefficients


def initial_trade(initial_amount: float, divisor: float) -> float:
    return _div(initial_amount, divisor)


def win_result(current_trade: float, q: float) -> float:
    return current_trade * (q / 100)


def next_trade_after_win(final_amount: float, divisor: float) -> float:
    return _div(final_amount, divisor)


def loss_result(current_trade: float, p: float) -> float:
    return -current_trade * (p / 100)


def next_trade_after_loss(win_baseline: float, loss_accumulator: float, p: float, q: float) -> float:
    return win_baseline + loss_accumulator * _div(p, q)


def change(final_amount: float, initial_amount: float) -> ChangeSummary:
    percent = _div(final_amount - initial_amount, initial_amount) * 100
    return ChangeSummary(percent=percent, amount=final_amount - initial_amount)
