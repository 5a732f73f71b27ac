"""State transitions for a single simulated trade."""

from __future__ import annotations

from dataclasses import replace

from money_manager.calculator import formulas
from money_manager.calculator.errors import InvalidInputError, NotInitializedError
from money_manager.calculator.models import (
    PENDING,
    CalculatorState,
    DerivedCoefficients,
    TradeOutcome,
    TradeRow,
    TradingParameters,
)

ROW_DECIMALS = 4


def _round(value: float) -> float:
    return round(value, ROW_DECIMALS)


def start_state(
    initial_amount: float,
    params: TradingParameters,
    coefficients: DerivedCoefficients,
) -> CalculatorState:
    current_trade = formulas.initial_trade(initial_amount, coefficients.divisor)
    first_row = TradeRow(
        serial=1,
        trade_amount=current_trade,
        result=PENDING,
        total=0.0,
        final_amount=initial_amount,
    )
    return CalculatorState(
        initial_amount=initial_amount,
        params=params,
        total_result=0.0,
        current_trade=current_trade,
        win_baseline=current_trade,
        loss_accumulator=0.0,
        trade_count=1,
        rows=[first_row],
    )


def _settle(state: CalculatorState, result: float, next_trade: float) -> None:
    # Rows carry rounded presentation values; the accumulators stay exact.
    state.total_result += result
    final_amount = state.initial_amount + state.total_result
    state.rows[-1] = replace(
        state.rows[-1],
        result=_round(result),
        total=_round(state.total_result),
        final_amount=_round(final_amount),
    )
    state.trade_count += 1
    state.current_trade = next_trade
    state.rows.append(
        TradeRow(
            serial=state.trade_count,
            trade_amount=next_trade,
            result=PENDING,
            total=_round(state.total_result),
            final_amount=_round(final_amount),
        )
    )


def _win_in_place(state: CalculatorState, coefficients: DerivedCoefficients) -> None:
    result = formulas.win_result(state.current_trade, coefficients.q)
    final_amount = state.initial_amount + (state.total_result + result)
    next_trade = formulas.next_trade_after_win(final_amount, coefficients.divisor)
    _settle(state, result, next_trade)
    state.win_baseline = next_trade
    state.loss_accumulator = 0.0


def _loss_in_place(state: CalculatorState, coefficients: DerivedCoefficients) -> None:
    result = formulas.loss_result(state.current_trade, coefficients.p)
    # The losing size joins the accumulator before the recovery size is computed.
    state.loss_accumulator += state.current_trade
    next_trade = formulas.next_trade_after_loss(
        state.win_baseline, state.loss_accumulator, coefficients.p, coefficients.q
    )
    _settle(state, result, next_trade)


def apply_win(state: CalculatorState, coefficients: DerivedCoefficients) -> CalculatorState:
    updated = state.clone()
    _win_in_place(updated, coefficients)
    return updated


def apply_loss(state: CalculatorState, coefficients: DerivedCoefficients) -> CalculatorState:
    updated = state.clone()
    _loss_in_place(updated, coefficients)
    return updated


def parse_outcome(outcome: TradeOutcome | str) -> TradeOutcome:
    try:
        return TradeOutcome(outcome)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown trade outcome: {outcome!r}") from exc


def apply_outcome(
    state: CalculatorState,
    outcome: TradeOutcome | str,
    coefficients: DerivedCoefficients,
) -> CalculatorState:
    if not state.initialized:
        raise NotInitializedError("Calculator has not been initialized")
    if parse_outcome(outcome) == TradeOutcome.WIN:
        return apply_win(state, coefficients)
    return apply_loss(state, coefficients)


def run_win_streak(
    initial_amount: float,
    params: TradingParameters,
    coefficients: DerivedCoefficients,
    target_serial: int,
) -> CalculatorState:
    """Initialize and win every trade until the pending row is ``target_serial``."""
    state = start_state(initial_amount, params, coefficients)
    for _ in range(2, target_serial + 1):
        _win_in_place(state, coefficients)
    return state
