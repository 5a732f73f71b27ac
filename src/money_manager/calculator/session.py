"""Calculator session: the live state machine plus its undo/redo history."""

from __future__ import annotations

import math
from typing import Callable, Optional

from money_manager.calculator import engine, formulas
from money_manager.calculator.errors import (
    EntitlementDeniedError,
    InvalidInputError,
    NotInitializedError,
)
from money_manager.calculator.history import HistoryManager
from money_manager.calculator.models import (
    CalculatorState,
    ChangeSummary,
    DerivedCoefficients,
    SessionSnapshot,
    TradeOutcome,
    TradingParameters,
)
from money_manager.entitlement.checks import Entitlement
from money_manager.ledger.export import ledger_stats
from money_manager.ledger.models import LedgerStats

Listener = Callable[[str, SessionSnapshot], None]

DEFAULT_INITIAL_AMOUNT = 6500.0


def validate_amount(value: float, name: str = "initial_amount") -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be a finite positive number, got {value!r}")
    return float(value)


def validate_serial(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInputError(f"target_serial must be an integer >= 1, got {value!r}")
    return value


class CalculatorSession:
    """Owns one calculator's live state.

    Every mutating call either commits a snapshot to history or raises before
    touching anything. Listeners are called synchronously after each committed
    change with an independent snapshot of the session; an exception from a
    listener reaches the caller, but the change it was notified of stays
    committed.
    """

    def __init__(
        self,
        params: Optional[TradingParameters] = None,
        initial_amount: float = DEFAULT_INITIAL_AMOUNT,
        entitlement: Optional[Entitlement] = None,
        audit_log: Optional[object] = None,
        monitor: Optional[object] = None,
    ) -> None:
        self._state = CalculatorState(
            initial_amount=initial_amount,
            params=params or TradingParameters(),
        )
        self._history = HistoryManager()
        self._listeners: list[Listener] = []
        self.entitlement = entitlement
        self.monitor = monitor
        self._audit_log = audit_log

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot, **kwargs) -> "CalculatorSession":
        session = cls(**kwargs)
        session._load(snapshot)
        return session

    # -- read side -------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        return self._state.clone()

    @property
    def params(self) -> TradingParameters:
        return self._state.params

    @property
    def initial_amount(self) -> float:
        return self._state.initial_amount

    @property
    def initialized(self) -> bool:
        return self._state.initialized

    @property
    def coefficients(self) -> DerivedCoefficients:
        return formulas.resolve(self._state.params)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def change(self) -> ChangeSummary:
        if not self._state.rows:
            return ChangeSummary(percent=0.0, amount=0.0)
        return formulas.change(self._state.rows[-1].final_amount, self._state.initial_amount)

    def stats(self) -> LedgerStats:
        return ledger_stats(self._state.rows)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self._state.clone(),
            history=self._history.history,
            redo_stack=self._history.redo_stack,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- operations ------------------------------------------------------

    def initialize(
        self,
        initial_amount: Optional[float] = None,
        params: Optional[TradingParameters] = None,
    ) -> CalculatorState:
        self._require_entitlement("initialize")
        amount = self._checked_amount(self._state.initial_amount if initial_amount is None else initial_amount)
        params = params or self._state.params
        coefficients = self._checked_coefficients(params)

        self._state = engine.start_state(amount, params, coefficients)
        self._history.reset()
        self._history.push(self._state)
        self._emit("initialize")
        return self.state

    def record_outcome(self, outcome: TradeOutcome | str) -> CalculatorState:
        if not self._state.initialized:
            raise NotInitializedError("Initialize the calculator before recording trades")
        outcome = engine.parse_outcome(outcome)
        # Parameters may have been edited since the last trade.
        coefficients = self._checked_coefficients(self._state.params)

        self._state = engine.apply_outcome(self._state, outcome, coefficients)
        self._history.push(self._state)
        self._emit(outcome.value)
        return self.state

    def record_win(self) -> CalculatorState:
        return self.record_outcome(TradeOutcome.WIN)

    def record_loss(self) -> CalculatorState:
        return self.record_outcome(TradeOutcome.LOSS)

    def fast_forward(
        self,
        target_serial: int,
        initial_amount: Optional[float] = None,
        params: Optional[TradingParameters] = None,
    ) -> CalculatorState:
        """Reset and replay an unbroken win streak up to ``target_serial``.

        Only the final state is committed; earlier undo/redo history is dropped.
        """
        self._require_entitlement("fast_forward")
        try:
            validate_serial(target_serial)
        except InvalidInputError as exc:
            self._report_invalid(str(exc))
            raise
        amount = self._checked_amount(self._state.initial_amount if initial_amount is None else initial_amount)
        params = params or self._state.params
        coefficients = self._checked_coefficients(params)

        self._state = engine.run_win_streak(amount, params, coefficients, target_serial)
        self._history.reset()
        self._history.push(self._state)
        self._emit("fast_forward")
        return self.state

    def undo(self) -> bool:
        restored = self._history.undo()
        if restored is None:
            return False
        self._state = restored
        self._emit("undo")
        return True

    def redo(self) -> bool:
        restored = self._history.redo()
        if restored is None:
            return False
        self._state = restored
        self._emit("redo")
        return True

    def update_parameters(self, **changes) -> TradingParameters:
        """Edit trading inputs without committing a history entry."""
        try:
            params = self._state.params.with_changes(**changes)
        except TypeError as exc:
            raise InvalidInputError(str(exc)) from exc
        self._state.params = params
        self._emit("parameters")
        return params

    def set_initial_amount(self, value: float) -> float:
        amount = self._checked_amount(value)
        self._state.initial_amount = amount
        self._emit("parameters")
        return amount

    def restore(self, snapshot: SessionSnapshot) -> None:
        self._load(snapshot)
        self._emit("restore")

    # -- internals -------------------------------------------------------

    def _load(self, snapshot: SessionSnapshot) -> None:
        state = snapshot.state.clone()
        history = list(snapshot.history)
        if not history and state.initialized:
            # Undo must stop at the restored state when history was not kept.
            history = [state]
        self._state = state
        self._history = HistoryManager(history, snapshot.redo_stack)

    def _require_entitlement(self, operation: str) -> None:
        if self.entitlement is None or self.entitlement.has_active_entitlement():
            return
        if self.monitor is not None:
            self.monitor.entitlement_denied(operation)
        self._log("entitlement_denied", {"operation": operation})
        raise EntitlementDeniedError(f"An active subscription is required to {operation}")

    def _checked_amount(self, value: float) -> float:
        try:
            return validate_amount(value)
        except InvalidInputError as exc:
            self._report_invalid(str(exc))
            raise

    def _checked_coefficients(self, params: TradingParameters) -> DerivedCoefficients:
        try:
            return formulas.validate_parameters(params)
        except InvalidInputError as exc:
            self._report_invalid(str(exc))
            raise

    def _report_invalid(self, message: str) -> None:
        if self.monitor is not None:
            self.monitor.invalid_input(message)
        self._log("invalid_input", {"message": message})

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    def _emit(self, event: str) -> None:
        self._log(
            event,
            {
                "trade_count": self._state.trade_count,
                "current_trade": self._state.current_trade,
                "total_result": self._state.total_result,
                "history_depth": len(self._history),
            },
        )
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(event, snapshot)
