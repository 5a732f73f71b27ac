"""Undo/redo stacks of calculator snapshots."""

from __future__ import annotations

from typing import Iterable, Optional

from money_manager.calculator.models import CalculatorState


class HistoryManager:
    """Keeps independent copies of every state the session has committed.

    The top of the history stack is the state currently shown. Undo never
    goes past the first entry, which is the state right after initialize.
    """

    def __init__(
        self,
        history: Optional[Iterable[CalculatorState]] = None,
        redo: Optional[Iterable[CalculatorState]] = None,
    ) -> None:
        self._history: list[CalculatorState] = [state.clone() for state in history or ()]
        self._redo: list[CalculatorState] = [state.clone() for state in redo or ()]

    @property
    def history(self) -> tuple[CalculatorState, ...]:
        return tuple(state.clone() for state in self._history)

    @property
    def redo_stack(self) -> tuple[CalculatorState, ...]:
        return tuple(state.clone() for state in self._redo)

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 1

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def __len__(self) -> int:
        return len(self._history)

    def reset(self) -> None:
        self._history.clear()
        self._redo.clear()

    def push(self, state: CalculatorState) -> None:
        self._history.append(state.clone())
        self._redo.clear()

    def undo(self) -> Optional[CalculatorState]:
        if not self.can_undo:
            return None
        self._redo.append(self._history.pop())
        return self._history[-1].clone()

    def redo(self) -> Optional[CalculatorState]:
        if not self.can_redo:
            return None
        state = self._redo.pop()
        self._history.append(state)
        return state.clone()
