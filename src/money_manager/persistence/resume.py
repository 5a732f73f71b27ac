"""Resume a calculator session from the state store."""

from __future__ import annotations

from typing import Optional

from money_manager.calculator.session import CalculatorSession
from money_manager.persistence.autosave import DebouncedSaver
from money_manager.persistence.state_store import JsonStateStore


def open_session(
    store: JsonStateStore,
    session_key: str,
    autosave_delay_seconds: Optional[float] = None,
    **session_kwargs,
) -> tuple[CalculatorSession, Optional[DebouncedSaver]]:
    """Load the last saved session for ``session_key`` or start a fresh one.

    With ``autosave_delay_seconds`` set, a :class:`DebouncedSaver` is attached
    to the returned session.
    """
    snapshot = store.load_snapshot(session_key)
    if snapshot is None:
        session = CalculatorSession(**session_kwargs)
    else:
        session = CalculatorSession.from_snapshot(snapshot, **session_kwargs)
        if session.monitor is not None:
            session.monitor.session_restored(session_key)

    saver = None
    if autosave_delay_seconds is not None:
        saver = DebouncedSaver(
            store,
            session_key,
            delay_seconds=autosave_delay_seconds,
            monitor=session.monitor,
            audit_log=session_kwargs.get("audit_log"),
        )
        saver.attach(session)
    return session, saver
