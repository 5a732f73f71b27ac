"""Debounced saving of session snapshots after changes settle."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from money_manager.calculator.models import SessionSnapshot
from money_manager.persistence.state_store import JsonStateStore

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class DebouncedSaver:
    """Session listener that coalesces bursts of changes into one save.

    Each change restarts the quiet-period timer; only the latest snapshot is
    written. A save lock keeps at most one write in flight for the session key.
    Uninitialized sessions are never written.
    """

    def __init__(
        self,
        store: JsonStateStore,
        session_key: str,
        delay_seconds: float = 1.0,
        monitor: Optional[object] = None,
        audit_log: Optional[object] = None,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.store = store
        self.session_key = session_key
        self.delay_seconds = delay_seconds
        self.monitor = monitor
        self._audit_log = audit_log
        self._timer_factory = timer_factory or threading.Timer
        self._lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._pending: Optional[SessionSnapshot] = None
        self._timer: Optional[threading.Timer] = None
        self.saves = 0

    def __call__(self, event: str, snapshot: SessionSnapshot) -> None:
        self.schedule(snapshot)

    def attach(self, session) -> Callable[[], None]:
        return session.subscribe(self)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def schedule(self, snapshot: SessionSnapshot) -> None:
        if not snapshot.state.initialized:
            return
        with self._lock:
            self._pending = snapshot
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self.delay_seconds, self._on_timer)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> bool:
        with self._save_lock:
            with self._lock:
                snapshot = self._pending
                if self._timer is not None:
                    self._timer.cancel()
                    self._timer = None
            if snapshot is None:
                return False
            # A failed save leaves the snapshot pending for the next flush.
            path = self.store.save_snapshot(self.session_key, snapshot)
            with self._lock:
                if self._pending is snapshot:
                    self._pending = None
            self.saves += 1
            self._log("snapshot_saved", {"session_key": self.session_key, "path": str(path)})
            return True

    def close(self, flush: bool = True) -> None:
        if flush:
            self.flush()
            return
        with self._lock:
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _on_timer(self) -> None:
        # Runs on the timer thread, where nobody could catch the error.
        try:
            self.flush()
        except (OSError, ValueError) as exc:
            if self.monitor is not None:
                self.monitor.save_failed(self.session_key, str(exc))
            self._log("snapshot_save_failed", {"session_key": self.session_key, "error": str(exc)})

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)
