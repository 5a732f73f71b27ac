"""Routing of user-facing session alerts."""

from __future__ import annotations

from dataclasses import dataclass

from money_manager.monitoring.notifier import Notifier


@dataclass
class Monitor:
    notifier: Notifier

    def entitlement_denied(self, operation: str) -> None:
        self.notifier.notify("ENTITLEMENT", f"Subscription required to {operation}")

    def invalid_input(self, message: str) -> None:
        self.notifier.notify("INVALID_INPUT", message)

    def session_restored(self, session_key: str) -> None:
        self.notifier.notify("RESTORED", f"Progress loaded for {session_key}")

    def save_failed(self, session_key: str, reason: str) -> None:
        self.notifier.notify("SAVE_FAILED", f"Failed to save progress for {session_key}: {reason}")
