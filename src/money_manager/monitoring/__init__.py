"""Audit logging and notifications."""

from money_manager.monitoring.audit import AuditLog
from money_manager.monitoring.monitor import Monitor
from money_manager.monitoring.notifier import LogNotifier, MemoryNotifier, Notifier

__all__ = [
    "AuditLog",
    "LogNotifier",
    "MemoryNotifier",
    "Monitor",
    "Notifier",
]
