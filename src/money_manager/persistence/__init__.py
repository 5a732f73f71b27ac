"""Snapshot persistence for calculator sessions."""

from money_manager.persistence.autosave import DebouncedSaver
from money_manager.persistence.codec import decode_snapshot, decode_state, encode_snapshot, encode_state
from money_manager.persistence.resume import open_session
from money_manager.persistence.state_store import JsonStateStore, validate_session_key

__all__ = [
    "DebouncedSaver",
    "JsonStateStore",
    "decode_snapshot",
    "decode_state",
    "encode_snapshot",
    "encode_state",
    "open_session",
    "validate_session_key",
]
