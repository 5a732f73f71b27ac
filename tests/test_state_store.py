import json

import pytest

from money_manager.calculator import CalculatorSession, TradingParameters
from money_manager.persistence import JsonStateStore, open_session, validate_session_key
from money_manager.monitoring import MemoryNotifier, Monitor


def _played_session():
    session = CalculatorSession(params=TradingParameters(), initial_amount=6500.0)
    session.initialize()
    session.record_win()
    session.record_loss()
    session.record_loss()
    session.undo()
    return session


def test_missing_snapshot_returns_none(tmp_path):
    store = JsonStateStore(tmp_path)
    assert store.load_snapshot("nobody") is None


def test_save_and_load_preserves_state_exactly(tmp_path):
    store = JsonStateStore(tmp_path)
    session = _played_session()
    store.save_snapshot("user-1", session.snapshot())

    loaded = store.load_snapshot("user-1")
    assert loaded.state == session.state
    assert loaded.history == ()
    assert loaded.redo_stack == ()
    assert loaded.state.rows[-1].result == "-"


def test_document_uses_stored_field_names(tmp_path):
    store = JsonStateStore(tmp_path)
    store.save_snapshot("user-1", _played_session().snapshot())
    data = json.loads((tmp_path / "user-1.json").read_text(encoding="utf-8"))

    for key in ("initialAmount", "nTrades", "l", "m", "t", "f", "totalResult", "currentTrade",
                "winBaseline", "lossAccumulator", "tradeCount", "rows", "timestamp"):
        assert key in data
    assert "history" not in data
    assert data["rows"][0]["sl"] == 1


def test_history_is_kept_when_enabled(tmp_path):
    store = JsonStateStore(tmp_path, include_history=True)
    session = _played_session()
    store.save_snapshot("user-1", session.snapshot())

    loaded = store.load_snapshot("user-1")
    assert loaded.history == session.snapshot().history
    assert len(loaded.redo_stack) == 1

    resumed = CalculatorSession.from_snapshot(loaded)
    assert resumed.redo() is True
    assert session.redo() is True
    assert resumed.state == session.state


def test_save_is_idempotent_upsert(tmp_path):
    store = JsonStateStore(tmp_path)
    session = _played_session()
    store.save_snapshot("user-1", session.snapshot())
    store.save_snapshot("user-1", session.snapshot())
    session.record_win()
    store.save_snapshot("user-1", session.snapshot())

    assert [path.name for path in tmp_path.iterdir()] == ["user-1.json"]
    assert store.load_snapshot("user-1").state == session.state


def test_non_finite_values_are_not_persisted(tmp_path):
    store = JsonStateStore(tmp_path)
    session = _played_session()
    snapshot = session.snapshot()
    snapshot.state.current_trade = float("inf")

    with pytest.raises(ValueError):
        store.save_snapshot("user-1", snapshot)
    assert store.load_snapshot("user-1") is None


@pytest.mark.parametrize("key", ["", "../escape", "a/b", ".."])
def test_invalid_session_keys(key):
    with pytest.raises(ValueError):
        validate_session_key(key)


def test_open_session_resumes_saved_progress(tmp_path):
    store = JsonStateStore(tmp_path)
    session = _played_session()
    store.save_snapshot("user-1", session.snapshot())

    notifier = MemoryNotifier()
    resumed, saver = open_session(store, "user-1", monitor=Monitor(notifier))
    assert saver is None
    assert resumed.state == session.state
    assert resumed.undo() is False
    assert notifier.events[0][0] == "RESTORED"

    fresh, _ = open_session(store, "user-2")
    assert not fresh.initialized


@pytest.mark.parametrize("value", [7.5, "abc", True])
def test_fractional_trade_horizon_is_rejected_on_load(tmp_path, value):
    store = JsonStateStore(tmp_path)
    store.save_snapshot("user-1", _played_session().snapshot())
    path = tmp_path / "user-1.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["nTrades"] = value
    path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(ValueError):
        store.load_snapshot("user-1")


def test_whole_float_trade_horizon_loads(tmp_path):
    store = JsonStateStore(tmp_path)
    store.save_snapshot("user-1", _played_session().snapshot())
    path = tmp_path / "user-1.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data["nTrades"] = 7.0
    path.write_text(json.dumps(data), encoding="utf-8")

    assert store.load_snapshot("user-1").state.params.n_trades == 7
