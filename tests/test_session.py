import math

import pytest

from money_manager.calculator import (
    CalculatorSession,
    EntitlementDeniedError,
    InvalidInputError,
    NotInitializedError,
    TradingParameters,
)
from money_manager.entitlement import StaticEntitlement
from money_manager.monitoring import AuditLog, MemoryNotifier, Monitor


PARAMS = TradingParameters(n_trades=7, loss_capture_pct=0.5, profit_capture_pct=0.8, leverage=50, fee_pct=0.12)


def _session(**kwargs):
    kwargs.setdefault("params", PARAMS)
    kwargs.setdefault("initial_amount", 6500.0)
    return CalculatorSession(**kwargs)


def test_initialize_pushes_first_history_entry():
    session = _session()
    state = session.initialize()

    assert session.initialized
    assert state.trade_count == 1
    assert session.history_depth == 1
    assert not session.can_undo
    assert not session.can_redo


def test_record_outcome_before_initialize_fails():
    session = _session()
    with pytest.raises(NotInitializedError):
        session.record_win()
    assert not session.initialized
    assert session.history_depth == 0


def test_invalid_initial_amount_leaves_state_untouched():
    session = _session()
    session.initialize()
    session.record_win()
    before = session.state

    for bad in (0, -10, float("nan"), float("inf"), "100"):
        with pytest.raises(InvalidInputError):
            session.initialize(initial_amount=bad)
    assert session.state == before
    assert session.history_depth == 2


def test_degenerate_parameters_are_rejected():
    session = _session(params=PARAMS.with_changes(profit_capture_pct=0.12))
    with pytest.raises(InvalidInputError):
        session.initialize()
    assert not session.initialized
    assert math.isinf(session.coefficients.divisor)


def test_determinism():
    outcomes = ["win", "loss", "loss", "win", "loss", "win", "win"]
    first = _session()
    second = _session()
    for session in (first, second):
        session.initialize()
        for outcome in outcomes:
            session.record_outcome(outcome)
    assert first.state == second.state


def test_fast_forward_matches_repeated_wins():
    stepped = _session()
    stepped.initialize()
    for _ in range(9):
        stepped.record_win()

    jumped = _session()
    jumped.fast_forward(10)

    assert jumped.state == stepped.state
    assert jumped.state.rows[-1].serial == 10
    assert jumped.history_depth == 1
    assert not jumped.can_undo


def test_fast_forward_rejects_bad_serial():
    session = _session()
    for bad in (0, -3, 2.5, True):
        with pytest.raises(InvalidInputError):
            session.fast_forward(bad)
    assert not session.initialized


def test_fast_forward_clears_history_and_redo():
    session = _session()
    session.initialize()
    session.record_win()
    session.record_loss()
    session.undo()
    assert session.can_redo

    session.fast_forward(3)
    assert session.history_depth == 1
    assert not session.can_undo
    assert not session.can_redo


def test_initialize_clears_history_and_redo():
    session = _session()
    session.initialize()
    session.record_win()
    session.record_win()
    session.undo()

    session.initialize()
    assert session.history_depth == 1
    assert not session.can_undo
    assert not session.can_redo


def test_undo_redo_inverse():
    session = _session()
    session.initialize()
    session.record_win()
    after_win = session.state
    session.record_loss()
    after_loss = session.state

    assert session.undo() is True
    assert session.state == after_win
    assert session.redo() is True
    assert session.state == after_loss


def test_undo_stops_at_initial_state():
    session = _session()
    initial = session.initialize()
    session.record_loss()

    assert session.undo() is True
    assert session.undo() is False
    assert session.state == initial
    assert session.redo() is True
    assert session.redo() is False


def test_new_outcome_discards_redo():
    session = _session()
    session.initialize()
    session.record_win()
    session.undo()
    assert session.can_redo

    session.record_loss()
    assert not session.can_redo
    assert session.state.rows[0].result < 0


def test_returned_state_is_detached():
    session = _session()
    state = session.initialize()
    state.rows.clear()
    state.total_result = 999.0
    assert len(session.state.rows) == 1
    assert session.state.total_result == 0


def test_parameter_edits_apply_to_next_trade():
    session = _session()
    session.initialize()
    first_trade = session.state.current_trade

    session.update_parameters(leverage=10)
    state = session.record_win()

    q = (0.8 - 0.12) * 10
    assert state.total_result == pytest.approx(first_trade * q / 100)
    assert session.history_depth == 2


def test_undo_restores_parameters_of_snapshot():
    session = _session()
    session.initialize()
    session.record_win()
    session.update_parameters(leverage=10)
    session.record_win()

    session.undo()
    assert session.params.leverage == 50


def test_update_parameters_rejects_unknown_field():
    session = _session()
    with pytest.raises(InvalidInputError):
        session.update_parameters(spread=1.0)


def test_entitlement_denied_blocks_reset_operations():
    notifier = MemoryNotifier()
    session = _session(entitlement=StaticEntitlement(False), monitor=Monitor(notifier))

    with pytest.raises(EntitlementDeniedError):
        session.initialize()
    with pytest.raises(EntitlementDeniedError):
        session.fast_forward(5)

    assert not session.initialized
    assert [event for event, _ in notifier.events] == ["ENTITLEMENT", "ENTITLEMENT"]


def test_entitlement_is_checked_before_input_validation():
    session = _session(entitlement=StaticEntitlement(False))
    with pytest.raises(EntitlementDeniedError):
        session.initialize(initial_amount=-1)


def test_change_and_stats():
    session = _session()
    assert session.change().amount == 0
    session.initialize()
    session.record_win()
    session.record_loss()
    session.record_loss()

    stats = session.stats()
    assert stats.total == 3
    assert stats.wins == 1
    assert stats.losses == 2
    change = session.change()
    assert change.amount == pytest.approx(session.state.rows[-1].final_amount - 6500.0)


def test_listeners_receive_snapshots():
    session = _session()
    events = []
    unsubscribe = session.subscribe(lambda event, snapshot: events.append((event, len(snapshot.history))))

    session.initialize()
    session.record_win()
    session.undo()
    session.redo()
    unsubscribe()
    session.record_loss()

    assert events == [("initialize", 1), ("win", 2), ("undo", 1), ("redo", 2)]


def test_snapshot_restore_round_trip():
    session = _session()
    session.initialize()
    session.record_win()
    session.record_loss()
    session.undo()

    restored = CalculatorSession.from_snapshot(session.snapshot())
    assert restored.state == session.state
    assert restored.history_depth == session.history_depth
    assert restored.redo() is True
    assert session.redo() is True
    assert restored.state == session.state


def test_restore_without_history_cannot_undo_past_restored_state():
    session = _session()
    session.initialize()
    session.record_win()
    snapshot = session.snapshot()

    resumed = _session()
    resumed.restore(type(snapshot)(state=snapshot.state))
    assert resumed.history_depth == 1
    assert resumed.undo() is False
    resumed.record_loss()
    assert resumed.undo() is True
    assert resumed.state == snapshot.state


def test_audit_log_records_operations(tmp_path):
    audit = AuditLog(tmp_path / "audit.log", run_id="run-1")
    session = _session(audit_log=audit)
    session.initialize()
    session.record_win()
    with pytest.raises(InvalidInputError):
        session.fast_forward(0)

    events = [record["event"] for record in audit.read()]
    assert events == ["initialize", "win", "invalid_input"]
    assert audit.read()[1]["payload"]["trade_count"] == 2


@pytest.mark.parametrize(
    "changes",
    [{"leverage": 0}, {"profit_capture_pct": 0.12}, {"n_trades": 0}, {"fee_pct": float("nan")}],
)
def test_invalid_parameter_edit_blocks_next_trade(changes):
    session = _session()
    session.initialize()
    session.record_win()
    session.record_loss()
    session.undo()
    history_depth = session.history_depth
    snapshot = session.snapshot()

    session.update_parameters(**changes)
    with pytest.raises(InvalidInputError):
        session.record_win()
    with pytest.raises(InvalidInputError):
        session.record_loss()

    assert session.history_depth == history_depth
    assert session.can_redo
    assert session.snapshot().history == snapshot.history
    assert session.snapshot().redo_stack == snapshot.redo_stack
    state = session.state
    assert state.rows == snapshot.state.rows
    assert state.current_trade == snapshot.state.current_trade
    assert state.total_result == snapshot.state.total_result


def test_fast_forward_with_bad_amount_is_a_noop():
    session = _session()
    session.initialize()
    session.record_win()
    session.undo()
    before = session.snapshot()

    for bad in (0, -1, float("nan")):
        with pytest.raises(InvalidInputError):
            session.fast_forward(5, initial_amount=bad)

    after = session.snapshot()
    assert after.state == before.state
    assert after.history == before.history
    assert after.redo_stack == before.redo_stack


def test_listener_error_reaches_caller_after_commit():
    session = _session()

    def failing_listener(event, snapshot):
        raise RuntimeError("listener failed")

    session.subscribe(failing_listener)
    with pytest.raises(RuntimeError):
        session.initialize()
    assert session.initialized
    assert session.history_depth == 1
