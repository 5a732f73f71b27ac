from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path

from money_manager.calculator import CalculatorError, TradeOutcome
from money_manager.config import compute_config_hash, load_config
from money_manager.entitlement import StaticEntitlement
from money_manager.ledger import ledger_table
from money_manager.monitoring import AuditLog, LogNotifier, Monitor
from money_manager.persistence import JsonStateStore, open_session

_OUTCOME_CODES = {"w": TradeOutcome.WIN, "l": TradeOutcome.LOSS}


def _parse_outcomes(value: str) -> list[TradeOutcome]:
    outcomes = []
    for code in value.replace(",", "").replace(" ", "").lower():
        if code not in _OUTCOME_CODES:
            raise argparse.ArgumentTypeError(f"Unknown outcome code {code!r}; use W or L")
        outcomes.append(_OUTCOME_CODES[code])
    return outcomes


def main() -> None:
    parser = argparse.ArgumentParser(description="Drive a calculator session and persist it.")
    parser.add_argument("--config", default=str(Path("configs") / "calculator.yaml"))
    parser.add_argument("--session", required=True, help="Session key used for persistence")
    parser.add_argument("--initialize", action="store_true", help="Reset the session before recording trades")
    parser.add_argument("--initial-amount", type=float, default=None)
    parser.add_argument("--serial", type=int, default=None, help="Fast-forward an all-win streak to this serial")
    parser.add_argument("--outcomes", type=_parse_outcomes, default=[], help="Trade outcomes, e.g. WWLW")
    parser.add_argument("--undo", type=int, default=0)
    parser.add_argument("--redo", type=int, default=0)
    args = parser.parse_args()

    config_path = Path(args.config)
    config = load_config(config_path)
    config_hash = compute_config_hash(config_path)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    run_id = f"{config.name}-{stamp}-{config_hash[:8]}"

    monitor = Monitor(LogNotifier())
    audit = AuditLog(config.monitoring.audit_log_path, run_id=run_id, config_hash=config_hash)
    store = JsonStateStore(config.persistence.state_dir, include_history=config.persistence.include_history)
    session, saver = open_session(
        store,
        args.session,
        autosave_delay_seconds=config.persistence.debounce_seconds,
        params=config.defaults.params,
        initial_amount=config.defaults.initial_amount,
        entitlement=StaticEntitlement(True),
        audit_log=audit,
        monitor=monitor,
    )

    try:
        if args.serial is not None:
            session.fast_forward(args.serial, initial_amount=args.initial_amount)
        elif args.initialize or not session.initialized:
            session.initialize(initial_amount=args.initial_amount)
        for outcome in args.outcomes:
            session.record_outcome(outcome)
        for _ in range(args.undo):
            session.undo()
        for _ in range(args.redo):
            session.redo()
    except CalculatorError as exc:
        raise SystemExit(f"Calculator error: {exc}") from exc
    finally:
        if saver is not None:
            saver.close()

    coefficients = session.coefficients
    print(f"divisor={coefficients.divisor:.4f} p={coefficients.p:.4f} q={coefficients.q:.4f}")
    for row in ledger_table(session.state.rows, config.ledger.decimals):
        print(
            f"{row['serial']:>5} {row['trade_amount']:>14} {row['result']:>12} "
            f"{row['total']:>12} {row['final_amount']:>14}"
        )
    change = session.change()
    stats = session.stats()
    print(f"change={change.percent:.2f}% / {change.amount:.2f}")
    print(
        f"trades={stats.total} wins={stats.wins} ({stats.win_percent:.2f}%) "
        f"losses={stats.losses} ({stats.loss_percent:.2f}%)"
    )


if __name__ == "__main__":
    main()
