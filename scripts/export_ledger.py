from __future__ import annotations

import argparse
from pathlib import Path

from money_manager.config import load_config
from money_manager.ledger import write_ledger_csv
from money_manager.persistence import JsonStateStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Export a saved session ledger to CSV.")
    parser.add_argument("--config", default=str(Path("configs") / "calculator.yaml"))
    parser.add_argument("--session", required=True)
    parser.add_argument("--output", required=True)
    args = parser.parse_args()

    config = load_config(args.config)
    store = JsonStateStore(config.persistence.state_dir)
    snapshot = store.load_snapshot(args.session)
    if snapshot is None:
        raise SystemExit(f"No saved session: {args.session}")

    path = write_ledger_csv(
        args.output,
        snapshot.state.rows,
        footer=config.ledger.footer,
        decimals=config.ledger.decimals,
    )
    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
