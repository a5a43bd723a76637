"""Command-line interface for serving the API and inspecting stored data."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path

from pelada.config import Settings
from pelada.ledger import LedgerService
from pelada.media import LocalPhotoStore
from pelada.payments import PaymentTracker
from pelada.persistence import open_store
from pelada.roster import PlayerRegistry


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pelada roster, draft and cash box")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override PELADA_DATA_DIR")
    parser.add_argument("--db-path", type=Path, default=None, help="Use the SQLite store at this path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=3000)

    subparsers.add_parser("summary", help="Print the fee summary and cash-box balance as JSON")

    verify = subparsers.add_parser("verify-ledger", help="Recompute the cash-box balance from its transactions")
    verify.add_argument("--repair", action="store_true", help="Rewrite the stored balance when it drifted")

    return parser.parse_args(argv)


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.db_path is not None:
        overrides["db_path"] = args.db_path
    if not overrides:
        return settings
    values = asdict(settings)
    values.update(overrides)
    return Settings(**values)


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from pelada.api import create_app

    uvicorn.run(create_app(settings), host=args.host, port=args.port)
    return 0


def _summary(settings: Settings) -> int:
    store = open_store(settings)
    registry = PlayerRegistry(store, LocalPhotoStore(settings.uploads_dir))
    ledger = LedgerService(store)
    tracker = PaymentTracker(store, registry, ledger, monthly_fee_base=settings.monthly_fee_base)
    payload = asdict(tracker.summary())
    payload["balance"] = ledger.load().balance
    print(json.dumps(payload, indent=2))
    return 0


def _verify_ledger(settings: Settings, repair: bool) -> int:
    result = LedgerService(open_store(settings)).check(repair=repair)
    print(
        f"transactions={result.transactions} stored={result.stored_balance:.2f} "
        f"recomputed={result.recomputed_balance:.2f}"
    )
    if result.consistent:
        print("Ledger is consistent.")
        return 0
    if repair:
        print("Stored balance repaired.")
        return 0
    print("Ledger balance drifted; rerun with --repair to fix it.")
    return 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = _settings(args)
    if args.command == "serve":
        return _serve(settings, args)
    if args.command == "summary":
        return _summary(settings)
    if args.command == "verify-ledger":
        return _verify_ledger(settings, args.repair)
    raise SystemExit(f"Unknown command {args.command!r}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
