"""Lightweight REST client for the pelada API."""

from __future__ import annotations

import argparse
import json
import os

import httpx


def _print(resp: httpx.Response) -> None:
    if resp.status_code >= 400:
        detail = resp.json().get("detail") if resp.headers.get("content-type", "").startswith("application/json") else resp.text
        raise SystemExit(f"{resp.status_code}: {detail}")
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pelada REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:3000")
    parser.add_argument("--password", default=os.getenv("PELADA_ADMIN_PASSWORD", ""), help="Admin password")
    parser.add_argument("--players", action="store_true", help="List registered players")
    parser.add_argument("--ledger", action="store_true", help="Show the cash box")
    parser.add_argument("--summary", action="store_true", help="Show the fee summary")
    parser.add_argument("--pay", nargs=3, metavar=("PLAYER_ID", "FEE_TYPE", "AMOUNT"), help="Record a fee payment")
    parser.add_argument("--cancel", nargs=2, metavar=("PLAYER_ID", "FEE_TYPE"), help="Cancel a fee payment")
    parser.add_argument("--draft", action="store_true", help="Draw random teams (not saved)")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.players:
            _print(client.get("/api/jogadores"))
        if args.ledger:
            _print(client.get("/api/caixinha"))
        if args.summary:
            _print(client.get("/api/pagamentos/resumo"))

        if not (args.pay or args.cancel or args.draft):
            return

        resp = client.post("/api/login", json={"password": args.password})
        if resp.status_code == 401:
            raise SystemExit("login failed: wrong password")
        resp.raise_for_status()

        if args.pay:
            player_id, fee_type, amount = args.pay
            _print(
                client.post(
                    "/api/pagamentos/pagar",
                    json={"playerId": player_id, "feeType": fee_type, "amount": float(amount)},
                )
            )
        if args.cancel:
            player_id, fee_type = args.cancel
            _print(client.post("/api/pagamentos/cancelar", json={"playerId": player_id, "feeType": fee_type}))
        if args.draft:
            _print(client.post("/api/time-do-mes/sortear"))
        client.post("/api/logout")


if __name__ == "__main__":
    main()
