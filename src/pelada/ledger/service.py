"""Persistence-backed operations on the cash-box ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from pelada.models import Direction, Ledger, PaymentState, Transaction
from pelada.persistence import LEDGER, PAYMENTS, DocumentStore


logger = logging.getLogger("uvicorn.error")

# Keys written by the earlier Portuguese data files.
_LEGACY_TRANSACTION_KEYS = {
    "data": "timestamp",
    "descricao": "description",
    "valor": "amount",
    "tipo": "direction",
    "jogadorId": "playerId",
    "jogadorNome": "playerName",
}
_LEGACY_DIRECTIONS = {"entrada": "credit", "saida": "debit"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _upgrade_transaction(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    item = {_LEGACY_TRANSACTION_KEYS.get(key, key): value for key, value in raw.items()}
    direction = item.get("direction")
    if isinstance(direction, str):
        item["direction"] = _LEGACY_DIRECTIONS.get(direction, direction)
    if item.get("playerId") is not None:
        item["playerId"] = str(item["playerId"])
    return item


def ledger_to_document(ledger: Ledger) -> dict[str, Any]:
    return ledger.model_dump(mode="json", by_alias=True)


def ledger_from_document(data: Any) -> Ledger:
    data = dict(data or {})
    if "saldoTotal" in data or "transacoes" in data:
        data = {"balance": data.get("saldoTotal", 0), "transactions": data.get("transacoes")}
    data["transactions"] = [_upgrade_transaction(raw) for raw in data.get("transactions") or []]
    return Ledger.model_validate(data)


@dataclass
class LedgerCheck:
    stored_balance: float
    recomputed_balance: float
    transactions: int

    @property
    def consistent(self) -> bool:
        return abs(self.stored_balance - self.recomputed_balance) <= 1e-6


class LedgerService:
    def __init__(self, store: DocumentStore, *, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.clock = clock

    def load(self) -> Ledger:
        return ledger_from_document(self.store.read(LEDGER, Ledger().model_dump(mode="json", by_alias=True)))

    def save(self, ledger: Ledger) -> None:
        self.store.write(LEDGER, ledger_to_document(ledger))

    def new_transaction(
        self,
        ledger: Ledger,
        *,
        description: str,
        amount: float,
        direction: Direction,
        player_id: Optional[str] = None,
        player_name: Optional[str] = None,
    ) -> Transaction:
        now = self.clock()
        return Transaction(
            id=ledger.next_transaction_id(now),
            timestamp=now,
            description=description,
            amount=amount,
            direction=direction,
            player_id=player_id,
            player_name=player_name,
        )

    def record(
        self,
        *,
        description: str,
        amount: float,
        direction: Direction,
        player_id: Optional[str] = None,
        player_name: Optional[str] = None,
    ) -> Ledger:
        """Append a spontaneous entry and persist the ledger."""

        ledger = self.load()
        transaction = self.new_transaction(
            ledger,
            description=description,
            amount=amount,
            direction=direction,
            player_id=player_id,
            player_name=player_name,
        )
        ledger.append(transaction)
        self.save(ledger)
        logger.info("Recorded %s of %.2f (%s)", direction.value, amount, description)
        return ledger

    def reset(self) -> Ledger:
        """Empty the cash box and null every payment reference into it."""

        ledger = Ledger()
        payments = PaymentState.from_document(self.store.read(PAYMENTS, PaymentState.default_document()))
        cleared = payments.book.clear_references()
        self.store.write_many(
            {
                LEDGER: ledger_to_document(ledger),
                PAYMENTS: payments.to_document(),
            }
        )
        logger.info("Cash box reset; %d payment references cleared", cleared)
        return ledger

    def check(self, *, repair: bool = False) -> LedgerCheck:
        ledger = self.load()
        result = LedgerCheck(
            stored_balance=ledger.balance,
            recomputed_balance=ledger.recompute_balance(),
            transactions=len(ledger.transactions),
        )
        if repair and not result.consistent:
            logger.warning(
                "Ledger balance %.2f differs from recomputed %.2f; repairing",
                result.stored_balance,
                result.recomputed_balance,
            )
            ledger.balance = result.recomputed_balance
            self.save(ledger)
        return result
