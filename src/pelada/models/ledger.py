"""Cash-box ledger: transactions and the running balance."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from pelada.errors import NotFound


class Direction(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class Transaction(BaseModel):
    """Single cash-box movement. Immutable once created."""

    id: int
    timestamp: datetime
    description: str
    amount: float
    direction: Direction
    player_id: str | None = None
    player_name: str | None = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def signed_amount(self) -> float:
        return self.amount if self.direction is Direction.CREDIT else -self.amount


class Ledger(BaseModel):
    """Balance plus transactions, newest first.

    ``balance`` is a cache of the fold over ``transactions``; every mutation
    goes through :meth:`append`, :meth:`remove` or :meth:`reset` so the two
    never drift apart.
    """

    balance: float = 0.0
    transactions: List[Transaction] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def append(self, transaction: Transaction) -> "Ledger":
        # Amount validation belongs to the caller.
        self.balance += transaction.signed_amount
        self.transactions.insert(0, transaction)
        return self

    def remove(self, transaction_id: int) -> Transaction:
        for index, transaction in enumerate(self.transactions):
            if transaction.id == transaction_id:
                del self.transactions[index]
                self.balance -= transaction.signed_amount
                return transaction
        raise NotFound(f"Transação {transaction_id} não encontrada na caixinha.")

    def find(self, transaction_id: int) -> Transaction | None:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def reset(self) -> "Ledger":
        self.balance = 0.0
        self.transactions = []
        return self

    def recompute_balance(self) -> float:
        return sum(transaction.signed_amount for transaction in self.transactions)

    def is_consistent(self, tolerance: float = 1e-6) -> bool:
        return abs(self.balance - self.recompute_balance()) <= tolerance

    def next_transaction_id(self, now: datetime) -> int:
        """Millisecond timestamp id, bumped past the newest existing id."""

        candidate = int(now.timestamp() * 1000)
        if self.transactions:
            newest = max(transaction.id for transaction in self.transactions)
            candidate = max(candidate, newest + 1)
        return candidate
