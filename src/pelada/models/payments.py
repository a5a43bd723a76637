"""Fee configuration and per-player payment status."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, NamedTuple, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


logger = logging.getLogger("uvicorn.error")


class FeeType(str, Enum):
    MONTHLY = "monthly"
    EVENT = "event"

    @classmethod
    def parse(cls, value: str) -> "FeeType":
        """Accept canonical names plus the legacy Portuguese keys."""

        key = str(value).strip().lower()
        key = _LEGACY_FEE_NAMES.get(key, key)
        return cls(key)

    @property
    def description(self) -> str:
        return "Pagamento Mensalidade" if self is FeeType.MONTHLY else "Pagamento Churrasco"


_LEGACY_FEE_NAMES = {
    "mensalidade": "monthly",
    "churrasco": "event",
}


def _coerce_fee(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number < 0:
        return 0.0
    return number


class FeeConfig(BaseModel):
    event_fee_base: float = 0.0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("event_fee_base", mode="before")
    @classmethod
    def _non_negative(cls, value: Any) -> float:
        return _coerce_fee(value)


class PaymentKey(NamedTuple):
    player_id: str
    fee_type: FeeType


@dataclass
class PaymentBook:
    """Mapping ``(player_id, fee_type) -> transaction id | None``.

    A ``None`` entry is a payment that was cancelled; it is kept so the wire
    format still shows the explicit ``null`` the front end expects.
    """

    entries: Dict[PaymentKey, Optional[int]] = field(default_factory=dict)

    def get(self, player_id: str, fee_type: FeeType) -> Optional[int]:
        return self.entries.get(PaymentKey(player_id, fee_type))

    def is_paid(self, player_id: str, fee_type: FeeType) -> bool:
        return self.get(player_id, fee_type) is not None

    def record(self, player_id: str, fee_type: FeeType, transaction_id: int) -> None:
        self.entries[PaymentKey(player_id, fee_type)] = transaction_id

    def clear(self, player_id: str, fee_type: FeeType) -> None:
        self.entries[PaymentKey(player_id, fee_type)] = None

    def clear_all(self) -> None:
        self.entries.clear()

    def clear_references(self) -> int:
        """Null every non-null reference, keeping the keys; returns how many."""

        cleared = 0
        for key, transaction_id in self.entries.items():
            if transaction_id is not None:
                self.entries[key] = None
                cleared += 1
        return cleared

    def drop_player(self, player_id: str) -> None:
        for key in [key for key in self.entries if key.player_id == player_id]:
            del self.entries[key]

    def references(self) -> Iterator[tuple[PaymentKey, int]]:
        for key, transaction_id in self.entries.items():
            if transaction_id is not None:
                yield key, transaction_id

    def player_ids(self) -> set[str]:
        return {key.player_id for key in self.entries}

    def to_nested(self) -> dict[str, dict[str, Optional[int]]]:
        nested: dict[str, dict[str, Optional[int]]] = {}
        for key, transaction_id in self.entries.items():
            nested.setdefault(key.player_id, {})[key.fee_type.value] = transaction_id
        return nested

    @classmethod
    def from_nested(cls, data: Mapping[str, Mapping[str, Any]] | None) -> "PaymentBook":
        book = cls()
        for player_id, fees in (data or {}).items():
            if not isinstance(fees, Mapping):
                continue
            for raw_type, transaction_id in fees.items():
                try:
                    fee_type = FeeType.parse(raw_type)
                except ValueError:
                    logger.warning("Ignoring unknown fee type %r for player %s", raw_type, player_id)
                    continue
                key = PaymentKey(str(player_id), fee_type)
                book.entries[key] = int(transaction_id) if transaction_id else None
        return book


@dataclass
class PaymentState:
    """Everything stored in the ``payments`` document."""

    config: FeeConfig = field(default_factory=FeeConfig)
    book: PaymentBook = field(default_factory=PaymentBook)

    def to_document(self) -> dict[str, Any]:
        return {
            "eventFeeBase": self.config.event_fee_base,
            "payments": self.book.to_nested(),
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any] | None) -> "PaymentState":
        data = data or {}
        fee = data.get("eventFeeBase", data.get("valorChurrascoBase", 0))
        payments = data.get("payments", data.get("pagamentosJogadores"))
        return cls(
            config=FeeConfig(event_fee_base=fee),
            book=PaymentBook.from_nested(payments),
        )

    @classmethod
    def default_document(cls) -> dict[str, Any]:
        return cls().to_document()
