from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field

from pelada.models import FeeType, Ledger, PaymentState

from .base import CamelModel


class FeeConfigRequest(CamelModel):
    # Coerced to a non-negative number by the tracker.
    event_fee_base: float | str | None = None


class PayRequest(CamelModel):
    player_id: str = Field(..., min_length=1)
    player_name: str | None = None
    fee_type: FeeType
    amount: float


class CancelRequest(CamelModel):
    player_id: str = Field(..., min_length=1)
    fee_type: FeeType


class PaymentsResponse(CamelModel):
    event_fee_base: float
    payments: Dict[str, Dict[str, Optional[int]]]

    @classmethod
    def from_state(cls, state: PaymentState) -> "PaymentsResponse":
        return cls(event_fee_base=state.config.event_fee_base, payments=state.book.to_nested())


class PaymentResultResponse(CamelModel):
    payments: PaymentsResponse
    ledger: Ledger


class FeeSummaryResponse(CamelModel):
    player_count: int
    non_goalkeeper_count: int
    monthly_fee_base: float
    monthly_fee_per_player: float
    event_fee: float
    total_collected: float
