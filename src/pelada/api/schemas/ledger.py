from __future__ import annotations

from pydantic import Field

from pelada.models import Direction

from .base import CamelModel


class TransactionRequest(CamelModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    direction: Direction
    player_id: str | None = None
    player_name: str | None = None
