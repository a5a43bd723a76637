"""Canonical player model shared by the registry, payments and team draft."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class Player(BaseModel):
    """Registered group member."""

    id: str = Field(..., min_length=1)
    name: str
    is_goalkeeper: bool = False
    photo_ref: str | None = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
