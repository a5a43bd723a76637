from __future__ import annotations

from typing import List

from pelada.models import Player, TeamAssignment

from .base import CamelModel


class DraftResponse(CamelModel):
    teams: TeamAssignment
    pool: List[Player]
