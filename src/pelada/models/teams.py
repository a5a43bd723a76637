"""Monthly team draft: two teams with goalkeeper, field and bench slots."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Team(BaseModel):
    # No max_length here: saved drafts are stored exactly as submitted.
    goalkeeper: Optional[str] = None
    field: List[str] = Field(default_factory=list)
    bench: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    def slot_members(self, slot: str) -> List[str]:
        if slot == "goalkeeper":
            return [self.goalkeeper] if self.goalkeeper is not None else []
        if slot == "field":
            return list(self.field)
        if slot == "bench":
            return list(self.bench)
        raise KeyError(f"Unknown slot {slot!r}")

    def member_ids(self) -> List[str]:
        return self.slot_members("goalkeeper") + list(self.field) + list(self.bench)


class TeamAssignment(BaseModel):
    team1: Team = Field(default_factory=Team)
    team2: Team = Field(default_factory=Team)

    def team(self, key: str) -> Team:
        if key == "team1":
            return self.team1
        if key == "team2":
            return self.team2
        raise KeyError(f"Unknown team {key!r}")

    def placements(self) -> Iterator[Tuple[str, str, str]]:
        """Yield ``(team, slot, player_id)`` for every occupied slot."""

        for key in ("team1", "team2"):
            team = self.team(key)
            for slot in ("goalkeeper", "field", "bench"):
                for player_id in team.slot_members(slot):
                    yield key, slot, player_id

    def placed_ids(self) -> List[str]:
        return [player_id for _, _, player_id in self.placements()]

    def locate(self, player_id: str) -> Optional[Tuple[str, str]]:
        for key, slot, placed in self.placements():
            if placed == player_id:
                return key, slot
        return None
