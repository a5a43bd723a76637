"""Load, save and reset the stored monthly teams."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pelada.models import TeamAssignment
from pelada.persistence import TEAMS, DocumentStore


logger = logging.getLogger("uvicorn.error")


def teams_to_document(assignment: TeamAssignment) -> dict[str, Any]:
    return assignment.model_dump(mode="json")


_LEGACY_TEAM_KEYS = {"time1": "team1", "time2": "team2"}
_LEGACY_SLOT_KEYS = {"goleiro": "goalkeeper", "linha": "field", "reservas": "bench"}


def _id_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _upgrade_team(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    team = {_LEGACY_SLOT_KEYS.get(key, key): value for key, value in raw.items()}
    if "goalkeeper" in team:
        team["goalkeeper"] = _id_or_none(team["goalkeeper"])
    for slot in ("field", "bench"):
        if isinstance(team.get(slot), list):
            team[slot] = [str(player_id) for player_id in team[slot] if player_id is not None]
    return team


def teams_from_document(data: Any) -> TeamAssignment:
    data = data or {}
    upgraded = {_LEGACY_TEAM_KEYS.get(key, key): _upgrade_team(value) for key, value in data.items()}
    return TeamAssignment.model_validate(upgraded)


class TeamService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def load(self) -> TeamAssignment:
        return teams_from_document(self.store.read(TEAMS, teams_to_document(TeamAssignment())))

    def save(self, assignment: TeamAssignment) -> TeamAssignment:
        # Stored verbatim: slot sizes and goalkeeper roles are only checked by
        # the interactive placement rule in ``pelada.teams.draft``.
        self.store.write(TEAMS, teams_to_document(assignment))
        return assignment

    def reset(self) -> TeamAssignment:
        assignment = TeamAssignment()
        self.store.write(TEAMS, teams_to_document(assignment))
        logger.info("Monthly teams cleared")
        return assignment
