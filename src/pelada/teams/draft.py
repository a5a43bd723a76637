"""Random draft and interactive placement rules for the monthly teams."""

from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from pelada.config import DRAFT_ORDER, TEAM_KEYS, SlotRules, get_slot_rules
from pelada.errors import ValidationRejection
from pelada.models import Player, TeamAssignment


def available_pool(assignment: TeamAssignment, players: Iterable[Player]) -> List[Player]:
    """Players not sitting in any slot, in registry order."""

    placed = set(assignment.placed_ids())
    return [player for player in players if player.id not in placed]


def auto_generate(players: Sequence[Player], rng: random.Random | None = None) -> TeamAssignment:
    """Uniform-random draft subject to slot caps; not balanced by skill.

    Goalkeepers only fill goalkeeper slots and field players only fill field
    and bench slots. Whatever is left after the fixed fill order stays in the
    available pool.
    """

    rng = rng or random.Random()
    goalkeepers = [player for player in players if player.is_goalkeeper]
    field_players = [player for player in players if not player.is_goalkeeper]
    rng.shuffle(goalkeepers)
    rng.shuffle(field_players)

    assignment = TeamAssignment()
    for team_key, slot in DRAFT_ORDER:
        rules = get_slot_rules(slot)
        source = goalkeepers if rules.goalkeepers_only else field_players
        team = assignment.team(team_key)
        for _ in range(rules.capacity):
            if not source:
                break
            player = source.pop()
            if slot == "goalkeeper":
                team.goalkeeper = player.id
            else:
                getattr(team, slot).append(player.id)
    return assignment


def remove_player(assignment: TeamAssignment, player_id: str) -> TeamAssignment:
    """Copy of ``assignment`` with ``player_id`` taken out of every slot."""

    updated = assignment.model_copy(deep=True)
    for team_key in TEAM_KEYS:
        team = updated.team(team_key)
        if team.goalkeeper == player_id:
            team.goalkeeper = None
        team.field = [pid for pid in team.field if pid != player_id]
        team.bench = [pid for pid in team.bench if pid != player_id]
    return updated


def check_placement(assignment: TeamAssignment, player: Player, team_key: str, slot: str) -> SlotRules:
    if team_key not in TEAM_KEYS:
        raise ValidationRejection(f"Time desconhecido: {team_key}.")
    try:
        rules = get_slot_rules(slot)
    except KeyError as exc:
        raise ValidationRejection(f"Posição desconhecida: {slot}.") from exc

    if rules.goalkeepers_only and not player.is_goalkeeper:
        raise ValidationRejection("Apenas Goleiros podem ser movidos para este slot.")
    if rules.field_players_only and player.is_goalkeeper:
        raise ValidationRejection("Goleiros não podem jogar na linha.")

    occupants = [pid for pid in assignment.team(team_key).slot_members(rules.slot) if pid != player.id]
    if len(occupants) >= rules.capacity:
        raise ValidationRejection("Este slot está cheio!")
    return rules


def place(assignment: TeamAssignment, player: Player, team_key: str, slot: str) -> TeamAssignment:
    """Move ``player`` into a slot, enforcing role and capacity rules."""

    rules = check_placement(assignment, player, team_key, slot)
    updated = remove_player(assignment, player.id)
    team = updated.team(team_key)
    if rules.slot == "goalkeeper":
        team.goalkeeper = player.id
    else:
        getattr(team, rules.slot).append(player.id)
    return updated
