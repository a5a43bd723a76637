"""Slot layout for the monthly team draft."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


TEAM_KEYS: Tuple[str, ...] = ("team1", "team2")


@dataclass(frozen=True)
class SlotRules:
    slot: str
    capacity: int
    goalkeepers_only: bool
    field_players_only: bool


_SLOT_RULES: Dict[str, SlotRules] = {
    "goalkeeper": SlotRules(
        slot="goalkeeper",
        capacity=1,
        goalkeepers_only=True,
        field_players_only=False,
    ),
    "field": SlotRules(
        slot="field",
        capacity=5,
        goalkeepers_only=False,
        field_players_only=True,
    ),
    "bench": SlotRules(
        slot="bench",
        capacity=4,
        goalkeepers_only=False,
        field_players_only=True,
    ),
}

# Order in which the random draft fills slots.
DRAFT_ORDER: Tuple[Tuple[str, str], ...] = (
    ("team1", "goalkeeper"),
    ("team2", "goalkeeper"),
    ("team1", "field"),
    ("team2", "field"),
    ("team1", "bench"),
    ("team2", "bench"),
)


def get_slot_rules(slot: str) -> SlotRules:
    """Fetch rules for a slot name, raising KeyError if unknown."""

    key = slot.lower()
    if key not in _SLOT_RULES:
        raise KeyError(f"No slot rules configured for slot={slot!r}")
    return _SLOT_RULES[key]


def iter_slot_rules():
    return _SLOT_RULES.values()
