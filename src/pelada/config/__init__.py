"""Configuration helpers for runtime settings and team slot rules."""

from .settings import Settings
from .teams import DRAFT_ORDER, TEAM_KEYS, SlotRules, get_slot_rules, iter_slot_rules

__all__ = [
    "Settings",
    "DRAFT_ORDER",
    "TEAM_KEYS",
    "SlotRules",
    "get_slot_rules",
    "iter_slot_rules",
]
