"""Monthly team draft."""

from .draft import auto_generate, available_pool, check_placement, place, remove_player
from .service import TeamService, teams_from_document, teams_to_document

__all__ = [
    "TeamService",
    "auto_generate",
    "available_pool",
    "check_placement",
    "place",
    "remove_player",
    "teams_from_document",
    "teams_to_document",
]
