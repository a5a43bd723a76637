"""Player registry."""

from .registry import PlayerRegistry, players_from_document, players_to_document

__all__ = ["PlayerRegistry", "players_from_document", "players_to_document"]
