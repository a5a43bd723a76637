"""Player registry and the cascades that keep other documents free of orphans."""

from __future__ import annotations

import logging
from typing import Any, List, Optional
from uuid import uuid4

from pelada.errors import NotFound, StorageFailure, ValidationRejection
from pelada.media import PhotoStore, PhotoUpload
from pelada.models import PaymentState, Player, TeamAssignment
from pelada.persistence import PAYMENTS, PLAYERS, TEAMS, DocumentStore
from pelada.teams import remove_player, teams_from_document, teams_to_document


logger = logging.getLogger("uvicorn.error")


def players_to_document(players: List[Player]) -> list[dict[str, Any]]:
    return [player.model_dump(mode="json", by_alias=True) for player in players]


_LEGACY_PLAYER_KEYS = {"nome": "name", "isGoleiro": "isGoalkeeper", "foto": "photoRef"}


def _upgrade_player(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    item = {_LEGACY_PLAYER_KEYS.get(key, key): value for key, value in raw.items()}
    if item.get("id") is not None:
        item["id"] = str(item["id"])
    # Older files store "" for "no photo".
    if not item.get("photoRef"):
        item["photoRef"] = None
    return item


def players_from_document(data: Any) -> List[Player]:
    return [Player.model_validate(_upgrade_player(raw)) for raw in data or []]


class PlayerRegistry:
    def __init__(self, store: DocumentStore, photos: PhotoStore):
        self.store = store
        self.photos = photos

    def list(self) -> List[Player]:
        return players_from_document(self.store.read(PLAYERS, []))

    def get(self, player_id: str) -> Player:
        for player in self.list():
            if player.id == player_id:
                return player
        raise NotFound("Jogador não encontrado")

    def _save(self, players: List[Player]) -> None:
        self.store.write(PLAYERS, players_to_document(players))

    def create(self, name: str, is_goalkeeper: bool = False, photo: Optional[PhotoUpload] = None) -> Player:
        name = (name or "").strip()
        if not name:
            raise ValidationRejection("O nome do jogador é obrigatório.")
        players = self.list()
        photo_ref = self.photos.save(photo) if photo else None
        player = Player(id=uuid4().hex, name=name, is_goalkeeper=is_goalkeeper, photo_ref=photo_ref)
        try:
            self._save(players + [player])
        except StorageFailure:
            if photo_ref:
                self.photos.delete(photo_ref)
            raise
        logger.info("Registered player %s (%s)", player.name, player.id)
        return player

    def update(
        self,
        player_id: str,
        *,
        name: Optional[str] = None,
        is_goalkeeper: Optional[bool] = None,
        photo: Optional[PhotoUpload] = None,
    ) -> Player:
        players = self.list()
        index = next((i for i, player in enumerate(players) if player.id == player_id), None)
        if index is None:
            raise NotFound("Jogador não encontrado")

        current = players[index]
        changes: dict[str, Any] = {}
        if name and name.strip():
            changes["name"] = name.strip()
        if is_goalkeeper is not None:
            changes["is_goalkeeper"] = is_goalkeeper
        new_photo = self.photos.save(photo) if photo else None
        if new_photo:
            changes["photo_ref"] = new_photo

        updated = current.model_copy(update=changes)
        players[index] = updated
        try:
            self._save(players)
        except StorageFailure:
            if new_photo:
                self.photos.delete(new_photo)
            raise
        if new_photo and current.photo_ref:
            self.photos.delete(current.photo_ref)
        return updated

    def delete(self, player_id: str) -> Player:
        """Remove a player, its photo, its team slot and its payment flags.

        Ledger entries mentioning the player are history and stay put.
        """

        players = self.list()
        removed = next((player for player in players if player.id == player_id), None)
        if removed is None:
            raise NotFound("Jogador não encontrado")

        teams = remove_player(teams_from_document(self.store.read(TEAMS, None)), player_id)
        payments = PaymentState.from_document(self.store.read(PAYMENTS, None))
        payments.book.drop_player(player_id)
        self.store.write_many(
            {
                PLAYERS: players_to_document([player for player in players if player.id != player_id]),
                TEAMS: teams_to_document(teams),
                PAYMENTS: payments.to_document(),
            }
        )
        if removed.photo_ref:
            self.photos.delete(removed.photo_ref)
        logger.info("Removed player %s (%s)", removed.name, removed.id)
        return removed

    def reset_all(self) -> None:
        """Wipe players plus every payment record and team slot pointing at them."""

        self.store.write_many(
            {
                PLAYERS: [],
                TEAMS: teams_to_document(TeamAssignment()),
                PAYMENTS: PaymentState.default_document(),
            }
        )
        removed = self.photos.clear()
        logger.info("Roster reset; %d photos removed", removed)
