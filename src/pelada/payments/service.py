"""Fee payments linked to cash-box entries."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from pelada.errors import DuplicateOperation, NotFound, ValidationRejection
from pelada.ledger import LedgerService, ledger_to_document
from pelada.models import Direction, FeeConfig, FeeType, Ledger, PaymentState, Player
from pelada.persistence import LEDGER, PAYMENTS, DocumentStore
from pelada.roster import PlayerRegistry


logger = logging.getLogger("uvicorn.error")


@dataclass
class PaymentOutcome:
    state: PaymentState
    ledger: Ledger


class LinkedTransactionMissing(NotFound):
    """Cancel found the payment flag but not its cash-box entry.

    The flag has already been cleared and persisted when this is raised.
    """

    def __init__(self, message: str, outcome: PaymentOutcome):
        super().__init__(message)
        self.outcome = outcome


@dataclass(frozen=True)
class FeeSummary:
    player_count: int
    non_goalkeeper_count: int
    monthly_fee_base: float
    monthly_fee_per_player: float
    event_fee: float
    total_collected: float


def monthly_fee_per_player(players: Iterable[Player], monthly_fee_base: float) -> float:
    payers = sum(1 for player in players if not player.is_goalkeeper)
    if payers == 0:
        return 0.0
    return monthly_fee_base / payers


def summarize_fees(players: Iterable[Player], state: PaymentState, monthly_fee_base: float) -> FeeSummary:
    players = list(players)
    per_player = monthly_fee_per_player(players, monthly_fee_base)
    event_fee = state.config.event_fee_base
    total = 0.0
    for player in players:
        # Goalkeepers are exempt, so a stray monthly flag never counts.
        if not player.is_goalkeeper and state.book.is_paid(player.id, FeeType.MONTHLY):
            total += per_player
        if state.book.is_paid(player.id, FeeType.EVENT):
            total += event_fee
    return FeeSummary(
        player_count=len(players),
        non_goalkeeper_count=sum(1 for player in players if not player.is_goalkeeper),
        monthly_fee_base=monthly_fee_base,
        monthly_fee_per_player=per_player,
        event_fee=event_fee,
        total_collected=total,
    )


def _parse_fee_type(fee_type: FeeType | str) -> FeeType:
    if isinstance(fee_type, FeeType):
        return fee_type
    try:
        return FeeType.parse(fee_type)
    except ValueError as exc:
        raise ValidationRejection(f"Tipo de taxa inválido: {fee_type}.") from exc


def _parse_amount(amount: float | str) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise ValidationRejection("Valor inválido.") from exc
    if not math.isfinite(value) or value <= 0:
        raise ValidationRejection("O valor do pagamento deve ser maior que zero.")
    return value


class PaymentTracker:
    def __init__(
        self,
        store: DocumentStore,
        registry: PlayerRegistry,
        ledger: LedgerService,
        *,
        monthly_fee_base: float = 540.0,
    ):
        self.store = store
        self.registry = registry
        self.ledger = ledger
        self.monthly_fee_base = monthly_fee_base

    def load(self) -> PaymentState:
        return PaymentState.from_document(self.store.read(PAYMENTS, PaymentState.default_document()))

    def _persist(self, state: PaymentState, ledger: Ledger) -> None:
        self.store.write_many(
            {
                LEDGER: ledger_to_document(ledger),
                PAYMENTS: state.to_document(),
            }
        )

    def pay(
        self,
        player_id: str,
        fee_type: FeeType | str,
        amount: float | str,
        player_name: Optional[str] = None,
    ) -> PaymentOutcome:
        fee_type = _parse_fee_type(fee_type)
        player = self.registry.get(player_id)
        if fee_type is FeeType.MONTHLY and player.is_goalkeeper:
            raise ValidationRejection("Goleiros são isentos da mensalidade.")

        state = self.load()
        if state.book.is_paid(player_id, fee_type):
            raise DuplicateOperation("Este jogador já pagou esta taxa.")
        value = _parse_amount(amount)

        name = player_name or player.name
        ledger = self.ledger.load()
        transaction = self.ledger.new_transaction(
            ledger,
            description=f"{fee_type.description} - {name}",
            amount=value,
            direction=Direction.CREDIT,
            player_id=player_id,
            player_name=name,
        )
        ledger.append(transaction)
        state.book.record(player_id, fee_type, transaction.id)
        self._persist(state, ledger)
        logger.info("Player %s paid %s fee of %.2f (transaction %s)", name, fee_type.value, value, transaction.id)
        return PaymentOutcome(state=state, ledger=ledger)

    def cancel(self, player_id: str, fee_type: FeeType | str) -> PaymentOutcome:
        fee_type = _parse_fee_type(fee_type)
        state = self.load()
        transaction_id = state.book.get(player_id, fee_type)
        if transaction_id is None:
            raise NotFound("Pagamento não encontrado.")

        ledger = self.ledger.load()
        try:
            ledger.remove(transaction_id)
        except NotFound:
            state.book.clear(player_id, fee_type)
            self.store.write(PAYMENTS, state.to_document())
            logger.warning(
                "Transaction %s for player %s not in cash box; cleared %s flag anyway",
                transaction_id,
                player_id,
                fee_type.value,
            )
            raise LinkedTransactionMissing(
                "Transação na caixinha não encontrada, mas pagamento foi resetado.",
                PaymentOutcome(state=state, ledger=ledger),
            )

        state.book.clear(player_id, fee_type)
        self._persist(state, ledger)
        logger.info("Cancelled %s fee for player %s (transaction %s)", fee_type.value, player_id, transaction_id)
        return PaymentOutcome(state=state, ledger=ledger)

    def set_fee_config(self, event_fee_base: float | str | None) -> FeeConfig:
        state = self.load()
        state.config = FeeConfig(event_fee_base=event_fee_base)
        self.store.write(PAYMENTS, state.to_document())
        return state.config

    def reset_statuses(self) -> PaymentState:
        """Clear every paid flag; cash-box entries are kept on purpose."""

        state = self.load()
        state.book.clear_all()
        self.store.write(PAYMENTS, state.to_document())
        logger.info("Payment statuses reset; cash box untouched")
        return state

    def summary(self) -> FeeSummary:
        return summarize_fees(self.registry.list(), self.load(), self.monthly_fee_base)
