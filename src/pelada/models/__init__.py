"""Entity models shared across services and the HTTP layer."""

from .ledger import Direction, Ledger, Transaction
from .payments import FeeConfig, FeeType, PaymentBook, PaymentKey, PaymentState
from .player import Player
from .teams import Team, TeamAssignment

__all__ = [
    "Direction",
    "Ledger",
    "Transaction",
    "FeeConfig",
    "FeeType",
    "PaymentBook",
    "PaymentKey",
    "PaymentState",
    "Player",
    "Team",
    "TeamAssignment",
]
