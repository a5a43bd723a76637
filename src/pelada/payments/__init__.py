"""Fee payment tracking."""

from .service import (
    FeeSummary,
    LinkedTransactionMissing,
    PaymentOutcome,
    PaymentTracker,
    monthly_fee_per_player,
    summarize_fees,
)

__all__ = [
    "FeeSummary",
    "LinkedTransactionMissing",
    "PaymentOutcome",
    "PaymentTracker",
    "monthly_fee_per_player",
    "summarize_fees",
]
