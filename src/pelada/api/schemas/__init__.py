"""Pydantic models for API I/O."""

from .auth import AuthStatusResponse, LoginRequest
from .base import CamelModel, MessageResponse
from .ledger import TransactionRequest
from .payments import (
    CancelRequest,
    FeeConfigRequest,
    FeeSummaryResponse,
    PaymentResultResponse,
    PaymentsResponse,
    PayRequest,
)
from .teams import DraftResponse

__all__ = [
    "AuthStatusResponse",
    "CamelModel",
    "CancelRequest",
    "DraftResponse",
    "FeeConfigRequest",
    "FeeSummaryResponse",
    "LoginRequest",
    "MessageResponse",
    "PaymentResultResponse",
    "PaymentsResponse",
    "PayRequest",
    "TransactionRequest",
]
