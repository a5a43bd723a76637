"""Cash-box ledger service."""

from .service import LedgerCheck, LedgerService, ledger_from_document, ledger_to_document

__all__ = ["LedgerCheck", "LedgerService", "ledger_from_document", "ledger_to_document"]
