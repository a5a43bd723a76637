"""Error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations


class PeladaError(Exception):
    """Base class for every failure the services report to callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationRejection(PeladaError):
    """Input had the right shape but an unacceptable value."""

    status_code = 400


class DuplicateOperation(PeladaError):
    """The operation was already applied (e.g. a fee already paid)."""

    status_code = 400


class NotFound(PeladaError):
    status_code = 404


class AuthFailure(PeladaError):
    """Missing, expired or tampered credential."""

    status_code = 401


class StorageFailure(PeladaError):
    """Underlying document read/write failed."""

    status_code = 500
