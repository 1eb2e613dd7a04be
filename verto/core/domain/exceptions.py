from typing import Optional


class VertoError(Exception):
    """Base class for every error raised by the SDK."""


class ValidationError(VertoError, ValueError):
    """
    Raised BEFORE any external call when the caller input is malformed
    (bad address, non-positive amount, wrong pair length).
    Nothing was read or written yet.
    """


class CollaboratorError(VertoError):
    """
    Raised when the ledger gateway, the cache service or the interaction relay
    fails (network error, timeout, non-2xx status, unparseable payload).
    """
    def __init__(self, service: str, msg: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(f"{service}: {msg}")
        self.service = service
        self.msg = msg
        self.status_code = status_code
        self.url = url


class ComputationError(VertoError, ArithmeticError):
    """
    Raised when a snapshot cannot be computed over, e.g. a resting order
    priced at 0 (1 / price is undefined).
    """


class InteractionFailedError(VertoError):
    """
    Raised when a write interaction was submitted but returned no id,
    or the contract answered with a non-success result.
    """
    def __init__(self, msg: str, interaction_id: Optional[str] = None):
        super().__init__(msg)
        self.msg = msg
        self.interaction_id = interaction_id
