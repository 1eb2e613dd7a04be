from .client import Exchange, Verto
from .config import Settings, get_settings
from .core.domain.exceptions import (
    CollaboratorError,
    ComputationError,
    InteractionFailedError,
    ValidationError,
    VertoError,
)

__version__ = "0.1.0"

__all__ = [
    "Exchange",
    "Verto",
    "Settings",
    "get_settings",
    "VertoError",
    "ValidationError",
    "CollaboratorError",
    "ComputationError",
    "InteractionFailedError",
]
