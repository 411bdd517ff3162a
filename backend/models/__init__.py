"""
Pydantic models for the Kyoto CLI login service.

All data shapes defined here. No imports from services or routes.
"""

from backend.models.cli_login import (
    CompleteLoginRequest,
    CompleteLoginResponse,
    CompleteOutcome,
    ConsumeResult,
    CreatedSession,
    PairingResult,
    PairingSession,
    StartLoginRequest,
    StartLoginResponse,
)
from backend.models.user import User

__all__ = [
    # User models
    "User",
    # Pairing models
    "PairingSession",
    "PairingResult",
    "CreatedSession",
    "CompleteOutcome",
    "ConsumeResult",
    # Request/response models
    "StartLoginRequest",
    "StartLoginResponse",
    "CompleteLoginRequest",
    "CompleteLoginResponse",
]
