"""Provider adapters."""

from .callback_adapter import ChallengeResponseAdapter, PendingResult, ResolutionState
from .error_classifier import (
    REJECTION_CODES,
    classify_provider_error,
    extract_error_code,
    extract_error_message,
)

__all__ = [
    "ChallengeResponseAdapter",
    "PendingResult",
    "ResolutionState",
    "REJECTION_CODES",
    "classify_provider_error",
    "extract_error_code",
    "extract_error_message",
]
