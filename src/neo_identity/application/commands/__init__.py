"""Multi-step identity commands."""

from .authenticate_user import (
    AuthenticateUser,
    AuthenticationFlow,
    ChallengeHandler,
    RespondToMfaChallenge,
    answer_challenges,
)
from .change_password import ChangePassword

__all__ = [
    "AuthenticateUser",
    "AuthenticationFlow",
    "ChallengeHandler",
    "RespondToMfaChallenge",
    "answer_challenges",
    "ChangePassword",
]
