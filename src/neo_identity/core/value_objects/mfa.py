"""MFA preference value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class MfaPreference(str, Enum):
    """Preferred second factor for a user. Mutually exclusive."""
    DISABLED = "disabled"
    SMS = "sms"
    TOTP = "totp"


@dataclass(frozen=True)
class MfaSettings:
    """Per-factor settings sent to the provider."""

    enabled: bool
    preferred: bool

    @classmethod
    def preferred_factor(cls) -> "MfaSettings":
        return cls(enabled=True, preferred=True)

    @classmethod
    def off(cls) -> "MfaSettings":
        return cls(enabled=False, preferred=False)


def settings_for_preference(
    preference: MfaPreference,
) -> Tuple[Optional[MfaSettings], Optional[MfaSettings]]:
    """Build the ``(sms, totp)`` settings pair for a preference.

    Selecting one factor sends settings for that factor only and ``None`` for
    the other, leaving the provider to clear the competing preference.
    Disabling sends explicit "off" settings for both.
    """
    if preference == MfaPreference.SMS:
        return MfaSettings.preferred_factor(), None
    if preference == MfaPreference.TOTP:
        return None, MfaSettings.preferred_factor()
    return MfaSettings.off(), MfaSettings.off()
