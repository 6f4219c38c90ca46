"""User data (attributes and MFA settings) as read from the provider."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .attributes import UserAttribute, attributes_from_provider
from .mfa import MfaPreference

_MFA_SETTING_TO_PREFERENCE = {
    "SMS_MFA": MfaPreference.SMS,
    "SOFTWARE_TOKEN_MFA": MfaPreference.TOTP,
}


@dataclass(frozen=True)
class UserData:
    """User record with MFA settings."""

    username: str
    attributes: List[UserAttribute] = field(default_factory=list)
    preferred_mfa_setting: Optional[str] = None
    user_mfa_setting_list: List[str] = field(default_factory=list)

    @property
    def mfa_preference(self) -> MfaPreference:
        """Preferred factor derived from the provider settings."""
        return _MFA_SETTING_TO_PREFERENCE.get(
            self.preferred_mfa_setting or "", MfaPreference.DISABLED
        )

    @property
    def sms_enabled(self) -> bool:
        return "SMS_MFA" in self.user_mfa_setting_list

    @property
    def totp_enabled(self) -> bool:
        return "SOFTWARE_TOKEN_MFA" in self.user_mfa_setting_list

    def attribute(self, name: str) -> Optional[str]:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any]) -> "UserData":
        return cls(
            username=payload.get("Username", ""),
            attributes=attributes_from_provider(payload.get("UserAttributes")),
            preferred_mfa_setting=payload.get("PreferredMfaSetting"),
            user_mfa_setting_list=list(payload.get("UserMFASettingList") or []),
        )
