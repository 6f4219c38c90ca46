"""Identity gateway value objects."""

from .identity_reference import Credentials, IdentityReference, PoolConfig
from .tokens import TokenPair
from .challenges import (
    AuthenticationResult,
    AuthenticationState,
    ChallengeName,
    CodeDeliveryDetails,
    MfaChallenge,
)
from .attributes import (
    AttributeUpdateResult,
    UserAttribute,
    attributes_from_mapping,
    attributes_from_provider,
)
from .devices import DeviceDescriptor, DevicePage, DeviceStatus
from .mfa import MfaPreference, MfaSettings, settings_for_preference
from .user_data import UserData
from .registration import RegistrationResult

__all__ = [
    "Credentials",
    "IdentityReference",
    "PoolConfig",
    "TokenPair",
    "AuthenticationResult",
    "AuthenticationState",
    "ChallengeName",
    "CodeDeliveryDetails",
    "MfaChallenge",
    "AttributeUpdateResult",
    "UserAttribute",
    "attributes_from_mapping",
    "attributes_from_provider",
    "DeviceDescriptor",
    "DevicePage",
    "DeviceStatus",
    "MfaPreference",
    "MfaSettings",
    "settings_for_preference",
    "UserData",
    "RegistrationResult",
]
