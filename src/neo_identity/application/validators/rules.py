"""Field rules for request validation.

Each rule takes a raw field value and returns the list of violated
constraints as messages; an empty list means the value is valid. Rules are
pure: no side effects, no provider access.
"""

import re
from typing import Any, Callable, List, Mapping

from email_validator import EmailNotValidError, validate_email

from ...core.value_objects import ChallengeName

Rule = Callable[[Any], List[str]]

PASSWORD_MIN_LENGTH = 8
PASSWORD_SYMBOLS = "$&+,:;=?@#|'<>.^*()%!-"
MFA_TYPES = ("sms", "totp")

_LOWERCASE = re.compile(r"[a-z]")
_UPPERCASE = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile("[" + re.escape(PASSWORD_SYMBOLS) + "]")
_ALLOWED_PASSWORD = re.compile(r"[A-Za-z0-9" + re.escape(PASSWORD_SYMBOLS) + "]+")
_CONFIRMATION_CODE = re.compile(r"[0-9]{6}")


def email_address(value: Any) -> List[str]:
    if not isinstance(value, str) or not value.strip():
        return ["must not be empty"]
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return ["must be a valid email address"]
    return []


def new_password(value: Any) -> List[str]:
    """Password complexity for passwords being set.

    At least 8 characters with one lowercase letter, one uppercase letter,
    one digit and one symbol; only letters, digits and the allowed symbols.
    """
    if not isinstance(value, str) or not value:
        return ["must not be empty"]

    messages = []
    if len(value) < PASSWORD_MIN_LENGTH:
        messages.append(f"must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not _LOWERCASE.search(value):
        messages.append("must contain a lowercase letter")
    if not _UPPERCASE.search(value):
        messages.append("must contain an uppercase letter")
    if not _DIGIT.search(value):
        messages.append("must contain a digit")
    if not _SYMBOL.search(value):
        messages.append(f"must contain one of the symbols {PASSWORD_SYMBOLS}")
    if not _ALLOWED_PASSWORD.fullmatch(value):
        messages.append(f"may only contain letters, digits and the symbols {PASSWORD_SYMBOLS}")
    return messages


def presented_password(value: Any) -> List[str]:
    """Password presented as a credential; only checked for presence."""
    if not isinstance(value, str) or not value:
        return ["must not be empty"]
    return []


def confirmation_code(value: Any) -> List[str]:
    if not isinstance(value, str) or not _CONFIRMATION_CODE.fullmatch(value):
        return ["must be exactly 6 digits"]
    return []


def mfa_type(value: Any) -> List[str]:
    if value not in MFA_TYPES:
        return [f"must be one of {', '.join(MFA_TYPES)}"]
    return []


def challenge_name(value: Any) -> List[str]:
    names = [name.value for name in ChallengeName]
    if value not in names:
        return [f"must be one of {', '.join(names)}"]
    return []


def non_empty_string(value: Any) -> List[str]:
    if not isinstance(value, str) or not value:
        return ["must be a non-empty string"]
    return []


def positive_integer(value: Any) -> List[str]:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return ["must be a positive integer"]
    return []


def optional_non_empty_string(value: Any) -> List[str]:
    if value is None:
        return []
    return non_empty_string(value)


def attribute_names(value: Any) -> List[str]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, (list, tuple, set, frozenset)):
        return ["must be a list of attribute names"]
    if not value:
        return ["must not be empty"]
    if any(not isinstance(name, str) or not name for name in value):
        return ["must contain only non-empty attribute names"]
    return []


def attribute_values(value: Any) -> List[str]:
    """Attributes to set: names mapped to string values, possibly empty."""
    if not isinstance(value, Mapping):
        return ["must be a mapping of attribute names to values"]
    messages = []
    if any(not isinstance(name, str) or not name for name in value):
        messages.append("attribute names must be non-empty strings")
    if any(not isinstance(item, str) for item in value.values()):
        messages.append("attribute values must be strings")
    return messages


def non_empty_attribute_values(value: Any) -> List[str]:
    if isinstance(value, Mapping) and not value:
        return ["must not be empty"]
    return attribute_values(value)


def boolean(value: Any) -> List[str]:
    if not isinstance(value, bool):
        return ["must be a boolean"]
    return []
