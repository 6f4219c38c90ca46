"""User attribute value objects."""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from .challenges import CodeDeliveryDetails


@dataclass(frozen=True)
class UserAttribute:
    """A named user attribute held by the provider."""

    name: str
    value: str

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any]) -> "UserAttribute":
        return cls(name=payload["Name"], value=payload.get("Value", ""))

    def to_provider(self) -> dict:
        return {"Name": self.name, "Value": self.value}


def attributes_from_mapping(values: Mapping[str, Any]) -> List[UserAttribute]:
    """Turn a flat mapping into one attribute per key, preserving order."""
    return [UserAttribute(name=name, value=str(value)) for name, value in values.items()]


def attributes_from_provider(payload: Optional[Iterable[Any]]) -> List[UserAttribute]:
    """Accept provider attribute records or ready-made UserAttribute instances."""
    return [
        item if isinstance(item, UserAttribute) else UserAttribute.from_provider(item)
        for item in payload or []
    ]


@dataclass(frozen=True)
class AttributeUpdateResult:
    """Result of an attribute update.

    Updating a verifiable attribute (email, phone number) makes the provider
    send a code; those deliveries are listed in ``code_deliveries``.
    """

    status: str
    code_deliveries: List[CodeDeliveryDetails] = field(default_factory=list)
