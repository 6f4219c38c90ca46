"""Trusted device value objects."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Optional

from .attributes import UserAttribute, attributes_from_provider

REMEMBERED_STATUS_ATTRIBUTES = ("dev:device_remembered_status", "device_remembered_status")


class DeviceStatus(str, Enum):
    """Remembered status of a tracked device."""
    REMEMBERED = "remembered"
    NOT_REMEMBERED = "not_remembered"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DeviceDescriptor:
    """A device tracked by the provider for one user and one app client."""

    device_key: str
    status: DeviceStatus = DeviceStatus.UNKNOWN
    name: Optional[str] = None
    attributes: List[UserAttribute] = field(default_factory=list)
    created_at: Optional[datetime] = None
    last_modified_at: Optional[datetime] = None
    last_authenticated_at: Optional[datetime] = None

    @property
    def is_remembered(self) -> bool:
        return self.status == DeviceStatus.REMEMBERED

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any]) -> "DeviceDescriptor":
        """Build from a provider device record (bare or wrapped in ``Device``)."""
        device = payload.get("Device", payload)
        attributes = attributes_from_provider(device.get("DeviceAttributes"))
        by_name = {attribute.name: attribute.value for attribute in attributes}

        status = DeviceStatus.UNKNOWN
        for key in REMEMBERED_STATUS_ATTRIBUTES:
            if key in by_name:
                try:
                    status = DeviceStatus(by_name[key])
                except ValueError:
                    status = DeviceStatus.UNKNOWN
                break

        return cls(
            device_key=device["DeviceKey"],
            status=status,
            name=by_name.get("device_name"),
            attributes=attributes,
            created_at=device.get("DeviceCreateDate"),
            last_modified_at=device.get("DeviceLastModifiedDate"),
            last_authenticated_at=device.get("DeviceLastAuthenticatedDate"),
        )


@dataclass(frozen=True)
class DevicePage:
    """One page of remembered devices."""

    devices: List[DeviceDescriptor] = field(default_factory=list)
    pagination_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.pagination_token is not None

    @classmethod
    def from_provider(cls, payload: Optional[Mapping[str, Any]]) -> "DevicePage":
        payload = payload or {}
        return cls(
            devices=[DeviceDescriptor.from_provider(item) for item in payload.get("Devices", [])],
            pagination_token=payload.get("PaginationToken"),
        )
