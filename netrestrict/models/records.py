"""Record types for devices, schedules and restriction verdicts.

Devices and schedules are immutable snapshots handed in by the caller. A
Verdict is computed per evaluation and never stored.
"""

import json
from dataclasses import dataclass, field
from datetime import time
from enum import IntEnum
from typing import Any, Optional, Union

RecordId = Union[int, str]


class RestrictionLevel(IntEnum):
    """Ordinal restriction severity. Higher is more restrictive."""

    NONE = 0
    BASIC = 1
    MODERATE = 2
    STRICT = 3


@dataclass(frozen=True)
class Device:
    """A managed endpoint.

    Attributes:
        id: Unique device identifier
        time_zone: IANA zone name (e.g. "Asia/Kolkata"). None disables
            restriction evaluation for this device.
        name: Human-readable device name
    """

    id: RecordId
    time_zone: Optional[str] = None
    name: str = ""


@dataclass(frozen=True)
class Schedule:
    """A time-windowed restriction policy.

    Attributes:
        id: Unique schedule identifier
        name: Display name (e.g. "School Hours")
        days_of_week: Weekday indices, 0=Sunday through 6=Saturday
        start_time: Window start, "HH:MM" (24-hour) or datetime.time
        end_time: Window end, "HH:MM" (24-hour) or datetime.time
        restriction_level: 0 (none) through 3 (strict); raw value is kept
        restrict_wifi: Block Wi-Fi while the schedule governs
        restrict_mobile_data: Block mobile data while the schedule governs
        allow_emergency_access: Keep emergency access available
        is_active: Administrative switch, independent of the time window
    """

    id: RecordId
    name: str
    days_of_week: frozenset[int]
    start_time: Union[str, time]  # "09:00"
    end_time: Union[str, time]  # "17:00"
    restriction_level: int = int(RestrictionLevel.MODERATE)
    restrict_wifi: bool = False
    restrict_mobile_data: bool = False
    allow_emergency_access: bool = True
    is_active: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.days_of_week, frozenset):
            object.__setattr__(self, "days_of_week", frozenset(self.days_of_week))


@dataclass(frozen=True)
class Assignment:
    """Links one device to one schedule. Carries no other state."""

    device_id: RecordId
    schedule_id: RecordId


@dataclass(frozen=True)
class Verdict:
    """Effective restriction state for one device at one instant.

    The four policy fields always come from a single schedule (or from the
    permissive default); they are never combined across schedules.
    """

    restriction_level: int = int(RestrictionLevel.NONE)
    restrict_wifi: bool = False
    restrict_mobile_data: bool = False
    allow_emergency_access: bool = True

    @property
    def has_active_restrictions(self) -> bool:
        return self.restriction_level > 0 or self.restrict_wifi or self.restrict_mobile_data

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "Verdict":
        """Take a schedule's whole restriction bundle."""
        return cls(
            restriction_level=schedule.restriction_level,
            restrict_wifi=schedule.restrict_wifi,
            restrict_mobile_data=schedule.restrict_mobile_data,
            allow_emergency_access=schedule.allow_emergency_access,
        )

    def to_dict(self) -> dict[str, Any]:
        """Flat mapping using the wire field names."""
        return {
            "restrictionLevel": self.restriction_level,
            "restrictWifi": self.restrict_wifi,
            "restrictMobileData": self.restrict_mobile_data,
            "allowEmergencyAccess": self.allow_emergency_access,
            "hasActiveRestrictions": self.has_active_restrictions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Verdict":
        # hasActiveRestrictions is derived, so the incoming value is ignored
        return cls(
            restriction_level=int(data.get("restrictionLevel", 0)),
            restrict_wifi=bool(data.get("restrictWifi", False)),
            restrict_mobile_data=bool(data.get("restrictMobileData", False)),
            allow_emergency_access=bool(data.get("allowEmergencyAccess", True)),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "Verdict":
        return cls.from_dict(json.loads(payload))


UNRESTRICTED = Verdict()


@dataclass
class DeviceStatus:
    """Evaluation result for one device, as shown by status listings.

    Attributes:
        device: The evaluated device
        verdict: Effective restrictions
        governing_schedule: Schedule whose bundle the verdict carries, if any
        active_schedules: All assigned schedules active at the instant
    """

    device: Device
    verdict: Verdict
    governing_schedule: Optional[Schedule] = None
    active_schedules: list[Schedule] = field(default_factory=list)
