"""Data models for netrestrict."""

from netrestrict.models.records import (
    UNRESTRICTED,
    Assignment,
    Device,
    DeviceStatus,
    RecordId,
    RestrictionLevel,
    Schedule,
    Verdict,
)

__all__ = [
    "UNRESTRICTED",
    "Assignment",
    "Device",
    "DeviceStatus",
    "RecordId",
    "RestrictionLevel",
    "Schedule",
    "Verdict",
]
