"""Configuration and snapshot loading for netrestrict.

Loads settings plus the device, schedule and assignment records to evaluate
from a TOML file, with CLI override support.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli

from netrestrict.models import Assignment, Device, Schedule
from netrestrict.policies.timeutil import parse_days

logger = logging.getLogger(__name__)

_MISSING = object()


def get_config_search_paths() -> list[Path]:
    """Get list of paths to search for config file."""
    return [
        Path("netrestrict.toml"),  # Current directory
        Path.home() / ".config" / "netrestrict" / "netrestrict.toml",
        Path("/etc/netrestrict/netrestrict.toml"),
    ]


def find_config_file() -> Optional[Path]:
    """Find the first existing config file."""
    for path in get_config_search_paths():
        if path.exists():
            return path
    return None


@dataclass
class Config:
    """Loaded configuration with all sections."""

    # Settings
    refresh_interval: int = 15  # seconds between evaluations in watch mode
    log_level: str = "warning"

    # Snapshot records
    devices: list[Device] = field(default_factory=list)
    schedules: list[Schedule] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)


def _lookup(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; records may use snake_case or camelCase."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _parse_flag(data: dict[str, Any], schedule_id: Any, default: bool, *keys: str) -> bool:
    """Read a boolean field, accepting real booleans or "true"/"false" strings."""
    value = _lookup(data, *keys, default=default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    logger.warning(f"Schedule {schedule_id!r}: {keys[0]} {value!r} is not a boolean, using {default}")
    return default


def _parse_device(data: dict[str, Any]) -> Optional[Device]:
    device_id = _lookup(data, "id", default=_MISSING)
    if device_id is _MISSING:
        logger.warning(f"Skipping device without id: {data!r}")
        return None

    time_zone = _lookup(data, "time_zone", "timeZone", "timezone")
    if time_zone is not None and not isinstance(time_zone, str):
        logger.warning(f"Device {device_id!r}: time zone {time_zone!r} is not a zone name, ignoring it")
        time_zone = None
    if not time_zone:
        time_zone = None

    return Device(id=device_id, time_zone=time_zone, name=data.get("name", ""))


def _parse_schedule(data: dict[str, Any]) -> Optional[Schedule]:
    schedule_id = _lookup(data, "id", default=_MISSING)
    if schedule_id is _MISSING:
        logger.warning(f"Skipping schedule without id: {data!r}")
        return None

    level = _lookup(data, "restriction_level", "restrictionLevel", "networkRestrictionLevel", default=2)
    try:
        parsed_level = None if isinstance(level, bool) else int(level)
    except (TypeError, ValueError):
        parsed_level = None
    if parsed_level is None:
        logger.warning(f"Skipping schedule {schedule_id!r}: restriction level {level!r} is not a number")
        return None

    return Schedule(
        id=schedule_id,
        name=data.get("name", str(schedule_id)),
        days_of_week=parse_days(_lookup(data, "days_of_week", "daysOfWeek", "days")),
        # Validated at match time; malformed windows never match
        start_time=_lookup(data, "start_time", "startTime", "start", default=""),
        end_time=_lookup(data, "end_time", "endTime", "end", default=""),
        restriction_level=parsed_level,
        restrict_wifi=_parse_flag(data, schedule_id, False, "restrict_wifi", "restrictWifi"),
        restrict_mobile_data=_parse_flag(data, schedule_id, False, "restrict_mobile_data", "restrictMobileData"),
        allow_emergency_access=_parse_flag(data, schedule_id, True, "allow_emergency_access", "allowEmergencyAccess"),
        is_active=_parse_flag(data, schedule_id, True, "is_active", "isActive"),
    )


def _parse_assignment(data: dict[str, Any]) -> Optional[Assignment]:
    device_id = _lookup(data, "device", "device_id", "deviceId", default=_MISSING)
    schedule_id = _lookup(data, "schedule", "schedule_id", "scheduleId", default=_MISSING)
    if device_id is _MISSING or schedule_id is _MISSING:
        logger.warning(f"Skipping incomplete assignment: {data!r}")
        return None
    return Assignment(device_id=device_id, schedule_id=schedule_id)


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from TOML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Config object with loaded values
    """
    config = Config()

    # Find config file
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not config_path.exists():
        logger.debug("No config file found, using defaults")
        return config

    logger.info(f"Loading config from {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config file: {e}")
        return config

    # Settings section
    if "settings" in data:
        settings = data["settings"]
        if "refresh_interval" in settings:
            config.refresh_interval = settings["refresh_interval"]
        if "log_level" in settings:
            config.log_level = settings["log_level"]

    # Devices, with optional inline schedule lists
    inline_assignments: list[Assignment] = []
    for device_data in data.get("devices", []):
        device = _parse_device(device_data)
        if device is None:
            continue
        config.devices.append(device)
        for schedule_id in device_data.get("schedules", []):
            inline_assignments.append(Assignment(device_id=device.id, schedule_id=schedule_id))

    # Schedules
    for schedule_data in data.get("schedules", []):
        schedule = _parse_schedule(schedule_data)
        if schedule is not None:
            config.schedules.append(schedule)

    # Assignments: inline lists first, then the explicit table
    config.assignments.extend(inline_assignments)
    for assignment_data in data.get("assignments", []):
        assignment = _parse_assignment(assignment_data)
        if assignment is not None:
            config.assignments.append(assignment)

    logger.debug(
        f"Loaded {len(config.devices)} devices, {len(config.schedules)} schedules, "
        f"{len(config.assignments)} assignments"
    )
    return config


def merge_cli_options(config: Config, **cli_options: Any) -> Config:
    """Merge CLI options into config (CLI takes precedence).

    Args:
        config: Base config from file
        **cli_options: CLI option overrides (None values are ignored)

    Returns:
        Config with CLI overrides applied
    """
    # Map CLI option names to config attributes
    mappings = {
        "interval": "refresh_interval",
        "log_level": "log_level",
    }

    for cli_name, config_name in mappings.items():
        if cli_name in cli_options:
            value = cli_options[cli_name]
            # Only override if CLI value is meaningful
            if value is not None and value != "":
                setattr(config, config_name, value)

    return config
