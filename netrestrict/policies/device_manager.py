"""Device-to-schedule assignment lookup."""

import logging
from typing import Iterable, Optional

from netrestrict.models import Assignment, Device, RecordId, Schedule

logger = logging.getLogger(__name__)


class DeviceManager:
    """Manages device-to-schedule assignments for quick lookup.

    Provides O(1) lookup of devices and schedules by id, and keeps each
    device's schedules in assignment order (used for tie-breaks).
    """

    def __init__(
        self,
        devices: Iterable[Device],
        schedules: Iterable[Schedule],
        assignments: Iterable[Assignment],
    ) -> None:
        """Initialize device manager.

        Args:
            devices: Device records
            schedules: Schedule records
            assignments: Device-schedule pairs, in caller-meaningful order
        """
        self._devices: dict[RecordId, Device] = {}
        self._schedules: dict[RecordId, Schedule] = {}
        self._device_schedules: dict[RecordId, list[RecordId]] = {}
        self._schedule_devices: dict[RecordId, list[RecordId]] = {}

        for device in devices:
            if device.id in self._devices:
                logger.warning(f"Duplicate device id {device.id!r}, keeping the first")
                continue
            self._devices[device.id] = device
            self._device_schedules[device.id] = []

        for schedule in schedules:
            if schedule.id in self._schedules:
                logger.warning(f"Duplicate schedule id {schedule.id!r}, keeping the first")
                continue
            self._schedules[schedule.id] = schedule
            self._schedule_devices[schedule.id] = []

        # Build assignment tables
        for assignment in assignments:
            self._add_assignment(assignment)

    def _add_assignment(self, assignment: Assignment) -> None:
        device_id, schedule_id = assignment.device_id, assignment.schedule_id

        if device_id not in self._devices:
            logger.warning(f"Assignment references unknown device {device_id!r}, skipping")
            return
        if schedule_id not in self._schedules:
            logger.warning(f"Assignment references unknown schedule {schedule_id!r}, skipping")
            return

        # A pair is recorded once; the first position is kept
        if schedule_id in self._device_schedules[device_id]:
            logger.debug(f"Duplicate assignment {device_id!r} -> {schedule_id!r} ignored")
            return

        self._device_schedules[device_id].append(schedule_id)
        self._schedule_devices[schedule_id].append(device_id)

    def get_device(self, device_id: RecordId) -> Optional[Device]:
        """Look up device by id.

        Returns:
            Device if found, None otherwise
        """
        return self._devices.get(device_id)

    def get_schedule(self, schedule_id: RecordId) -> Optional[Schedule]:
        """Look up schedule by id.

        Returns:
            Schedule if found, None otherwise
        """
        return self._schedules.get(schedule_id)

    def get_schedules_for_device(self, device_id: RecordId) -> list[Schedule]:
        """Return the schedules assigned to a device, in assignment order."""
        return [self._schedules[sid] for sid in self._device_schedules.get(device_id, [])]

    def get_devices_for_schedule(self, schedule_id: RecordId) -> list[Device]:
        """Return the devices a schedule is assigned to."""
        return [self._devices[did] for did in self._schedule_devices.get(schedule_id, [])]

    def get_all_devices(self) -> list[Device]:
        """Return all devices."""
        return list(self._devices.values())

    def get_all_schedules(self) -> list[Schedule]:
        """Return all schedules."""
        return list(self._schedules.values())
