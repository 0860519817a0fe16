"""Restriction evaluation across a set of managed devices.

Evaluates every device's assigned schedules in the device's own time zone
and reports the effective network restrictions.
"""

import logging
from datetime import datetime
from typing import Optional

from netrestrict.models import UNRESTRICTED, Device, DeviceStatus, RecordId, Schedule, Verdict
from netrestrict.policies.aggregator import fold_verdict, select_governing_schedule
from netrestrict.policies.device_manager import DeviceManager
from netrestrict.policies.timeutil import utcnow
from netrestrict.policies.window_matcher import active_schedules_for, is_schedule_active

logger = logging.getLogger(__name__)


class RestrictionEvaluator:
    """Evaluates network restrictions for the devices of a snapshot.

    For each device:
    1. Look up its assigned schedules (assignment order)
    2. Keep the schedules whose window is open in the device's zone
    3. Let the highest-level schedule supply the whole restriction bundle
    """

    def __init__(self, device_manager: DeviceManager) -> None:
        """Initialize evaluator.

        Args:
            device_manager: Device-to-schedule assignments
        """
        self.device_manager = device_manager

    def evaluate_device(
        self,
        device_id: RecordId,
        instant: Optional[datetime] = None,
    ) -> Verdict:
        """Compute the verdict for one device.

        Args:
            device_id: Device to evaluate
            instant: Moment to evaluate, defaults to now

        Returns:
            Verdict (unrestricted for unknown devices)
        """
        device = self.device_manager.get_device(device_id)
        if device is None:
            logger.debug(f"No device {device_id!r}, returning unrestricted verdict")
            return UNRESTRICTED

        return self._status_for(device, instant if instant is not None else utcnow()).verdict

    def evaluate_all(self, instant: Optional[datetime] = None) -> list[DeviceStatus]:
        """Compute the status of every device at the same instant."""
        if instant is None:
            instant = utcnow()

        statuses = [self._status_for(device, instant) for device in self.device_manager.get_all_devices()]

        missing_zone = [s.device for s in statuses if not s.device.time_zone]
        if missing_zone:
            names = ", ".join(self._device_label(d) for d in missing_zone)
            logger.warning(f"No time zone set, restrictions not evaluated for: {names}")

        return statuses

    def get_active_schedules(self, instant: Optional[datetime] = None) -> list[Schedule]:
        """Return schedules currently active for at least one assigned device.

        Each device is checked in its own time zone. Schedules with no
        assigned devices are never reported as active.
        """
        if instant is None:
            instant = utcnow()

        active = []
        for schedule in self.device_manager.get_all_schedules():
            if not schedule.is_active:
                continue
            for device in self.device_manager.get_devices_for_schedule(schedule.id):
                if is_schedule_active(schedule, device, instant):
                    active.append(schedule)
                    break  # Active for one device is enough
        return active

    def _status_for(self, device: Device, instant: datetime) -> DeviceStatus:
        assigned = self.device_manager.get_schedules_for_device(device.id)
        active = active_schedules_for(device, assigned, instant)
        return DeviceStatus(
            device=device,
            verdict=fold_verdict(active),
            governing_schedule=select_governing_schedule(active),
            active_schedules=active,
        )

    @staticmethod
    def _device_label(device: Device) -> str:
        return device.name or str(device.id)
