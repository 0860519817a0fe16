"""Tests for assignment lookup and fleet-level evaluation."""

import logging
from datetime import datetime, timezone

import pytest

from netrestrict.models import UNRESTRICTED, Assignment, Device, Schedule
from netrestrict.policies import DeviceManager, RestrictionEvaluator

ALL_DAYS = frozenset(range(7))

# 04:30 UTC Tuesday: 10:00 Tue in Kolkata, 23:30 Mon in New York
INSTANT = datetime(2024, 1, 2, 4, 30, tzinfo=timezone.utc)


def make_schedule(schedule_id: int, level: int, start: str = "09:00", end: str = "17:00", **kwargs) -> Schedule:
    return Schedule(
        id=schedule_id,
        name=kwargs.pop("name", f"schedule-{schedule_id}"),
        days_of_week=kwargs.pop("days", ALL_DAYS),
        start_time=start,
        end_time=end,
        restriction_level=level,
        **kwargs,
    )


@pytest.fixture()
def devices() -> list[Device]:
    return [
        Device(id=1, time_zone="Asia/Kolkata", name="alice-phone"),
        Device(id=2, time_zone="America/New_York", name="bob-tablet"),
        Device(id=3, time_zone=None, name="unregistered"),
    ]


@pytest.fixture()
def schedules() -> list[Schedule]:
    return [
        make_schedule(10, 2, name="School Hours", restrict_wifi=True),
        make_schedule(11, 3, start="22:00", end="06:00", name="Bed Time", restrict_mobile_data=True),
        make_schedule(12, 1, name="Unassigned"),
        make_schedule(13, 3, name="Disabled", is_active=False),
    ]


@pytest.fixture()
def manager(devices: list[Device], schedules: list[Schedule]) -> DeviceManager:
    assignments = [
        Assignment(device_id=1, schedule_id=11),
        Assignment(device_id=1, schedule_id=10),
        Assignment(device_id=1, schedule_id=13),
        Assignment(device_id=2, schedule_id=10),
        Assignment(device_id=2, schedule_id=11),
        Assignment(device_id=3, schedule_id=10),
    ]
    return DeviceManager(devices, schedules, assignments)


class TestDeviceManager:
    def test_lookup(self, manager: DeviceManager) -> None:
        device = manager.get_device(1)
        assert device is not None
        assert device.name == "alice-phone"
        assert manager.get_device(99) is None
        assert manager.get_schedule(10) is not None
        assert manager.get_schedule(99) is None

    def test_schedules_in_assignment_order(self, manager: DeviceManager) -> None:
        assert [s.id for s in manager.get_schedules_for_device(1)] == [11, 10, 13]

    def test_devices_for_schedule(self, manager: DeviceManager) -> None:
        assert [d.id for d in manager.get_devices_for_schedule(10)] == [1, 2, 3]
        assert manager.get_devices_for_schedule(12) == []

    def test_duplicate_pairs_recorded_once(self, devices: list[Device], schedules: list[Schedule]) -> None:
        assignments = [
            Assignment(device_id=1, schedule_id=10),
            Assignment(device_id=1, schedule_id=11),
            Assignment(device_id=1, schedule_id=10),
        ]
        manager = DeviceManager(devices, schedules, assignments)
        assert [s.id for s in manager.get_schedules_for_device(1)] == [10, 11]
        assert [d.id for d in manager.get_devices_for_schedule(10)] == [1]

    def test_dangling_assignments_skipped(
        self,
        devices: list[Device],
        schedules: list[Schedule],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        assignments = [
            Assignment(device_id=42, schedule_id=10),
            Assignment(device_id=1, schedule_id=404),
            Assignment(device_id=1, schedule_id=10),
        ]
        with caplog.at_level(logging.WARNING):
            manager = DeviceManager(devices, schedules, assignments)

        assert [s.id for s in manager.get_schedules_for_device(1)] == [10]
        assert "unknown device 42" in caplog.text
        assert "unknown schedule 404" in caplog.text

    def test_duplicate_device_ids(self, schedules: list[Schedule]) -> None:
        devices = [Device(id=1, name="first"), Device(id=1, name="second")]
        manager = DeviceManager(devices, schedules, [])
        assert len(manager.get_all_devices()) == 1
        assert manager.get_device(1).name == "first"  # type: ignore[union-attr]

    def test_unknown_device_has_no_schedules(self, manager: DeviceManager) -> None:
        assert manager.get_schedules_for_device(99) == []


class TestRestrictionEvaluator:
    def test_evaluate_device(self, manager: DeviceManager) -> None:
        evaluator = RestrictionEvaluator(manager)

        india = evaluator.evaluate_device(1, INSTANT)
        assert india.restriction_level == 2
        assert india.restrict_wifi is True

        # New York is inside Bed Time (Mon 23:30), level 3 wins
        new_york = evaluator.evaluate_device(2, INSTANT)
        assert new_york.restriction_level == 3
        assert new_york.restrict_mobile_data is True
        assert new_york.restrict_wifi is False

    def test_unknown_device(self, manager: DeviceManager) -> None:
        assert RestrictionEvaluator(manager).evaluate_device(99, INSTANT) == UNRESTRICTED

    def test_evaluate_all(self, manager: DeviceManager, caplog: pytest.LogCaptureFixture) -> None:
        evaluator = RestrictionEvaluator(manager)
        with caplog.at_level(logging.WARNING):
            statuses = evaluator.evaluate_all(INSTANT)

        by_id = {s.device.id: s for s in statuses}
        assert set(by_id) == {1, 2, 3}

        assert by_id[1].governing_schedule is not None
        assert by_id[1].governing_schedule.name == "School Hours"
        assert [s.id for s in by_id[1].active_schedules] == [10]

        assert by_id[2].governing_schedule is not None
        assert by_id[2].governing_schedule.name == "Bed Time"

        assert by_id[3].verdict == UNRESTRICTED
        assert by_id[3].governing_schedule is None
        assert "unregistered" in caplog.text

    def test_active_schedules_across_zones(self, manager: DeviceManager) -> None:
        active = RestrictionEvaluator(manager).get_active_schedules(INSTANT)
        # School Hours via Kolkata, Bed Time via New York.
        # Unassigned and Disabled never appear.
        assert [s.id for s in active] == [10, 11]

    def test_no_active_schedules_at_quiet_hour(self, manager: DeviceManager) -> None:
        # 12:00 UTC: 17:30 in Kolkata, 07:00 in New York
        quiet = datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc)
        assert RestrictionEvaluator(manager).get_active_schedules(quiet) == []
