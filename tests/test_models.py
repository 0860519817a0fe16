"""Tests for record types and verdict serialization."""

import dataclasses
import json

import pytest

from netrestrict.display import format_days, format_window, restriction_label, restriction_style
from netrestrict.models import UNRESTRICTED, RestrictionLevel, Schedule, Verdict


def make_schedule(start: str = "09:00", end: str = "17:00", level: int = 2) -> Schedule:
    return Schedule(id=1, name="test", days_of_week=[1, 2], start_time=start, end_time=end, restriction_level=level)


class TestVerdict:
    def test_default_is_permissive(self) -> None:
        assert UNRESTRICTED.restriction_level == RestrictionLevel.NONE
        assert UNRESTRICTED.allow_emergency_access is True
        assert not UNRESTRICTED.has_active_restrictions

    def test_has_active_restrictions(self) -> None:
        assert Verdict(restriction_level=1).has_active_restrictions
        assert Verdict(restrict_wifi=True).has_active_restrictions
        assert Verdict(restrict_mobile_data=True).has_active_restrictions
        assert not Verdict(allow_emergency_access=False).has_active_restrictions

    def test_dict_round_trip(self) -> None:
        verdict = Verdict(restriction_level=3, restrict_wifi=True, restrict_mobile_data=False, allow_emergency_access=False)
        assert Verdict.from_dict(verdict.to_dict()) == verdict

    def test_json_round_trip(self) -> None:
        verdict = Verdict(restriction_level=2, restrict_mobile_data=True)
        payload = verdict.to_json()
        assert json.loads(payload)["hasActiveRestrictions"] is True
        assert Verdict.from_json(payload) == verdict

    def test_wire_field_types(self) -> None:
        data = Verdict(restriction_level=1).to_dict()
        assert set(data) == {
            "restrictionLevel",
            "restrictWifi",
            "restrictMobileData",
            "allowEmergencyAccess",
            "hasActiveRestrictions",
        }
        assert isinstance(data["restrictionLevel"], int)
        assert all(isinstance(data[k], bool) for k in data if k != "restrictionLevel")

    def test_derived_flag_recomputed(self) -> None:
        verdict = Verdict.from_dict({"restrictionLevel": 0, "hasActiveRestrictions": True})
        assert verdict == UNRESTRICTED

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            UNRESTRICTED.restriction_level = 3  # type: ignore[misc]


class TestSchedule:
    def test_days_become_frozenset(self) -> None:
        assert make_schedule().days_of_week == frozenset({1, 2})

    def test_defaults_match_stored_records(self) -> None:
        schedule = Schedule(id=1, name="x", days_of_week=frozenset(), start_time="09:00", end_time="10:00")
        assert schedule.restriction_level == 2
        assert schedule.allow_emergency_access is True
        assert schedule.is_active is True
        assert not schedule.restrict_wifi
        assert not schedule.restrict_mobile_data


class TestDisplay:
    def test_labels(self) -> None:
        assert restriction_label(0) == "No restrictions"
        assert restriction_label(1) == "Basic"
        assert restriction_label(2) == "Moderate"
        assert restriction_label(3) == "Strict"

    def test_unknown_level(self) -> None:
        assert restriction_label(9) == "Unknown"
        assert restriction_label(-1) == "Unknown"
        assert restriction_style(9) == "dim"

    def test_format_days_sorted(self) -> None:
        assert format_days({5, 1, 3}) == "Mon, Wed, Fri"
        assert format_days(set()) == "No days"

    def test_format_window(self) -> None:
        assert format_window(make_schedule("9:00", "17:30")) == "09:00-17:30"
        assert format_window(make_schedule("22:00", "06:00")) == "22:00-06:00 (overnight)"
        assert format_window(make_schedule("late", "06:00")) == "invalid window"
