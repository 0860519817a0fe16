"""Schedule matching and restriction evaluation for netrestrict."""

from netrestrict.policies.aggregator import (
    evaluate_restrictions,
    fold_verdict,
    select_governing_schedule,
)
from netrestrict.policies.device_manager import DeviceManager
from netrestrict.policies.restriction_evaluator import RestrictionEvaluator
from netrestrict.policies.window_matcher import active_schedules_for, is_schedule_active

__all__ = [
    "evaluate_restrictions",
    "fold_verdict",
    "select_governing_schedule",
    "DeviceManager",
    "RestrictionEvaluator",
    "active_schedules_for",
    "is_schedule_active",
]
