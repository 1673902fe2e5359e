"""Weekly open/close scheduling for a form."""

from formlimiter.schedule.planner import describe_window, plan_cycle
from formlimiter.schedule.recurrence import resolve_next
from formlimiter.schedule.service import CycleReport, FormScheduler
from formlimiter.schedule.types import (
    ALL_NOTIFICATIONS,
    NotifyFlag,
    ScheduleConfig,
    Weekday,
    WeeklyRule,
)

__all__ = [
    "FormScheduler",
    "CycleReport",
    "ScheduleConfig",
    "WeeklyRule",
    "Weekday",
    "NotifyFlag",
    "ALL_NOTIFICATIONS",
    "resolve_next",
    "plan_cycle",
    "describe_window",
]
