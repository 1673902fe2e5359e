"""Cycle planning: decide which triggers to arm without touching the host."""

from __future__ import annotations

from datetime import datetime

from formlimiter.schedule.recurrence import WEEK, localize, resolve_next
from formlimiter.schedule.types import (
    FORM_SUBMIT,
    CyclePlan,
    ScheduleConfig,
    TriggerIntent,
    WindowStatus,
)


def should_be_open(next_open: datetime, next_close: datetime) -> bool:
    """The form is inside its window when the next close comes no later than the next open."""
    return next_close <= next_open


def describe_window(config: ScheduleConfig, now: datetime) -> WindowStatus:
    next_open = resolve_next(now, config.open_rule, config.tz) if config.open_rule else None
    next_close = resolve_next(now, config.close_rule, config.tz) if config.close_rule else None
    verdict = None
    if next_open is not None and next_close is not None:
        verdict = should_be_open(next_open, next_close)
    return WindowStatus(next_open=next_open, next_close=next_close, should_be_open=verdict)


def plan_cycle(config: ScheduleConfig, now: datetime) -> CyclePlan:
    """Resolve both edges and list the triggers a cycle at *now* arms.

    Pure: raises before anything on the host has been changed.
    """
    status = describe_window(config, now)

    edges: list[TriggerIntent] = []
    if status.next_open is not None:
        edges.append(TriggerIntent(handler="open_form", kind="at", at=status.next_open))
    if status.next_close is not None:
        edges.append(TriggerIntent(handler="close_form", kind="at", at=status.next_close))

    limit = None
    if config.response_limit is not None:
        limit = TriggerIntent(handler="check_limit", kind="event", event=FORM_SUBMIT)

    reinit = TriggerIntent(handler="reinit", kind="at", at=localize(now, config.tz) + WEEK)

    return CyclePlan(
        now=now,
        next_open=status.next_open,
        next_close=status.next_close,
        should_be_open=status.should_be_open,
        edge_triggers=tuple(edges),
        limit_trigger=limit,
        reinit_trigger=reinit,
    )
