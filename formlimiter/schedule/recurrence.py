"""Weekly recurrence resolution."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone, tzinfo

from formlimiter.schedule.types import Weekday, WeeklyRule

WEEK = timedelta(days=7)


def localize(base: datetime, tz: tzinfo | None) -> datetime:
    """Express *base* as wall-clock time in *tz*.

    Aware datetimes are converted, naive ones are taken to already be *tz*
    wall-clock.  Without a *tz* the value is returned unchanged.
    """
    if tz is None:
        return base
    if base.tzinfo is None:
        return base.replace(tzinfo=tz)
    return base.astimezone(tz)


def _instant(dt: datetime) -> datetime:
    # Naive values have no zone to convert through; compare them as given
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc)


def resolve_next(base: datetime, rule: WeeklyRule, tz: tzinfo | None = None) -> datetime:
    """Return the first occurrence of *rule* strictly after *base*.

    Arithmetic happens on the wall clock of *tz*, so a rule keeps its local
    time across DST changes.  An occurrence equal to *base* is pushed a full
    week forward.
    """
    local = localize(base, tz)
    start = local.replace(second=0, microsecond=0)
    offset = (rule.weekday - Weekday.of(start) + 7) % 7
    candidate = (start + timedelta(days=offset)).replace(
        hour=rule.time.hour, minute=rule.time.minute
    )
    if _instant(candidate) <= _instant(local):
        # Wall time repeated after DST ends: the second pass may still be ahead
        second_pass = candidate.replace(fold=1)
        if _instant(second_pass) > _instant(local):
            return second_pass
        candidate += WEEK
    return candidate


def next_occurrences(
    base: datetime, rule: WeeklyRule, count: int, tz: tzinfo | None = None
) -> Iterator[datetime]:
    """Yield *count* successive occurrences of *rule* after *base*."""
    current = base
    for _ in range(count):
        current = resolve_next(current, rule, tz)
        yield current
