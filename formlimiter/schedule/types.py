"""Schedule types."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum, IntEnum
from typing import Literal
from zoneinfo import ZoneInfo

from formlimiter.errors import ConfigurationError

Handler = Literal["open_form", "close_form", "check_limit", "reinit"]

# Handlers owned by the scheduler; triggers with any other handler are left alone.
HANDLERS: frozenset[str] = frozenset({"open_form", "close_form", "check_limit", "reinit"})

FORM_SUBMIT = "form_submit"

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Weekday(IntEnum):
    """Day of week, Sunday first."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def parse(cls, name: str) -> Weekday:
        try:
            return cls[name.strip().upper()]
        except (KeyError, AttributeError):
            raise ConfigurationError(f"Unknown weekday name: {name!r}") from None

    @classmethod
    def of(cls, dt: datetime) -> Weekday:
        # datetime.weekday() is Monday first
        return cls((dt.weekday() + 1) % 7)

    @property
    def label(self) -> str:
        return self.name.capitalize()


def parse_time(value: str) -> time:
    """Parse a strict ``HH:MM`` wall-clock time."""
    m = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise ConfigurationError(f"Malformed time {value!r}, expected HH:MM")
    return time(int(m.group(1)), int(m.group(2)))


@dataclass(frozen=True)
class WeeklyRule:
    """A weekday + time-of-day recurrence."""
    weekday: Weekday
    time: time

    def __post_init__(self) -> None:
        if not isinstance(self.weekday, Weekday):
            raise ConfigurationError(f"Invalid weekday: {self.weekday!r}")
        if not isinstance(self.time, time):
            raise ConfigurationError(f"Invalid rule time: {self.time!r}")
        if self.time.second or self.time.microsecond or self.time.tzinfo is not None:
            raise ConfigurationError(f"Rule time must be a naive HH:MM, got {self.time!r}")

    @classmethod
    def parse(cls, day: str, at: str) -> WeeklyRule:
        return cls(weekday=Weekday.parse(day), time=parse_time(at))

    def __str__(self) -> str:
        return f"{self.weekday.label} {self.time:%H:%M}"


class NotifyFlag(Enum):
    """Which actions send a notification."""
    ON_OPEN = "open"
    ON_CLOSE = "close"
    ON_LIMIT = "limit"


ALL_NOTIFICATIONS: frozenset[NotifyFlag] = frozenset(NotifyFlag)
NO_NOTIFICATIONS: frozenset[NotifyFlag] = frozenset()


@dataclass(frozen=True)
class ScheduleConfig:
    """Immutable per-cycle configuration."""
    open_rule: WeeklyRule | None = None
    close_rule: WeeklyRule | None = None
    # Close the form once this many responses exist
    response_limit: int | None = None
    notify: frozenset[NotifyFlag] = field(default=ALL_NOTIFICATIONS)
    # Timezone the rules' wall-clock times are expressed in
    tz: ZoneInfo | None = None

    def __post_init__(self) -> None:
        if self.response_limit is not None:
            if isinstance(self.response_limit, bool) or not isinstance(self.response_limit, int):
                raise ConfigurationError(
                    f"Response limit must be an integer, got {self.response_limit!r}"
                )
            if self.response_limit < 0:
                raise ConfigurationError(
                    f"Response limit must be non-negative, got {self.response_limit}"
                )
        object.__setattr__(self, "notify", frozenset(self.notify))
        for flag in self.notify:
            if not isinstance(flag, NotifyFlag):
                raise ConfigurationError(f"Unknown notify flag: {flag!r}")

    def notifies(self, flag: NotifyFlag) -> bool:
        return flag in self.notify


@dataclass(frozen=True)
class TriggerIntent:
    """A trigger the scheduler should arm."""
    handler: Handler
    kind: Literal["at", "event"]
    at: datetime | None = None
    event: str | None = None


@dataclass(frozen=True)
class CyclePlan:
    """Everything a cycle decides before touching the host."""
    now: datetime
    next_open: datetime | None = None
    next_close: datetime | None = None
    # None when reconciliation is skipped (one of the rules is missing)
    should_be_open: bool | None = None
    edge_triggers: tuple[TriggerIntent, ...] = ()
    limit_trigger: TriggerIntent | None = None
    reinit_trigger: TriggerIntent | None = None

    @property
    def intents(self) -> list[TriggerIntent]:
        """All triggers in arming order."""
        out = list(self.edge_triggers)
        if self.limit_trigger:
            out.append(self.limit_trigger)
        if self.reinit_trigger:
            out.append(self.reinit_trigger)
        return out


@dataclass(frozen=True)
class WindowStatus:
    """Where ``now`` sits relative to the configured window."""
    next_open: datetime | None
    next_close: datetime | None
    should_be_open: bool | None
