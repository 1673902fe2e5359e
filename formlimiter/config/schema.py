"""Configuration schema using Pydantic."""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from formlimiter.errors import ConfigurationError
from formlimiter.schedule.types import (
    ALL_NOTIFICATIONS,
    NO_NOTIFICATIONS,
    NotifyFlag,
    ScheduleConfig,
    Weekday,
    WeeklyRule,
    parse_time,
)


class Base(BaseModel):
    """Accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuleConfig(Base):
    """A weekday + ``HH:MM`` rule, e.g. ``{"day": "Friday", "time": "16:00"}``."""

    day: str
    time: str

    @field_validator("day")
    @classmethod
    def _check_day(cls, v: str) -> str:
        try:
            Weekday.parse(v)
        except ConfigurationError as e:
            raise ValueError(str(e)) from None
        return v

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        try:
            parse_time(v)
        except ConfigurationError as e:
            raise ValueError(str(e)) from None
        return v

    def to_rule(self) -> WeeklyRule:
        return WeeklyRule.parse(self.day, self.time)


class FormConfig(Base):
    public_url: str = ""
    owner_email: str = ""
    # Initial state of the local form
    accepting: bool = False


class NotifierConfig(Base):
    # Empty means notifications only go to the log
    webhook_url: str = ""
    timeout_s: float = 10.0


def _blank_to_none(v: object) -> object:
    # An empty string means "not set"
    if isinstance(v, str) and not v.strip():
        return None
    return v


class FormLimiterConfig(Base):
    """Root configuration."""

    timezone: str = "UTC"
    open: RuleConfig | None = None
    close: RuleConfig | None = None
    response_limit: int | None = Field(default=None, ge=0)
    notify: list[str] = Field(default_factory=lambda: ["all"])
    form: FormConfig = Field(default_factory=FormConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    store_path: str = "~/.formlimiter/triggers.json"
    poll_interval_s: float = 60.0

    @field_validator("open", "close", "response_limit", mode="before")
    @classmethod
    def _blank(cls, v: object) -> object:
        return _blank_to_none(v)

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v!r}") from None
        return v

    @field_validator("notify")
    @classmethod
    def _check_notify(cls, v: list[str]) -> list[str]:
        parse_notify(v)
        return v

    @property
    def notify_flags(self) -> frozenset[NotifyFlag]:
        return parse_notify(self.notify)

    def to_schedule(self) -> ScheduleConfig:
        return ScheduleConfig(
            open_rule=self.open.to_rule() if self.open else None,
            close_rule=self.close.to_rule() if self.close else None,
            response_limit=self.response_limit,
            notify=self.notify_flags,
            tz=ZoneInfo(self.timezone),
        )


def parse_notify(names: list[str]) -> frozenset[NotifyFlag]:
    """Turn flag names (plus ``all`` / ``none``) into a flag set."""
    flags: set[NotifyFlag] = set()
    for name in names:
        key = name.strip().lower()
        if key == "all":
            flags |= ALL_NOTIFICATIONS
        elif key == "none":
            flags |= NO_NOTIFICATIONS
        else:
            try:
                flags.add(NotifyFlag(key))
            except ValueError:
                raise ValueError(f"Unknown notify flag: {name!r}") from None
    return frozenset(flags)
