"""Tests for configuration loading and conversion."""

from __future__ import annotations

import json
from datetime import time
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from formlimiter.config import FormLimiterConfig, load_config, save_config
from formlimiter.errors import ConfigurationError
from formlimiter.schedule.types import ALL_NOTIFICATIONS, NotifyFlag, Weekday


def _write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults() -> None:
    cfg = FormLimiterConfig()
    assert cfg.timezone == "UTC"
    assert cfg.open is None
    assert cfg.close is None
    assert cfg.response_limit is None
    assert cfg.notify_flags == ALL_NOTIFICATIONS


def test_camel_case_keys() -> None:
    cfg = FormLimiterConfig.model_validate({
        "timezone": "Europe/Stockholm",
        "open": {"day": "Sunday", "time": "11:00"},
        "close": {"day": "Sunday", "time": "13:00"},
        "responseLimit": 50,
        "notify": ["open", "limit"],
        "form": {"publicUrl": "https://forms.example/f/1", "ownerEmail": "me@example.com"},
        "pollIntervalS": 5,
    })
    assert cfg.response_limit == 50
    assert cfg.form.public_url == "https://forms.example/f/1"
    assert cfg.form.owner_email == "me@example.com"
    assert cfg.poll_interval_s == 5

    schedule = cfg.to_schedule()
    assert schedule.open_rule.weekday == Weekday.SUNDAY
    assert schedule.open_rule.time == time(11, 0)
    assert schedule.close_rule.time == time(13, 0)
    assert schedule.response_limit == 50
    assert schedule.notify == frozenset({NotifyFlag.ON_OPEN, NotifyFlag.ON_LIMIT})
    assert schedule.tz == ZoneInfo("Europe/Stockholm")


def test_snake_case_keys() -> None:
    cfg = FormLimiterConfig.model_validate({"response_limit": 3, "poll_interval_s": 1})
    assert cfg.response_limit == 3
    assert cfg.poll_interval_s == 1


def test_blank_values_mean_not_set() -> None:
    cfg = FormLimiterConfig.model_validate({"open": "", "close": "", "responseLimit": ""})
    schedule = cfg.to_schedule()
    assert schedule.open_rule is None
    assert schedule.close_rule is None
    assert schedule.response_limit is None


def test_notify_none_and_all() -> None:
    assert FormLimiterConfig.model_validate({"notify": ["none"]}).notify_flags == frozenset()
    assert FormLimiterConfig.model_validate({"notify": ["ALL"]}).notify_flags == ALL_NOTIFICATIONS
    assert FormLimiterConfig.model_validate({"notify": []}).notify_flags == frozenset()


@pytest.mark.parametrize(
    "data",
    [
        {"open": {"day": "Someday", "time": "11:00"}},
        {"close": {"day": "Monday", "time": "25:00"}},
        {"responseLimit": -1},
        {"notify": ["sometimes"]},
        {"timezone": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_values_rejected(data: dict) -> None:
    with pytest.raises(ValidationError):
        FormLimiterConfig.model_validate(data)


def test_load_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "nope.json")
    assert cfg == FormLimiterConfig()


def test_load_valid_file(tmp_path: Path) -> None:
    path = _write(tmp_path, {"open": {"day": "Friday", "time": "16:00"}, "responseLimit": 10})
    cfg = load_config(path)
    assert cfg.open.day == "Friday"
    assert cfg.response_limit == 10


def test_load_invalid_file_is_configuration_error(tmp_path: Path) -> None:
    path = _write(tmp_path, {"responseLimit": -5})
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_malformed_json_is_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_save_then_load(tmp_path: Path) -> None:
    cfg = FormLimiterConfig.model_validate({"close": {"day": "Monday", "time": "09:30"}, "notify": ["close"]})
    path = tmp_path / "nested" / "config.json"
    save_config(cfg, path)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert "responseLimit" in raw
    assert load_config(path) == cfg
