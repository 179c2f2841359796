from dataclasses import replace

import pytest

from studyflow.core.presets import DEFAULT_PRESETS, find_preset, is_preset_active
from studyflow.core.settings import (
    DEFAULT_SETTINGS,
    Phase,
    SettingsError,
    settings_from_dict,
    settings_to_dict,
    validate_settings,
)


def test_duration_lookup() -> None:
    assert DEFAULT_SETTINGS.duration_seconds(Phase.WORK) == 1500
    assert DEFAULT_SETTINGS.duration_seconds(Phase.SHORT_BREAK) == 300
    assert DEFAULT_SETTINGS.duration_seconds(Phase.LONG_BREAK) == 900


@pytest.mark.parametrize(
    "changes",
    [
        {"work_minutes": 0},
        {"short_break_minutes": -5},
        {"long_break_minutes": 61},
        {"work_minutes": 121},
        {"sessions_until_long_break": 0},
        {"work_minutes": 2.5},
        {"work_minutes": True},
    ],
)
def test_invalid_settings_rejected(changes) -> None:
    with pytest.raises(SettingsError):
        validate_settings(replace(DEFAULT_SETTINGS, **changes))


def test_settings_dict_uses_camel_case() -> None:
    raw = settings_to_dict(DEFAULT_SETTINGS)
    assert raw["sessionsUntilLongBreak"] == 4
    assert settings_from_dict(raw) == DEFAULT_SETTINGS


def test_missing_keys_take_defaults() -> None:
    assert settings_from_dict({"workDuration": 50}) == replace(DEFAULT_SETTINGS, work_minutes=50)


def test_preset_catalog_order() -> None:
    assert [p.name for p in DEFAULT_PRESETS] == [
        "Classic Pomodoro",
        "Deep Focus",
        "Quick Sprint",
        "Extended Session",
        "Study Marathon",
    ]


def test_preset_apply_keeps_other_fields() -> None:
    settings = replace(DEFAULT_SETTINGS, auto_start_breaks=True, sessions_until_long_break=2)
    applied = find_preset("quick-sprint").apply_to(settings)
    assert (applied.work_minutes, applied.short_break_minutes, applied.long_break_minutes) == (15, 3, 10)
    assert applied.auto_start_breaks is True
    assert applied.sessions_until_long_break == 2


def test_active_preset_is_derived() -> None:
    classic = find_preset("classic")
    assert is_preset_active(classic, DEFAULT_SETTINGS)
    assert not is_preset_active(find_preset("deep-focus"), DEFAULT_SETTINGS)
    assert not is_preset_active(classic, replace(DEFAULT_SETTINGS, long_break_minutes=20))
    assert find_preset("nope") is None


def test_stored_settings_only_need_positive_values() -> None:
    raw = settings_to_dict(replace(DEFAULT_SETTINGS, work_minutes=180))
    assert settings_from_dict(raw).work_minutes == 180
    with pytest.raises(SettingsError):
        validate_settings(settings_from_dict(raw))
    with pytest.raises(SettingsError):
        settings_from_dict({"sessionsUntilLongBreak": 0})
