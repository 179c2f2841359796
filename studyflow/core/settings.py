from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


WORK_MINUTES_RANGE = (1, 120)
BREAK_MINUTES_RANGE = (1, 60)
SESSIONS_RANGE = (1, 10)


class Phase(str, Enum):
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def is_break(self) -> bool:
        return self is not Phase.WORK

    @property
    def label(self) -> str:
        return PHASE_LABELS[self]


PHASE_LABELS = {
    Phase.WORK: "Focus Time",
    Phase.SHORT_BREAK: "Short Break",
    Phase.LONG_BREAK: "Long Break",
}


class SettingsError(ValueError):
    """Raised when timer settings are rejected at the save boundary."""


@dataclass(frozen=True)
class TimerSettings:
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    sessions_until_long_break: int = 4
    auto_start_breaks: bool = False
    auto_start_work: bool = False
    sound_enabled: bool = True

    def duration_minutes(self, phase: Phase) -> int:
        if phase == Phase.WORK:
            return self.work_minutes
        if phase == Phase.SHORT_BREAK:
            return self.short_break_minutes
        return self.long_break_minutes

    def duration_seconds(self, phase: Phase) -> int:
        return self.duration_minutes(phase) * 60


DEFAULT_SETTINGS = TimerSettings()


def _check_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"{name} must be an integer")
    if value < 1:
        raise SettingsError(f"{name} must be positive, got {value}")


def _check_range(name: str, value: Any, bounds: tuple[int, int]) -> None:
    _check_positive(name, value)
    low, high = bounds
    if value < low or value > high:
        raise SettingsError(f"{name} must be between {low} and {high}, got {value}")


def check_settings(settings: TimerSettings) -> TimerSettings:
    """Only the invariants the timer relies on: whole, positive durations and cadence."""
    _check_positive("work_minutes", settings.work_minutes)
    _check_positive("short_break_minutes", settings.short_break_minutes)
    _check_positive("long_break_minutes", settings.long_break_minutes)
    _check_positive("sessions_until_long_break", settings.sessions_until_long_break)
    return settings


def validate_settings(settings: TimerSettings) -> TimerSettings:
    """Check editor bounds and return the settings unchanged when valid."""
    _check_range("work_minutes", settings.work_minutes, WORK_MINUTES_RANGE)
    _check_range("short_break_minutes", settings.short_break_minutes, BREAK_MINUTES_RANGE)
    _check_range("long_break_minutes", settings.long_break_minutes, BREAK_MINUTES_RANGE)
    _check_range("sessions_until_long_break", settings.sessions_until_long_break, SESSIONS_RANGE)
    return settings


def settings_to_dict(settings: TimerSettings) -> dict[str, Any]:
    return {
        "workDuration": settings.work_minutes,
        "shortBreakDuration": settings.short_break_minutes,
        "longBreakDuration": settings.long_break_minutes,
        "sessionsUntilLongBreak": settings.sessions_until_long_break,
        "autoStartBreaks": settings.auto_start_breaks,
        "autoStartWork": settings.auto_start_work,
        "soundEnabled": settings.sound_enabled,
    }


def settings_from_dict(raw: dict[str, Any]) -> TimerSettings:
    """Build settings from their JSON form; missing keys take defaults.

    Stored values are only held to `check_settings`: editor bounds apply when
    settings are saved, not when they are read back.
    """
    if not isinstance(raw, dict):
        raise SettingsError("Settings payload must be an object")
    settings = TimerSettings(
        work_minutes=raw.get("workDuration", DEFAULT_SETTINGS.work_minutes),
        short_break_minutes=raw.get("shortBreakDuration", DEFAULT_SETTINGS.short_break_minutes),
        long_break_minutes=raw.get("longBreakDuration", DEFAULT_SETTINGS.long_break_minutes),
        sessions_until_long_break=raw.get("sessionsUntilLongBreak", DEFAULT_SETTINGS.sessions_until_long_break),
        auto_start_breaks=bool(raw.get("autoStartBreaks", DEFAULT_SETTINGS.auto_start_breaks)),
        auto_start_work=bool(raw.get("autoStartWork", DEFAULT_SETTINGS.auto_start_work)),
        sound_enabled=bool(raw.get("soundEnabled", DEFAULT_SETTINGS.sound_enabled)),
    )
    return check_settings(settings)
