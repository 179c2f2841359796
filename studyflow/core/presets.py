from __future__ import annotations

"""Built-in duration presets for the focus timer."""

from dataclasses import dataclass, replace

from studyflow.core.settings import TimerSettings


@dataclass(frozen=True)
class TimerPreset:
    id: str
    name: str
    work_minutes: int
    short_break_minutes: int
    long_break_minutes: int
    icon: str = ""

    @property
    def caption(self) -> str:
        return f"{self.work_minutes}m / {self.short_break_minutes}m"

    def apply_to(self, settings: TimerSettings) -> TimerSettings:
        """Return settings with the three durations replaced by this preset's."""
        return replace(
            settings,
            work_minutes=self.work_minutes,
            short_break_minutes=self.short_break_minutes,
            long_break_minutes=self.long_break_minutes,
        )


DEFAULT_PRESETS: tuple[TimerPreset, ...] = (
    TimerPreset("classic", "Classic Pomodoro", 25, 5, 15, "🍅"),
    TimerPreset("deep-focus", "Deep Focus", 50, 10, 30, "🧠"),
    TimerPreset("quick-sprint", "Quick Sprint", 15, 3, 10, "⚡"),
    TimerPreset("extended", "Extended Session", 45, 10, 20, "📚"),
    TimerPreset("marathon", "Study Marathon", 60, 15, 30, "🏃"),
)


def is_preset_active(preset: TimerPreset, settings: TimerSettings) -> bool:
    return (
        settings.work_minutes == preset.work_minutes
        and settings.short_break_minutes == preset.short_break_minutes
        and settings.long_break_minutes == preset.long_break_minutes
    )


def find_preset(preset_id: str) -> TimerPreset | None:
    for preset in DEFAULT_PRESETS:
        if preset.id == preset_id:
            return preset
    return None
