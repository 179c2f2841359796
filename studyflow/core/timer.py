from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from studyflow.core.presets import TimerPreset
from studyflow.core.settings import Phase, TimerSettings


AUTO_START_DELAY_MS = 500


@dataclass(frozen=True)
class EngineState:
    phase: Phase
    remaining_seconds: int
    is_running: bool
    completed_work_sessions: int
    focused_task_id: int | None = None

    @classmethod
    def initial(cls, settings: TimerSettings) -> EngineState:
        return cls(
            phase=Phase.WORK,
            remaining_seconds=settings.duration_seconds(Phase.WORK),
            is_running=False,
            completed_work_sessions=0,
            focused_task_id=None,
        )


@dataclass(frozen=True)
class EngineSnapshot:
    state: EngineState
    settings: TimerSettings


# Commands


@dataclass(frozen=True)
class SetPhase:
    phase: Phase


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class ApplyPreset:
    preset: TimerPreset


@dataclass(frozen=True)
class SetFocusedTask:
    task_id: int | None


@dataclass(frozen=True)
class ResetSessions:
    pass


@dataclass(frozen=True)
class UpdateSettings:
    settings: TimerSettings


Command = Union[
    SetPhase, Start, Pause, Tick, Reset, Skip, ApplyPreset, SetFocusedTask, ResetSessions, UpdateSettings
]


# Effects


@dataclass(frozen=True)
class PlaySound:
    pass


@dataclass(frozen=True)
class CreditPomodoro:
    task_id: int


@dataclass(frozen=True)
class PhaseCompleted:
    finished: Phase
    next_phase: Phase
    completed_work_sessions: int
    focused_task_id: int | None


@dataclass(frozen=True)
class ScheduleAutoStart:
    delay_ms: int = AUTO_START_DELAY_MS


Effect = Union[PlaySound, CreditPomodoro, PhaseCompleted, ScheduleAutoStart]


@dataclass(frozen=True)
class Transition:
    state: EngineState
    settings: TimerSettings
    effects: tuple[Effect, ...] = ()


def total_duration_seconds(settings: TimerSettings, phase: Phase) -> int:
    return settings.duration_seconds(phase)


def progress_fraction(state: EngineState, settings: TimerSettings) -> float:
    total = total_duration_seconds(settings, state.phase)
    if total <= 0:
        return 0.0
    progress = (total - state.remaining_seconds) / total
    return max(0.0, min(1.0, progress))


def next_phase_after(phase: Phase, work_sessions_done: int, settings: TimerSettings) -> Phase:
    """Pick the phase that follows `phase`.

    `work_sessions_done` must already include the work session that just ended.
    """
    if phase.is_break:
        return Phase.WORK
    if work_sessions_done % settings.sessions_until_long_break == 0:
        return Phase.LONG_BREAK
    return Phase.SHORT_BREAK


def transition(state: EngineState, settings: TimerSettings, command: Command) -> Transition:
    """Apply one command to the engine state without performing any I/O."""
    if isinstance(command, Tick):
        return _tick(state, settings)
    if isinstance(command, Start):
        return _start(state, settings)
    if isinstance(command, Pause):
        return Transition(replace(state, is_running=False), settings)
    if isinstance(command, Reset):
        return Transition(_enter_phase(state, settings, state.phase), settings)
    if isinstance(command, SetPhase):
        return Transition(_enter_phase(state, settings, command.phase), settings)
    if isinstance(command, Skip):
        return _skip(state, settings)
    if isinstance(command, ApplyPreset):
        new_settings = command.preset.apply_to(settings)
        return Transition(_enter_phase(state, new_settings, Phase.WORK), new_settings)
    if isinstance(command, SetFocusedTask):
        return Transition(replace(state, focused_task_id=command.task_id), settings)
    if isinstance(command, ResetSessions):
        return Transition(replace(state, completed_work_sessions=0), settings)
    if isinstance(command, UpdateSettings):
        return _update_settings(state, settings, command.settings)
    raise TypeError(f"Unknown engine command: {command!r}")


def _enter_phase(state: EngineState, settings: TimerSettings, phase: Phase) -> EngineState:
    return replace(
        state,
        phase=phase,
        remaining_seconds=settings.duration_seconds(phase),
        is_running=False,
    )


def _start(state: EngineState, settings: TimerSettings) -> Transition:
    if state.is_running:
        return Transition(state, settings)
    if state.remaining_seconds <= 0:
        state = _enter_phase(state, settings, state.phase)
    return Transition(replace(state, is_running=True), settings)


def _tick(state: EngineState, settings: TimerSettings) -> Transition:
    if not state.is_running:
        return Transition(state, settings)
    if state.remaining_seconds <= 0:
        # Running at zero is never a resting state; restore the phase instead of completing it.
        return Transition(_enter_phase(state, settings, state.phase), settings)
    state = replace(state, remaining_seconds=state.remaining_seconds - 1)
    if state.remaining_seconds > 0:
        return Transition(state, settings)
    return _complete_phase(state, settings)


def _complete_phase(state: EngineState, settings: TimerSettings) -> Transition:
    finished = state.phase
    effects: list[Effect] = []
    state = replace(state, is_running=False)
    if settings.sound_enabled:
        effects.append(PlaySound())

    if finished == Phase.WORK:
        state = replace(state, completed_work_sessions=state.completed_work_sessions + 1)
        if state.focused_task_id is not None:
            effects.append(CreditPomodoro(state.focused_task_id))
        auto_start = settings.auto_start_breaks
    else:
        auto_start = settings.auto_start_work

    upcoming = next_phase_after(finished, state.completed_work_sessions, settings)
    state = _enter_phase(state, settings, upcoming)
    effects.append(
        PhaseCompleted(
            finished=finished,
            next_phase=upcoming,
            completed_work_sessions=state.completed_work_sessions,
            focused_task_id=state.focused_task_id,
        )
    )
    if auto_start:
        effects.append(ScheduleAutoStart())
    return Transition(state, settings, tuple(effects))


def _skip(state: EngineState, settings: TimerSettings) -> Transition:
    # Same target as a completion would pick, counting the current work session as if it had finished.
    sessions = state.completed_work_sessions + (0 if state.phase.is_break else 1)
    upcoming = next_phase_after(state.phase, sessions, settings)
    return Transition(_enter_phase(state, settings, upcoming), settings)


def _update_settings(state: EngineState, old: TimerSettings, new: TimerSettings) -> Transition:
    old_total = old.duration_seconds(state.phase)
    new_total = new.duration_seconds(state.phase)
    untouched = not state.is_running and state.remaining_seconds == old_total
    if untouched or state.remaining_seconds <= 0:
        remaining = new_total
    else:
        remaining = min(state.remaining_seconds, new_total)
    return Transition(replace(state, remaining_seconds=remaining), new)
