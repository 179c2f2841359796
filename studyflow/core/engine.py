from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Protocol

from PyQt6.QtCore import QObject, pyqtSignal

from studyflow.core.presets import TimerPreset
from studyflow.core.settings import DEFAULT_SETTINGS, Phase, TimerSettings
from studyflow.core.scheduler import TickScheduler
from studyflow.core.timer import (
    ApplyPreset,
    Command,
    CreditPomodoro,
    Effect,
    EngineSnapshot,
    EngineState,
    Pause,
    PhaseCompleted,
    PlaySound,
    Reset,
    ResetSessions,
    ScheduleAutoStart,
    SetFocusedTask,
    SetPhase,
    Skip,
    Start,
    Tick,
    UpdateSettings,
    progress_fraction,
    total_duration_seconds,
    transition,
)

LOGGER = logging.getLogger(__name__)

# Running countdown ticks are written out at most this often.
TICK_SAVE_INTERVAL = 60


class TaskLedger(Protocol):
    def increment_completed_pomodoro(self, task_id: int) -> None: ...


class Notifier(Protocol):
    def play_completion_sound(self) -> None: ...


class SnapshotStore(Protocol):
    def load_snapshot(self) -> EngineSnapshot | None: ...

    def save_snapshot(self, snapshot: EngineSnapshot) -> None: ...


class SessionEngine(QObject):
    """Owns the focus-session state and runs every command through one dispatch path.

    State changes come from the pure `transition` function; this class only
    executes the resulting effects, keeps the ticker in step with `is_running`
    and persists the result.
    """

    state_changed = pyqtSignal(object)
    settings_changed = pyqtSignal(object)
    phase_completed = pyqtSignal(object)

    def __init__(
        self,
        ledger: TaskLedger,
        notifier: Notifier,
        store: SnapshotStore,
        scheduler: TickScheduler,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._ledger = ledger
        self._notifier = notifier
        self._store = store
        self._scheduler = scheduler
        self._queue: deque[Command] = deque()
        self._dispatching = False
        self._auto_start_pending = False
        self._unsaved_ticks = 0

        snapshot = self._load()
        if snapshot is None:
            self._settings = DEFAULT_SETTINGS
            self._state = EngineState.initial(DEFAULT_SETTINGS)
        else:
            self._settings = snapshot.settings
            self._state = self._normalize_restored(snapshot.state, snapshot.settings)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    @property
    def auto_start_pending(self) -> bool:
        return self._auto_start_pending

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(state=self._state, settings=self._settings)

    def total_duration_seconds(self, phase: Phase | None = None) -> int:
        return total_duration_seconds(self._settings, phase or self._state.phase)

    def progress_fraction(self) -> float:
        return progress_fraction(self._state, self._settings)

    # Command surface

    def start(self) -> None:
        self.dispatch(Start())

    def pause(self) -> None:
        self.dispatch(Pause())

    def toggle(self) -> None:
        self.dispatch(Pause() if self._state.is_running else Start())

    def tick(self) -> None:
        self.dispatch(Tick())

    def reset(self) -> None:
        self.dispatch(Reset())

    def skip(self) -> None:
        self.dispatch(Skip())

    def set_phase(self, phase: Phase) -> None:
        self.dispatch(SetPhase(Phase(phase)))

    def apply_preset(self, preset: TimerPreset) -> None:
        self.dispatch(ApplyPreset(preset))

    def set_focused_task(self, task_id: int | None) -> None:
        self.dispatch(SetFocusedTask(task_id))

    def reset_sessions(self) -> None:
        self.dispatch(ResetSessions())

    def update_settings(self, settings: TimerSettings) -> None:
        """Replace settings; callers validate before reaching the engine."""
        self.dispatch(UpdateSettings(settings))

    def dispatch(self, command: Command) -> None:
        self._queue.append(command)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                self._process(self._queue.popleft())
        finally:
            self._dispatching = False

    # Internals

    def _process(self, command: Command) -> None:
        if not isinstance(command, (Tick, SetFocusedTask)):
            self._cancel_auto_start()

        before_state, before_settings = self._state, self._settings
        result = transition(self._state, self._settings, command)
        self._state = result.state
        self._settings = result.settings
        if not isinstance(command, Tick):
            LOGGER.debug("Dispatched %s -> %s", type(command).__name__, self._state)

        completed: list[PhaseCompleted] = []
        for effect in result.effects:
            self._execute(effect, completed)
        self._sync_ticker()

        if self._state != before_state or self._settings != before_settings:
            self._persist(command)
        if self._settings != before_settings:
            self.settings_changed.emit(self._settings)
        if self._state != before_state:
            self.state_changed.emit(self._state)
        for event in completed:
            self.phase_completed.emit(event)

    def _execute(self, effect: Effect, completed: list[PhaseCompleted]) -> None:
        if isinstance(effect, PlaySound):
            try:
                self._notifier.play_completion_sound()
            except Exception:
                LOGGER.exception("Completion sound failed")
        elif isinstance(effect, CreditPomodoro):
            try:
                self._ledger.increment_completed_pomodoro(effect.task_id)
            except Exception:
                LOGGER.exception("Could not credit pomodoro to task %s", effect.task_id)
        elif isinstance(effect, PhaseCompleted):
            LOGGER.info(
                "%s finished, next %s (work sessions: %s)",
                effect.finished.value,
                effect.next_phase.value,
                effect.completed_work_sessions,
            )
            completed.append(effect)
        elif isinstance(effect, ScheduleAutoStart):
            self._auto_start_pending = True
            self._scheduler.start_delay(effect.delay_ms, self._on_auto_start)

    def _on_auto_start(self) -> None:
        if not self._auto_start_pending:
            return
        self._auto_start_pending = False
        self.dispatch(Start())

    def _cancel_auto_start(self) -> None:
        if self._auto_start_pending:
            self._auto_start_pending = False
            self._scheduler.cancel_delay()

    def _sync_ticker(self) -> None:
        if self._state.is_running and not self._scheduler.is_ticking:
            self._scheduler.start_ticking(self.tick)
        elif not self._state.is_running and self._scheduler.is_ticking:
            self._scheduler.stop_ticking()

    def _load(self) -> EngineSnapshot | None:
        try:
            return self._store.load_snapshot()
        except Exception:
            LOGGER.exception("Could not restore timer state, using defaults")
            return None

    def _persist(self, command: Command) -> None:
        if isinstance(command, Tick) and self._state.is_running:
            self._unsaved_ticks += 1
            if self._unsaved_ticks < TICK_SAVE_INTERVAL:
                return
        self._save()

    def _save(self) -> None:
        self._unsaved_ticks = 0
        try:
            self._store.save_snapshot(self.snapshot())
        except Exception:
            LOGGER.exception("Could not persist timer state")

    @staticmethod
    def _normalize_restored(state: EngineState, settings: TimerSettings) -> EngineState:
        total = settings.duration_seconds(state.phase)
        remaining = state.remaining_seconds
        if remaining <= 0 or remaining > total:
            remaining = total
        return replace(
            state,
            remaining_seconds=remaining,
            is_running=False,
            completed_work_sessions=max(0, state.completed_work_sessions),
        )
