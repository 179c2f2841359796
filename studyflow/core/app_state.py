from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from studyflow.core.engine import Notifier, SessionEngine
from studyflow.core.scheduler import QtTickScheduler, TickScheduler
from studyflow.core.settings import DEFAULT_SETTINGS, SettingsError, TimerSettings, validate_settings
from studyflow.data.storage import Storage, TaskRow

LOGGER = logging.getLogger(__name__)

QUICK_TASK_LIMIT = 5


class AppState(QObject):
    """Wires storage, the task list and the session engine together for the UI."""

    tasks_changed = pyqtSignal()

    def __init__(self, notifier: Notifier, scheduler: TickScheduler | None = None) -> None:
        super().__init__()
        self._notifier = notifier
        self._scheduler = scheduler
        self._storage: Storage | None = None
        self.engine: SessionEngine | None = None
        self.tasks: list[TaskRow] = []

    def load_from_storage(self, storage: Storage) -> SessionEngine:
        if self.engine is not None:
            raise RuntimeError("Application state is already loaded")
        self._storage = storage
        self.tasks = storage.list_tasks(include_done=True)
        scheduler = self._scheduler if self._scheduler is not None else QtTickScheduler(self)
        self.engine = SessionEngine(
            ledger=self,
            notifier=self._notifier,
            store=storage,
            scheduler=scheduler,
            parent=self,
        )
        self.tasks_changed.emit()
        return self.engine

    # Settings

    def save_settings(self, settings: TimerSettings) -> bool:
        if self.engine is None:
            return False
        try:
            validate_settings(settings)
        except SettingsError as exc:
            LOGGER.warning("Rejected timer settings: %s", exc)
            return False
        self.engine.update_settings(settings)
        return True

    def reset_settings_to_defaults(self) -> None:
        self.save_settings(DEFAULT_SETTINGS)

    # Task ledger

    def increment_completed_pomodoro(self, task_id: int) -> None:
        if not self._storage:
            return
        if not self._storage.increment_completed_pomodoro(task_id):
            LOGGER.debug("Task %s no longer exists, pomodoro not credited", task_id)
            return
        self._refresh_tasks()

    def add_task(self, title: str, pomodoros: int = 1, priority: str = "medium") -> bool:
        if not self._storage:
            return False
        try:
            self._storage.create_task(title, pomodoros=pomodoros, priority=priority)
        except ValueError as exc:
            LOGGER.warning("Task not added: %s", exc)
            return False
        self._refresh_tasks()
        return True

    def remove_task(self, task_id: int) -> None:
        if not self._storage:
            return
        self._storage.delete_task(task_id)
        self._refresh_tasks()

    def toggle_task_done(self, task_id: int, done: bool) -> None:
        if not self._storage:
            return
        self._storage.set_task_done(task_id, done)
        self._refresh_tasks()

    def quick_tasks(self) -> list[TaskRow]:
        return [task for task in self.tasks if not task.is_done][:QUICK_TASK_LIMIT]

    def focused_task(self) -> TaskRow | None:
        if self.engine is None or self.engine.state.focused_task_id is None:
            return None
        for task in self.tasks:
            if task.id == self.engine.state.focused_task_id:
                return task
        return None

    # Timer screen statistics

    def focus_minutes(self) -> int:
        if self.engine is None:
            return 0
        return self.engine.state.completed_work_sessions * self.engine.settings.work_minutes

    def completed_task_count(self) -> int:
        return sum(1 for task in self.tasks if task.is_done)

    def _refresh_tasks(self) -> None:
        if not self._storage:
            return
        self.tasks = self._storage.list_tasks(include_done=True)
        self.tasks_changed.emit()
