from __future__ import annotations

"""SQLite-слой хранения: задачи, настройки и снимок состояния таймера."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from studyflow.core.settings import Phase, SettingsError, settings_from_dict, settings_to_dict
from studyflow.core.timer import EngineSnapshot, EngineState

LOGGER = logging.getLogger(__name__)

SCHEMA_VERSION = 1
PRIORITIES = ("low", "medium", "high")
ENGINE_STATE_KEY = "engine_state"
TIMER_SETTINGS_KEY = "timer_settings"


@dataclass(frozen=True)
class TaskRow:
    id: int
    title: str
    description: str
    priority: str
    pomodoros: int
    completed_pomodoros: int
    is_done: bool
    category: str
    created_at: str


class Storage:
    """Инкапсулирует подключение к SQLite и транзакционные операции."""
    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.DatabaseError:
            pass
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def _reader(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        """Создает все таблицы приложения при первом запуске."""
        with self._transaction() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if not row:
                conn.execute("INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,))
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks(
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    pomodoros INTEGER NOT NULL DEFAULT 1,
                    completed_pomodoros INTEGER NOT NULL DEFAULT 0,
                    is_done INTEGER NOT NULL DEFAULT 0,
                    category TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings(
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._reader() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        if not row:
            return default
        raw = row["value"]
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return raw

    def set_setting(self, key: str, value: Any) -> None:
        with self._transaction() as conn:
            self._put_setting(conn, key, value)

    def _put_setting(self, conn: sqlite3.Connection, key: str, value: Any) -> None:
        conn.execute(
            "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, json.dumps(value)),
        )

    # Снимок таймера

    def save_snapshot(self, snapshot: EngineSnapshot) -> None:
        """Сохраняет состояние таймера и его настройки одной транзакцией."""
        state = snapshot.state
        payload = {
            "phase": state.phase.value,
            "remainingSeconds": state.remaining_seconds,
            "isRunning": state.is_running,
            "completedWorkSessions": state.completed_work_sessions,
            "focusedTaskId": state.focused_task_id,
        }
        with self._transaction() as conn:
            self._put_setting(conn, ENGINE_STATE_KEY, payload)
            self._put_setting(conn, TIMER_SETTINGS_KEY, settings_to_dict(snapshot.settings))

    def load_snapshot(self) -> EngineSnapshot | None:
        """Возвращает сохраненный снимок или `None`, если его нет или он поврежден."""
        raw_state = self.get_setting(ENGINE_STATE_KEY)
        raw_settings = self.get_setting(TIMER_SETTINGS_KEY)
        if raw_state is None or raw_settings is None:
            return None
        try:
            settings = settings_from_dict(raw_settings)
            focused = raw_state.get("focusedTaskId")
            state = EngineState(
                phase=Phase(raw_state["phase"]),
                remaining_seconds=int(raw_state["remainingSeconds"]),
                is_running=bool(raw_state["isRunning"]),
                completed_work_sessions=int(raw_state["completedWorkSessions"]),
                focused_task_id=int(focused) if focused is not None else None,
            )
        except (SettingsError, KeyError, TypeError, ValueError, AttributeError):
            LOGGER.warning("Stored timer snapshot is unreadable, ignoring it", exc_info=True)
            return None
        return EngineSnapshot(state=state, settings=settings)

    # Задачи

    def create_task(
        self,
        title: str,
        description: str = "",
        priority: str = "medium",
        pomodoros: int = 1,
        category: str = "",
    ) -> int:
        clean_title = title.strip()
        if not clean_title:
            raise ValueError("Task title cannot be empty")
        if priority not in PRIORITIES:
            raise ValueError(f"Unknown priority: {priority}")
        if pomodoros < 1:
            raise ValueError("Pomodoro estimate must be at least 1")
        created_at = datetime.now().isoformat(timespec="seconds")
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO tasks(title, description, priority, pomodoros, category, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (clean_title, description.strip(), priority, pomodoros, category.strip(), created_at),
            )
            return int(cursor.lastrowid)

    def get_task(self, task_id: int) -> TaskRow | None:
        with self._reader() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._task_from_row(row) if row else None

    def list_tasks(self, include_done: bool = True, limit: int | None = None) -> list[TaskRow]:
        """Возвращает задачи в порядке создания."""
        query = "SELECT * FROM tasks"
        if not include_done:
            query += " WHERE is_done = 0"
        query += " ORDER BY id ASC"
        params: tuple[Any, ...] = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        with self._reader() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._task_from_row(row) for row in rows]

    def delete_task(self, task_id: int) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))

    def set_task_done(self, task_id: int, is_done: bool) -> None:
        with self._transaction() as conn:
            conn.execute("UPDATE tasks SET is_done = ? WHERE id = ?", (int(is_done), task_id))

    def increment_completed_pomodoro(self, task_id: int) -> bool:
        """Засчитывает помидор задаче; для удаленной задачи ничего не делает."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE tasks SET completed_pomodoros = completed_pomodoros + 1 WHERE id = ?",
                (task_id,),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _task_from_row(row: sqlite3.Row) -> TaskRow:
        return TaskRow(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            priority=row["priority"],
            pomodoros=row["pomodoros"],
            completed_pomodoros=row["completed_pomodoros"],
            is_done=bool(row["is_done"]),
            category=row["category"],
            created_at=row["created_at"],
        )
