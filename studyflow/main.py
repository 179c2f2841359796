from __future__ import annotations

"""Точка входа приложения StudyFlow.

Модуль отвечает за настройку логирования, инициализацию Qt-приложения,
подключение хранилища, восстановление таймера и запуск главного окна.
"""

import logging
import os
import sys
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from studyflow.core.app_state import AppState
from studyflow.core.notify import SoundNotifier
from studyflow.data.storage import Storage
from studyflow.ui.main_window import MainWindow
from studyflow.ui.styles import apply_theme

LOGGER = logging.getLogger(__name__)

DB_PATH_ENV = "STUDYFLOW_DB_PATH"
LOG_LEVEL_ENV = "STUDYFLOW_LOG_LEVEL"


def default_db_path() -> Path:
    """Возвращает путь к SQLite-файлу: из окружения или в текущей директории."""
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / "app.db"


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Создает зависимости приложения и запускает главный UI-цикл."""
    configure_logging()
    app = QApplication(sys.argv)
    apply_theme(app)

    storage = Storage(default_db_path())
    storage.init_db()
    LOGGER.info("Using database %s", storage.db_path)

    app_state = AppState(notifier=SoundNotifier(app))
    engine = app_state.load_from_storage(storage)

    window = MainWindow(app_state=app_state, engine=engine)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
