from __future__ import annotations

import logging

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)


class SoundNotifier(QObject):
    """Plays the phase-completion chime through the system beep. Never raises."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)

    def play_completion_sound(self) -> None:
        try:
            QApplication.beep()
        except Exception:
            LOGGER.exception("Could not play completion sound")
