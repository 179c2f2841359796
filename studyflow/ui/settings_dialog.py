from __future__ import annotations

from PyQt6.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from studyflow.core.app_state import AppState
from studyflow.core.engine import SessionEngine
from studyflow.core.settings import (
    BREAK_MINUTES_RANGE,
    SESSIONS_RANGE,
    WORK_MINUTES_RANGE,
    TimerSettings,
)


def _spin(bounds: tuple[int, int], value: int) -> QSpinBox:
    spin = QSpinBox()
    spin.setRange(*bounds)
    spin.setValue(value)
    return spin


class SettingsDialog(QDialog):
    def __init__(self, app_state: AppState, engine: SessionEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Timer settings")
        self.app_state = app_state
        self.engine = engine

        settings = engine.settings
        self.work_spin = _spin(WORK_MINUTES_RANGE, settings.work_minutes)
        self.short_spin = _spin(BREAK_MINUTES_RANGE, settings.short_break_minutes)
        self.long_spin = _spin(BREAK_MINUTES_RANGE, settings.long_break_minutes)
        self.sessions_spin = _spin(SESSIONS_RANGE, settings.sessions_until_long_break)
        self.auto_breaks_box = QCheckBox("Auto-start breaks")
        self.auto_work_box = QCheckBox("Auto-start focus sessions")
        self.sound_box = QCheckBox("Play a sound when a phase ends")

        form = QFormLayout()
        form.addRow("Focus duration (minutes):", self.work_spin)
        form.addRow("Short break (minutes):", self.short_spin)
        form.addRow("Long break (minutes):", self.long_spin)
        form.addRow("Sessions until long break:", self.sessions_spin)
        form.addRow(self.auto_breaks_box)
        form.addRow(self.auto_work_box)
        form.addRow(self.sound_box)
        self._load(settings)

        extra = QHBoxLayout()
        self.reset_sessions_btn = QPushButton("Reset session count")
        self.defaults_btn = QPushButton("Restore defaults")
        extra.addWidget(self.reset_sessions_btn)
        extra.addWidget(self.defaults_btn)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addLayout(extra)
        layout.addWidget(buttons)

        buttons.accepted.connect(self._save)
        buttons.rejected.connect(self.reject)
        self.reset_sessions_btn.clicked.connect(self._reset_sessions)
        self.defaults_btn.clicked.connect(self._restore_defaults)

    def _load(self, settings: TimerSettings) -> None:
        self.work_spin.setValue(settings.work_minutes)
        self.short_spin.setValue(settings.short_break_minutes)
        self.long_spin.setValue(settings.long_break_minutes)
        self.sessions_spin.setValue(settings.sessions_until_long_break)
        self.auto_breaks_box.setChecked(settings.auto_start_breaks)
        self.auto_work_box.setChecked(settings.auto_start_work)
        self.sound_box.setChecked(settings.sound_enabled)

    def collect(self) -> TimerSettings:
        return TimerSettings(
            work_minutes=self.work_spin.value(),
            short_break_minutes=self.short_spin.value(),
            long_break_minutes=self.long_spin.value(),
            sessions_until_long_break=self.sessions_spin.value(),
            auto_start_breaks=self.auto_breaks_box.isChecked(),
            auto_start_work=self.auto_work_box.isChecked(),
            sound_enabled=self.sound_box.isChecked(),
        )

    def _save(self) -> None:
        if not self.app_state.save_settings(self.collect()):
            QMessageBox.warning(self, "Settings", "These settings are out of range and were not saved.")
            return
        self.accept()

    def _reset_sessions(self) -> None:
        self.engine.reset_sessions()
        QMessageBox.information(self, "Settings", "Session count reset")

    def _restore_defaults(self) -> None:
        self.app_state.reset_settings_to_defaults()
        self._load(self.engine.settings)
