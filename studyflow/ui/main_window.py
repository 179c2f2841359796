from __future__ import annotations

from PyQt6.QtCore import QRect, Qt
from PyQt6.QtGui import QAction, QColor, QKeySequence, QPainter, QPen
from PyQt6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from studyflow.core.app_state import AppState
from studyflow.core.engine import SessionEngine
from studyflow.core.presets import DEFAULT_PRESETS, TimerPreset, is_preset_active
from studyflow.core.settings import Phase
from studyflow.core.timer import EngineState, PhaseCompleted
from studyflow.ui.settings_dialog import SettingsDialog


PHASE_COLORS = {
    Phase.WORK: "#eb8f60",
    Phase.SHORT_BREAK: "#3fbf8f",
    Phase.LONG_BREAK: "#5b8def",
}

MODE_BUTTON_TEXT = {
    Phase.WORK: "Focus",
    Phase.SHORT_BREAK: "Short Break",
    Phase.LONG_BREAK: "Long Break",
}


def format_remaining(seconds: int) -> str:
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class TimerRing(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(320, 320)
        self._progress = 0.0
        self._color = QColor(PHASE_COLORS[Phase.WORK])
        self._remaining_text = "25:00"
        self._caption = Phase.WORK.label

    def set_state(self, progress: float, phase: Phase, remaining_text: str) -> None:
        self._progress = progress
        self._color = QColor(PHASE_COLORS[phase])
        self._remaining_text = remaining_text
        self._caption = phase.label
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect().adjusted(10, 10, -10, -10)

        diameter = int(min(rect.width(), rect.height()) * 0.9)
        circle_rect = QRect(0, 0, diameter, diameter)
        circle_rect.moveCenter(rect.center())

        painter.setPen(QPen(QColor(0, 0, 0, 30), 10))
        painter.drawEllipse(circle_rect)
        painter.setPen(QPen(self._color, 10, Qt.PenStyle.SolidLine, Qt.PenCapStyle.RoundCap))
        span = int(-360 * 16 * self._progress)
        painter.drawArc(circle_rect, 90 * 16, span)

        font = painter.font()
        font.setPointSize(max(12, diameter // 7))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(self._color)
        painter.drawText(circle_rect, Qt.AlignmentFlag.AlignCenter, self._remaining_text)

        font.setPointSize(max(9, diameter // 22))
        font.setBold(False)
        painter.setFont(font)
        painter.setPen(QColor("#867b71"))
        caption_rect = circle_rect.adjusted(0, diameter // 3, 0, 0)
        painter.drawText(caption_rect, Qt.AlignmentFlag.AlignCenter, self._caption)


class MainWindow(QMainWindow):
    def __init__(self, app_state: AppState, engine: SessionEngine) -> None:
        super().__init__()
        self.setWindowTitle("StudyFlow")
        self.resize(1100, 700)

        self.app_state = app_state
        self.engine = engine

        self._build_ui()
        self._connect_signals()

        self._refresh_presets()
        self._refresh_timer(self.engine.state)
        self._refresh_tasks()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        split = QSplitter(Qt.Orientation.Horizontal)
        left = QWidget()
        right = QWidget()
        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 1)

        root_layout = QHBoxLayout(central)
        root_layout.addWidget(split)

        left_layout = QVBoxLayout(left)

        stats_bar = QHBoxLayout()
        self.focus_time_label = QLabel("0h 0m")
        self.sessions_label = QLabel("0")
        self.tasks_done_label = QLabel("0")
        for caption, label in (
            ("Focus Time", self.focus_time_label),
            ("Sessions", self.sessions_label),
            ("Tasks Done", self.tasks_done_label),
        ):
            label.setObjectName("StatValue")
            box = QVBoxLayout()
            box.addWidget(label, alignment=Qt.AlignmentFlag.AlignHCenter)
            muted = QLabel(caption)
            muted.setObjectName("MutedText")
            box.addWidget(muted, alignment=Qt.AlignmentFlag.AlignHCenter)
            stats_bar.addLayout(box)
        left_layout.addLayout(stats_bar)

        presets_bar = QHBoxLayout()
        self.preset_buttons: dict[str, QPushButton] = {}
        for preset in DEFAULT_PRESETS:
            button = QPushButton(f"{preset.icon} {preset.name}\n{preset.caption}")
            button.setCheckable(True)
            button.setObjectName("PresetButton")
            self.preset_buttons[preset.id] = button
            presets_bar.addWidget(button)
        left_layout.addLayout(presets_bar)

        modes_bar = QHBoxLayout()
        modes_bar.addStretch()
        self.mode_buttons: dict[Phase, QPushButton] = {}
        for phase in Phase:
            button = QPushButton(MODE_BUTTON_TEXT[phase])
            button.setCheckable(True)
            self.mode_buttons[phase] = button
            modes_bar.addWidget(button)
        modes_bar.addStretch()
        left_layout.addLayout(modes_bar)

        self.ring = TimerRing()
        left_layout.addWidget(self.ring, 1)

        controls = QHBoxLayout()
        controls.addStretch()
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.setObjectName("SecondaryButton")
        self.play_btn = QPushButton("Start")
        self.play_btn.setObjectName("PrimaryButton")
        self.skip_btn = QPushButton("Skip")
        self.skip_btn.setObjectName("SecondaryButton")
        self.settings_btn = QPushButton("Settings")
        self.settings_btn.setObjectName("SecondaryButton")
        for button in (self.reset_btn, self.play_btn, self.skip_btn, self.settings_btn):
            controls.addWidget(button)
        controls.addStretch()
        left_layout.addLayout(controls)

        self.dots_label = QLabel()
        self.dots_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.sessions_caption = QLabel()
        self.sessions_caption.setObjectName("MutedText")
        self.sessions_caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
        left_layout.addWidget(self.dots_label)
        left_layout.addWidget(self.sessions_caption)

        right_layout = QVBoxLayout(right)
        heading = QLabel("Current Focus")
        heading.setObjectName("SubtleTitle")
        right_layout.addWidget(heading)
        self.task_list = QListWidget()
        right_layout.addWidget(self.task_list, 1)

        task_actions = QHBoxLayout()
        self.done_btn = QPushButton("Mark done")
        self.remove_btn = QPushButton("Remove")
        task_actions.addWidget(self.done_btn)
        task_actions.addWidget(self.remove_btn)
        right_layout.addLayout(task_actions)

        add_form = QFormLayout()
        self.task_title_edit = QLineEdit()
        self.task_title_edit.setPlaceholderText("New task")
        self.task_estimate = QSpinBox()
        self.task_estimate.setRange(1, 20)
        self.task_estimate.setValue(1)
        self.add_task_btn = QPushButton("Add task")
        add_form.addRow("Title:", self.task_title_edit)
        add_form.addRow("Pomodoros:", self.task_estimate)
        add_form.addRow(self.add_task_btn)
        right_layout.addLayout(add_form)

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self.engine.toggle)
        self.addAction(space_action)

    def _connect_signals(self) -> None:
        self.play_btn.clicked.connect(self.engine.toggle)
        self.reset_btn.clicked.connect(self.engine.reset)
        self.skip_btn.clicked.connect(self.engine.skip)
        self.settings_btn.clicked.connect(self._open_settings)
        for phase, button in self.mode_buttons.items():
            button.clicked.connect(lambda _checked=False, p=phase: self._set_phase(p))
        for preset in DEFAULT_PRESETS:
            self.preset_buttons[preset.id].clicked.connect(
                lambda _checked=False, p=preset: self._apply_preset(p)
            )

        self.task_list.itemClicked.connect(self._on_task_clicked)
        self.done_btn.clicked.connect(self._mark_selected_done)
        self.remove_btn.clicked.connect(self._remove_selected)
        self.add_task_btn.clicked.connect(self._add_task)
        self.task_title_edit.returnPressed.connect(self._add_task)

        self.engine.state_changed.connect(self._refresh_timer)
        self.engine.settings_changed.connect(lambda _settings: self._refresh_presets())
        self.engine.phase_completed.connect(self._on_phase_completed)
        self.app_state.tasks_changed.connect(self._refresh_tasks)

    def _set_phase(self, phase: Phase) -> None:
        self.engine.set_phase(phase)
        self._refresh_timer(self.engine.state)

    def _apply_preset(self, preset: TimerPreset) -> None:
        self.engine.apply_preset(preset)
        self._refresh_presets()

    def _open_settings(self) -> None:
        dialog = SettingsDialog(self.app_state, self.engine, self)
        dialog.exec()

    def _on_task_clicked(self, item: QListWidgetItem) -> None:
        task_id = item.data(Qt.ItemDataRole.UserRole)
        if self.engine.state.focused_task_id == task_id:
            self.engine.set_focused_task(None)
        else:
            self.engine.set_focused_task(task_id)
        self._refresh_tasks()

    def _selected_task_id(self) -> int | None:
        item = self.task_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    def _mark_selected_done(self) -> None:
        task_id = self._selected_task_id()
        if task_id is not None:
            self.app_state.toggle_task_done(task_id, True)

    def _remove_selected(self) -> None:
        task_id = self._selected_task_id()
        if task_id is not None:
            self.app_state.remove_task(task_id)

    def _add_task(self) -> None:
        if self.app_state.add_task(self.task_title_edit.text(), pomodoros=self.task_estimate.value()):
            self.task_title_edit.clear()
            self.task_estimate.setValue(1)

    def _on_phase_completed(self, event: PhaseCompleted) -> None:
        self.statusBar().showMessage(f"{event.finished.label} finished. Up next: {event.next_phase.label}", 5000)
        self._refresh_stats()

    def _refresh_timer(self, state: EngineState) -> None:
        self.ring.set_state(
            self.engine.progress_fraction(),
            state.phase,
            format_remaining(state.remaining_seconds),
        )
        self.play_btn.setText("Pause" if state.is_running else "Start")
        for phase, button in self.mode_buttons.items():
            button.setChecked(phase == state.phase)

        cadence = self.engine.settings.sessions_until_long_break
        filled = state.completed_work_sessions % cadence
        self.dots_label.setText(" ".join("●" if i < filled else "○" for i in range(cadence)))
        self.sessions_caption.setText(f"{state.completed_work_sessions} sessions completed today")
        self._refresh_stats()

    def _refresh_presets(self) -> None:
        settings = self.engine.settings
        for preset in DEFAULT_PRESETS:
            self.preset_buttons[preset.id].setChecked(is_preset_active(preset, settings))

    def _refresh_stats(self) -> None:
        minutes = self.app_state.focus_minutes()
        self.focus_time_label.setText(f"{minutes // 60}h {minutes % 60}m")
        self.sessions_label.setText(str(self.engine.state.completed_work_sessions))
        self.tasks_done_label.setText(str(self.app_state.completed_task_count()))

    def _refresh_tasks(self) -> None:
        focused_id = self.engine.state.focused_task_id
        self.task_list.clear()
        for task in self.app_state.quick_tasks():
            marker = "◉" if task.id == focused_id else "○"
            text = f"{marker} {task.title} · {task.completed_pomodoros}/{task.pomodoros} pomodoros · {task.priority}"
            item = QListWidgetItem(text, self.task_list)
            item.setData(Qt.ItemDataRole.UserRole, task.id)
        self._refresh_stats()

    def closeEvent(self, event) -> None:  # noqa: N802
        self.engine.pause()
        event.accept()
