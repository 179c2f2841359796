from __future__ import annotations

from PyQt6.QtWidgets import QApplication


THEME_QSS = """
QWidget {
    background: #f7f5f2;
    color: #2b2622;
    font-size: 13px;
}

QLabel#SubtleTitle {
    font-size: 14px;
    font-weight: 600;
    color: #6f645b;
}

QLabel#StatValue {
    font-size: 22px;
    font-weight: 700;
}

QLabel#MutedText {
    color: #8a8076;
    font-size: 12px;
}

QPushButton {
    border: none;
    background: #efe8e1;
    border-radius: 12px;
    padding: 7px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #e7ddd3;
}

QPushButton:checked {
    background: #eb8f60;
    color: #ffffff;
}

QPushButton#PresetButton {
    text-align: left;
    font-weight: 500;
    padding: 8px 10px;
}

QPushButton#PrimaryButton {
    background: #eb8f60;
    color: #ffffff;
    border-radius: 28px;
    min-width: 56px;
    min-height: 40px;
    font-size: 15px;
}

QPushButton#PrimaryButton:hover {
    background: #de8050;
}

QPushButton#SecondaryButton {
    border-radius: 20px;
    min-height: 28px;
}

QLineEdit, QSpinBox {
    background: #fffaf6;
    border: 1px solid #e6dcd2;
    border-radius: 10px;
    padding: 5px 8px;
}

QListWidget {
    background: #fffaf6;
    border: none;
    border-radius: 12px;
    padding: 6px;
}

QListWidget::item {
    border-radius: 8px;
    padding: 6px;
}

QListWidget::item:selected {
    background: #f6e6da;
    color: #2b2622;
}

QCheckBox::indicator:checked {
    background: #eb8f60;
    border-radius: 4px;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
