from __future__ import annotations

from PyQt6.QtWidgets import QApplication


THEME_QSS = """
QWidget {
    background: #f3f0ea;
    color: #2b2a26;
    font-size: 13px;
}

QMainWindow {
    background: #f3f0ea;
}

QLabel {
    background: transparent;
}

QMessageBox {
    background: #fbf8f2;
}

QLabel#Heading {
    font-size: 18px;
    font-weight: 700;
    color: #2a2824;
}

QLabel#SubtleTitle {
    font-size: 14px;
    font-weight: 600;
    color: #5f5a4f;
}

QLabel#TimerLabel {
    font-family: monospace;
    font-size: 48px;
    font-weight: 600;
    color: #2b2a26;
}

QLabel#StatValue {
    font-size: 20px;
    font-weight: 700;
}

QLabel#MutedText {
    color: #8a8376;
}

QPushButton {
    border: none;
    background: #ebe5d9;
    border-radius: 14px;
    padding: 8px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #e3dccd;
}

QPushButton:disabled {
    color: #b2ab9d;
    background: #f1ece3;
}

QPushButton#PrimaryButton {
    background: #5b7fa6;
    color: #ffffff;
    border-radius: 18px;
    padding: 10px 22px;
    font-size: 14px;
}

QPushButton#PrimaryButton:hover {
    background: #4d7099;
}

QPushButton#PrimaryButton:disabled {
    background: #b3c3d6;
    color: #f6f8fb;
}

QPushButton#SecondaryButton {
    background: #c9574b;
    color: #ffffff;
}

QPushButton#SecondaryButton:disabled {
    background: #e3b6b0;
}

QSlider::groove:horizontal {
    height: 6px;
    border-radius: 3px;
    background: #e0d9cb;
}

QSlider::sub-page:horizontal {
    border-radius: 3px;
    background: #5b7fa6;
}

QSlider::handle:horizontal {
    width: 18px;
    margin: -6px 0;
    border-radius: 9px;
    background: #ffffff;
    border: 1px solid #c9c1b2;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
