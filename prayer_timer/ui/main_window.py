from __future__ import annotations

import logging
import sqlite3
from datetime import date

from PyQt6.QtCore import QTimer, Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMenu,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QSlider,
    QStyle,
    QSystemTrayIcon,
    QVBoxLayout,
    QWidget,
)

from prayer_timer.core.config import AppConfig, save_config
from prayer_timer.core.controller import FocusTimerController
from prayer_timer.core.timer import (
    MAX_MINUTES,
    MIN_MINUTES,
    ActivityState,
    SessionStatus,
    format_remaining,
)
from prayer_timer.data.storage import Storage
from prayer_timer.ui.attention import AttentionCue
from prayer_timer.ui.reminders import QtReminderScheduler


TICK_INTERVAL_MS = 1000
PROGRESS_STEPS = 1000

logger = logging.getLogger(__name__)


def describe_activity(activity: ActivityState | None) -> str:
    if activity is None:
        return "Prayer/Study · Set a timer to focus"
    state = "Paused" if activity.is_paused else "In progress"
    return f"{activity.title} · {state} · {format_remaining(activity.remaining_seconds)}"


class MainWindow(QMainWindow):
    def __init__(
        self,
        storage: Storage,
        controller: FocusTimerController,
        reminders: QtReminderScheduler,
        config: AppConfig,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Prayer/Study Timer")
        self.resize(460, 420)

        self.storage = storage
        self.controller = controller
        self.reminders = reminders
        self.config = config

        self.attention = AttentionCue(QApplication.beep, config.attention_interval_ms, self)

        self._build_ui()
        self._build_tray()
        self._connect_signals()

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self.controller.tick)
        self.tick_timer.start()

        self.refresh_stats()
        self._update_buttons()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        heading = QLabel("Prayer/Study")
        heading.setObjectName("Heading")
        heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(heading)

        self.timer_label = QLabel(format_remaining(0))
        self.timer_label.setObjectName("TimerLabel")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.timer_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, PROGRESS_STEPS)
        self.progress_bar.setTextVisible(False)
        layout.addWidget(self.progress_bar)

        self.hint_label = QLabel("Set a timer to focus")
        self.hint_label.setObjectName("MutedText")
        self.hint_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.hint_label)

        self.duration_label = QLabel()
        self.duration_label.setObjectName("SubtleTitle")
        self.duration_slider = QSlider(Qt.Orientation.Horizontal)
        self.duration_slider.setRange(MIN_MINUTES, MAX_MINUTES)
        self.duration_slider.setValue(self.config.default_minutes)
        self._update_duration_label(self.config.default_minutes)
        layout.addWidget(self.duration_label)
        layout.addWidget(self.duration_slider)

        bounds = QHBoxLayout()
        min_label = QLabel(f"{MIN_MINUTES} min")
        max_label = QLabel(f"{MAX_MINUTES} min")
        min_label.setObjectName("MutedText")
        max_label.setObjectName("MutedText")
        bounds.addWidget(min_label)
        bounds.addStretch()
        bounds.addWidget(max_label)
        layout.addLayout(bounds)

        controls = QHBoxLayout()
        self.start_btn = QPushButton("Start Timer")
        self.start_btn.setObjectName("PrimaryButton")
        self.pause_btn = QPushButton("Pause")
        self.resume_btn = QPushButton("Resume")
        self.stop_btn = QPushButton("Stop")
        self.stop_btn.setObjectName("SecondaryButton")
        controls.addWidget(self.start_btn)
        controls.addWidget(self.pause_btn)
        controls.addWidget(self.resume_btn)
        controls.addWidget(self.stop_btn)
        layout.addLayout(controls)

        stats_box = QWidget()
        stats_form = QFormLayout(stats_box)
        self.mindful_today_label = QLabel("0 min")
        self.mindful_today_label.setObjectName("StatValue")
        stats_form.addRow("Mindful today:", self.mindful_today_label)
        layout.addWidget(stats_box)
        layout.addStretch()

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self._space_toggle)
        self.addAction(space_action)

    def _build_tray(self) -> None:
        self.tray: QSystemTrayIcon | None = None
        self._quitting = False
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.info("System tray unavailable; reminders will not be shown outside the window")
            return
        icon = self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload)
        self.tray = QSystemTrayIcon(icon, self)
        self.tray.setToolTip(describe_activity(None))

        menu = QMenu(self)
        menu.addAction("Show timer", self._show_from_tray)
        menu.addAction("Quit", self.quit_app)
        self.tray.setContextMenu(menu)
        self.tray.activated.connect(lambda _reason: self._show_from_tray())
        self.tray.show()
        self.reminders.set_notifier(self._show_reminder)

    def _connect_signals(self) -> None:
        self.start_btn.clicked.connect(self.start_session)
        self.pause_btn.clicked.connect(self.controller.pause)
        self.resume_btn.clicked.connect(self.controller.resume)
        self.stop_btn.clicked.connect(self.stop_session)
        self.duration_slider.valueChanged.connect(self._update_duration_label)
        self.controller.remaining_changed.connect(self._on_remaining_changed)
        self.controller.state_changed.connect(self._update_buttons)
        self.controller.activity_changed.connect(self._on_activity_changed)
        self.controller.finished.connect(self._on_finished)

    def _update_duration_label(self, minutes: int) -> None:
        suffix = "" if minutes == 1 else "s"
        self.duration_label.setText(f"Duration: {minutes} minute{suffix}")

    def _space_toggle(self) -> None:
        status = self.controller.status
        if status == SessionStatus.IDLE:
            self.start_session()
        elif status == SessionStatus.RUNNING:
            self.controller.pause()
        elif status == SessionStatus.PAUSED:
            self.controller.resume()

    def start_session(self) -> None:
        minutes = self.duration_slider.value()
        if minutes != self.config.default_minutes:
            self.config.default_minutes = minutes
            try:
                save_config(self.storage, self.config)
            except sqlite3.Error as exc:
                logger.error(f"Could not save default duration: {exc}")
        self.controller.start(minutes)

    def stop_session(self) -> None:
        self.controller.stop()
        self.attention.acknowledge()
        self.refresh_stats()

    def _on_remaining_changed(self, remaining: int) -> None:
        self.timer_label.setText(format_remaining(remaining))
        self._update_progress()
        if self.tray is not None and self.controller.is_active:
            self.tray.setToolTip(describe_activity(self.controller.activity()))

    def _on_activity_changed(self, activity: ActivityState | None) -> None:
        if self.tray is not None:
            self.tray.setToolTip(describe_activity(activity))

    def _on_finished(self) -> None:
        self.refresh_stats()
        self.attention.start()
        # Completion may fire from showEvent; open the alert once the window is up.
        QTimer.singleShot(0, self._show_finished_alert)

    def _show_finished_alert(self) -> None:
        QMessageBox.information(self, self.config.reminder_title, self.config.reminder_body)
        self.attention.acknowledge()

    def reminder_needed(self) -> bool:
        """The in-app alert covers completion only while the window is in front."""
        return not (self.isVisible() and self.isActiveWindow())

    def _show_reminder(self, title: str, body: str) -> None:
        if self.tray is None or not self.reminder_needed():
            return
        self.tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information)

    def _update_progress(self) -> None:
        snapshot = self.controller.snapshot()
        self.progress_bar.setValue(int(snapshot.progress * PROGRESS_STEPS))

    def _update_buttons(self) -> None:
        status = self.controller.status
        active = status in {SessionStatus.RUNNING, SessionStatus.PAUSED}
        self.start_btn.setEnabled(status == SessionStatus.IDLE)
        self.duration_slider.setEnabled(status == SessionStatus.IDLE)
        self.pause_btn.setEnabled(status == SessionStatus.RUNNING)
        self.resume_btn.setEnabled(status == SessionStatus.PAUSED)
        self.stop_btn.setEnabled(active)
        if status == SessionStatus.PAUSED:
            self.hint_label.setText("Paused")
        elif status == SessionStatus.RUNNING:
            self.hint_label.setText("In progress")
        else:
            self.hint_label.setText("Set a timer to focus")
        if not active:
            self.timer_label.setText(format_remaining(0))
        self._update_progress()

    def refresh_stats(self) -> None:
        try:
            minutes = self.storage.mindful_seconds_on(date.today()) // 60
        except sqlite3.Error as exc:
            logger.error(f"Could not read mindful minutes: {exc}")
            return
        self.mindful_today_label.setText(f"{minutes} min")

    def _show_from_tray(self) -> None:
        self.showNormal()
        self.raise_()
        self.activateWindow()

    def quit_app(self) -> None:
        self._quitting = True
        self.close()

    def showEvent(self, event) -> None:  # noqa: N802
        super().showEvent(event)
        self.controller.attach()

    def closeEvent(self, event) -> None:  # noqa: N802
        # Reminders live in this process; keep it alive in the tray while a session counts down.
        if self.tray is not None and self.controller.is_active and not self._quitting:
            self.hide()
            self.tray.showMessage("Prayer/Study", "The timer keeps running in the tray.")
            event.ignore()
            return
        self.tick_timer.stop()
        self.attention.acknowledge()
        if self.tray is not None:
            self.tray.hide()
        event.accept()
        QApplication.quit()
