"""Точка входа приложения Prayer/Study Timer.

Модуль настраивает логирование, подключает хранилище, собирает контроллер
таймера с его сервисами и запускает главное окно.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication, QMessageBox

from prayer_timer.core.config import default_db_path, load_config, log_level
from prayer_timer.core.controller import FocusTimerController
from prayer_timer.data.storage import Storage
from prayer_timer.data.wellness import SqliteWellnessLog
from prayer_timer.ui.main_window import MainWindow
from prayer_timer.ui.reminders import QtReminderScheduler
from prayer_timer.ui.styles import apply_theme


def ask_wellness_permission() -> bool:
    """Спрашивает пользователя, можно ли вести журнал осознанных сессий."""
    answer = QMessageBox.question(
        None,
        "Wellness log",
        "Record completed prayer/study sessions as mindful minutes?",
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
    )
    return answer == QMessageBox.StandardButton.Yes


def main() -> int:
    """Создает зависимости приложения и запускает главный UI-цикл."""
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    apply_theme(app)
    # Closing the window while a session runs leaves the app in the tray.
    app.setQuitOnLastWindowClosed(False)

    storage = Storage(default_db_path())
    storage.init_db()
    config = load_config(storage)

    reminders = QtReminderScheduler(parent=app)
    wellness = SqliteWellnessLog(storage, prompt=ask_wellness_permission, enabled=config.wellness_enabled)
    controller = FocusTimerController(storage, reminders, wellness, config)

    window = MainWindow(storage=storage, controller=controller, reminders=reminders, config=config)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
