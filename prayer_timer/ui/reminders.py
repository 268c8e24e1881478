from __future__ import annotations

import logging
import time
from typing import Callable

from PyQt6.QtCore import QObject, QTimer


MIN_DELAY_MS = 1000

logger = logging.getLogger(__name__)


class QtReminderScheduler(QObject):
    """One-shot local reminders backed by single-shot QTimers.

    At most one timer exists per identifier. Delivery goes through `notifier`,
    usually the tray icon balloon; with no notifier the reminder is dropped.
    """

    def __init__(
        self,
        notifier: Callable[[str, str], None] | None = None,
        clock: Callable[[], float] = time.time,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._notifier = notifier
        self._clock = clock
        self._timers: dict[str, QTimer] = {}

    def set_notifier(self, notifier: Callable[[str, str], None] | None) -> None:
        self._notifier = notifier

    def schedule(self, identifier: str, fire_at: float, title: str, body: str) -> None:
        self.cancel(identifier)
        delay_ms = max(MIN_DELAY_MS, int((fire_at - self._clock()) * 1000))

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(identifier, title, body))
        self._timers[identifier] = timer
        timer.start(delay_ms)
        logger.debug(f"Reminder {identifier} scheduled in {delay_ms}ms")

    def cancel(self, identifier: str) -> None:
        timer = self._timers.pop(identifier, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()
        logger.debug(f"Reminder {identifier} cancelled")

    def _fire(self, identifier: str, title: str, body: str) -> None:
        timer = self._timers.pop(identifier, None)
        if timer is not None:
            timer.deleteLater()
        if self._notifier is None:
            logger.debug(f"Reminder {identifier} dropped: no notifier available")
            return
        self._notifier(title, body)
