from __future__ import annotations

import logging
import sqlite3
import time
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from prayer_timer.core.config import AppConfig
from prayer_timer.core.services import REMINDER_ID, ReminderScheduler, WellnessLog
from prayer_timer.core.timer import (
    ActivityState,
    FocusSession,
    SessionStatus,
    TimerSnapshot,
    clamp_minutes,
    remaining_seconds,
    snapshot_of,
)
from prayer_timer.data.storage import Storage


ACTIVITY_TITLE = "Prayer/Study"

logger = logging.getLogger(__name__)


class FocusTimerController(QObject):
    """Single owner of the prayer/study session.

    Every entry point runs on the Qt main thread. Collaborator calls are
    fire-and-forget: the session is updated and persisted before they run and
    their failures never change it.
    """

    state_changed = pyqtSignal()
    remaining_changed = pyqtSignal(int)
    activity_changed = pyqtSignal(object)
    finished = pyqtSignal()

    def __init__(
        self,
        storage: Storage,
        reminders: ReminderScheduler,
        wellness: WellnessLog | None = None,
        config: AppConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__()
        self._storage = storage
        self._reminders = reminders
        self._wellness = wellness
        self._config = config or AppConfig()
        self._clock = clock
        self._session = FocusSession.idle()
        self._remaining = 0
        self._attached = False

    @property
    def session(self) -> FocusSession:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def total_duration_seconds(self) -> int:
        return self._session.total_duration_seconds

    @property
    def is_active(self) -> bool:
        return self._session.status in {SessionStatus.RUNNING, SessionStatus.PAUSED}

    def snapshot(self) -> TimerSnapshot:
        return snapshot_of(self._session, self._now())

    def activity(self) -> ActivityState | None:
        if not self.is_active:
            return None
        return ActivityState(
            title=ACTIVITY_TITLE,
            ends_at=self._session.ends_at,
            is_paused=self._session.is_paused,
            remaining_seconds=self._remaining,
        )

    def attach(self) -> None:
        """Restore the persisted session once, when the host surface becomes active."""
        if self._attached:
            return
        self._attached = True
        self._session = self._storage.load_focus_session()
        now = self._now()

        if self._session.is_paused:
            logger.info(f"Restored paused session with {self._session.remaining_when_paused_seconds}s left")
            self._set_remaining(self._session.remaining_when_paused_seconds)
            self._publish()
            return

        if self._session.is_running:
            remaining = remaining_seconds(self._session.ends_at, now)
            if remaining == 0:
                logger.info("Persisted session ran past its deadline while detached")
                self._complete(now)
                return
            logger.info(f"Restored running session with {remaining}s left")
            self._set_remaining(remaining)
            self._schedule_reminder()
            self._publish()

    def start(self, duration_minutes: int) -> None:
        if self._session.status != SessionStatus.IDLE:
            logger.debug(f"Ignoring start while {self._session.status.value}")
            return
        total = clamp_minutes(duration_minutes) * 60
        now = self._now()
        self._session = FocusSession.running(total_seconds=total, started_at=now, ends_at=now + total)
        self._set_remaining(total)
        self._persist()
        logger.info(f"Started {total // 60} minute session")
        self._schedule_reminder()
        self._publish()
        # The permission prompt may run a nested event loop that ticks this session to completion.
        self._request_wellness_authorization()

    def pause(self) -> None:
        if self._session.status != SessionStatus.RUNNING:
            logger.debug(f"Ignoring pause while {self._session.status.value}")
            return
        self._session = self._session.paused_at(self._now())
        self._set_remaining(self._session.remaining_when_paused_seconds)
        self._persist()
        logger.info(f"Paused with {self._remaining}s left")
        self._cancel_reminder()
        self._publish()

    def resume(self) -> None:
        if self._session.status != SessionStatus.PAUSED:
            logger.debug(f"Ignoring resume while {self._session.status.value}")
            return
        self._session = self._session.resumed_at(self._now())
        self._set_remaining(remaining_seconds(self._session.ends_at, self._session.started_at))
        self._persist()
        logger.info(f"Resumed with {self._remaining}s left")
        self._schedule_reminder()
        self._publish()

    def tick(self) -> None:
        if self._session.status != SessionStatus.RUNNING:
            return
        now = self._now()
        remaining = remaining_seconds(self._session.ends_at, now)
        if remaining == 0:
            self._complete(now)
            return
        self._set_remaining(remaining)

    def stop(self) -> None:
        now = self._now()
        if self._session.is_running and self._session.started_at > 0:
            self._log_wellness(self._session.started_at, now)
        was_active = self.is_active
        self._session = FocusSession.idle()
        self._set_remaining(0)
        self._persist()
        self._cancel_reminder()
        if was_active:
            logger.info("Stopped session")
        self._publish()

    def _complete(self, now: float) -> None:
        # Flip status before any side effect so a second tick sees a finished session.
        started_at = self._session.started_at
        self._session = FocusSession(
            total_duration_seconds=self._session.total_duration_seconds,
            started_at=started_at,
            status=SessionStatus.COMPLETED,
        )
        self._set_remaining(0)
        logger.info("Session completed")

        if started_at > 0:
            self._log_wellness(started_at, now)

        self._session = FocusSession.idle()
        self._persist()
        self._publish()
        self.finished.emit()

    def _now(self) -> float:
        return float(self._clock())

    def _set_remaining(self, value: int) -> None:
        if value == self._remaining:
            return
        self._remaining = value
        self.remaining_changed.emit(value)

    def _publish(self) -> None:
        self.state_changed.emit()
        self.activity_changed.emit(self.activity())

    def _persist(self) -> None:
        try:
            self._storage.save_focus_session(self._session)
        except sqlite3.Error as exc:
            logger.error(f"Could not persist focus session: {exc}")

    def _schedule_reminder(self) -> None:
        if not self._session.is_running:
            return
        try:
            self._reminders.schedule(
                REMINDER_ID,
                self._session.ends_at,
                self._config.reminder_title,
                self._config.reminder_body,
            )
        except Exception as exc:
            logger.warning(f"Reminder scheduling failed: {exc}")

    def _cancel_reminder(self) -> None:
        try:
            self._reminders.cancel(REMINDER_ID)
        except Exception as exc:
            logger.warning(f"Reminder cancellation failed: {exc}")

    def _request_wellness_authorization(self) -> None:
        if self._wellness is None or not self._config.wellness_enabled:
            return
        try:
            self._wellness.request_authorization()
        except Exception as exc:
            logger.warning(f"Wellness authorization request failed: {exc}")

    def _log_wellness(self, start: float, end: float) -> None:
        if self._wellness is None or not self._config.wellness_enabled:
            return
        if end <= start:
            return
        try:
            self._wellness.log_interval(start, end)
        except Exception as exc:
            logger.warning(f"Wellness log write failed: {exc}")
