import sqlite3

import pytest
from PyQt6.QtWidgets import QMessageBox

from fakes import FakeClock, FakeWellness
from prayer_timer.core.config import AppConfig, load_config
from prayer_timer.core.controller import FocusTimerController
from prayer_timer.core.timer import SessionStatus
from prayer_timer.data.storage import Storage
from prayer_timer.ui.main_window import PROGRESS_STEPS, MainWindow
from prayer_timer.ui.reminders import QtReminderScheduler


class LockedSettingsStorage(Storage):
    def set_setting(self, key, value) -> None:
        if key == "settings":
            raise sqlite3.OperationalError("database is locked")
        super().set_setting(key, value)


class UnreadableStatsStorage(Storage):
    def mindful_seconds_on(self, day) -> int:
        raise sqlite3.OperationalError("database is locked")


@pytest.fixture
def alerts(qt_app, monkeypatch):
    shown = []
    monkeypatch.setattr(
        QMessageBox,
        "information",
        lambda parent, title, body: shown.append((title, body)) or QMessageBox.StandardButton.Ok,
    )
    yield shown
    # Flush deferred alerts while the dialog is still stubbed out.
    qt_app.processEvents()


def make_window(tmp_path, storage_cls=Storage, clock=None):
    storage = storage_cls(tmp_path / "app.db")
    storage.init_db()
    clock = clock or FakeClock()
    config = AppConfig()
    reminders = QtReminderScheduler(clock=clock)
    controller = FocusTimerController(storage, reminders, FakeWellness(), config, clock=clock)
    controller.attach()
    window = MainWindow(storage=storage, controller=controller, reminders=reminders, config=config)
    return window, controller


def test_finish_starts_attention_cue_and_alert(tmp_path, qt_app, alerts) -> None:
    clock = FakeClock()
    window, controller = make_window(tmp_path, clock=clock)
    window.duration_slider.setValue(1)
    window.start_session()

    clock.advance(60)
    controller.tick()

    assert controller.status == SessionStatus.IDLE
    assert window.attention.is_active

    qt_app.processEvents()

    assert alerts == [("Prayer/Study Finished", "Your prayer/study timer has completed.")]
    assert not window.attention.is_active


def test_stop_clears_attention_cue(tmp_path, qt_app, alerts) -> None:
    clock = FakeClock()
    window, controller = make_window(tmp_path, clock=clock)
    window.duration_slider.setValue(1)
    window.start_session()
    clock.advance(61)
    controller.tick()
    assert window.attention.is_active

    window.stop_session()

    assert not window.attention.is_active
    assert controller.status == SessionStatus.IDLE


def test_start_survives_failed_settings_write(tmp_path, qt_app, caplog) -> None:
    window, controller = make_window(tmp_path, storage_cls=LockedSettingsStorage)
    window.duration_slider.setValue(30)

    window.start_session()

    assert controller.status == SessionStatus.RUNNING
    assert controller.total_duration_seconds == 30 * 60
    assert "Could not save default duration" in caplog.text
    controller.stop()


def test_start_remembers_chosen_duration(tmp_path, qt_app) -> None:
    window, controller = make_window(tmp_path)
    window.duration_slider.setValue(42)

    window.start_session()

    assert load_config(window.storage).default_minutes == 42
    controller.stop()


def test_stats_read_failure_is_logged(tmp_path, qt_app, caplog) -> None:
    window, _controller = make_window(tmp_path, storage_cls=UnreadableStatsStorage)

    window.refresh_stats()

    assert window.mindful_today_label.text() == "0 min"
    assert "Could not read mindful minutes" in caplog.text


def test_progress_follows_countdown(tmp_path, qt_app) -> None:
    clock = FakeClock()
    window, controller = make_window(tmp_path, clock=clock)
    window.duration_slider.setValue(1)
    window.start_session()

    clock.advance(30)
    controller.tick()

    assert window.progress_bar.value() == PROGRESS_STEPS // 2
    assert window.timer_label.text() == "00:30"
    controller.stop()
    assert window.progress_bar.value() == 0


def test_hidden_window_needs_os_reminder(tmp_path, qt_app) -> None:
    window, _controller = make_window(tmp_path)

    assert window.reminder_needed() is True
