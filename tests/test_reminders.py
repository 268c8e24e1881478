from fakes import FakeClock
from prayer_timer.core.services import REMINDER_ID
from prayer_timer.ui.attention import AttentionCue
from prayer_timer.ui.reminders import MIN_DELAY_MS, QtReminderScheduler


def pending_timers(scheduler: QtReminderScheduler) -> dict:
    return scheduler._timers  # noqa: SLF001 - tests may inspect scheduler state directly


def test_schedule_replaces_pending_reminder(qt_app) -> None:
    clock = FakeClock()
    scheduler = QtReminderScheduler(clock=clock)

    scheduler.schedule(REMINDER_ID, clock.now + 600, "Done", "Timer finished")
    scheduler.schedule(REMINDER_ID, clock.now + 60, "Done", "Timer finished")

    timers = pending_timers(scheduler)
    assert list(timers) == [REMINDER_ID]
    assert timers[REMINDER_ID].interval() == 60_000
    assert timers[REMINDER_ID].isActive()
    scheduler.cancel(REMINDER_ID)


def test_past_fire_time_waits_at_least_a_second(qt_app) -> None:
    clock = FakeClock()
    scheduler = QtReminderScheduler(clock=clock)

    scheduler.schedule(REMINDER_ID, clock.now - 30, "Done", "Timer finished")

    assert pending_timers(scheduler)[REMINDER_ID].interval() == MIN_DELAY_MS
    scheduler.cancel(REMINDER_ID)


def test_cancel_is_idempotent(qt_app) -> None:
    clock = FakeClock()
    scheduler = QtReminderScheduler(clock=clock)
    scheduler.schedule(REMINDER_ID, clock.now + 60, "Done", "Timer finished")

    scheduler.cancel(REMINDER_ID)
    scheduler.cancel(REMINDER_ID)
    scheduler.cancel("unknown")

    assert pending_timers(scheduler) == {}


def test_fired_reminder_reaches_notifier_once(qt_app) -> None:
    clock = FakeClock()
    delivered = []
    scheduler = QtReminderScheduler(notifier=lambda title, body: delivered.append((title, body)), clock=clock)
    scheduler.schedule(REMINDER_ID, clock.now + 60, "Done", "Timer finished")

    scheduler._fire(REMINDER_ID, "Done", "Timer finished")  # noqa: SLF001 - no event loop in tests

    assert delivered == [("Done", "Timer finished")]
    assert pending_timers(scheduler) == {}


def test_attention_cue_stops_exactly_once(qt_app) -> None:
    cues = []
    cue = AttentionCue(lambda: cues.append(True), interval_ms=1500)
    stops = []
    cue.stopped.connect(lambda: stops.append(True))

    cue.start()
    assert cues == [True]
    assert cue.is_active

    assert cue.acknowledge() is True
    assert cue.acknowledge() is False
    assert not cue.is_active
    assert stops == [True]


def test_restarting_attention_cue_keeps_single_timer(qt_app) -> None:
    cues = []
    cue = AttentionCue(lambda: cues.append(True))

    cue.start()
    cue.start()

    assert len(cues) == 2
    assert cue.acknowledge() is True
    assert not cue.is_active
