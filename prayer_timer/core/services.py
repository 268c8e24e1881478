from __future__ import annotations

from typing import Protocol


REMINDER_ID = "PrayerStudyTimerFinished"


class ReminderScheduler(Protocol):
    def schedule(self, identifier: str, fire_at: float, title: str, body: str) -> None:
        """Schedule a one-shot alert, replacing any pending one with the same identifier."""

    def cancel(self, identifier: str) -> None:
        """Drop the pending alert; cancelling nothing is not an error."""


class WellnessLog(Protocol):
    def request_authorization(self) -> bool:
        """Ask for permission once per installation and return the decision."""

    def log_interval(self, start: float, end: float) -> bool:
        """Record a mindful interval; returns False when the write was skipped."""
