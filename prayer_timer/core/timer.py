from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


MIN_MINUTES = 1
MAX_MINUTES = 120


class SessionStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class FocusSession:
    """Persistable state of one prayer/study countdown.

    `ends_at` is meaningful only while running, `remaining_when_paused_seconds`
    only while paused. An idle session has every field zeroed.
    """

    total_duration_seconds: int = 0
    started_at: float = 0.0
    ends_at: float = 0.0
    remaining_when_paused_seconds: int = 0
    status: SessionStatus = SessionStatus.IDLE

    @classmethod
    def idle(cls) -> FocusSession:
        return cls()

    @classmethod
    def running(cls, total_seconds: int, started_at: float, ends_at: float) -> FocusSession:
        return cls(
            total_duration_seconds=total_seconds,
            started_at=started_at,
            ends_at=ends_at,
            status=SessionStatus.RUNNING,
        )

    @property
    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.status == SessionStatus.PAUSED

    @property
    def is_idle(self) -> bool:
        return self.status == SessionStatus.IDLE

    def remaining_at(self, now: float) -> int:
        if self.status == SessionStatus.RUNNING:
            return remaining_seconds(self.ends_at, now)
        if self.status == SessionStatus.PAUSED:
            return self.remaining_when_paused_seconds
        return 0

    def paused_at(self, now: float) -> FocusSession:
        return FocusSession(
            total_duration_seconds=self.total_duration_seconds,
            started_at=self.started_at,
            ends_at=0.0,
            remaining_when_paused_seconds=min(self.total_duration_seconds, self.remaining_at(now)),
            status=SessionStatus.PAUSED,
        )

    def resumed_at(self, now: float) -> FocusSession:
        return FocusSession.running(
            total_seconds=self.total_duration_seconds,
            started_at=now,
            ends_at=now + self.remaining_when_paused_seconds,
        )

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        del record["status"]
        record["is_running"] = self.status in {SessionStatus.RUNNING, SessionStatus.PAUSED}
        record["is_paused"] = self.status == SessionStatus.PAUSED
        return record

    @classmethod
    def from_record(cls, record: Any) -> FocusSession:
        """Builds a session from a persisted record; raises ValueError if it is inconsistent."""
        if not isinstance(record, dict):
            raise ValueError("Session record must be a mapping")
        try:
            total = int(record.get("total_duration_seconds", 0))
            started_at = float(record.get("started_at", 0.0))
            ends_at = float(record.get("ends_at", 0.0))
            remaining = int(record.get("remaining_when_paused_seconds", 0))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Malformed session record: {exc}") from exc
        if not all(math.isfinite(v) for v in (started_at, ends_at)):
            raise ValueError("Session timestamps must be finite")

        if record.get("is_paused"):
            if total <= 0 or not 0 <= remaining <= total:
                raise ValueError("Paused session has an invalid remaining time")
            return cls(total, started_at, 0.0, remaining, SessionStatus.PAUSED)
        if record.get("is_running"):
            if total <= 0 or ends_at < started_at:
                raise ValueError("Running session has an invalid deadline")
            return cls.running(total, started_at, ends_at)
        return cls.idle()


@dataclass(frozen=True)
class TimerSnapshot:
    total_seconds: int
    remaining_seconds: int
    elapsed_seconds: int
    progress: float
    status: SessionStatus


@dataclass(frozen=True)
class ActivityState:
    """What a live-activity surface needs to render the countdown."""

    title: str
    ends_at: float
    is_paused: bool
    remaining_seconds: int


def clamp_minutes(minutes: int) -> int:
    return max(MIN_MINUTES, min(MAX_MINUTES, int(minutes)))


def remaining_seconds(ends_at: float, now: float) -> int:
    return max(0, int(ends_at - now))


def format_remaining(total_seconds: int) -> str:
    total_seconds = max(0, int(total_seconds))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def snapshot_of(session: FocusSession, now: float) -> TimerSnapshot:
    total = session.total_duration_seconds
    remaining = min(total, session.remaining_at(now))
    elapsed = max(0, total - remaining)
    progress = (elapsed / total) if total > 0 else 0.0
    return TimerSnapshot(
        total_seconds=total,
        remaining_seconds=remaining,
        elapsed_seconds=elapsed,
        progress=max(0.0, min(1.0, progress)),
        status=session.status,
    )
