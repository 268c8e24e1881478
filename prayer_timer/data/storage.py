"""SQLite-слой хранения: настройки, состояние таймера и журнал осознанных сессий."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Iterator

from prayer_timer.core.timer import FocusSession


SCHEMA_VERSION = 1
FOCUS_SESSION_KEY = "focus_session"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MindfulSessionRow:
    id: int
    started_at: float
    ended_at: float
    created_at: str

    @property
    def duration_sec(self) -> int:
        return max(0, int(self.ended_at - self.started_at))


class Storage:
    """Инкапсулирует подключение к SQLite и транзакционные операции."""
    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.DatabaseError:
            pass
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Создает таблицы приложения при первом запуске."""
        with self._transaction() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if not row:
                conn.execute("INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,))
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings(
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mindful_sessions(
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    started_at REAL NOT NULL,
                    ended_at REAL NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        if not row:
            return default
        raw = row["value"]
        try:
            return json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return raw

    def set_setting(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, payload),
            )

    def load_focus_session(self) -> FocusSession:
        """Читает сохраненную сессию; битая запись трактуется как простой таймер."""
        record = self.get_setting(FOCUS_SESSION_KEY)
        if record is None:
            return FocusSession.idle()
        try:
            return FocusSession.from_record(record)
        except ValueError as exc:
            logger.warning(f"Discarding persisted focus session: {exc}")
            return FocusSession.idle()

    def save_focus_session(self, session: FocusSession) -> None:
        """Все поля сессии пишутся одной записью в одной транзакции."""
        self.set_setting(FOCUS_SESSION_KEY, session.to_record())

    def insert_mindful_session(self, started_at: float, ended_at: float) -> int:
        if ended_at <= started_at:
            raise ValueError("Mindful session must end after it starts")
        created_at = datetime.now().isoformat(timespec="seconds")
        with self._transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO mindful_sessions(started_at, ended_at, created_at) VALUES (?, ?, ?)",
                (started_at, ended_at, created_at),
            )
            return int(cursor.lastrowid)

    def list_mindful_sessions(self, limit: int = 100) -> list[MindfulSessionRow]:
        """Возвращает последние записи журнала в обратном хронологическом порядке."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, started_at, ended_at, created_at FROM mindful_sessions ORDER BY started_at DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            MindfulSessionRow(
                id=row["id"],
                started_at=row["started_at"],
                ended_at=row["ended_at"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def mindful_seconds_on(self, day: date) -> int:
        """Суммирует длительность сессий, начатых в указанный локальный день."""
        day_start = datetime.combine(day, time.min).timestamp()
        day_end = datetime.combine(day + timedelta(days=1), time.min).timestamp()
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(ended_at - started_at), 0) AS total
                FROM mindful_sessions
                WHERE started_at >= ? AND started_at < ?
                """,
                (day_start, day_end),
            ).fetchone()
        return int(row["total"] if row else 0)
