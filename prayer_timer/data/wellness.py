"""Журнал осознанных сессий поверх SQLite с однократным запросом разрешения."""

from __future__ import annotations

import logging
from typing import Callable

from prayer_timer.data.storage import Storage


AUTHORIZATION_KEY = "wellness_authorization"
AUTHORIZED = "authorized"
DENIED = "denied"

logger = logging.getLogger(__name__)


class SqliteWellnessLog:
    """Хранит интервалы молитвы/чтения, если пользователь разрешил запись.

    `prompt` вызывается не более одного раза на установку: решение сохраняется
    в таблице настроек.
    """

    def __init__(
        self,
        storage: Storage,
        prompt: Callable[[], bool] | None = None,
        enabled: bool = True,
    ) -> None:
        self._storage = storage
        self._prompt = prompt
        self._enabled = enabled

    @property
    def authorization(self) -> str | None:
        value = self._storage.get_setting(AUTHORIZATION_KEY)
        return value if value in {AUTHORIZED, DENIED} else None

    def request_authorization(self) -> bool:
        if not self._enabled:
            return False
        current = self.authorization
        if current is not None:
            return current == AUTHORIZED
        if self._prompt is None:
            return False
        granted = bool(self._prompt())
        self._storage.set_setting(AUTHORIZATION_KEY, AUTHORIZED if granted else DENIED)
        logger.info(f"Wellness logging {'authorized' if granted else 'denied'}")
        return granted

    def log_interval(self, start: float, end: float) -> bool:
        if not self._enabled or self.authorization != AUTHORIZED:
            return False
        if end <= start:
            return False
        self._storage.insert_mindful_session(start, end)
        logger.info(f"Logged mindful session of {int(end - start)}s")
        return True
