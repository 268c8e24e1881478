from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


class AttentionCue(QObject):
    """Repeating cue shown while the finished alert waits for acknowledgement."""

    stopped = pyqtSignal()

    def __init__(self, cue: Callable[[], None], interval_ms: int = 1500, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._cue = cue
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._cue)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self.acknowledge()
        self._cue()
        self._timer.start()

    def acknowledge(self) -> bool:
        """Stop the cue; returns False if it was not running."""
        if not self._timer.isActive():
            return False
        self._timer.stop()
        self.stopped.emit()
        return True
