"""Qt timer adapter for the round scheduler."""
from __future__ import annotations

from typing import Callable

from PyQt6 import QtCore


class QtTimerHandle:
    def __init__(self, timer: QtCore.QTimer) -> None:
        self._timer = timer
        self._finished = False
        timer.timeout.connect(self._on_timeout)

    def _on_timeout(self) -> None:
        self._finished = True
        self._timer.deleteLater()

    def cancel(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._timer.stop()
        self._timer.deleteLater()


class QtScheduler:
    """Schedules single-shot callbacks on the Qt event loop."""

    def __init__(self, parent: QtCore.QObject | None = None) -> None:
        self.parent = parent

    def call_later(self, delay: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QtCore.QTimer(self.parent)
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        handle = QtTimerHandle(timer)
        timer.start(int(delay * 1000))
        return handle


__all__ = ["QtScheduler", "QtTimerHandle"]
