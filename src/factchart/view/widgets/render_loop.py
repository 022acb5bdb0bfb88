"""
Per-frame Render Loop
A QTimer wrapper driving continuous redraws of interactive views.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

from factchart import config

logger = logging.getLogger(__name__)


class RenderLoop:
    """
    Calls a frame callback on every timer tick until stopped.

    `start` always stops a running loop first, so restarting with a new
    callback never leaves two loops alive.
    """

    def __init__(self, parent: Optional[QObject] = None, interval_ms: int = config.MODAL_FRAME_INTERVAL_MS) -> None:
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._tick)
        self._callback: Optional[Callable[[], None]] = None

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self, callback: Callable[[], None]) -> None:
        self.stop()
        self._callback = callback
        self._timer.start()
        logger.debug("Render loop started.")

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            logger.debug("Render loop stopped.")
        self._callback = None

    def _tick(self) -> None:
        if self._callback is not None:
            self._callback()
