# -*- coding: utf-8 -*-
"""Single-shot, cancel-on-reissue deferral on top of ``QTimer``.

Same interface as :class:`domain.views.ManualDeferrer`, so the view registry
does not know whether it runs under Qt or in a test.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PyQt5.QtCore import QObject, QTimer

from app.config import FIT_DELAY_MS

log = logging.getLogger(__name__)


class QtDeferrer(QObject):
    def __init__(self, parent: Optional[QObject] = None, *, on_done: Optional[Callable[[], None]] = None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._callback: Optional[Callable[[], None]] = None
        self._on_done = on_done

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._timer.start(FIT_DELAY_MS)

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        cb, self._callback = self._callback, None
        if cb is None:
            return
        cb()
        if self._on_done:
            self._on_done()
