# -*- coding: utf-8 -*-
"""Base controller (no Qt).

Controllers mutate the in-memory project and never import PyQt. The screen
that owns one only hears back through two channels:

- the :class:`~app.events.EventBus`, for refresh routing;
- ``on_error(title, message)``, for failures that need a dialog.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from app.dirty_tracker import DirtyTracker
from app.events import EventBus, IssuesReported, ModifiedChanged
from services.errors import Issue, Level

log = logging.getLogger(__name__)


class BaseController:
    """Dirty flag, notifications and issue reporting shared by controllers.

    Parameters
    ----------
    bus:
        Event bus listened to by the tree view and the renderers.
    dirty:
        Unsaved-changes tracker; by default its flips are published as
        :class:`~app.events.ModifiedChanged`.
    on_error:
        ``(title, message)`` callback for ERROR-level issues.
    """

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        *,
        dirty: Optional[DirtyTracker] = None,
        on_error: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.bus = bus or EventBus()
        self.dirty = dirty or DirtyTracker(on_change=lambda d: self.bus.emit(ModifiedChanged(d)))
        self._on_error = on_error

    def set_on_error(self, on_error: Optional[Callable[[str, str], None]]) -> None:
        self._on_error = on_error

    def mark_dirty(self, reason: str = "", block_ids: Iterable[int] | None = None) -> None:
        self.dirty.mark_dirty(reason, block_ids)

    def notify(self, event: Any) -> None:
        self.bus.emit(event)

    def report(self, issues: List[Issue], *, title: str = "Power Layout") -> None:
        """Publish issues; errors are also surfaced through ``on_error``."""
        if not issues:
            return
        for it in issues:
            log.log(logging.WARNING if it.level == Level.ERROR else logging.INFO, "[%s] %s", it.code, it.message)
        self.bus.emit(IssuesReported(tuple(issues)))
        errors = [it.message for it in issues if it.level == Level.ERROR]
        if errors and self._on_error:
            try:
                self._on_error(title, "\n".join(errors))
            except Exception:
                log.debug("on_error callback failed", exc_info=True)
