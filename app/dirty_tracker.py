# -*- coding: utf-8 -*-
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterable, List, Optional


class DirtyTracker:
    """Unsaved-changes state of the open project (UI-agnostic).

    ``on_change`` fires only when the modified flag flips, so the window title
    is not rebuilt on every drag commit.
    """

    def __init__(self, initial_dirty: bool = False, on_change: Optional[Callable[[bool], None]] = None) -> None:
        self.is_dirty = bool(initial_dirty)
        self._suspend_depth = 0
        self._on_change = on_change
        self.reasons: List[str] = []

    @property
    def suspended(self) -> bool:
        return self._suspend_depth > 0

    @property
    def last_change_summary(self) -> str:
        return self.reasons[-1] if self.reasons else ""

    def _flip(self, dirty: bool) -> None:
        changed = dirty != self.is_dirty
        self.is_dirty = dirty
        if changed and self._on_change:
            self._on_change(dirty)

    def mark_dirty(self, reason: str = "", block_ids: Iterable[int] | None = None) -> None:
        if self.suspended:
            return
        parts = []
        if reason:
            parts.append(str(reason))
        if block_ids:
            parts.append(",".join(str(b) for b in block_ids))
        self.reasons.append(" | ".join(parts))
        self._flip(True)

    def clear_dirty(self) -> None:
        self.reasons = []
        self._flip(False)

    def suspend(self) -> None:
        self._suspend_depth += 1

    def resume(self) -> None:
        if self._suspend_depth > 0:
            self._suspend_depth -= 1

    @contextmanager
    def suspend_tracking(self):
        self.suspend()
        try:
            yield
        finally:
            self.resume()
