# -*- coding: utf-8 -*-
"""Simple event bus for refresh routing between the diagram and its collaborators (no UI dependency)."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Type


@dataclass(frozen=True)
class BlocksChanged:
    """Structural change: blocks added, removed or renamed."""

    reason: str
    block_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ConnectionsChanged:
    reason: str
    terminals: Tuple[int, ...] = ()


@dataclass(frozen=True)
class PositionCommitted:
    block_id: int
    position: Tuple[int, int]


@dataclass(frozen=True)
class SelectionChanged:
    block_id: Optional[int]
    view_key: Optional[int] = None


@dataclass(frozen=True)
class ProjectReplaced:
    file_path: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ModifiedChanged:
    is_modified: bool


@dataclass(frozen=True)
class IssuesReported:
    issues: Tuple[Any, ...]


@dataclass(frozen=True)
class PendingPickChanged:
    terminal_id: Optional[int]


@dataclass(frozen=True)
class EditModeChanged:
    mode: str


@dataclass(frozen=True)
class ProjectInfoChanged:
    fields: Tuple[str, ...] = ()


class EventBus:
    """Minimal in-process event bus (best-effort)."""

    def __init__(self) -> None:
        self._subs: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[Any], callback: Callable[[Any], None]) -> None:
        self._subs.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: Type[Any], callback: Callable[[Any], None]) -> None:
        subs = self._subs.get(event_type, [])
        if callback in subs:
            subs.remove(callback)

    def emit(self, event: Any) -> None:
        for cb in list(self._subs.get(type(event), []) or []):
            try:
                cb(event)
            except Exception:
                # Best-effort: a failing subscriber must not break the diagram
                logging.getLogger(__name__).debug("Event handler failed.", exc_info=True)
