# -*- coding: utf-8 -*-
"""domain/connection_protocol.py

Two-click connection workflow.

The protocol owns the single pending-pick slot. Renderers ask
:meth:`ConnectionProtocol.is_pending` to highlight an anchor; they never
store the pick themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from domain.blocks import Connection
from domain.errors import InvalidConnection, NotFound
from domain.project import Project

log = logging.getLogger(__name__)


class EditMode(str, Enum):
    NORMAL = "normal"
    CONNECT = "connect"  # anchors visible, clicks on lines add bend points
    DISCONNECT = "disconnect"  # clicks on lines remove connections


class PickOutcome(str, Enum):
    PENDING = "pending"
    CANCELLED = "cancelled"
    CONNECTED = "connected"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AnchorPick:
    terminal_id: int
    view_key: Optional[int] = None
    tag: Any = None


@dataclass(frozen=True)
class PickResult:
    outcome: PickOutcome
    connection: Optional[Connection] = None
    error: str = ""


class ConnectionProtocol:
    def __init__(
        self,
        project: Project,
        *,
        on_connected: Optional[Callable[[Connection], None]] = None,
        on_pending_changed: Optional[Callable[[Optional[AnchorPick]], None]] = None,
    ) -> None:
        self.project = project
        self._pending: Optional[AnchorPick] = None
        self._on_connected = on_connected
        self._on_pending_changed = on_pending_changed

    @property
    def pending(self) -> Optional[AnchorPick]:
        return self._pending

    def is_pending(self, terminal_id: int) -> bool:
        return self._pending is not None and self._pending.terminal_id == terminal_id

    def _set_pending(self, pick: Optional[AnchorPick]) -> None:
        if pick == self._pending:
            return
        self._pending = pick
        if self._on_pending_changed:
            self._on_pending_changed(pick)

    def cancel(self) -> None:
        self._set_pending(None)

    def reset(self, project: Optional[Project] = None) -> None:
        if project is not None:
            self.project = project
        self._set_pending(None)

    def pick(self, terminal_id: int, view_key: Optional[int] = None, tag: Any = None) -> PickResult:
        first = self._pending
        if first is None:
            self._set_pending(AnchorPick(terminal_id, view_key, tag))
            return PickResult(PickOutcome.PENDING)
        if first.terminal_id == terminal_id:
            self._set_pending(None)
            return PickResult(PickOutcome.CANCELLED)
        try:
            conn = self.project.add_connection(first.terminal_id, terminal_id)
        except (InvalidConnection, NotFound) as e:
            log.info("Connection %s -> %s rejected: %s", first.terminal_id, terminal_id, e)
            self._set_pending(None)
            return PickResult(PickOutcome.REJECTED, error=str(e))
        # The graph is updated before anyone re-renders from it.
        self._set_pending(None)
        if self._on_connected:
            self._on_connected(conn)
        return PickResult(PickOutcome.CONNECTED, connection=conn)
