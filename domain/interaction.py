# -*- coding: utf-8 -*-
"""domain/interaction.py

Selection / drag / pan state machine.

The whole interaction state is one immutable :class:`Interaction` value.
Transitions replace it; nothing else holds per-kind flags.

    Idle --press(entity)--> Selected(entity)
    Selected(e) --press(e, draggable)--> Dragging(e)
    Dragging(e) --move--> Dragging(e)          (live position, not committed)
    Dragging(e) --release--> Selected(e)       (position committed)
    any (no drag) --press(background)--> Panning --release--> Idle
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from domain.blocks import BlockType
from domain.capabilities import BlockCapability, capability_for
from domain.coordinates import Point
from domain.project import Project
from domain.views import ViewRegistry

log = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    DRAGGING = "dragging"
    PANNING = "panning"


@dataclass(frozen=True)
class Interaction:
    phase: Phase = Phase.IDLE
    kind: Optional[BlockType] = None
    block_id: Optional[int] = None
    view_key: Optional[int] = None
    handle: Any = None  # renderer item of the selected block
    grab: Point = (0.0, 0.0)  # press point minus entity screen center
    live: Point = (0.0, 0.0)  # entity screen center while dragging
    last_pointer: Point = (0.0, 0.0)  # panning only

    @property
    def has_selection(self) -> bool:
        return self.phase in (Phase.SELECTED, Phase.DRAGGING)

    def is_selected(self, block_id: int) -> bool:
        return self.has_selection and self.block_id == block_id


IDLE = Interaction()


@dataclass(frozen=True)
class DragUpdate:
    block_id: int
    center: Point  # screen
    anchors: List[Tuple[int, float, float]] = field(default_factory=list)  # terminal id, screen x, y


class InteractionMachine:
    def __init__(
        self,
        project: Project,
        views: ViewRegistry,
        *,
        snap_grid: float = 0.0,
        on_change: Optional[Callable[[Interaction, Interaction], None]] = None,
        on_commit: Optional[Callable[[int, Tuple[int, int]], None]] = None,
    ) -> None:
        self.project = project
        self.views = views
        self.snap_grid = float(snap_grid or 0.0)
        self._on_change = on_change
        self._on_commit = on_commit
        self._state: Interaction = IDLE

    @property
    def current(self) -> Interaction:
        return self._state

    @property
    def is_dragging(self) -> bool:
        """Single guard checked before a pointer move is treated as a pan."""
        return self._state.phase == Phase.DRAGGING

    def _set(self, new: Interaction) -> Interaction:
        old, self._state = self._state, new
        if old != new and self._on_change:
            self._on_change(old, new)
        return new

    def reset(self, project: Optional[Project] = None) -> None:
        if project is not None:
            self.project = project
        self._set(IDLE)

    # ---------------- selection ----------------
    def select(self, block_id: int, view_key: Optional[int] = None, handle: Any = None) -> Interaction:
        """Select programmatically (tree view); replaces any other selection."""
        block = self.project.get_block(block_id)
        if view_key is None:
            view_key = self.views.view_key_for_block(block_id)
        return self._set(Interaction(Phase.SELECTED, block.type, block.id, view_key, handle))

    def deselect_all(self) -> Interaction:
        if self.is_dragging:
            return self._state
        return self._set(IDLE)

    def cancel(self) -> Interaction:
        """Drop any drag without committing; the selection survives."""
        st = self._state
        if st.phase == Phase.DRAGGING:
            return self._set(Interaction(Phase.SELECTED, st.kind, st.block_id, st.view_key, st.handle))
        if st.phase == Phase.PANNING:
            return self._set(IDLE)
        return st

    def forget(self, block_ids) -> None:
        """Clear the selection if it points to a removed block."""
        if self._state.block_id is not None and self._state.block_id in set(block_ids):
            self._set(IDLE)

    # ---------------- pointer ----------------
    def _screen_center(self, cap: BlockCapability, view_key: int) -> Point:
        view = self.views.get(view_key)
        return view.transform.logical_to_screen(*cap.center())

    def press_block(self, view_key: int, block_id: int, pointer: Point, handle: Any = None) -> Interaction:
        st = self._state
        if st.phase in (Phase.DRAGGING, Phase.PANNING):
            return st
        cap = capability_for(self.project, block_id)
        if not st.is_selected(block_id):
            return self._set(Interaction(Phase.SELECTED, cap.block.type, block_id, view_key, handle))
        if not cap.draggable:
            return st
        center = self._screen_center(cap, view_key)
        grab = (pointer[0] - center[0], pointer[1] - center[1])
        log.debug("Drag start block=%s view=%s", block_id, view_key)
        return self._set(replace(st, phase=Phase.DRAGGING, view_key=view_key, handle=handle or st.handle, grab=grab, live=center))

    def press_background(self, view_key: int, pointer: Point) -> Interaction:
        if self.is_dragging:
            return self._state
        return self._set(Interaction(Phase.PANNING, view_key=view_key, last_pointer=pointer))

    def move(self, pointer: Point) -> Optional[DragUpdate]:
        st = self._state
        if st.phase == Phase.PANNING and not self.is_dragging:
            dx = pointer[0] - st.last_pointer[0]
            dy = pointer[1] - st.last_pointer[1]
            self.views.get(st.view_key).pan_by(dx, dy)
            self._state = replace(st, last_pointer=pointer)
            return None
        if st.phase != Phase.DRAGGING:
            return None
        live = self._snap(st.view_key, (pointer[0] - st.grab[0], pointer[1] - st.grab[1]))
        self._state = replace(st, live=live)
        return DragUpdate(st.block_id, live, self._live_anchors(st.block_id, st.view_key, live))

    def release(self, pointer: Optional[Point] = None) -> Optional[Tuple[int, int]]:
        """End a drag or pan; returns the committed logical position of a drag."""
        st = self._state
        if st.phase == Phase.PANNING:
            self._set(IDLE)
            return None
        if st.phase != Phase.DRAGGING:
            return None
        if pointer is not None:
            self.move(pointer)
            st = self._state
        view = self.views.get(st.view_key)
        x, y = view.transform.screen_to_logical(*st.live)
        pos = (int(round(x)), int(round(y)))
        capability_for(self.project, st.block_id).move_to(*pos)
        log.debug("Drag commit block=%s pos=%s", st.block_id, pos)
        self._set(Interaction(Phase.SELECTED, st.kind, st.block_id, st.view_key, st.handle))
        if self._on_commit:
            self._on_commit(st.block_id, pos)
        return pos

    # ---------------- helpers ----------------
    def _snap(self, view_key: int, screen: Point) -> Point:
        """Snap a screen point to the grid in canvas units."""
        if self.snap_grid <= 0:
            return screen
        tr = self.views.get(view_key).transform
        px, py = tr.screen_to_canvas(*screen)
        g = self.snap_grid
        return tr.canvas_to_screen(round(px / g) * g, round(py / g) * g)

    def _live_anchors(self, block_id: int, view_key: int, live: Point) -> List[Tuple[int, float, float]]:
        zoom = self.views.get(view_key).transform.zoom
        cap = capability_for(self.project, block_id)
        return [(a.terminal_id, live[0] + a.rel_x * zoom, live[1] + a.rel_y * zoom) for a in cap.connection_anchors()]
