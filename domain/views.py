# -*- coding: utf-8 -*-
"""domain/views.py

View/tab registry: one independent transform per open view.

Key convention: the Layout view uses ``LAYOUT_KEY`` (the root parent id);
a Location view uses the Location's block id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from domain.blocks import Block, BlockType, Connection, ROOT_ID, ViewKind
from domain.capabilities import (
    Anchor,
    BlockCapability,
    RowCapability,
    anchor_for_terminal,
    capability_for,
    is_placeable,
    rendering_block,
)
from domain.constants import LOCATION_CANVAS_SIZE, ZOOM_MAX, ZOOM_MIN
from domain.coordinates import LAYOUT_FRAME, CanvasFrame, Point, ViewTransform
from domain.errors import InvalidValue, NotFound, ViewNotReady
from domain.fit import FitResult, fit_transform
from domain.project import Project

log = logging.getLogger(__name__)

LAYOUT_KEY = ROOT_ID
LAYOUT_TITLE = "Layout"


class ManualDeferrer:
    """Single-shot, cancel-on-reissue deferral driven explicitly.

    The Qt layer provides the same interface on top of ``QTimer``.
    """

    def __init__(self) -> None:
        self._pending: Optional[Callable[[], None]] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def run_pending(self) -> bool:
        cb, self._pending = self._pending, None
        if cb is None:
            return False
        cb()
        return True


@dataclass
class ViewState:
    key: int
    kind: ViewKind
    title: str
    transform: ViewTransform
    viewport: Optional[Tuple[float, float]] = None

    @property
    def frame(self) -> CanvasFrame:
        return self.transform.frame

    @property
    def location_id(self) -> Optional[int]:
        return None if self.kind == ViewKind.LAYOUT else self.key

    @property
    def is_ready(self) -> bool:
        return bool(self.viewport) and self.viewport[0] > 0 and self.viewport[1] > 0

    def set_viewport(self, width: float, height: float) -> None:
        self.viewport = (float(width), float(height))

    def viewport_center(self) -> Optional[Point]:
        if not self.is_ready:
            return None
        return self.viewport[0] / 2.0, self.viewport[1] / 2.0

    def zoom_by(self, delta: float, pivot: Optional[Point] = None) -> bool:
        return self.transform.zoom_by(delta, pivot if pivot is not None else self.viewport_center())

    def set_zoom(self, value: float, pivot: Optional[Point] = None) -> bool:
        return self.transform.set_zoom(value, pivot if pivot is not None else self.viewport_center())

    def pan_by(self, dx: float, dy: float) -> None:
        self.transform.pan_by(dx, dy)


class ViewRegistry:
    def __init__(
        self,
        project: Project,
        *,
        deferrer=None,
        layout_frame: CanvasFrame = LAYOUT_FRAME,
        location_frame: CanvasFrame = CanvasFrame(*LOCATION_CANVAS_SIZE),
        zoom_min: float = ZOOM_MIN,
        zoom_max: float = ZOOM_MAX,
    ) -> None:
        self._project = project
        self._deferrer = deferrer or ManualDeferrer()
        self._layout_frame = layout_frame
        self._location_frame = location_frame
        self._zoom_limits = (zoom_min, zoom_max)
        self._views: Dict[int, ViewState] = {}
        self._pending_fits: List[int] = []
        self._current = LAYOUT_KEY
        self._views[LAYOUT_KEY] = self._new_view(LAYOUT_KEY, ViewKind.LAYOUT, LAYOUT_TITLE, layout_frame)
        self.request_fit(LAYOUT_KEY)

    # ---------------- registry ----------------
    @property
    def project(self) -> Project:
        return self._project

    def set_project(self, project: Project) -> None:
        """Swap the project: keeps the Layout view, drops every Location view."""
        self._project = project
        for key in [k for k in self._views if k != LAYOUT_KEY]:
            del self._views[key]
        self._pending_fits = []
        self._deferrer.cancel()
        self._current = LAYOUT_KEY
        self.layout.transform.reset()
        self.request_fit(LAYOUT_KEY)

    @property
    def layout(self) -> ViewState:
        return self._views[LAYOUT_KEY]

    @property
    def current(self) -> ViewState:
        return self._views[self._current]

    def views(self) -> List[ViewState]:
        return list(self._views.values())

    def has(self, key: int) -> bool:
        return key in self._views

    def get(self, key: int) -> ViewState:
        try:
            return self._views[key]
        except KeyError:
            raise NotFound(f"No open view for key '{key}'.") from None

    def _new_view(self, key: int, kind: ViewKind, title: str, frame: CanvasFrame) -> ViewState:
        zmin, zmax = self._zoom_limits
        return ViewState(key, kind, title, ViewTransform(frame, zoom_min=zmin, zoom_max=zmax))

    def open_location(self, location_id: int) -> Tuple[ViewState, bool]:
        """Open (or select) the view of a Location; returns (view, created)."""
        location = self._project.get_block(location_id)
        if location.type != BlockType.LOCATION:
            raise InvalidValue(f"Block '{location_id}' is not a Location.")
        view = self._views.get(location_id)
        created = view is None
        if created:
            view = self._new_view(location_id, ViewKind.LOCATION, location.name, self._location_frame)
            self._views[location_id] = view
            self.request_fit(location_id)
            log.debug("Opened view for location %s", location_id)
        self._current = location_id
        return view, created

    def select(self, key: int) -> ViewState:
        view = self.get(key)
        self._current = key
        return view

    def close(self, key: int) -> int:
        """Close a Location view; returns the key of the view now current."""
        if key == LAYOUT_KEY:
            raise InvalidValue("The Layout view cannot be closed.")
        self.get(key)
        keys = list(self._views)
        idx = keys.index(key)
        del self._views[key]
        if key in self._pending_fits:
            self._pending_fits.remove(key)
        if self._current == key:
            self._current = keys[idx - 1]
        return self._current

    def prune(self) -> List[int]:
        """Close views whose Location no longer exists."""
        gone = [k for k in self._views if k != LAYOUT_KEY and not self._project.contains(k)]
        for key in gone:
            self.close(key)
        return gone

    def sync_titles(self) -> None:
        for view in self._views.values():
            if view.kind == ViewKind.LOCATION and self._project.contains(view.key):
                view.title = self._project.get_block(view.key).name

    # ---------------- scoping ----------------
    def frame_for_block(self, block: Block) -> CanvasFrame:
        cap = capability_for(self._project, rendering_block(self._project, block.id))
        if cap.preferred_view() == ViewKind.LAYOUT:
            return self._layout_frame
        return self._location_frame

    def view_key_for_block(self, block_id: int) -> int:
        block = rendering_block(self._project, block_id)
        if capability_for(self._project, block).preferred_view() == ViewKind.LAYOUT:
            return LAYOUT_KEY
        location = self._project.owning_location(block.id)
        if location is None:
            raise InvalidValue(f"Block '{block_id}' is not inside a Location.")
        return location.id

    def view_key_for_connection(self, conn: Connection) -> int:
        left = self.view_key_for_block(conn.left_id)
        right = self.view_key_for_block(conn.right_id)
        return left if left == right else LAYOUT_KEY

    def placeables(self, key: int) -> List[BlockCapability]:
        """Top-level renderable blocks of a view (rows come through their busbar)."""
        view = self.get(key)
        parent = ROOT_ID if view.kind == ViewKind.LAYOUT else view.key
        out: List[BlockCapability] = []
        for block in self._project.get_children(parent):
            if not is_placeable(block):
                continue
            cap = capability_for(self._project, block)
            if cap.preferred_view() == view.kind:
                out.append(cap)
        return out

    def connections_in(self, key: int) -> List[Connection]:
        out = []
        for conn in self._project.all_connections():
            try:
                if self.view_key_for_connection(conn) == key:
                    out.append(conn)
            except (NotFound, InvalidValue):
                log.debug("Skipping unresolvable connection %s", conn.to_list()[:2])
        return out

    # ---------------- geometry ----------------
    def hit_test(self, key: int, sx: float, sy: float) -> Optional[BlockCapability]:
        """Topmost block under a screen point; rows win over their busbar."""
        view = self.get(key)
        px, py = view.transform.screen_to_canvas(sx, sy)
        for cap in reversed(self.placeables(key)):
            if not cap.contains(view.frame, px, py):
                continue
            if cap.block.type == BlockType.BUSBAR:
                for row in self._project.rows_of(cap.block_id):
                    rcap = RowCapability(self._project, row)
                    if rcap.contains(view.frame, px, py):
                        return rcap
            return cap
        return None

    def anchor_canvas_position(self, terminal_id: int) -> Optional[Point]:
        found = anchor_for_terminal(self._project, terminal_id)
        if found is None:
            return None
        owner, anchor = found
        frame = self.frame_for_block(owner.block)
        cx, cy = frame.to_canvas(*owner.center())
        return cx + anchor.rel_x, cy + anchor.rel_y

    def anchor_screen_positions(self, key: int) -> List[Tuple[Anchor, float, float]]:
        view = self.get(key)
        out = []
        for cap in self.placeables(key):
            cx, cy = view.frame.to_canvas(*cap.center())
            for anchor in cap.connection_anchors():
                sx, sy = view.transform.canvas_to_screen(cx + anchor.rel_x, cy + anchor.rel_y)
                out.append((anchor, sx, sy))
        return out

    # ---------------- fit ----------------
    def fit(self, key: int) -> FitResult:
        view = self.get(key)
        result = fit_transform(view.transform, self.placeables(key), view.viewport)
        log.debug("Fitted view %s: zoom=%.3f pan=(%.1f, %.1f)", key, result.zoom, result.pan_x, result.pan_y)
        return result

    def request_fit(self, key: int) -> None:
        """Fit after the next layout pass (single-shot, reissue cancels)."""
        if key not in self._pending_fits:
            self._pending_fits.append(key)
        self._deferrer.cancel()
        self._deferrer.schedule(self._run_pending_fits)

    @property
    def pending_fits(self) -> List[int]:
        return list(self._pending_fits)

    def _run_pending_fits(self) -> None:
        waiting: List[int] = []
        for key in self._pending_fits:
            if key not in self._views:
                continue
            try:
                self.fit(key)
            except ViewNotReady:
                waiting.append(key)
        self._pending_fits = waiting

    def resize(self, key: int, width: float, height: float) -> None:
        """Record a measured viewport; runs a fit that was waiting for it."""
        view = self.get(key)
        view.set_viewport(width, height)
        if key in self._pending_fits and view.is_ready:
            self._pending_fits.remove(key)
            self.fit(key)
