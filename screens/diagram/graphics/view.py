# -*- coding: utf-8 -*-
"""QGraphicsView for one diagram view (Layout or a Location).

The engine owns zoom and pan. Scene coordinates equal viewport pixels; a
single world item carries ``QTransform(zoom, 0, 0, zoom, pan_x, pan_y)`` and
every block, anchor and line is a child placed in canvas coordinates.
Pointer input is forwarded to the controller in screen coordinates.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from PyQt5.QtCore import QPoint, Qt, pyqtSignal
from PyQt5.QtGui import QPainter, QTransform
from PyQt5.QtWidgets import QGraphicsRectItem, QGraphicsScene, QGraphicsView

from app.config import WHEEL_NOTCH, ZOOM_STEP
from app.events import (
    BlocksChanged,
    ConnectionsChanged,
    EditModeChanged,
    PendingPickChanged,
    PositionCommitted,
    ProjectReplaced,
    SelectionChanged,
)
from domain import constants as C
from domain.blocks import BlockType
from domain.connection_protocol import EditMode
from domain.coordinates import Point
from domain.interaction import Phase
from domain.routing import hits_route, route_for

from .items import AnchorItem, BlockItem, ConnectionItem
from .layout_constants import LINE_HIT_TOLERANCE

log = logging.getLogger(__name__)

_REFRESH_EVENTS = (
    BlocksChanged,
    ConnectionsChanged,
    EditModeChanged,
    PendingPickChanged,
    PositionCommitted,
    ProjectReplaced,
    SelectionChanged,
)


def _pt(event) -> Point:
    p = event.pos()
    return float(p.x()), float(p.y())


class DiagramView(QGraphicsView):
    location_activated = pyqtSignal(int)
    context_requested = pyqtSignal(int, QPoint)  # block id, global pos
    delete_requested = pyqtSignal()

    def __init__(self, controller, view_key: int, *, confirm=None, zoom_step: float = ZOOM_STEP, parent=None):
        super().__init__(QGraphicsScene(parent), parent)
        self.controller = controller
        self.view_key = view_key
        self.zoom_step = float(zoom_step)
        self._confirm = confirm or (lambda _title, _text: True)
        self.setRenderHints(QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setTransformationAnchor(QGraphicsView.NoAnchor)
        self.setResizeAnchor(QGraphicsView.NoAnchor)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(False)

        self._world = QGraphicsRectItem()
        self._world.setPen(Qt.NoPen)
        self.scene().addItem(self._world)
        self._blocks: Dict[int, BlockItem] = {}
        self._anchors: Dict[int, AnchorItem] = {}
        self._lines: List[ConnectionItem] = []

        for ev in _REFRESH_EVENTS:
            controller.bus.subscribe(ev, self._on_model_event)
        self.rebuild()

    # ---------------- lifecycle ----------------
    def detach(self) -> None:
        """Stop listening to the controller (tab closed)."""
        for ev in _REFRESH_EVENTS:
            self.controller.bus.unsubscribe(ev, self._on_model_event)

    @property
    def state(self):
        return self.controller.views.get(self.view_key)

    def _on_model_event(self, _event) -> None:
        if self.controller.views.has(self.view_key):
            self.rebuild()

    def apply_transform(self) -> None:
        t = self.state.transform
        self._world.setTransform(QTransform(t.zoom, 0, 0, t.zoom, t.pan_x, t.pan_y))
        vp = self.viewport()
        self.scene().setSceneRect(0, 0, vp.width(), vp.height())

    # ---------------- rendering ----------------
    def rebuild(self) -> None:
        scene = self.scene()
        for item in list(self._world.childItems()):
            scene.removeItem(item)
        self._blocks.clear()
        self._anchors.clear()
        self._lines = []

        views = self.controller.views
        frame = self.state.frame
        st = self.controller.interaction.current
        show_anchors = self.controller.mode == EditMode.CONNECT
        pending = self.controller.connections.pending

        selected = st.block_id if st.has_selection else None
        if selected is not None and st.kind == BlockType.ROW:
            # a selected row highlights its busbar
            selected = views.project.get_block(selected).parent_id

        for cap in views.placeables(self.view_key):
            cx, cy = frame.to_canvas(*cap.center())
            item = BlockItem(cap, (cx, cy), selected=cap.block_id == selected)
            item.setParentItem(self._world)
            self._blocks[cap.block_id] = item
            if not show_anchors:
                continue
            for anchor in cap.connection_anchors():
                a = AnchorItem(
                    anchor,
                    (cx + anchor.rel_x, cy + anchor.rel_y),
                    pending=pending is not None and pending.terminal_id == anchor.terminal_id,
                )
                a.setParentItem(self._world)
                self._anchors[anchor.terminal_id] = a

        for conn in views.connections_in(self.view_key):
            points = self.controller.route(conn, self.view_key)
            if points is None:
                continue
            line = ConnectionItem(conn, points)
            line.setParentItem(self._world)
            self._lines.append(line)
        self.apply_transform()

    def _reroute_live(self, overrides: Dict[int, Point]) -> None:
        """Redraw lines touching dragged terminals from live canvas positions."""
        frame = self.state.frame
        views = self.controller.views
        for line in list(self._lines):
            conn = line.conn
            if conn.left_id not in overrides and conn.right_id not in overrides:
                continue
            start = overrides.get(conn.left_id) or views.anchor_canvas_position(conn.left_id)
            end = overrides.get(conn.right_id) or views.anchor_canvas_position(conn.right_id)
            if start is None or end is None:
                continue
            fresh = ConnectionItem(conn, route_for(frame, start, end, conn.render_points))
            self.scene().removeItem(line)
            fresh.setParentItem(self._world)
            self._lines[self._lines.index(line)] = fresh

    # ---------------- hit testing ----------------
    def _anchor_at(self, sp: Point) -> Optional[int]:
        zoom = self.state.transform.zoom
        radius = C.ANCHOR_SIZE * zoom / 2.0 + 3.0
        for anchor, sx, sy in self.controller.views.anchor_screen_positions(self.view_key):
            if abs(sx - sp[0]) <= radius and abs(sy - sp[1]) <= radius:
                return anchor.terminal_id
        return None

    def _line_at(self, sp: Point) -> Optional[ConnectionItem]:
        t = self.state.transform
        cp = t.screen_to_canvas(*sp)
        for line in reversed(self._lines):
            if hits_route(line.points, cp, LINE_HIT_TOLERANCE / t.zoom):
                return line
        return None

    # ---------------- Qt events ----------------
    def resizeEvent(self, event):
        super().resizeEvent(event)
        vp = self.viewport()
        self.controller.views.resize(self.view_key, vp.width(), vp.height())
        self.apply_transform()

    def wheelEvent(self, event):
        delta = event.angleDelta().y()
        if delta == 0:
            return
        if self.controller.zoom(self.view_key, delta / WHEEL_NOTCH * self.zoom_step, _pt(event)):
            self.apply_transform()
        event.accept()

    def mousePressEvent(self, event):
        sp = _pt(event)
        machine = self.controller.interaction
        if event.button() == Qt.MiddleButton:
            machine.press_background(self.view_key, sp)
            self.setCursor(Qt.ClosedHandCursor)
            event.accept()
            return
        if event.button() == Qt.RightButton:
            self._right_press(event, sp)
            return
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return

        mode = self.controller.mode
        if mode == EditMode.CONNECT:
            terminal_id = self._anchor_at(sp)
            if terminal_id is not None:
                self.controller.pick_anchor(terminal_id, self.view_key)
                event.accept()
                return
            line = self._line_at(sp)
            if line is not None:
                canvas = self.state.transform.screen_to_canvas(*sp)
                self.controller.add_render_point(line.conn.left_id, line.conn.right_id, self.view_key, canvas)
                event.accept()
                return
        elif mode == EditMode.DISCONNECT:
            line = self._line_at(sp)
            if line is not None:
                a, b = line.conn.left_id, line.conn.right_id
                if self._confirm("Remove connection", "Remove the selected connection?"):
                    self.controller.remove_connection(a, b)
                event.accept()
                return

        cap = self.controller.views.hit_test(self.view_key, *sp)
        if cap is not None:
            machine.press_block(self.view_key, cap.block_id, sp)
        else:
            machine.deselect_all()
            machine.press_background(self.view_key, sp)
            self.setCursor(Qt.ClosedHandCursor)
        event.accept()

    def _right_press(self, event, sp: Point) -> None:
        if self.controller.mode == EditMode.CONNECT:
            line = self._line_at(sp)
            if line is not None:
                logical = self.state.transform.screen_to_logical(*sp)
                hit = line.render_point_near(logical, C.ROUTE_GRID / 2.0)
                if hit is not None:
                    self.controller.remove_render_point(line.conn.left_id, line.conn.right_id, *hit)
                    event.accept()
                    return
        cap = self.controller.views.hit_test(self.view_key, *sp)
        if cap is not None:
            self.controller.interaction.select(cap.block_id, self.view_key)
            self.context_requested.emit(cap.block_id, event.globalPos())
        event.accept()

    def mouseMoveEvent(self, event):
        machine = self.controller.interaction
        update = machine.move(_pt(event))
        if machine.current.phase == Phase.PANNING:
            self.apply_transform()
        elif update is not None:
            t = self.state.transform
            item = self._blocks.get(update.block_id)
            if item is not None:
                item.setPos(*t.screen_to_canvas(*update.center))
            overrides: Dict[int, Tuple[float, float]] = {}
            for terminal_id, sx, sy in update.anchors:
                overrides[terminal_id] = t.screen_to_canvas(sx, sy)
                anchor = self._anchors.get(terminal_id)
                if anchor is not None:
                    anchor.setPos(*overrides[terminal_id])
            self._reroute_live(overrides)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self.controller.interaction.release(_pt(event) if event.button() == Qt.LeftButton else None)
        self.setCursor(Qt.ArrowCursor)
        event.accept()

    def mouseDoubleClickEvent(self, event):
        cap = self.controller.views.hit_test(self.view_key, *_pt(event))
        if cap is not None and cap.block.type == BlockType.LOCATION:
            self.location_activated.emit(cap.block_id)
            event.accept()
            return
        super().mouseDoubleClickEvent(event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.controller.escape()
            self.rebuild()
            event.accept()
            return
        if event.key() in (Qt.Key_Delete, Qt.Key_Backspace):
            self.delete_requested.emit()
            event.accept()
            return
        super().keyPressEvent(event)
