# -*- coding: utf-8 -*-
"""QGraphicsItem implementations for the diagram screen.

Items are placed in *canvas* coordinates inside a world item that carries the
view transform, so they never deal with zoom or pan themselves.
"""

from __future__ import annotations

from typing import List, Optional

from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QPolygonF
from PyQt5.QtWidgets import QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem

from domain import constants as C
from domain.blocks import BlockType, Connection, ProtectionKind
from domain.capabilities import Anchor, BlockCapability, BusbarCapability
from domain.coordinates import Point

from .layout_constants import (
    ANCHOR_COLOR,
    ANCHOR_PENDING_BORDER,
    ANCHOR_PENDING_FILL,
    BLOCK_BORDER,
    BLOCK_FILL,
    BORDER_WIDTH,
    BUSBAR_FILL,
    CONNECTION_COLOR,
    CONNECTION_WIDTH,
    LABEL_FONT,
    LABEL_POINT_SIZE,
    LOCATION_FILL,
    ROW_DIVIDER,
    SELECTED_BORDER,
)


def _row_label(block) -> str:
    kind = block.meta.get("protection", ProtectionKind.PIN.value)
    if kind == ProtectionKind.CIRCUIT_BREAKER.value:
        return f"{block.name}  CB {block.meta.get('rating', 0)} A"
    return f"{block.name}  Pin"


class BlockItem(QGraphicsItem):
    """Draws one placeable block centered on its canvas position."""

    def __init__(self, cap: BlockCapability, canvas_center: Point, selected: bool = False):
        super().__init__()
        self.cap = cap
        self.selected = selected
        self._w, self._h = cap.render_footprint()
        self._font = QFont(LABEL_FONT, LABEL_POINT_SIZE)
        self.setPos(QPointF(*canvas_center))
        equipment = cap.block.meta.get("equipment_id")
        if equipment:
            self.setToolTip(f"{cap.block.name} ({equipment})")

    @property
    def block_id(self) -> int:
        return self.cap.block_id

    def boundingRect(self) -> QRectF:
        m = BORDER_WIDTH
        return QRectF(-self._w / 2 - m, -self._h / 2 - m, self._w + 2 * m, self._h + 2 * m)

    def _rect(self) -> QRectF:
        return QRectF(-self._w / 2, -self._h / 2, self._w, self._h)

    def paint(self, painter: QPainter, option, widget=None) -> None:
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setFont(self._font)
        border = SELECTED_BORDER if self.selected else BLOCK_BORDER
        painter.setPen(QPen(QColor(border), BORDER_WIDTH * (1.5 if self.selected else 1.0)))
        painter.setBrush(QBrush(QColor(BLOCK_FILL)))
        painter_fn = getattr(self, f"_paint_{self.cap.block.type.name.lower()}", self._paint_box)
        painter_fn(painter)

    # ---- per-type painters ----
    def _paint_box(self, painter: QPainter) -> None:
        painter.drawRect(self._rect())
        painter.drawText(self._rect(), Qt.AlignCenter | Qt.TextWordWrap, self.cap.block.name)

    def _paint_location(self, painter: QPainter) -> None:
        painter.setBrush(QBrush(QColor(LOCATION_FILL)))
        painter.drawRoundedRect(self._rect(), 12, 12)
        painter.drawText(self._rect(), Qt.AlignCenter | Qt.TextWordWrap, self.cap.block.name)

    def _paint_supply(self, painter: QPainter) -> None:
        painter.drawEllipse(self._rect())
        painter.drawText(self._rect().adjusted(0, -20, 0, 0), Qt.AlignCenter, "~")
        painter.drawText(self._rect().adjusted(0, 30, 0, 0), Qt.AlignCenter, self.cap.block.name)

    def _paint_alternator(self, painter: QPainter) -> None:
        r = self._rect()
        c = r.center()
        painter.drawPolygon(QPolygonF([
            QPointF(c.x(), r.top()), QPointF(r.right(), c.y()),
            QPointF(c.x(), r.bottom()), QPointF(r.left(), c.y()),
        ]))
        painter.drawText(r.adjusted(0, -20, 0, 0), Qt.AlignCenter, "G")
        painter.drawText(r.adjusted(0, 30, 0, 0), Qt.AlignCenter, self.cap.block.name)

    def _paint_conductor(self, painter: QPainter) -> None:
        half = self._w / 2
        painter.drawLine(QPointF(-half, 0), QPointF(half, 0))
        length = self.cap.block.meta.get("length", 0)
        painter.drawText(QRectF(-half, -self._h / 2, self._w, self._h / 2), Qt.AlignCenter, self.cap.block.name)
        painter.drawText(QRectF(-half, 0, self._w, self._h / 2), Qt.AlignCenter, f"{length} m")

    def _paint_transformer_ups(self, painter: QPainter) -> None:
        d = C.TRANSFORMER_CIRCLE
        left = -self._w / 2
        painter.setBrush(Qt.NoBrush)
        painter.drawEllipse(QRectF(left, -d / 2, d, d))
        painter.drawEllipse(QRectF(left + d - C.TRANSFORMER_OVERLAP, -d / 2, d, d))
        painter.drawText(QRectF(left, d / 2 - 4, self._w, 24), Qt.AlignHCenter | Qt.AlignTop, self.cap.block.name)

    def _paint_load(self, painter: QPainter) -> None:
        r = self._rect()
        q = self._w / 4
        painter.drawPolygon(QPolygonF([
            QPointF(r.left() + q, r.top()), QPointF(r.right() - q, r.top()),
            QPointF(r.right(), r.center().y()), QPointF(r.right() - q, r.bottom()),
            QPointF(r.left() + q, r.bottom()), QPointF(r.left(), r.center().y()),
        ]))
        painter.drawText(r.adjusted(q / 2, 0, -q / 2, 0), Qt.AlignCenter | Qt.TextWordWrap, self.cap.block.name)

    def _paint_busbar(self, painter: QPainter) -> None:
        cap = self.cap
        assert isinstance(cap, BusbarCapability)
        painter.setBrush(QBrush(QColor(BUSBAR_FILL)))
        painter.drawRect(self._rect())
        top = -self._h / 2
        painter.drawText(QRectF(-self._w / 2, top, self._w, C.BUSBAR_NAME_HEIGHT), Qt.AlignCenter, cap.block.name)
        rows = cap.project.rows_of(cap.block_id)
        painter.setPen(QPen(QColor(ROW_DIVIDER), 1.0))
        rh = C.BUSBAR_ROW_HEIGHT
        for idx, row in enumerate(rows):
            r = QRectF(-self._w / 2, cap.row_offset(idx) - rh / 2, self._w, rh)
            painter.drawLine(r.topLeft(), r.topRight())
            painter.drawText(r, Qt.AlignCenter, _row_label(row))
        plus_top = self._h / 2 - C.BUSBAR_PLUS_SIZE
        painter.drawText(QRectF(-self._w / 2, plus_top, self._w, C.BUSBAR_PLUS_SIZE), Qt.AlignCenter, "+")

    def _paint_external_busbar(self, painter: QPainter) -> None:
        painter.setBrush(QBrush(QColor(BUSBAR_FILL)))
        painter.drawRect(self._rect())
        painter.setPen(QPen(QColor(ROW_DIVIDER), 1.0))
        rh = C.EXTERNAL_BUSBAR_ROW_HEIGHT
        top = -self._h / 2
        for i in range(1, C.EXTERNAL_BUSBAR_ROWS):
            painter.drawLine(QPointF(-self._w / 2, top + i * rh), QPointF(self._w / 2, top + i * rh))


class AnchorItem(QGraphicsEllipseItem):
    """Connection anchor marker; highlighted while it holds the pending pick."""

    def __init__(self, anchor: Anchor, canvas_center: Point, pending: bool = False):
        half = C.ANCHOR_SIZE / 2.0
        super().__init__(-half, -half, C.ANCHOR_SIZE, C.ANCHOR_SIZE)
        self.anchor = anchor
        self.setPos(QPointF(*canvas_center))
        self.setZValue(10)
        self.set_pending(pending)

    @property
    def terminal_id(self) -> int:
        return self.anchor.terminal_id

    def set_pending(self, pending: bool) -> None:
        if pending:
            self.setBrush(QBrush(QColor(ANCHOR_PENDING_FILL)))
            self.setPen(QPen(QColor(ANCHOR_PENDING_BORDER), 2.0))
        else:
            self.setBrush(QBrush(QColor(ANCHOR_COLOR)))
            self.setPen(QPen(Qt.NoPen))


class ConnectionItem(QGraphicsPathItem):
    """Orthogonal polyline between two anchors."""

    def __init__(self, conn: Connection, points: List[Point]):
        super().__init__()
        self.conn = conn
        self.points = points
        path = QPainterPath()
        if points:
            path.moveTo(QPointF(*points[0]))
            for p in points[1:]:
                path.lineTo(QPointF(*p))
        self.setPath(path)
        pen = QPen(QColor(CONNECTION_COLOR), CONNECTION_WIDTH)
        pen.setCosmetic(True)
        self.setPen(pen)
        self.setZValue(5)

    def render_point_near(self, logical: Point, tolerance: float) -> Optional[tuple]:
        for x, y in self.conn.render_points:
            if abs(x - logical[0]) <= tolerance and abs(y - logical[1]) <= tolerance:
                return x, y
        return None
