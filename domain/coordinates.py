# -*- coding: utf-8 -*-
"""domain/coordinates.py

Logical <-> canvas <-> screen conversions.

- Logical space is Cartesian (y grows upward) with its origin at the center
  of the view's canvas frame.
- Canvas space is the unzoomed drawing surface (y grows downward).
- Screen space is canvas space after the view transform:
  ``screen = pan + canvas * zoom``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from domain.constants import LAYOUT_CANVAS_SIZE, ZOOM_MAX, ZOOM_MIN

Point = Tuple[float, float]


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class CanvasFrame:
    """Finite logical canvas extent of one view."""

    width: float
    height: float

    @property
    def center(self) -> Point:
        return self.width / 2.0, self.height / 2.0

    def to_canvas(self, x: float, y: float) -> Point:
        cx, cy = self.center
        return cx + x, cy - y

    def from_canvas(self, px: float, py: float) -> Tuple[int, int]:
        """Canvas point back to logical space, rounded for storage."""
        cx, cy = self.center
        return int(round(px - cx)), int(round(cy - py))


LAYOUT_FRAME = CanvasFrame(*LAYOUT_CANVAS_SIZE)


def layout_to_canvas(x: float, y: float) -> Point:
    """Root-level blocks: anchored to the Layout view's fixed origin."""
    return LAYOUT_FRAME.to_canvas(x, y)


@dataclass
class ViewTransform:
    frame: CanvasFrame
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    zoom_min: float = ZOOM_MIN
    zoom_max: float = ZOOM_MAX

    def snapshot(self) -> Tuple[float, float, float]:
        return self.zoom, self.pan_x, self.pan_y

    def reset(self) -> None:
        self.zoom, self.pan_x, self.pan_y = 1.0, 0.0, 0.0

    # -- canvas <-> screen
    def canvas_to_screen(self, px: float, py: float) -> Point:
        return self.pan_x + px * self.zoom, self.pan_y + py * self.zoom

    def screen_to_canvas(self, sx: float, sy: float) -> Point:
        return (sx - self.pan_x) / self.zoom, (sy - self.pan_y) / self.zoom

    # -- logical <-> screen
    def logical_to_screen(self, x: float, y: float) -> Point:
        return self.canvas_to_screen(*self.frame.to_canvas(x, y))

    def screen_to_logical(self, sx: float, sy: float) -> Point:
        px, py = self.screen_to_canvas(sx, sy)
        cx, cy = self.frame.center
        return px - cx, cy - py

    # -- pan / zoom
    def pan_by(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def set_zoom(self, value: float, pivot: Optional[Point] = None) -> bool:
        """Set zoom keeping ``pivot`` (screen point) visually stationary.

        Returns False when clamping leaves the zoom unchanged.
        """
        new = clamp(float(value), self.zoom_min, self.zoom_max)
        old = self.zoom
        if new == old:
            return False
        px, py = pivot if pivot is not None else (0.0, 0.0)
        ratio = new / old
        self.pan_x = px - (px - self.pan_x) * ratio
        self.pan_y = py - (py - self.pan_y) * ratio
        self.zoom = new
        return True

    def zoom_by(self, delta: float, pivot: Optional[Point] = None) -> bool:
        return self.set_zoom(self.zoom + delta, pivot)
