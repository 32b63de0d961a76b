# -*- coding: utf-8 -*-
"""domain/fit.py

Fit-to-content: the zoom/pan that frames every renderable block of a view.

Pure functions over capabilities and a frame; the view registry applies the
result to its transforms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from domain.capabilities import BlockCapability, Rect
from domain.constants import FIT_PADDING, ZOOM_MAX, ZOOM_MIN
from domain.coordinates import CanvasFrame, ViewTransform, clamp
from domain.errors import ViewNotReady


@dataclass(frozen=True)
class FitResult:
    zoom: float
    pan_x: float
    pan_y: float

    def apply(self, transform: ViewTransform) -> None:
        transform.zoom = self.zoom
        transform.pan_x = self.pan_x
        transform.pan_y = self.pan_y


def content_bounds(capabilities: Iterable[BlockCapability], frame: CanvasFrame) -> Optional[Rect]:
    """Union of the canvas-space bounding boxes, or None when empty."""
    boxes = [cap.bounding_box(frame) for cap in capabilities]
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )


def pad_bounds(bounds: Rect, padding: float = FIT_PADDING) -> Rect:
    left, top, right, bottom = bounds
    px = (right - left) * padding
    py = (bottom - top) * padding
    return left - px, top - py, right + px, bottom + py


def compute_fit(
    frame: CanvasFrame,
    bounds: Optional[Rect],
    viewport: Optional[Tuple[float, float]],
    *,
    zoom_min: float = ZOOM_MIN,
    zoom_max: float = ZOOM_MAX,
    padding: float = FIT_PADDING,
) -> FitResult:
    if not viewport or viewport[0] <= 0 or viewport[1] <= 0:
        raise ViewNotReady("Viewport has no measured size yet.")
    vw, vh = float(viewport[0]), float(viewport[1])

    if bounds is None:
        # Empty view: center the frame (empty-state anchor) at 100%.
        cx, cy = frame.center
        return FitResult(1.0, vw / 2.0 - cx, vh / 2.0 - cy)

    left, top, right, bottom = pad_bounds(bounds, padding)
    width, height = right - left, bottom - top
    if width <= 0 or height <= 0:
        zoom = zoom_max
    else:
        zoom = clamp(min(vw / width, vh / height), zoom_min, zoom_max)
    mid_x = (left + right) / 2.0
    mid_y = (top + bottom) / 2.0
    return FitResult(zoom, vw / 2.0 - mid_x * zoom, vh / 2.0 - mid_y * zoom)


def fit_transform(
    transform: ViewTransform,
    capabilities: Iterable[BlockCapability],
    viewport: Optional[Tuple[float, float]],
) -> FitResult:
    """Compute and apply the fit for ``transform``; idempotent."""
    result = compute_fit(
        transform.frame,
        content_bounds(capabilities, transform.frame),
        viewport,
        zoom_min=transform.zoom_min,
        zoom_max=transform.zoom_max,
    )
    result.apply(transform)
    return result
