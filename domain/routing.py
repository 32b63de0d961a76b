# -*- coding: utf-8 -*-
"""domain/routing.py

Orthogonal connection routes in canvas space.
"""

from __future__ import annotations

import math
from typing import Iterable, List

from domain.constants import ALIGN_TOLERANCE, ROUTE_GRID
from domain.coordinates import CanvasFrame, Point


def snap_to_grid(point: Point, grid: float = ROUTE_GRID) -> Point:
    return round(point[0] / grid) * grid, round(point[1] / grid) * grid


def connect_orthogonally(points: List[Point], start: Point, end: Point) -> None:
    """Append the corner (if any) and ``end`` to ``points``.

    Aligned points get a straight segment; otherwise the longer axis goes first.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if abs(dx) < ALIGN_TOLERANCE or abs(dy) < ALIGN_TOLERANCE:
        points.append(end)
        return
    if abs(dx) >= abs(dy):
        points.append((end[0], start[1]))
    else:
        points.append((start[0], end[1]))
    points.append(end)


def build_route(start: Point, end: Point, bends: Iterable[Point] = ()) -> List[Point]:
    """Polyline from ``start`` through each bend point to ``end``."""
    points: List[Point] = [start]
    current = start
    for bend in bends:
        connect_orthogonally(points, current, bend)
        current = bend
    connect_orthogonally(points, current, end)
    return points


def route_for(frame: CanvasFrame, start: Point, end: Point, render_points) -> List[Point]:
    """Route between two canvas anchors through logical render points."""
    return build_route(start, end, [frame.to_canvas(x, y) for x, y in render_points])


def distance_to_segment(p: Point, a: Point, b: Point) -> float:
    ax, ay = a
    bx, by = b
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(p[0] - ax, p[1] - ay)
    t = max(0.0, min(1.0, ((p[0] - ax) * dx + (p[1] - ay) * dy) / length_sq))
    return math.hypot(p[0] - (ax + t * dx), p[1] - (ay + t * dy))


def hits_route(points: List[Point], p: Point, tolerance: float) -> bool:
    """True when ``p`` lies within ``tolerance`` of any segment of the polyline."""
    return any(distance_to_segment(p, a, b) <= tolerance for a, b in zip(points, points[1:]))
