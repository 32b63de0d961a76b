# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.coordinates import CanvasFrame, ViewTransform

FRAME = CanvasFrame(4000.0, 3000.0)


def test_logical_origin_is_canvas_center_with_y_up() -> None:
    assert FRAME.to_canvas(0, 0) == (2000.0, 1500.0)
    assert FRAME.to_canvas(100, 50) == (2100.0, 1450.0)
    assert FRAME.from_canvas(2100.0, 1450.0) == (100, 50)


def test_screen_is_pan_plus_canvas_times_zoom() -> None:
    t = ViewTransform(FRAME, zoom=2.0, pan_x=10.0, pan_y=20.0)
    assert t.logical_to_screen(100, 50) == (4210.0, 2920.0)
    assert t.screen_to_logical(4210.0, 2920.0) == pytest.approx((100.0, 50.0))


@pytest.mark.parametrize("target", [0.35, 1.7, 4.2])
def test_zoom_keeps_pivot_stationary(target: float) -> None:
    t = ViewTransform(FRAME, zoom=1.3, pan_x=-250.0, pan_y=80.0)
    pivot = (412.0, 233.0)
    under = t.screen_to_canvas(*pivot)

    assert t.set_zoom(target, pivot) is True
    assert t.canvas_to_screen(*under) == pytest.approx(pivot)


def test_zoom_is_clamped() -> None:
    t = ViewTransform(FRAME)
    t.set_zoom(10.0)
    assert t.zoom == 5.0
    assert t.set_zoom(6.0) is False
    t.set_zoom(0.01)
    assert t.zoom == 0.1
    for _ in range(20):
        t.zoom_by(-0.1, (100.0, 100.0))
    assert t.zoom == 0.1


def test_zoom_step_is_additive() -> None:
    t = ViewTransform(FRAME)
    t.zoom_by(0.1)
    assert t.zoom == pytest.approx(1.1)
    t.zoom_by(-0.2)
    assert t.zoom == pytest.approx(0.9)


def test_pan_and_reset() -> None:
    t = ViewTransform(FRAME)
    t.pan_by(15, -5)
    t.set_zoom(2.0, (100, 100))
    t.reset()
    assert t.snapshot() == (1.0, 0.0, 0.0)
