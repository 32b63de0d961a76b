# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.coordinates import CanvasFrame
from domain.routing import build_route, distance_to_segment, hits_route, route_for, snap_to_grid


def test_aligned_points_get_a_straight_segment() -> None:
    assert build_route((0.0, 0.0), (100.0, 0.0)) == [(0.0, 0.0), (100.0, 0.0)]
    assert build_route((0.0, 0.0), (100.0, 0.5)) == [(0.0, 0.0), (100.0, 0.5)]


def test_longer_axis_goes_first() -> None:
    assert build_route((0.0, 0.0), (100.0, 40.0)) == [(0.0, 0.0), (100.0, 0.0), (100.0, 40.0)]
    assert build_route((0.0, 0.0), (30.0, 100.0)) == [(0.0, 0.0), (0.0, 100.0), (30.0, 100.0)]


def test_route_passes_through_bends() -> None:
    route = build_route((0.0, 0.0), (100.0, 100.0), [(50.0, 0.0)])
    assert route == [(0.0, 0.0), (50.0, 0.0), (50.0, 100.0), (100.0, 100.0)]
    for a, b in zip(route, route[1:]):
        assert a[0] == b[0] or a[1] == b[1]


def test_snap_to_grid() -> None:
    assert snap_to_grid((29.0, 31.0)) == (20.0, 40.0)
    assert snap_to_grid((-9.0, 11.0)) == (0.0, 20.0)
    assert snap_to_grid((14.0, 16.0), grid=10.0) == (10.0, 20.0)


def test_route_for_maps_logical_bends_to_canvas() -> None:
    frame = CanvasFrame(200.0, 100.0)
    route = route_for(frame, (0.0, 50.0), (200.0, 80.0), [(0, 0)])
    assert route == [(0.0, 50.0), (100.0, 50.0), (200.0, 50.0), (200.0, 80.0)]


def test_distance_to_segment() -> None:
    assert distance_to_segment((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(3.0)
    assert distance_to_segment((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)) == pytest.approx(5.0)
    assert distance_to_segment((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)) == pytest.approx(5.0)


def test_hits_route() -> None:
    points = [(0.0, 0.0), (100.0, 0.0), (100.0, 50.0)]
    assert hits_route(points, (50.0, 4.0), 5.0)
    assert hits_route(points, (103.0, 25.0), 5.0)
    assert not hits_route(points, (50.0, 25.0), 5.0)
    assert not hits_route([(0.0, 0.0)], (0.0, 0.0), 5.0)
