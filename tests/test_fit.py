# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.capabilities import capability_for
from domain.coordinates import CanvasFrame, ViewTransform
from domain.errors import ViewNotReady
from domain.fit import compute_fit, content_bounds, fit_transform, pad_bounds
from domain.views import ManualDeferrer, ViewRegistry
from domain.project import Project

VIEWPORT = (800.0, 600.0)


def _location_scene():
    """Busbar (2 rows) at (0, 400), a load at (400, 0), the external busbar at the origin."""
    p = Project()
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    p.add_row(bus.id)
    p.add_row(bus.id)
    load = p.add_load(loc.id)
    p.set_render_position(bus.id, 0, 400)
    p.set_render_position(load.id, 400, 0)
    views = ViewRegistry(p, deferrer=ManualDeferrer())
    view, _ = views.open_location(loc.id)
    view.set_viewport(*VIEWPORT)
    return p, views, loc, bus, load


def test_empty_view_centers_the_frame() -> None:
    p = Project()
    views = ViewRegistry(p)
    views.resize(views.layout.key, *VIEWPORT)
    result = views.fit(views.layout.key)
    assert (result.zoom, result.pan_x, result.pan_y) == (1.0, -1600.0, -1200.0)


def test_fit_without_viewport_is_not_ready() -> None:
    frame = CanvasFrame(100.0, 100.0)
    with pytest.raises(ViewNotReady):
        compute_fit(frame, None, None)
    with pytest.raises(ViewNotReady):
        compute_fit(frame, None, (0.0, 300.0))


def test_padding_is_ten_percent_per_side() -> None:
    assert pad_bounds((0.0, 0.0, 100.0, 50.0)) == (-10.0, -5.0, 110.0, 55.0)


def test_fit_frames_every_block() -> None:
    p, views, loc, bus, load = _location_scene()
    caps = views.placeables(loc.id)
    assert content_bounds(caps, views.get(loc.id).frame) == (825.0, 262.5, 1460.0, 950.0)

    result = views.fit(loc.id)
    assert result.zoom == pytest.approx(600.0 / 825.0)
    assert result.pan_x == pytest.approx(400.0 - 1142.5 * result.zoom)
    assert result.pan_y == pytest.approx(300.0 - 606.25 * result.zoom)

    t = views.get(loc.id).transform
    for block in (bus, load):
        left, top, right, bottom = capability_for(p, block).bounding_box(t.frame)
        sl, st = t.canvas_to_screen(left, top)
        sr, sb = t.canvas_to_screen(right, bottom)
        assert 0.0 <= sl and sr <= VIEWPORT[0]
        assert 0.0 <= st and sb <= VIEWPORT[1]


def test_fit_is_idempotent() -> None:
    _p, views, loc, _bus, _load = _location_scene()
    first = views.fit(loc.id)
    second = views.fit(loc.id)
    assert first == second


def test_third_row_changes_the_fit() -> None:
    p, views, loc, bus, _load = _location_scene()
    before = views.fit(loc.id)
    p.add_row(bus.id)
    after = views.fit(loc.id)
    assert after.zoom == pytest.approx(600.0 / 855.0)
    assert after.zoom < before.zoom


def test_fit_respects_zoom_limits() -> None:
    p = Project()
    p.add_supply()
    views = ViewRegistry(p)
    t = ViewTransform(views.layout.frame)
    result = fit_transform(t, views.placeables(views.layout.key), (5000.0, 5000.0))
    # 150 px supply padded to 180 px: 5000 / 180 exceeds the maximum
    assert result.zoom == 5.0
    assert t.zoom == 5.0
