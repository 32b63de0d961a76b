# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.blocks import BlockType
from domain.interaction import Phase, InteractionMachine
from domain.project import Project
from domain.views import LAYOUT_KEY, ViewRegistry


def _location_with_busbar():
    p = Project()
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    rows = [p.add_row(bus.id), p.add_row(bus.id)]
    views = ViewRegistry(p)
    views.open_location(loc.id)
    return p, views, loc, bus, rows


def _row_anchor_screens(views, key, terminal_ids):
    out = {}
    for anchor, sx, sy in views.anchor_screen_positions(key):
        if anchor.terminal_id in terminal_ids:
            out[anchor.terminal_id] = (sx, sy)
    return out


def test_first_press_selects_second_press_drags() -> None:
    p, views, loc, bus, _rows = _location_with_busbar()
    m = InteractionMachine(p, views)

    st = m.press_block(loc.id, bus.id, (1000.0, 700.0))
    assert st.phase == Phase.SELECTED and st.kind == BlockType.BUSBAR
    st = m.press_block(loc.id, bus.id, (1000.0, 700.0))
    assert st.phase == Phase.DRAGGING
    assert st.grab == (0.0, -50.0)
    assert m.is_dragging


@pytest.mark.parametrize("zoom", [1.0, 2.0])
def test_drag_moves_by_logical_delta_and_rows_follow(zoom: float) -> None:
    p, views, loc, bus, rows = _location_with_busbar()
    views.get(loc.id).transform.set_zoom(zoom)
    commits = []
    m = InteractionMachine(p, views, on_commit=lambda bid, pos: commits.append((bid, pos)))

    terms = [t.id for r in rows for t in p.terminals_of(r.id)]
    before = _row_anchor_screens(views, loc.id, terms)
    start = views.get(loc.id).transform.logical_to_screen(0, 0)
    m.press_block(loc.id, bus.id, start)
    m.press_block(loc.id, bus.id, start)

    update = m.move((start[0] + 50 * zoom, start[1]))
    assert update.block_id == bus.id
    assert update.center == (start[0] + 50 * zoom, start[1])
    live = {tid: (sx, sy) for tid, sx, sy in update.anchors}
    for tid in terms:
        assert live[tid][0] == pytest.approx(before[tid][0] + 50 * zoom)
        assert live[tid][1] == pytest.approx(before[tid][1])

    pos = m.release((start[0] + 50 * zoom, start[1]))
    assert pos == (50, 0)
    assert p.get_block(bus.id).render_position == (50, 0)
    assert commits == [(bus.id, (50, 0))]
    assert m.current.phase == Phase.SELECTED

    after = _row_anchor_screens(views, loc.id, terms)
    for tid in terms:
        assert after[tid] == pytest.approx(live[tid])


def test_drag_snaps_to_grid() -> None:
    p = Project()
    supply = p.add_supply()
    views = ViewRegistry(p)
    m = InteractionMachine(p, views, snap_grid=20)
    center = views.layout.transform.logical_to_screen(0, 0)
    m.press_block(LAYOUT_KEY, supply.id, center)
    m.press_block(LAYOUT_KEY, supply.id, center)
    assert m.release((center[0] + 53, center[1] - 7)) == (60, 0)


def test_rows_select_but_never_drag() -> None:
    p, views, loc, bus, rows = _location_with_busbar()
    m = InteractionMachine(p, views)
    m.press_block(loc.id, rows[0].id, (1000.0, 720.0))
    st = m.press_block(loc.id, rows[0].id, (1000.0, 720.0))
    assert st.phase == Phase.SELECTED
    assert st.block_id == rows[0].id
    assert m.move((1100.0, 720.0)) is None
    assert m.release((1100.0, 720.0)) is None
    assert p.get_block(bus.id).render_position is None


def test_cancel_drops_the_drag_without_committing() -> None:
    p, views, loc, bus, _rows = _location_with_busbar()
    m = InteractionMachine(p, views)
    m.press_block(loc.id, bus.id, (1000.0, 750.0))
    m.press_block(loc.id, bus.id, (1000.0, 750.0))
    m.move((1200.0, 750.0))
    st = m.cancel()
    assert st.phase == Phase.SELECTED
    assert m.release((1200.0, 750.0)) is None
    assert p.get_block(bus.id).render_position is None


def test_background_press_pans_the_view() -> None:
    p, views, loc, _bus, _rows = _location_with_busbar()
    m = InteractionMachine(p, views)
    m.press_background(loc.id, (100.0, 100.0))
    assert m.current.phase == Phase.PANNING
    m.move((130.0, 90.0))
    m.move((140.0, 95.0))
    t = views.get(loc.id).transform
    assert (t.pan_x, t.pan_y) == (40.0, -5.0)
    m.release()
    assert m.current.phase == Phase.IDLE


def test_background_press_is_ignored_while_dragging() -> None:
    p, views, loc, bus, _rows = _location_with_busbar()
    m = InteractionMachine(p, views)
    m.press_block(loc.id, bus.id, (1000.0, 750.0))
    m.press_block(loc.id, bus.id, (1000.0, 750.0))
    assert m.press_background(loc.id, (0.0, 0.0)).phase == Phase.DRAGGING
    assert m.deselect_all().phase == Phase.DRAGGING


def test_select_replaces_selection_and_forget_clears_it() -> None:
    p, views, loc, bus, _rows = _location_with_busbar()
    changes = []
    m = InteractionMachine(p, views, on_change=lambda old, new: changes.append(new.block_id))
    supply = p.add_supply()
    m.select(bus.id)
    assert m.current.view_key == loc.id
    m.select(supply.id)
    assert m.current.is_selected(supply.id)
    assert not m.current.is_selected(bus.id)
    m.forget([bus.id])
    assert m.current.is_selected(supply.id)
    m.forget([supply.id])
    assert m.current.phase == Phase.IDLE
    assert changes == [bus.id, supply.id, None]
