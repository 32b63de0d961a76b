# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.blocks import BlockType, ViewKind
from domain.capabilities import (
    BusbarCapability,
    RowCapability,
    anchor_for_terminal,
    capability_for,
    is_placeable,
    rendering_block,
)
from domain.coordinates import CanvasFrame
from domain.errors import InvalidValue
from domain.project import Project

LOCATION_FRAME = CanvasFrame(2000.0, 1500.0)


def _busbar_with_rows(n: int):
    p = Project()
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    rows = [p.add_row(bus.id) for _ in range(n)]
    return p, bus, rows


def test_unset_position_is_origin() -> None:
    p = Project()
    cap = capability_for(p, p.add_supply())
    assert cap.center() == (0.0, 0.0)
    assert cap.preferred_view() == ViewKind.LAYOUT
    (anchor,) = cap.connection_anchors()
    assert (anchor.rel_x, anchor.rel_y) == (0.0, 75.0)


def test_anchor_offset_gives_top_left_corner() -> None:
    p = Project()
    cap = capability_for(p, p.add_conductor())
    left, right = cap.connection_anchors(offset=6.0)
    assert (left.rel_x, left.rel_y) == (-156.0, -6.0)
    assert (right.rel_x, right.rel_y) == (144.0, -6.0)


def test_location_has_eight_ring_anchors() -> None:
    p = Project()
    cap = capability_for(p, p.add_location())
    anchors = cap.connection_anchors()
    assert len(anchors) == 8
    assert anchors[0].rel_x == pytest.approx(200 / 3 - 100)
    assert anchors[0].rel_y == -100.0
    assert anchors[2].rel_x == 100.0


def test_busbar_footprint_grows_with_rows() -> None:
    p, bus, _rows = _busbar_with_rows(2)
    cap = capability_for(p, bus)
    assert isinstance(cap, BusbarCapability)
    assert cap.render_footprint() == (350.0, 175.0)
    p.add_row(bus.id)
    assert cap.render_footprint() == (350.0, 225.0)


def test_row_position_derives_from_busbar() -> None:
    p, bus, rows = _busbar_with_rows(2)
    p.set_render_position(bus.id, 100, 200)
    cap = capability_for(p, bus)
    assert cap.row_offset(0) == -30.0
    assert cap.row_offset(1) == 20.0

    r0 = capability_for(p, rows[0])
    assert isinstance(r0, RowCapability)
    assert r0.center() == (100.0, 230.0)
    assert capability_for(p, rows[1]).center() == (100.0, 180.0)
    assert r0.draggable is False
    with pytest.raises(InvalidValue):
        r0.move_to(0, 0)


def test_busbar_renders_row_anchors() -> None:
    p, bus, rows = _busbar_with_rows(2)
    anchors = capability_for(p, bus).connection_anchors()
    assert len(anchors) == 4
    left = p.terminals_of(rows[0].id)[0]
    first = anchors[0]
    assert first.terminal_id == left.id
    assert (first.rel_x, first.rel_y) == (-175.0, -30.0)


def test_transformer_and_external_busbar_geometry() -> None:
    p = Project()
    loc = p.add_location()
    tr = capability_for(p, p.add_transformer_ups(loc.id))
    assert tr.render_footprint() == (170.0, 100.0)
    assert [(a.rel_x, a.rel_y) for a in tr.connection_anchors()] == [(-85.0, 0.0), (85.0, 0.0)]

    (ext,) = p.blocks_of_type(BlockType.EXTERNAL_BUSBAR)
    anchors = capability_for(p, ext).connection_anchors()
    assert len(anchors) == 8
    assert (anchors[0].rel_x, anchors[0].rel_y) == (70.0, -175.0)
    assert anchors[-1].rel_y == 175.0


def test_terminals_are_not_placeable() -> None:
    p = Project()
    (term,) = p.terminals_of(p.add_supply().id)
    assert not is_placeable(term)
    with pytest.raises(InvalidValue):
        capability_for(p, term.id)


def test_rendering_block_and_anchor_lookup() -> None:
    p, bus, rows = _busbar_with_rows(1)
    right = p.terminals_of(rows[0].id)[1]
    assert rendering_block(p, right.id).id == bus.id

    owner, anchor = anchor_for_terminal(p, right.id)
    assert owner.block_id == bus.id
    assert (anchor.rel_x, anchor.rel_y) == (175.0, capability_for(p, bus).row_offset(0))


def test_bounding_box_and_contains() -> None:
    p = Project()
    cap = capability_for(p, p.add_load(p.add_location().id))
    assert cap.bounding_box(LOCATION_FRAME) == (940.0, 690.0, 1060.0, 810.0)
    assert cap.contains(LOCATION_FRAME, 1000.0, 750.0)
    assert not cap.contains(LOCATION_FRAME, 1061.0, 750.0)
