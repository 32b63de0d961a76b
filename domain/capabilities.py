# -*- coding: utf-8 -*-
"""domain/capabilities.py

Capability contract shared by every placeable block type.

Generic code (fit-to-content, hit-testing, anchor placement, dragging) talks
to :class:`BlockCapability` only. Each block type registers one adapter that
knows its view, footprint and terminal anchor geometry.

Anchor offsets are canvas-oriented (y grows downward) and relative to the
block center, which is how renderers place marker items.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from domain import constants as C
from domain.blocks import Block, BlockType, ViewKind
from domain.coordinates import CanvasFrame, Point
from domain.errors import InvalidValue
from domain.project import Project

Rect = Tuple[float, float, float, float]  # left, top, right, bottom


@dataclass(frozen=True)
class Anchor:
    terminal_id: int
    rel_x: float
    rel_y: float
    tag: Any = None


class BlockCapability:
    """Adapter base: uniform access to a block's rendering geometry."""

    view_kind: ViewKind = ViewKind.LAYOUT
    draggable: bool = True

    def __init__(self, project: Project, block: Block) -> None:
        self.project = project
        self.block = block

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.block.id})"

    @property
    def block_id(self) -> int:
        return self.block.id

    def preferred_view(self) -> ViewKind:
        return self.view_kind

    def render_footprint(self) -> Tuple[float, float]:
        raise NotImplementedError

    def anchor_points(self) -> List[Point]:
        """Relative anchor centers, one per terminal side in side order."""
        return []

    def connection_anchors(self, offset: float = 0.0) -> List[Anchor]:
        """Anchors for this block's terminals, shifted by ``offset`` on both axes.

        Pass the marker half-size as ``offset`` to get top-left corners.
        """
        out: List[Anchor] = []
        for term, (rx, ry) in zip(self.project.terminals_of(self.block.id), self.anchor_points()):
            out.append(Anchor(term.id, rx - offset, ry - offset, (self.block.id, term.side)))
        return out

    def center(self) -> Point:
        pos = self.block.render_position
        if pos is None:
            return 0.0, 0.0
        return float(pos[0]), float(pos[1])

    def move_to(self, x: float, y: float) -> None:
        self.project.set_render_position(self.block.id, int(round(x)), int(round(y)))

    def bounding_box(self, frame: CanvasFrame) -> Rect:
        cx, cy = frame.to_canvas(*self.center())
        w, h = self.render_footprint()
        return cx - w / 2.0, cy - h / 2.0, cx + w / 2.0, cy + h / 2.0

    def contains(self, frame: CanvasFrame, px: float, py: float) -> bool:
        left, top, right, bottom = self.bounding_box(frame)
        return left <= px <= right and top <= py <= bottom


_REGISTRY: Dict[BlockType, Type[BlockCapability]] = {}


def register(block_type: BlockType) -> Callable[[Type[BlockCapability]], Type[BlockCapability]]:
    def deco(cls: Type[BlockCapability]) -> Type[BlockCapability]:
        _REGISTRY[block_type] = cls
        return cls

    return deco


def _ring(w: float, h: float) -> List[Point]:
    """Eight border points clockwise from the top-left third."""
    hw, hh = w / 2.0, h / 2.0
    return [
        (w / 3 - hw, -hh),
        (2 * w / 3 - hw, -hh),
        (hw, h / 3 - hh),
        (hw, 2 * h / 3 - hh),
        (2 * w / 3 - hw, hh),
        (w / 3 - hw, hh),
        (-hw, 2 * h / 3 - hh),
        (-hw, h / 3 - hh),
    ]


@register(BlockType.LOCATION)
class LocationCapability(BlockCapability):
    def render_footprint(self) -> Tuple[float, float]:
        return C.LOCATION_SIZE, C.LOCATION_SIZE

    def anchor_points(self) -> List[Point]:
        return _ring(C.LOCATION_SIZE, C.LOCATION_SIZE)


@register(BlockType.SUPPLY)
class SupplyCapability(BlockCapability):
    def render_footprint(self) -> Tuple[float, float]:
        return C.SUPPLY_DIAMETER, C.SUPPLY_DIAMETER

    def anchor_points(self) -> List[Point]:
        return [(0.0, C.SUPPLY_DIAMETER / 2.0)]


@register(BlockType.ALTERNATOR)
class AlternatorCapability(BlockCapability):
    def render_footprint(self) -> Tuple[float, float]:
        return C.ALTERNATOR_SIZE, C.ALTERNATOR_SIZE

    def anchor_points(self) -> List[Point]:
        return [(0.0, C.ALTERNATOR_SIZE / 2.0)]


@register(BlockType.CONDUCTOR)
class ConductorCapability(BlockCapability):
    def render_footprint(self) -> Tuple[float, float]:
        return C.CONDUCTOR_WIDTH, C.CONDUCTOR_HEIGHT

    def anchor_points(self) -> List[Point]:
        half = C.CONDUCTOR_WIDTH / 2.0
        return [(-half, 0.0), (half, 0.0)]


@register(BlockType.BUSBAR)
class BusbarCapability(BlockCapability):
    """A busbar has no terminals of its own; it renders the anchors of its rows."""

    view_kind = ViewKind.LOCATION

    def row_count(self) -> int:
        return len(self.project.rows_of(self.block.id))

    def render_footprint(self) -> Tuple[float, float]:
        n = self.row_count()
        return C.BUSBAR_WIDTH, C.BUSBAR_NAME_HEIGHT + n * C.BUSBAR_ROW_HEIGHT + C.BUSBAR_PLUS_SIZE

    def row_offset(self, index: int) -> float:
        """Canvas y of row ``index`` center relative to the busbar center."""
        n = self.row_count()
        total = C.BUSBAR_NAME_HEIGHT + n * C.BUSBAR_ROW_HEIGHT + C.BUSBAR_PLUS_SIZE + C.BUSBAR_PLUS_GAP
        return -total / 2.0 + C.BUSBAR_NAME_HEIGHT + index * C.BUSBAR_ROW_HEIGHT + C.BUSBAR_ROW_HEIGHT / 2.0

    def connection_anchors(self, offset: float = 0.0) -> List[Anchor]:
        out: List[Anchor] = []
        for idx, row in enumerate(self.project.rows_of(self.block.id)):
            dy = self.row_offset(idx)
            for a in RowCapability(self.project, row).connection_anchors(offset):
                out.append(Anchor(a.terminal_id, a.rel_x, a.rel_y + dy, a.tag))
        return out


@register(BlockType.ROW)
class RowCapability(BlockCapability):
    """Rows carry no position of their own; it derives from the owning busbar."""

    view_kind = ViewKind.LOCATION
    draggable = False

    def busbar(self) -> BusbarCapability:
        return BusbarCapability(self.project, self.project.get_block(self.block.parent_id))

    def render_footprint(self) -> Tuple[float, float]:
        return C.BUSBAR_WIDTH, C.BUSBAR_ROW_HEIGHT

    def anchor_points(self) -> List[Point]:
        half = C.BUSBAR_WIDTH / 2.0
        return [(-half, 0.0), (half, 0.0)]

    def center(self) -> Point:
        bus = self.busbar()
        bx, by = bus.center()
        dy = bus.row_offset(self.project.row_index(self.block.id))
        return bx, by - dy

    def move_to(self, x: float, y: float) -> None:
        raise InvalidValue("Rows move with their busbar.")


@register(BlockType.TRANSFORMER_UPS)
class TransformerUpsCapability(BlockCapability):
    view_kind = ViewKind.LOCATION

    def render_footprint(self) -> Tuple[float, float]:
        return 2 * C.TRANSFORMER_CIRCLE - C.TRANSFORMER_OVERLAP, C.TRANSFORMER_CIRCLE

    def anchor_points(self) -> List[Point]:
        half = self.render_footprint()[0] / 2.0
        return [(-half, 0.0), (half, 0.0)]


@register(BlockType.LOAD)
class LoadCapability(BlockCapability):
    view_kind = ViewKind.LOCATION

    def render_footprint(self) -> Tuple[float, float]:
        return C.LOAD_SIZE, C.LOAD_SIZE

    def anchor_points(self) -> List[Point]:
        return [(0.0, C.LOAD_SIZE / 2.0)]


@register(BlockType.EXTERNAL_BUSBAR)
class ExternalBusbarCapability(BlockCapability):
    view_kind = ViewKind.LOCATION

    def render_footprint(self) -> Tuple[float, float]:
        return C.EXTERNAL_BUSBAR_WIDTH, C.EXTERNAL_BUSBAR_ROWS * C.EXTERNAL_BUSBAR_ROW_HEIGHT

    def anchor_points(self) -> List[Point]:
        w, h = self.render_footprint()
        rh = C.EXTERNAL_BUSBAR_ROW_HEIGHT
        return [(w / 2.0, i * rh + rh / 2.0 - h / 2.0) for i in range(C.EXTERNAL_BUSBAR_ROWS)]


def is_placeable(block: Block) -> bool:
    return block.type in _REGISTRY


def capability_for(project: Project, block: Union[Block, int]) -> BlockCapability:
    if not isinstance(block, Block):
        block = project.get_block(block)
    cls = _REGISTRY.get(block.type)
    if cls is None:
        raise InvalidValue(f"{block.type.value} blocks are not placeable.")
    return cls(project, block)


def rendering_block(project: Project, block_id: int) -> Block:
    """Block whose item draws ``block_id`` (terminals -> owner, rows -> busbar)."""
    block = project.get_block(block_id)
    if block.is_terminal:
        block = project.get_block(block.parent_id)
    if block.type == BlockType.ROW:
        block = project.get_block(block.parent_id)
    return block


def anchor_for_terminal(project: Project, terminal_id: int, offset: float = 0.0) -> Optional[Tuple[BlockCapability, Anchor]]:
    """Capability that renders the terminal's anchor, with the anchor itself."""
    owner = capability_for(project, rendering_block(project, terminal_id))
    for anchor in owner.connection_anchors(offset):
        if anchor.terminal_id == terminal_id:
            return owner, anchor
    return None
