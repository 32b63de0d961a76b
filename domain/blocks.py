# -*- coding: utf-8 -*-
"""domain/blocks.py

Block, Terminal and Connection records of a power layout (independent of UI).

Every placeable entity is a :class:`Block`. Terminals are blocks too: they
share the id space with their owners, which keeps connection endpoints,
tree-view ids and deletion cascades uniform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

ROOT_ID = -1

MAX_NAME_LENGTH = 50


class BlockType(str, Enum):
    LOCATION = "Location"
    SUPPLY = "Supply"
    ALTERNATOR = "Alternator"
    CONDUCTOR = "Conductor"
    BUSBAR = "Busbar"
    TRANSFORMER_UPS = "TransformerUPS"
    LOAD = "Load"
    EXTERNAL_BUSBAR = "ExternalBusbar"
    ROW = "Row"
    TERMINAL = "Terminal"

    @property
    def label(self) -> str:
        return _LABELS.get(self, self.value)


_LABELS = {
    BlockType.TRANSFORMER_UPS: "Transformer/UPS",
    BlockType.EXTERNAL_BUSBAR: "External Busbar",
}


class ViewKind(str, Enum):
    LAYOUT = "Layout"
    LOCATION = "Location"


class ProtectionKind(str, Enum):
    CIRCUIT_BREAKER = "CircuitBreaker"
    PIN = "Pin"


def _to_int_pair(v) -> Optional[Tuple[int, int]]:
    if v is None:
        return None
    if isinstance(v, dict):
        x, y = v.get("x"), v.get("y")
    else:
        x, y = v[0], v[1]
    if x is None or y is None:
        return None
    return int(x), int(y)


@dataclass
class Block:
    id: int
    parent_id: int
    type: BlockType
    name: str = ""
    render_position: Optional[Tuple[int, int]] = None
    meta: Dict[str, Any] = field(default_factory=dict)  # side, protection, rating, equipment_id, ...

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_ID

    @property
    def is_terminal(self) -> bool:
        return self.type == BlockType.TERMINAL

    @property
    def side(self) -> int:
        """Terminal side index (0 for blocks that are not terminals)."""
        return int(self.meta.get("side", 0) or 0)

    def to_dict(self) -> Dict:
        d: Dict[str, Any] = {
            "id": int(self.id),
            "parent_id": int(self.parent_id),
            "type": self.type.value,
            "name": self.name,
            "meta": dict(self.meta or {}),
        }
        if self.render_position is not None:
            d["pos"] = {"x": int(self.render_position[0]), "y": int(self.render_position[1])}
        return d

    @staticmethod
    def from_dict(d: Dict) -> "Block":
        return Block(
            id=int(d["id"]),
            parent_id=int(d.get("parent_id", ROOT_ID)),
            type=BlockType(str(d.get("type"))),
            name=str(d.get("name", "") or ""),
            render_position=_to_int_pair(d.get("pos")),
            meta=dict(d.get("meta", {}) or {}),
        )


@dataclass
class Connection:
    """Unordered link between two terminals plus optional route bend points."""

    left_id: int
    right_id: int
    render_points: List[Tuple[int, int]] = field(default_factory=list)

    def touches(self, block_id: int) -> bool:
        return block_id in (self.left_id, self.right_id)

    def joins(self, a: int, b: int) -> bool:
        return {self.left_id, self.right_id} == {a, b}

    def add_render_point(self, x: int, y: int) -> None:
        self.render_points.append((int(x), int(y)))

    def remove_render_point(self, x: int, y: int) -> None:
        self.render_points = [p for p in self.render_points if p != (int(x), int(y))]

    def to_list(self) -> List[int]:
        """Flat ``[left, right, x1, y1, x2, y2, ...]`` form used in project files."""
        out = [int(self.left_id), int(self.right_id)]
        for x, y in self.render_points:
            out.extend((int(x), int(y)))
        return out

    @staticmethod
    def from_list(values) -> "Connection":
        vals = [int(v) for v in values]
        if len(vals) < 2 or len(vals) % 2 != 0:
            raise ValueError("Connection record must hold integer pairs.")
        pts = [(vals[i], vals[i + 1]) for i in range(2, len(vals), 2)]
        return Connection(vals[0], vals[1], pts)
