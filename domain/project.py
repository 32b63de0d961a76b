# -*- coding: utf-8 -*-
"""domain/project.py

Project aggregate: the block forest, the connection set and project metadata.

Rules enforced here (no Qt, no I/O):
- ids are unique integers shared by every block, terminals included;
- connections join two distinct, existing terminals and are unique per pair;
- removing a block removes its whole subtree and every connection touching it.

Cycles are not checked at this layer; see ``services.validation_service``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional, Tuple

from domain.blocks import (
    MAX_NAME_LENGTH,
    ROOT_ID,
    Block,
    BlockType,
    Connection,
    ProtectionKind,
)
from domain.errors import InvalidConnection, InvalidValue, NotFound

log = logging.getLogger(__name__)

LOCATION_TERMINALS = 8

# Per-type defaults stored in Block.meta when a block is created.
_DEFAULT_META: Dict[BlockType, Dict] = {
    BlockType.SUPPLY: {"voltage": 230, "impedance": 1.6},
    BlockType.CONDUCTOR: {"length": 0},
    BlockType.ROW: {"protection": ProtectionKind.PIN.value, "rating": 0},
}

# Types whose default name counts siblings under the same parent
# (the others count across the whole project).
_NAMED_PER_PARENT = {BlockType.BUSBAR, BlockType.TRANSFORMER_UPS, BlockType.LOAD}


@dataclass
class ProjectInfo:
    name: str = "New Project"
    major_version: int = 0
    minor_version: int = 0
    designer: str = ""
    design_date: int = 0
    checker: str = ""
    check_date: int = 0

    def update(self, **changes) -> None:
        """Validate and apply metadata changes (all or nothing)."""
        known = {f.name for f in fields(self)}
        for key, value in changes.items():
            if key not in known:
                raise InvalidValue(f"Unknown project field '{key}'.")
            _validate_info_field(key, value)
        for key, value in changes.items():
            setattr(self, key, value)

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def from_dict(d: Dict) -> "ProjectInfo":
        info = ProjectInfo()
        info.update(**{k: v for k, v in (d or {}).items() if k in {f.name for f in fields(info)}})
        return info


def _validate_info_field(key: str, value) -> None:
    if key == "name":
        if not str(value or "").strip():
            raise InvalidValue("Project name cannot be empty.")
        if len(str(value)) > 100:
            raise InvalidValue("Project name cannot exceed 100 characters.")
    elif key in ("designer", "checker"):
        if len(str(value or "")) > 32:
            raise InvalidValue(f"{key.capitalize()} name cannot exceed 32 characters.")
    else:
        if not isinstance(value, int) or value < 0:
            raise InvalidValue(f"{key} must be a non-negative integer.")


def validate_name(name: str) -> str:
    txt = str(name or "").strip()
    if not txt:
        raise InvalidValue("Name cannot be empty.")
    if len(txt) > MAX_NAME_LENGTH:
        raise InvalidValue(f"Name cannot exceed {MAX_NAME_LENGTH} characters.")
    return txt


class Project:
    """In-memory, authoritative power layout."""

    def __init__(self, info: Optional[ProjectInfo] = None) -> None:
        self.info = info or ProjectInfo()
        self._blocks: Dict[int, Block] = {}
        self._connections: List[Connection] = []
        self._next_id = 0

    # ---------------- queries ----------------
    def all_blocks(self) -> List[Block]:
        return list(self._blocks.values())

    def contains(self, block_id: int) -> bool:
        return block_id in self._blocks

    def get_block(self, block_id: int) -> Block:
        try:
            return self._blocks[block_id]
        except KeyError:
            raise NotFound(f"Block with the ID '{block_id}' not found.") from None

    def get_children(self, parent_id: int) -> List[Block]:
        return [b for b in self._blocks.values() if b.parent_id == parent_id]

    def descendants(self, block_id: int) -> List[Block]:
        out: List[Block] = []
        stack = [block_id]
        while stack:
            for child in self.get_children(stack.pop()):
                out.append(child)
                stack.append(child.id)
        return out

    def blocks_of_type(self, block_type: BlockType) -> List[Block]:
        return [b for b in self._blocks.values() if b.type == block_type]

    def terminals_of(self, block_id: int) -> List[Block]:
        """Terminals owned by ``block_id``, ordered by side."""
        terms = [b for b in self.get_children(block_id) if b.is_terminal]
        return sorted(terms, key=lambda t: t.side)

    def rows_of(self, busbar_id: int) -> List[Block]:
        return [b for b in self.get_children(busbar_id) if b.type == BlockType.ROW]

    def row_index(self, row_id: int) -> int:
        row = self.get_block(row_id)
        for idx, r in enumerate(self.rows_of(row.parent_id)):
            if r.id == row_id:
                return idx
        raise NotFound(f"Row '{row_id}' not found in its busbar.")

    def owning_location(self, block_id: int) -> Optional[Block]:
        """Closest Location at or above ``block_id`` (None for Layout-level blocks)."""
        current: Optional[Block] = self.get_block(block_id)
        while current is not None:
            if current.type == BlockType.LOCATION:
                return current
            if current.is_root:
                return None
            current = self._blocks.get(current.parent_id)
        return None

    # ---------------- connections ----------------
    def all_connections(self) -> List[Connection]:
        return list(self._connections)

    def get_connections(self, terminal_id: int) -> List[Connection]:
        return [c for c in self._connections if c.touches(terminal_id)]

    def get_connection(self, a: int, b: int) -> Connection:
        for c in self._connections:
            if c.joins(a, b):
                return c
        raise NotFound(f"Connection between '{a}' and '{b}' not found.")

    def add_connection(self, a: int, b: int) -> Connection:
        if a == b:
            raise InvalidConnection("Cannot connect a terminal to itself.")
        for tid in (a, b):
            block = self._blocks.get(tid)
            if block is None:
                raise InvalidConnection(f"Terminal '{tid}' does not exist.")
            if not block.is_terminal:
                raise InvalidConnection(f"Block '{tid}' ({block.type.value}) is not a terminal.")
        if any(c.joins(a, b) for c in self._connections):
            raise InvalidConnection("Connection already exists.")
        conn = Connection(a, b)
        self._connections.append(conn)
        log.debug("Connection added %s <-> %s", a, b)
        return conn

    def remove_connection(self, a: int, b: int) -> Connection:
        conn = self.get_connection(a, b)
        self._connections.remove(conn)
        log.debug("Connection removed %s <-> %s", a, b)
        return conn

    # ---------------- mutation ----------------
    def remove_block(self, block_id: int) -> List[int]:
        """Remove a block with its subtree; returns the removed ids."""
        self.get_block(block_id)
        removed = [block_id] + [b.id for b in self.descendants(block_id)]
        gone = set(removed)
        self._connections = [
            c for c in self._connections if c.left_id not in gone and c.right_id not in gone
        ]
        for bid in removed:
            del self._blocks[bid]
        log.debug("Removed block %s (%d blocks in subtree)", block_id, len(removed))
        return removed

    def rename(self, block_id: int, name: str) -> None:
        block = self.get_block(block_id)
        if block.is_terminal:
            raise InvalidValue("Terminals cannot be renamed.")
        block.name = validate_name(name)

    def set_render_position(self, block_id: int, x: int, y: int) -> None:
        self.get_block(block_id).render_position = (int(x), int(y))

    def set_row_protection(self, row_id: int, kind: ProtectionKind, rating: Optional[int] = None) -> None:
        row = self._require(row_id, BlockType.ROW)
        kind = ProtectionKind(kind)
        if kind == ProtectionKind.PIN:
            if rating:
                raise InvalidValue("'Pin' protection does not have a rating.")
            row.meta.update(protection=kind.value, rating=0)
            return
        if rating is not None and int(rating) < 0:
            raise InvalidValue("Rating must be a non-negative integer.")
        row.meta["protection"] = kind.value
        if rating is not None:
            row.meta["rating"] = int(rating)

    # ---------------- factories ----------------
    def add_location(self, name: Optional[str] = None) -> Block:
        location = self._new_block(BlockType.LOCATION, ROOT_ID, name)
        outer = [self._new_terminal(location.id, side) for side in range(LOCATION_TERMINALS)]
        ext = self._new_block(BlockType.EXTERNAL_BUSBAR, location.id, "External Busbar")
        for side in range(LOCATION_TERMINALS):
            inner = self._new_terminal(ext.id, side)
            self._connections.append(Connection(outer[side].id, inner.id))
        return location

    def add_supply(self, name: Optional[str] = None) -> Block:
        return self._with_terminals(self._new_block(BlockType.SUPPLY, ROOT_ID, name), 1)

    def add_alternator(self, name: Optional[str] = None) -> Block:
        return self._with_terminals(self._new_block(BlockType.ALTERNATOR, ROOT_ID, name), 1)

    def add_conductor(self, name: Optional[str] = None) -> Block:
        return self._with_terminals(self._new_block(BlockType.CONDUCTOR, ROOT_ID, name), 2)

    def add_busbar(self, location_id: int, name: Optional[str] = None) -> Block:
        self._require(location_id, BlockType.LOCATION)
        return self._new_block(BlockType.BUSBAR, location_id, name)

    def add_row(self, busbar_id: int, protection: ProtectionKind = ProtectionKind.PIN) -> Block:
        self._require(busbar_id, BlockType.BUSBAR)
        row = self._new_block(BlockType.ROW, busbar_id, None)
        row.meta["protection"] = ProtectionKind(protection).value
        return self._with_terminals(row, 2)

    def add_transformer_ups(self, location_id: int, name: Optional[str] = None) -> Block:
        self._require(location_id, BlockType.LOCATION)
        return self._with_terminals(self._new_block(BlockType.TRANSFORMER_UPS, location_id, name), 2)

    def add_load(self, location_id: int, name: Optional[str] = None) -> Block:
        self._require(location_id, BlockType.LOCATION)
        return self._with_terminals(self._new_block(BlockType.LOAD, location_id, name), 1)

    def _require(self, block_id: int, block_type: BlockType) -> Block:
        block = self.get_block(block_id)
        if block.type != block_type:
            raise InvalidValue(f"Block '{block_id}' must be a {block_type.value}, not {block.type.value}.")
        return block

    def _default_name(self, block_type: BlockType, parent_id: int) -> str:
        if block_type == BlockType.ROW:
            return f"Row {len(self.rows_of(parent_id)) + 1}"
        pool: Iterable[Block] = (
            self.get_children(parent_id) if block_type in _NAMED_PER_PARENT else self._blocks.values()
        )
        n = sum(1 for b in pool if b.type == block_type)
        return f"{block_type.label} {n + 1}"

    def _new_block(self, block_type: BlockType, parent_id: int, name: Optional[str]) -> Block:
        if name is not None:
            name = validate_name(name)
        else:
            name = self._default_name(block_type, parent_id)
        block = Block(
            id=self._allocate_id(),
            parent_id=parent_id,
            type=block_type,
            name=name,
            meta=dict(_DEFAULT_META.get(block_type, {})),
        )
        self._blocks[block.id] = block
        log.debug("Added %s '%s' id=%s parent=%s", block_type.value, name, block.id, parent_id)
        return block

    def _new_terminal(self, owner_id: int, side: int) -> Block:
        term = Block(id=self._allocate_id(), parent_id=owner_id, type=BlockType.TERMINAL, meta={"side": side})
        self._blocks[term.id] = term
        return term

    def _with_terminals(self, block: Block, count: int) -> Block:
        for side in range(count):
            self._new_terminal(block.id, side)
        return block

    def _allocate_id(self) -> int:
        bid = self._next_id
        self._next_id += 1
        return bid

    # ---------------- serialization ----------------
    def to_dict(self) -> Dict:
        return {
            "info": self.info.to_dict(),
            "blocks": [b.to_dict() for b in self._blocks.values()],
            "connections": [c.to_list() for c in self._connections],
        }

    @staticmethod
    def from_dict(d: Dict) -> "Project":
        """Rebuild a project, checking ids, parents and connection endpoints."""
        proj = Project(ProjectInfo.from_dict(d.get("info", {}) or {}))
        for raw in d.get("blocks", []) or []:
            block = Block.from_dict(raw)
            if block.id in proj._blocks:
                raise InvalidValue(f"Duplicate block id '{block.id}'.")
            proj._blocks[block.id] = block
        for block in proj._blocks.values():
            if not block.is_root and block.parent_id not in proj._blocks:
                raise InvalidValue(f"Block '{block.id}' references missing parent '{block.parent_id}'.")
        proj._check_parent_chains()
        proj._next_id = max(proj._blocks, default=-1) + 1
        for raw in d.get("connections", []) or []:
            conn = Connection.from_list(raw)
            proj.add_connection(conn.left_id, conn.right_id).render_points = list(conn.render_points)
        return proj

    def _check_parent_chains(self) -> None:
        """Every parent chain must end at the root; a loop would hang tree walks."""
        reaches_root = set()
        for block in self._blocks.values():
            chain = []
            current = block
            while not current.is_root and current.id not in reaches_root:
                if current.id in chain:
                    raise InvalidValue(f"Block '{block.id}' is part of a parent cycle.")
                chain.append(current.id)
                current = self._blocks[current.parent_id]
            reaches_root.update(chain)

    def counts(self) -> Tuple[int, int]:
        """(blocks, connections) counts, used for log lines."""
        return len(self._blocks), len(self._connections)
