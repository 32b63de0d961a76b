# -*- coding: utf-8 -*-
"""ValidationService

Connection rules that the graph model deliberately does not enforce.

- No PyQt dependency.
- Validators return ``services.errors.Issue`` instances.
- Loops are reported as warnings: a closed path is legal to draw but is
  usually a wiring mistake in a radial single-line layout.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Set, Tuple

from domain.blocks import BlockType
from domain.project import Project
from services.errors import Issue, Level

log = logging.getLogger(__name__)

# Blocks whose two terminals are electrically the same path.
_PASS_THROUGH = {BlockType.ROW, BlockType.CONDUCTOR, BlockType.TRANSFORMER_UPS}


class _DisjointSet:
    def __init__(self) -> None:
        self._parent: Dict[int, int] = {}

    def find(self, x: int) -> int:
        self._parent.setdefault(x, x)
        while self._parent[x] != x:
            self._parent[x] = self._parent[self._parent[x]]
            x = self._parent[x]
        return x

    def union(self, a: int, b: int) -> bool:
        """Join two sets; False when they were already joined (a loop)."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        self._parent[ra] = rb
        return True


def _pass_through_pairs(project: Project) -> List[Tuple[int, int]]:
    pairs = []
    for block in project.all_blocks():
        if block.type in _PASS_THROUGH:
            terms = project.terminals_of(block.id)
            if len(terms) == 2:
                pairs.append((terms[0].id, terms[1].id))
    return pairs


def validate_connections(project: Project) -> List[Issue]:
    issues: List[Issue] = []
    seen: Set[frozenset] = set()
    dsu = _DisjointSet()
    for a, b in _pass_through_pairs(project):
        dsu.union(a, b)

    for conn in project.all_connections():
        pair = frozenset((conn.left_id, conn.right_id))
        missing = [t for t in (conn.left_id, conn.right_id) if not project.contains(t)]
        if missing:
            issues.append(Issue(Level.ERROR, "CONN_DANGLING", f"Connection references missing block {missing[0]}."))
            continue
        if any(not project.get_block(t).is_terminal for t in pair):
            issues.append(Issue(Level.ERROR, "CONN_NOT_TERMINAL", f"Connection {conn.left_id}-{conn.right_id} does not join two terminals."))
        if pair in seen:
            issues.append(Issue(Level.ERROR, "CONN_DUPLICATE", f"Duplicate connection {conn.left_id}-{conn.right_id}."))
            continue
        seen.add(pair)

        left_loc = project.owning_location(conn.left_id)
        right_loc = project.owning_location(conn.right_id)
        if left_loc is not None and right_loc is not None and left_loc.id != right_loc.id:
            issues.append(Issue(
                Level.WARNING,
                "CONN_CROSS_LOCATION",
                f"Connection {conn.left_id}-{conn.right_id} joins '{left_loc.name}' and '{right_loc.name}' directly.",
                hint="Route it through a conductor on the Layout view.",
            ))

        if not dsu.union(conn.left_id, conn.right_id):
            owner = project.get_block(project.get_block(conn.left_id).parent_id)
            issues.append(Issue(
                Level.WARNING,
                "CONN_LOOP",
                f"Connection {conn.left_id}-{conn.right_id} closes a loop.",
                block_id=owner.id,
            ))

    for load in project.blocks_of_type(BlockType.LOAD):
        if not any(project.get_connections(t.id) for t in project.terminals_of(load.id)):
            issues.append(Issue(Level.INFO, "LOAD_UNFED", f"Load '{load.name}' is not connected.", block_id=load.id))
    return issues


class ValidationService:
    def __init__(self, project: Project) -> None:
        self.project = project
        self.last_issues: List[Issue] = []

    def set_project(self, project: Project) -> None:
        self.project = project
        self.last_issues = []

    def validate(self) -> List[Issue]:
        self.last_issues = validate_connections(self.project)
        if self.last_issues:
            log.info("Validation: %d issue(s)", len(self.last_issues))
        return self.last_issues
