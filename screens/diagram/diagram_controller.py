# -*- coding: utf-8 -*-
"""Diagram controller (screens/diagram)

Qt-free orchestration of every diagram operation:

1) Structural edits on the project (add/delete/rename blocks, connections).
2) Refresh routing after each mutation: dirty flag, EventBus notifications,
   deferred fit of the affected view.
3) Turning engine errors into user-facing :class:`~services.errors.Issue` values.

The screen (``diagram_screen.py``) stays a thin Qt adapter over this class.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from app.base_controller import BaseController
from app.events import (
    BlocksChanged,
    ConnectionsChanged,
    EditModeChanged,
    EventBus,
    PendingPickChanged,
    PositionCommitted,
    ProjectInfoChanged,
    ProjectReplaced,
    SelectionChanged,
)
from domain.blocks import Block, BlockType, Connection, ProtectionKind
from domain.connection_protocol import ConnectionProtocol, EditMode, PickOutcome, PickResult
from domain.coordinates import Point
from domain.errors import DiagramError, InvalidValue, NotFound, ViewNotReady
from domain.fit import FitResult
from domain.interaction import Interaction, InteractionMachine
from domain.project import Project
from domain.routing import route_for, snap_to_grid
from domain.views import LAYOUT_KEY, ViewRegistry, ViewState
from services.errors import Issue, Level
from services.validation_service import ValidationService
from storage.project_io import ProjectFileError, load_project, save_project

log = logging.getLogger(__name__)


class DiagramController(BaseController):
    def __init__(
        self,
        project: Optional[Project] = None,
        *,
        bus: Optional[EventBus] = None,
        deferrer=None,
        snap_grid: float = 0.0,
        on_error: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        super().__init__(bus, on_error=on_error)
        self.project = project or Project()
        self.file_path = ""
        self.mode = EditMode.NORMAL
        self.views = ViewRegistry(self.project, deferrer=deferrer)
        self.interaction = InteractionMachine(
            self.project,
            self.views,
            snap_grid=snap_grid,
            on_change=self._on_interaction_changed,
            on_commit=self._on_position_committed,
        )
        self.connections = ConnectionProtocol(
            self.project,
            on_connected=self._on_connected,
            on_pending_changed=lambda pick: self.notify(PendingPickChanged(pick.terminal_id if pick else None)),
        )
        self.validation = ValidationService(self.project)

    # ---------------- project lifecycle ----------------
    def set_project(self, project: Project, file_path: str = "") -> None:
        self.project = project
        self.file_path = file_path
        self.set_mode(EditMode.NORMAL)
        self.views.set_project(project)
        self.interaction.reset(project)
        self.connections.reset(project)
        self.validation.set_project(project)
        self.dirty.clear_dirty()
        self.notify(ProjectReplaced(file_path))

    def new_project(self) -> None:
        self.set_project(Project())

    def load(self, file_path: str) -> bool:
        try:
            project = load_project(file_path)
        except ProjectFileError as e:
            self.report([Issue.from_exception("LOAD_FAILED", e)], title="Open project")
            return False
        self.set_project(project, file_path)
        return True

    def save(self, file_path: str = "") -> bool:
        try:
            self.file_path = save_project(self.project, file_path or self.file_path)
        except (OSError, ValueError) as e:
            self.report([Issue.from_exception("SAVE_FAILED", e)], title="Save project")
            return False
        self.dirty.clear_dirty()
        return True

    def update_info(self, **changes) -> bool:
        try:
            self.project.info.update(**changes)
        except InvalidValue as e:
            self.report([Issue.from_exception("INFO_INVALID", e)], title="Project properties")
            return False
        self.mark_dirty("info", None)
        self.notify(ProjectInfoChanged(tuple(changes)))
        return True

    # ---------------- structure ----------------
    def _added(self, block: Block) -> Block:
        self.mark_dirty(f"add {block.type.value}", [block.id])
        self.notify(BlocksChanged("added", (block.id,)))
        self.views.request_fit(self.views.view_key_for_block(block.id))
        return block

    def _guarded_add(self, fn, *args) -> Optional[Block]:
        try:
            return self._added(fn(*args))
        except DiagramError as e:
            self.report([Issue.from_exception("ADD_FAILED", e)], title="Add block")
            return None

    def add_location(self, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_location, name)

    def add_supply(self, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_supply, name)

    def add_alternator(self, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_alternator, name)

    def add_conductor(self, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_conductor, name)

    def add_busbar(self, location_id: int, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_busbar, location_id, name)

    def add_transformer_ups(self, location_id: int, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_transformer_ups, location_id, name)

    def add_load(self, location_id: int, name: Optional[str] = None) -> Optional[Block]:
        return self._guarded_add(self.project.add_load, location_id, name)

    def add_row(self, busbar_id: int, protection: ProtectionKind = ProtectionKind.PIN) -> Optional[Block]:
        return self._guarded_add(self.project.add_row, busbar_id, protection)

    def delete_block(self, block_id: int) -> List[int]:
        """Delete a block with everything below it."""
        try:
            block = self.project.get_block(block_id)
            if block.is_terminal or block.type == BlockType.EXTERNAL_BUSBAR:
                raise InvalidValue(f"{block.type.value} blocks are removed with their owner.")
            view_key = self.views.view_key_for_block(block_id)
        except DiagramError as e:
            self.report([Issue.from_exception("DELETE_FAILED", e)], title="Delete")
            return []
        removed = self.project.remove_block(block_id)
        self.interaction.forget(removed)
        pending = self.connections.pending
        if pending is not None and pending.terminal_id in removed:
            self.connections.cancel()
        self.views.prune()
        self.mark_dirty(f"delete {block.type.value}", [block_id])
        self.notify(BlocksChanged("removed", tuple(removed)))
        self.notify(ConnectionsChanged("removed", ()))
        if self.views.has(view_key):
            self.views.request_fit(view_key)
        return removed

    def delete_selected(self) -> List[int]:
        st = self.interaction.current
        if not st.has_selection or st.block_id is None:
            return []
        return self.delete_block(st.block_id)

    def rename(self, block_id: int, name: str) -> bool:
        try:
            self.project.rename(block_id, name)
        except DiagramError as e:
            self.report([Issue.from_exception("RENAME_FAILED", e, block_id=block_id)], title="Rename")
            return False
        self.views.sync_titles()
        self.mark_dirty("rename", [block_id])
        self.notify(BlocksChanged("renamed", (block_id,)))
        return True

    def set_row_protection(self, row_id: int, kind: ProtectionKind, rating: Optional[int] = None) -> bool:
        try:
            self.project.set_row_protection(row_id, kind, rating)
        except (DiagramError, ValueError) as e:
            self.report([Issue.from_exception("ROW_INVALID", e, block_id=row_id)], title="Row protection")
            return False
        self.mark_dirty("row protection", [row_id])
        self.notify(BlocksChanged("updated", (row_id,)))
        return True

    # ---------------- views ----------------
    def open_location(self, location_id: int) -> Optional[ViewState]:
        try:
            view, _created = self.views.open_location(location_id)
        except DiagramError as e:
            self.report([Issue.from_exception("OPEN_FAILED", e)], title="Open location")
            return None
        return view

    def close_view(self, key: int) -> Optional[int]:
        try:
            current = self.views.close(key)
        except DiagramError as e:
            log.info("Close view %s refused: %s", key, e)
            return None
        if self.interaction.current.view_key == key:
            # a drag in a closed view has nothing left to commit to
            self.interaction.reset()
        return current

    def fit_view(self, key: Optional[int] = None) -> Optional[FitResult]:
        key = self.views.current.key if key is None else key
        try:
            return self.views.fit(key)
        except ViewNotReady:
            self.views.request_fit(key)
            return None

    def zoom(self, key: int, delta: float, pivot: Optional[Point] = None) -> bool:
        return self.views.get(key).zoom_by(delta, pivot)

    # ---------------- modes & connections ----------------
    def set_mode(self, mode: EditMode) -> None:
        mode = EditMode(mode)
        if mode != EditMode.CONNECT:
            self.connections.cancel()
        if mode != self.mode:
            self.mode = mode
            self.notify(EditModeChanged(mode.value))

    def escape(self) -> None:
        self.set_mode(EditMode.NORMAL)
        self.interaction.cancel()

    def pick_anchor(self, terminal_id: int, view_key: Optional[int] = None) -> PickResult:
        result = self.connections.pick(terminal_id, view_key)
        if result.outcome == PickOutcome.REJECTED:
            self.report([Issue(Level.ERROR, "CONNECT_REJECTED", result.error)], title="Connection")
        return result

    def _on_connected(self, conn: Connection) -> None:
        self.mark_dirty("connect", [conn.left_id, conn.right_id])
        self.notify(ConnectionsChanged("added", (conn.left_id, conn.right_id)))
        warnings = [it for it in self.validation.validate() if it.level != Level.INFO]
        if warnings:
            self.report(warnings)

    def remove_connection(self, a: int, b: int) -> bool:
        try:
            self.project.remove_connection(a, b)
        except NotFound as e:
            self.report([Issue.from_exception("DISCONNECT_FAILED", e)], title="Remove connection")
            return False
        self.mark_dirty("disconnect", [a, b])
        self.notify(ConnectionsChanged("removed", (a, b)))
        return True

    def add_render_point(self, a: int, b: int, view_key: int, canvas_point: Point) -> Optional[Tuple[int, int]]:
        """Add a grid-snapped bend point clicked on a connection line."""
        try:
            conn = self.project.get_connection(a, b)
            frame = self.views.get(view_key).frame
        except NotFound as e:
            self.report([Issue.from_exception("ROUTE_FAILED", e)], title="Route")
            return None
        x, y = frame.from_canvas(*snap_to_grid(canvas_point))
        conn.add_render_point(x, y)
        self.mark_dirty("route", [a, b])
        self.notify(ConnectionsChanged("routed", (a, b)))
        return x, y

    def remove_render_point(self, a: int, b: int, x: int, y: int) -> bool:
        try:
            self.project.get_connection(a, b).remove_render_point(x, y)
        except NotFound as e:
            self.report([Issue.from_exception("ROUTE_FAILED", e)], title="Route")
            return False
        self.mark_dirty("route", [a, b])
        self.notify(ConnectionsChanged("routed", (a, b)))
        return True

    def route(self, conn: Connection, view_key: int) -> Optional[List[Point]]:
        """Canvas polyline of a connection, or None when an end is not drawn in this view."""
        try:
            if any(self.views.view_key_for_block(t) != view_key for t in (conn.left_id, conn.right_id)):
                return None
        except DiagramError:
            return None
        start = self.views.anchor_canvas_position(conn.left_id)
        end = self.views.anchor_canvas_position(conn.right_id)
        if start is None or end is None:
            return None
        return route_for(self.views.get(view_key).frame, start, end, conn.render_points)

    def validate(self) -> List[Issue]:
        issues = self.validation.validate()
        self.report(issues, title="Validation")
        return issues

    # ---------------- interaction callbacks ----------------
    def _on_interaction_changed(self, old: Interaction, new: Interaction) -> None:
        if old.block_id != new.block_id or old.has_selection != new.has_selection:
            self.notify(SelectionChanged(new.block_id if new.has_selection else None, new.view_key))

    def _on_position_committed(self, block_id: int, pos: Tuple[int, int]) -> None:
        self.mark_dirty("move", [block_id])
        self.notify(PositionCommitted(block_id, pos))

    @property
    def layout_key(self) -> int:
        return LAYOUT_KEY
