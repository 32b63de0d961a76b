# -*- coding: utf-8 -*-
"""screens/diagram/diagram_screen.py

Power layout editor: project tree, workspace tabs and an issues list.

Notes:
- All diagram semantics live in :class:`DiagramController` (no Qt).
- This module only wires widgets, dialogs and toolbar actions to it.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import QPoint, Qt
from PyQt5.QtWidgets import (
    QAction,
    QListWidget,
    QListWidgetItem,
    QMenu,
    QSplitter,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from app.config import ZOOM_STEP
from app.events import EditModeChanged, IssuesReported, SelectionChanged
from domain.blocks import BlockType, ProtectionKind
from domain.connection_protocol import EditMode
from domain.views import LAYOUT_KEY
from services.errors import Level
from ui.common import dialogs
from ui.common.error_handler import safe_slot

from .diagram_controller import DiagramController
from .project_tree import ProjectTree
from .qt_deferrer import QtDeferrer
from .workspace_tabs import WorkspaceTabs

log = logging.getLogger(__name__)

_LEVEL_PREFIX = {Level.ERROR: "[E]", Level.WARNING: "[W]", Level.INFO: "[i]"}


class DiagramScreen(QWidget):
    def __init__(self, *, snap_grid: float = 0.0, zoom_step: float = ZOOM_STEP, parent=None):
        super().__init__(parent)
        self._deferrer = QtDeferrer(self, on_done=self._on_fits_applied)
        self.controller = DiagramController(
            deferrer=self._deferrer,
            snap_grid=snap_grid,
            on_error=lambda title, text: dialogs.error(self, title, text),
        )
        self.zoom_step = float(zoom_step)
        self._build_ui()
        bus = self.controller.bus
        bus.subscribe(EditModeChanged, self._on_mode_changed)
        bus.subscribe(SelectionChanged, lambda _e: self._sync_actions())
        bus.subscribe(IssuesReported, self._on_issues)
        self._sync_actions()

    # ---------------- UI ----------------
    def _build_ui(self) -> None:
        self.toolbar = QToolBar("Diagram", self)
        self.act_location = self._action("Location", self._add_location)
        self.act_supply = self._action("Supply", self._add_supply)
        self.act_alternator = self._action("Alternator", self._add_alternator)
        self.act_conductor = self._action("Conductor", self._add_conductor)
        self.toolbar.addSeparator()
        self.act_busbar = self._action("Busbar", lambda: self._add_in_location(self.controller.add_busbar))
        self.act_transformer = self._action(
            BlockType.TRANSFORMER_UPS.label, lambda: self._add_in_location(self.controller.add_transformer_ups)
        )
        self.act_load = self._action("Load", lambda: self._add_in_location(self.controller.add_load))
        self.act_row = self._action("Row", self._add_row)
        self.toolbar.addSeparator()

        self.act_connect = self._action("Connect", lambda: self._toggle_mode(EditMode.CONNECT), checkable=True)
        self.act_disconnect = self._action("Disconnect", lambda: self._toggle_mode(EditMode.DISCONNECT), checkable=True)
        self.toolbar.addSeparator()
        self._action("Fit", self.fit_current)
        self._action("Zoom +", lambda: self._zoom(+1))
        self._action("Zoom -", lambda: self._zoom(-1))
        self.toolbar.addSeparator()
        self._action("Validate", self.controller.validate)

        self.tree = ProjectTree(self.controller, self)
        self.tabs = WorkspaceTabs(
            self.controller,
            confirm=lambda title, text: dialogs.confirm(self, title, text),
            zoom_step=self.zoom_step,
            parent=self,
        )
        self.issues = QListWidget(self)
        self.tree.location_activated.connect(self.tabs.open_location)
        self.tabs.context_requested.connect(self._show_context_menu)
        self.tabs.delete_requested.connect(self.delete_selected)
        self.tabs.currentChanged.connect(lambda _i: self._sync_actions())

        right = QSplitter(Qt.Vertical, self)
        right.addWidget(self.tabs)
        right.addWidget(self.issues)
        right.setStretchFactor(0, 5)
        right.setStretchFactor(1, 1)

        split = QSplitter(Qt.Horizontal, self)
        split.addWidget(self.tree)
        split.addWidget(right)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 4)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.toolbar)
        lay.addWidget(split, 1)

    def _action(self, text: str, slot, *, checkable: bool = False) -> QAction:
        act = QAction(text, self)
        act.setCheckable(checkable)
        act.triggered.connect(lambda _checked=False: slot())
        self.toolbar.addAction(act)
        return act

    def _current_location_id(self) -> Optional[int]:
        key = self.controller.views.current.key
        return None if key == LAYOUT_KEY else key

    def _sync_actions(self) -> None:
        in_location = self._current_location_id() is not None
        for act in (self.act_busbar, self.act_transformer, self.act_load):
            act.setEnabled(in_location)
        st = self.controller.interaction.current
        self.act_row.setEnabled(st.has_selection and st.kind == BlockType.BUSBAR)

    # ---------------- add blocks ----------------
    @safe_slot
    def _add_location(self) -> None:
        self.controller.add_location()

    @safe_slot
    def _add_supply(self) -> None:
        self.controller.add_supply()

    @safe_slot
    def _add_alternator(self) -> None:
        self.controller.add_alternator()

    @safe_slot
    def _add_conductor(self) -> None:
        self.controller.add_conductor()

    @safe_slot
    def _add_in_location(self, factory) -> None:
        location_id = self._current_location_id()
        if location_id is None:
            dialogs.warn(self, "Add block", "Open a Location tab first.")
            return
        factory(location_id)

    @safe_slot
    def _add_row(self) -> None:
        st = self.controller.interaction.current
        if st.has_selection and st.kind == BlockType.BUSBAR:
            self.controller.add_row(st.block_id)

    # ---------------- edit ----------------
    @safe_slot
    def delete_selected(self) -> None:
        st = self.controller.interaction.current
        if not st.has_selection or st.block_id is None:
            return
        block = self.controller.project.get_block(st.block_id)
        if dialogs.confirm(self, "Delete", f"Delete '{block.name}' and everything it contains?"):
            self.controller.delete_selected()

    def _rename(self, block_id: int) -> None:
        block = self.controller.project.get_block(block_id)
        name = dialogs.ask_text(self, "Rename", "Name:", block.name)
        if name is not None:
            self.controller.rename(block_id, name)

    def _edit_protection(self, row_id: int) -> None:
        row = self.controller.project.get_block(row_id)
        kind = dialogs.ask_item(
            self, "Row protection", "Protection:",
            [k.value for k in ProtectionKind], row.meta.get("protection", ProtectionKind.PIN.value),
        )
        if kind is None:
            return
        rating = None
        if kind == ProtectionKind.CIRCUIT_BREAKER.value:
            rating = dialogs.ask_int(self, "Row protection", "Rating (A):", int(row.meta.get("rating", 0)))
            if rating is None:
                return
        self.controller.set_row_protection(row_id, ProtectionKind(kind), rating)

    @safe_slot
    def _show_context_menu(self, block_id: int, global_pos: QPoint) -> None:
        block = self.controller.project.get_block(block_id)
        menu = QMenu(self)
        if block.type == BlockType.LOCATION:
            menu.addAction("Open", lambda: self.tabs.open_location(block_id))
        if block.type == BlockType.BUSBAR:
            menu.addAction("Add row", lambda: self.controller.add_row(block_id))
        if block.type == BlockType.ROW:
            menu.addAction("Protection…", lambda: self._edit_protection(block_id))
        if block.type != BlockType.EXTERNAL_BUSBAR:
            menu.addAction("Rename…", lambda: self._rename(block_id))
            menu.addSeparator()
            menu.addAction("Delete", self.delete_selected)
        menu.exec_(global_pos)

    # ---------------- modes / view ----------------
    def _toggle_mode(self, mode: EditMode) -> None:
        self.controller.set_mode(EditMode.NORMAL if self.controller.mode == mode else mode)

    def _on_mode_changed(self, event: EditModeChanged) -> None:
        self.act_connect.setChecked(event.mode == EditMode.CONNECT.value)
        self.act_disconnect.setChecked(event.mode == EditMode.DISCONNECT.value)

    @safe_slot
    def fit_current(self) -> None:
        self.controller.fit_view()
        self._on_fits_applied()

    def _zoom(self, direction: int) -> None:
        view = self.tabs.current_view()
        if view is None:
            return
        if self.controller.zoom(view.view_key, direction * self.zoom_step):
            view.apply_transform()

    def _on_fits_applied(self) -> None:
        self.tabs.sync()

    def _on_issues(self, event: IssuesReported) -> None:
        self.issues.clear()
        for issue in event.issues:
            item = QListWidgetItem(f"{_LEVEL_PREFIX.get(issue.level, '')} {issue.message}")
            item.setToolTip(issue.hint or issue.code)
            item.setData(Qt.UserRole, issue.block_id)
            self.issues.addItem(item)
