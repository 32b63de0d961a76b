# -*- coding: utf-8 -*-
"""Project tree: hierarchical mirror of the block graph."""

from __future__ import annotations

import logging

from PyQt5.QtCore import QSignalBlocker, Qt, pyqtSignal
from PyQt5.QtWidgets import QTreeWidget, QTreeWidgetItem

from app.events import BlocksChanged, ConnectionsChanged, ProjectInfoChanged, ProjectReplaced, SelectionChanged
from domain.blocks import ROOT_ID, BlockType
from domain.errors import DiagramError

log = logging.getLogger(__name__)

ROLE_BLOCK_ID = Qt.UserRole


class ProjectTree(QTreeWidget):
    location_activated = pyqtSignal(int)

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._items = {}
        self.setHeaderLabels(["Block", "Type"])
        self.itemSelectionChanged.connect(self._on_item_selection_changed)
        self.itemDoubleClicked.connect(self._on_item_double_clicked)
        bus = controller.bus
        bus.subscribe(BlocksChanged, lambda _e: self.refresh())
        bus.subscribe(ConnectionsChanged, lambda _e: self.refresh())
        bus.subscribe(ProjectReplaced, lambda _e: self.refresh())
        bus.subscribe(ProjectInfoChanged, lambda _e: self.refresh())
        bus.subscribe(SelectionChanged, self._on_selection_changed)
        self.refresh()

    def refresh(self) -> None:
        project = self.controller.project
        blocker = QSignalBlocker(self)
        self.clear()
        self._items = {}
        root = QTreeWidgetItem([project.info.name or "Project", ""])
        root.setData(0, ROLE_BLOCK_ID, ROOT_ID)
        self.addTopLevelItem(root)

        def add(parent_item: QTreeWidgetItem, parent_id: int) -> None:
            for block in project.get_children(parent_id):
                if block.is_terminal:
                    continue
                item = QTreeWidgetItem([block.name, block.type.label])
                item.setData(0, ROLE_BLOCK_ID, block.id)
                parent_item.addChild(item)
                self._items[block.id] = item
                add(item, block.id)

        add(root, ROOT_ID)
        self.expandToDepth(1)
        del blocker

    def _on_item_selection_changed(self) -> None:
        items = self.selectedItems()
        if not items:
            return
        block_id = items[0].data(0, ROLE_BLOCK_ID)
        if block_id is None or block_id == ROOT_ID:
            return
        try:
            self.controller.interaction.select(int(block_id))
        except DiagramError as e:
            log.info("Tree selection ignored: %s", e)

    def _on_item_double_clicked(self, item: QTreeWidgetItem, _column: int) -> None:
        block_id = item.data(0, ROLE_BLOCK_ID)
        if block_id is None or block_id == ROOT_ID:
            return
        block = self.controller.project.get_block(int(block_id))
        if block.type == BlockType.LOCATION:
            self.location_activated.emit(block.id)

    def _on_selection_changed(self, event: SelectionChanged) -> None:
        item = self._items.get(event.block_id) if event.block_id is not None else None
        blocker = QSignalBlocker(self)
        if item is None:
            self.clearSelection()
        else:
            self.setCurrentItem(item)
        del blocker
