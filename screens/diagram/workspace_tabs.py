# -*- coding: utf-8 -*-
"""Workspace tabs: one :class:`DiagramView` per open view.

The tab bar mirrors :class:`domain.views.ViewRegistry`: the Layout tab is
always first and cannot be closed; Location tabs open on demand.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from PyQt5.QtCore import QPoint, pyqtSignal
from PyQt5.QtWidgets import QTabBar, QTabWidget

from app.events import BlocksChanged, ProjectReplaced
from domain.views import LAYOUT_KEY

from .graphics import DiagramView

log = logging.getLogger(__name__)


class WorkspaceTabs(QTabWidget):
    context_requested = pyqtSignal(int, QPoint)
    delete_requested = pyqtSignal()

    def __init__(self, controller, *, confirm=None, zoom_step: Optional[float] = None, parent=None):
        super().__init__(parent)
        self.controller = controller
        self._confirm = confirm
        self._zoom_step = zoom_step
        self._views: Dict[int, DiagramView] = {}
        self.setTabsClosable(True)
        self.setMovable(False)
        self.tabCloseRequested.connect(self._on_close_requested)
        self.currentChanged.connect(self._on_current_changed)
        controller.bus.subscribe(BlocksChanged, self._on_blocks_changed)
        controller.bus.subscribe(ProjectReplaced, self._on_project_replaced)
        self._add_tab(LAYOUT_KEY)

    # ---------------- tabs ----------------
    def view(self, key: int) -> Optional[DiagramView]:
        return self._views.get(key)

    def current_view(self) -> Optional[DiagramView]:
        w = self.currentWidget()
        return w if isinstance(w, DiagramView) else None

    def _add_tab(self, key: int) -> DiagramView:
        kwargs = {"confirm": self._confirm}
        if self._zoom_step is not None:
            kwargs["zoom_step"] = self._zoom_step
        view = DiagramView(self.controller, key, **kwargs)
        view.location_activated.connect(self.open_location)
        view.context_requested.connect(self.context_requested)
        view.delete_requested.connect(self.delete_requested)
        self._views[key] = view
        idx = self.addTab(view, self.controller.views.get(key).title)
        if key == LAYOUT_KEY:
            # the Layout tab has no close button
            self.tabBar().setTabButton(idx, QTabBar.RightSide, None)
            self.tabBar().setTabButton(idx, QTabBar.LeftSide, None)
        return view

    def _remove_tab(self, key: int) -> None:
        view = self._views.pop(key, None)
        if view is None:
            return
        view.detach()
        self.removeTab(self.indexOf(view))
        view.deleteLater()

    def open_location(self, location_id: int) -> None:
        state = self.controller.open_location(location_id)
        if state is None:
            return
        view = self._views.get(state.key) or self._add_tab(state.key)
        self.setCurrentWidget(view)

    def sync(self) -> None:
        """Drop tabs whose view was closed or pruned, refresh titles, re-apply transforms."""
        registry = self.controller.views
        for key in [k for k in self._views if not registry.has(k)]:
            self._remove_tab(key)
        for key, view in self._views.items():
            self.setTabText(self.indexOf(view), registry.get(key).title)
            view.apply_transform()
        current = self._views.get(registry.current.key)
        if current is not None and self.currentWidget() is not current:
            self.setCurrentWidget(current)

    # ---------------- slots ----------------
    def _on_close_requested(self, idx: int) -> None:
        view = self.widget(idx)
        if not isinstance(view, DiagramView) or view.view_key == LAYOUT_KEY:
            return
        if self.controller.close_view(view.view_key) is not None:
            self.sync()

    def _on_current_changed(self, idx: int) -> None:
        view = self.widget(idx)
        if isinstance(view, DiagramView) and self.controller.views.has(view.view_key):
            self.controller.views.select(view.view_key)
            view.setFocus()

    def _on_blocks_changed(self, _event) -> None:
        self.sync()

    def _on_project_replaced(self, _event) -> None:
        self.sync()
        layout = self._views.get(LAYOUT_KEY)
        if layout is not None:
            layout.rebuild()
