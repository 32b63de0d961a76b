# -*- coding: utf-8 -*-
"""Application UI controller.

Creates the main window and its menu actions, so main.py stays a thin
entrypoint. This module holds the PyQt5 imports and screen wiring.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from PyQt5.QtWidgets import QAction, QFileDialog, QMainWindow

from app.config import APP_TITLE, PROJECT_FILE_FILTER
from app.events import ModifiedChanged, ProjectInfoChanged, ProjectReplaced
from infra.settings import load_settings, push_recent_file
from powerlayout.version import __version__ as APP_VERSION
from screens.diagram.diagram_screen import DiagramScreen
from screens.diagram.project_info_dialog import ProjectInfoDialog
from ui.common import dialogs
from ui.common.dialogs import SaveChoice

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__()
        self._settings = settings if settings is not None else load_settings()
        self._base_title = f"{APP_TITLE} {APP_VERSION}"
        self.setGeometry(200, 100, 1280, 800)

        self.diagram = DiagramScreen(
            snap_grid=float(self._settings.get("snap_grid", 0)),
            zoom_step=float(self._settings.get("zoom_step", 0.1)),
            parent=self,
        )
        self.controller = self.diagram.controller
        self.setCentralWidget(self.diagram)
        self._recent_menu = None

        bus = self.controller.bus
        bus.subscribe(ModifiedChanged, lambda _e: self._update_window_title())
        bus.subscribe(ProjectReplaced, lambda _e: self._update_window_title())
        bus.subscribe(ProjectInfoChanged, lambda _e: self._update_window_title())

        self._create_menus()
        self._update_window_title()

    def _update_window_title(self) -> None:
        file_path = self.controller.file_path
        name = os.path.basename(file_path) if file_path else self.controller.project.info.name
        suffix = f" - {name}" if name else ""
        star = " *" if self.controller.dirty.is_dirty else ""
        self.setWindowTitle(self._base_title + suffix + star)

    # ---------------------------------------------------------
    # Menus / actions
    # ---------------------------------------------------------
    def _create_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        self._add_action(file_menu, "New project", self.new_project, "Ctrl+N")
        self._add_action(file_menu, "Open project…", self.open_project_from_menu, "Ctrl+O")
        self._recent_menu = file_menu.addMenu("Open recent")
        self._recent_menu.aboutToShow.connect(self._rebuild_recent_menu)
        self._add_action(file_menu, "Save project", self.save_project_from_menu, "Ctrl+S")
        self._add_action(file_menu, "Save project as…", self.save_as_project_from_menu, "Ctrl+Shift+S")
        file_menu.addSeparator()
        self._add_action(file_menu, "Project properties…", self.edit_project_info)
        file_menu.addSeparator()
        self._add_action(file_menu, "Exit", self.close)

        edit_menu = menubar.addMenu("Edit")
        self._add_action(edit_menu, "Delete", self.diagram.delete_selected, "Del")
        self._add_action(edit_menu, "Validate", self.controller.validate, "F7")

        view_menu = menubar.addMenu("View")
        self._add_action(view_menu, "Fit to content", self.diagram.fit_current, "Ctrl+0")

    def _add_action(self, menu, text: str, slot, shortcut: str = "") -> QAction:
        act = QAction(text, self)
        if shortcut:
            act.setShortcut(shortcut)
        act.triggered.connect(lambda _checked=False: slot())
        menu.addAction(act)
        return act

    def _rebuild_recent_menu(self) -> None:
        if self._recent_menu is None:
            return
        self._recent_menu.clear()
        paths = [p for p in load_settings().get("recent_files", []) if os.path.exists(p)]
        if not paths:
            empty = QAction("(No recent files)", self)
            empty.setEnabled(False)
            self._recent_menu.addAction(empty)
            return
        for p in paths:
            action = QAction(f"{os.path.basename(p)} - {os.path.dirname(p)}", self)
            action.setToolTip(p)
            action.triggered.connect(lambda _checked=False, path=p: self.open_path(path))
            self._recent_menu.addAction(action)

    # ---------------------------------------------------------
    # Open / save
    # ---------------------------------------------------------
    def _confirm_unsaved_changes(self, *, context: str) -> bool:
        """Unified Save / Discard / Cancel flow; True if the caller can continue."""
        if not self.controller.dirty.is_dirty:
            return True
        choice = dialogs.ask_save_discard_cancel(
            self, "Unsaved changes", f"There are unsaved changes. Save them before {context}?"
        )
        if choice == SaveChoice.CANCEL:
            return False
        if choice == SaveChoice.SAVE:
            return self.save_project_from_menu()
        return True

    def edit_project_info(self) -> None:
        ProjectInfoDialog(self.controller, self).exec_()

    def new_project(self) -> None:
        if self._confirm_unsaved_changes(context="starting a new project"):
            self.controller.new_project()

    def open_project_from_menu(self) -> None:
        if not self._confirm_unsaved_changes(context="opening another project"):
            return
        start = str(load_settings().get("last_dir", "") or "")
        file_path, _ = QFileDialog.getOpenFileName(self, "Open project", start, PROJECT_FILE_FILTER)
        if file_path:
            self.open_path(file_path)

    def open_path(self, file_path: str) -> None:
        if self.controller.load(file_path):
            push_recent_file(file_path)
            log.info("Opened project %s", file_path)

    def save_project_from_menu(self) -> bool:
        if not self.controller.file_path:
            return self.save_as_project_from_menu()
        return self._save_to(self.controller.file_path)

    def save_as_project_from_menu(self) -> bool:
        start = self.controller.file_path or str(load_settings().get("last_dir", "") or "")
        file_path, _ = QFileDialog.getSaveFileName(self, "Save project as", start, PROJECT_FILE_FILTER)
        if not file_path:
            return False
        return self._save_to(file_path)

    def _save_to(self, file_path: str) -> bool:
        if not self.controller.save(file_path):
            return False
        push_recent_file(self.controller.file_path)
        self._update_window_title()
        return True

    def closeEvent(self, event):
        if not self._confirm_unsaved_changes(context="exiting"):
            event.ignore()
            return
        event.accept()


def create_main_window(settings: Optional[Dict[str, Any]] = None) -> MainWindow:
    """Factory used by main.py."""
    return MainWindow(settings)
