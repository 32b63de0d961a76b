# -*- coding: utf-8 -*-
"""Project properties dialog (name, versions, designer / checker)."""

from __future__ import annotations

from PyQt5.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLineEdit, QSpinBox

_INT_FIELDS = (
    ("major_version", "Major version"),
    ("minor_version", "Minor version"),
    ("design_date", "Design date"),
    ("check_date", "Check date"),
)


class ProjectInfoDialog(QDialog):
    """Edits ``ProjectInfo`` through the controller; stays open on invalid input."""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("Project properties")
        info = controller.project.info
        form = QFormLayout(self)

        self.ed_name = QLineEdit(info.name, self)
        self.ed_name.setMaxLength(100)
        form.addRow("Name", self.ed_name)
        self.ed_designer = QLineEdit(info.designer, self)
        self.ed_designer.setMaxLength(32)
        form.addRow("Designer", self.ed_designer)
        self.ed_checker = QLineEdit(info.checker, self)
        self.ed_checker.setMaxLength(32)
        form.addRow("Checker", self.ed_checker)

        self._spins = {}
        for key, label in _INT_FIELDS:
            spin = QSpinBox(self)
            spin.setRange(0, 2_000_000_000)
            spin.setValue(int(getattr(info, key)))
            form.addRow(label, spin)
            self._spins[key] = spin

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, self)
        buttons.accepted.connect(self._apply)
        buttons.rejected.connect(self.reject)
        form.addRow(buttons)

    def values(self) -> dict:
        out = {
            "name": self.ed_name.text(),
            "designer": self.ed_designer.text(),
            "checker": self.ed_checker.text(),
        }
        out.update({key: spin.value() for key, spin in self._spins.items()})
        return out

    def _apply(self) -> None:
        if self.controller.update_info(**self.values()):
            self.accept()
