# -*- coding: utf-8 -*-
"""Message boxes and small input prompts shared by the diagram screens.

Every prompt returns ``None`` when the user cancels, so callers only test
one value. Only PyQt5 is imported here.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from PyQt5.QtWidgets import QInputDialog, QMessageBox, QWidget


def info(parent: Optional[QWidget], title: str, text: str) -> None:
    QMessageBox.information(parent, title, text)


def warn(parent: Optional[QWidget], title: str, text: str) -> None:
    QMessageBox.warning(parent, title, text)


def error(parent: Optional[QWidget], title: str, text: str, details: Optional[str] = None) -> None:
    box = QMessageBox(QMessageBox.Critical, title, text, QMessageBox.Ok, parent)
    if details:
        box.setDetailedText(details)
    box.exec_()


def confirm(parent: Optional[QWidget], title: str, text: str, *, default_no: bool = True) -> bool:
    default = QMessageBox.No if default_no else QMessageBox.Yes
    answer = QMessageBox.question(parent, title, text, QMessageBox.Yes | QMessageBox.No, default)
    return answer == QMessageBox.Yes


class SaveChoice(Enum):
    SAVE = QMessageBox.Save
    DISCARD = QMessageBox.Discard
    CANCEL = QMessageBox.Cancel


def ask_save_discard_cancel(
    parent: Optional[QWidget],
    title: str,
    text: str,
    *,
    default: SaveChoice = SaveChoice.SAVE,
) -> SaveChoice:
    """Unsaved-changes prompt; closing the box counts as Cancel."""
    buttons = QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel
    answer = QMessageBox.question(parent, title, text, buttons, default.value)
    try:
        return SaveChoice(answer)
    except ValueError:
        return SaveChoice.CANCEL


def ask_text(parent: Optional[QWidget], title: str, label: str, text: str = "") -> Optional[str]:
    value, ok = QInputDialog.getText(parent, title, label, text=text)
    return value if ok else None


def ask_item(
    parent: Optional[QWidget], title: str, label: str, items: Sequence[str], current: str = ""
) -> Optional[str]:
    items = list(items)
    index = items.index(current) if current in items else 0
    value, ok = QInputDialog.getItem(parent, title, label, items, index, False)
    return value if ok else None


def ask_int(parent: Optional[QWidget], title: str, label: str, value: int = 0, minimum: int = 0) -> Optional[int]:
    result, ok = QInputDialog.getInt(parent, title, label, int(value), minimum)
    return result if ok else None
