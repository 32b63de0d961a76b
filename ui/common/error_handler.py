# -*- coding: utf-8 -*-
"""Guard for Qt slots.

An exception escaping a slot would otherwise reach the global excepthook and
abort the action silently. Here it is logged with its traceback and shown in
an error box titled after the action (``_add_location`` -> "Add location").
"""

from __future__ import annotations

import functools
import logging
import traceback
from typing import Callable, Optional, TypeVar

from PyQt5.QtWidgets import QWidget

from ui.common import dialogs

T = TypeVar("T")

log = logging.getLogger("powerlayout.ui")


def action_title(name: str) -> str:
    words = name.strip("_").replace("_", " ")
    return words[:1].upper() + words[1:] if words else "Error"


def run_guarded(
    fn: Callable[[], T],
    *,
    parent: Optional[QWidget] = None,
    title: str = "Error",
    user_message: str = "An unexpected error occurred.",
) -> Optional[T]:
    """Return ``fn()``, or None after logging and showing the failure."""
    try:
        return fn()
    except Exception as e:
        log.exception("%s failed: %s", title, e)
        dialogs.error(parent, title, user_message, details=traceback.format_exc())
        return None


def safe_slot(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        parent = self if isinstance(self, QWidget) else None
        return run_guarded(lambda: fn(self, *args, **kwargs), parent=parent, title=action_title(fn.__name__))

    return wrapper
