# -*- coding: utf-8 -*-
"""domain/errors.py

Error taxonomy of the diagram engine (no Qt).

None of these is fatal: callers abort the current operation and leave the
project in its last consistent state.
"""

from __future__ import annotations


class DiagramError(Exception):
    """Base class for recoverable engine errors."""


class NotFound(DiagramError, KeyError):
    """An id does not resolve to a block, terminal, connection or view."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep plain messages for dialogs.
        return str(self.args[0]) if self.args else ""


class InvalidConnection(DiagramError, ValueError):
    """Connection request rejected; the model is left unchanged."""


class InvalidValue(DiagramError, ValueError):
    """Invalid name, metadata value or parent type."""


class ViewNotReady(DiagramError):
    """The view has no measured viewport yet (fit must be deferred)."""
