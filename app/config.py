# -*- coding: utf-8 -*-
"""Build-time configuration.

This module is tiny and *import-safe*: only constants, no Qt, no I/O.

Geometry shared with the engine lives in :mod:`domain.constants`; user
preferences (snap grid, zoom step, recent files) live in :mod:`infra.settings`.
"""

from __future__ import annotations

from domain.constants import ZOOM_STEP

APP_TITLE: str = "Power Layout"
PROJECT_FILE_FILTER: str = "Power Layout project (*.plp);;All files (*)"

# Delay before a deferred fit runs, so the viewport has been laid out.
FIT_DELAY_MS: int = 0

# Wheel notches reported by Qt are multiples of 120.
WHEEL_NOTCH: int = 120

__all__ = [
    "APP_TITLE",
    "FIT_DELAY_MS",
    "PROJECT_FILE_FILTER",
    "WHEEL_NOTCH",
    "ZOOM_STEP",
]
