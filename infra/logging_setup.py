# -*- coding: utf-8 -*-
"""
Root logger setup: one file in the user logs folder plus the console.

``POWERLAYOUT_LOG_LEVEL`` (e.g. ``DEBUG``) overrides the default level, which
turns on the drag, fit and connection traces of the diagram engine.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from infra.paths import logs_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVEL_ENV = "POWERLAYOUT_LOG_LEVEL"


def _level_from_env(default: int) -> int:
    name = os.environ.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def init_logging(filename: str = "powerlayout.log", level: int = logging.INFO) -> Path:
    log_path = logs_dir() / filename
    root = logging.getLogger()
    # idempotent: a second call must not duplicate every line
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(log_path):
            return log_path
    logging.basicConfig(
        level=_level_from_env(level),
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_path, encoding="utf-8"), logging.StreamHandler()],
    )
    return log_path
