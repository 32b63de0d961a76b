# -*- coding: utf-8 -*-
"""
Application bootstrap (runs before UI):
- Init logging
- Load (and repair if needed) user settings
"""
from __future__ import annotations

from typing import Any, Dict

from infra.logging_setup import init_logging
from infra.settings import load_settings


def bootstrap() -> Dict[str, Any]:
    init_logging()
    return load_settings()
