# -*- coding: utf-8 -*-
"""Startup check for third-party packages.

Runs before any PyQt5 import so a broken environment ends with a readable
message instead of an ImportError traceback.
"""
from __future__ import annotations

from importlib import import_module
from typing import Dict, List

# distribution name on the index -> module that must import
REQUIRED: Dict[str, str] = {
    "PyQt5": "PyQt5.QtWidgets",
}


def missing_runtime_packages(required: Dict[str, str] = REQUIRED) -> List[str]:
    missing = []
    for dist, module in required.items():
        try:
            import_module(module)
        except ImportError:
            missing.append(dist)
    return missing


def ensure_runtime_deps() -> None:
    """Raise RuntimeError naming the missing packages."""
    missing = missing_runtime_packages()
    if missing:
        raise RuntimeError(
            f"Power Layout cannot start; missing packages: {', '.join(missing)}.\n\n"
            "Install the project with:\n  pip install -e ."
        )
