# -*- coding: utf-8 -*-
"""
Where Power Layout reads and writes files.

- bundled files (powerlayout/version.json) sit inside their package, under
  the folder holding the packages or the PyInstaller extraction folder;
- settings and logs go to a per-user folder that never needs admin rights.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

APP_NAME = "PowerLayout"
_USER_DIR_VARS = ("LOCALAPPDATA", "APPDATA", "XDG_DATA_HOME")


def app_root() -> Path:
    bundle = getattr(sys, "_MEIPASS", None)
    if getattr(sys, "frozen", False) and bundle:
        return Path(bundle)
    return Path(__file__).resolve().parents[1]


def ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def user_data_dir() -> Path:
    base = next((os.environ[v] for v in _USER_DIR_VARS if os.environ.get(v)), None)
    return ensure_dir(Path(base or Path.home()) / APP_NAME)


def logs_dir() -> Path:
    return ensure_dir(user_data_dir() / "logs")
