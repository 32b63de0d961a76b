# -*- coding: utf-8 -*-
"""
User settings stored in a per-user writable folder (no admin).
Settings never live beside the executable, which breaks under installers / PyInstaller.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from domain.constants import BLOCK_GRID, ZOOM_STEP
from infra.paths import user_data_dir

SETTINGS_FILE: Path = user_data_dir() / "powerlayout_settings.json"
MAX_RECENT_FILES = 8
log = logging.getLogger(__name__)


def _defaults() -> Dict[str, Any]:
    return {
        "snap_grid": BLOCK_GRID,
        "zoom_step": ZOOM_STEP,
        "recent_files": [],
        "last_dir": "",
    }


def _coerce(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop values of the wrong type so a hand-edited file cannot break the UI."""
    out = _defaults()
    for key, value in data.items():
        if value is None:
            continue
        default = out.get(key)
        if isinstance(default, (int, float)) and not isinstance(default, bool):
            try:
                value = type(default)(value)
            except (TypeError, ValueError):
                log.warning("Ignoring invalid setting %s=%r", key, value)
                continue
            if value < 0:
                log.warning("Ignoring negative setting %s=%r", key, value)
                continue
        elif isinstance(default, list) and not isinstance(value, list):
            log.warning("Ignoring invalid setting %s=%r", key, value)
            continue
        out[key] = value
    return out


def load_settings() -> Dict[str, Any]:
    defaults = _defaults()
    if not SETTINGS_FILE.exists():
        save_settings(defaults)
        return defaults

    try:
        data = json.loads(SETTINGS_FILE.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # Recover from corruption gracefully
        log.warning("Settings file %s is corrupt; restoring defaults", SETTINGS_FILE)
        save_settings(defaults)
        return defaults
    if not isinstance(data, dict):
        save_settings(defaults)
        return defaults
    return _coerce(data)


def save_settings(data: Dict[str, Any]) -> None:
    SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_FILE.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def push_recent_file(path: str) -> List[str]:
    """Move ``path`` to the front of the recent files list and persist it."""
    s = load_settings()
    recent = [p for p in s.get("recent_files", []) if p != path]
    recent.insert(0, path)
    s["recent_files"] = recent[:MAX_RECENT_FILES]
    s["last_dir"] = str(Path(path).parent)
    save_settings(s)
    return s["recent_files"]


def repair_user_space() -> None:
    """Reset settings to defaults (installer 'Repair' shortcut)."""
    try:
        if SETTINGS_FILE.exists():
            SETTINGS_FILE.unlink()
    except OSError:
        log.warning("Could not remove %s", SETTINGS_FILE, exc_info=True)
    load_settings()
