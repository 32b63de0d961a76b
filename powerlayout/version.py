# -*- coding: utf-8 -*-
"""Power Layout version single source of truth.

``version.json`` ships as package data next to this module, so source
checkouts, installed wheels and PyInstaller bundles all read the same file.
"""

from __future__ import annotations

import json
from pathlib import Path

from infra.paths import app_root

_DEFAULT_VERSION = "0.0.0"


def version_file() -> Path:
    return app_root() / "powerlayout" / "version.json"


def _read_version_json(version_path: Path) -> str:
    try:
        data = json.loads(version_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return _DEFAULT_VERSION
    return str(data.get("semver") or data.get("version") or _DEFAULT_VERSION)


__version__ = _read_version_json(version_file())
