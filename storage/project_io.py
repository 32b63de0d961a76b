# -*- coding: utf-8 -*-
"""Project JSON I/O helpers.

The diagram engine treats the loaded :class:`~domain.project.Project` as
authoritative; this module only moves it to and from disk.

Connections are stored as flat integer lists ``[left, right, x1, y1, ...]``.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Dict

from domain.errors import DiagramError
from domain.project import Project

log = logging.getLogger(__name__)

PROJECT_EXT = ".plp"
FILE_TYPE = "POWERLAYOUT_PROJECT"
SCHEMA_VERSION = 1


class ProjectFileError(IOError):
    """The file cannot be read or does not hold a valid project."""


def norm_project_path(file_path: str, ext: str = PROJECT_EXT) -> str:
    file_path = (file_path or "").strip()
    if not file_path:
        return ""
    if not file_path.lower().endswith(ext):
        file_path += ext
    return file_path


def project_to_payload(project: Project) -> Dict:
    data = project.to_dict()
    data["file_type"] = FILE_TYPE
    data["schema_version"] = SCHEMA_VERSION
    return data


def project_from_payload(data: Dict) -> Project:
    if not isinstance(data, dict) or data.get("file_type") != FILE_TYPE:
        raise ProjectFileError("Not a power layout project file.")
    version = int(data.get("schema_version", 0) or 0)
    if version > SCHEMA_VERSION:
        raise ProjectFileError(f"Project file schema {version} is newer than supported ({SCHEMA_VERSION}).")
    try:
        return Project.from_dict(data)
    except (DiagramError, KeyError, TypeError, ValueError) as e:
        raise ProjectFileError(f"Corrupt project file: {e}") from e


def save_project(project: Project, file_path: str) -> str:
    file_path = norm_project_path(file_path)
    if not file_path:
        raise ValueError("File not defined. Use 'Save as…' to choose a name.")
    t0 = time.perf_counter()
    payload = json.dumps(project_to_payload(project), indent=2, ensure_ascii=False)
    folder = os.path.dirname(file_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(payload)
    blocks, conns = project.counts()
    log.info(
        "Project saved file=%s blocks=%d connections=%d (%.1f ms)",
        file_path, blocks, conns, (time.perf_counter() - t0) * 1000.0,
    )
    return file_path


def load_project(file_path: str) -> Project:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ProjectFileError(f"Error loading '{file_path}': {e}") from e
    project = project_from_payload(data)
    blocks, conns = project.counts()
    log.info("Project loaded file=%s blocks=%d connections=%d", file_path, blocks, conns)
    return project
