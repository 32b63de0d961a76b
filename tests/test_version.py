# -*- coding: utf-8 -*-
from __future__ import annotations

import json

from powerlayout import version


def test_version_file_ships_inside_the_package() -> None:
    assert version.version_file().is_file()
    assert version.__version__ == "0.1.0"


def test_version_is_read_from_the_install_root(tmp_path, monkeypatch) -> None:
    pkg = tmp_path / "powerlayout"
    pkg.mkdir()
    (pkg / "version.json").write_text(json.dumps({"semver": "2.3.4"}), encoding="utf-8")
    monkeypatch.setattr(version, "app_root", lambda: tmp_path)
    assert version._read_version_json(version.version_file()) == "2.3.4"


def test_missing_or_corrupt_version_file_falls_back(tmp_path) -> None:
    assert version._read_version_json(tmp_path / "nope.json") == "0.0.0"
    bad = tmp_path / "version.json"
    bad.write_text("{not json", encoding="utf-8")
    assert version._read_version_json(bad) == "0.0.0"
