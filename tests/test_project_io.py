# -*- coding: utf-8 -*-
from __future__ import annotations

import json

import pytest

from domain.blocks import ProtectionKind
from domain.project import Project
from storage.project_io import (
    FILE_TYPE,
    SCHEMA_VERSION,
    ProjectFileError,
    load_project,
    norm_project_path,
    project_from_payload,
    project_to_payload,
    save_project,
)


def _sample() -> Project:
    p = Project()
    p.info.update(name="Plant A", designer="Ana", major_version=1)
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    row = p.add_row(bus.id, ProtectionKind.CIRCUIT_BREAKER)
    p.set_row_protection(row.id, ProtectionKind.CIRCUIT_BREAKER, 32)
    load = p.add_load(loc.id)
    p.set_render_position(bus.id, -100, 40)
    conn = p.add_connection(p.terminals_of(load.id)[0].id, p.terminals_of(row.id)[0].id)
    conn.add_render_point(20, -60)
    return p


def test_save_and_load_keep_everything(tmp_path) -> None:
    original = _sample()
    path = save_project(original, str(tmp_path / "plant"))
    assert path.endswith(".plp")

    loaded = load_project(path)
    assert loaded.counts() == original.counts()
    assert loaded.info == original.info
    for block in original.all_blocks():
        assert loaded.get_block(block.id) == block
    assert [c.to_list() for c in loaded.all_connections()] == [c.to_list() for c in original.all_connections()]

    fresh = loaded.add_supply()
    assert fresh.id == max(b.id for b in original.all_blocks()) + 1


def test_payload_shape() -> None:
    payload = project_to_payload(_sample())
    assert payload["file_type"] == FILE_TYPE
    assert payload["schema_version"] == SCHEMA_VERSION
    assert [20, -60] == payload["connections"][-1][2:]
    json.dumps(payload)


def test_norm_project_path() -> None:
    assert norm_project_path("  a/b  ") == "a/b.plp"
    assert norm_project_path("x.PLP") == "x.PLP"
    assert norm_project_path("   ") == ""


def test_save_without_path_fails() -> None:
    with pytest.raises(ValueError):
        save_project(Project(), "")


def test_load_rejects_bad_files(tmp_path) -> None:
    missing = tmp_path / "missing.plp"
    with pytest.raises(ProjectFileError):
        load_project(str(missing))

    corrupt = tmp_path / "corrupt.plp"
    corrupt.write_text("{not json", encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(str(corrupt))

    other = tmp_path / "other.plp"
    other.write_text(json.dumps({"file_type": "SOMETHING_ELSE"}), encoding="utf-8")
    with pytest.raises(ProjectFileError):
        load_project(str(other))


def test_payload_checks() -> None:
    payload = project_to_payload(_sample())
    with pytest.raises(ProjectFileError):
        project_from_payload(dict(payload, schema_version=SCHEMA_VERSION + 1))

    dup = dict(payload, blocks=payload["blocks"] + [payload["blocks"][0]])
    with pytest.raises(ProjectFileError):
        project_from_payload(dup)

    orphan = dict(payload, blocks=payload["blocks"] + [{"id": 500, "parent_id": 404, "type": "Load"}])
    with pytest.raises(ProjectFileError):
        project_from_payload(orphan)

    looped = dict(payload, blocks=payload["blocks"] + [
        {"id": 500, "parent_id": 501, "type": "Load"},
        {"id": 501, "parent_id": 500, "type": "Load"},
    ])
    with pytest.raises(ProjectFileError):
        project_from_payload(looped)

    bad_conn = dict(payload, connections=[[1, 1]])
    with pytest.raises(ProjectFileError):
        project_from_payload(bad_conn)

    odd = dict(payload, connections=[[1, 2, 3]])
    with pytest.raises(ProjectFileError):
        project_from_payload(odd)
