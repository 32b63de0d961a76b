# -*- coding: utf-8 -*-
from __future__ import annotations

import pytest

from domain.blocks import ROOT_ID, BlockType, ProtectionKind
from domain.errors import InvalidConnection, InvalidValue, NotFound
from domain.project import LOCATION_TERMINALS, Project, ProjectInfo


def test_location_gets_ring_terminals_and_linked_external_busbar() -> None:
    p = Project()
    loc = p.add_location()

    assert loc.name == "Location 1"
    assert loc.parent_id == ROOT_ID
    outer = p.terminals_of(loc.id)
    assert [t.side for t in outer] == list(range(LOCATION_TERMINALS))

    (ext,) = p.blocks_of_type(BlockType.EXTERNAL_BUSBAR)
    assert ext.parent_id == loc.id
    inner = p.terminals_of(ext.id)
    assert len(inner) == LOCATION_TERMINALS
    assert len(p.all_connections()) == LOCATION_TERMINALS
    for a, b in zip(outer, inner):
        assert p.get_connection(b.id, a.id).joins(a.id, b.id)


def test_default_names_count_project_wide_or_per_parent() -> None:
    p = Project()
    assert p.add_supply().name == "Supply 1"
    assert p.add_supply().name == "Supply 2"
    loc1 = p.add_location()
    loc2 = p.add_location()
    assert loc2.name == "Location 2"

    assert p.add_busbar(loc1.id).name == "Busbar 1"
    assert p.add_busbar(loc1.id).name == "Busbar 2"
    assert p.add_busbar(loc2.id).name == "Busbar 1"
    assert p.add_transformer_ups(loc1.id).name == "Transformer/UPS 1"

    bus = p.blocks_of_type(BlockType.BUSBAR)[0]
    assert p.add_row(bus.id).name == "Row 1"
    assert p.add_row(bus.id).name == "Row 2"


def test_terminal_counts_per_block_type() -> None:
    p = Project()
    loc = p.add_location()
    assert len(p.terminals_of(p.add_supply().id)) == 1
    assert len(p.terminals_of(p.add_alternator().id)) == 1
    assert len(p.terminals_of(p.add_conductor().id)) == 2
    assert len(p.terminals_of(p.add_load(loc.id).id)) == 1
    assert len(p.terminals_of(p.add_transformer_ups(loc.id).id)) == 2
    bus = p.add_busbar(loc.id)
    assert p.terminals_of(bus.id) == []
    assert len(p.terminals_of(p.add_row(bus.id).id)) == 2


def test_children_require_the_right_parent_type() -> None:
    p = Project()
    supply = p.add_supply()
    with pytest.raises(InvalidValue):
        p.add_busbar(supply.id)
    with pytest.raises(InvalidValue):
        p.add_row(supply.id)
    with pytest.raises(NotFound):
        p.add_load(12345)


def test_self_connection_fails() -> None:
    p = Project()
    (t,) = p.terminals_of(p.add_supply().id)
    with pytest.raises(InvalidConnection):
        p.add_connection(t.id, t.id)
    assert p.get_connections(t.id) == []


def test_connection_succeeds_once_and_is_visible_from_both_ends() -> None:
    p = Project()
    (s,) = p.terminals_of(p.add_supply().id)
    c0, _c1 = p.terminals_of(p.add_conductor().id)

    conn = p.add_connection(s.id, c0.id)
    assert p.get_connections(s.id) == [conn]
    assert p.get_connections(c0.id) == [conn]

    with pytest.raises(InvalidConnection):
        p.add_connection(s.id, c0.id)
    with pytest.raises(InvalidConnection):
        p.add_connection(c0.id, s.id)
    assert len(p.get_connections(s.id)) == 1


def test_connection_endpoints_must_be_existing_terminals() -> None:
    p = Project()
    supply = p.add_supply()
    (s,) = p.terminals_of(supply.id)
    with pytest.raises(InvalidConnection):
        p.add_connection(s.id, supply.id)
    with pytest.raises(InvalidConnection):
        p.add_connection(s.id, 999)
    assert p.all_connections() == []


def test_remove_connection_and_missing_connection() -> None:
    p = Project()
    (s,) = p.terminals_of(p.add_supply().id)
    (a,) = p.terminals_of(p.add_alternator().id)
    p.add_connection(s.id, a.id)
    p.remove_connection(a.id, s.id)
    assert p.get_connections(s.id) == []
    with pytest.raises(NotFound):
        p.remove_connection(s.id, a.id)


def test_deleting_a_location_cascades() -> None:
    p = Project()
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    row = p.add_row(bus.id)
    load = p.add_load(loc.id)
    (lt,) = p.terminals_of(load.id)
    r0, _r1 = p.terminals_of(row.id)
    p.add_connection(lt.id, r0.id)
    (s,) = p.terminals_of(p.add_supply().id)
    p.add_connection(s.id, p.terminals_of(loc.id)[0].id)

    doomed = [loc.id] + [b.id for b in p.descendants(loc.id)]
    removed = p.remove_block(loc.id)

    assert sorted(removed) == sorted(doomed)
    for bid in (loc.id, bus.id, row.id, load.id, lt.id):
        with pytest.raises(NotFound):
            p.get_block(bid)
    gone = set(removed)
    assert all(c.left_id not in gone and c.right_id not in gone for c in p.all_connections())
    assert p.get_connections(s.id) == []


def test_not_found_message_is_plain() -> None:
    p = Project()
    with pytest.raises(NotFound) as exc:
        p.get_block(42)
    assert str(exc.value) == "Block with the ID '42' not found."
    assert isinstance(exc.value, KeyError)


def test_rename_rules() -> None:
    p = Project()
    supply = p.add_supply()
    p.rename(supply.id, "  Grid  ")
    assert supply.name == "Grid"
    with pytest.raises(InvalidValue):
        p.rename(supply.id, "   ")
    with pytest.raises(InvalidValue):
        p.rename(supply.id, "x" * 51)
    with pytest.raises(InvalidValue):
        p.rename(p.terminals_of(supply.id)[0].id, "T")
    assert supply.name == "Grid"


def test_row_protection_rules() -> None:
    p = Project()
    bus = p.add_busbar(p.add_location().id)
    row = p.add_row(bus.id)
    assert row.meta == {"protection": "Pin", "rating": 0}

    p.set_row_protection(row.id, ProtectionKind.CIRCUIT_BREAKER, 16)
    assert row.meta == {"protection": "CircuitBreaker", "rating": 16}
    with pytest.raises(InvalidValue):
        p.set_row_protection(row.id, ProtectionKind.CIRCUIT_BREAKER, -1)
    with pytest.raises(InvalidValue):
        p.set_row_protection(row.id, ProtectionKind.PIN, 10)

    p.set_row_protection(row.id, ProtectionKind.PIN)
    assert row.meta == {"protection": "Pin", "rating": 0}


def test_project_info_update_is_all_or_nothing() -> None:
    info = ProjectInfo()
    with pytest.raises(InvalidValue):
        info.update(designer="Ana", name="")
    assert info.designer == ""
    with pytest.raises(InvalidValue):
        info.update(checker="x" * 33)
    with pytest.raises(InvalidValue):
        info.update(major_version=-1)
    with pytest.raises(InvalidValue):
        info.update(colour="red")

    info.update(name="Plant", designer="Ana", major_version=2)
    assert (info.name, info.designer, info.major_version) == ("Plant", "Ana", 2)


def test_owning_location() -> None:
    p = Project()
    loc = p.add_location()
    bus = p.add_busbar(loc.id)
    row = p.add_row(bus.id)
    assert p.owning_location(p.terminals_of(row.id)[0].id).id == loc.id
    assert p.owning_location(loc.id).id == loc.id
    assert p.owning_location(p.add_supply().id) is None


def test_from_dict_rejects_parent_cycles() -> None:
    blocks = [
        {"id": 0, "type": "Location"},
        {"id": 1, "parent_id": 2, "type": "Busbar"},
        {"id": 2, "parent_id": 1, "type": "Row"},
    ]
    with pytest.raises(InvalidValue, match="parent cycle"):
        Project.from_dict({"blocks": blocks})
    with pytest.raises(InvalidValue):
        Project.from_dict({"blocks": [{"id": 3, "parent_id": 3, "type": "Load"}]})
