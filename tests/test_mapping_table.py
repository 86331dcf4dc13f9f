from __future__ import annotations

import pytest

from leader_keys.actions import InvokeAction
from leader_keys.keymaps import (
    Hotkey,
    Mapping,
    MappingConflictError,
    MappingTable,
    SequenceResolver,
)


def seq(*keys: str) -> tuple[Hotkey, ...]:
    return tuple(Hotkey.of(key) for key in keys)


def make_mapping(*keys: str, action_id: str = "core.test") -> Mapping:
    return Mapping(trigger=seq(*keys), actions=(InvokeAction(action_id),))


def test_mapping_requires_trigger_and_actions() -> None:
    with pytest.raises(ValueError):
        Mapping(trigger=(), actions=(InvokeAction("x"),))
    with pytest.raises(ValueError):
        Mapping(trigger=seq("A"), actions=())


def test_table_keeps_display_order() -> None:
    table = MappingTable(
        [make_mapping("B", "A"), make_mapping("B"), make_mapping("A")]
    )

    assert [m.trigger for m in table] == [seq("A"), seq("B"), seq("B", "A")]


def test_add_rejects_duplicate_trigger() -> None:
    table = MappingTable([make_mapping("A", action_id="first")])
    before = table.mappings

    with pytest.raises(MappingConflictError) as excinfo:
        table.add(make_mapping("A", action_id="second"))

    assert excinfo.value.existing.actions[0].id == "first"
    assert len(table) == 1
    assert table.mappings == before


def test_update_ignores_the_entry_being_edited() -> None:
    table = MappingTable([make_mapping("A", action_id="old")])

    table.update(0, make_mapping("A", action_id="new"))

    assert table[0].actions[0].id == "new"


def test_update_rejects_collision_with_other_entry() -> None:
    table = MappingTable([make_mapping("A"), make_mapping("B")])

    with pytest.raises(MappingConflictError):
        table.update(table.index_of(table.find_exact(seq("B"))), make_mapping("A"))

    assert table.find_exact(seq("B")) is not None


def test_remove_and_bad_index() -> None:
    table = MappingTable([make_mapping("A")])

    removed = table.remove(0)

    assert removed.trigger == seq("A")
    assert len(table) == 0
    with pytest.raises(IndexError):
        table.remove(0)


def test_mutations_notify_listener_and_bump_revision() -> None:
    calls: list[int] = []
    table = MappingTable(on_change=lambda t: calls.append(len(t)))

    table.add(make_mapping("A"))
    table.add(make_mapping("B"))
    with pytest.raises(MappingConflictError):
        table.add(make_mapping("B"))

    assert calls == [1, 2]
    assert table.revision() == 2


def test_failing_listener_rolls_back_mutation() -> None:
    table = MappingTable([make_mapping("A"), make_mapping("B")])

    def refuse(_table: MappingTable) -> None:
        raise OSError("disk full")

    table.on_change = refuse
    before = table.mappings

    with pytest.raises(OSError):
        table.add(make_mapping("C"))
    with pytest.raises(OSError):
        table.update(0, make_mapping("D"))
    with pytest.raises(OSError):
        table.remove(1)

    assert table.mappings == before
    assert table.revision() == 0


def test_find_by_prefix_and_exact() -> None:
    table = MappingTable([make_mapping("A"), make_mapping("A", "B"), make_mapping("C")])

    assert len(table.find_by_prefix(())) == 3
    assert [m.trigger for m in table.find_by_prefix(seq("A"))] == [seq("A"), seq("A", "B")]
    assert table.find_exact(seq("A", "B")) is not None
    assert table.find_exact(seq("B")) is None


def test_resolver_statuses() -> None:
    table = MappingTable(
        [make_mapping("A"), make_mapping("A", "B"), make_mapping("C", "D"), make_mapping("E")]
    )
    resolver = SequenceResolver(table)

    assert resolver.resolve(seq("A")).status == "ambiguous"
    assert resolver.resolve(seq("A", "B")).status == "exact"
    assert resolver.resolve(seq("C")).status == "pending"
    assert resolver.resolve(seq("E")).status == "exact"
    assert resolver.resolve(seq("C", "X")).status == "miss"


def test_resolver_ambiguous_carries_exact_match() -> None:
    table = MappingTable([make_mapping("A", action_id="x"), make_mapping("A", "B")])

    result = SequenceResolver(table).resolve(seq("A"))

    assert result.match is not None
    assert result.match.actions[0].id == "x"
    assert len(result.candidates) == 2


def test_resolver_sees_table_mutations() -> None:
    table = MappingTable()
    resolver = SequenceResolver(table)

    assert resolver.resolve(seq("X")).status == "miss"

    table.add(make_mapping("X"))

    assert resolver.resolve(seq("X")).status == "exact"
