from __future__ import annotations

import math

import pytest

from permgroups.cosets import CosetTables, FilterLevel, PointLevel, resolve_base_policy
from permgroups.permutation import Permutation

SWAP = Permutation.from_cycles((1, 2))
CYCLE3 = Permutation.from_cycles((1, 2, 3))
CYCLE5 = Permutation.from_cycles((1, 2, 3, 4, 5))


def test_create_sizes() -> None:
    assert CosetTables.create([]).size() == 1
    assert CosetTables.create([SWAP]).size() == 2
    assert CosetTables.create([CYCLE3]).size() == 3
    assert CosetTables.create([SWAP, CYCLE3]).size() == 6
    assert CosetTables.create([SWAP, CYCLE5]).size() == math.factorial(5)


def test_levels_hold_orbits_with_identity_for_base() -> None:
    tables = CosetTables.create([SWAP, CYCLE3])
    assert tables.base() == (1, 2)
    for level in tables.levels:
        assert isinstance(level, PointLevel)
        assert level.table[level.base].is_identity()
        for u, t in level.table.items():
            assert t.image(level.base) == u
    assert set(tables.levels[0].table) == {1, 2, 3}


def test_generates() -> None:
    tables = CosetTables.create([CYCLE3])
    assert tables.generates(Permutation.identity([1, 2, 3]))
    assert tables.generates(CYCLE3.inverse())
    assert not tables.generates(SWAP)
    assert not tables.generates(Permutation.from_cycles((1, 2, 3), (4, 5)))


def test_generated_enumerates_each_element_once() -> None:
    tables = CosetTables.create([SWAP, CYCLE5])
    elements = list(tables.generated())
    assert len(elements) == 120
    assert len(set(elements)) == 120
    assert elements[0].is_identity()
    assert all(tables.generates(g) for g in elements[:20])
    assert list(tables) == elements


def test_extend_reuses_and_returns_self_when_nothing_new() -> None:
    tables = CosetTables.create([CYCLE3])
    assert tables.extend([CYCLE3.inverse()]) is tables
    bigger = tables.extend([SWAP])
    assert bigger.size() == 6
    assert tables.size() == 3
    assert bigger.generators() == (CYCLE3, SWAP)


def test_smallest_policy() -> None:
    g = Permutation.from_cycles((3, 1))
    assert CosetTables.create([g], "first").base() == (3,)
    assert CosetTables.create([g], "smallest").base() == (1,)


def test_policy_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERMGROUPS_BASE_POLICY", "smallest")
    assert resolve_base_policy() == "smallest"
    assert resolve_base_policy("first") == "first"
    monkeypatch.setenv("PERMGROUPS_BASE_POLICY", "bogus")
    with pytest.raises(ValueError):
        resolve_base_policy()


def test_subgroup_tables_drop_and_take() -> None:
    gens = [SWAP, CYCLE3]
    base = CosetTables.create(gens)

    def fixes3(g: Permutation) -> bool:
        return g.image(3) == 3

    tables = CosetTables.subgroup_tables(base, gens, [fixes3])
    assert isinstance(tables.levels[0], FilterLevel)
    assert tables.size() == 6
    assert tables.generates(CYCLE3)
    assert not tables.generates(Permutation.from_cycles((1, 4)))

    inner = tables.drop(1)
    assert inner.size() == 2
    assert inner.generates(SWAP)
    assert not inner.generates(CYCLE3)

    reps = list(tables.take(1).generated())
    assert len(reps) == 3
    assert reps[0].is_identity()
    assert {r.image(3) for r in reps} == {1, 2, 3}


def test_subgroup_tables_with_two_filters() -> None:
    gens = [SWAP, CYCLE5]
    base = CosetTables.create(gens)
    predicates = [lambda g: g.image(5) == 5, lambda g: g.image(4) == 4]
    tables = CosetTables.subgroup_tables(base, gens, predicates)
    assert tables.drop(2).size() == 6
    assert tables.drop(1).size() == 24
    assert len(list(tables.take(2).generated())) == 20
    assert tables.size() == 120


def test_extend_keeps_filter_levels() -> None:
    gens = [SWAP, Permutation.from_cycles((1, 2, 3, 4))]
    tables = CosetTables.subgroup_tables(CosetTables.create(gens), gens, [lambda g: g.image(4) == 4])
    assert tables.size() == 24
    assert tables.extend([CYCLE3]) is tables
    swap45 = Permutation.from_cycles((4, 5))
    bigger = tables.extend([swap45])
    assert bigger.size() == 120
    assert bigger.filter_count() == 1
    assert bigger.drop(1).size() == 24
    assert bigger.generates(swap45)
    assert len(list(bigger.take(1).generated())) == 5
    assert tables.size() == 24


def test_subgroup_tables_tests_each_element_at_most_once() -> None:
    gens = [SWAP, CYCLE5]
    calls = []

    def fixes5(g: Permutation) -> bool:
        calls.append(g)
        return g.image(5) == 5

    tables = CosetTables.subgroup_tables(CosetTables.create(gens), gens, [fixes5])
    assert tables.drop(1).size() == 24
    assert len(list(tables.take(1).generated())) == 5
    assert len(calls) <= 120
    assert len(set(calls)) == len(calls)
