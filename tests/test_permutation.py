from __future__ import annotations

import pytest

from permgroups.permutation import Permutation


def test_image_preimage_and_fixed_points() -> None:
    p = Permutation({1: 2, 2: 3, 3: 1, 4: 4})
    assert p.image(1) == 2
    assert p.preimage(1) == 3
    assert p(3) == 1
    assert p.image(4) == 4
    assert p.image(99) == 99
    assert p.support() == frozenset({1, 2, 3})
    assert p.domain == (1, 2, 3, 4)


def test_compose_applies_right_factor_first() -> None:
    a = Permutation.from_cycles((1, 2))
    b = Permutation.from_cycles((1, 2, 3))
    ab = a.compose(b)
    for x in (1, 2, 3, 4):
        assert ab.image(x) == a.image(b.image(x))
    assert a * b == ab
    assert ab == Permutation.from_cycles((2, 3))


def test_inverse_and_identity() -> None:
    p = Permutation.parse("(1 2 3)(4 5)")
    e = Permutation.identity([1, 2, 3, 4, 5])
    assert p.compose(p.inverse()) == e
    assert p.inverse().compose(p).is_identity()
    assert e == Permutation.identity()
    assert hash(e) == hash(Permutation.identity([7]))
    assert p.order() == 6


def test_rejects_non_bijection() -> None:
    with pytest.raises(ValueError):
        Permutation({1: 2, 2: 2})
    with pytest.raises(ValueError):
        Permutation.from_cycles((1, 2), (2, 3))
    with pytest.raises(ValueError):
        Permutation({1: 2, 2: 1}, domain=[1])


def test_parse_and_format_cycles() -> None:
    p = Permutation.parse("(1 2 3)(4 5)")
    assert str(p) == "(1 2 3)(4 5)"
    assert p.cycles() == [(1, 2, 3), (4, 5)]
    assert str(Permutation.parse("()")) == "()"
    named = Permutation.parse("(a b)")
    assert named.image("a") == "b"
    assert eval(repr(p), {"Permutation": Permutation}) == p
    with pytest.raises(ValueError):
        Permutation.parse("1 2 3")
    with pytest.raises(ValueError):
        Permutation.parse("")


def test_stabilizes() -> None:
    p = Permutation.from_cycles((1, 2), (3, 4))
    assert p.stabilizes({1, 2})
    assert p.stabilizes({1, 2, 3, 4})
    assert not p.stabilizes({1, 3})
