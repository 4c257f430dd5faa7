from __future__ import annotations

import pytest

from permgroups.factorization import Factor, factorize, is_prime, largest_component, remove_factor


def test_factorize() -> None:
    assert factorize(1) == []
    assert factorize(12) == [Factor(2, 2), Factor(3, 1)]
    assert factorize(97) == [Factor(97, 1)]
    assert factorize(360) == [Factor(2, 3), Factor(3, 2), Factor(5, 1)]
    with pytest.raises(ValueError):
        factorize(0)


def test_is_prime() -> None:
    assert [n for n in range(20) if is_prime(n)] == [2, 3, 5, 7, 11, 13, 17, 19]


def test_remove_factor() -> None:
    assert remove_factor(24, 2) == 3
    assert remove_factor(24, 3) == 8
    assert remove_factor(16, 2) == 1
    assert remove_factor(7, 2) == 7


def test_largest_component() -> None:
    assert largest_component(12) == Factor(2, 2)
    assert largest_component(12).product == 4
    assert largest_component(60).prime == 5
    assert largest_component(6).prime == 3
    with pytest.raises(ValueError):
        largest_component(1)
