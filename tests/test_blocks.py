from __future__ import annotations

import pytest

from permgroups.blocks import BlockSystem
from permgroups.group import PermutationGroup, generate_group
from permgroups.permutation import Permutation

R = Permutation.from_cycles((1, 2, 3, 4))
S = Permutation.from_cycles((1, 3))


def _dihedral() -> PermutationGroup:
    return generate_group([1, 2, 3, 4], R, S)


def test_rejects_overlapping_or_empty_blocks() -> None:
    with pytest.raises(ValueError):
        BlockSystem([[1, 2], [2, 3]])
    with pytest.raises(ValueError):
        BlockSystem([[1], []])


def test_orbits() -> None:
    group = generate_group(range(1, 6), Permutation.from_cycles((1, 2)), Permutation.from_cycles((3, 4)))
    orbits = BlockSystem.orbits(group, [5])
    assert orbits.blocks == ((1, 2), (3, 4), (5,))
    assert orbits.block_of(4) == 1
    with pytest.raises(ValueError):
        orbits.block_of(9)


def test_minimal_block_system() -> None:
    blocks = BlockSystem.minimal(_dihedral(), [1, 3])
    assert blocks == BlockSystem([[1, 3], [2, 4]])
    assert blocks.is_preserved_by(_dihedral())
    assert len(BlockSystem.minimal(_dihedral(), [1, 2])) == 1
    with pytest.raises(ValueError):
        BlockSystem.minimal(_dihedral(), [])


def test_induced_permutation_and_block_action() -> None:
    blocks = BlockSystem([[1, 3], [2, 4]])
    assert blocks.induced_permutation(R) == Permutation.from_cycles((0, 1))
    assert blocks.induced_permutation(S).is_identity()
    action = blocks.block_action(_dihedral())
    assert action.size() == 2
    with pytest.raises(ValueError):
        BlockSystem([[1, 2], [3, 4]]).induced_permutation(R)
    assert not BlockSystem([[1, 2], [3, 4]]).is_preserved_by(_dihedral())


def test_singletons() -> None:
    blocks = BlockSystem.singletons([3, 1, 3, 2])
    assert len(blocks) == 3
    assert blocks.domain == (3, 1, 2)
    assert BlockSystem.singletons([1, 2, 3, 4]).block_action(_dihedral()).size() == 8
    assert list(blocks) == [(3,), (1,), (2,)]


def test_is_discrete() -> None:
    assert BlockSystem.singletons([1, 2, 3]).is_discrete()
    assert BlockSystem([]).is_discrete()
    assert not BlockSystem([[1, 3], [2, 4]]).is_discrete()
