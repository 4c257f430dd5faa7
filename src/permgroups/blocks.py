"""Block systems: partitions of a domain that a group permutes blockwise."""

from __future__ import annotations

from collections import deque
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple

from .group import AbstractPermutationGroup, PermutationGroup, generate_group, support_points
from .partition import Partition
from .permutation import Permutation


def _domain_for(group: AbstractPermutationGroup, extra: Iterable[Hashable] = ()) -> List[Hashable]:
    points: Dict[Hashable, None] = dict.fromkeys(support_points(group))
    points.update(dict.fromkeys(extra))
    return list(points)


class BlockSystem:
    """Partition of a finite domain into disjoint, non-empty blocks."""

    def __init__(self, blocks: Iterable[Iterable[Hashable]]) -> None:
        self._blocks: Tuple[Tuple[Hashable, ...], ...] = tuple(
            tuple(dict.fromkeys(block)) for block in blocks
        )
        self._index: Dict[Hashable, int] = {}
        for i, block in enumerate(self._blocks):
            if not block:
                raise ValueError(f"Block {i} is empty.")
            for x in block:
                if x in self._index:
                    raise ValueError(f"Point {x!r} appears in more than one block.")
                self._index[x] = i

    @classmethod
    def singletons(cls, domain: Iterable[Hashable]) -> "BlockSystem":
        return cls([x] for x in dict.fromkeys(domain))

    @classmethod
    def _from_partition(cls, points: Sequence[Hashable], partition: Partition) -> "BlockSystem":
        return cls([points[i] for i in cells] for cells in partition.classes())

    @classmethod
    def orbits(
        cls,
        group: AbstractPermutationGroup,
        domain: Optional[Iterable[Hashable]] = None,
    ) -> "BlockSystem":
        """Orbits of ``group`` on its support (plus any extra ``domain`` points)."""
        points = _domain_for(group, domain or ())
        cell = {x: i for i, x in enumerate(points)}
        partition = Partition(len(points))
        for g in group.generators():
            for x in points:
                partition.combine(cell[x], cell[g.image(x)])
        return cls._from_partition(points, partition)

    @classmethod
    def minimal(
        cls,
        group: AbstractPermutationGroup,
        points: Iterable[Hashable],
        domain: Optional[Iterable[Hashable]] = None,
    ) -> "BlockSystem":
        """Finest block system preserved by ``group`` with all ``points`` in one block."""
        seeds = list(dict.fromkeys(points))
        if not seeds:
            raise ValueError("At least one point is required to seed a block.")
        domain_pts = _domain_for(group, list(domain or ()) + seeds)
        cell = {x: i for i, x in enumerate(domain_pts)}
        partition = Partition(len(domain_pts))
        pending = deque()
        for x in seeds[1:]:
            if partition.combine(cell[seeds[0]], cell[x]):
                pending.append((seeds[0], x))
        while pending:
            a, b = pending.popleft()
            for g in group.generators():
                ga, gb = g.image(a), g.image(b)
                if partition.combine(cell[ga], cell[gb]):
                    pending.append((ga, gb))
        return cls._from_partition(domain_pts, partition)

    # queries

    @property
    def blocks(self) -> Tuple[Tuple[Hashable, ...], ...]:
        return self._blocks

    @property
    def domain(self) -> Tuple[Hashable, ...]:
        return tuple(self._index)

    def is_discrete(self) -> bool:
        """True when every block is a single point, so the block action is faithful."""
        return all(len(block) == 1 for block in self._blocks)

    def block_of(self, point: Hashable) -> int:
        try:
            return self._index[point]
        except KeyError:
            raise ValueError(f"Point {point!r} is not in the block system.") from None

    def _induced_mapping(self, g: Permutation) -> Optional[Dict[int, int]]:
        mapping: Dict[int, int] = {}
        for i, block in enumerate(self._blocks):
            targets = {self._index.get(g.image(x)) for x in block}
            if len(targets) != 1 or None in targets:
                return None
            mapping[i] = targets.pop()
        if len(set(mapping.values())) != len(mapping):
            return None
        return mapping

    def induced_permutation(self, g: Permutation) -> Permutation:
        """Permutation of block indices induced by ``g``."""
        mapping = self._induced_mapping(g)
        if mapping is None:
            raise ValueError(f"{g} does not map blocks onto blocks.")
        return Permutation(mapping)

    def is_preserved_by(self, group: AbstractPermutationGroup) -> bool:
        return all(self._induced_mapping(g) is not None for g in group.generators())

    def block_action(self, group: AbstractPermutationGroup) -> PermutationGroup:
        """The group induced by ``group`` on the block indices."""
        induced = [self.induced_permutation(g) for g in group.generators()]
        return generate_group(range(len(self._blocks)), *induced)

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Tuple[Hashable, ...]]:
        return iter(self._blocks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BlockSystem):
            return NotImplemented
        return {frozenset(b) for b in self._blocks} == {frozenset(b) for b in other._blocks}

    def __hash__(self) -> int:
        return hash(frozenset(frozenset(b) for b in self._blocks))

    def __repr__(self) -> str:
        inner = ", ".join("{" + ", ".join(repr(x) for x in b) + "}" for b in self._blocks)
        return f"BlockSystem([{inner}])"


__all__ = ["BlockSystem"]
