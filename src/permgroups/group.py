"""Permutation groups given by generators, backed by coset tables."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .cosets import CosetTables, Predicate, resolve_base_policy
from .permutation import Permutation

Predicates = Union[Predicate, Sequence[Predicate]]


class AbstractPermutationGroup:
    """Interface shared by every permutation group in this package.

    Groups are immutable values: ``extend`` and ``subgroup`` return new groups.
    """

    def generators(self) -> Tuple[Permutation, ...]:
        raise NotImplementedError

    def support(self) -> FrozenSet[Hashable]:
        raise NotImplementedError

    def contains(self, x: Any) -> bool:
        raise NotImplementedError

    def size(self) -> int:
        raise NotImplementedError

    def elements(self) -> Iterator[Permutation]:
        raise NotImplementedError

    def identity(self) -> Permutation:
        raise NotImplementedError

    def extend(self, new_generators: Iterable[Permutation]) -> "AbstractPermutationGroup":
        raise NotImplementedError

    def subgroup(self, predicates: Predicates) -> "SubgroupView":
        raise NotImplementedError

    def materialize(self) -> "AbstractPermutationGroup":
        return self

    # derived operations

    def is_subgroup_of(self, other: "AbstractPermutationGroup") -> bool:
        other = other.materialize()
        return self.size() <= other.size() and all(other.contains(g) for g in self.generators())

    def contains_all(self, items: Any) -> bool:
        if isinstance(items, AbstractPermutationGroup):
            return items.is_subgroup_of(self)
        if isinstance(items, LeftCoset):
            return self.contains_all(items.group) and self.contains(items.representative)
        try:
            values = iter(items)
        except TypeError:
            return False
        group = self.materialize()
        return all(group.contains(x) for x in values)

    def stabilizes(self, points: Iterable[Hashable]) -> bool:
        pts = set(points)
        return all(g.stabilizes(pts) for g in self.generators())

    def orbit(self, point: Hashable) -> List[Hashable]:
        """Orbit of ``point`` in breadth-first order."""
        seen: Dict[Hashable, None] = {point: None}
        queue = deque([point])
        while queue:
            x = queue.popleft()
            for g in self.generators():
                y = g.image(x)
                if y not in seen:
                    seen[y] = None
                    queue.append(y)
        return list(seen)

    def index(self, subgroup: "AbstractPermutationGroup") -> int:
        if not subgroup.is_subgroup_of(self):
            raise ValueError(f"{subgroup} is not a subgroup of {self}.")
        return self.size() // subgroup.size()

    # python protocol

    def __contains__(self, x: Any) -> bool:
        return self.contains(x)

    def __iter__(self) -> Iterator[Permutation]:
        return self.elements()

    def __len__(self) -> int:
        return self.size()

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, AbstractPermutationGroup):
            return NotImplemented
        return self.is_subgroup_of(other)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AbstractPermutationGroup):
            return NotImplemented
        if self is other:
            return True
        other = other.materialize()
        return self.size() == other.size() and all(other.contains(g) for g in self.generators())

    def __hash__(self) -> int:
        return hash(self.size())

    def __str__(self) -> str:
        return "<" + ", ".join(str(g) for g in self.generators()) + ">"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class PermutationGroup(AbstractPermutationGroup):
    """Group generated by a list of permutations.

    A group may carry precomputed coset tables.  Without them every query
    that needs the tables rebuilds them; ``materialize()`` returns an
    equivalent group that carries them.
    """

    def __init__(
        self,
        generators: Iterable[Permutation],
        tables: Optional[CosetTables] = None,
        *,
        policy: Optional[str] = None,
    ) -> None:
        self._generators = tuple(generators)
        self._tables = tables
        self._policy = tables.policy if tables is not None else resolve_base_policy(policy)

    @property
    def is_materialized(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> CosetTables:
        if self._tables is not None:
            return self._tables
        return CosetTables.create(self._generators, self._policy)

    def materialize(self) -> "PermutationGroup":
        if self._tables is not None:
            return self
        return PermutationGroup(self._generators, self.tables)

    def generators(self) -> Tuple[Permutation, ...]:
        if self._tables is not None:
            return self._tables.generators()
        return self._generators

    def support(self) -> FrozenSet[Hashable]:
        if self._tables is not None:
            return self._tables.support()
        points = set()
        for g in self._generators:
            points.update(g.support())
        return frozenset(points)

    def contains(self, x: Any) -> bool:
        if not isinstance(x, Permutation):
            return False
        return self.tables.generates(x)

    def size(self) -> int:
        return self.tables.size()

    def elements(self) -> Iterator[Permutation]:
        return self.tables.generated()

    def identity(self) -> Permutation:
        if self._tables is not None:
            return self._tables.identity
        domain: Dict[Hashable, None] = {}
        for g in self._generators:
            domain.update(dict.fromkeys(g.domain))
        return Permutation.identity(domain)

    def extend(self, new_generators: Iterable[Permutation]) -> "PermutationGroup":
        tables = self.tables
        fresh: List[Permutation] = []
        for g in new_generators:
            if not tables.generates(g) and g not in fresh:
                fresh.append(g)
        if not fresh:
            return self
        return PermutationGroup(self.generators() + tuple(fresh), tables.extend(fresh))

    def subgroup(self, predicates: Predicates) -> "SubgroupView":
        """Subgroup of the elements passing every predicate.

        Each predicate must cut out a subgroup.  With materialized tables the
        filtered chain is built level by level; otherwise the group is
        enumerated by closure and the survivors regenerated.
        """
        filters = [predicates] if callable(predicates) else list(predicates)
        if self._tables is None:
            return _subgroup_by_closure(self, filters)
        k = len(filters)
        tables = CosetTables.subgroup_tables(self._tables, self.generators(), filters)
        inner_tables = tables.drop(k)
        inner = PermutationGroup(inner_tables.generators(), inner_tables)
        reps = list(tables.take(k).generated())
        return SubgroupView(reps, inner, self)


class SubgroupView(AbstractPermutationGroup):
    """Subgroup together with its left coset representatives in an ambient group."""

    def __init__(
        self,
        representatives: Sequence[Permutation],
        inner: AbstractPermutationGroup,
        ambient: AbstractPermutationGroup,
    ) -> None:
        self._representatives = tuple(representatives)
        self._inner = inner.materialize()
        self._ambient = ambient

    @property
    def representatives(self) -> Tuple[Permutation, ...]:
        return self._representatives

    @property
    def inner(self) -> AbstractPermutationGroup:
        return self._inner

    @property
    def ambient(self) -> AbstractPermutationGroup:
        return self._ambient

    def cosets(self) -> List["LeftCoset"]:
        return [LeftCoset(r, self._inner) for r in self._representatives]

    def generators(self) -> Tuple[Permutation, ...]:
        return self._inner.generators()

    def support(self) -> FrozenSet[Hashable]:
        return self._inner.support()

    def contains(self, x: Any) -> bool:
        return self._inner.contains(x)

    def size(self) -> int:
        return self._inner.size()

    def elements(self) -> Iterator[Permutation]:
        return self._inner.elements()

    def identity(self) -> Permutation:
        return self._inner.identity()

    def extend(self, new_generators: Iterable[Permutation]) -> AbstractPermutationGroup:
        return self._inner.extend(new_generators)

    def subgroup(self, predicates: Predicates) -> "SubgroupView":
        return self._inner.subgroup(predicates)


@dataclass(frozen=True, eq=False)
class LeftCoset:
    """The set ``representative ∘ group``."""

    representative: Permutation
    group: AbstractPermutationGroup

    def get_representative(self) -> Permutation:
        return self.representative

    def get_group(self) -> AbstractPermutationGroup:
        return self.group

    def contains(self, x: Any) -> bool:
        if not isinstance(x, Permutation):
            return False
        return self.group.contains(self.representative.inverse().compose(x))

    def __contains__(self, x: Any) -> bool:
        return self.contains(x)

    def __iter__(self) -> Iterator[Permutation]:
        for h in self.group.elements():
            yield self.representative.compose(h)

    def __len__(self) -> int:
        return self.group.size()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, LeftCoset):
            return NotImplemented
        return self.group == other.group and self.contains(other.representative)

    def __hash__(self) -> int:
        return hash(self.group.size())

    def __str__(self) -> str:
        return f"{self.representative}{self.group}"


def coset(representative: Permutation, group: AbstractPermutationGroup) -> LeftCoset:
    return LeftCoset(representative, group)


def _closure(generators: Sequence[Permutation], identity: Permutation) -> List[Permutation]:
    """All elements of the group generated by ``generators``, breadth-first."""
    seen: Dict[Permutation, None] = {identity: None}
    queue = deque([identity])
    while queue:
        x = queue.popleft()
        for g in generators:
            y = g.compose(x)
            if y not in seen:
                seen[y] = None
                queue.append(y)
    return list(seen)


def _subgroup_by_closure(group: PermutationGroup, filters: Sequence[Predicate]) -> SubgroupView:
    identity = group.identity()
    everything = _closure(group.generators(), identity)
    members = {identity}
    gens: List[Permutation] = []
    for x in everything:
        if x in members or not all(f(x) for f in filters):
            continue
        gens.append(x)
        members = set(_closure(gens, identity))
    reps: List[Permutation] = []
    covered = set()
    for x in everything:
        if x in covered:
            continue
        reps.append(x)
        covered.update(x.compose(h) for h in members)
    inner = PermutationGroup(gens, CosetTables.create(gens, group._policy, domain=identity.domain))
    return SubgroupView(reps, inner, group)


def support_points(group: AbstractPermutationGroup) -> Tuple[Hashable, ...]:
    """Moved points of the generators in first-seen order."""
    points: Dict[Hashable, None] = {}
    for g in group.generators():
        points.update(dict.fromkeys(g.moved_points()))
    return tuple(points)


def trivial_group(domain: Iterable[Hashable] = (), *, policy: Optional[str] = None) -> PermutationGroup:
    return PermutationGroup((), CosetTables.create((), policy, domain=domain))


def generate_group(
    domain: Iterable[Hashable],
    *permutations: Permutation,
    policy: Optional[str] = None,
) -> PermutationGroup:
    """Group generated by ``permutations`` acting on ``domain``, with tables built."""
    points = tuple(dict.fromkeys(domain))
    known = frozenset(points)
    for g in permutations:
        outside = [x for x in g.moved_points() if x not in known]
        if outside:
            raise ValueError(f"Generator {g} moves points {outside!r} outside the domain.")
    return PermutationGroup(permutations, CosetTables.create(permutations, policy, domain=points))


__all__ = [
    "AbstractPermutationGroup",
    "PermutationGroup",
    "SubgroupView",
    "LeftCoset",
    "coset",
    "generate_group",
    "support_points",
    "trivial_group",
]
