"""
permgroups.cosets

Stabilizer chains ("coset tables") for permutation groups.

A chain is a tuple of levels.  A point level stores a base point, the strong
generators fixing every earlier base point, and a table mapping each point of
the base point's orbit to a transversal element carrying the base point there.
A filter level stores a predicate and the left coset representatives of the
elements satisfying it inside the group described by the remaining levels.

Every group element factors uniquely as the product (in level order) of one
representative per level, so the group order is the product of the level
sizes, membership is a sift through the levels, and enumeration is the
Cartesian product of the per-level representatives.

Construction is deterministic incremental Schreier-Sims: adding a generator at
a level grows that level's orbit breadth-first, and every Schreier generator
that lands on a known point is sifted into the next level.

Base points are picked by a policy:
  - "first":    first moved point of the new strong generator (domain order)
  - "smallest": smallest moved point (points must be mutually comparable)
The policy defaults to $PERMGROUPS_BASE_POLICY, then "first".
"""

from __future__ import annotations

import functools
import itertools
import os
from dataclasses import dataclass
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .permutation import Permutation

Predicate = Callable[[Permutation], bool]

BASE_POLICIES = ("first", "smallest")


class InvariantViolation(RuntimeError):
    """An internal consistency check failed; the computation cannot continue."""


def resolve_base_policy(policy: Optional[str] = None) -> str:
    value = policy or os.environ.get("PERMGROUPS_BASE_POLICY") or "first"
    value = value.strip().lower()
    if value not in BASE_POLICIES:
        raise ValueError(
            f"Unknown base policy {value!r}; expected one of {', '.join(BASE_POLICIES)}."
        )
    return value


def _merge_domains(domain: Iterable[Hashable], perms: Iterable[Permutation]) -> Tuple[Hashable, ...]:
    points: Dict[Hashable, None] = dict.fromkeys(domain)
    for g in perms:
        points.update(dict.fromkeys(g.domain))
    return tuple(points)


@dataclass(frozen=True, eq=False)
class PointLevel:
    """Orbit of ``base`` under ``generators`` with one transversal per orbit point."""

    base: Hashable
    generators: Tuple[Permutation, ...]
    table: Mapping[Hashable, Permutation]

    def size(self) -> int:
        return len(self.table)

    def representatives(self) -> List[Permutation]:
        return list(self.table.values())

    def sift(self, p: Permutation) -> Optional[Permutation]:
        t = self.table.get(p.image(self.base))
        if t is None:
            return None
        return t.inverse().compose(p)


@dataclass(frozen=True, eq=False)
class FilterLevel:
    """Left coset representatives (identity first) of the elements passing ``predicate``."""

    predicate: Predicate
    reps: Tuple[Permutation, ...]

    def size(self) -> int:
        return len(self.reps)

    def representatives(self) -> List[Permutation]:
        return list(self.reps)

    def sift(self, p: Permutation) -> Optional[Permutation]:
        for r in self.reps:
            residue = r.inverse().compose(p)
            if self.predicate(residue):
                return residue
        return None


Level = Union[PointLevel, FilterLevel]


class _ChainBuilder:
    """Mutable point levels used while a chain is being saturated."""

    def __init__(
        self,
        identity: Permutation,
        policy: str,
        levels: Sequence[PointLevel] = (),
    ) -> None:
        self.identity = identity
        self.policy = policy
        self.bases: List[Hashable] = [level.base for level in levels]
        self.gens: List[List[Permutation]] = [list(level.generators) for level in levels]
        self.tables: List[Dict[Hashable, Permutation]] = [dict(level.table) for level in levels]

    def sift(self, depth: int, p: Permutation) -> Tuple[Permutation, bool]:
        for i in range(depth, len(self.bases)):
            t = self.tables[i].get(p.image(self.bases[i]))
            if t is None:
                return p, False
            p = t.inverse().compose(p)
        return p, True

    def generates(self, p: Permutation, depth: int = 0) -> bool:
        residue, complete = self.sift(depth, p)
        return complete and residue.is_identity()

    def _new_base(self, h: Permutation) -> Hashable:
        moved = h.moved_points()
        if self.policy == "smallest":
            return min(moved)
        return moved[0]

    def add(self, depth: int, h: Permutation) -> None:
        """Add ``h`` (which fixes every earlier base point) as a strong generator at ``depth``."""
        if self.generates(h, depth):
            return
        if depth == len(self.bases):
            base = self._new_base(h)
            self.bases.append(base)
            self.gens.append([])
            self.tables.append({base: self.identity})
        base = self.bases[depth]
        gens = self.gens[depth]
        table = self.tables[depth]
        gens.append(h)
        pending = [h.compose(t) for t in list(table.values())]
        while pending:
            tau = pending.pop(0)
            u = tau.image(base)
            t = table.get(u)
            if t is None:
                table[u] = tau
                pending.extend(s.compose(tau) for s in gens)
            else:
                self.add(depth + 1, t.inverse().compose(tau))

    def levels(self) -> Tuple[PointLevel, ...]:
        return tuple(
            PointLevel(base=b, generators=tuple(g), table=dict(t))
            for b, g, t in zip(self.bases, self.gens, self.tables)
        )


class CosetTables:
    """Immutable stabilizer chain, optionally prefixed by filter levels."""

    def __init__(
        self,
        levels: Sequence[Level],
        generators: Optional[Sequence[Permutation]],
        identity: Permutation,
        *,
        policy: str = "first",
    ) -> None:
        self._levels: Tuple[Level, ...] = tuple(levels)
        self._generators = None if generators is None else tuple(generators)
        self._identity = identity
        self._policy = policy
        self._support: Optional[FrozenSet[Hashable]] = None

    # construction

    @classmethod
    def create(
        cls,
        generators: Iterable[Permutation],
        policy: Optional[str] = None,
        *,
        domain: Iterable[Hashable] = (),
    ) -> "CosetTables":
        gens = tuple(generators)
        policy_eff = resolve_base_policy(policy)
        identity = Permutation.identity(_merge_domains(domain, gens))
        builder = _ChainBuilder(identity, policy_eff)
        for g in gens:
            builder.add(0, g)
        tables = cls(builder.levels(), gens, identity, policy=policy_eff)
        tables._check()
        return tables

    def extend(self, new_generators: Iterable[Permutation]) -> "CosetTables":
        """Tables for the group generated by these tables and ``new_generators``.

        Already saturated point levels are reused; ``self`` is returned when
        every new generator is already generated.
        """
        fresh = [g for g in new_generators if not self.generates(g)]
        if not fresh:
            return self
        gens = self.generators() + tuple(fresh)
        if self.filter_count():
            base = CosetTables.create(gens, self._policy, domain=self._identity.domain)
            predicates = [level.predicate for level in self._levels if isinstance(level, FilterLevel)]
            return CosetTables.subgroup_tables(base, gens, predicates)
        identity = Permutation.identity(_merge_domains(self._identity.domain, fresh))
        builder = _ChainBuilder(identity, self._policy, self._point_levels())
        for g in fresh:
            builder.add(0, g)
        tables = CosetTables(builder.levels(), gens, identity, policy=self._policy)
        tables._check()
        return tables

    @classmethod
    def subgroup_tables(
        cls,
        base_tables: "CosetTables",
        generators: Sequence[Permutation],
        predicates: Sequence[Predicate],
    ) -> "CosetTables":
        """Chain of the ambient group with one filter level per predicate.

        Level ``i`` holds the left coset representatives of the elements
        passing predicates ``0..i`` inside the elements passing ``0..i-1``;
        the remaining point levels describe the final filtered subgroup, so
        ``drop(len(predicates))`` is that subgroup and
        ``take(len(predicates)).generated()`` its coset representatives.
        Each predicate must cut out a subgroup.
        """
        current = base_tables
        if current.filter_count():
            current = cls.create(generators, current._policy, domain=current._identity.domain)
        filters: List[FilterLevel] = []
        for predicate in predicates:
            inner = current._filtered(predicate)
            reps = current._left_transversal(inner)
            filters.append(FilterLevel(predicate=predicate, reps=tuple(reps)))
            current = inner
        return cls(
            tuple(filters) + current._levels,
            generators,
            base_tables._identity,
            policy=base_tables._policy,
        )

    def _filtered(self, predicate: Predicate) -> "CosetTables":
        """Chain of the elements passing ``predicate``.

        A predicate is an arbitrary callable with no known relation to the
        chain's base, so no level can be skipped: every element not already
        generated by the survivors found so far is tested once.
        """
        builder = _ChainBuilder(self._identity, self._policy)
        gens: List[Permutation] = []
        for g in self.generated():
            if not builder.generates(g) and predicate(g):
                builder.add(0, g)
                gens.append(g)
        return CosetTables(builder.levels(), gens, self._identity, policy=self._policy)

    def _left_transversal(self, inner: "CosetTables") -> List[Permutation]:
        """Left coset representatives of ``inner``, identity first.

        Each new representative marks its whole coset as covered, so every
        element is looked up once and the walk stops at the last coset.
        """
        total = self.size()
        inner_size = inner.size()
        if total % inner_size:
            raise InvariantViolation(
                f"Filtered subgroup order {inner_size} does not divide group order {total}; "
                "the predicate does not define a subgroup."
            )
        wanted = total // inner_size
        reps = [self._identity]
        members = list(inner.generated())
        covered = set(members)
        for g in self.generated():
            if len(reps) == wanted:
                break
            if g in covered:
                continue
            reps.append(g)
            covered.update(g.compose(h) for h in members)
        if len(reps) != wanted:
            raise InvariantViolation(
                f"Found {len(reps)} coset representatives, expected {wanted}; "
                "the predicate does not define a subgroup."
            )
        return reps

    # slicing

    def drop(self, k: int) -> "CosetTables":
        """Tables of the subgroup described by every level after the first ``k``."""
        return CosetTables(self._levels[k:], None, self._identity, policy=self._policy)

    def take(self, k: int) -> "CosetTables":
        """Only the first ``k`` levels; ``generated()`` yields their representative products."""
        return CosetTables(self._levels[:k], None, self._identity, policy=self._policy)

    # queries

    @property
    def levels(self) -> Tuple[Level, ...]:
        return self._levels

    @property
    def identity(self) -> Permutation:
        return self._identity

    @property
    def policy(self) -> str:
        return self._policy

    def filter_count(self) -> int:
        return sum(1 for level in self._levels if isinstance(level, FilterLevel))

    def base(self) -> Tuple[Hashable, ...]:
        return tuple(level.base for level in self._levels if isinstance(level, PointLevel))

    def generators(self) -> Tuple[Permutation, ...]:
        if self._generators is not None:
            return self._generators
        gens: List[Permutation] = []
        for level in self._levels:
            if isinstance(level, FilterLevel):
                gens.extend(r for r in level.reps if not r.is_identity())
            else:
                gens.extend(level.generators)
                break
        return tuple(gens)

    def support(self) -> FrozenSet[Hashable]:
        if self._support is None:
            points = set()
            for g in self.generators():
                points.update(g.support())
            self._support = frozenset(points)
        return self._support

    def size(self) -> int:
        total = 1
        for level in self._levels:
            total *= level.size()
        return total

    def generates(self, p: Permutation) -> bool:
        for level in self._levels:
            residue = level.sift(p)
            if residue is None:
                return False
            p = residue
        return p.is_identity()

    def generated(self) -> Iterator[Permutation]:
        """Lazily yield every element once, identity first."""
        reps = [level.representatives() for level in self._levels]
        for combo in itertools.product(*reps):
            yield functools.reduce(Permutation.compose, combo, self._identity)

    def __iter__(self) -> Iterator[Permutation]:
        return self.generated()

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"CosetTables(base={list(self.base())!r}, size={self.size()})"

    # internals

    def _point_levels(self) -> List[PointLevel]:
        return [level for level in self._levels if isinstance(level, PointLevel)]

    def _check(self) -> None:
        for depth, level in enumerate(self._levels):
            if not isinstance(level, PointLevel):
                continue
            if not level.table.get(level.base, self._identity).is_identity():
                raise InvariantViolation(
                    f"Level {depth}: transversal of base point {level.base!r} is not the identity."
                )
            for u, t in level.table.items():
                if t.image(level.base) != u:
                    raise InvariantViolation(
                        f"Level {depth}: transversal for {u!r} maps base point "
                        f"{level.base!r} to {t.image(level.base)!r}."
                    )


__all__ = [
    "BASE_POLICIES",
    "CosetTables",
    "FilterLevel",
    "InvariantViolation",
    "PointLevel",
    "Predicate",
    "resolve_base_policy",
]
