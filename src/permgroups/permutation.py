"""Permutations of a finite domain, stored as the mapping on moved points."""

from __future__ import annotations

import math
import re
from typing import Any, Dict, FrozenSet, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

_CYCLE_RE = re.compile(r"\(([^()]*)\)")


def parse_point(token: str) -> Hashable:
    return int(token) if re.fullmatch(r"-?\d+", token) else token


class Permutation:
    """Immutable bijection on a finite domain.

    Points outside ``domain`` are fixed.  Equality and hashing only look at
    the moved points, so identities over different domains compare equal.

    ``p.compose(q)`` (also ``p * q``) is the function composition p∘q:
    ``q`` is applied first.
    """

    __slots__ = ("_domain", "_moved", "_hash")

    def __init__(
        self,
        mapping: Mapping[Hashable, Hashable],
        *,
        domain: Optional[Iterable[Hashable]] = None,
    ) -> None:
        images = dict(mapping)
        if set(images.values()) != set(images):
            raise ValueError(f"Mapping {images!r} is not a bijection on its keys.")
        points: Dict[Hashable, None] = {}
        if domain is not None:
            points.update(dict.fromkeys(domain))
            outside = [x for x in images if x not in points and images[x] != x]
            if outside:
                raise ValueError(f"Mapping moves points {outside!r} outside the domain.")
        points.update(dict.fromkeys(images))
        self._domain: Tuple[Hashable, ...] = tuple(points)
        self._moved: Dict[Hashable, Hashable] = {
            x: images[x] for x in self._domain if x in images and images[x] != x
        }
        self._hash: Optional[int] = None

    @classmethod
    def _raw(cls, moved: Dict[Hashable, Hashable], domain: Tuple[Hashable, ...]) -> "Permutation":
        perm = cls.__new__(cls)
        perm._domain = domain
        perm._moved = moved
        perm._hash = None
        return perm

    @classmethod
    def identity(cls, domain: Iterable[Hashable] = ()) -> "Permutation":
        return cls._raw({}, tuple(dict.fromkeys(domain)))

    @classmethod
    def from_cycles(
        cls,
        *cycles: Sequence[Hashable],
        domain: Optional[Iterable[Hashable]] = None,
    ) -> "Permutation":
        """Build a permutation from disjoint cycles, e.g. ``from_cycles((1, 2, 3))``."""
        mapping: Dict[Hashable, Hashable] = {}
        for cycle in cycles:
            for i, x in enumerate(cycle):
                if x in mapping:
                    raise ValueError(f"Point {x!r} appears in more than one cycle.")
                mapping[x] = cycle[(i + 1) % len(cycle)]
        return cls(mapping, domain=domain)

    @classmethod
    def parse(cls, text: str, *, domain: Optional[Iterable[Hashable]] = None) -> "Permutation":
        """Parse cycle notation such as ``"(1 2 3)(4 5)"``; ``"()"`` is the identity."""
        stripped = re.sub(r"\s+", " ", text or "").strip()
        if not stripped:
            raise ValueError("Empty permutation text; expected cycle notation like '(1 2)'.")
        if _CYCLE_RE.sub("", stripped).strip():
            raise ValueError(f"Invalid cycle notation {text!r}.")
        cycles: List[List[Hashable]] = []
        for body in _CYCLE_RE.findall(stripped):
            tokens = [t for t in re.split(r"[\s,]+", body) if t]
            if tokens:
                cycles.append([parse_point(t) for t in tokens])
        return cls.from_cycles(*cycles, domain=domain)

    # core capability

    @property
    def domain(self) -> Tuple[Hashable, ...]:
        return self._domain

    def image(self, e: Hashable) -> Hashable:
        return self._moved.get(e, e)

    def preimage(self, e: Hashable) -> Hashable:
        for x, y in self._moved.items():
            if y == e:
                return x
        return e

    def compose(self, other: "Permutation") -> "Permutation":
        """Return self∘other (apply ``other``, then ``self``)."""
        known = frozenset(self._domain)
        domain = self._domain + tuple(x for x in other._domain if x not in known)
        if not other._moved:
            return self if len(domain) == len(self._domain) else Permutation._raw(dict(self._moved), domain)
        moved: Dict[Hashable, Hashable] = {}
        for x in domain:
            y = self.image(other.image(x))
            if y != x:
                moved[x] = y
        return Permutation._raw(moved, domain)

    def inverse(self) -> "Permutation":
        moved = {y: x for x, y in self._moved.items()}
        return Permutation._raw({x: moved[x] for x in self._domain if x in moved}, self._domain)

    def support(self) -> FrozenSet[Hashable]:
        return frozenset(self._moved)

    def moved_points(self) -> Tuple[Hashable, ...]:
        """Moved points in domain order."""
        return tuple(self._moved)

    def is_identity(self) -> bool:
        return not self._moved

    def stabilizes(self, points: Iterable[Hashable]) -> bool:
        """Whether this permutation maps the set ``points`` into itself."""
        pts = set(points)
        return all(self.image(x) in pts for x in pts)

    def cycles(self) -> List[Tuple[Hashable, ...]]:
        seen = set()
        out: List[Tuple[Hashable, ...]] = []
        for start in self._moved:
            if start in seen:
                continue
            cycle = [start]
            seen.add(start)
            x = self._moved[start]
            while x != start:
                cycle.append(x)
                seen.add(x)
                x = self._moved[x]
            out.append(tuple(cycle))
        return out

    def order(self) -> int:
        result = 1
        for cycle in self.cycles():
            result = result * len(cycle) // math.gcd(result, len(cycle))
        return result

    # python protocol

    def __call__(self, e: Hashable) -> Hashable:
        return self.image(e)

    def __mul__(self, other: Any) -> "Permutation":
        if isinstance(other, Permutation):
            return self.compose(other)
        return NotImplemented

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._moved == other._moved

    def __ne__(self, other: Any) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._moved != other._moved

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._moved.items()))
        return self._hash

    def __str__(self) -> str:
        cycles = self.cycles()
        if not cycles:
            return "()"
        return "".join("(" + " ".join(str(x) for x in c) + ")" for c in cycles)

    def __repr__(self) -> str:
        return f"Permutation.parse({str(self)!r})"


__all__ = ["Permutation", "parse_point"]
