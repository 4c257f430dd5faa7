"""
permgroups.sylow

Sylow p-subgroups with a left coset decomposition.

The construction keeps a growing p-subgroup P and a list of coset
representatives.  Each pending permutation alpha is absorbed by the first
representative gamma for which <P, gamma^-1 alpha> is still a p-group;
otherwise alpha becomes a new representative and g alpha is queued for every
generator g.  Pending permutations are kept on an explicit stack in the same
depth-first order a recursive formulation would visit them.

The p-group test looks at the action on a block system, so the kernel of that
action must itself be a p-group.  The default singleton blocks always satisfy
this, and for them the order of P is used directly without building the
action.

Entry point:
    sylow(group, block_system=None, p=None)
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .blocks import BlockSystem
from .cosets import InvariantViolation
from .factorization import is_prime, largest_component, remove_factor
from .group import AbstractPermutationGroup, LeftCoset, trivial_group, support_points
from .permutation import Permutation


def _log(verbose: bool, msg: str) -> None:
    if verbose:
        print(msg)


class SylowDecomposition:
    """Sylow p-subgroup of a group together with its left coset representatives."""

    def __init__(
        self,
        group: AbstractPermutationGroup,
        block_system: BlockSystem,
        p: int,
        *,
        verbose: bool = False,
    ) -> None:
        self._group = group.materialize()
        self._block_system = block_system
        self._faithful = block_system.is_discrete() and self._group.support() <= set(
            block_system.domain
        )
        self._p = int(p)
        self._verbose = verbose
        self._sylow = trivial_group(self._group.identity().domain)
        self._reps: List[Permutation] = []
        _log(verbose, f"[sylow] |G|={self._group.size()} p={self._p} blocks={len(block_system)}")
        for g in self._group.generators() or (self._group.identity(),):
            self._p_build(g)
        self._check()
        _log(
            verbose,
            f"[sylow] done: |P|={self._sylow.size()} representatives={len(self._reps)}",
        )

    # accessors

    @property
    def p(self) -> int:
        return self._p

    @property
    def group(self) -> AbstractPermutationGroup:
        return self._group

    @property
    def block_system(self) -> BlockSystem:
        return self._block_system

    @property
    def sylow_subgroup(self) -> AbstractPermutationGroup:
        return self._sylow

    @property
    def coset_representatives(self) -> Tuple[Permutation, ...]:
        return tuple(self._reps)

    def get_p(self) -> int:
        return self._p

    def get_sylow_subgroup(self) -> AbstractPermutationGroup:
        return self._sylow

    def get_coset_representatives(self) -> Tuple[Permutation, ...]:
        return self.coset_representatives

    def as_coset_decomposition(self) -> List[LeftCoset]:
        return [LeftCoset(gamma, self._sylow) for gamma in self._reps]

    def is_p_group(self, candidate: AbstractPermutationGroup) -> bool:
        if self._faithful:
            order = candidate.size()
        else:
            order = self._block_system.block_action(candidate).size()
        return remove_factor(order, self._p) == 1

    # construction

    def _p_build(self, alpha: Permutation) -> None:
        gens = self._group.generators()
        stack = [alpha]
        while stack:
            alpha = stack.pop()
            for gamma in self._reps:
                candidate = self._sylow.extend([gamma.inverse().compose(alpha)])
                if candidate is self._sylow or self.is_p_group(candidate):
                    if candidate is not self._sylow:
                        _log(self._verbose, f"[sylow] |P| -> {candidate.size()}")
                    self._sylow = candidate
                    break
            else:
                self._reps.append(alpha)
                _log(self._verbose, f"[sylow] representative #{len(self._reps)}: {alpha}")
                stack.extend(reversed([g.compose(alpha) for g in gens]))

    def _check(self) -> None:
        order = self._group.size()
        sylow_order = self._sylow.size()
        if not self._sylow.is_subgroup_of(self._group):
            raise InvariantViolation("Sylow subgroup is not a subgroup.")
        if not self.is_p_group(self._sylow):
            raise InvariantViolation(f"Sylow subgroup is not a {self._p}-group.")
        if order % sylow_order or order // sylow_order != remove_factor(order, self._p):
            raise InvariantViolation(
                f"Sylow subgroup of order {sylow_order} is not a maximal "
                f"{self._p}-subgroup of a group of order {order}."
            )
        if order != len(self._reps) * sylow_order:
            raise InvariantViolation(
                f"Expected that # of coset representatives {len(self._reps)} times Sylow "
                f"subgroup size {sylow_order} would equal group size {order}."
            )


def sylow(
    group: AbstractPermutationGroup,
    block_system: Optional[BlockSystem] = None,
    p: Optional[int] = None,
    *,
    verbose: bool = False,
) -> SylowDecomposition:
    """Sylow ``p``-subgroup of ``group``.

    ``p`` defaults to the prime whose power in ``|G|`` is largest and
    ``block_system`` to the singleton blocks of the support.
    """
    group = group.materialize()
    if block_system is None:
        block_system = BlockSystem.singletons(support_points(group))
    elif not block_system.is_preserved_by(group):
        raise ValueError(f"Block system {block_system!r} is not preserved by {group}.")
    if p is None:
        p = largest_component(group.size()).prime
    elif not is_prime(int(p)):
        raise ValueError(f"p must be prime, got {p}.")
    return SylowDecomposition(group, block_system, p, verbose=verbose)


__all__ = ["SylowDecomposition", "sylow"]
