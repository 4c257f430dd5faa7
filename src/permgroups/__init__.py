"""permgroups: finite permutation groups, stabilizer chains and Sylow subgroups."""

from .blocks import BlockSystem
from .cosets import CosetTables, InvariantViolation, resolve_base_policy
from .factorization import Factor, factorize, is_prime, largest_component, remove_factor
from .group import (
    AbstractPermutationGroup,
    LeftCoset,
    PermutationGroup,
    SubgroupView,
    coset,
    generate_group,
    support_points,
    trivial_group,
)
from .partition import Partition
from .permutation import Permutation
from .sylow import SylowDecomposition, sylow

__all__ = [
    "Permutation",
    "Partition",
    "Factor",
    "factorize",
    "is_prime",
    "largest_component",
    "remove_factor",
    "CosetTables",
    "InvariantViolation",
    "resolve_base_policy",
    "AbstractPermutationGroup",
    "PermutationGroup",
    "SubgroupView",
    "LeftCoset",
    "coset",
    "generate_group",
    "support_points",
    "trivial_group",
    "BlockSystem",
    "SylowDecomposition",
    "sylow",
]
