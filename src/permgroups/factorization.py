"""Integer factorization by trial division, sized for group orders."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Factor:
    """Prime power component ``prime ** exponent`` of an integer."""

    prime: int
    exponent: int

    @property
    def product(self) -> int:
        return self.prime**self.exponent


def is_prime(n: int) -> bool:
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0:
        return False
    r = math.isqrt(n)
    i = 3
    while i <= r:
        if n % i == 0:
            return False
        i += 2
    return True


def factorize(n: int) -> List[Factor]:
    """Return the prime factorization of ``n`` in ascending prime order.

    12 -> [Factor(2, 2), Factor(3, 1)]; 1 -> [].
    """
    n = int(n)
    if n <= 0:
        raise ValueError(f"Can only factorize positive integers, got {n}.")
    factors: List[Factor] = []
    p = 2
    while p * p <= n:
        if n % p == 0:
            k = 0
            while n % p == 0:
                n //= p
                k += 1
            factors.append(Factor(p, k))
        p += 1 if p == 2 else 2
    if n > 1:
        factors.append(Factor(n, 1))
    return factors


def remove_factor(n: int, p: int) -> int:
    """Divide every factor of ``p`` out of ``n``."""
    if p <= 1:
        raise ValueError(f"Factor must be at least 2, got {p}.")
    while n % p == 0 and n != 0:
        n //= p
    return n


def largest_component(n: int) -> Factor:
    """Return the factor whose prime power is numerically largest.

    Ties go to the smaller prime.
    """
    factors = factorize(n)
    if not factors:
        raise ValueError(f"{n} has no prime factors.")
    best = factors[0]
    for factor in factors[1:]:
        if factor.product > best.product:
            best = factor
    return best


__all__ = ["Factor", "is_prime", "factorize", "remove_factor", "largest_component"]
