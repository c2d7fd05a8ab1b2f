"""Enumeration of canonical parity-check vectors.

A parity of length n is stored as the discrete logs of its coefficients.
Scaling a parity by a nonzero field element gives the same code, so the last
coefficient is fixed to alpha^0 = 1. Permuting coordinates does not change
the distance spectrum either (every coordinate uses the same mapping), so
only strictly decreasing exponent patterns are visited:

    q-2 >= h[0] > h[1] > ... > h[n-2] >= 1,  h[n-1] = 0

which gives comb(q-2, n-1) parities.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Sequence, Tuple

from .config import ConfigurationError
from .gf2m import GF2mField


def parity_count(q: int, n: int) -> int:
    """Number of parities visited by ParityEnumerator for GF(q), length n."""
    if n < 2 or n >= q:
        return 0
    return math.comb(q - 2, n - 1)


class ParityEnumerator:
    """Cursor over canonical parities; ``h`` is reused in place."""

    def __init__(self, field: GF2mField, n: int) -> None:
        if n < 2 or n >= field.size:
            raise ConfigurationError(
                f"codelength must satisfy 2 <= n < q (n={n}, q={field.size})."
            )
        self.field = field
        self.n = n
        self.h: List[int] = [0] * n
        self.reset()

    def reset(self) -> None:
        n = self.n
        h = self.h
        for i in range(n - 1):
            h[i] = n - i - 1
        h[n - 1] = 0

    def advance(self) -> bool:
        """Move to the next parity; False once every parity was produced."""
        h = self.h
        n = self.n
        top = self.field.order - 1
        i = 0
        while h[i] >= top - i:
            if i + 3 > n:
                return False
            i += 1
        h[i] += 1
        while i:
            h[i - 1] = h[i] + 1
            i -= 1
        return True

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        self.reset()
        yield tuple(self.h)
        while self.advance():
            yield tuple(self.h)


def canonical_parity(h: Sequence[int]) -> List[int]:
    """Sort exponents decreasing and scale so that the last one is 0."""
    if len(h) < 2:
        raise ConfigurationError("A parity needs at least two coefficients.")
    if any(int(e) < 0 for e in h):
        raise ConfigurationError(f"Parity exponents must be nonnegative: {list(h)}")
    ordered = sorted((int(e) for e in h), reverse=True)
    low = ordered[-1]
    return [e - low for e in ordered]


def parity_elements(field: GF2mField, h: Sequence[int]) -> List[int]:
    return [field.element(e) for e in h]


__all__ = [
    "ParityEnumerator",
    "canonical_parity",
    "parity_count",
    "parity_elements",
]
