"""Codewords of a single parity check."""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

from .gf2m import GF2mField


def satisfies_parity(field: GF2mField, h: Sequence[int], x: Sequence[int]) -> bool:
    """Check sum(alpha^h[i] * x[i]) == 0, with h[-1] == 0 (coefficient 1)."""
    acc = 0
    for i in range(len(h) - 1):
        acc = field.accmul(acc, h[i], x[i])
    return acc == x[len(h) - 1]


class CodewordEnumerator:
    """Odometer over the free coordinates x[0..n-2]; x[n-1] is derived.

    ``h`` is shared with the caller (typically ParityEnumerator.h) and read
    on every step.
    """

    def __init__(self, field: GF2mField, h: List[int]) -> None:
        self.field = field
        self.h = h
        self.n = len(h)
        self.x: List[int] = [0] * self.n

    def reset(self) -> None:
        x = self.x
        for i in range(self.n):
            x[i] = 0

    def advance(self) -> bool:
        x = self.x
        free = self.n - 1
        top = self.field.order
        i = 0
        while i < free and x[i] == top:
            x[i] = 0
            i += 1
        if i == free:
            return False
        x[i] += 1

        field = self.field
        h = self.h
        acc = 0
        for i in range(free):
            acc = field.accmul(acc, h[i], x[i])
        x[free] = acc
        return True

    def __iter__(self) -> Iterator[Tuple[int, ...]]:
        self.reset()
        yield tuple(self.x)
        while self.advance():
            yield tuple(self.x)


__all__ = ["CodewordEnumerator", "satisfies_parity"]
