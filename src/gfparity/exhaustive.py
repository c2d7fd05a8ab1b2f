"""Spectra of every canonical parity at once, without pruning.

Walks all pairs (x, y) of vectors of GF(q)^n with y inside the per-coordinate
rank caps of x, and credits quadrance(x, y) to every parity that both x and
y satisfy. Slow, but independent of the branch-and-bound driver, so it serves
as the reference table for it.
"""

from __future__ import annotations

from itertools import product
from typing import List, Tuple

from .codewords import satisfies_parity
from .gf2m import GF2mField
from .neighbors import NeighborIndex
from .parity import ParityEnumerator


def all_parity_spectra(
    field: GF2mField, index: NeighborIndex, n: int, qmax: int
) -> List[Tuple[Tuple[int, ...], List[int]]]:
    """Return ``(parity, counts)`` for each parity, in enumeration order."""
    parities = list(ParityEnumerator(field, n))
    spectra = [[0] * qmax for _ in parities]
    caps = index.rank_caps(qmax)
    Q = index.Q
    V = index.V
    q = field.size

    for x in product(range(q), repeat=n):
        valid = [hid for hid, h in enumerate(parities) if satisfies_parity(field, h, x)]
        if not valid:
            continue
        for d in product(*(range(caps[xi]) for xi in x)):
            y = [V[xi][di] for xi, di in zip(x, d)]
            quad = sum(Q[xi][yi] for xi, yi in zip(x, y))
            if quad >= qmax:
                continue
            for hid in valid:
                if satisfies_parity(field, parities[hid], y):
                    spectra[hid][quad] += 1
    return list(zip(parities, spectra))


__all__ = ["all_parity_spectra"]
