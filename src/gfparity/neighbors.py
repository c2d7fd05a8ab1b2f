"""Quadrance table, distance-sorted neighbor lists and bounded neighbor walks.

For a mapping ``pi``, ``Q[i][j]`` is the squared distance between the points
``C[pi[i]]`` and ``C[pi[j]]``, and ``V[i]`` lists all field elements by
increasing ``Q[i][.]`` (ties by element value). Walking ``V[x[i]]`` rank by
rank visits neighbors of a coordinate from the closest outward, which is what
lets the walk stop at a quadrance budget.
"""

from __future__ import annotations

from bisect import bisect_left
from typing import List, Sequence

import numpy as np

from .constellation import Point, validate_constellation, validate_mapping
from .gf2m import GF2mField


def max_pair_quadrance(constellation: Sequence[Point]) -> int:
    """Largest squared distance between two points of the constellation."""
    pts = np.asarray(constellation, dtype=np.int64)
    diff = pts[:, None, :] - pts[None, :, :]
    return int((diff * diff).sum(axis=2).max())


class NeighborIndex:
    """Per-mapping quadrance table ``Q`` and neighbor lists ``V``."""

    def __init__(self, constellation: Sequence[Point], mapping: Sequence[int]) -> None:
        points = validate_constellation(constellation)
        q = len(points)
        self.mapping = validate_mapping(mapping, q)
        self.size = q

        pts = np.asarray(points, dtype=np.int64)[np.asarray(self.mapping)]
        diff = pts[:, None, :] - pts[None, :, :]
        quad = (diff * diff).sum(axis=2)
        order = np.argsort(quad, axis=1, kind="stable")

        self.Q: List[List[int]] = quad.tolist()
        self.V: List[List[int]] = order.tolist()
        self.sorted_quadrances: List[List[int]] = np.take_along_axis(
            quad, order, axis=1
        ).tolist()
        off_diagonal = quad[~np.eye(q, dtype=bool)]
        self.cqmin = int(off_diagonal.min())

    def rank_caps(self, qmax: int) -> List[int]:
        """Per element, how many leading ranks a neighbor walk may visit.

        A neighbor codeword differs from its codeword in at least two
        coordinates, so one coordinate alone can use at most
        ``qmax - cqmin`` of a quadrance that must stay below ``qmax``.
        Rank 0 (the element itself) is always allowed.
        """
        threshold = qmax - self.cqmin
        return [max(1, bisect_left(row, threshold)) for row in self.sorted_quadrances]


class DeltaEnumerator:
    """Mixed-radix walk over neighbor ranks of the free coordinates.

    For a codeword ``x``, ``d[i]`` runs over ``[0, dmax[i])`` with
    ``dmax[i] = caps[x[i]]``; the neighbor is ``y[i] = V[x[i]][d[i]]`` and
    ``y[n-1]`` is derived from the parity, so every ``y`` is a codeword.
    """

    def __init__(
        self, field: GF2mField, index: NeighborIndex, h: List[int], qmax: int
    ) -> None:
        self.field = field
        self.index = index
        self.h = h
        self.n = len(h)
        self.caps = index.rank_caps(qmax)
        free = self.n - 1
        self.d: List[int] = [0] * free
        self.dmax: List[int] = [1] * free
        self.y: List[int] = [0] * self.n
        self.x: Sequence[int] = [0] * self.n

    def reset(self, x: Sequence[int]) -> None:
        self.x = x
        caps = self.caps
        d = self.d
        dmax = self.dmax
        for i in range(self.n - 1):
            d[i] = 0
            dmax[i] = caps[x[i]]

    def advance(self) -> bool:
        d = self.d
        dmax = self.dmax
        free = self.n - 1
        i = 0
        while i < free and d[i] >= dmax[i] - 1:
            d[i] = 0
            i += 1
        if i == free:
            return False
        d[i] += 1
        return True

    def quadrance(self) -> int:
        """Fill ``y`` for the current ranks and return ``quadrance(x, y)``."""
        x = self.x
        y = self.y
        d = self.d
        h = self.h
        Q = self.index.Q
        V = self.index.V
        field = self.field
        last = self.n - 1
        acc = 0
        quad = 0
        for i in range(last):
            xi = x[i]
            yi = V[xi][d[i]]
            y[i] = yi
            quad += Q[xi][yi]
            acc = field.accmul(acc, h[i], yi)
        y[last] = acc
        return quad + Q[x[last]][acc]

    def neighbor_count(self) -> int:
        count = 1
        for cap in self.dmax:
            count *= cap
        return count


__all__ = ["DeltaEnumerator", "NeighborIndex", "max_pair_quadrance"]
