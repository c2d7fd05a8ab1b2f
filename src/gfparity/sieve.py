"""Multiplicity of one exact quadrance for a list of given parities.

Instead of walking neighbors by rank, the quadrance is split over the
coordinates: for every composition ``quad = r[0] + ... + r[n-1]`` (at least
two nonzero parts, since distinct codewords differ in two coordinates or
more), the free coordinates pick neighbors on the circles of radius ``r[i]``
around ``x[i]`` and the derived coordinate must land on its own circle.
Parities are sieved against the best multiplicity so far, so a parity stops
as soon as it has too many pairs.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .codewords import CodewordEnumerator
from .config import ConfigurationError
from .constellation import read_ints
from .gf2m import GF2mField
from .neighbors import NeighborIndex
from .parity import canonical_parity


@dataclass(frozen=True)
class SieveRecord:
    parity: Tuple[int, ...]
    multiplicity: Optional[int]  # None when the parity was cut off
    improved: bool

    def as_dict(self) -> dict:
        return {
            "parity": list(self.parity),
            "multiplicity": self.multiplicity,
            "improved": self.improved,
        }


def read_parities(path: str | Path, n: int) -> List[List[int]]:
    values = read_ints(path)
    if len(values) % n:
        raise ConfigurationError(
            f"Parity file {path} is incomplete: {len(values)} exponents is not "
            f"a multiple of {n}."
        )
    return [values[i : i + n] for i in range(0, len(values), n)]


def _compositions(
    total: int, parts: int, allowed: Sequence[int]
) -> Iterator[Tuple[int, ...]]:
    if parts == 1:
        if total in allowed:
            yield (total,)
        return
    for r in allowed:
        if r > total:
            break
        for rest in _compositions(total - r, parts - 1, allowed):
            yield (r,) + rest


def _circles(index: NeighborIndex, quad: int) -> List[Dict[int, List[int]]]:
    circles: List[Dict[int, List[int]]] = []
    for row in index.Q:
        by_radius: Dict[int, List[int]] = {}
        for y, r in enumerate(row):
            if r <= quad:
                by_radius.setdefault(r, []).append(y)
        circles.append(by_radius)
    return circles


def multiplicity_at(
    field: GF2mField,
    index: NeighborIndex,
    h: Sequence[int],
    quad: int,
    *,
    limit: Optional[int] = None,
) -> Optional[int]:
    """Ordered pairs of distinct codewords of ``h`` at quadrance ``quad``.

    Returns None as soon as the count exceeds ``limit``.
    """
    if quad <= 0:
        raise ConfigurationError(f"quad must be positive (got {quad}).")
    h = list(h)
    n = len(h)
    last = n - 1
    Q = index.Q
    circles = _circles(index, quad)
    allowed = sorted({r for row in Q for r in row if r <= quad})
    codewords = CodewordEnumerator(field, h)

    mult = 0
    for part in _compositions(quad, n, allowed):
        if sum(1 for r in part if r) < 2:
            continue
        for x in codewords:
            choices = [circles[x[i]].get(part[i]) for i in range(last)]
            if not all(choices):
                continue
            target = circles[x[last]].get(part[last])
            if not target:
                continue
            for ys in product(*choices):
                acc = 0
                for i in range(last):
                    acc = field.accmul(acc, h[i], ys[i])
                if Q[x[last]][acc] == part[last]:
                    mult += 1
                    if limit is not None and mult > limit:
                        return None
    return mult


def sieve_parities(
    field: GF2mField,
    index: NeighborIndex,
    parities: Sequence[Sequence[int]],
    quad: int,
    *,
    on_improvement: Optional[Callable[[SieveRecord], None]] = None,
) -> List[SieveRecord]:
    """Sieve parities by multiplicity at ``quad``; ties with the best count too."""
    records: List[SieveRecord] = []
    best: Optional[int] = None
    for raw in parities:
        h = canonical_parity(raw)
        if len(h) >= field.size:
            raise ConfigurationError(
                f"codelength must be less than the field order (n={len(h)}, "
                f"q={field.size})."
            )
        mult = multiplicity_at(field, index, h, quad, limit=best)
        improved = mult is not None and (best is None or mult <= best)
        if improved:
            best = mult
        record = SieveRecord(parity=tuple(h), multiplicity=mult, improved=improved)
        records.append(record)
        if improved and on_improvement is not None:
            on_improvement(record)
    return records


__all__ = ["SieveRecord", "multiplicity_at", "read_parities", "sieve_parities"]
