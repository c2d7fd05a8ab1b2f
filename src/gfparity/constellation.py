"""Constellations and bit-to-symbol mappings.

A constellation is a list of integer points; its index is the symbol label.
A mapping assigns to each field element ``i`` the constellation index
``mapping[i]`` and must be a permutation of ``[0, q)``.

Files are whitespace separated integers: a constellation file holds ``x y``
pairs, a mappings file holds one or more mappings of ``q`` labels each.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .config import ConfigurationError

Point = Tuple[int, int]

# Per-axis Gray labels of the DVB-T2 QAM mappings, indexed by amplitude level.
_DVB_T2_AXIS_BITS: Dict[int, List[List[int]]] = {
    4: [[1], [0]],
    16: [[1, 0], [1, 1], [0, 1], [0, 0]],
    64: [
        [1, 0, 0], [1, 0, 1], [1, 1, 1], [1, 1, 0],
        [0, 1, 0], [0, 1, 1], [0, 0, 1], [0, 0, 0],
    ],
    256: [
        [1, 0, 0, 0], [1, 0, 0, 1], [1, 0, 1, 1], [1, 0, 1, 0],
        [1, 1, 1, 0], [1, 1, 1, 1], [1, 1, 0, 1], [1, 1, 0, 0],
        [0, 1, 0, 0], [0, 1, 0, 1], [0, 1, 1, 1], [0, 1, 1, 0],
        [0, 0, 1, 0], [0, 0, 1, 1], [0, 0, 0, 1], [0, 0, 0, 0],
    ],
}


def read_ints(path: str | Path) -> List[int]:
    if str(path) == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")
    values: List[int] = []
    for token in text.split():
        try:
            values.append(int(token))
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid integer '{token}' in {path}."
            ) from exc
    return values


def validate_constellation(points: Sequence[Point]) -> List[Point]:
    q = len(points)
    if q < 2 or q & (q - 1):
        raise ConfigurationError(
            f"Constellation size must be a power of two >= 2, characteristic 2 "
            f"only (got {q} points)."
        )
    normalized = [(int(x), int(y)) for x, y in points]
    seen: Dict[Point, int] = {}
    for idx, point in enumerate(normalized):
        if point in seen:
            raise ConfigurationError(
                f"Constellation points {seen[point]} and {idx} coincide at {point}."
            )
        seen[point] = idx
    return normalized


def validate_mapping(mapping: Sequence[int], q: int) -> List[int]:
    values = [int(v) for v in mapping]
    if len(values) != q:
        raise ConfigurationError(
            f"Mapping has {len(values)} entries; expected {q}."
        )
    for v in values:
        if v < 0 or v >= q:
            raise ConfigurationError(f"Mapping value {v} out of range [0, {q}).")
    if len(set(values)) != q:
        missing = sorted(set(range(q)) - set(values))
        raise ConfigurationError(
            f"Mapping is not a permutation; missing labels {missing}."
        )
    return values


def read_constellation(path: str | Path) -> List[Point]:
    values = read_ints(path)
    if len(values) % 2:
        raise ConfigurationError(
            f"Constellation file {path} has an odd number of coordinates."
        )
    points = [(values[i], values[i + 1]) for i in range(0, len(values), 2)]
    return validate_constellation(points)


def read_mappings(path: str | Path, q: int) -> List[List[int]]:
    """Read one or more mappings of q labels; ``-`` reads stdin."""
    values = read_ints(path)
    if not values:
        raise ConfigurationError(f"Mapping file {path} is empty.")
    if len(values) % q:
        raise ConfigurationError(
            f"Mapping file {path} is incomplete: {len(values)} labels is not "
            f"a multiple of {q}."
        )
    return [validate_mapping(values[i : i + q], q) for i in range(0, len(values), q)]


def write_constellation(path: str | Path, points: Sequence[Point]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for x, y in points:
            f.write(f"{x:2d}\t{y:2d}\n")


def write_mappings(path: str | Path, mappings: Sequence[Sequence[int]]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for mapping in mappings:
            f.write(" ".join(str(v) for v in mapping) + "\n")


def identity_mapping(q: int) -> List[int]:
    return list(range(q))


def grid_constellation(width: int, height: int) -> List[Point]:
    """Integer grid, rows (second coordinate) outer and columns inner."""
    if width <= 0 or height <= 0:
        raise ConfigurationError("Grid dimensions must be positive.")
    return [(i, j) for j in range(height) for i in range(width)]


def square_qam(order: int) -> List[Point]:
    side = math.isqrt(order)
    if side * side != order:
        raise ConfigurationError(f"Square QAM needs a square order (got {order}).")
    return grid_constellation(side, side)


def dvb_t2_mapping(order: int) -> List[int]:
    """DVB-T2 Gray mapping for ``square_qam(order)``.

    The label of the point at levels (i, j) interleaves the I and Q axis bits
    (I first) and reads them least significant bit first.
    """
    axis = _DVB_T2_AXIS_BITS.get(order)
    if axis is None:
        supported = ", ".join(str(k) for k in sorted(_DVB_T2_AXIS_BITS))
        raise ConfigurationError(
            f"No DVB-T2 mapping for order {order}; supported: {supported}."
        )
    mapping = [0] * order
    label = 0
    for q_bits in axis:
        for i_bits in axis:
            bits = [b for pair in zip(i_bits, q_bits) for b in pair]
            element = sum(b << k for k, b in enumerate(bits))
            mapping[element] = label
            label += 1
    return mapping


__all__ = [
    "Point",
    "dvb_t2_mapping",
    "grid_constellation",
    "identity_mapping",
    "read_constellation",
    "read_ints",
    "read_mappings",
    "square_qam",
    "validate_constellation",
    "validate_mapping",
    "write_constellation",
    "write_mappings",
]
