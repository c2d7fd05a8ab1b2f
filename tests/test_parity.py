"""Tests for canonical parity enumeration."""

from __future__ import annotations

from itertools import combinations

import pytest

from gfparity.config import ConfigurationError
from gfparity.gf2m import GF2mField
from gfparity.parity import (
    ParityEnumerator,
    canonical_parity,
    parity_count,
    parity_elements,
)


def _brute_force(q: int, n: int) -> set:
    return {
        tuple(sorted(c, reverse=True)) + (0,)
        for c in combinations(range(1, q - 1), n - 1)
    }


def test_gf8_n3_enumeration_is_exhaustive_and_duplicate_free() -> None:
    field = GF2mField(0xB)
    produced = list(ParityEnumerator(field, 3))
    assert len(produced) == 15
    assert len(set(produced)) == len(produced)
    assert parity_count(8, 3) == 15
    assert set(produced) == _brute_force(8, 3)
    assert produced[0] == (2, 1, 0)
    assert produced[1] == (3, 1, 0)
    assert produced[-1] == (6, 5, 0)


@pytest.mark.parametrize("poly,n", [(0x13, 2), (0x13, 4), (0x13, 15), (0x25, 3)])
def test_counts_match_brute_force(poly: int, n: int) -> None:
    field = GF2mField(poly)
    produced = list(ParityEnumerator(field, n))
    assert len(produced) == parity_count(field.size, n)
    assert set(produced) == _brute_force(field.size, n)


def test_boundaries() -> None:
    field = GF2mField(0xB)
    assert list(ParityEnumerator(field, 7)) == [(6, 5, 4, 3, 2, 1, 0)]
    assert list(ParityEnumerator(field, 2)) == [(e, 0) for e in range(1, 7)]


def test_every_parity_is_in_gauge() -> None:
    field = GF2mField(0x13)
    for h in ParityEnumerator(field, 4):
        assert h[-1] == 0
        assert all(0 < e < field.order for e in h[:-1])
        assert list(h) == sorted(h, reverse=True)


def test_invalid_codelength() -> None:
    field = GF2mField(0xB)
    with pytest.raises(ConfigurationError):
        ParityEnumerator(field, 8)
    with pytest.raises(ConfigurationError):
        ParityEnumerator(field, 1)
    assert parity_count(8, 8) == 0


def test_reset_restarts_in_place() -> None:
    field = GF2mField(0xB)
    parities = ParityEnumerator(field, 3)
    buffer = parities.h
    assert parities.advance()
    assert parities.h == [3, 1, 0]
    parities.reset()
    assert parities.h is buffer
    assert parities.h == [2, 1, 0]


def test_canonical_parity() -> None:
    assert canonical_parity([3, 5, 4]) == [2, 1, 0]
    assert canonical_parity([0, 2, 2]) == [2, 2, 0]
    assert canonical_parity([6, 0]) == [6, 0]
    with pytest.raises(ConfigurationError):
        canonical_parity([1])
    with pytest.raises(ConfigurationError):
        canonical_parity([1, -1])


def test_parity_elements() -> None:
    field = GF2mField(0xB)
    assert parity_elements(field, [2, 1, 0]) == [4, 2, 1]
    assert parity_elements(field, [3, 0]) == [3, 1]
