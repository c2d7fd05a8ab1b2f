"""Tests for GF(2^m) tables and arithmetic."""

from __future__ import annotations

import pytest

from gfparity.config import ConfigurationError
from gfparity.gf2m import LOG_ZERO, PRIMITIVE_POLYNOMIALS, GF2mField, field_for_size


def _clmul_mod(a: int, b: int, poly: int, degree: int) -> int:
    r = 0
    while b:
        if b & 1:
            r ^= a
        b >>= 1
        a <<= 1
        if a & (1 << degree):
            a ^= poly
    return r


@pytest.mark.parametrize("q,poly", sorted(PRIMITIVE_POLYNOMIALS.items()))
def test_log_exp_tables_are_inverse(q: int, poly: int) -> None:
    field = GF2mField(poly)
    assert field.size == q
    assert field.order == q - 1
    assert field.log[0] == LOG_ZERO
    assert LOG_ZERO not in field.log[1:]
    for x in range(1, q):
        assert field.exp[field.log[x]] == x
    assert sorted(field.exp) == list(range(1, q))


@pytest.mark.parametrize("poly", [0x1, 0xC, 0xF, 0x1F])
def test_non_primitive_polynomial_is_rejected(poly: int) -> None:
    with pytest.raises(ConfigurationError):
        GF2mField(poly)


def test_mul_matches_carryless_product() -> None:
    field = GF2mField(0x13)
    for a in range(16):
        for b in range(16):
            assert field.mul(a, b) == _clmul_mod(a, b, 0x13, 4)


def test_accmul_is_multiply_then_xor() -> None:
    field = GF2mField(0xB)
    assert field.alpha == 2
    for acc in range(8):
        for h_log in range(7):
            assert field.accmul(acc, h_log, 0) == acc
            for x in range(1, 8):
                expected = acc ^ field.mul(field.element(h_log), x)
                assert field.accmul(acc, h_log, x) == expected


def test_accmul_terms_commute() -> None:
    field = GF2mField(0x25)
    for x in range(32):
        for h1 in range(0, 31, 3):
            for h2 in range(0, 31, 5):
                left = field.accmul(field.accmul(0, h1, x), h2, x)
                right = field.accmul(field.accmul(0, h2, x), h1, x)
                assert left == right
                assert field.accmul(0, h1, x) ^ field.accmul(0, h2, x) == left


def test_close_releases_tables() -> None:
    with GF2mField(0x7) as field:
        assert field.size == 4
        assert not field.closed
    assert field.closed
    assert field.log == []
    assert field.exp == []


def test_log_of_zero_raises() -> None:
    field = GF2mField(0xB)
    with pytest.raises(ValueError):
        field.log_of(0)
    assert field.log_of(field.element(5)) == 5


def test_field_for_size() -> None:
    assert field_for_size(8).polynomial == 0xB
    assert field_for_size(256).polynomial == 0x11D
    with pytest.raises(ConfigurationError):
        field_for_size(12)
    with pytest.raises(ConfigurationError):
        field_for_size(2048)


def test_independent_fields_coexist() -> None:
    small = GF2mField(0x7)
    large = GF2mField(0x11D)
    assert small.mul(2, 2) == 3
    assert large.mul(2, 2) == 4
