"""GF(2^m) arithmetic with log/exp tables built from a primitive polynomial.

Elements are ints in ``[0, q)``; addition is XOR. Multiplication goes through
the discrete logarithm with respect to the root ``alpha`` of the polynomial.
Parity coefficients are handled in the log domain, so the hot operation is
``accmul``: ``acc + alpha^h_log * x``.
"""

from __future__ import annotations

from typing import Dict, List

from .config import ConfigurationError

LOG_ZERO = -1

# q -> binary representation of a primitive polynomial of degree log2(q).
# X^3 + X + 1 is 0b1011 == 0xb.
PRIMITIVE_POLYNOMIALS: Dict[int, int] = {
    2: 0x3,
    4: 0x7,
    8: 0xB,
    16: 0x13,
    32: 0x25,
    64: 0x43,
    128: 0x89,
    256: 0x11D,
    512: 0x221,
    1024: 0x409,
}


class GF2mField:
    """Field context for GF(2^m); pass it to every component that needs it."""

    def __init__(self, polynomial: int) -> None:
        degree = int(polynomial).bit_length() - 1
        if degree < 1:
            raise ConfigurationError(
                f"Polynomial {polynomial:#x} has degree < 1; no field to build."
            )
        size = 1 << degree
        order = size - 1
        log: List[int] = [LOG_ZERO] * size
        exp: List[int] = [0] * order
        x = 1
        for k in range(order):
            if k and x == 1:
                raise ConfigurationError(
                    f"Polynomial {polynomial:#x} is not primitive: "
                    f"alpha has order {k} < {order}."
                )
            log[x] = k
            exp[k] = x
            x <<= 1
            if x >= size:
                x ^= polynomial
        if x != 1:
            raise ConfigurationError(
                f"Polynomial {polynomial:#x} is not primitive for GF({size})."
            )
        self.polynomial = int(polynomial)
        self.degree = degree
        self.size = size
        self.order = order
        self.log = log
        self.exp = exp
        self.closed = False

    @property
    def alpha(self) -> int:
        return self.exp[1 % self.order]

    def accmul(self, acc: int, h_log: int, x: int) -> int:
        """Return ``acc + alpha^h_log * x``."""
        if x == 0:
            return acc
        return acc ^ self.exp[(h_log + self.log[x]) % self.order]

    def mul(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp[(self.log[a] + self.log[b]) % self.order]

    def element(self, k: int) -> int:
        """alpha^k."""
        return self.exp[k % self.order]

    def log_of(self, x: int) -> int:
        if x == 0:
            raise ValueError("0 has no discrete logarithm.")
        return self.log[x]

    def close(self) -> None:
        """Release the tables; the context is unusable afterwards."""
        self.log = []
        self.exp = []
        self.closed = True

    def __enter__(self) -> "GF2mField":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"GF2mField(q={self.size}, polynomial={self.polynomial:#x})"


def field_for_size(q: int) -> GF2mField:
    """Build GF(q) from the tabulated primitive polynomial."""
    if q < 2 or q & (q - 1):
        raise ConfigurationError(
            f"Field size must be a power of two, characteristic 2 only (got {q})."
        )
    polynomial = PRIMITIVE_POLYNOMIALS.get(q)
    if polynomial is None:
        raise ConfigurationError(
            f"No primitive polynomial tabulated for GF({q}); pass one explicitly."
        )
    return GF2mField(polynomial)


__all__ = ["GF2mField", "LOG_ZERO", "PRIMITIVE_POLYNOMIALS", "field_for_size"]
