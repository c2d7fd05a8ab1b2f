"""Distance spectra: multiplicities of quadrances between codeword pairs."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union


class Spectrum:
    """Histogram over the quadrance window ``[0, qmax)``."""

    __slots__ = ("counts",)

    def __init__(self, qmax: int) -> None:
        self.counts: List[int] = [0] * qmax

    @property
    def qmax(self) -> int:
        return len(self.counts)

    def accumulate(self, quad: int) -> None:
        if 0 <= quad < len(self.counts):
            self.counts[quad] += 1

    def reset(self) -> None:
        counts = self.counts
        for i in range(len(counts)):
            counts[i] = 0

    def copy(self) -> "Spectrum":
        other = Spectrum(0)
        other.counts = list(self.counts)
        return other

    def total(self) -> int:
        return sum(self.counts)

    def minimum_quadrance(self, start: int = 1) -> Optional[int]:
        """Smallest quadrance >= start with a nonzero count."""
        return first_nonzero(self.counts, start)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Spectrum):
            return NotImplemented
        return self.counts == other.counts

    def __repr__(self) -> str:
        return f"Spectrum({self.counts})"


def first_nonzero(counts: Sequence[int], start: int = 1) -> Optional[int]:
    for quad in range(start, len(counts)):
        if counts[quad]:
            return quad
    return None


def compare_spectra(
    a: Union[Spectrum, Sequence[int]], b: Union[Spectrum, Sequence[int]], start: int = 1
) -> int:
    """Three-way comparison of two spectra of the same window.

    Returns -1 when ``a`` is better, 1 when it is worse and 0 on a tie. The
    first bucket (from ``start`` up) where the counts differ decides: fewer
    pairs at the smallest differing quadrance is better.
    """
    if isinstance(a, Spectrum):
        a = a.counts
    if isinstance(b, Spectrum):
        b = b.counts
    if len(a) != len(b):
        raise ValueError(
            f"Spectra windows differ ({len(a)} vs {len(b)} buckets)."
        )
    for i in range(start, len(a)):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


__all__ = ["Spectrum", "compare_spectra", "first_nonzero"]
