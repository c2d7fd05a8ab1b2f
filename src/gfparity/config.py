"""Search configuration and the configuration error type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ConfigurationError(ValueError):
    """Malformed field, code length, constellation or mapping."""


@dataclass(frozen=True)
class SearchConfig:
    """Code length and spectrum window for a parity search.

    The spectrum window is ``[0, qmax)``; ``qmax=None`` means the whole
    spectrum. Spectra are compared from bucket ``qmin`` upward.
    """

    n: int
    qmax: Optional[int] = None
    qmin: int = 1
    verbose: bool = False

    def validate(self, q: int) -> None:
        if q < 2 or q & (q - 1):
            raise ConfigurationError(
                f"Field size must be a power of two (got {q})."
            )
        if self.n < 2:
            raise ConfigurationError(f"codelength must be at least 2 (got {self.n}).")
        if self.n >= q:
            raise ConfigurationError(
                f"codelength must be less than the field order (n={self.n}, q={q})."
            )
        if self.qmax is not None and self.qmax <= 0:
            raise ConfigurationError(f"qmax must be positive (got {self.qmax}).")
        if self.qmin < 0:
            raise ConfigurationError(f"qmin must be nonnegative (got {self.qmin}).")
        if self.qmax is not None and self.qmin >= self.qmax:
            raise ConfigurationError(
                f"Empty comparison window: qmin={self.qmin} must be below qmax={self.qmax}."
            )

    def as_dict(self) -> dict:
        return {"n": self.n, "qmax": self.qmax, "qmin": self.qmin}


__all__ = ["ConfigurationError", "SearchConfig"]
