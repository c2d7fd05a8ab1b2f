"""Helpers for the parity search: pruning rule, parsing and formatting."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from .config import ConfigurationError
from .spectrum import Spectrum, compare_spectra


class PruneDecision(Enum):
    CONTINUE = "continue"
    PRUNE = "prune"
    DONE = "done"


def prune_decision(
    current: Spectrum,
    best: Optional[Spectrum],
    *,
    start: int,
    exhausted: bool,
) -> PruneDecision:
    """Branch-and-bound test after a codeword's neighbors were accumulated.

    Counts only grow, so once the partial spectrum is strictly worse than the
    best one it can never catch up.
    """
    if best is not None and compare_spectra(current, best, start) > 0:
        return PruneDecision.PRUNE
    if exhausted:
        return PruneDecision.DONE
    return PruneDecision.CONTINUE


def should_replace_best(
    current: Sequence[int], best: Optional[Sequence[int]], *, start: int
) -> bool:
    """A finished spectrum replaces the best when it is better or tied."""
    if best is None:
        return True
    return compare_spectra(current, best, start) <= 0


def parse_int_list(value: str) -> List[int]:
    if not value or not value.strip():
        raise ConfigurationError("Empty list; expected comma-separated integers.")
    items: List[int] = []
    for raw_part in value.replace(",", " ").split():
        try:
            items.append(int(raw_part, 0))
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid entry '{raw_part}'; expected integers."
            ) from exc
    return items


def parse_polynomial(value: str) -> int:
    """Parse '0xb', '0b1011' or '11' into a polynomial bitmask."""
    text = value.strip()
    try:
        poly = int(text, 0)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid polynomial '{value}'; expected e.g. 0xb or 0b1011."
        ) from exc
    if poly < 3:
        raise ConfigurationError(f"Polynomial '{value}' has degree < 1.")
    return poly


def format_counts(counts: Sequence[int]) -> str:
    return "\t".join(str(c) for c in counts) + f"\t\t({sum(counts)})"


def format_best_line(parity: Sequence[int], counts: Sequence[int]) -> str:
    """Parity exponents, then the spectrum and its total."""
    head = " ".join(f"{e:2d}" for e in parity)
    return f"{head}\t{format_counts(counts)}"


__all__ = [
    "PruneDecision",
    "format_best_line",
    "format_counts",
    "parse_int_list",
    "parse_polynomial",
    "prune_decision",
    "should_replace_best",
]
