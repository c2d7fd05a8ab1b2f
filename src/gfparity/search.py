"""Branch-and-bound search for distance-optimal parity checks over GF(2^m).

For every mapping, every canonical parity h, every codeword x of h and every
neighbor codeword y inside the quadrance budget, the pair quadrance is
accumulated into the spectrum of h. After each codeword the partial spectrum
is checked against the best one; a parity whose partial spectrum is already
worse is abandoned. The parity with the best finished spectrum is kept, later
ties replacing earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Callable, List, Optional, Sequence, Tuple

from .codewords import CodewordEnumerator
from .config import ConfigurationError, SearchConfig
from .constellation import Point, validate_constellation, validate_mapping
from .gf2m import GF2mField, field_for_size
from .neighbors import DeltaEnumerator, NeighborIndex, max_pair_quadrance
from .parity import ParityEnumerator, parity_elements
from .search_utils import PruneDecision, prune_decision, should_replace_best
from .spectrum import Spectrum, compare_spectra, first_nonzero


@dataclass(frozen=True)
class BestParity:
    parity: Tuple[int, ...]
    elements: Tuple[int, ...]
    spectrum: Tuple[int, ...]
    mapping_index: int
    mapping: Tuple[int, ...]

    @property
    def total(self) -> int:
        return sum(self.spectrum)

    def minimum_quadrance(self, start: int = 1) -> Optional[int]:
        return first_nonzero(self.spectrum, start)

    def as_dict(self) -> dict:
        return {
            "parity": list(self.parity),
            "elements": list(self.elements),
            "spectrum": list(self.spectrum),
            "total": self.total,
            "mapping_index": self.mapping_index,
            "mapping": list(self.mapping),
        }


@dataclass
class SearchStats:
    parities: int = 0
    pruned: int = 0
    codewords: int = 0
    neighbors: int = 0

    def as_dict(self) -> dict:
        return {
            "parities": self.parities,
            "pruned": self.pruned,
            "codewords": self.codewords,
            "neighbors": self.neighbors,
        }


@dataclass(frozen=True)
class SearchResult:
    best: Optional[BestParity]
    per_mapping: List[BestParity]
    qmax: int
    stats: SearchStats = dataclass_field(default_factory=SearchStats)

    def as_dict(self) -> dict:
        return {
            "qmax": self.qmax,
            "best": None if self.best is None else self.best.as_dict(),
            "per_mapping": [b.as_dict() for b in self.per_mapping],
            "stats": self.stats.as_dict(),
        }


ImprovementSink = Callable[[BestParity], None]


def _log(verbose: bool, msg: str) -> None:
    if verbose:
        print(msg, flush=True)


def resolve_qmax(config: SearchConfig, constellation: Sequence[Point]) -> int:
    """Spectrum window; without a configured bound, the whole spectrum."""
    if config.qmax is not None:
        return int(config.qmax)
    return config.n * max_pair_quadrance(constellation) + 1


class ParitySearch:
    """Search driver; owns the working buffers, borrows the field context."""

    def __init__(
        self,
        field: GF2mField,
        constellation: Sequence[Point],
        mappings: Sequence[Sequence[int]],
        config: SearchConfig,
        *,
        on_improvement: Optional[ImprovementSink] = None,
    ) -> None:
        self.constellation = validate_constellation(constellation)
        q = len(self.constellation)
        if field.size != q:
            raise ConfigurationError(
                f"Field GF({field.size}) does not match a constellation of {q} points."
            )
        config.validate(q)
        if not mappings:
            raise ConfigurationError("At least one mapping is required.")
        self.mappings = [validate_mapping(m, q) for m in mappings]
        self.field = field
        self.config = config
        self.qmax = resolve_qmax(config, self.constellation)
        if config.qmin >= self.qmax:
            raise ConfigurationError(
                f"Empty comparison window: qmin={config.qmin} must be below qmax={self.qmax}."
            )
        self.on_improvement = on_improvement
        self.stats = SearchStats()

    def search_mapping(self, mapping_index: int) -> Optional[BestParity]:
        """Best parity for one mapping."""
        config = self.config
        start = config.qmin
        mapping = self.mappings[mapping_index]
        index = NeighborIndex(self.constellation, mapping)
        _log(
            config.verbose,
            f"[search] mapping {mapping_index}: cqmin={index.cqmin} qmax={self.qmax}",
        )

        parities = ParityEnumerator(self.field, config.n)
        codewords = CodewordEnumerator(self.field, parities.h)
        deltas = DeltaEnumerator(self.field, index, parities.h, self.qmax)
        current = Spectrum(self.qmax)
        best_spectrum: Optional[Spectrum] = None
        best: Optional[BestParity] = None
        stats = self.stats

        parities.reset()
        while True:
            stats.parities += 1
            current.reset()
            codewords.reset()
            while True:
                stats.codewords += 1
                deltas.reset(codewords.x)
                while True:
                    current.accumulate(deltas.quadrance())
                    stats.neighbors += 1
                    if not deltas.advance():
                        break
                exhausted = not codewords.advance()
                decision = prune_decision(
                    current, best_spectrum, start=start, exhausted=exhausted
                )
                if decision is not PruneDecision.CONTINUE:
                    break

            if decision is PruneDecision.PRUNE:
                stats.pruned += 1
            elif should_replace_best(
                current.counts,
                None if best_spectrum is None else best_spectrum.counts,
                start=start,
            ):
                best_spectrum = current.copy()
                best = BestParity(
                    parity=tuple(parities.h),
                    elements=tuple(parity_elements(self.field, parities.h)),
                    spectrum=tuple(best_spectrum.counts),
                    mapping_index=mapping_index,
                    mapping=tuple(mapping),
                )
                if self.on_improvement is not None:
                    self.on_improvement(best)

            if not parities.advance():
                break

        _log(
            config.verbose,
            f"[search] mapping {mapping_index} done: best="
            f"{None if best is None else list(best.parity)} "
            f"(parities so far={stats.parities}, pruned={stats.pruned})",
        )
        return best

    def run(self) -> SearchResult:
        self.stats = SearchStats()
        per_mapping: List[BestParity] = []
        overall: Optional[BestParity] = None
        for mapping_index in range(len(self.mappings)):
            best = self.search_mapping(mapping_index)
            if best is None:
                continue
            per_mapping.append(best)
            if overall is None or compare_spectra(
                best.spectrum, overall.spectrum, self.config.qmin
            ) <= 0:
                overall = best
        return SearchResult(
            best=overall, per_mapping=per_mapping, qmax=self.qmax, stats=self.stats
        )


def search_best_parity(
    constellation: Sequence[Point],
    mappings: Sequence[Sequence[int]],
    config: SearchConfig,
    *,
    polynomial: Optional[int] = None,
    on_improvement: Optional[ImprovementSink] = None,
) -> SearchResult:
    """Build the field for the constellation size, search, release the field."""
    points = validate_constellation(constellation)
    field = GF2mField(polynomial) if polynomial is not None else field_for_size(len(points))
    with field:
        if field.size != len(points):
            raise ConfigurationError(
                f"Polynomial {field.polynomial:#x} builds GF({field.size}) but the "
                f"constellation has {len(points)} points."
            )
        search = ParitySearch(
            field, points, mappings, config, on_improvement=on_improvement
        )
        return search.run()


__all__ = [
    "BestParity",
    "ParitySearch",
    "SearchResult",
    "SearchStats",
    "resolve_qmax",
    "search_best_parity",
]
