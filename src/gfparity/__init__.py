"""gfparity: search GF(2^m) parity checks by distance spectrum."""

from .codewords import CodewordEnumerator, satisfies_parity
from .config import ConfigurationError, SearchConfig
from .constellation import (
    dvb_t2_mapping,
    grid_constellation,
    identity_mapping,
    read_constellation,
    read_mappings,
    square_qam,
    validate_mapping,
)
from .exhaustive import all_parity_spectra
from .gf2m import LOG_ZERO, PRIMITIVE_POLYNOMIALS, GF2mField, field_for_size
from .neighbors import DeltaEnumerator, NeighborIndex
from .parity import ParityEnumerator, canonical_parity, parity_count
from .search import BestParity, ParitySearch, SearchResult, search_best_parity
from .search_utils import PruneDecision, prune_decision
from .sieve import multiplicity_at, sieve_parities
from .spectrum import Spectrum, compare_spectra

__all__ = [
    "GF2mField",
    "LOG_ZERO",
    "PRIMITIVE_POLYNOMIALS",
    "field_for_size",
    "ConfigurationError",
    "SearchConfig",
    "ParityEnumerator",
    "canonical_parity",
    "parity_count",
    "CodewordEnumerator",
    "satisfies_parity",
    "NeighborIndex",
    "DeltaEnumerator",
    "Spectrum",
    "compare_spectra",
    "PruneDecision",
    "prune_decision",
    "BestParity",
    "ParitySearch",
    "SearchResult",
    "search_best_parity",
    "all_parity_spectra",
    "multiplicity_at",
    "sieve_parities",
    "read_constellation",
    "read_mappings",
    "validate_mapping",
    "grid_constellation",
    "square_qam",
    "identity_mapping",
    "dvb_t2_mapping",
]
