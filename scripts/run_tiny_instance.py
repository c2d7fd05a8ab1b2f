#!/usr/bin/env python3
"""Run the GF(8), n=3 search on a 4x2 grid and check it against the exhaustive table."""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from gfparity.config import SearchConfig
from gfparity.constellation import grid_constellation, identity_mapping
from gfparity.exhaustive import all_parity_spectra
from gfparity.gf2m import GF2mField
from gfparity.neighbors import NeighborIndex
from gfparity.search import ParitySearch
from gfparity.search_utils import format_best_line, should_replace_best


def main() -> int:
    points = grid_constellation(4, 2)
    mapping = identity_mapping(8)
    config = SearchConfig(n=3, qmax=8)
    with GF2mField(0xB) as field:
        result = ParitySearch(field, points, [mapping], config).run()
        table = all_parity_spectra(field, NeighborIndex(points, mapping), 3, 8)

    expected = None
    for parity, counts in table:
        if expected is None or should_replace_best(counts, expected[1], start=1):
            expected = (parity, counts)

    best = result.best
    print(format_best_line(best.parity, best.spectrum))
    print(f"pruned {result.stats.pruned} of {result.stats.parities} parities")
    if (best.parity, list(best.spectrum)) != (expected[0], expected[1]):
        raise RuntimeError(f"search {best.parity} disagrees with table {expected[0]}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
