from __future__ import annotations

import pytest

from gfparity.config import ConfigurationError
from gfparity.constellation import grid_constellation, identity_mapping
from gfparity.exhaustive import all_parity_spectra
from gfparity.gf2m import GF2mField
from gfparity.neighbors import NeighborIndex
from gfparity.sieve import multiplicity_at, read_parities, sieve_parities


@pytest.fixture(scope="module")
def setup():
    field = GF2mField(0xB)
    index = NeighborIndex(grid_constellation(4, 2), identity_mapping(8))
    table = all_parity_spectra(field, index, 3, 6)
    return field, index, table


def test_multiplicity_matches_spectrum(setup) -> None:
    field, index, table = setup
    for parity, counts in table[:6]:
        for quad in range(1, 6):
            assert multiplicity_at(field, index, parity, quad) == counts[quad]


def test_limit_cuts_off(setup) -> None:
    field, index, table = setup
    parity, counts = table[0]
    quad = next(q for q in range(1, 6) if counts[q])
    assert multiplicity_at(field, index, parity, quad, limit=counts[quad]) == counts[quad]
    assert multiplicity_at(field, index, parity, quad, limit=counts[quad] - 1) is None


def test_sieve_keeps_ties_and_cuts_worse(setup) -> None:
    field, index, table = setup
    quad = None
    for q in range(1, 6):
        values = {counts[q] for _, counts in table}
        if len(values) > 1:
            quad = q
            break
    assert quad is not None
    ranked = sorted(table, key=lambda row: row[1][quad])
    (good, good_counts), (bad, bad_counts) = ranked[0], ranked[-1]

    seen = []
    shifted = [e + 1 for e in good]
    records = sieve_parities(
        field, index, [good, shifted, bad], quad, on_improvement=seen.append
    )
    assert [r.parity for r in records] == [good, good, bad]
    assert records[0].multiplicity == good_counts[quad]
    assert records[1].improved is True
    assert records[1].multiplicity == good_counts[quad]
    assert records[2].multiplicity is None
    assert records[2].improved is False
    assert seen == records[:2]


def test_sieve_rejects_bad_input(setup) -> None:
    field, index, _ = setup
    with pytest.raises(ConfigurationError):
        multiplicity_at(field, index, [2, 1, 0], 0)
    with pytest.raises(ConfigurationError):
        sieve_parities(field, index, [[7, 6, 5, 4, 3, 2, 1, 0]], 1)


def test_read_parities(tmp_path) -> None:
    path = tmp_path / "parities.txt"
    path.write_text("2 1 0\n3 1 0\n", encoding="utf-8")
    assert read_parities(path, 3) == [[2, 1, 0], [3, 1, 0]]
    with pytest.raises(ConfigurationError):
        read_parities(path, 4)
