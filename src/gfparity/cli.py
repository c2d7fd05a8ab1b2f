from __future__ import annotations

import argparse
import json
import sys
import time
from typing import List, Optional

from .config import ConfigurationError, SearchConfig
from .constellation import (
    dvb_t2_mapping,
    grid_constellation,
    identity_mapping,
    read_constellation,
    read_mappings,
    square_qam,
    write_constellation,
    write_mappings,
)
from .exhaustive import all_parity_spectra
from .gf2m import GF2mField, field_for_size
from .leaderboard import load_best, maybe_update_best, save_best
from .neighbors import NeighborIndex
from .search import BestParity, resolve_qmax, search_best_parity
from .search_utils import format_best_line, format_counts, parse_polynomial
from .sieve import SieveRecord, read_parities, sieve_parities


def _timestamp_utc() -> str:
    return time.strftime("%Y%m%dT%H%M%SZ", time.gmtime())


def _build_field(q: int, polynomial: Optional[str]) -> GF2mField:
    if polynomial is None:
        return field_for_size(q)
    field = GF2mField(parse_polynomial(polynomial))
    if field.size != q:
        raise ConfigurationError(
            f"Polynomial {polynomial} builds GF({field.size}) but the "
            f"constellation has {q} points."
        )
    return field


def _select_mapping(mappings: List[List[int]], idx: int) -> List[int]:
    if idx < 0 or idx >= len(mappings):
        raise ConfigurationError(
            f"Mapping index {idx} out of range; the file holds {len(mappings)}."
        )
    return mappings[idx]


def _print_header(args: argparse.Namespace, q: int, mappings: List[List[int]]) -> None:
    print(f"Constellation: {args.constellation}")
    print(f"GF({q} = 2^{q.bit_length() - 1})")
    print(f"codelength: {args.codelength}")
    for idx, mapping in enumerate(mappings):
        print(f"Mapping {idx}: " + " ".join(str(v) for v in mapping))
    sys.stdout.flush()


def _run_search(args: argparse.Namespace) -> int:
    points = read_constellation(args.constellation)
    q = len(points)
    mappings = read_mappings(args.mappings, q)
    config = SearchConfig(
        n=args.codelength, qmax=args.qmax, qmin=args.qmin, verbose=args.verbose
    )
    config.validate(q)
    qmax = resolve_qmax(config, points)
    _print_header(args, q, mappings)
    print(f"qmin: {config.qmin}")
    print(f"qmax: {qmax}", flush=True)

    def _report(best: BestParity) -> None:
        prefix = f"[{best.mapping_index}] " if len(mappings) > 1 else ""
        print(prefix + format_best_line(best.parity, best.spectrum), flush=True)

    polynomial = parse_polynomial(args.polynomial) if args.polynomial else None
    result = search_best_parity(
        points, mappings, config, polynomial=polynomial, on_improvement=_report
    )

    if result.best is not None:
        best = result.best
        print(
            f"[search] best parity={list(best.parity)} elements={list(best.elements)} "
            f"mapping={best.mapping_index} dmin2={best.minimum_quadrance(config.qmin)}",
            flush=True,
        )
    stats = result.stats
    print(
        f"[search] parities={stats.parities} pruned={stats.pruned} "
        f"codewords={stats.codewords} neighbors={stats.neighbors}",
        flush=True,
    )

    if args.best_json and result.best is not None:
        data = load_best(args.best_json)
        record = {
            "q": q,
            "n": config.n,
            "qmin": config.qmin,
            "qmax": result.qmax,
            "constellation": str(args.constellation),
            "timestamp": _timestamp_utc(),
            **result.best.as_dict(),
        }
        if maybe_update_best(data, record):
            save_best(args.best_json, data)
            print(f"[search] updated {args.best_json}", flush=True)

    if args.json:
        payload = {"q": q, "config": config.as_dict(), **result.as_dict()}
        print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def _run_spectra(args: argparse.Namespace) -> int:
    points = read_constellation(args.constellation)
    q = len(points)
    mapping = _select_mapping(read_mappings(args.mappings, q), args.mapping_index)
    config = SearchConfig(n=args.codelength, qmax=args.qmax)
    config.validate(q)
    qmax = resolve_qmax(config, points)
    _print_header(args, q, [mapping])
    print(f"qmax: {qmax}", flush=True)

    with _build_field(q, args.polynomial) as field:
        index = NeighborIndex(points, mapping)
        table = all_parity_spectra(field, index, config.n, qmax)
    print("Spectra")
    for hid, (parity, counts) in enumerate(table):
        head = " ".join(f"{e:2d}" for e in parity)
        print(f"{hid:4d}: {head}:\t{format_counts(counts)}")
    sys.stdout.flush()
    return 0


def _run_sieve(args: argparse.Namespace) -> int:
    points = read_constellation(args.constellation)
    q = len(points)
    mapping = _select_mapping(read_mappings(args.mappings, q), args.mapping_index)
    SearchConfig(n=args.codelength).validate(q)
    parities = read_parities(args.parities, args.codelength)
    _print_header(args, q, [mapping])
    print(f"quad: {args.quad}", flush=True)

    def _report(record: SieveRecord) -> None:
        head = " ".join(f"{e:2d}" for e in record.parity)
        print(f"{head}\t{record.multiplicity}", flush=True)

    with _build_field(q, args.polynomial) as field:
        index = NeighborIndex(points, mapping)
        records = sieve_parities(field, index, parities, args.quad, on_improvement=_report)
    cut = sum(1 for rec in records if rec.multiplicity is None)
    print(f"[sieve] parities={len(records)} cut={cut}", flush=True)
    return 0


def _run_constellation(args: argparse.Namespace) -> int:
    if args.width is not None or args.height is not None:
        if args.width is None or args.height is None:
            raise ConfigurationError("--width and --height go together.")
        points = grid_constellation(args.width, args.height)
    else:
        points = square_qam(args.order)
    q = len(points)
    if args.mapping == "dvb-t2":
        mapping = dvb_t2_mapping(q)
    else:
        mapping = identity_mapping(q)
    write_constellation(args.out, points)
    print(f"[constellation] wrote {q} points to {args.out}")
    if args.mapping_out:
        write_mappings(args.mapping_out, [mapping])
        print(f"[constellation] wrote {args.mapping} mapping to {args.mapping_out}")
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("codelength", type=int, help="Code length n (2 <= n < q).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gfparity",
        description="Search GF(2^m) parity checks with the best distance spectrum.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Branch-and-bound search for the best parity.")
    _add_common(search)
    search.add_argument("constellation", help="Constellation file (x y per point).")
    search.add_argument("mappings", help="Mappings file, '-' for stdin.")
    search.add_argument(
        "--qmax",
        type=int,
        default=None,
        help="Exclusive upper bound of the spectrum window (default: whole spectrum).",
    )
    search.add_argument(
        "--qmin",
        type=int,
        default=1,
        help="First quadrance compared between spectra.",
    )
    search.add_argument(
        "--polynomial",
        type=str,
        default=None,
        help="Primitive polynomial, e.g. 0xb (default: tabulated for q).",
    )
    search.add_argument(
        "--best-json", type=str, default=None, help="Leaderboard JSON to update."
    )
    search.add_argument("--json", action="store_true", help="Print a JSON summary.")
    search.add_argument("--verbose", action="store_true", help="Progress logging.")

    spectra = sub.add_parser("spectra", help="Spectra of every parity, no pruning.")
    _add_common(spectra)
    spectra.add_argument("constellation")
    spectra.add_argument("mappings")
    spectra.add_argument("--mapping-index", type=int, default=0)
    spectra.add_argument("--qmax", type=int, default=None)
    spectra.add_argument("--polynomial", type=str, default=None)

    sieve = sub.add_parser(
        "sieve", help="Sieve given parities by multiplicity at one quadrance."
    )
    _add_common(sieve)
    sieve.add_argument("quad", type=int, help="Quadrance to count.")
    sieve.add_argument("constellation")
    sieve.add_argument("mappings")
    sieve.add_argument("parities", help="Parities file (log exponents), '-' for stdin.")
    sieve.add_argument("--mapping-index", type=int, default=0)
    sieve.add_argument("--polynomial", type=str, default=None)

    const = sub.add_parser("constellation", help="Write a QAM grid and its mapping.")
    const.add_argument("--order", type=int, default=16, help="Square QAM order.")
    const.add_argument("--width", type=int, default=None)
    const.add_argument("--height", type=int, default=None)
    const.add_argument("--mapping", choices=["identity", "dvb-t2"], default="identity")
    const.add_argument("--out", required=True, help="Constellation output file.")
    const.add_argument("--mapping-out", default=None, help="Mapping output file.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handlers = {
        "search": _run_search,
        "spectra": _run_spectra,
        "sieve": _run_sieve,
        "constellation": _run_constellation,
    }
    try:
        return handlers[args.command](args)
    except (ConfigurationError, OSError) as exc:
        sys.stdout.flush()
        print(f"error: {exc}", file=sys.stderr, flush=True)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
