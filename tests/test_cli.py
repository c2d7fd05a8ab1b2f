from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from gfparity.cli import main
from gfparity.config import SearchConfig
from gfparity.constellation import grid_constellation, identity_mapping
from gfparity.search import search_best_parity

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def _write_grid(tmp_path: Path) -> tuple[str, str]:
    cpath = tmp_path / "grid.txt"
    mpath = tmp_path / "map.txt"
    rc = main(
        [
            "constellation",
            "--width", "4",
            "--height", "2",
            "--out", str(cpath),
            "--mapping-out", str(mpath),
        ]
    )
    assert rc == 0
    return str(cpath), str(mpath)


def test_search_json_and_leaderboard(tmp_path, capsys) -> None:
    cpath, mpath = _write_grid(tmp_path)
    best_json = tmp_path / "best.json"
    capsys.readouterr()

    rc = main(
        ["search", "3", cpath, mpath, "--qmax", "6", "--json", "--best-json", str(best_json)]
    )
    assert rc == 0
    out = capsys.readouterr().out
    assert "GF(8 = 2^3)" in out
    assert "codelength: 3" in out
    assert "qmax: 6" in out
    assert "[search] updated" in out
    payload = json.loads(out[out.index("{"):])

    expected = search_best_parity(
        grid_constellation(4, 2), [identity_mapping(8)], SearchConfig(n=3, qmax=6)
    )
    assert payload["best"]["parity"] == list(expected.best.parity)
    assert payload["best"]["spectrum"] == list(expected.best.spectrum)
    assert payload["config"] == {"n": 3, "qmax": 6, "qmin": 1}

    stored = json.loads(best_json.read_text(encoding="utf-8"))
    assert stored["q=8,n=3,qmin=1,qmax=6"]["parity"] == list(expected.best.parity)

    rc = main(["search", "3", cpath, mpath, "--qmax", "6", "--best-json", str(best_json)])
    assert rc == 0
    assert "[search] updated" not in capsys.readouterr().out


def test_spectra_and_sieve(tmp_path, capsys) -> None:
    cpath, mpath = _write_grid(tmp_path)
    capsys.readouterr()
    assert main(["spectra", "3", cpath, mpath, "--qmax", "6"]) == 0
    out = capsys.readouterr().out
    rows = [line for line in out.splitlines() if line[:4].strip().isdigit()]
    assert "Spectra" in out
    assert len(rows) == 15
    assert rows[0].startswith("   0:  2  1  0:")

    ppath = tmp_path / "parities.txt"
    ppath.write_text("2 1 0\n3 1 0\n", encoding="utf-8")
    assert main(["sieve", "3", "2", cpath, mpath, str(ppath)]) == 0
    out = capsys.readouterr().out
    assert "quad: 2" in out
    assert "[sieve] parities=2" in out


def test_errors_return_2(tmp_path, capsys) -> None:
    cpath, mpath = _write_grid(tmp_path)
    capsys.readouterr()
    assert main(["search", "8", cpath, mpath]) == 2
    assert "codelength" in capsys.readouterr().err

    assert main(["spectra", "3", cpath, mpath, "--mapping-index", "3"]) == 2
    assert "Mapping index 3" in capsys.readouterr().err

    assert main(["search", "3", cpath, mpath, "--polynomial", "0x13"]) == 2
    assert main(["search", "3", str(tmp_path / "missing.txt"), mpath]) == 2

    rc = main(
        [
            "constellation",
            "--width", "4",
            "--height", "2",
            "--mapping", "dvb-t2",
            "--out", str(tmp_path / "x.txt"),
        ]
    )
    assert rc == 2
    assert "DVB-T2" in capsys.readouterr().err


def test_module_help() -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    proc = subprocess.run(
        [sys.executable, "-m", "gfparity.cli", "search", "--help"],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )
    output = (proc.stdout or "") + (proc.stderr or "")
    assert proc.returncode == 0
    assert "--qmax" in output
    assert "--best-json" in output
