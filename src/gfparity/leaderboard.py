"""Leaderboard helpers for tracking the best parity per field size and length."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from .spectrum import compare_spectra


def load_best(path: str) -> Dict[str, Dict[str, object]]:
    """Best parity records keyed by ``key_qn``; a missing file is an empty board."""
    best_path = Path(path)
    if not best_path.exists():
        return {}
    with best_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object in {path}.")
    return data


def save_best(path: str, data: Dict[str, Dict[str, object]]) -> None:
    """Write the parity leaderboard, creating parent directories as needed."""
    best_path = Path(path)
    best_path.parent.mkdir(parents=True, exist_ok=True)
    with best_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def key_qn(q: int, n: int, qmin: int, qmax: int) -> str:
    return f"q={q},n={n},qmin={qmin},qmax={qmax}"


def maybe_update_best(data: Dict[str, Dict[str, object]], record: Dict[str, object]) -> bool:
    """Store ``record`` when its spectrum beats the stored one for its key.

    Ties keep the stored record.
    """
    q = record.get("q")
    n = record.get("n")
    qmin = record.get("qmin")
    qmax = record.get("qmax")
    spectrum = record.get("spectrum")
    if q is None or n is None or qmin is None or qmax is None or spectrum is None:
        raise ValueError("Record missing required fields q, n, qmin, qmax, spectrum.")
    key = key_qn(int(q), int(n), int(qmin), int(qmax))
    current = data.get(key)
    if current is None or current.get("spectrum") is None:
        data[key] = record
        return True
    current_spectrum = [int(c) for c in current["spectrum"]]
    new_spectrum = [int(c) for c in spectrum]
    if compare_spectra(new_spectrum, current_spectrum, int(qmin)) < 0:
        data[key] = record
        return True
    return False


__all__ = ["load_best", "save_best", "key_qn", "maybe_update_best"]
