"""Helpers to load EIN lists (and optional display labels) from CSV/TSV or text files.

Behavior
- Accepts CSV/TSV with a header containing 'ein' (case-insensitive).
- If no header match, uses the first column.
- Also accepts newline-delimited plain text files.
- EINs are normalized: whitespace and hyphens removed ("47-0825376" -> "470825376").
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional
import csv


def normalize_ein(value: str) -> str:
    return "".join(ch for ch in str(value) if ch not in "- \t").strip()


def _open_text(path: Path) -> str:
    return Path(path).expanduser().read_text(encoding="utf-8", errors="ignore")


def _rows_from_csv(text: str) -> Optional[list[list[str]]]:
    try:
        sniffer = csv.Sniffer()
        dialect = sniffer.sniff(text[:2048], delimiters=",\t;")
        reader = csv.reader(text.splitlines(), dialect)
        return [list(r) for r in reader]
    except csv.Error:
        return None


def _header_index(header: list[str], names: list[str]) -> Optional[int]:
    lower = [h.strip().lower() for h in header]
    for n in names:
        try:
            return lower.index(n.lower())
        except ValueError:
            continue
    return None


def _dedupe(values: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for v in values:
        if v and v not in seen:
            out.append(v)
            seen.add(v)
    return out


def load_eins_from_file(path: str | Path) -> List[str]:
    """Return normalized EINs from CSV/TSV or text file, in file order.

    Handles these shapes:
    - Single row with many comma-separated EINs
    - Column of EINs (with or without header 'ein')
    - Generic newline-delimited text
    """
    p = Path(path).expanduser()
    text = _open_text(p)
    rows = _rows_from_csv(text)
    values: List[str] = []
    if rows and rows[0]:
        header = rows[0]
        idx = _header_index(header, ["ein", "eins"])
        if idx is not None:
            for r in rows[1:]:
                if len(r) > idx:
                    values.append(normalize_ein(r[idx]))
            return _dedupe(values)
        # Single row with many values
        if len(rows) == 1 and len(header) > 1:
            return _dedupe(normalize_ein(c) for c in header)
        # Fallback: first column
        for r in rows:
            if r:
                values.append(normalize_ein(r[0]))
        return _dedupe(values)
    # Fallback: newline delimited
    for line in text.splitlines():
        if line.strip().lower() in ("ein", "eins"):
            continue
        values.append(normalize_ein(line))
    return _dedupe(values)


def load_labels_from_file(path: str | Path) -> Dict[str, str]:
    """Return an ordered {ein: label} mapping from a two-column CSV/TSV.

    Uses 'ein' and 'label' (or 'name') headers when present, else the first
    two columns. Rows without a label keep the EIN with an empty label.
    """
    p = Path(path).expanduser()
    rows = _rows_from_csv(_open_text(p)) or []
    if not rows:
        return {}
    header = rows[0]
    ein_idx = _header_index(header, ["ein"])
    label_idx = _header_index(header, ["label", "name"])
    if ein_idx is None:
        ein_idx, label_idx, body = 0, 1, rows
    else:
        body = rows[1:]
    out: Dict[str, str] = {}
    for r in body:
        if len(r) <= ein_idx:
            continue
        ein = normalize_ein(r[ein_idx])
        if not ein or ein in out:
            continue
        label = r[label_idx].strip() if label_idx is not None and len(r) > label_idx else ""
        out[ein] = label
    return out
