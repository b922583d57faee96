# kickoff_hub/sheets/table.py
from __future__ import annotations

from typing import Sequence

Row = dict[str, str]


def unique_headers(headers: Sequence[str]) -> list[str]:
    """
    Blank headers become column_<n> (1-based). Repeated headers are kept
    but only the first occurrence is addressable by name; later ones get
    a numeric suffix ("Title", "Title_2").
    """
    out: list[str] = []
    seen: dict[str, int] = {}
    for i, h in enumerate(headers, start=1):
        name = (h or "").strip() or f"column_{i}"
        key = name.lower()
        if key in seen:
            seen[key] += 1
            name = f"{name}_{seen[key]}"
        else:
            seen[key] = 1
        out.append(name)
    return out


def rows_to_dicts(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[Row]:
    """Zip each data row against the header row; short rows pad with ""."""
    names = unique_headers(headers)
    out: list[Row] = []
    for row in rows:
        out.append({name: (row[i] if i < len(row) else "") for i, name in enumerate(names)})
    return out
