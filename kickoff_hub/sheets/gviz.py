"""
Google Visualization (GViz) JSON response parser.

The gviz endpoint answers with JavaScript, not JSON:

    /*O_o*/
    google.visualization.Query.setResponse({"version":"0.6", ..., "table":{...}});

The payload carries:
- table.cols[]: {"id": "A", "label": "Title", "type": "string"}
- table.rows[]: {"c": [{"v": raw, "f": "formatted"} | null, ...]}

The formatted value wins when present (dates, currency, checkboxes show the
way they do in the sheet).
"""

from __future__ import annotations

import json
import re
from typing import Any

from kickoff_hub.config import ERROR_SNIPPET_CHARS
from kickoff_hub.errors import EmptyDataError, FormatError
from kickoff_hub.sheets.table import Row, rows_to_dicts
from kickoff_hub.utils import cell_to_text, html_page_title, looks_like_html, snippet
from kickoff_hub.utils_debug import dbg


ENVELOPE_RE = re.compile(r"setResponse\((.*)\)\s*;?\s*$", re.S)

NOT_PUBLIC_HINT = (
    "Google returned an HTML page instead of data. "
    "Is the sheet published or shared 'Anyone with the link can view'?"
)


def not_public_error(text: str) -> FormatError:
    title = html_page_title(text)
    return FormatError(NOT_PUBLIC_HINT + (f" (page title: {title!r})" if title else ""))


def unwrap_envelope(text: str) -> dict[str, Any]:
    if looks_like_html(text):
        raise not_public_error(text)

    m = ENVELOPE_RE.search(text or "")
    if not m:
        raise FormatError(
            "Unexpected Google Sheets response (no setResponse envelope). "
            f"First {ERROR_SNIPPET_CHARS} chars: {(text or '')[:ERROR_SNIPPET_CHARS]!r}"
        )

    try:
        payload = json.loads(m.group(1))
    except json.JSONDecodeError as e:
        raise FormatError(f"Malformed JSON inside setResponse envelope: {e}") from e

    if not isinstance(payload, dict):
        raise FormatError("setResponse payload is not an object")

    if payload.get("status") == "error":
        errors = payload.get("errors") or [{}]
        first = errors[0] if isinstance(errors[0], dict) else {}
        detail = first.get("detailed_message") or first.get("message") or "unknown error"
        raise FormatError(f"Google Sheets query error: {detail}")

    return payload


def _column_names(cols: list[Any]) -> list[str]:
    names: list[str] = []
    for c in cols:
        if not isinstance(c, dict):
            names.append("")
            continue
        names.append(cell_to_text(c.get("label")) or cell_to_text(c.get("id")))
    return names


def _cell_value(cell: Any) -> str:
    if not isinstance(cell, dict):
        return ""
    f = cell.get("f")
    if f is not None:
        return cell_to_text(f)
    return cell_to_text(cell.get("v"))


def parse_gviz_text(text: str) -> list[Row]:
    """
    Returns one {column label -> cell text} dict per data row.

    Raises:
      FormatError     no envelope / HTML page / bad table shape
      EmptyDataError  table has no rows
    """
    payload = unwrap_envelope(text)

    table = payload.get("table")
    if not isinstance(table, dict):
        raise FormatError(f"No table in response. Snippet: {snippet(text, ERROR_SNIPPET_CHARS)}")

    cols = table.get("cols")
    rows = table.get("rows")
    if not isinstance(cols, list) or not isinstance(rows, list):
        raise FormatError("Response table is missing cols/rows")

    headers = _column_names(cols)
    cells: list[list[str]] = []
    for r in rows:
        raw = (r or {}).get("c") if isinstance(r, dict) else None
        cells.append([_cell_value(c) for c in (raw or [])])

    dbg("parse.gviz", cols=len(headers), rows=len(cells))

    if not cells:
        raise EmptyDataError("The sheet has a header row but no data rows.")

    return rows_to_dicts(headers, cells)
