# kickoff_hub/sheets/csv_text.py
from __future__ import annotations

import io
import re
from typing import Optional

import pandas as pd

from kickoff_hub.errors import EmptyDataError, FormatError
from kickoff_hub.sheets.gviz import not_public_error
from kickoff_hub.sheets.table import Row, rows_to_dicts
from kickoff_hub.utils import _strip_na, looks_like_html
from kickoff_hub.utils_debug import dbg


_FIELD_COUNT_RE = re.compile(r"saw (\d+)")


def _read_frame(text: str, width: Optional[int]) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        names=range(width) if width else None,
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        skip_blank_lines=True,
        quotechar='"',
        doublequote=True,
        sep=",",
        engine="c",
    )


def read_csv_rows(text: str) -> list[list[str]]:
    """
    Scan delimited text into rows of fields.

    - "," delimiter, '"' quoting, "" inside quotes is a literal quote
    - \\r, \\n and \\r\\n all end a row
    - blank rows (including trailing ones) are dropped
    - rows may differ in length; short ones come back padded with ""
    Every field comes back as a str; nothing is coerced to numbers/NaN.
    """
    if not (text or "").strip():
        return []

    # The C tokenizer fixes the width from the first row and rejects longer
    # rows; widen to the longest row it reports and read again.
    width: Optional[int] = None
    while True:
        try:
            df = _read_frame(text, width)
            break
        except pd.errors.EmptyDataError:
            return []
        except pd.errors.ParserError as e:
            m = _FIELD_COUNT_RE.search(str(e))
            seen = int(m.group(1)) if m else 0
            if seen <= (width or 0):
                raise FormatError(f"Could not parse CSV response: {e}") from e
            dbg("parse.csv.widen", width=seen)
            width = seen

    rows: list[list[str]] = []
    for values in df.itertuples(index=False, name=None):
        row = [_strip_na(v) for v in values]
        if any(cell.strip() for cell in row):
            rows.append(row)

    # drop the padding columns no row actually filled
    used = max((max((i + 1 for i, c in enumerate(r) if c != ""), default=0) for r in rows), default=0)
    return [r[:used] for r in rows]


def parse_csv_text(text: str) -> list[Row]:
    """
    Header row is row zero; the rest are data.

    Raises:
      FormatError     an HTML page came back / tokenizer failure
      EmptyDataError  fewer than two rows
    """
    if looks_like_html(text):
        raise not_public_error(text)

    rows = read_csv_rows(text)
    dbg("parse.csv", rows=len(rows))

    if len(rows) < 2:
        raise EmptyDataError("The sheet has no data rows (header only or empty).")

    header, data = rows[0], rows[1:]
    return rows_to_dicts(header, data)
