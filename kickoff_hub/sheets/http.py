# kickoff_hub/sheets/http.py
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import cloudscraper
import requests

from kickoff_hub.config import (
    ERROR_SNIPPET_CHARS,
    EXPORT_CSV_URL,
    GVIZ_CSV_URL,
    GVIZ_JSON_URL,
    GVIZ_QUERY,
    HTTP_TIMEOUT_S,
    UA,
)
from kickoff_hub.errors import NetworkError
from kickoff_hub.utils import snippet
from kickoff_hub.utils_debug import dbg


def gviz_json_url(sheet_id: str, tab_name: str) -> str:
    return GVIZ_JSON_URL.format(
        sheet_id=sheet_id,
        sheet=quote(tab_name, safe=""),
        tq=quote(GVIZ_QUERY, safe=""),
    )


def gviz_csv_url(sheet_id: str, tab_name: str) -> str:
    return GVIZ_CSV_URL.format(sheet_id=sheet_id, sheet=quote(tab_name, safe=""))


def export_csv_url(sheet_id: str, gid: str) -> str:
    return EXPORT_CSV_URL.format(sheet_id=sheet_id, gid=quote(str(gid), safe=""))


def make_session() -> requests.Session:
    return cloudscraper.create_scraper(
        browser={"browser": "chrome", "platform": "linux", "mobile": False}
    )


def fetch_text(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: int = HTTP_TIMEOUT_S,
) -> str:
    """
    GET a sheet export URL and return the body text.

    Raises NetworkError on transport failure or a non-2xx status. Single
    attempt, no retry.
    """
    headers = {
        "User-Agent": UA,
        "Accept": "application/json,text/csv,text/plain;q=0.9,*/*;q=0.1",
    }

    sess = session or make_session()
    dbg("fetch", url=url)

    try:
        resp = sess.get(url, headers=headers, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise NetworkError(f"Request failed: {e}", url=url) from e

    body = resp.text or ""
    if not 200 <= resp.status_code < 300:
        raise NetworkError(
            f"HTTP {resp.status_code} fetching sheet. Snippet: {snippet(body, ERROR_SNIPPET_CHARS)}",
            url=url,
            status=resp.status_code,
        )

    dbg("fetch.ok", url=url, status=resp.status_code, chars=len(body))
    return body
