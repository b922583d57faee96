# kickoff_hub/utils.py
from __future__ import annotations

import locale
import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable

import pandas as pd
from bs4 import BeautifulSoup

from .config import (
    ACTIVE_STATUSES,
    YES_VALUES,
    YOUTUBE_EMBED_URL,
    YOUTUBE_ID_CHARS,
    YOUTUBE_WATCH_URL,
)


_YT_SHORT_RE = re.compile(r"youtu\.be/(" + YOUTUBE_ID_CHARS + ")")
_YT_QUERY_RE = re.compile(r"[?&]v=(" + YOUTUBE_ID_CHARS + ")")
_YT_EMBED_RE = re.compile(r"/embed/(" + YOUTUBE_ID_CHARS + ")")
_YT_BARE_RE = re.compile(r"^" + YOUTUBE_ID_CHARS + "$")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _strip_na(x: Any) -> str:
    """Fix for pandas sometimes giving float NaN etc."""
    if x is None:
        return ""
    if isinstance(x, float):
        try:
            if pd.isna(x):
                return ""
        except Exception:
            pass
        return str(x)
    return str(x)


def safe_text(v: Any) -> str:
    return _strip_na(v).strip()


def cell_to_text(v: Any) -> str:
    """
    Stringify a raw spreadsheet value the way the sheet displays it.

    True -> "TRUE", 3.0 -> "3", None/NaN -> "".
    """
    if v is None:
        return ""
    if isinstance(v, bool):
        return "TRUE" if v else "FALSE"
    if isinstance(v, float):
        if math.isnan(v):
            return ""
        if v.is_integer():
            return str(int(v))
    return safe_text(v)


def normalize_yes_no(v: Any) -> bool:
    return safe_text(v).lower() in YES_VALUES


def is_active_status(v: Any) -> bool:
    s = safe_text(v).lower()
    return s == "" or s in ACTIVE_STATUSES


def uniq_sorted(values: Iterable[str]) -> list[str]:
    return sorted({v for v in values if v}, key=sort_key)


def sort_key(s: str) -> tuple[str, str]:
    """Locale-aware, case-insensitive collation key; raw text breaks ties."""
    s = s or ""
    return locale.strxfrm(s.casefold()), s


def youtube_id_from_url(url: Any) -> str:
    """
    Returns the YouTube video id, or "" when the value isn't a YouTube reference.

    Accepted, first match wins:
      https://youtu.be/<id>
      https://www.youtube.com/watch?v=<id>&t=5
      https://www.youtube.com/embed/<id>
      <id>   (pasted on its own)
    """
    u = safe_text(url)
    if not u:
        return ""

    for pat in (_YT_SHORT_RE, _YT_QUERY_RE, _YT_EMBED_RE):
        m = pat.search(u)
        if m:
            return m.group(1)

    if _YT_BARE_RE.match(u):
        return u

    return ""


def embed_url(video_id: str) -> str:
    return YOUTUBE_EMBED_URL.format(video_id=video_id) if video_id else ""


def watch_url(video_id: str) -> str:
    return YOUTUBE_WATCH_URL.format(video_id=video_id) if video_id else ""


def looks_like_html(text: str) -> bool:
    """A login/interstitial page came back instead of data."""
    head = (text or "").lstrip()[:512].lower()
    return head.startswith("<!doctype html") or head.startswith("<html")


def html_page_title(text: str) -> str:
    """<title> of an HTML body ("Sign in - Google Accounts"), or ""."""
    soup = BeautifulSoup(text or "", "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def snippet(text: str, n: int) -> str:
    text = text or ""
    return (text[:n] + "...") if len(text) > n else text
