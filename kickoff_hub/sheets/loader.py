# kickoff_hub/sheets/loader.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import requests

from kickoff_hub.config import SheetConfig
from kickoff_hub.errors import KioskError
from kickoff_hub.models import GameRecord, StationRecord
from kickoff_hub.normalize import normalize_games, normalize_stations
from kickoff_hub.sheets.csv_text import parse_csv_text
from kickoff_hub.sheets.gviz import parse_gviz_text
from kickoff_hub.sheets.http import (
    export_csv_url,
    fetch_text,
    gviz_csv_url,
    gviz_json_url,
    make_session,
)
from kickoff_hub.sheets.table import Row
from kickoff_hub.utils_debug import dbg


FetchFn = Callable[[str], str]
ParseFn = Callable[[str], list[Row]]


def parse_sheet_text(text: str) -> list[Row]:
    """
    Parse a body whose variant is not pinned by the endpoint: a setResponse(
    envelope means gviz JSON, anything else is read as CSV.
    """
    if "setResponse(" in (text or ""):
        return parse_gviz_text(text)
    return parse_csv_text(text)


def candidate_urls(config: SheetConfig, tab_name: str, gid: str = "") -> List[Tuple[str, str, ParseFn]]:
    """
    Ordered (label, url, parser) attempts for one tab: by name first, then by numeric
    gid when one is configured. gid lookups always use the CSV export.

    The JSON endpoint is held to its envelope so a stray body surfaces as a
    FormatError with a snippet; CSV endpoints sniff the body.
    """
    if config.fmt == "csv":
        out = [("name", gviz_csv_url(config.sheet_id, tab_name), parse_sheet_text)]
    else:
        out = [("name", gviz_json_url(config.sheet_id, tab_name), parse_gviz_text)]
    if gid:
        out.append(("gid", export_csv_url(config.sheet_id, gid), parse_sheet_text))
    return out


@dataclass
class LoadResult:
    games: List[GameRecord]
    stations: List[StationRecord] = field(default_factory=list)
    source_url: str = ""


class SheetLoader:
    """
    Fetch -> parse -> normalize for the games tab (required) and the stations
    tab (optional). The two fetches run one after the other.

    fetch is injectable (tests); by default a cloudscraper session is used.
    """

    def __init__(self, config: SheetConfig, *, fetch: Optional[FetchFn] = None):
        self.config = config
        self._fetch = fetch
        self._session: Optional[requests.Session] = None

    def fetch(self, url: str) -> str:
        if self._fetch is not None:
            return self._fetch(url)
        if self._session is None:
            self._session = make_session()
        return fetch_text(url, session=self._session, timeout=self.config.timeout)

    def _load_rows(self, tab_name: str, gid: str = "") -> Tuple[list[Row], str]:
        last_error: Optional[KioskError] = None
        for label, url, parse in candidate_urls(self.config, tab_name, gid):
            try:
                rows = parse(self.fetch(url))
                dbg("load.ok", tab=tab_name, via=label, rows=len(rows))
                return rows, url
            except KioskError as e:
                dbg("load.fail", tab=tab_name, via=label, error=str(e))
                last_error = e
        if last_error is None:
            raise KioskError(f"No endpoint to try for tab {tab_name!r}")
        raise last_error

    def load_games(self) -> Tuple[List[GameRecord], str]:
        rows, url = self._load_rows(self.config.games_tab, self.config.games_gid)
        return normalize_games(rows), url

    def load_stations(self) -> List[StationRecord]:
        """Missing or unreadable stations tab means "no stations"."""
        if not self.config.stations_tab:
            return []
        try:
            rows, _ = self._load_rows(self.config.stations_tab)
            return normalize_stations(rows)
        except KioskError as e:
            dbg("stations.skip", error=str(e))
            return []

    def load(self) -> LoadResult:
        games, url = self.load_games()
        stations = self.load_stations()
        return LoadResult(games=games, stations=stations, source_url=url)
