import json

import pytest

from kickoff_hub.config import SheetConfig
from kickoff_hub.models import GameRecord
from kickoff_hub.sheets.loader import SheetLoader


def gviz_text(headers, rows):
    """Wrap a table the way the gviz endpoint does."""
    payload = {
        "version": "0.6",
        "reqId": "0",
        "status": "ok",
        "table": {
            "cols": [{"id": chr(65 + i), "label": h, "type": "string"} for i, h in enumerate(headers)],
            "rows": [{"c": [None if v is None else {"v": v} for v in row]} for row in rows],
        },
    }
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


GAMES_HEADERS = ["Game", "Console", "Genre", "Trailer", "Status", "Featured", "Station"]
GAMES_ROWS = [
    ["Halo Infinite", "Xbox", "Shooter", "https://youtu.be/abc123XY", "Active", "yes", "1"],
    ["Spider-Man 2", "PS5", "Action", "https://www.youtube.com/watch?v=zzz999QQ", "", "", "2"],
    ["Forza Horizon", "Xbox, PC", "Racing", "", "yes", "no", ""],
    ["Old Demo", "PC", "Action", "", "hidden", "yes", ""],
]


class FakeFetch:
    """Maps URL substrings to bodies or exceptions; records every URL asked for."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        for needle, body in self.routes.items():
            if needle in url:
                if isinstance(body, Exception):
                    raise body
                return body
        raise AssertionError(f"unexpected URL {url}")


@pytest.fixture
def games_text():
    return gviz_text(GAMES_HEADERS, GAMES_ROWS)


@pytest.fixture
def stations_text():
    return gviz_text(["Station", "Status", "Notes"], [["PC 1", "Open", ""], ["PS5 Pod", "In use", "back at 4"]])


@pytest.fixture
def config():
    return SheetConfig(sheet_id="sheet123", games_tab="Games", stations_tab="Stations")


@pytest.fixture
def make_loader(config):
    def _make(routes, cfg=None):
        fetch = FakeFetch(routes)
        return SheetLoader(cfg or config, fetch=fetch), fetch

    return _make


@pytest.fixture
def games():
    return [
        GameRecord(game_id="1", title="Halo Infinite", platform="Xbox", genre="Shooter", status="Active"),
        GameRecord(game_id="2", title="Spider-Man 2", platform="PS5", genre="Action", featured="Yes"),
        GameRecord(game_id="3", title="Forza Horizon", platform="Xbox, PS5", genre="Racing", status="yes"),
        GameRecord(game_id="4", title="Old Demo", platform="PC", genre="Action", status="hidden", featured="yes"),
    ]
