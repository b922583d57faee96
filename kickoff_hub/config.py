# kickoff_hub/config.py
from __future__ import annotations

import os
from dataclasses import dataclass


# -----------------------------
# Defaults (CLI)
# -----------------------------

DEFAULT_SHEET_ID = "13rkxqr7sohPeexiygv0dBMFV63ElDb2J"
DEFAULT_GAMES_TAB = "Games"
DEFAULT_STATIONS_TAB = "Stations"  # optional tab
DEFAULT_FORMAT = "json"  # "json" (gviz envelope) | "csv"
DEFAULT_HTML_FILE = "kiosk.html"

SUPPORTED_FORMATS = ("json", "csv")


# -----------------------------
# HTTP / fetching
# -----------------------------

UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

HTTP_TIMEOUT_S = 20

GVIZ_JSON_URL = (
    "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"
    "?tqx=out:json&sheet={sheet}&tq={tq}"
)
GVIZ_CSV_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&sheet={sheet}"
EXPORT_CSV_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"

GVIZ_QUERY = "select *"

# How much of a bad response body to carry into error messages
ERROR_SNIPPET_CHARS = 200


# -----------------------------
# Column synonyms
# -----------------------------
# Ordered (canonical_field, accepted headers). Header matching is
# case-insensitive; the first accepted header present in the sheet wins.

GAME_COLUMNS: list[tuple[str, list[str]]] = [
    ("game_id", ["game_id", "id"]),
    ("title", ["title", "game", "game title", "name"]),
    ("platform", ["platform", "platforms", "console", "system"]),
    ("genre", ["genre", "category", "type"]),
    ("trailer_url", ["trailer_url", "trailer", "trailer url", "youtube", "clip", "video"]),
    ("thumbnail_url", ["thumbnail_url", "thumbnail", "image", "cover", "cover_url", "art"]),
    ("station", ["station", "station_name", "pc", "seat"]),
    ("status", ["status", "active", "visible"]),
    ("featured", ["featured", "feature", "spotlight"]),
]

STATION_COLUMNS: list[tuple[str, list[str]]] = [
    ("station_name", ["station_name", "station", "name"]),
    ("status", ["status", "state"]),
    ("note", ["note", "notes", "comment"]),
]

# Multi-valued platform cells: "Xbox, PS5", "PC / Switch", "PS4 | PS5", "PC • Xbox"
PLATFORM_SPLIT_PATTERN = r"\s*[,/|•·]\s*"


# -----------------------------
# Row rules
# -----------------------------

ACTIVE_STATUSES = frozenset({"active", "yes", "true", "1"})
YES_VALUES = frozenset({"yes", "y", "true", "1"})

YOUTUBE_ID_CHARS = r"[A-Za-z0-9_-]{6,}"
YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}?autoplay=1&rel=0"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

SORT_MODES = ("title_asc", "title_desc", "platform_asc")
DEFAULT_SORT = "title_asc"
SORT_LABELS = {
    "title_asc": "Title A-Z",
    "title_desc": "Title Z-A",
    "platform_asc": "Platform",
}


# -----------------------------
# Queue tickets
# -----------------------------

# No I/O (letters) and no 0/1 (digits) so codes read cleanly off a screen
QUEUE_LETTERS = "ABCDEFGHJKLMNPQRSTUVWXYZ"
QUEUE_DIGITS = "23456789"


# -----------------------------
# Operator messages
# -----------------------------

ADVISORY_MESSAGE = (
    "Couldn't load the sheet. Check that it is published / shared "
    "'Anyone with the link can view' and that the tab is named '{tab}'."
)


def _env(key: str, default: str = "") -> str:
    return (os.getenv(key) or default).strip()


@dataclass(frozen=True)
class SheetConfig:
    """
    Where the kiosk reads its data from.

    games_gid is the numeric tab id shown as `#gid=` in the sheet URL; when
    set it is tried after the tab name fails.
    """
    sheet_id: str = DEFAULT_SHEET_ID
    games_tab: str = DEFAULT_GAMES_TAB
    games_gid: str = ""
    stations_tab: str = DEFAULT_STATIONS_TAB
    fmt: str = DEFAULT_FORMAT
    timeout: int = HTTP_TIMEOUT_S

    def __post_init__(self) -> None:
        if self.fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported format {self.fmt!r} (expected one of {SUPPORTED_FORMATS})")
        if self.games_gid and not self.games_gid.isdigit():
            raise ValueError(f"games_gid must be numeric, got {self.games_gid!r}")

    @classmethod
    def from_env(cls) -> "SheetConfig":
        return cls(
            sheet_id=_env("KICKOFF_SHEET_ID", DEFAULT_SHEET_ID),
            games_tab=_env("KICKOFF_GAMES_TAB", DEFAULT_GAMES_TAB),
            games_gid=_env("KICKOFF_GAMES_GID"),
            stations_tab=_env("KICKOFF_STATIONS_TAB", DEFAULT_STATIONS_TAB),
            fmt=_env("KICKOFF_FORMAT", DEFAULT_FORMAT).lower(),
        )
