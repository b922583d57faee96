# kickoff_hub/normalize.py
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .config import GAME_COLUMNS, STATION_COLUMNS
from .errors import ColumnMissingError
from .models import GameRecord, RowProblem, StationRecord
from .sheets.table import Row
from .utils import safe_text, youtube_id_from_url
from .utils_debug import dbg

ColumnSpec = Sequence[tuple[str, Sequence[str]]]


def find_col(headers: Iterable[str], possible_names: Sequence[str]) -> Optional[str]:
    """First accepted name (in synonym order) present among headers, case-insensitive."""
    by_lower: dict[str, str] = {}
    for h in headers:
        by_lower.setdefault(str(h).strip().lower(), h)
    for name in possible_names:
        match = by_lower.get(name.strip().lower())
        if match is not None:
            return match
    return None


def resolve_columns(headers: Sequence[str], spec: ColumnSpec) -> dict[str, Optional[str]]:
    """canonical field -> sheet header (or None when the sheet lacks it)."""
    return {field: find_col(headers, names) for field, names in spec}


def _headers_of(rows: Sequence[Row]) -> list[str]:
    return list(rows[0].keys()) if rows else []


def normalize_games(rows: Sequence[Row]) -> list[GameRecord]:
    """
    Map raw sheet rows onto GameRecord.

    Raises ColumnMissingError when the header row matches none of the known
    game columns (wrong tab). A missing title column alone is not an error:
    rows come through with an empty title and get flagged by validation.
    """
    headers = _headers_of(rows)
    cols = resolve_columns(headers, GAME_COLUMNS)
    if rows and not any(cols.values()):
        raise ColumnMissingError(
            f"No recognizable game columns (expected e.g. title/platform/genre). Found: {headers}",
            headers=headers,
        )
    dbg("normalize.games", rows=len(rows), matched={k: v for k, v in cols.items() if v})

    games: list[GameRecord] = []
    seen_ids: set[str] = set()
    for i, row in enumerate(rows, start=1):
        values = {f: (safe_text(row.get(h)) if h else "") for f, h in cols.items()}
        game = GameRecord(**values)
        game_id = game.game_id or game.title or f"row-{i}"
        # ids must pick out exactly one row (repeated titles, copy-pasted ids)
        if game_id in seen_ids:
            game_id = f"{game_id}#{i}"
        seen_ids.add(game_id)
        game.game_id = game_id
        games.append(game)
    return games


def normalize_stations(rows: Sequence[Row]) -> list[StationRecord]:
    headers = _headers_of(rows)
    cols = resolve_columns(headers, STATION_COLUMNS)
    if rows and not any(cols.values()):
        raise ColumnMissingError(f"No recognizable station columns. Found: {headers}", headers=headers)

    out: list[StationRecord] = []
    for row in rows:
        values = {f: (safe_text(row.get(h)) if h else "") for f, h in cols.items()}
        out.append(StationRecord(**values))
    return out


def validate_game(game: GameRecord) -> list[str]:
    problems: list[str] = []
    if not safe_text(game.title):
        problems.append("Missing title")
    if safe_text(game.trailer_url) and not youtube_id_from_url(game.trailer_url):
        problems.append("Trailer URL not recognized (YouTube recommended)")
    return problems


def validation_report(games: Sequence[GameRecord]) -> list[RowProblem]:
    """The "needs attention" list. Flagged rows are still shown on the kiosk."""
    report: list[RowProblem] = []
    for i, g in enumerate(games, start=1):
        problems = validate_game(g)
        if problems:
            report.append(RowProblem(row_number=i, title=g.title, game_id=g.game_id, problems=problems))
    return report
