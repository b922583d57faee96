# kickoff_hub/filters.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .config import DEFAULT_SORT, SORT_MODES
from .models import GameRecord
from .utils import is_active_status, normalize_yes_no, safe_text, sort_key, uniq_sorted


@dataclass(frozen=True)
class Filters:
    """Current control values. Empty string means "all"."""
    query: str = ""
    platform: str = ""
    genre: str = ""
    sort: str = DEFAULT_SORT


def is_active_row(game: GameRecord) -> bool:
    return is_active_status(game.status)


def is_featured(game: GameRecord) -> bool:
    return is_active_row(game) and normalize_yes_no(game.featured)


def matches_query(game: GameRecord, query: str) -> bool:
    q = safe_text(query).lower()
    if not q:
        return True
    return any(q in safe_text(v).lower() for v in (game.title, game.platform, game.genre))


def matches_platform(game: GameRecord, platform: str) -> bool:
    """Membership in the split platform set, so "PS5" matches "Xbox, PS5"."""
    p = safe_text(platform).lower()
    if not p:
        return True
    return any(p == token.lower() for token in game.platforms)


def matches_genre(game: GameRecord, genre: str) -> bool:
    g = safe_text(genre).lower()
    return not g or safe_text(game.genre).lower() == g


def sort_games(games: Iterable[GameRecord], mode: str = DEFAULT_SORT) -> list[GameRecord]:
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode {mode!r} (expected one of {SORT_MODES})")

    rows = list(games)
    if mode == "platform_asc":
        # Rows without a platform sink to the bottom
        rows.sort(key=lambda g: (not g.primary_platform, sort_key(g.primary_platform), sort_key(g.title)))
    else:
        rows.sort(key=lambda g: sort_key(g.title), reverse=(mode == "title_desc"))
    return rows


def apply_filters(games: Sequence[GameRecord], filters: Filters) -> list[GameRecord]:
    rows = [
        g for g in games
        if is_active_row(g)
        and matches_query(g, filters.query)
        and matches_platform(g, filters.platform)
        and matches_genre(g, filters.genre)
    ]
    return sort_games(rows, filters.sort)


def featured_games(games: Sequence[GameRecord], sort: str = DEFAULT_SORT) -> list[GameRecord]:
    return sort_games([g for g in games if is_featured(g)], sort)


def platform_options(games: Sequence[GameRecord]) -> list[str]:
    return uniq_sorted(t for g in games if is_active_row(g) for t in g.platforms)


def genre_options(games: Sequence[GameRecord]) -> list[str]:
    return uniq_sorted(safe_text(g.genre) for g in games if is_active_row(g))


def keep_selection(selected: str, options: Sequence[str]) -> str:
    """A selection that vanished after a refresh falls back to "all"."""
    return selected if selected in options else ""


def reconcile(filters: Filters, games: Sequence[GameRecord]) -> Filters:
    return Filters(
        query=filters.query,
        platform=keep_selection(filters.platform, platform_options(games)),
        genre=keep_selection(filters.genre, genre_options(games)),
        sort=filters.sort if filters.sort in SORT_MODES else DEFAULT_SORT,
    )
