"""
HTML fragments for the kiosk cards.

Everything here is pure: records in, markup out. Every value that came from
the sheet goes through escape_html() before it lands in the markup, including
attribute values.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any, Optional, Sequence

from .config import SORT_LABELS, SORT_MODES
from .filters import Filters, apply_filters, featured_games, genre_options, platform_options
from .models import GameRecord, StationRecord
from .utils import embed_url, safe_text, youtube_id_from_url

if TYPE_CHECKING:
    from .state import AppState


STATUS_STYLES = {
    "ok": {"bg": "rgba(0,255,136,.10)", "border": "rgba(0,255,136,.28)", "fg": "rgba(0,255,136,.95)"},
    "warn": {"bg": "rgba(201,162,39,.10)", "border": "rgba(201,162,39,.28)", "fg": "rgba(201,162,39,.95)"},
    "info": {"bg": "rgba(245,247,250,.06)", "border": "rgba(245,247,250,.18)", "fg": "rgba(245,247,250,.85)"},
}

PAGE_CSS = """
    body { margin: 0; font-family: system-ui, sans-serif; background: #0b0f12; color: #f5f7fa; }
    header { display: flex; gap: 12px; align-items: center; padding: 12px 20px; }
    nav button.active { border-color: rgba(0,255,136,.6); }
    .pill { border: 1px solid; border-radius: 999px; padding: 2px 10px; font-weight: 700; }
    .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 14px; padding: 16px 20px; }
    .game { background: #101417; border: 1px solid #2d3a45; border-radius: 14px; overflow: hidden; }
    .game-thumb img { width: 100%; aspect-ratio: 16 / 9; object-fit: cover; }
    .game-body { padding: 10px 12px; }
    .game-title { font-weight: 900; margin-bottom: 6px; }
    .badge { display: inline-block; margin: 2px; padding: 1px 8px; border-radius: 999px; border: 1px solid #2d3a45; font-size: 12px; }
    .badge.accent { border-color: rgba(201,162,39,.6); color: rgba(201,162,39,.95); }
    .station { background: #101417; border: 1px solid #2d3a45; border-radius: 14px; padding: 12px; }
    .muted { opacity: .7; }
"""


def escape_html(s: Any) -> str:
    return html.escape(safe_text(s), quote=True)


def _empty_block(headline: str, hint: str) -> str:
    return f'<div class="station"><b>{headline}</b><div class="muted">{hint}</div></div>'


def filter_options(values: Sequence[str], all_label: str, selected: str = "") -> str:
    parts = [f'<option value="">{escape_html(all_label)}</option>']
    for v in values:
        sel = " selected" if v == selected else ""
        parts.append(f'<option value="{escape_html(v)}"{sel}>{escape_html(v)}</option>')
    return "".join(parts)


def sort_options(selected: str) -> str:
    parts = []
    for mode in SORT_MODES:
        sel = " selected" if mode == selected else ""
        parts.append(f'<option value="{mode}"{sel}>{escape_html(SORT_LABELS[mode])}</option>')
    return "".join(parts)


def game_card(game: GameRecord) -> str:
    title = escape_html(game.title)
    genre = escape_html(game.genre)
    station = escape_html(game.station)
    thumb = safe_text(game.thumbnail_url)
    has_trailer = bool(youtube_id_from_url(game.trailer_url))

    badges = [f'<span class="badge accent">{escape_html(p)}</span>' for p in game.platforms]
    if genre:
        badges.append(f'<span class="badge">{genre}</span>')
    if station:
        badges.append(f'<span class="badge">Station: {station}</span>')

    if thumb:
        thumb_html = f'<img src="{escape_html(thumb)}" alt="{title} cover" loading="lazy" />'
    else:
        thumb_html = f'<div style="padding:10px; text-align:center; font-weight:900;">{title}</div>'

    disabled = "" if has_trailer else " disabled"
    return (
        '<article class="game">'
        f'<div class="game-thumb">{thumb_html}</div>'
        '<div class="game-body">'
        f'<div class="game-title">{title}</div>'
        f'<div class="badges">{"".join(badges)}</div>'
        '<div class="game-actions">'
        f'<button class="secondary" data-action="trailer" data-id="{escape_html(game.game_id or game.title)}"{disabled}>'
        "Watch Clip</button>"
        f'<button class="primary" data-action="book" data-title="{title}">Book</button>'
        "</div>"
        "</div>"
        "</article>"
    )


def games_grid(games: Sequence[GameRecord]) -> str:
    if not games:
        return _empty_block("No games found.", "Try clearing filters or searching a different keyword.")
    return "".join(game_card(g) for g in games)


def featured_grid(games: Sequence[GameRecord]) -> str:
    if not games:
        return _empty_block("No featured games right now.", "Set <b>featured</b> to Yes in your sheet.")
    return "".join(game_card(g) for g in games)


def station_card(station: StationRecord) -> str:
    name = escape_html(station.station_name or "Station")
    status = escape_html(station.status or "Unknown")
    note = escape_html(station.note)
    note_html = f'<div class="muted">{note}</div>' if note else ""
    return f'<div class="station"><b>{name}</b> <span class="badge">{status}</span>{note_html}</div>'


def stations_list(stations: Sequence[StationRecord]) -> str:
    return "".join(station_card(s) for s in stations)


def trailer_modal(game: Optional[GameRecord]) -> str:
    vid = youtube_id_from_url(game.trailer_url) if game else ""
    if not vid:
        return ""
    src = escape_html(embed_url(vid))
    return (
        '<div class="modal" role="dialog" aria-modal="true">'
        f'<div class="modal-title">{escape_html(game.title)}</div>'
        f'<iframe src="{src}" title="{escape_html(game.title)} trailer" '
        'allow="autoplay; encrypted-media; picture-in-picture" allowfullscreen></iframe>'
        "</div>"
    )


def status_pill(pill: str, text: str, kind: str = "info") -> str:
    s = STATUS_STYLES.get(kind, STATUS_STYLES["info"])
    style = f"background:{s['bg']};border-color:{s['border']};color:{s['fg']}"
    return (
        f'<span id="dataPill" class="pill" style="{style}">{escape_html(pill)}</span>'
        f'<span id="statusText" class="muted">{escape_html(text)}</span>'
    )


def render_page(state: "AppState", filters: Filters = Filters()) -> str:
    """Full static kiosk page for the current state (all three panels, one visible)."""
    view = state.view.value
    listed = apply_filters(state.games, filters)
    featured = featured_games(state.games, filters.sort)

    def panel(name: str, body: str) -> str:
        hidden = "" if name == view else " hidden"
        return f'<section id="view{name.title()}"{hidden}>{body}</section>'

    def nav(name: str, label: str) -> str:
        cls = ' class="active"' if name == view else ""
        return f'<button id="nav{name.title()}"{cls}>{label}</button>'

    ticket = ""
    if state.ticket:
        ticket = (
            '<div class="station"><b>Your queue ticket</b>'
            f'<div class="game-title">{escape_html(state.ticket.code)}</div>'
            f'<div class="muted">{escape_html(state.ticket.issued_at.strftime("%H:%M"))}'
            f'{" · " + escape_html(state.ticket.title) if state.ticket.title else ""}</div></div>'
        )

    featured_panel = f'<div id="featuredGrid" class="grid">{featured_grid(featured)}</div>'
    stations_html = stations_list(state.stations)
    appointments = ticket + (f'<div id="stationsList" class="grid">{stations_html}</div>' if stations_html else "")

    games_panel = (
        '<div class="controls">'
        f'<input id="searchInput" value="{escape_html(filters.query)}" placeholder="Search games" />'
        f'<select id="platformFilter">{filter_options(platform_options(state.games), "All platforms", filters.platform)}</select>'
        f'<select id="genreFilter">{filter_options(genre_options(state.games), "All genres", filters.genre)}</select>'
        f'<select id="sortSelect">{sort_options(filters.sort)}</select>'
        "</div>"
        f'<div id="gamesGrid" class="grid">{games_grid(listed)}</div>'
    )

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="UTF-8"><title>Kickoff Game Hub</title>'
        f"<style>{PAGE_CSS}</style></head><body>"
        "<header><b>Kickoff Game Hub</b>"
        f"{status_pill(state.status.pill, state.status.text, state.status.kind)}"
        f'<nav>{nav("games", "Games")}{nav("appointments", "Appointments")}{nav("featured", "Featured")}</nav>'
        "</header>"
        f'{panel("games", games_panel)}'
        f'{panel("appointments", appointments)}'
        f'{panel("featured", featured_panel)}'
        f"{trailer_modal(state.modal_game)}"
        "</body></html>\n"
    )
