# kickoff_hub/ui/app.py
from __future__ import annotations

import asyncio
import webbrowser
from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import ContentSwitcher, DataTable, Footer, Header, Input, Select, Static

from kickoff_hub.config import SORT_LABELS, SORT_MODES
from kickoff_hub.errors import KioskError
from kickoff_hub.filters import (
    Filters,
    apply_filters,
    featured_games,
    genre_options,
    is_active_row,
    keep_selection,
    platform_options,
)
from kickoff_hub.models import GameRecord
from kickoff_hub.sheets.loader import SheetLoader
from kickoff_hub.state import AppState, View
from kickoff_hub.utils import watch_url, youtube_id_from_url
from kickoff_hub.utils_debug import dbg


def _select_value(select: Select) -> str:
    if select.is_blank():
        return ""
    return str(select.value)


def game_details_text(game: GameRecord, problems: Optional[list[str]] = None) -> Text:
    """Details pane body. Sheet values go in as plain text, never as markup."""
    vid = youtube_id_from_url(game.trailer_url)
    out = Text()
    out.append(game.title or "(untitled)", style="bold")
    out.append("\n\n")
    out.append(f"Platform: {', '.join(game.platforms) or '-'}\n")
    out.append(f"Genre: {game.genre or '-'}\n")
    out.append(f"Station: {game.station or '-'}\n")
    out.append(f"Trailer: {watch_url(vid) if vid else 'none'}")
    if game.thumbnail_url:
        out.append(f"\nCover: {game.thumbnail_url}")
    if problems:
        out.append("\n\n")
        out.append("Needs attention:", style="bold")
        for p in problems:
            out.append(f"\n- {p}")
    out.append("\n\n")
    out.append("t: watch clip · b: book", style="dim")
    return out


def ticket_text(state: AppState) -> Text:
    t = state.ticket
    out = Text()
    if t is None:
        out.append("Walk-up queue", style="bold")
        out.append("\nPress ")
        out.append("n", style="bold")
        out.append(" for a queue ticket.")
        return out
    out.append("Your queue ticket", style="bold")
    out.append("\n\n")
    out.append(t.code, style="bold")
    out.append(f"\nIssued {t.issued_at.astimezone().strftime('%H:%M')}")
    if t.title:
        out.append(f"\nFor: {t.title}")
    return out


# ----------------------------
# Small UI widgets
# ----------------------------

class StatCard(Static):
    def __init__(self, label: str, icon: str = "", **kw: Any):
        super().__init__(**kw)
        self.label = label
        self.icon = icon
        self.value = "0"

    def update_value(self, v: str) -> None:
        self.value = v
        self.update(f"{self.icon} {self.label}\n[b]{v}[/b]")


class Details(Static):
    can_focus = True

    def show_game(self, game: Optional[GameRecord], problems: Optional[list[str]] = None) -> None:
        if game is None:
            self.update("Select a game…")
            return
        self.update(game_details_text(game, problems))
        self.scroll_home()


class TicketPanel(Static):
    def show_ticket(self, state: AppState) -> None:
        self.update(ticket_text(state))


class TrailerScreen(ModalScreen[None]):
    """Overlay on top of whatever view is showing."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("o", "open_browser", "Play in browser"),
    ]

    DEFAULT_CSS = """
    TrailerScreen {
        align: center middle;
    }

    #trailer_box {
        width: 60;
        height: auto;
        border: tall #c9a227;
        padding: 1 2;
        background: #0b0f12;
    }
    """

    def __init__(self, game: GameRecord):
        super().__init__()
        self.game = game
        self.url = watch_url(youtube_id_from_url(game.trailer_url))

    def compose(self) -> ComposeResult:
        with Vertical(id="trailer_box"):
            body = Text("🎬 ")
            body.append(self.game.title, style="bold")
            body.append(f"\n\n{self.url}\n\n")
            body.append("o: play · esc: close", style="dim")
            yield Static(body)

    def action_open_browser(self) -> None:
        if self.url:
            webbrowser.open(self.url)

    def action_close(self) -> None:
        self.dismiss(None)


# ----------------------------
# Main App
# ----------------------------

class KioskApp(App):
    TITLE = "Kickoff Game Hub"

    CSS = """
    Screen {
        background: #101417;
        color: #f5f7fa;
    }

    #stats_row {
        height: 4;
        margin: 1 1 0 1;
    }

    StatCard {
        width: 1fr;
        border: tall #2d3a45;
        padding: 0 2;
        background: #0b0f12;
    }

    #status_line {
        height: 3;
        border: tall #2d3a45;
        padding: 0 1;
        margin: 1 1 0 1;
        background: #0b0f12;
    }

    #status_line.ok {
        border: tall #00ff88;
    }

    #status_line.warn {
        border: tall #c9a227;
    }

    #controls {
        height: 3;
        margin: 0 1;
    }

    #search {
        width: 2fr;
    }

    #controls Select {
        width: 1fr;
    }

    #views {
        margin: 0 1 1 1;
    }

    #games_list, #featured_list {
        width: 2fr;
        border: tall #2d3a45;
    }

    #side_details {
        width: 1fr;
        border: tall #2d3a45;
        padding: 0 1;
        background: #0b0f12;
        overflow-y: auto;
    }

    #ticket_panel {
        height: 9;
        border: tall #c9a227;
        padding: 0 2;
        background: #0b0f12;
    }

    #stations_table {
        height: 1fr;
        border: tall #2d3a45;
    }

    DataTable {
        height: 100%;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("g", "show_view('games')", "Games"),
        Binding("a", "show_view('appointments')", "Appointments"),
        Binding("f", "show_view('featured')", "Featured"),
        Binding("t", "trailer", "Clip"),
        Binding("b", "book", "Book"),
        Binding("n", "new_ticket", "Ticket"),
        Binding("s", "toggle_sort", "Sort"),
        Binding("slash", "focus_search", "Search"),
        Binding("escape", "focus_list", "List", show=False),
    ]

    current_view = reactive(View.GAMES.value)

    def watch_current_view(self, value: str) -> None:
        self.sub_title = value.title()

    def __init__(self, *, loader: SheetLoader, state: Optional[AppState] = None, refresh_on_mount: bool = True):
        super().__init__()
        self.loader = loader
        self.kiosk = state or AppState(games_tab=loader.config.games_tab)
        self.filters = Filters()
        self.refresh_on_mount = refresh_on_mount

        # row key -> game_id, rebuilt every render
        self.row_lookup: dict[str, str] = {}

    # ----------------------------

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="stats_row"):
            self.card_games = StatCard("Games", "🎮")
            self.card_featured = StatCard("Featured", "⭐")
            self.card_stations = StatCard("Stations", "🖥")
            self.card_attention = StatCard("Needs attention", "⚠️")
            yield self.card_games
            yield self.card_featured
            yield self.card_stations
            yield self.card_attention

        self.status_line = Static("", id="status_line")
        yield self.status_line

        with Horizontal(id="controls"):
            yield Input(placeholder="Search title, platform, genre…", id="search")
            yield Select([], prompt="All platforms", id="platform_filter")
            yield Select([], prompt="All genres", id="genre_filter")
            yield Select(
                [(SORT_LABELS[m], m) for m in SORT_MODES],
                value=self.filters.sort,
                allow_blank=False,
                id="sort_mode",
            )

        with ContentSwitcher(initial=View.GAMES.value, id="views"):
            with Horizontal(id=View.GAMES.value):
                self.games_table = DataTable(zebra_stripes=True, id="games_list")
                yield self.games_table
                self.side_details = Details("Select a game…", id="side_details")
                yield self.side_details

            with Container(id=View.APPOINTMENTS.value):
                self.ticket_panel = TicketPanel("", id="ticket_panel")
                yield self.ticket_panel
                self.stations_table = DataTable(zebra_stripes=True, id="stations_table")
                yield self.stations_table

            with Container(id=View.FEATURED.value):
                self.featured_table = DataTable(zebra_stripes=True, id="featured_list")
                yield self.featured_table

        yield Footer()

    # ----------------------------

    def on_mount(self) -> None:
        for table in (self.games_table, self.featured_table):
            table.add_column("", width=2)
            table.add_column("Title")
            table.add_column("Platform")
            table.add_column("Genre")
            table.cursor_type = "row"

        self.stations_table.add_column("Station")
        self.stations_table.add_column("Status")
        self.stations_table.add_column("Note")

        self.games_table.focus()
        self.apply_view()

        if self.refresh_on_mount:
            self.call_after_refresh(self.start_refresh)

    # ----------------------------
    # Rendering
    # ----------------------------

    def _icon(self, game: GameRecord) -> str:
        return "🎬" if youtube_id_from_url(game.trailer_url) else "·"

    def _fill(self, table: DataTable, games: list[GameRecord], prefix: str) -> None:
        table.clear()
        for i, g in enumerate(games):
            key = f"{prefix}-{i}"
            self.row_lookup[key] = g.game_id
            table.add_row(
                self._icon(g),
                Text(g.title or "(untitled)"),
                Text(", ".join(g.platforms)),
                Text(g.genre),
                key=key,
            )

    def _refresh_options(self) -> None:
        platforms = platform_options(self.kiosk.games)
        genres = genre_options(self.kiosk.games)
        self.filters = Filters(
            query=self.filters.query,
            platform=keep_selection(self.filters.platform, platforms),
            genre=keep_selection(self.filters.genre, genres),
            sort=self.filters.sort,
        )

        pf = self.query_one("#platform_filter", Select)
        gf = self.query_one("#genre_filter", Select)
        with self.prevent(Select.Changed):
            pf.set_options((Text(p), p) for p in platforms)
            gf.set_options((Text(g), g) for g in genres)
            if self.filters.platform:
                pf.value = self.filters.platform
            if self.filters.genre:
                gf.value = self.filters.genre

    def render_status(self) -> None:
        s = self.kiosk.status
        line = Text(s.pill, style="bold")
        line.append(f"  {s.text}")
        self.status_line.update(line)
        self.status_line.set_class(s.kind == "ok", "ok")
        self.status_line.set_class(s.kind == "warn", "warn")

    def apply_view(self) -> None:
        self.row_lookup.clear()

        listed = apply_filters(self.kiosk.games, self.filters)
        featured = featured_games(self.kiosk.games, self.filters.sort)
        self._fill(self.games_table, listed, "g")
        self._fill(self.featured_table, featured, "f")

        self.stations_table.clear()
        for i, st in enumerate(self.kiosk.stations):
            self.stations_table.add_row(
                Text(st.station_name or "Station"),
                Text(st.status or "Unknown"),
                Text(st.note),
                key=f"s-{i}",
            )

        self.ticket_panel.show_ticket(self.kiosk)
        self.render_status()

        self.card_games.update_value(str(sum(1 for g in self.kiosk.games if is_active_row(g))))
        self.card_featured.update_value(str(len(featured)))
        self.card_stations.update_value(str(len(self.kiosk.stations)))
        self.card_attention.update_value(str(len(self.kiosk.problems)))

        if self.games_table.row_count:
            self.games_table.cursor_coordinate = (0, 0)
        self.show_current_game()

    # ----------------------------
    # Selection helpers
    # ----------------------------

    def _active_table(self) -> Optional[DataTable]:
        if self.kiosk.view == View.FEATURED:
            return self.featured_table
        if self.kiosk.view == View.GAMES:
            return self.games_table
        return None

    def current_game(self) -> Optional[GameRecord]:
        table = self._active_table()
        if table is None or not table.row_count:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        game_id = self.row_lookup.get(row_key.value or "")
        return self.kiosk.find_game(game_id) if game_id else None

    def show_current_game(self) -> None:
        game = self.current_game()
        problems = self.kiosk.problems_for(game.game_id) if game is not None else None
        self.side_details.show_game(game, problems)

    # ----------------------------
    # Actions
    # ----------------------------

    def action_show_view(self, name: str) -> None:
        self.current_view = self.kiosk.set_view(name).value
        self.query_one("#views", ContentSwitcher).current = self.current_view
        table = self._active_table()
        if table is not None:
            table.focus()

    def action_focus_search(self) -> None:
        self.action_show_view(View.GAMES.value)
        self.query_one("#search", Input).focus()

    def action_focus_list(self) -> None:
        table = self._active_table()
        if table is not None:
            table.focus()

    def action_trailer(self) -> None:
        game = self.current_game()
        if game is None:
            return
        if self.kiosk.open_trailer(game.game_id) is None:
            self.notify("No trailer for this game.", severity="warning")
            return

        def _closed(_: None) -> None:
            self.kiosk.close_trailer()

        self.push_screen(TrailerScreen(game), _closed)

    def action_book(self) -> None:
        game = self.current_game()
        if game is None:
            return
        self.kiosk.book(game.game_id)
        self.ticket_panel.show_ticket(self.kiosk)
        self.action_show_view(View.APPOINTMENTS.value)

    def action_new_ticket(self) -> None:
        self.kiosk.new_ticket()
        self.ticket_panel.show_ticket(self.kiosk)
        self.action_show_view(View.APPOINTMENTS.value)

    def action_toggle_sort(self) -> None:
        nxt = SORT_MODES[(SORT_MODES.index(self.filters.sort) + 1) % len(SORT_MODES)]
        self.query_one("#sort_mode", Select).value = nxt

    async def action_refresh(self) -> None:
        self.start_refresh()

    def start_refresh(self) -> None:
        self.status_line.update("[b]Loading…[/b]")
        self.run_worker(self._refresh_worker(), exclusive=True)

    async def _refresh_worker(self) -> None:
        loop = asyncio.get_running_loop()

        def _do():
            try:
                return self.loader.load(), None
            except KioskError as e:
                return None, e

        result, error = await loop.run_in_executor(None, _do)

        # State is only touched back here, on the UI side
        if error is not None:
            dbg("ui.refresh.fail", error=str(error))
            self.kiosk.apply_error(error)
            self.render_status()
            return

        self.kiosk.apply_load(result.games, result.stations)
        self._refresh_options()
        self.apply_view()

    # ----------------------------
    # Control events
    # ----------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "search":
            return
        self.filters = Filters(event.value, self.filters.platform, self.filters.genre, self.filters.sort)
        self.apply_view()

    def on_select_changed(self, event: Select.Changed) -> None:
        value = _select_value(event.select)
        f = self.filters
        if event.select.id == "platform_filter":
            self.filters = Filters(f.query, value, f.genre, f.sort)
        elif event.select.id == "genre_filter":
            self.filters = Filters(f.query, f.platform, value, f.sort)
        elif event.select.id == "sort_mode" and value:
            self.filters = Filters(f.query, f.platform, f.genre, value)
        else:
            return
        self.apply_view()

    def on_data_table_row_highlighted(self, event: Any) -> None:
        self.show_current_game()

    def on_data_table_row_selected(self, event: Any) -> None:
        self.action_trailer()
