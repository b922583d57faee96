# kickoff_hub/state.py
from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .config import ADVISORY_MESSAGE, DEFAULT_GAMES_TAB, QUEUE_DIGITS, QUEUE_LETTERS
from .errors import KioskError
from .models import GameRecord, QueueTicket, RowProblem, StationRecord
from .normalize import validation_report
from .utils import _now_utc, youtube_id_from_url
from .utils_debug import dbg

if TYPE_CHECKING:
    from .sheets.loader import SheetLoader


class View(str, Enum):
    GAMES = "games"
    APPOINTMENTS = "appointments"
    FEATURED = "featured"


@dataclass(frozen=True)
class StatusLine:
    pill: str
    text: str
    kind: str = "info"  # "ok" | "warn" | "info"


def make_queue_code(rng: Optional[random.Random] = None) -> str:
    """Two letters, a hyphen, three digits: "KX-284"."""
    r = rng or random
    letters = "".join(r.choice(QUEUE_LETTERS) for _ in range(2))
    digits = "".join(r.choice(QUEUE_DIGITS) for _ in range(3))
    return f"{letters}-{digits}"


@dataclass
class AppState:
    """
    Everything the kiosk shows, owned by the controller (TUI or CLI).

    games/stations are replaced wholesale on a successful refresh and left
    alone on a failed one.
    """
    games: List[GameRecord] = field(default_factory=list)
    stations: List[StationRecord] = field(default_factory=list)
    view: View = View.GAMES
    modal_game_id: str = ""
    ticket: Optional[QueueTicket] = None
    status: StatusLine = field(default_factory=lambda: StatusLine("Loading", "Fetching games…", "info"))
    problems: List[RowProblem] = field(default_factory=list)
    loaded_at: Optional[datetime] = None
    games_tab: str = DEFAULT_GAMES_TAB

    # ----------------------------
    # Views / overlay
    # ----------------------------

    def set_view(self, name: "View | str") -> View:
        self.view = View(name)
        return self.view

    @property
    def modal_open(self) -> bool:
        return bool(self.modal_game_id)

    @property
    def modal_game(self) -> Optional[GameRecord]:
        return self.find_game(self.modal_game_id) if self.modal_game_id else None

    def find_game(self, game_id: str) -> Optional[GameRecord]:
        for g in self.games:
            if g.game_id == game_id:
                return g
        return None

    def problems_for(self, game_id: str) -> list[str]:
        for p in self.problems:
            if p.game_id == game_id:
                return p.problems
        return []

    def open_trailer(self, game_id: str) -> Optional[GameRecord]:
        """Opens the overlay only for a record with a recognizable YouTube trailer."""
        game = self.find_game(game_id)
        if game is None or not youtube_id_from_url(game.trailer_url):
            return None
        self.modal_game_id = game.game_id
        return game

    def close_trailer(self) -> None:
        self.modal_game_id = ""

    # ----------------------------
    # Queue tickets
    # ----------------------------

    def new_ticket(
        self,
        *,
        title: str = "",
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ) -> QueueTicket:
        self.ticket = QueueTicket(code=make_queue_code(rng), issued_at=now or _now_utc(), title=title)
        dbg("ticket", code=self.ticket.code, title=title)
        return self.ticket

    def book(self, game_id: str, **kw) -> Optional[QueueTicket]:
        """Card "Book" action: jump to appointments with a ticket for that game."""
        game = self.find_game(game_id)
        if game is None:
            return None
        self.set_view(View.APPOINTMENTS)
        return self.new_ticket(title=game.title, **kw)

    # ----------------------------
    # Refresh boundary
    # ----------------------------

    def apply_load(self, games: List[GameRecord], stations: List[StationRecord]) -> None:
        self.games = list(games)
        self.stations = list(stations)
        self.problems = validation_report(self.games)
        self.loaded_at = _now_utc()
        if self.modal_game_id and self.find_game(self.modal_game_id) is None:
            self.close_trailer()

        text = f"{len(self.games)} games loaded"
        if self.problems:
            text += f" · {len(self.problems)} need attention"
        self.status = StatusLine("Live", text, "ok")

    def apply_error(self, error: KioskError) -> None:
        advisory = ADVISORY_MESSAGE.format(tab=self.games_tab)
        self.status = StatusLine("Offline", f"{advisory} ({error})", "warn")

    def refresh(self, loader: "SheetLoader") -> bool:
        """
        Load both tabs and swap them in. Returns False (and keeps the previous
        lists) when the games tab can't be loaded.
        """
        try:
            result = loader.load()
        except KioskError as e:
            dbg("refresh.fail", kind=type(e).__name__, error=str(e))
            self.apply_error(e)
            return False

        self.apply_load(result.games, result.stations)
        dbg("refresh.ok", games=len(self.games), stations=len(self.stations))
        return True
