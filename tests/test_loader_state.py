import random
from datetime import datetime, timezone

import pytest

from kickoff_hub.config import QUEUE_DIGITS, QUEUE_LETTERS, SheetConfig
from kickoff_hub.errors import EmptyDataError, FormatError, KioskError, NetworkError
from kickoff_hub.models import GameRecord
from kickoff_hub.sheets.loader import candidate_urls
from kickoff_hub.state import AppState, View, make_queue_code

from conftest import gviz_text


def test_candidate_urls_name_then_gid():
    cfg = SheetConfig(sheet_id="abc", games_tab="My Games", games_gid="42")
    urls = candidate_urls(cfg, cfg.games_tab, cfg.games_gid)
    assert [label for label, _, _ in urls] == ["name", "gid"]
    assert "tqx=out:json" in urls[0][1]
    assert "sheet=My%20Games" in urls[0][1]
    assert urls[1][1].endswith("/export?format=csv&gid=42")


def test_csv_format_uses_csv_endpoint():
    cfg = SheetConfig(sheet_id="abc", fmt="csv")
    ((label, url, _),) = candidate_urls(cfg, "Games")
    assert "tqx=out:csv" in url


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        SheetConfig(fmt="xml")
    with pytest.raises(ValueError):
        SheetConfig(games_gid="abc")


def test_refresh_loads_games_and_stations(make_loader, games_text, stations_text):
    loader, fetch = make_loader({"sheet=Games": games_text, "sheet=Stations": stations_text})
    state = AppState()

    assert state.refresh(loader) is True
    assert [g.title for g in state.games][:2] == ["Halo Infinite", "Spider-Man 2"]
    assert [s.station_name for s in state.stations] == ["PC 1", "PS5 Pod"]
    assert state.status.kind == "ok"
    assert "4 games loaded" in state.status.text
    # games first, stations second
    assert "sheet=Games" in fetch.calls[0]
    assert "sheet=Stations" in fetch.calls[1]


def test_refresh_replaces_lists_wholesale(make_loader, games_text, stations_text):
    state = AppState(games=[GameRecord(game_id="x", title="Stale")])
    loader, _ = make_loader({"sheet=Games": games_text, "sheet=Stations": stations_text})
    state.refresh(loader)
    assert "Stale" not in [g.title for g in state.games]


def test_missing_stations_tab_is_silent(make_loader, games_text):
    loader, _ = make_loader({"sheet=Games": games_text, "sheet=Stations": FormatError("nope")})
    state = AppState()
    assert state.refresh(loader) is True
    assert state.stations == []
    assert state.status.kind == "ok"


def test_empty_sheet_keeps_previous_list(make_loader):
    previous = [GameRecord(game_id="1", title="Halo")]
    state = AppState(games=list(previous))
    loader, _ = make_loader({"sheet=Games": gviz_text(["Title", "Platform"], [])})

    assert state.refresh(loader) is False
    assert state.games == previous
    assert state.status.kind == "warn"
    assert "Anyone with the link" in state.status.text
    assert "Games" in state.status.text


def test_network_error_surfaces_as_advisory(make_loader):
    state = AppState()
    loader, _ = make_loader({"sheet=Games": NetworkError("HTTP 404 fetching sheet", status=404)})
    assert state.refresh(loader) is False
    assert state.games == []
    assert "HTTP 404" in state.status.text


def test_falls_back_to_gid_when_name_fails(make_loader, stations_text):
    cfg = SheetConfig(sheet_id="sheet123", games_tab="Games", games_gid="777", stations_tab="Stations")
    csv_body = "title,platform\nCeleste,Switch\n"
    loader, fetch = make_loader(
        {"sheet=Games": EmptyDataError("nothing"), "gid=777": csv_body, "sheet=Stations": stations_text},
        cfg,
    )
    state = AppState()
    assert state.refresh(loader) is True
    assert [g.title for g in state.games] == ["Celeste"]
    assert "gid=777" in fetch.calls[1]


def test_last_error_raised_when_every_endpoint_fails(make_loader):
    cfg = SheetConfig(sheet_id="sheet123", games_gid="777")
    loader, _ = make_loader({"sheet=Games": FormatError("first"), "gid=777": FormatError("second")}, cfg)
    with pytest.raises(FormatError, match="second"):
        loader.load_games()


def test_no_endpoints_is_a_kiosk_error(make_loader, monkeypatch):
    import kickoff_hub.sheets.loader as loader_mod

    monkeypatch.setattr(loader_mod, "candidate_urls", lambda *a, **kw: [])
    loader, fetch = make_loader({})
    with pytest.raises(KioskError, match="No endpoint"):
        loader.load_games()
    assert fetch.calls == []


def test_repeated_titles_resolve_to_their_own_row():
    from kickoff_hub.normalize import normalize_games

    games = normalize_games([
        {"title": "FIFA 24", "platform": "PS5", "trailer": ""},
        {"title": "FIFA 24", "platform": "Xbox", "trailer": "https://youtu.be/abc123XY"},
    ])
    state = AppState(games=games)
    assert state.open_trailer(games[1].game_id) is games[1]
    assert state.book(games[0].game_id).title == "FIFA 24"
    assert state.find_game(games[0].game_id).platform == "PS5"


def test_views_and_overlay_are_independent(games):
    state = AppState(games=games)
    assert state.view is View.GAMES

    state.set_view("featured")
    assert state.view is View.FEATURED
    with pytest.raises(ValueError):
        state.set_view("settings")

    games[0].trailer_url = "https://youtu.be/abc123XY"
    assert state.open_trailer("1") is games[0]
    assert state.modal_open
    state.set_view(View.APPOINTMENTS)
    assert state.modal_open
    state.close_trailer()
    assert not state.modal_open


def test_trailer_needs_youtube_id(games):
    state = AppState(games=games)
    assert state.open_trailer("2") is None
    assert state.open_trailer("missing") is None
    assert not state.modal_open


def test_queue_code_shape():
    rng = random.Random(7)
    for _ in range(50):
        code = make_queue_code(rng)
        letters, digits = code.split("-")
        assert len(letters) == 2 and all(c in QUEUE_LETTERS for c in letters)
        assert len(digits) == 3 and all(c in QUEUE_DIGITS for c in digits)


def test_new_ticket_replaces_previous(games):
    state = AppState(games=games)
    now = datetime(2026, 5, 1, 18, 30, tzinfo=timezone.utc)
    first = state.new_ticket(now=now, rng=random.Random(1))
    second = state.new_ticket(now=now, rng=random.Random(2))
    assert state.ticket is second
    assert first.issued_at == now


def test_book_switches_to_appointments(games):
    state = AppState(games=games)
    ticket = state.book("3")
    assert state.view is View.APPOINTMENTS
    assert ticket.title == "Forza Horizon"
    assert state.book("nope") is None


def test_problems_reported_after_refresh(make_loader, stations_text):
    body = gviz_text(["Title", "Trailer"], [["Halo", "https://example.com/video"], [None, ""]])
    loader, _ = make_loader({"sheet=Games": body, "sheet=Stations": stations_text})
    state = AppState()
    state.refresh(loader)
    assert len(state.games) == 2
    assert [p.row_number for p in state.problems] == [1, 2]
    assert "2 need attention" in state.status.text
    assert state.problems_for("Halo") == ["Trailer URL not recognized (YouTube recommended)"]
