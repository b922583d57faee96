import pytest

from kickoff_hub.errors import ColumnMissingError
from kickoff_hub.filters import apply_filters, Filters
from kickoff_hub.normalize import (
    find_col,
    normalize_games,
    normalize_stations,
    validate_game,
    validation_report,
)


def test_find_col_first_synonym_wins_case_insensitive():
    headers = ["Name", "GAME", "Console"]
    assert find_col(headers, ["title", "game", "name"]) == "GAME"
    assert find_col(headers, ["platform", "console"]) == "Console"
    assert find_col(headers, ["genre"]) is None


def test_normalize_maps_synonyms_and_defaults():
    rows = [{"Game Title": " Halo ", "Console": "Xbox, PS5", "Trailer": "https://youtu.be/abc123XY"}]
    (g,) = normalize_games(rows)
    assert g.title == "Halo"
    assert g.platform == "Xbox, PS5"
    assert set(g.platforms) == {"Xbox", "PS5"}
    assert g.trailer_url == "https://youtu.be/abc123XY"
    assert g.genre == ""
    assert g.status == ""
    assert g.game_id == "Halo"


def test_explicit_id_column_is_kept():
    (g,) = normalize_games([{"id": "g-7", "title": "Halo"}])
    assert g.game_id == "g-7"


def test_row_without_title_is_flagged_but_still_listed():
    rows = [{"Console": "PC", "Genre": "Puzzle"}, {"Console": "Switch", "Genre": "Platformer"}]
    games = normalize_games(rows)
    assert [g.title for g in games] == ["", ""]
    assert [g.game_id for g in games] == ["row-1", "row-2"]

    report = validation_report(games)
    assert [p.row_number for p in report] == [1, 2]
    assert all("Missing title" in p.problems for p in report)

    assert len(apply_filters(games, Filters())) == 2


def test_unrecognized_trailer_is_flagged():
    (g,) = normalize_games([{"title": "Halo", "trailer": "https://example.com/video"}])
    assert validate_game(g) == ["Trailer URL not recognized (YouTube recommended)"]


def test_clean_row_has_no_problems():
    (g,) = normalize_games([{"title": "Halo", "trailer": "abc123XY"}])
    assert validate_game(g) == []
    assert validation_report([g]) == []


def test_table_with_no_known_columns_is_column_missing():
    with pytest.raises(ColumnMissingError) as exc:
        normalize_games([{"foo": "1", "bar": "2"}])
    assert exc.value.headers == ["foo", "bar"]


def test_stations_normalize():
    rows = [{"Station": "PC 1", "Status": "Open", "Notes": ""}, {"Station": "Pod", "Status": "", "Notes": "back at 4"}]
    stations = normalize_stations(rows)
    assert [s.station_name for s in stations] == ["PC 1", "Pod"]
    assert stations[1].note == "back at 4"
    assert stations[1].status == ""


def test_repeated_titles_get_distinct_ids():
    games = normalize_games([{"title": "FIFA 24", "platform": "PS5"}, {"title": "FIFA 24", "platform": "Xbox"}])
    assert [g.game_id for g in games] == ["FIFA 24", "FIFA 24#2"]

    games = normalize_games([{"id": "g-1", "title": "Halo"}, {"id": "g-1", "title": "Halo 2"}])
    assert [g.game_id for g in games] == ["g-1", "g-1#2"]
