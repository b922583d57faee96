import json

import pytest

from kickoff_hub.errors import EmptyDataError, FormatError
from kickoff_hub.sheets.csv_text import parse_csv_text, read_csv_rows
from kickoff_hub.sheets.gviz import parse_gviz_text
from kickoff_hub.sheets.loader import parse_sheet_text

from conftest import gviz_text


# ----------------------------
# gviz (wrapped JSON)
# ----------------------------

def test_gviz_rows_keyed_by_label():
    rows = parse_gviz_text(gviz_text(["Title", "Platform"], [["Halo", "Xbox"], ["Celeste", None]]))
    assert rows == [{"Title": "Halo", "Platform": "Xbox"}, {"Title": "Celeste", "Platform": ""}]


def test_gviz_prefers_formatted_value_and_falls_back_to_id():
    payload = {
        "status": "ok",
        "table": {
            "cols": [{"id": "A", "label": ""}, {"id": "B", "label": "Price"}],
            "rows": [{"c": [{"v": "Halo"}, {"v": 59.99, "f": "$59.99"}]}],
        },
    }
    text = "google.visualization.Query.setResponse(" + json.dumps(payload) + ");\n"
    assert parse_gviz_text(text) == [{"A": "Halo", "Price": "$59.99"}]


def test_gviz_missing_envelope_reports_body_start():
    body = "x" * 50 + "not the response you were looking for" + "y" * 400
    with pytest.raises(FormatError) as exc:
        parse_gviz_text(body)
    msg = str(exc.value)
    assert body[:200] in msg
    assert body[:201] not in msg


def test_gviz_html_page_is_format_error():
    page = "<!DOCTYPE html><html><head><title>Sign in - Google Accounts</title></head><body>setResponse(</body></html>"
    with pytest.raises(FormatError) as exc:
        parse_gviz_text(page)
    assert "Anyone with the link" in str(exc.value)
    assert "Sign in - Google Accounts" in str(exc.value)


def test_gviz_query_error_status():
    payload = {"status": "error", "errors": [{"reason": "invalid_query", "detailed_message": "Invalid sheet Games"}]}
    with pytest.raises(FormatError, match="Invalid sheet Games"):
        parse_gviz_text("google.visualization.Query.setResponse(" + json.dumps(payload) + ");")


def test_gviz_header_only_is_empty():
    with pytest.raises(EmptyDataError):
        parse_gviz_text(gviz_text(["Title"], []))


def test_gviz_table_shape_checked():
    with pytest.raises(FormatError):
        parse_gviz_text('google.visualization.Query.setResponse({"status":"ok"});')


# ----------------------------
# delimited text
# ----------------------------

def test_csv_embedded_delimiter_and_quote():
    text = 'title,note\r\n"Ratchet, ""Rift"" Apart",ok\r\n'
    rows = parse_csv_text(text)
    assert rows == [{"title": 'Ratchet, "Rift" Apart', "note": "ok"}]


def test_csv_cr_and_lf_terminate_rows_and_blank_rows_collapse():
    text = "title,platform\rHalo,Xbox\n\nCeleste,Switch\r\n\r\n\n"
    assert read_csv_rows(text) == [["title", "platform"], ["Halo", "Xbox"], ["Celeste", "Switch"]]


def test_csv_keeps_values_as_text():
    rows = parse_csv_text("title,station,status\nHalo,01,NA\n")
    assert rows == [{"title": "Halo", "station": "01", "status": "NA"}]


@pytest.mark.parametrize("text", ["", "title,platform\n", "title,platform\r\n\r\n"])
def test_csv_fewer_than_two_rows_is_empty(text):
    with pytest.raises(EmptyDataError):
        parse_csv_text(text)


def test_csv_html_page_never_parsed():
    with pytest.raises(FormatError):
        parse_csv_text("<html><body>title,platform\nHalo,Xbox</body></html>")


def test_csv_longer_row_widens_the_table():
    rows = parse_csv_text("title,platform\nHalo,Xbox\nCeleste,Switch,extra note\n")
    assert rows == [
        {"title": "Halo", "platform": "Xbox", "column_3": ""},
        {"title": "Celeste", "platform": "Switch", "column_3": "extra note"},
    ]


def test_csv_short_rows_pad_and_unused_width_is_dropped():
    assert read_csv_rows("a,b,c\nx\ny,z,w,\n") == [["a", "b", "c"], ["x", "", ""], ["y", "z", "w"]]


# ----------------------------
# variant sniffing
# ----------------------------

def test_sheet_text_with_envelope_reads_as_gviz():
    rows = parse_sheet_text(gviz_text(["Title"], [["Halo"]]))
    assert rows == [{"Title": "Halo"}]


def test_sheet_text_without_envelope_reads_as_csv():
    assert parse_sheet_text("Title,Platform\nHalo,Xbox\n") == [{"Title": "Halo", "Platform": "Xbox"}]


def test_sheet_text_html_is_format_error():
    with pytest.raises(FormatError):
        parse_sheet_text("<!DOCTYPE html><html><title>Sign in</title></html>")
