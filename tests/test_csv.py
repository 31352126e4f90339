import csv
import io

import pytest

from tdquery.util.csv_utils import (
    add_csv_header,
    add_csv_row,
    csv_value_text,
    escape_and_quote_csv_value,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("plain", "plain"),
        ("", '""'),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("a\nb", '"a\nb"'),
        ("a\rb", '"a\nb"'),
        ("a\r\nb", '"a\nb"'),
        ("a\n\nb", '"a\n\nb"'),
    ],
)
def test_escape_and_quote(value, expected):
    assert escape_and_quote_csv_value(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        (1, "1"),
        (2.5, "2.5"),
        (True, "true"),
        ([1, 2], '"[1,2]"'),
        ({"k": "v"}, '"{""k"":""v""}"'),
        ("ü", "ü"),
    ],
)
def test_csv_value_text(value, expected):
    assert csv_value_text(value) == expected


def test_header_and_rows():
    out = io.StringIO()
    add_csv_header(out, ["a", "b c", ""])
    add_csv_row(out, ["x", None, 3])
    add_csv_row(out, [])
    assert out.getvalue() == 'a,b c,""\r\nx,,3\r\n\r\n'


def test_round_trip_with_csv_reader():
    values = ["x,y", 'say "hi"', "line1\nline2", "plain", ""]
    out = io.StringIO()
    add_csv_row(out, values)
    parsed = next(csv.reader(io.StringIO(out.getvalue())))
    assert parsed == values


def test_round_trip_normalizes_crlf():
    out = io.StringIO()
    add_csv_row(out, ["a, \"b\"\r\nc", "d"])
    parsed = next(csv.reader(io.StringIO(out.getvalue())))
    assert parsed == ['a, "b"\nc', "d"]
