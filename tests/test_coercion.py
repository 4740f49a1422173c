from datetime import date, datetime
from decimal import Decimal

import pytest

from core.enums import NodeKind
from core.exceptions import UnsupportedTypeError
from utils.coercion import cell_text, node_kind, to_cell_value
from utils.dates import decode_dates, parse_datetime
from utils.naming import sheet_name
from utils.paths import dotted, index_segment, key_segment


@pytest.mark.parametrize("value,kind", [
    ({}, NodeKind.OBJECT),
    ([], NodeKind.ARRAY),
    (True, NodeKind.BOOLEAN),
    (3, NodeKind.INTEGER),
    (2.5, NodeKind.FLOAT),
    (Decimal("1.1"), NodeKind.FLOAT),
    ("x", NodeKind.STRING),
    (None, NodeKind.NULL),
    (date(2020, 1, 1), NodeKind.DATE),
    (datetime(2020, 1, 1, 12), NodeKind.DATE),
])
def test_node_kind(value, kind):
    assert node_kind(value) == kind


def test_to_cell_value():
    assert to_cell_value({"a": 1}) == 1
    assert to_cell_value({}) == 1
    assert to_cell_value([1, 2, 3]) == 3
    assert to_cell_value(True) == 1
    assert to_cell_value(False) == 0
    assert to_cell_value(None) == ""
    assert to_cell_value(Decimal("1.5")) == 1.5
    assert to_cell_value("text") == "text"
    assert to_cell_value(7) == 7

    moment = datetime(2021, 3, 4, 5, 6, 7)
    assert to_cell_value(moment) is moment


def test_unsupported_type_reports_path():
    with pytest.raises(UnsupportedTypeError) as exc_info:
        to_cell_value({1, 2}, "a.b")

    assert exc_info.value.type_name == "set"
    assert exc_info.value.path == "a.b"


def test_cell_text():
    assert cell_text(None) == ""
    assert cell_text(True) == "1"
    assert cell_text(False) == "0"
    assert cell_text(15.0) == "15"
    assert cell_text(2.5) == "2.5"
    assert cell_text(Decimal("4.0")) == "4"
    assert cell_text(2014) == "2014"
    assert cell_text(date(2020, 5, 1)) == "2020-05-01"


def test_path_segments():
    assert key_segment("", "a") == "a"
    assert key_segment("a", "b") == "a.b"
    assert key_segment("a", "x y") == "a['x y']"
    assert key_segment("", "it's") == "['it\\'s']"
    assert key_segment("a", "") == "a['']"
    assert index_segment("a", 0) == "a[0]"
    assert dotted("nationalPlansData", "domesticSources") == "nationalPlansData.domesticSources"


def test_sheet_name():
    assert sheet_name("Canada") == "Canada"
    assert sheet_name("  Canada  ") == "Canada"
    assert sheet_name("A" * 40) == "A" * 30
    assert sheet_name("a/b: c?") == "ab c"
    assert sheet_name("", fallback="xx") == "xx"
    assert sheet_name(None, fallback="xx") == "xx"

    # Truncation can expose a trailing space
    assert sheet_name("abcdefghijklmnopqrstuvwxyz123 rest") == "abcdefghijklmnopqrstuvwxyz123"


def test_parse_datetime():
    parsed = parse_datetime("2019-05-01T10:20:30.1234567Z")
    assert parsed.year == 2019
    assert parsed.microsecond == 123456
    assert parsed.utcoffset().total_seconds() == 0

    assert parse_datetime("2019-05-01T10:20") == datetime(2019, 5, 1, 10, 20)
    assert parse_datetime("2019-05-01") == "2019-05-01"
    assert parse_datetime("not a date") == "not a date"


def test_decode_dates_is_recursive():
    decoded = decode_dates({
        "meta": {"createdOn": "2020-01-02T03:04:05Z"},
        "items": ["2020-01-02T03:04:05+02:00", 5, "plain"],
    })

    assert isinstance(decoded["meta"]["createdOn"], datetime)
    assert isinstance(decoded["items"][0], datetime)
    assert decoded["items"][1:] == [5, "plain"]
