"""
Tests — CSV Parser / Serializer
================================
Header-driven parsing, the sparse-field policy, quoting, and the
serialise → parse round trip.
"""

from __future__ import annotations

import pytest

from address_latlon.csv_io import CsvTable, collect_fields, parse_csv, serialize_csv
from shared.python.exceptions import CsvParseError


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseCsv:
    def test_header_and_records_in_file_order(self) -> None:
        table = parse_csv("name,address\nA,Tokyo\nB,Osaka\n")
        assert isinstance(table, CsvTable)
        assert table.fields == ["name", "address"]
        assert table.records == [
            {"name": "A", "address": "Tokyo"},
            {"name": "B", "address": "Osaka"},
        ]
        assert len(table) == 2

    def test_blank_lines_are_skipped(self) -> None:
        table = parse_csv("\nname,address\n\nA,Tokyo\n\n\nB,Osaka\n\n")
        assert table.fields == ["name", "address"]
        assert [r["name"] for r in table.records] == ["A", "B"]

    def test_short_row_leaves_trailing_fields_absent(self) -> None:
        table = parse_csv("a,b,c\n1,2\n")
        assert table.records == [{"a": "1", "b": "2"}]
        assert "c" not in table.records[0]

    def test_values_beyond_header_are_dropped(self) -> None:
        table = parse_csv("a,b\n1,2\n3,4,5\n")
        assert table.fields == ["a", "b"]
        assert table.records == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_empty_cell_is_absent(self) -> None:
        table = parse_csv("a,b\n,2\n")
        assert table.records == [{"b": "2"}]

    def test_values_are_kept_as_text(self) -> None:
        table = parse_csv("zip,code\n0123,1.50\n")
        assert table.records == [{"zip": "0123", "code": "1.50"}]

    def test_na_like_words_are_text(self) -> None:
        table = parse_csv("a,b\nNA,null\n")
        assert table.records == [{"a": "NA", "b": "null"}]

    def test_quoted_fields(self) -> None:
        text = 'name,address\n"Shop, Ltd.","1-1 ""Main"" St\nBuilding 2"\n'
        table = parse_csv(text)
        assert table.records == [
            {"name": "Shop, Ltd.", "address": '1-1 "Main" St\nBuilding 2'},
        ]

    def test_surrounding_whitespace_is_preserved(self) -> None:
        table = parse_csv("a\n  Tokyo  \n")
        assert table.records == [{"a": "  Tokyo  "}]

    def test_header_only(self) -> None:
        table = parse_csv("name,address\n")
        assert table.fields == ["name", "address"]
        assert table.records == []

    def test_unterminated_quote_raises(self) -> None:
        with pytest.raises(CsvParseError) as info:
            parse_csv('a,b\n"unterminated,1\n')
        assert info.value.message.startswith("Malformed CSV")

    def test_empty_text_raises(self) -> None:
        with pytest.raises(CsvParseError):
            parse_csv("")


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


class TestSerializeCsv:
    def test_header_is_union_in_first_seen_order(self) -> None:
        records = [{"a": "1", "b": "2"}, {"c": "3", "a": "4"}]
        assert collect_fields(records) == ["a", "b", "c"]
        assert serialize_csv(records).split("\r\n")[0] == "a,b,c"

    def test_absent_fields_are_empty_cells(self) -> None:
        text = serialize_csv([{"a": "1", "b": "2"}, {"a": "3"}])
        assert text == "a,b\r\n1,2\r\n3,\r\n"

    def test_quoting(self) -> None:
        text = serialize_csv([{"a": "x,y", "b": 'say "hi"', "c": "two\nlines"}])
        assert text == 'a,b,c\r\n"x,y","say ""hi""","two\nlines"\r\n'

    def test_no_records_gives_empty_text(self) -> None:
        assert serialize_csv([]) == ""

    def test_floats_keep_precision(self) -> None:
        text = serialize_csv([{"latitude": 35.123456, "longitude": 139.654321}])
        assert text == "latitude,longitude\r\n35.123456,139.654321\r\n"

    def test_round_trip(self) -> None:
        records = [
            {"name": "Shop, Ltd.", "address": '1-1 "Main" St\nBuilding 2', "zip": "0100"},
            {"name": "B", "zip": "0200"},
            {"name": "C", "address": "大阪府"},
        ]
        table = parse_csv(serialize_csv(records))
        assert table.fields == ["name", "address", "zip"]
        assert table.records == records
