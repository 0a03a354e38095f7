"""
Tests — Export Transformer
===========================
"""

from __future__ import annotations

import copy

import pytest

from address_latlon.export import (
    CoordinateFormat,
    build_preview,
    export_csv,
    output_filename,
    preview_headers,
    to_export_shape,
)


def _records() -> list[dict]:
    return [
        {"address": "X", "latitude": 35.1, "longitude": 139.2, "geocoding_status": "success"},
        {"address": "Y", "geocoding_status": "failure", "error_message": "no result found"},
    ]


class TestToExportShape:
    def test_separate_keeps_fields(self) -> None:
        records = _records()
        assert to_export_shape(records, "separate") == records

    def test_combined_merges_coordinates(self) -> None:
        shaped = to_export_shape(_records(), CoordinateFormat.COMBINED)
        assert shaped[0] == {"address": "X", "geocoding_status": "success", "lat_lon": "35.1,139.2"}
        assert "latitude" not in shaped[0] and "longitude" not in shaped[0]

    def test_combined_without_coordinates_is_empty(self) -> None:
        shaped = to_export_shape(_records(), "combined")
        assert shaped[1]["lat_lon"] == ""

    def test_combined_keeps_full_precision(self) -> None:
        shaped = to_export_shape([{"latitude": 35.681236123, "longitude": 139.767125456}], "combined")
        assert shaped[0]["lat_lon"] == "35.681236123,139.767125456"

    def test_combined_whole_degrees_have_no_decimal_point(self) -> None:
        shaped = to_export_shape([{"latitude": 35.0, "longitude": 139.0}], "combined")
        assert shaped[0]["lat_lon"] == "35,139"

    def test_records_are_not_mutated(self) -> None:
        records = _records()
        before = copy.deepcopy(records)
        first = to_export_shape(records, "combined")
        second = to_export_shape(records, "combined")
        assert first == second
        assert records == before

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            to_export_shape(_records(), "stacked")


class TestExportCsv:
    def test_combined_csv(self) -> None:
        text = export_csv(_records()[:1], "combined")
        assert text == 'address,geocoding_status,lat_lon\r\nX,success,"35.1,139.2"\r\n'

    def test_separate_export_is_repeatable(self) -> None:
        records = _records()
        first = export_csv(records, "separate")
        second = export_csv(records, "separate")
        assert first == second
        assert records == _records()

    def test_no_records_is_empty_text(self) -> None:
        assert export_csv([], "separate") == ""

    def test_separate_csv_has_empty_cells_for_failures(self) -> None:
        lines = export_csv(_records(), "separate").split("\r\n")
        assert lines[0] == "address,latitude,longitude,geocoding_status,error_message"
        assert lines[1] == "X,35.1,139.2,success,"
        assert lines[2] == "Y,,,failure,no result found"


class TestOutputFilename:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("shops.csv", "shops_geocoded.csv"),
            ("SHOPS.CSV", "SHOPS_geocoded.csv"),
            ("archive.2024.csv", "archive.2024_geocoded.csv"),
            ("notes.txt", "notes.txt_geocoded.csv"),
            (None, "data_geocoded.csv"),
            ("", "data_geocoded.csv"),
        ],
    )
    def test_names(self, name, expected: str) -> None:
        assert output_filename(name) == expected


class TestPreview:
    def test_separate_rows(self) -> None:
        rows = build_preview(_records(), ["address"], "separate")
        assert rows[0].address == "X"
        assert rows[0].coordinates == ("35.100000", "139.200000")
        assert rows[0].status == "success"
        assert rows[1].coordinates == ("-", "-")

    def test_combined_rows(self) -> None:
        rows = build_preview(_records(), ["address"], "combined")
        assert rows[0].coordinates == ("35.100000, 139.200000",)
        assert rows[1].coordinates == ("-",)

    def test_limit(self) -> None:
        records = [{"address": str(i), "geocoding_status": "skipped"} for i in range(8)]
        assert len(build_preview(records, ["address"])) == 5
        assert len(build_preview(records, ["address"], limit=2)) == 2

    def test_headers(self) -> None:
        assert preview_headers("separate") == ("address", "latitude", "longitude", "status")
        assert preview_headers("combined") == ("address", "lat_lon", "status")
