"""
Address LatLon Converter — Export Transformer
==============================================
Maps enriched records to the chosen output shape and serialises them.

Coordinate formats:
    ``separate``  ``latitude`` and ``longitude`` stay two fields.
    ``combined``  both are replaced by one ``lat_lon`` field holding
                  ``"{latitude},{longitude}"`` (full precision, whole
                  numbers without ``.0``), or ``""`` when either
                  coordinate is absent.

Every function here is pure: the stored results are never mutated, so
the shape can be recomputed on every download.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from address_latlon.csv_io import Record, serialize_csv
from address_latlon.pipeline import (
    LATITUDE_FIELD,
    LONGITUDE_FIELD,
    STATUS_FIELD,
    build_address,
)

COMBINED_FIELD = "lat_lon"
OUTPUT_SUFFIX = "_geocoded"
DEFAULT_INPUT_NAME = "data.csv"
PREVIEW_LIMIT = 5

_CSV_EXTENSION = re.compile(r"\.csv$", re.IGNORECASE)


class CoordinateFormat(str, Enum):
    """How coordinates are laid out in the exported CSV."""

    SEPARATE = "separate"
    COMBINED = "combined"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_coordinate(value: float) -> str:
    """Shortest round-trip text; whole degrees drop the trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def to_export_shape(
    records: Sequence[Mapping[str, Any]],
    mode: CoordinateFormat | str = CoordinateFormat.SEPARATE,
) -> list[Record]:
    """Return export-ready copies of *records* in the requested *mode*.

    Args:
        records: Enriched records from a pipeline run.
        mode: ``"separate"`` or ``"combined"``.

    Raises:
        ValueError: If *mode* is not a known coordinate format.
    """
    fmt = CoordinateFormat(mode)
    if fmt is CoordinateFormat.SEPARATE:
        return [dict(r) for r in records]

    shaped: list[Record] = []
    for record in records:
        out = {k: v for k, v in record.items() if k not in (LATITUDE_FIELD, LONGITUDE_FIELD)}
        lat = record.get(LATITUDE_FIELD)
        lng = record.get(LONGITUDE_FIELD)
        out[COMBINED_FIELD] = (
            f"{_format_coordinate(lat)},{_format_coordinate(lng)}"
            if _is_number(lat) and _is_number(lng)
            else ""
        )
        shaped.append(out)
    return shaped


def export_csv(
    records: Sequence[Mapping[str, Any]],
    mode: CoordinateFormat | str = CoordinateFormat.SEPARATE,
) -> str:
    """Shape *records* for *mode* and serialise them to CSV text."""
    return serialize_csv(to_export_shape(records, mode))


def output_filename(input_name: str | None) -> str:
    """Derive the download name: ``shops.csv`` → ``shops_geocoded.csv``."""
    stem = _CSV_EXTENSION.sub("", input_name or DEFAULT_INPUT_NAME)
    return f"{stem}{OUTPUT_SUFFIX}.csv"


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PreviewRow:
    """One display row of the results preview.

    Attributes:
        address: The selected fields joined as they were geocoded.
        coordinates: Display cells — ``(lat, lng)`` for ``separate``,
            ``("lat, lng",)`` for ``combined``; ``"-"`` when absent.
        status: The record's geocoding status.
    """

    address: str
    coordinates: tuple[str, ...]
    status: str


def _fmt6(value: Any) -> str:
    return f"{value:.6f}" if _is_number(value) else "-"


def build_preview(
    records: Sequence[Mapping[str, Any]],
    address_columns: Sequence[str],
    mode: CoordinateFormat | str = CoordinateFormat.SEPARATE,
    limit: int = PREVIEW_LIMIT,
) -> list[PreviewRow]:
    """Return display rows for the first *limit* records.

    Coordinates are shown to six decimal places; the exported file keeps
    full precision.
    """
    fmt = CoordinateFormat(mode)
    rows: list[PreviewRow] = []
    for record in records[:limit]:
        lat = record.get(LATITUDE_FIELD)
        lng = record.get(LONGITUDE_FIELD)
        if fmt is CoordinateFormat.SEPARATE:
            cells: tuple[str, ...] = (_fmt6(lat), _fmt6(lng))
        elif _is_number(lat) and _is_number(lng):
            cells = (f"{lat:.6f}, {lng:.6f}",)
        else:
            cells = ("-",)
        rows.append(
            PreviewRow(
                address=build_address(record, address_columns),
                coordinates=cells,
                status=str(record.get(STATUS_FIELD, "")),
            )
        )
    return rows


def preview_headers(mode: CoordinateFormat | str = CoordinateFormat.SEPARATE) -> tuple[str, ...]:
    if CoordinateFormat(mode) is CoordinateFormat.SEPARATE:
        return ("address", "latitude", "longitude", "status")
    return ("address", "lat_lon", "status")
