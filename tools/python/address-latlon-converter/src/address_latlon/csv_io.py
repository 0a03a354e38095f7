"""
Address LatLon Converter — CSV Parser / Serializer
===================================================
Header-driven CSV parsing into ordered records, and serialisation of
(possibly sparse) records back to CSV text.

Records are plain ``dict`` objects whose key order is the column order.
Every value is read as text so postal codes and other zero-padded codes
survive untouched.

Sparse-field policy:
    A field with no text — an empty cell, or a trailing field missing
    from a short row — is **absent** from the record (no key), never an
    empty string.  Serialising writes absent fields as empty cells, so a
    parse → serialise → parse round trip is lossless.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from shared.python.exceptions import CsvParseError

logger = logging.getLogger("latlonkit.address_latlon.csv_io")

Record = dict[str, Any]

LINE_TERMINATOR = "\r\n"


@dataclass
class CsvTable:
    """Result of parsing one CSV document.

    Attributes:
        fields: Header field names in file order.
        records: One dict per data row, in file order.
    """

    fields: list[str] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


def parse_csv(text: str) -> CsvTable:
    """Parse comma-delimited *text* whose first non-empty line is the header.

    Blank lines are skipped, values beyond the header width are dropped,
    and duplicate header names are de-duplicated by pandas (``name.1``).

    Args:
        text: Decoded CSV text.

    Returns:
        A :class:`CsvTable` with the header fields and the records.

    Raises:
        CsvParseError: If the text has no header row or the quoting is
            malformed (e.g. an unterminated quoted field).
    """
    try:
        header = pd.read_csv(io.StringIO(text), sep=",", nrows=0, skip_blank_lines=True)
        # positional usecols lets the tokenizer accept rows wider than the header
        df = pd.read_csv(
            io.StringIO(text),
            sep=",",
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
            index_col=False,
            usecols=list(range(len(header.columns))),
        )
    except pd.errors.EmptyDataError as exc:
        raise CsvParseError("CSV file has no header row.") from exc
    except pd.errors.ParserError as exc:
        raise CsvParseError(f"Malformed CSV: {exc}") from exc

    fields = [str(c) for c in df.columns]
    records: list[Record] = []
    for row in df.itertuples(index=False, name=None):
        records.append({name: value for name, value in zip(fields, row) if not pd.isna(value)})

    logger.debug("Parsed %d record(s) with %d field(s).", len(records), len(fields))
    return CsvTable(fields=fields, records=records)


def collect_fields(records: Iterable[Mapping[str, Any]]) -> list[str]:
    """Return the union of field names across *records* in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        for name in record:
            seen.setdefault(name, None)
    return list(seen)


def serialize_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """Serialise *records* to CSV text.

    The header is :func:`collect_fields` of the records.  Fields that
    contain a comma, quote or newline are quoted (quotes doubled); absent
    fields and ``None`` are written as empty cells; floats keep full
    round-trip precision.

    Args:
        records: Records to write, in output order.

    Returns:
        CSV text with CRLF line endings, or ``""`` when there are no
        records.  Callers encode it as UTF-8.
    """
    if not records:
        return ""
    header = collect_fields(records)
    df = pd.DataFrame(list(records), columns=header)
    return df.to_csv(
        index=False,
        lineterminator=LINE_TERMINATOR,
        quoting=csv.QUOTE_MINIMAL,
    )
