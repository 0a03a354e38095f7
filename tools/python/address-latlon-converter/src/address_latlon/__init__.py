"""
Address LatLon Converter
=========================
A LatLonKit tool that adds latitude/longitude to a CSV of free-text
addresses, one row at a time, through a pluggable geocoding gateway.

Public API::

    from address_latlon import ProcessingSession, GsiGateway, AddressLatLonConverter
"""

from address_latlon.columns import ColumnSelector
from address_latlon.converter import AddressLatLonConverter, ConverterConfig
from address_latlon.csv_io import CsvTable, parse_csv, serialize_csv
from address_latlon.decoder import SUPPORTED_ENCODINGS, decode
from address_latlon.export import CoordinateFormat, output_filename, to_export_shape
from address_latlon.gateway import (
    CallableGateway,
    Coordinates,
    GeocodingGateway,
    GsiGateway,
    NominatimGateway,
    create_gateway,
)
from address_latlon.pipeline import (
    CancellationToken,
    GeocodingStatus,
    PipelineResult,
    RowPipeline,
)
from address_latlon.session import ExportFile, ProcessingSession, SessionSnapshot

__all__ = [
    "AddressLatLonConverter",
    "ConverterConfig",
    "ProcessingSession",
    "SessionSnapshot",
    "ExportFile",
    "ColumnSelector",
    "CsvTable",
    "parse_csv",
    "serialize_csv",
    "decode",
    "SUPPORTED_ENCODINGS",
    "CoordinateFormat",
    "to_export_shape",
    "output_filename",
    "GeocodingGateway",
    "CallableGateway",
    "GsiGateway",
    "NominatimGateway",
    "Coordinates",
    "create_gateway",
    "RowPipeline",
    "PipelineResult",
    "GeocodingStatus",
    "CancellationToken",
]
__version__ = "1.0.0"
