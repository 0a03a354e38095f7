"""
LatLonKit — Shared Python Package
==================================
Re-exports the shared base class, exception hierarchy, and validator
utilities so individual tools can import from a single location::

    from shared.python import GeoTool, Validators
    from shared.python.exceptions import CsvParseError
"""

from shared.python.base_tool import GeoTool
from shared.python.exceptions import (
    ColumnNotFoundError,
    CsvParseError,
    DecodeError,
    GatewayNotReadyError,
    GeocodingError,
    GeocodingRateLimitError,
    InputValidationError,
    LatLonKitError,
    NoAddressColumnsError,
    NoFileSelectedError,
    NothingToExportError,
    OutputWriteError,
    PipelineCancelledError,
    PreconditionError,
    RunInProgressError,
)
from shared.python.validators import Validators

__all__ = [
    "GeoTool",
    "Validators",
    "LatLonKitError",
    "InputValidationError",
    "ColumnNotFoundError",
    "DecodeError",
    "CsvParseError",
    "PreconditionError",
    "NoFileSelectedError",
    "NoAddressColumnsError",
    "GatewayNotReadyError",
    "RunInProgressError",
    "NothingToExportError",
    "GeocodingError",
    "GeocodingRateLimitError",
    "PipelineCancelledError",
    "OutputWriteError",
]
