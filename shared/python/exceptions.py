"""
LatLonKit — Custom Exception Hierarchy
=======================================
All LatLonKit tools raise exceptions from this module so callers can
catch them at the right level of granularity.

Hierarchy::

    LatLonKitError                       ← catch-all base
    ├── InputValidationError             ← bad files, missing columns, etc.
    │   ├── ColumnNotFoundError          ← CSV column missing
    │   ├── DecodeError                  ← unsupported encoding / bad bytes
    │   └── CsvParseError                ← malformed CSV text
    ├── PreconditionError                ← a run cannot start yet
    │   ├── NoFileSelectedError
    │   ├── NoAddressColumnsError
    │   ├── GatewayNotReadyError         ← retryable
    │   ├── RunInProgressError
    │   └── NothingToExportError
    ├── GeocodingError                   ← geocoder API / parse failures
    │   └── GeocodingRateLimitError      ← API rate limit exceeded
    ├── PipelineCancelledError           ← run aborted via cancellation token
    └── OutputWriteError                 ← cannot write to output path

Usage::

    from shared.python.exceptions import CsvParseError

    raise CsvParseError("Unterminated quoted field on line 3")
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class LatLonKitError(Exception):
    """Base exception for all LatLonKit tools.

    Catch this to handle any tool-specific error without caring about
    the exact subtype.

    Args:
        message: Human-readable description of the error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InputValidationError(LatLonKitError):
    """Raised when a tool's inputs fail pre-processing validation.

    This is the parent class for more specific input problems.
    """


class ColumnNotFoundError(InputValidationError):
    """Raised when an expected column is absent from a tabular dataset.

    Args:
        column: The name of the missing column.
        available: List of column names that ARE present, used to
                   generate a helpful error message.

    Example::

        raise ColumnNotFoundError("address", table.fields)
    """

    def __init__(self, column: str, available: list[str]) -> None:
        available_str = ", ".join(f"'{c}'" for c in available)
        super().__init__(
            f"Column '{column}' not found. Available columns: {available_str}"
        )
        self.column: str = column
        self.available: list[str] = available


class DecodeError(InputValidationError):
    """Raised when raw file bytes cannot be turned into text.

    Covers both an encoding name that is not supported and a byte
    sequence that is invalid for the chosen encoding.

    Args:
        encoding: The encoding label the caller asked for.
        reason: Short explanation of what went wrong.
    """

    def __init__(self, encoding: str, reason: str) -> None:
        super().__init__(f"Cannot decode file as '{encoding}': {reason}")
        self.encoding: str = encoding
        self.reason: str = reason


class CsvParseError(InputValidationError):
    """Raised when CSV text is malformed (e.g. broken quoting) or has no header."""


# ---------------------------------------------------------------------------
# Run preconditions
# ---------------------------------------------------------------------------


class PreconditionError(LatLonKitError):
    """Raised when a run or export is requested before its inputs are ready.

    These never represent a per-row failure: they are raised before any
    record is processed and are fixed by user action.
    """

    retryable: bool = False


class NoFileSelectedError(PreconditionError):
    """Raised when processing is requested without a loaded file."""

    def __init__(self) -> None:
        super().__init__("Select a CSV file before starting.")


class NoAddressColumnsError(PreconditionError):
    """Raised when processing is requested with an empty address selection."""

    def __init__(self) -> None:
        super().__init__("Select at least one address column before starting.")


class GatewayNotReadyError(PreconditionError):
    """Raised when the geocoding gateway has not finished initialising.

    The condition is transient: the caller may simply try again once the
    gateway reports ready.

    Args:
        gateway: Display name of the gateway that is not ready.
    """

    retryable = True

    def __init__(self, gateway: str) -> None:
        super().__init__(
            f"The geocoding service '{gateway}' is still loading. Please try again shortly."
        )
        self.gateway: str = gateway


class RunInProgressError(PreconditionError):
    """Raised when a second run is started while one is still active."""

    def __init__(self) -> None:
        super().__init__("A geocoding run is already in progress.")


class NothingToExportError(PreconditionError):
    """Raised when an export is requested before any result exists."""

    def __init__(self) -> None:
        super().__init__("There is no data to download yet.")


# ---------------------------------------------------------------------------
# Geocoding
# ---------------------------------------------------------------------------


class GeocodingError(LatLonKitError):
    """Raised when a geocoding operation fails for any reason.

    Subclass this for provider-specific errors.
    """


class GeocodingRateLimitError(GeocodingError):
    """Raised when the geocoding provider returns a rate-limit response.

    Args:
        provider: Name of the geocoding service (e.g. ``"Nominatim"``).
        retry_after: Suggested seconds to wait before retrying, if
                     provided by the API.  ``None`` if unknown.

    Example::

        raise GeocodingRateLimitError("Nominatim", retry_after=60)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        hint = f" Retry after {retry_after}s." if retry_after else ""
        super().__init__(f"Rate limit exceeded for provider '{provider}'.{hint}")
        self.provider: str = provider
        self.retry_after: int | None = retry_after


class PipelineCancelledError(LatLonKitError):
    """Raised when a run is aborted through its cancellation token.

    Args:
        completed: Number of records that had finished before the abort.
        total: Number of records the run was asked to process.
    """

    def __init__(self, completed: int, total: int) -> None:
        super().__init__(f"Geocoding cancelled after {completed}/{total} rows.")
        self.completed: int = completed
        self.total: int = total


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class OutputWriteError(LatLonKitError):
    """Raised when the tool cannot write its output to disk.

    Args:
        output_path: String representation of the path that failed.
        reason: Underlying OS or library error message.

    Example::

        raise OutputWriteError("/read-only/dir/out.csv", "Permission denied")
    """

    def __init__(self, output_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to write output to '{output_path}': {reason}"
        )
        self.output_path: str = output_path
        self.reason: str = reason
