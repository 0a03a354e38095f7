"""
Address LatLon Converter — Processing Session
==============================================
Explicit state for one uploaded CSV file: its bytes, the selected input
encoding, the inferred columns and address selection, run progress and
the enriched result.  Front ends drive the session through its methods
and observe it through immutable :class:`SessionSnapshot` values.

Lifecycle::

    session = ProcessingSession()
    session.load_file("shops.csv", raw_bytes)   # decode, parse, infer columns
    session.set_encoding("Shift_JIS")           # re-decode, re-infer, re-seed
    session.toggle_column("city")
    result = await session.run(gateway, on_progress=print)
    download = session.export("combined")       # ExportFile(filename, text)

Loading another file (or calling :meth:`ProcessingSession.cancel`) aborts
an active run; the aborted run publishes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from shared.python.exceptions import (
    CsvParseError,
    DecodeError,
    GatewayNotReadyError,
    LatLonKitError,
    NoAddressColumnsError,
    NoFileSelectedError,
    NothingToExportError,
    OutputWriteError,
    PipelineCancelledError,
    RunInProgressError,
)
from shared.python.validators import Validators

from address_latlon.columns import ColumnSelector
from address_latlon.csv_io import CsvTable, Record, parse_csv
from address_latlon.decoder import DEFAULT_ENCODING, decode, normalize_encoding
from address_latlon.export import (
    PREVIEW_LIMIT,
    CoordinateFormat,
    PreviewRow,
    build_preview,
    export_csv,
    output_filename,
)
from address_latlon.gateway import GeocodingGateway
from address_latlon.pipeline import (
    CancellationToken,
    PipelineResult,
    ProgressCallback,
    RowPipeline,
)

logger = logging.getLogger("latlonkit.address_latlon.session")


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a :class:`ProcessingSession` at one moment.

    Attributes:
        file_name: Name of the loaded file, or ``None``.
        encoding: Canonical input encoding label.
        columns: Field names inferred from the header.
        selection: Ordered address-column selection.
        progress: Integer percentage of the current or last run.
        running: ``True`` while a run is active.
        result_count: Number of enriched records available for export.
        error: Last user-facing error message, or ``None``.
    """

    file_name: str | None
    encoding: str
    columns: tuple[str, ...]
    selection: tuple[str, ...]
    progress: int
    running: bool
    result_count: int
    error: str | None


@dataclass(frozen=True)
class ExportFile:
    """A rendered download: file name plus CSV text (always UTF-8)."""

    filename: str
    text: str

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")

    def write(self, target: Path) -> Path:
        """Write the CSV to *target*, or to ``target / filename`` if it is a directory.

        Raises:
            OutputWriteError: If the file cannot be written.
        """
        target = Path(target)
        path = target / self.filename if target.is_dir() else target
        try:
            path.write_bytes(self.to_bytes())
        except OSError as exc:
            raise OutputWriteError(str(path), str(exc)) from exc
        return path


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class ProcessingSession:
    """State bound to one uploaded CSV file.

    Args:
        encoding: Initial input encoding label (``"UTF-8"`` or ``"Shift_JIS"``).

    Raises:
        DecodeError: If *encoding* is not supported.
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING) -> None:
        self._encoding: str = normalize_encoding(encoding)
        self.file_name: str | None = None
        self._data: bytes | None = None
        self._table: CsvTable | None = None
        self._selector = ColumnSelector()
        self.progress: int = 0
        self._result: PipelineResult | None = None
        self._token: CancellationToken | None = None
        self.error: str | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def table(self) -> CsvTable | None:
        return self._table

    @property
    def columns(self) -> list[str]:
        return self._selector.columns

    @property
    def selection(self) -> list[str]:
        return self._selector.selection

    @property
    def result(self) -> PipelineResult | None:
        return self._result

    @property
    def is_running(self) -> bool:
        return self._token is not None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            file_name=self.file_name,
            encoding=self._encoding,
            columns=tuple(self._selector.columns),
            selection=tuple(self._selector.selection),
            progress=self.progress,
            running=self.is_running,
            result_count=len(self._result.records) if self._result else 0,
            error=self.error,
        )

    # ------------------------------------------------------------------
    # File and encoding
    # ------------------------------------------------------------------

    def load_file(self, name: str, data: bytes) -> list[str]:
        """Replace the session's file with *data* and infer its columns.

        Any active run is cancelled and previous results are discarded.
        The raw bytes are kept even when decoding fails, so the caller can
        recover by choosing another encoding.

        Returns:
            The inferred column names.

        Raises:
            DecodeError: If *data* is invalid for the selected encoding.
            CsvParseError: If the decoded text is not valid CSV.
        """
        self.cancel()
        self.file_name = name
        self._data = bytes(data)
        self._result = None
        self.progress = 0
        logger.info("Loaded '%s' (%d bytes).", name, len(self._data))
        return self._infer_columns()

    def set_encoding(self, encoding: str) -> list[str]:
        """Select a new input encoding and, if a file is loaded, re-read it.

        Column inference runs from scratch and the address selection is
        re-seeded to the first column.

        Returns:
            The inferred column names (empty if no file is loaded).

        Raises:
            DecodeError: If *encoding* is unsupported or the loaded bytes
                are invalid for it.
            CsvParseError: If the re-decoded text is not valid CSV.
        """
        self._encoding = normalize_encoding(encoding)
        logger.debug("Input encoding set to %s.", self._encoding)
        if self._data is None:
            return []
        return self._infer_columns()

    def _read_table(self) -> CsvTable:
        assert self._data is not None
        return parse_csv(decode(self._data, self._encoding))

    def _infer_columns(self) -> list[str]:
        try:
            table = self._read_table()
        except (DecodeError, CsvParseError) as exc:
            self._table = None
            self._selector.reset()
            self.error = exc.message
            logger.error("Cannot read '%s': %s", self.file_name, exc.message)
            raise
        self._table = table
        self.error = None
        columns = self._selector.infer_columns(table)
        logger.info("Columns: %s", ", ".join(columns) or "(none)")
        return columns

    # ------------------------------------------------------------------
    # Address selection
    # ------------------------------------------------------------------

    def toggle_column(self, name: str) -> bool:
        return self._selector.toggle(name)

    def select_columns(self, names: Iterable[str]) -> list[str]:
        return self._selector.select(names)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def _check_can_run(self, gateway: GeocodingGateway) -> None:
        if self._data is None:
            raise NoFileSelectedError()
        if not self._selector.selection:
            raise NoAddressColumnsError()
        if not gateway.is_ready:
            raise GatewayNotReadyError(gateway.name)
        if self.is_running:
            raise RunInProgressError()

    async def run(
        self,
        gateway: GeocodingGateway,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        """Geocode every record of the loaded file.

        The file is decoded and parsed once, before any record is
        processed; the pipeline then runs to completion or cancellation.

        Args:
            gateway: A ready :class:`GeocodingGateway`.
            on_progress: Called with the integer percentage after every row.

        Returns:
            The :class:`PipelineResult`, also kept as :attr:`result`.

        Raises:
            NoFileSelectedError, NoAddressColumnsError, GatewayNotReadyError,
            RunInProgressError: Preconditions; nothing is processed.
            DecodeError, CsvParseError: The file cannot be read.
            PipelineCancelledError: The run was cancelled.
        """
        try:
            self._check_can_run(gateway)
        except LatLonKitError as exc:
            self.error = exc.message
            raise

        token = CancellationToken()
        self._token = token
        self._result = None
        self.progress = 0
        self.error = None

        def _progress(percent: int) -> None:
            if self._token is token:
                self.progress = percent
            if on_progress is not None:
                on_progress(percent)

        try:
            table = self._read_table()
            columns = self._selector.selection
            Validators.assert_columns_exist(table.fields, columns)
            pipeline = RowPipeline(gateway, columns, on_progress=_progress, cancel_token=token)
            result = await pipeline.run(table.records)
            if token.cancelled:
                raise PipelineCancelledError(len(result.records), len(result.records))
        except LatLonKitError as exc:
            if self._token is token:
                self.error = exc.message
            raise
        finally:
            if self._token is token:
                self._token = None

        self._result = result
        return result

    def cancel(self) -> bool:
        """Cancel the active run, if any.  Returns ``True`` if one was cancelled."""
        token = self._token
        if token is None:
            return False
        token.cancel()
        self._token = None
        logger.info("Active run cancelled.")
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _records(self) -> list[Record]:
        if self._result is None or not self._result.records:
            raise NothingToExportError()
        return self._result.records

    def export(self, mode: CoordinateFormat | str = CoordinateFormat.SEPARATE) -> ExportFile:
        """Render the current result as a downloadable CSV.

        Raises:
            NothingToExportError: If no run has produced records yet.
        """
        return ExportFile(
            filename=output_filename(self.file_name),
            text=export_csv(self._records(), mode),
        )

    def preview(
        self,
        mode: CoordinateFormat | str = CoordinateFormat.SEPARATE,
        limit: int = PREVIEW_LIMIT,
    ) -> list[PreviewRow]:
        return build_preview(self._records(), self._selector.selection, mode, limit)

    def __repr__(self) -> str:
        return (
            f"ProcessingSession(file_name={self.file_name!r}, encoding={self._encoding!r}, "
            f"selection={self._selector.selection!r}, progress={self.progress})"
        )
