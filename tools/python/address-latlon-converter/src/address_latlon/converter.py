"""
Address LatLon Converter — Core Module
=======================================
File-to-file front end: read a CSV of addresses, geocode every row through
a pluggable gateway, and write ``<name>_geocoded.csv`` with latitude and
longitude added.

Classes:
    ConverterConfig          Encoding, address columns and output format.
    AddressLatLonConverter   Primary tool class (inherits GeoTool).

Usage::

    from pathlib import Path
    from address_latlon.converter import AddressLatLonConverter, ConverterConfig
    from address_latlon.gateway import GsiGateway

    tool = AddressLatLonConverter(
        input_path=Path("data/shops.csv"),
        config=ConverterConfig(
            input_encoding="Shift_JIS",
            address_columns=["都道府県", "住所"],
            coordinate_format="combined",
        ),
        gateway=GsiGateway(user_agent="my-project/1.0"),
    )
    tool.run()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from shared.python.base_tool import GeoTool
from shared.python.exceptions import InputValidationError
from shared.python.validators import Validators

from address_latlon.decoder import DEFAULT_ENCODING
from address_latlon.export import CoordinateFormat, output_filename
from address_latlon.gateway import GeocodingGateway, GsiGateway, HttpGateway
from address_latlon.pipeline import PipelineResult, ProgressCallback
from address_latlon.session import ExportFile, ProcessingSession

logger = logging.getLogger("latlonkit.address_latlon")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class ConverterConfig:
    """Configuration bundle for :class:`AddressLatLonConverter`.

    Attributes:
        input_encoding: Encoding of the input file, ``"UTF-8"`` or
                        ``"Shift_JIS"``.
                        <!-- PLACEHOLDER: use "Shift_JIS" for CSVs saved by
                             Japanese-locale Excel -->
        address_columns: Columns concatenated (in this order, no separator)
                         into the address.  Empty means "first column".
                         <!-- PLACEHOLDER: e.g. ["prefecture", "city", "street"] -->
        coordinate_format: ``"separate"`` for ``latitude``/``longitude``
                           columns, ``"combined"`` for one ``lat_lon`` column.
    """

    input_encoding: str = DEFAULT_ENCODING
    address_columns: list[str] = field(default_factory=list)
    coordinate_format: CoordinateFormat | str = CoordinateFormat.SEPARATE


# ---------------------------------------------------------------------------
# Main tool class
# ---------------------------------------------------------------------------


class AddressLatLonConverter(GeoTool):
    """Geocode every address in a CSV file and write an augmented CSV.

    Inherits the Template Method pipeline from :class:`~shared.python.GeoTool`:
    ``validate_inputs`` → ``process`` → ``_report_success``.  Rows that
    cannot be geocoded are kept with ``geocoding_status`` set to
    ``failure`` or ``skipped`` so no data is silently lost.

    Args:
        input_path: Path to the input CSV file.
        output_path: Output CSV path.  Defaults to ``<stem>_geocoded.csv``
                     next to the input.
        config: A :class:`ConverterConfig`; defaults are used when omitted.
        gateway: Any :class:`GeocodingGateway`.  Defaults to
                 :class:`GsiGateway`.  HTTP gateways are opened and closed
                 around the run.
        on_progress: Called with the integer percentage after every row.
        verbose: Enable DEBUG-level logging.
    """

    def __init__(
        self,
        input_path: Path,
        output_path: Path | None = None,
        config: ConverterConfig | None = None,
        gateway: GeocodingGateway | None = None,
        *,
        on_progress: ProgressCallback | None = None,
        verbose: bool = False,
    ) -> None:
        input_path = Path(input_path)
        if output_path is None:
            output_path = input_path.with_name(output_filename(input_path.name))
        super().__init__(input_path, output_path, verbose=verbose)
        self.config: ConverterConfig = config or ConverterConfig()
        self.gateway: GeocodingGateway = gateway or GsiGateway()
        self.on_progress = on_progress

        # Populated by validate_inputs() / process()
        self.session: ProcessingSession | None = None
        self._result: PipelineResult | None = None
        self._export: ExportFile | None = None

    # ------------------------------------------------------------------
    # GeoTool abstract method implementations
    # ------------------------------------------------------------------

    def validate_inputs(self) -> None:
        """Validate the input file and configuration, then load the CSV.

        Raises:
            InputValidationError: If the file is missing, not a CSV, the
                coordinate format is unknown, or the file cannot be read.
            DecodeError: If the bytes are invalid for the chosen encoding.
            CsvParseError: If the CSV is malformed.
            ColumnNotFoundError: If an address column is not in the header.
            OutputWriteError: If the output directory cannot be created.
        """
        Validators.assert_file_exists(self.input_path)
        Validators.assert_supported_extension(self.input_path, [".csv"])
        Validators.assert_output_dir_writable(self.output_path)

        try:
            CoordinateFormat(self.config.coordinate_format)
        except ValueError as exc:
            raise InputValidationError(
                f"Unknown coordinate format '{self.config.coordinate_format}'. "
                f"Choose one of: {', '.join(f.value for f in CoordinateFormat)}"
            ) from exc

        try:
            data = self.input_path.read_bytes()
        except OSError as exc:
            raise InputValidationError(f"Cannot read '{self.input_path}': {exc}") from exc

        session = ProcessingSession(self.config.input_encoding)
        session.load_file(self.input_path.name, data)
        if self.config.address_columns:
            Validators.assert_columns_exist(session.columns, self.config.address_columns)
            session.select_columns(self.config.address_columns)
        self.session = session
        logger.debug("Inputs validated; address column(s): %s", session.selection)

    def process(self) -> None:
        """Geocode all rows and write the output CSV.

        Raises:
            PreconditionError: If no address column is selected or the
                gateway is not ready.
            NothingToExportError: If the file has no data rows.
            OutputWriteError: If writing the output file fails.
        """
        if self.session is None:
            raise InputValidationError("validate_inputs() must run before process().")

        self._result = asyncio.run(self._geocode(self.session))
        self._export = self.session.export(self.config.coordinate_format)
        self._export.write(self.output_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _geocode(self, session: ProcessingSession) -> PipelineResult:
        if isinstance(self.gateway, HttpGateway):
            async with self.gateway:
                return await session.run(self.gateway, self.on_progress)
        return await session.run(self.gateway, self.on_progress)

    def run_summary(self) -> str | None:
        return self._result.summary() if self._result is not None else None

    @property
    def result(self) -> PipelineResult | None:
        """The :class:`PipelineResult` from the last :meth:`run` call, or ``None``."""
        return self._result
