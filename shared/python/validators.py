"""
LatLonKit — Shared Input Validators
====================================
Static utility methods used across every LatLonKit Python tool to
validate common preconditions before processing begins.

All methods raise an appropriate exception from
:mod:`shared.python.exceptions` rather than returning booleans — this
makes ``validate_inputs`` implementations in each tool simple and
readable::

    class MyTool(GeoTool):
        def validate_inputs(self) -> None:
            Validators.assert_file_exists(self.input_path)
            Validators.assert_supported_extension(self.input_path, [".csv"])
            Validators.assert_columns_exist(table.fields, ["address"])
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from shared.python.exceptions import (
    ColumnNotFoundError,
    InputValidationError,
    OutputWriteError,
)


class Validators:
    """Collection of static precondition checks shared across all tools.

    All methods are ``@staticmethod`` — this class is never instantiated.
    It exists purely as a logical namespace.
    """

    # ------------------------------------------------------------------
    # File-system checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_file_exists(path: Path) -> None:
        """Assert that *path* points to an existing regular file.

        Args:
            path: Path object to check.

        Raises:
            InputValidationError: If *path* does not exist or is a
                directory rather than a file.

        Example::

            Validators.assert_file_exists(Path("data/addresses.csv"))
        """
        path = Path(path)
        if not path.exists():
            raise InputValidationError(
                f"Input file not found: '{path}'. "
                "Check that the path is correct and the file exists."
            )
        if path.is_dir():
            raise InputValidationError(
                f"Expected a file but got a directory: '{path}'."
            )

    @staticmethod
    def assert_output_dir_writable(output_path: Path) -> None:
        """Assert that the parent directory of *output_path* is writable.

        Creates the parent directory (and any missing parents) if it does
        not yet exist, so authors never have to pre-create output dirs.

        Args:
            output_path: Intended output file path.  The parent directory
                         is created if absent.

        Raises:
            OutputWriteError: If the parent directory cannot be created
                or is not writable.
        """
        parent = Path(output_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputWriteError(str(output_path), str(exc)) from exc

    @staticmethod
    def assert_supported_extension(path: Path, extensions: Sequence[str]) -> None:
        """Assert that *path* has one of the allowed file extensions.

        Args:
            path: File path to check.
            extensions: Sequence of allowed extensions, each starting with
                        a dot (e.g. ``[".csv"]``).

        Raises:
            InputValidationError: If the file extension is not in
                *extensions*.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        allowed = [ext.lower() for ext in extensions]
        if suffix not in allowed:
            raise InputValidationError(
                f"Unsupported file extension '{suffix}' for '{path.name}'. "
                f"Accepted extensions: {', '.join(allowed)}"
            )

    # ------------------------------------------------------------------
    # Tabular data checks
    # ------------------------------------------------------------------

    @staticmethod
    def assert_columns_exist(
        available_columns: Sequence[str],
        required_columns: Sequence[str],
    ) -> None:
        """Assert that all *required_columns* are present in *available_columns*.

        Args:
            available_columns: Field names parsed from the CSV header.
            required_columns: List of column names that must be present.

        Raises:
            ColumnNotFoundError: On the first missing column found.

        Example::

            Validators.assert_columns_exist(table.fields, ["prefecture", "street"])
        """
        available = list(available_columns)
        for col in required_columns:
            if col not in available:
                raise ColumnNotFoundError(col, available)
