"""
Address LatLon Converter — Column Selector
===========================================
Tracks the field names available in the loaded CSV and the ordered set of
fields the user has designated as address components.

Selection order is toggle order, not header order: selecting ``city`` and
then ``prefecture`` concatenates ``city`` first.
"""

from __future__ import annotations

from typing import Iterable

from shared.python.exceptions import ColumnNotFoundError

from address_latlon.csv_io import CsvTable


class ColumnSelector:
    """Available columns plus the ordered address-column selection."""

    def __init__(self) -> None:
        self._columns: list[str] = []
        self._selection: list[str] = []

    def infer_columns(self, table: CsvTable) -> list[str]:
        """Take the column names from *table* and re-seed the selection.

        The selection always restarts as ``[first column]`` (or empty when
        the header has no fields), whatever was selected before.
        """
        self._columns = list(table.fields)
        self._selection = self._columns[:1]
        return list(self._columns)

    def reset(self) -> None:
        self._columns = []
        self._selection = []

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def selection(self) -> list[str]:
        return list(self._selection)

    def is_selected(self, name: str) -> bool:
        return name in self._selection

    def toggle(self, name: str) -> bool:
        """Add *name* to the end of the selection, or remove it if present.

        Returns:
            ``True`` if *name* is selected after the call.

        Raises:
            ColumnNotFoundError: If *name* is not one of :attr:`columns`.
        """
        if name not in self._columns:
            raise ColumnNotFoundError(name, self.columns)
        if name in self._selection:
            self._selection.remove(name)
            return False
        self._selection.append(name)
        return True

    def select(self, names: Iterable[str]) -> list[str]:
        """Replace the selection with *names*, keeping their order.

        Repeated names are kept once, at their first position.

        Raises:
            ColumnNotFoundError: If any name is not one of :attr:`columns`.
        """
        chosen: list[str] = []
        for name in names:
            if name not in self._columns:
                raise ColumnNotFoundError(name, self.columns)
            if name not in chosen:
                chosen.append(name)
        self._selection = chosen
        return list(chosen)

    def __repr__(self) -> str:
        return f"ColumnSelector(columns={self._columns!r}, selection={self._selection!r})"
