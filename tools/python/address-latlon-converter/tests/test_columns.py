"""
Tests — Column Selector
========================
"""

from __future__ import annotations

import pytest

from address_latlon.columns import ColumnSelector
from address_latlon.csv_io import CsvTable
from shared.python.exceptions import ColumnNotFoundError


def _selector(*fields: str) -> ColumnSelector:
    selector = ColumnSelector()
    selector.infer_columns(CsvTable(fields=list(fields)))
    return selector


class TestColumnSelector:
    def test_infer_seeds_first_column(self) -> None:
        selector = _selector("prefecture", "city", "street")
        assert selector.columns == ["prefecture", "city", "street"]
        assert selector.selection == ["prefecture"]

    def test_infer_without_fields(self) -> None:
        selector = _selector()
        assert selector.columns == []
        assert selector.selection == []

    def test_toggle_appends_in_toggle_order(self) -> None:
        selector = _selector("prefecture", "city", "street")
        assert selector.toggle("street") is True
        assert selector.toggle("city") is True
        assert selector.selection == ["prefecture", "street", "city"]

    def test_toggle_removes(self) -> None:
        selector = _selector("prefecture", "city")
        assert selector.toggle("prefecture") is False
        assert selector.selection == []
        assert not selector.is_selected("prefecture")

    def test_toggle_unknown_raises(self) -> None:
        selector = _selector("prefecture")
        with pytest.raises(ColumnNotFoundError):
            selector.toggle("zip")

    def test_reinfer_reseeds_selection(self) -> None:
        selector = _selector("a", "b", "c")
        selector.toggle("c")
        selector.infer_columns(CsvTable(fields=["x", "y"]))
        assert selector.selection == ["x"]

    def test_select_keeps_order_and_drops_repeats(self) -> None:
        selector = _selector("a", "b", "c")
        assert selector.select(["c", "a", "c"]) == ["c", "a"]
        assert selector.selection == ["c", "a"]

    def test_select_unknown_raises_and_keeps_selection(self) -> None:
        selector = _selector("a", "b")
        with pytest.raises(ColumnNotFoundError):
            selector.select(["b", "zzz"])
        assert selector.selection == ["a"]

    def test_properties_return_copies(self) -> None:
        selector = _selector("a", "b")
        selector.selection.append("b")
        assert selector.selection == ["a"]
