"""Shared fixtures for the Address LatLon Converter tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from address_latlon.gateway import Coordinates, GeocodingGateway


class FakeGateway(GeocodingGateway):
    """In-memory gateway that records calls and concurrency.

    ``results`` maps an address to :class:`Coordinates`, ``None`` or an
    exception instance to raise.  Unknown addresses resolve to ``None``.
    """

    name = "fake"

    def __init__(self, results=None, *, ready: bool = True, delay: float = 0.0) -> None:
        self.results = dict(results or {})
        self.ready = ready
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def is_ready(self) -> bool:
        return self.ready

    async def geocode(self, address: str) -> Coordinates | None:
        self.calls.append(address)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            outcome = self.results.get(address)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


@pytest.fixture()
def fake_gateway():
    """Return the :class:`FakeGateway` class so tests can build their own."""
    return FakeGateway


@pytest.fixture()
def shops_csv(tmp_path: Path) -> Path:
    """Write a small UTF-8 CSV with prefecture, street and name columns."""
    path = tmp_path / "shops.csv"
    path.write_text(
        "name,prefecture,street\n"
        "Palace,東京都,千代田区千代田1-1\n"
        "Castle,大阪府,大阪市中央区大阪城1-1\n"
        "Unknown,,\n",
        encoding="utf-8",
    )
    return path
