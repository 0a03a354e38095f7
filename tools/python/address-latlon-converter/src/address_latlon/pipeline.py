"""
Address LatLon Converter — Row Pipeline
========================================
Geocodes parsed CSV records one at a time, in file order, and enriches
each record with its outcome.

Per record::

    pending → building-address → geocoding → success | failure | skipped

* The address is the selected fields' values, in selection order, each
  stripped, empty ones dropped, joined with no separator.
* An empty address is ``skipped`` without calling the gateway.
* A ``None`` result or any exception from the gateway is a ``failure``
  with the fixed message ``"no result found"``; the detail is logged.
* A failing row never stops the run.

At most one gateway call is in flight: record *i + 1* starts only after
record *i* has been recorded.  After every record the integer progress
``round(100 * completed / total)`` is reported, ending at exactly 100.

A :class:`CancellationToken` aborts the run at the next suspension point,
including while a gateway call is pending; the pending call is cancelled
and :class:`~shared.python.exceptions.PipelineCancelledError` is raised.

Usage::

    pipeline = RowPipeline(gateway, ["prefecture", "street"], on_progress=print)
    result = await pipeline.run(table.records)
    print(result.summary())
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from shared.python.exceptions import NoAddressColumnsError, PipelineCancelledError

from address_latlon.csv_io import Record
from address_latlon.gateway import Coordinates, GeocodingGateway

logger = logging.getLogger("latlonkit.address_latlon.pipeline")

ProgressCallback = Callable[[int], None]

LATITUDE_FIELD = "latitude"
LONGITUDE_FIELD = "longitude"
STATUS_FIELD = "geocoding_status"
ERROR_FIELD = "error_message"

EMPTY_ADDRESS_MESSAGE = "address is empty"
NO_RESULT_MESSAGE = "no result found"


class GeocodingStatus(str, Enum):
    """Terminal outcome of one record."""

    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_address(record: Mapping[str, Any], columns: Sequence[str]) -> str:
    """Concatenate the stripped, non-empty values of *columns* from *record*."""
    parts = []
    for name in columns:
        value = record.get(name)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            parts.append(text)
    return "".join(parts)


def compute_progress(completed: int, total: int) -> int:
    """Return ``100 * completed / total`` rounded half up, as an int.

    Integer arithmetic keeps the result exact, so the last record always
    yields 100.
    """
    if total <= 0:
        return 100
    return (200 * completed + total) // (2 * total)


class CancellationToken:
    """One-shot cancellation flag shared between a run and its owner."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Block until :meth:`cancel` is called."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineResult:
    """Enriched records from one completed run.

    Attributes:
        records: One enriched record per input record, in input order.
    """

    records: list[Record] = field(default_factory=list)

    def count(self, status: GeocodingStatus) -> int:
        return sum(1 for r in self.records if r.get(STATUS_FIELD) == status.value)

    @property
    def success_count(self) -> int:
        return self.count(GeocodingStatus.SUCCESS)

    @property
    def failure_count(self) -> int:
        return self.count(GeocodingStatus.FAILURE)

    @property
    def skipped_count(self) -> int:
        return self.count(GeocodingStatus.SKIPPED)

    def summary(self) -> str:
        """Return a human-readable summary string for logging or display."""
        return (
            f"{len(self.records)} processed: "
            f"{self.success_count} succeeded, "
            f"{self.failure_count} failed, "
            f"{self.skipped_count} skipped"
        )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class RowPipeline:
    """Sequential geocoding of records through a :class:`GeocodingGateway`.

    Args:
        gateway: The geocoding capability to call for each address.
        address_columns: Ordered field names concatenated into the address.
        on_progress: Called with the integer percentage after every record.
        cancel_token: Optional token; cancelling it aborts the run.

    Raises:
        NoAddressColumnsError: If *address_columns* is empty.
    """

    def __init__(
        self,
        gateway: GeocodingGateway,
        address_columns: Sequence[str],
        *,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        if not address_columns:
            raise NoAddressColumnsError()
        self.gateway = gateway
        self.address_columns: list[str] = list(address_columns)
        self.on_progress = on_progress
        self.cancel_token = cancel_token

    async def run(self, records: Iterable[Mapping[str, Any]]) -> PipelineResult:
        """Geocode every record in order and return the enriched copies.

        The input records are never mutated.

        Raises:
            PipelineCancelledError: If the cancellation token fires.
        """
        rows = list(records)
        total = len(rows)
        logger.info(
            "Geocoding %d row(s) via %s using column(s): %s",
            total, self.gateway.name, " + ".join(self.address_columns),
        )

        enriched: list[Record] = []
        for index, record in enumerate(rows):
            self._check_cancelled(index, total)
            enriched.append(await self._process_record(record, index, total))
            self._report(compute_progress(index + 1, total))

        if total == 0:
            self._report(100)

        result = PipelineResult(records=enriched)
        logger.info("Geocoding complete: %s.", result.summary())
        return result

    # ------------------------------------------------------------------
    # Per-record state machine
    # ------------------------------------------------------------------

    async def _process_record(self, record: Mapping[str, Any], index: int, total: int) -> Record:
        address = build_address(record, self.address_columns)
        if not address:
            logger.debug("[%d/%d] skipped: empty address", index + 1, total)
            return _enrich(record, GeocodingStatus.SKIPPED, message=EMPTY_ADDRESS_MESSAGE)

        logger.debug("[%d/%d] geocoding: %s", index + 1, total, address)
        try:
            coords = await self._call_gateway(address, index, total)
        except PipelineCancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.warning("  ✗ %s — %s: %s", address, exc.__class__.__name__, exc)
            coords = None

        if coords is None:
            logger.debug("  ✗ %s — no result", address)
            return _enrich(record, GeocodingStatus.FAILURE, message=NO_RESULT_MESSAGE)

        logger.debug("  ✓ %s → (%.6f, %.6f)", address, coords.lat, coords.lng)
        return _enrich(record, GeocodingStatus.SUCCESS, coords=coords)

    async def _call_gateway(self, address: str, index: int, total: int) -> Coordinates | None:
        """Await one gateway call, abandoning it if the token is cancelled."""
        token = self.cancel_token
        if token is None:
            return await self.gateway.geocode(address)

        call = asyncio.ensure_future(self.gateway.geocode(address))
        watcher = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({call, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (watcher, call):
                if not task.done():
                    task.cancel()
            await asyncio.gather(watcher, call, return_exceptions=True)

        if call.cancelled():
            logger.info("Cancelled while geocoding row %d/%d.", index + 1, total)
            raise PipelineCancelledError(index, total)
        return call.result()

    def _check_cancelled(self, completed: int, total: int) -> None:
        if self.cancel_token is not None and self.cancel_token.cancelled:
            logger.info("Cancelled after %d/%d row(s).", completed, total)
            raise PipelineCancelledError(completed, total)

    def _report(self, percent: int) -> None:
        if self.on_progress is not None:
            self.on_progress(percent)


def _enrich(
    record: Mapping[str, Any],
    status: GeocodingStatus,
    *,
    coords: Coordinates | None = None,
    message: str | None = None,
) -> Record:
    """Return a copy of *record* carrying the outcome fields for *status*.

    Coordinates are present only on success and the error message only
    otherwise, even if the input already had fields with those names.
    """
    out: Record = dict(record)
    if status is GeocodingStatus.SUCCESS and coords is not None:
        out[LATITUDE_FIELD] = coords.lat
        out[LONGITUDE_FIELD] = coords.lng
        out[STATUS_FIELD] = status.value
        out.pop(ERROR_FIELD, None)
    else:
        out.pop(LATITUDE_FIELD, None)
        out.pop(LONGITUDE_FIELD, None)
        out[STATUS_FIELD] = status.value
        out[ERROR_FIELD] = message or NO_RESULT_MESSAGE
    return out
