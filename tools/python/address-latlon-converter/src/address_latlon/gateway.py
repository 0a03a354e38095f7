"""
Address LatLon Converter — Geocoding Gateways
==============================================
The asynchronous address → coordinates capability consumed by the row
pipeline, plus the concrete providers that implement it.

Architecture:
    ``GeocodingGateway`` is an abstract strategy — swap providers without
    changing the :class:`~address_latlon.pipeline.RowPipeline`.  A gateway
    resolves to :class:`Coordinates` or ``None``; raising is allowed and is
    treated by the pipeline exactly like ``None``.

Classes:
    Coordinates         Immutable WGS84 latitude/longitude pair.
    GeocodingGateway    Abstract base for geocoding providers.
    CallableGateway     Adapts a plain ``async def`` function.
    HttpGateway         Base for ``requests``-backed web APIs.
    GsiGateway          GSI (Geospatial Information Authority of Japan)
                        address search, no API key required.
    NominatimGateway    Free OSM-powered geocoder (no API key required).

Usage::

    from address_latlon.gateway import GsiGateway

    async with GsiGateway(user_agent="my-app/1.0") as gateway:
        coords = await gateway.geocode("東京都千代田区千代田1-1")
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import requests

from shared.python.exceptions import (
    GatewayNotReadyError,
    GeocodingError,
    GeocodingRateLimitError,
)

logger = logging.getLogger("latlonkit.address_latlon.gateway")

DEFAULT_USER_AGENT = "latlonkit-address-converter/1.0"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 coordinate pair in decimal degrees.

    Attributes:
        lat: Latitude.
        lng: Longitude.
    """

    lat: float
    lng: float


# ---------------------------------------------------------------------------
# Gateway contract
# ---------------------------------------------------------------------------


class GeocodingGateway(ABC):
    """Abstract asynchronous geocoding capability.

    Subclass this and implement :meth:`geocode` to add a new provider.
    Gateways that need start-up work report it through :attr:`is_ready`;
    the session refuses to start a run until it is ``True``.
    """

    name: str = "geocoder"

    @property
    def is_ready(self) -> bool:
        """``True`` once the gateway can accept :meth:`geocode` calls."""
        return True

    @abstractmethod
    async def geocode(self, address: str) -> Coordinates | None:
        """Geocode a single, non-empty address string.

        Args:
            address: The full address to geocode.

        Returns:
            :class:`Coordinates` for the best match, or ``None`` when the
            provider has no usable result.

        Raises:
            GeocodingError: Any provider failure.  Callers treat a raise
                the same way as a ``None`` result.
        """


class CallableGateway(GeocodingGateway):
    """Wrap an ``async`` function value as a :class:`GeocodingGateway`.

    Args:
        fn: Coroutine function taking an address and returning
            :class:`Coordinates` or ``None``.
        name: Display name used in log and error messages.
        ready: Initial readiness; flip with :meth:`mark_ready`.
    """

    def __init__(
        self,
        fn: Callable[[str], Awaitable[Coordinates | None]],
        *,
        name: str = "callable",
        ready: bool = True,
    ) -> None:
        self._fn = fn
        self.name = name
        self._ready = ready

    @property
    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self, ready: bool = True) -> None:
        self._ready = ready

    async def geocode(self, address: str) -> Coordinates | None:
        return await self._fn(address)


# ---------------------------------------------------------------------------
# HTTP providers
# ---------------------------------------------------------------------------


class HttpGateway(GeocodingGateway):
    """Base class for providers reached over HTTP with :mod:`requests`.

    The gateway is not ready until :meth:`open` (or ``async with``) has
    created its HTTP session.  Each :meth:`geocode` call waits
    ``rate_limit_seconds`` first, then runs the blocking request in a
    worker thread so the event loop stays responsive.

    Args:
        user_agent: Identifies your application to the provider.
        rate_limit_seconds: Seconds to wait before every request.
        timeout: HTTP request timeout in seconds.
    """

    base_url: str = ""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limit_seconds: float = 0.5,
        timeout: int = 10,
    ) -> None:
        self.user_agent = user_agent
        self.rate_limit_seconds = rate_limit_seconds
        self.timeout = timeout
        self._session: requests.Session | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Create the HTTP session; the gateway is ready afterwards."""
        if self._session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.user_agent
            self._session = session
            logger.debug("%s gateway opened.", self.name)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug("%s gateway closed.", self.name)

    async def __aenter__(self) -> "HttpGateway":
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_ready(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------------
    # Geocoding
    # ------------------------------------------------------------------

    async def geocode(self, address: str) -> Coordinates | None:
        """Geocode *address* with one HTTP request.

        Raises:
            GatewayNotReadyError: If :meth:`open` has not been called.
            GeocodingRateLimitError: On HTTP 429.
            GeocodingError: On any other HTTP error or an unreadable body.
            requests.RequestException: On connection errors and timeouts.
        """
        session = self._session
        if session is None:
            raise GatewayNotReadyError(self.name)

        if self.rate_limit_seconds > 0:
            await asyncio.sleep(self.rate_limit_seconds)

        response = await asyncio.to_thread(
            session.get,
            self.base_url,
            params=self._build_params(address),
            timeout=self.timeout,
        )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise GeocodingRateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if not response.ok:
            raise GeocodingError(f"{self.name} returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocodingError(f"{self.name} returned a non-JSON body") from exc

        try:
            return self._parse(payload)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise GeocodingError(f"Unexpected {self.name} response: {exc}") from exc

    @abstractmethod
    def _build_params(self, address: str) -> dict[str, Any]:
        """Return the query-string parameters for *address*."""

    @abstractmethod
    def _parse(self, payload: Any) -> Coordinates | None:
        """Extract the best :class:`Coordinates` from a decoded JSON body."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(ready={self.is_ready}, rate_limit={self.rate_limit_seconds})"


class GsiGateway(HttpGateway):
    """Geocoder backed by the GSI address search API (Japan only).

    **Free to use** — no API key required.  Responses are a list of
    GeoJSON-like features whose ``geometry.coordinates`` is
    ``[longitude, latitude]``; the first feature is the best match.

    Reference:
        https://msearch.gsi.go.jp/address-search/AddressSearch?q=
    """

    name = "GSI"
    base_url = "https://msearch.gsi.go.jp/address-search/AddressSearch"

    def _build_params(self, address: str) -> dict[str, Any]:
        return {"q": address}

    def _parse(self, payload: Any) -> Coordinates | None:
        if not payload:
            return None
        lon, lat = payload[0]["geometry"]["coordinates"][:2]
        return Coordinates(lat=float(lat), lng=float(lon))


class NominatimGateway(HttpGateway):
    """Geocoder backed by OpenStreetMap's Nominatim API.

    Must comply with the Nominatim Usage Policy: include a descriptive
    ``user_agent`` and do not exceed 1 request/second.

    Reference:
        https://nominatim.org/release-docs/develop/api/Search/
    """

    name = "Nominatim"
    base_url = "https://nominatim.openstreetmap.org/search"

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        rate_limit_seconds: float = 1.1,
        timeout: int = 10,
    ) -> None:
        super().__init__(user_agent, rate_limit_seconds, timeout)

    def _build_params(self, address: str) -> dict[str, Any]:
        return {"q": address, "format": "json", "limit": 1}

    def _parse(self, payload: Any) -> Coordinates | None:
        if not payload:
            return None
        hit = payload[0]
        return Coordinates(lat=float(hit["lat"]), lng=float(hit["lon"]))


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

GATEWAY_BACKENDS: dict[str, type[HttpGateway]] = {
    "gsi": GsiGateway,
    "nominatim": NominatimGateway,
}


def create_gateway(
    backend: str = "gsi",
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    rate_limit_seconds: float | None = None,
    timeout: int = 10,
) -> HttpGateway:
    """Build an (unopened) HTTP gateway by backend name.

    Args:
        backend: One of :data:`GATEWAY_BACKENDS` (case-insensitive).
        user_agent: User-Agent header sent with each request.
        rate_limit_seconds: Delay before each request; the provider's
            default is used when ``None``.
        timeout: HTTP timeout in seconds.

    Raises:
        ValueError: If *backend* is unknown.
    """
    try:
        cls = GATEWAY_BACKENDS[backend.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown geocoding backend '{backend}'. "
            f"Choose one of: {', '.join(GATEWAY_BACKENDS)}"
        ) from None
    gateway = cls(user_agent=user_agent, timeout=timeout)
    if rate_limit_seconds is not None:
        gateway.rate_limit_seconds = rate_limit_seconds
    return gateway
