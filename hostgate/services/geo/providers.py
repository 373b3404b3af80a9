"""Geolocation providers.

A provider resolves one client address to a GeoEntry. Every failure, from
network errors to unparseable bodies, is raised as UpstreamLookupFailed so
the cache can record it without knowing which backend is in use.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from geoip2.database import Reader
from IPy import IP

from .constants import ALLOWED_GEOIP_LOCALES, GEOIP_LOCALES_DEFAULT, MONITORED_IP_TYPES
from .schemas import GeoEntry

if TYPE_CHECKING:
    from hostgate.config.settings import GeoSettings


logger = logging.getLogger(__name__)


class UpstreamLookupFailed(Exception):
    """A geolocation lookup produced no usable data."""

    def __init__(self, address: str, detail: str) -> None:
        super().__init__(f"Geolocation lookup failed for {address}: {detail}")
        self.address = address
        self.detail = detail


class GeoProvider(Protocol):
    """Interface shared by all geolocation backends."""

    async def fetch(self, address: str) -> GeoEntry:
        ...

    async def aclose(self) -> None:
        ...


def get_ip_type(address: str) -> str:
    """Get the IPy type of the given address.

    If the address is invalid, return an empty string.
    """
    try:
        return IP(address).iptype()
    except (ValueError, TypeError):
        return ""


def is_public_address(address: str) -> bool:
    """Check that the address is routable on the public internet.

    IPy reports public IPv4 space as ``PUBLIC`` and public IPv6 space as
    ``GLOBAL-UNICAST`` or by its registry allocation, e.g. ``ALLOCATED ARIN``.
    """
    ip_type = get_ip_type(address)
    return ip_type in MONITORED_IP_TYPES or ip_type.startswith("ALLOCATED")


def ensure_public_address(address: str) -> None:
    """Raise UpstreamLookupFailed for addresses not worth looking up."""
    if not is_public_address(address):
        raise UpstreamLookupFailed(address, "not a public address")


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_entry(address: str, body: Any) -> GeoEntry:
    """Build a GeoEntry from an ipinfo-style JSON body."""
    if not isinstance(body, dict):
        raise UpstreamLookupFailed(address, "response body is not a JSON object")

    entry = GeoEntry(
        country=_optional_str(body.get("country")),
        region=_optional_str(body.get("region")),
        city=_optional_str(body.get("city")),
    )
    if not (entry.country or entry.region or entry.city):
        raise UpstreamLookupFailed(address, "response has no location fields")
    return entry


class IpInfoProvider:
    """Looks addresses up through an ipinfo-style HTTP API.

    Example:
        provider = IpInfoProvider(httpx.AsyncClient(), base_url="https://ipinfo.io")
        entry = await provider.fetch("8.8.8.8")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://ipinfo.io",
        *,
        token: str | None = None,
        timeout: float = 5.0,
    ) -> None:
        """Initialize the provider.

        Args:
            client: Shared HTTP client. The provider closes it in aclose().
            base_url: API root, the address is appended as a path segment.
            token: Optional API token sent as the ``token`` query parameter.
            timeout: Seconds before a lookup is abandoned.
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    async def fetch(self, address: str) -> GeoEntry:
        ensure_public_address(address)

        params = {"token": self.token} if self.token else None
        try:
            response = await self.client.get(
                f"{self.base_url}/{address}",
                params=params,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise UpstreamLookupFailed(address, f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise UpstreamLookupFailed(address, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamLookupFailed(address, "response body is not valid JSON") from e

        return parse_entry(address, body)

    async def aclose(self) -> None:
        await self.client.aclose()


class MaxMindProvider:
    """Looks addresses up in a local GeoIP2/GeoLite2 City database."""

    def __init__(self, db_path: Path | str, locales: list[str] | None = None) -> None:
        if any(loc not in ALLOWED_GEOIP_LOCALES for loc in locales or []):
            logger.warning(
                "Unmatched GeoIp2 locale found. Allowed are '%s', defaulting to 'en'",
                ALLOWED_GEOIP_LOCALES,
            )
            locales = GEOIP_LOCALES_DEFAULT
        self.db_path = db_path
        self.reader = Reader(db_path, locales=locales or GEOIP_LOCALES_DEFAULT)

    async def fetch(self, address: str) -> GeoEntry:
        ensure_public_address(address)

        try:
            ip_data = await asyncio.to_thread(self.reader.city, address)
        except Exception as e:
            raise UpstreamLookupFailed(address, f"{type(e).__name__}: {e}") from e

        entry = GeoEntry(
            country=ip_data.country.iso_code,
            region=ip_data.subdivisions.most_specific.name,
            city=ip_data.city.name,
        )
        if not (entry.country or entry.region or entry.city):
            raise UpstreamLookupFailed(address, "no location data in database")
        return entry

    async def aclose(self) -> None:
        self.reader.close()


def create_provider(settings: "GeoSettings") -> GeoProvider:
    """Create the provider selected by the geo settings."""
    if settings.provider == "maxmind":
        logger.info("Using MaxMind database at %s for geolocation", settings.db_path)
        return MaxMindProvider(settings.db_path, settings.locales)

    logger.info("Using %s for geolocation", settings.lookup_url)
    client = httpx.AsyncClient(
        timeout=settings.timeout,
        headers={"Accept": "application/json"},
    )
    return IpInfoProvider(
        client,
        settings.lookup_url,
        token=settings.token,
        timeout=settings.timeout,
    )
