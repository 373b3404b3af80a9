"""Tests for geolocation providers and client address resolution."""
from types import SimpleNamespace

import httpx
import pytest

from hostgate.config import GeoSettings
from hostgate.services.geo import (
    GeoCache,
    GeoEntry,
    IpInfoProvider,
    MaxMindProvider,
    UpstreamLookupFailed,
    create_provider,
    resolve_client_address,
)
from hostgate.services.geo import providers
from hostgate.services.geo.providers import is_public_address, parse_entry

PUBLIC_IP = "8.8.8.8"


def make_provider(handler, **kwargs) -> IpInfoProvider:
    """IpInfoProvider whose HTTP traffic goes to the given handler."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IpInfoProvider(client, "https://ipinfo.test/", **kwargs)


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("8.8.8.8", True),
        ("52.53.54.55", True),
        ("2607:f0d0:1002:51::4", True),
        ("10.10.10.1", False),
        ("192.168.1.20", False),
        ("127.0.0.1", False),
        ("::1", False),
        ("10.10.10.256", False),
        ("unknown", False),
        ("testclient", False),
    ],
)
def test_is_public_address(address: str, expected: bool) -> None:
    """Only public addresses are worth an external lookup."""
    assert is_public_address(address) is expected


@pytest.mark.asyncio
async def test_ipinfo_success() -> None:
    """A well formed response becomes a GeoEntry."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "ip": PUBLIC_IP,
                "city": "Mountain View",
                "region": "California",
                "country": "US",
                "org": "AS15169 Google LLC",
            },
        )

    provider = make_provider(handler, token="secret")
    entry = await provider.fetch(PUBLIC_IP)
    await provider.aclose()

    assert entry == GeoEntry(country="US", region="California", city="Mountain View")
    assert seen[0].url.host == "ipinfo.test"
    assert seen[0].url.path == f"/{PUBLIC_IP}"
    assert seen[0].url.params["token"] == "secret"


@pytest.mark.asyncio
async def test_ipinfo_without_token_sends_no_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"country": "SE"})

    provider = make_provider(handler)
    entry = await provider.fetch(PUBLIC_IP)

    assert entry == GeoEntry(country="SE")
    assert "token" not in seen[0].url.params


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(429, json={"error": "rate limited"}),
        httpx.Response(500, text="oops"),
        httpx.Response(302, headers={"location": "https://elsewhere.test/"}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["US", "California"]),
        httpx.Response(200, json={"ip": PUBLIC_IP, "bogon": True}),
        httpx.Response(200, json={"country": 1, "region": None}),
    ],
)
async def test_ipinfo_bad_responses_fail(response: httpx.Response) -> None:
    """Non-2xx statuses and malformed bodies are lookup failures."""
    provider = make_provider(lambda request: response)

    with pytest.raises(UpstreamLookupFailed):
        await provider.fetch(PUBLIC_IP)


@pytest.mark.asyncio
async def test_ipinfo_transport_error_fails() -> None:
    """Network errors and timeouts are lookup failures."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    provider = make_provider(handler)

    with pytest.raises(UpstreamLookupFailed, match="ConnectTimeout"):
        await provider.fetch(PUBLIC_IP)


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["10.0.0.1", "127.0.0.1", "unknown"])
async def test_ipinfo_skips_non_public_addresses(address: str) -> None:
    """Private and unparseable addresses fail without any HTTP request."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"country": "US"})

    provider = make_provider(handler)

    with pytest.raises(UpstreamLookupFailed, match="not a public address"):
        await provider.fetch(address)
    assert calls == []


@pytest.mark.asyncio
async def test_cache_does_not_retry_failed_http_lookup() -> None:
    """A failed HTTP lookup is cached and the second lookup makes no request."""
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    cache = GeoCache(make_provider(handler), max_entries=10)

    assert await cache.lookup(PUBLIC_IP) is None
    assert await cache.lookup(PUBLIC_IP) is None
    assert len(calls) == 1
    await cache.aclose()


def test_parse_entry_partial_fields() -> None:
    """Missing or empty fields become None."""
    assert parse_entry(PUBLIC_IP, {"country": "US", "city": ""}) == GeoEntry(country="US")


@pytest.mark.asyncio
async def test_maxmind_provider(monkeypatch) -> None:
    """The MaxMind backend maps country code, subdivision and city."""

    class FakeReader:
        def __init__(self, path, locales=None) -> None:
            self.locales = locales
            self.closed = False

        def city(self, address: str):
            if address == "1.1.1.1":
                raise ValueError("address not in database")
            return SimpleNamespace(
                country=SimpleNamespace(iso_code="NO"),
                subdivisions=SimpleNamespace(most_specific=SimpleNamespace(name="Oslo")),
                city=SimpleNamespace(name="Oslo"),
            )

        def close(self) -> None:
            self.closed = True

    monkeypatch.setattr(providers, "Reader", FakeReader)
    provider = MaxMindProvider("GeoLite2-City.mmdb", ["xx"])

    assert provider.reader.locales == ["en"]
    assert await provider.fetch(PUBLIC_IP) == GeoEntry(country="NO", region="Oslo", city="Oslo")
    with pytest.raises(UpstreamLookupFailed):
        await provider.fetch("1.1.1.1")
    await provider.aclose()
    assert provider.reader.closed is True


@pytest.mark.asyncio
async def test_create_provider_ipinfo() -> None:
    provider = create_provider(GeoSettings(provider="ipinfo", token="t", timeout=2.5))

    assert isinstance(provider, IpInfoProvider)
    assert provider.token == "t"
    assert provider.timeout == 2.5
    await provider.aclose()


def test_create_provider_maxmind_missing_database(tmp_path) -> None:
    """Opening a missing MaxMind database fails loudly at startup."""
    settings = GeoSettings(provider="maxmind", db_path=tmp_path / "missing.mmdb")

    with pytest.raises(OSError):
        create_provider(settings)


@pytest.mark.parametrize(
    ("headers", "client_host", "expected"),
    [
        ({"x-forwarded-for": "203.0.113.5, 10.0.0.1"}, "10.0.0.2", "203.0.113.5"),
        ({"x-forwarded-for": " 203.0.113.5 "}, None, "203.0.113.5"),
        ({"x-real-ip": "198.51.100.7"}, "10.0.0.2", "198.51.100.7"),
        ({}, "::ffff:192.0.2.1", "192.0.2.1"),
        ({}, "2001:db8::1", "2001:db8::1"),
        ({}, None, "unknown"),
        ({"x-forwarded-for": ""}, "", "unknown"),
    ],
)
def test_resolve_client_address(headers: dict[str, str], client_host: str | None, expected: str) -> None:
    """The first proxy hop wins, then X-Real-IP, then the socket peer."""
    assert resolve_client_address(headers, client_host) == expected
