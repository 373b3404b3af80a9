"""Access log middleware with geolocation enrichment."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from litestar import Request

from hostgate.services.geo import describe_location, resolve_client_address

if TYPE_CHECKING:
    from litestar.types import ASGIApp, Message, Receive, Scope, Send

    from hostgate.services.geo import GeoCache, GeoEntry


logger = logging.getLogger(__name__)

# Scope state key holding the in-flight location lookup of the current request.
GEO_LOOKUP_STATE_KEY = "geo_lookup"


async def client_location(scope: "Scope") -> "GeoEntry | None":
    """Return the location resolved for the current request's client.

    Awaits the lookup the access log middleware started, so handlers never
    trigger a second lookup for the same request.
    """
    lookup: asyncio.Task[GeoEntry | None] | None = scope.get("state", {}).get(GEO_LOOKUP_STATE_KEY)
    if lookup is None:
        return None
    return await lookup


def access_log_middleware_factory(app: "ASGIApp") -> "ASGIApp":
    """Log one line per HTTP request with the client's location.

    Wraps the application's whole ASGI handler, so requests matching no
    route are logged as well. The location lookup is started before the
    request is handled and only awaited once the response is out, so a slow
    lookup delays the log line but never the response or the download gate.
    """

    async def middleware(scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        request: Request = Request(scope)
        address = resolve_client_address(
            request.headers,
            request.client.host if request.client else None,
        )
        geo_cache: GeoCache | None = getattr(scope["app"].state, "geo_cache", None)
        lookup: asyncio.Task[GeoEntry | None] | None = None
        if geo_cache is not None:
            lookup = asyncio.create_task(geo_cache.lookup(address), name=f"geo-lookup-{address}")
            scope.setdefault("state", {})[GEO_LOOKUP_STATE_KEY] = lookup
        status_code = 500

        async def send_wrapper(message: "Message") -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            entry: GeoEntry | None = await lookup if lookup is not None else None
            logger.info(
                '%s %s %s %s "%s" Status: %d',
                address,
                describe_location(entry),
                scope.get("method", "-"),
                scope.get("path", "-"),
                request.headers.get("user-agent", "-"),
                status_code,
            )

    return middleware
