"""Stats API endpoint for geolocation cache statistics."""
from __future__ import annotations

from typing import Any

from litestar import get

from hostgate.services.gate import AccessGate
from hostgate.services.geo import GeoCache


@get("/stats")
async def stats(geo_cache: GeoCache | None, access_gate: AccessGate) -> dict[str, Any]:
    """Get geo cache statistics and the active download checks.

    Returns:
        Dictionary with cache statistics and gate configuration.
        Cache statistics are zeros if geolocation is not available (degraded mode).
    """
    gate = {
        "enable_referrer": access_gate.enable_referrer,
        "enable_user_agent": access_gate.enable_user_agent,
        "enable_browser_feature": access_gate.enable_browser_feature,
        "enable_js_check": access_gate.enable_js_check,
    }
    if geo_cache is None:
        return {
            "geo_cache": {
                "size": 0,
                "max_entries": 0,
                "hits": 0,
                "misses": 0,
                "evictions": 0,
                "failed_lookups": 0,
                "is_running": False,
            },
            "download_check": gate,
        }

    return {
        "geo_cache": {**geo_cache.stats(), "is_running": True},
        "download_check": gate,
    }
