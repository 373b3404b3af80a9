"""Shared dependency providers for API layer."""
from __future__ import annotations

from litestar import Request
from litestar.datastructures import State

from hostgate.services.gate import AccessGate
from hostgate.services.geo import GeoCache


def provide_access_gate(state: State) -> AccessGate:
    """Provide the AccessGate built at app creation."""
    return state.access_gate


def provide_geo_cache(request: Request) -> GeoCache | None:
    """Provide the GeoCache from app state.

    Returns None if geolocation is disabled or unavailable (degraded mode).
    """
    return getattr(request.app.state, "geo_cache", None)
