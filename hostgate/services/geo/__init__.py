"""Geolocation module - address lookups and the shared lookup cache."""
from .cache import GeoCache
from .providers import (
    GeoProvider,
    IpInfoProvider,
    MaxMindProvider,
    UpstreamLookupFailed,
    create_provider,
)
from .schemas import GeoEntry, describe_location
from .utils import resolve_client_address

__all__ = [
    "GeoCache",
    "GeoEntry",
    "GeoProvider",
    "IpInfoProvider",
    "MaxMindProvider",
    "UpstreamLookupFailed",
    "create_provider",
    "describe_location",
    "resolve_client_address",
]
