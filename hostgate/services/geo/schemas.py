"""Schemas for geolocation data - pure data, no I/O."""
from __future__ import annotations

from dataclasses import dataclass, field

from .constants import UNKNOWN_LOCATION


@dataclass(frozen=True)
class GeoEntry:
    """Location of a client address as reported by a geolocation provider.

    A failed or empty lookup is represented by ``None`` instead of a GeoEntry.
    """

    country: str | None = field(default=None)
    region: str | None = field(default=None)
    city: str | None = field(default=None)

    def display(self) -> str:
        """Space separated country, region and city, skipping missing parts."""
        return " ".join(part for part in (self.country, self.region, self.city) if part)


def describe_location(entry: GeoEntry | None) -> str:
    """Human readable location for logs and pages."""
    if entry is None:
        return UNKNOWN_LOCATION
    return entry.display() or UNKNOWN_LOCATION


@dataclass
class CacheSlot:
    """A cached lookup result and when it was last used."""

    entry: GeoEntry | None
    last_access: float
