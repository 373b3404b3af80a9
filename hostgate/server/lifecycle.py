"""Application lifecycle hooks for startup and shutdown."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hostgate.config.settings import get_settings
from hostgate.services.geo import GeoCache, create_provider

if TYPE_CHECKING:
    from litestar import Litestar


logger = logging.getLogger(__name__)


async def on_startup(app: "Litestar") -> None:
    """Create the geolocation provider and the shared lookup cache.

    - If the provider cannot be created (e.g. a missing MaxMind database),
      start in a degraded mode where access logs carry no location.
    """
    settings = get_settings()

    if not settings.files.directory.is_dir():
        logger.warning("Files directory %s does not exist", settings.files.directory)

    if not settings.geo.enabled:
        logger.info("Geolocation disabled via settings")
        return

    try:
        provider = create_provider(settings.geo)
    except Exception:
        logger.exception("Starting without geolocation: could not create %s provider", settings.geo.provider)
        return

    # Store in app state for the access log middleware and API access
    app.state.geo_cache = GeoCache(provider, max_entries=settings.geo.max_entries)
    logger.info("Started geo cache (max_entries=%d)", settings.geo.max_entries)


async def on_shutdown(app: "Litestar") -> None:
    """Release the geolocation provider's resources."""
    geo_cache: GeoCache | None = getattr(app.state, "geo_cache", None)
    if geo_cache:
        await geo_cache.aclose()
        logger.info("Closed geo cache (%s)", geo_cache.stats())
