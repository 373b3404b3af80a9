"""Application factory for creating Litestar app instance."""

from __future__ import annotations


from litestar import Litestar
from litestar.datastructures import State
from litestar.di import Provide
from litestar.openapi import OpenAPIConfig

from hostgate.api.dependencies import provide_access_gate, provide_geo_cache
from hostgate.api.exceptions import DownloadDenied, download_denied_handler
from hostgate.config.settings import get_settings
from hostgate.server import plugins
from hostgate.server.lifecycle import on_startup, on_shutdown
from hostgate.server.middleware import access_log_middleware_factory
from hostgate.server.routes import get_route_handlers
from hostgate.services.gate import AccessGate


def create_app() -> Litestar:
    """Create and configure the Litestar application.

    This factory function loads configuration and initializes the app
    with the download gate, the geolocation access log, OpenAPI and
    dependency injection.

    Returns:
        Litestar: Configured application instance
    """
    # Load settings once at app creation
    settings = get_settings()

    openapi_config = OpenAPIConfig(
        title=settings.name,
        version=settings.version,
        description=settings.description,
    )

    app = Litestar(
        debug=settings.debug,
        route_handlers=get_route_handlers(settings),
        on_startup=[on_startup],
        on_shutdown=[on_shutdown],
        state=State({"access_gate": AccessGate(settings.download_check)}),
        dependencies={
            "access_gate": Provide(provide_access_gate, sync_to_thread=False),
            "geo_cache": Provide(provide_geo_cache, sync_to_thread=False),
        },
        logging_config=plugins.create_logging_config(settings),
        openapi_config=openapi_config,
        compression_config=plugins.create_compression_config(settings),
        exception_handlers={DownloadDenied: download_denied_handler},
    )
    # Wrap the whole handler, not the route stacks, so unmatched paths are logged too
    app.asgi_handler = access_log_middleware_factory(app.asgi_handler)

    return app
