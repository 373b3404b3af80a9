"""Central route registration."""
from litestar.static_files import create_static_files_router
from litestar.types import ControllerRouterHandler

from hostgate.api.hooks import gate_download
from hostgate.api.pages import landing_page, robots_txt
from hostgate.api.v1.settings import read_settings
from hostgate.api.v1.stats import stats
from hostgate.config.settings import Settings


def get_route_handlers(settings: Settings) -> list[ControllerRouterHandler]:
    """Get all route handlers for the application."""
    return [
        landing_page,
        robots_txt,
        create_static_files_router(
            path=settings.files.url_path,
            directories=[settings.files.directory],
            send_as_attachment=True,
            before_request=gate_download,
            name="files",
            include_in_schema=False,
        ),
        read_settings,
        stats,
    ]
