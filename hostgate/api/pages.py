"""HTML pages: landing page, robots.txt and the JavaScript challenge."""
from __future__ import annotations

from datetime import datetime, timezone
from html import escape

from litestar import Request, get
from litestar.enums import MediaType

from hostgate.config.settings import get_settings
from hostgate.server.middleware import client_location
from hostgate.services.geo import GeoEntry, describe_location, resolve_client_address


CHALLENGE_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Browser check</title>
    <script>
      document.cookie = "{cookie_name}=true; path=/";
      window.location.reload();
    </script>
  </head>
  <body>
    <noscript>Please enable JavaScript to continue.</noscript>
    <p>Checking your browser...</p>
  </body>
</html>
"""

LANDING_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
      body {{ font-family: Arial, sans-serif; margin: 20px; }}
      .visitor-info {{ position: fixed; bottom: 10px; right: 10px; background: #f0f0f0;
                       padding: 10px; border-radius: 5px; font-size: 12px; }}
    </style>
  </head>
  <body>
    <h1>{title}</h1>
    <p><a href="{files_url}/">Browse files</a></p>
    <div class="visitor-info">
      <p>Visitor information:</p>
      <p>IP address: {address}</p>
      <p>Location: {location}</p>
      <p>Browser: {user_agent}</p>
      <p>Time: {time}</p>
    </div>
  </body>
</html>
"""


def render_challenge_page(cookie_name: str) -> str:
    """Page that sets the JavaScript proof cookie and reloads."""
    return CHALLENGE_PAGE.format(cookie_name=escape(cookie_name, quote=True))


@get("/", media_type=MediaType.HTML, include_in_schema=False)
async def landing_page(request: Request) -> str:
    """Landing page with a link to the files and the visitor's details."""
    settings = get_settings()
    address = resolve_client_address(
        request.headers,
        request.client.host if request.client else None,
    )
    entry: GeoEntry | None = await client_location(request.scope)

    return LANDING_PAGE.format(
        title=escape(settings.name),
        files_url=escape(settings.files.url_path.rstrip("/"), quote=True),
        address=escape(address),
        location=escape(describe_location(entry)),
        user_agent=escape(request.headers.get("user-agent", "-")),
        time=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
    )


@get("/robots.txt", media_type=MediaType.TEXT, include_in_schema=False)
async def robots_txt() -> str:
    """Disallow all crawling."""
    return "User-agent: *\nDisallow: /\n"
