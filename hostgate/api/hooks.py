"""Request hooks guarding the protected files router."""
from __future__ import annotations

import logging

from litestar import Request, Response
from litestar.enums import MediaType
from litestar.status_codes import HTTP_200_OK

from hostgate.api.dependencies import provide_access_gate
from hostgate.api.exceptions import DownloadDenied
from hostgate.api.pages import render_challenge_page
from hostgate.services.gate import AccessDecision, AccessGate
from hostgate.services.geo import resolve_client_address


logger = logging.getLogger(__name__)


async def gate_download(request: Request) -> Response[str] | None:
    """Run the download gate before a protected file is served.

    Returns None to let the file through, or a challenge page to make the
    client prove it runs JavaScript. Denials raise DownloadDenied (403).
    """
    gate: AccessGate = provide_access_gate(request.app.state)
    path = request.url.path
    decision: AccessDecision = gate.evaluate(path, request.headers, request.cookies)

    if decision.is_allowed:
        return None

    address = resolve_client_address(
        request.headers,
        request.client.host if request.client else None,
    )

    if decision.is_denied and decision.reason is not None:
        logger.warning(
            'Denied download of %s to %s (%s) "%s"',
            path,
            address,
            decision.reason.value,
            request.headers.get("user-agent", "-"),
        )
        raise DownloadDenied(decision.reason)

    logger.info("Challenging %s for %s", address, path)
    return Response(
        content=render_challenge_page(gate.js_cookie_name),
        media_type=MediaType.HTML,
        status_code=HTTP_200_OK,
        headers={"Cache-Control": "no-store"},
    )
